"""Custom metrics for the menu builder service."""

from opentelemetry import metrics

# Get meter for menu builder service
meter = metrics.get_meter("menu-builder-svc")

ownership_denied_counter = meter.create_counter(
    name="ownership_denied_total",
    description="Total number of failed ownership checks by resource kind",
    unit="1",
)

reorder_batch_counter = meter.create_counter(
    name="reorder_batches_total",
    description="Total number of reorder batches by resource kind and outcome",
    unit="1",
)

reorder_entries_histogram = meter.create_histogram(
    name="reorder_batch_size",
    description="Number of entries in reorder batches",
    unit="1",
)

resource_created_counter = meter.create_counter(
    name="resources_created_total",
    description="Total number of businesses, categories and items created",
    unit="1",
)

public_menu_view_counter = meter.create_counter(
    name="public_menu_views_total",
    description="Total number of public menu lookups by outcome",
    unit="1",
)


def record_ownership_denied(resource_kind: str) -> None:
    """Record a failed ownership check.

    Args:
        resource_kind: Kind of resource that was checked ("business", "category", "item")
    """
    ownership_denied_counter.add(1, {"resource_kind": resource_kind})


def record_reorder(resource_kind: str, entry_count: int, success: bool) -> None:
    """Record a reorder batch.

    Args:
        resource_kind: Kind of resource reordered
        entry_count: Number of entries in the batch
        success: Whether every entry was written
    """
    reorder_batch_counter.add(1, {"resource_kind": resource_kind, "success": success})
    reorder_entries_histogram.record(entry_count, {"resource_kind": resource_kind})


def record_resource_created(resource_kind: str) -> None:
    """Record a newly created resource."""
    resource_created_counter.add(1, {"resource_kind": resource_kind})


def record_public_menu_view(found: bool) -> None:
    """Record a public menu lookup.

    Args:
        found: Whether a published menu was returned
    """
    public_menu_view_counter.add(1, {"found": found})
