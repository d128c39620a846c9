"""DynamoDB repository classes for businesses, categories and items.

Lookups return None (or an empty list) when a record does not exist. Failed
DynamoDB calls are logged and re-raised as PersistenceError so the request
boundary can report a generic failure. Nothing is retried here.

DynamoDB has no foreign keys, so deletes cascade explicitly:
business -> categories -> items.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from menu_builder_service.exceptions.menu_exceptions import PersistenceError
from menu_builder_service.models.menu_models import Business, Category, Item
from menu_builder_service.models.request_models import ReorderEntry

logger = logging.getLogger(__name__)

# DynamoDB rejects transactions with more than 100 actions
MAX_TRANSACTION_ITEMS = 100

ModelT = TypeVar("ModelT", Category, Item)


def query_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Run a query and follow LastEvaluatedKey until every page is read.

    Args:
        table: DynamoDB table to query
        **kwargs: Arguments passed through to Table.query

    Returns:
        list: All raw items across pages
    """
    response = table.query(**kwargs)
    items = list(response.get("Items", []))

    while "LastEvaluatedKey" in response:
        response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


def build_update_arguments(updates: dict[str, Any]) -> dict[str, Any]:
    """Build update_item arguments for a partial merge.

    None values remove the attribute. updated_at is always refreshed, so an
    empty patch only touches the timestamp.

    Args:
        updates: Attribute names mapped to their new values

    Returns:
        dict: UpdateExpression, ExpressionAttributeNames and ExpressionAttributeValues
    """
    set_clauses = ["#updated_at = :updated_at"]
    remove_clauses: list[str] = []
    names = {"#updated_at": "updated_at"}
    values: dict[str, Any] = {":updated_at": datetime.now(UTC).isoformat()}

    for index, (attribute, value) in enumerate(sorted(updates.items())):
        if attribute in ("id", "updated_at"):
            continue

        name_key = f"#f{index}"
        names[name_key] = attribute

        if value is None:
            remove_clauses.append(name_key)
        else:
            value_key = f":v{index}"
            values[value_key] = value
            set_clauses.append(f"{name_key} = {value_key}")

    expression = "SET " + ", ".join(set_clauses)
    if remove_clauses:
        expression += " REMOVE " + ", ".join(remove_clauses)

    return {
        "UpdateExpression": expression,
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
    }


def is_conditional_check_failure(error: ClientError) -> bool:
    """Check whether a ClientError came from a failed condition expression.

    A cancelled transaction only counts when every failed action reports
    ConditionalCheckFailed. Any other cancellation reason is a persistence
    failure.
    """
    code = error.response.get("Error", {}).get("Code", "")
    if code == "ConditionalCheckFailedException":
        return True
    if code != "TransactionCanceledException":
        return False

    reasons = [
        reason.get("Code", "None") for reason in error.response.get("CancellationReasons", [])
    ]
    failures = [reason for reason in reasons if reason != "None"]
    return bool(failures) and all(reason == "ConditionalCheckFailed" for reason in failures)


class BusinessRepository:
    """Repository for business CRUD operations.

    Businesses are keyed by id with secondary indexes on owner_id and slug.
    """

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        category_repository: "CategoryRepository",
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
            category_repository: Repository used to cascade deletes to categories
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.category_repository = category_repository

    def create_business(self, business: Business) -> Business:
        """Insert a new business.

        Args:
            business: Business to insert

        Returns:
            Business: The stored business

        Raises:
            PersistenceError: If the write fails or the id already exists
        """
        try:
            self.table.put_item(
                Item=business.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(id)",
            )
            return business

        except ClientError as e:
            logger.error(f"Failed to create business: {e}")
            raise PersistenceError("create_business") from e

    def get_business(self, business_id: str) -> Business | None:
        """Retrieve a business by id.

        Args:
            business_id: Business identifier

        Returns:
            Business if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": business_id})

        except ClientError as e:
            logger.error(f"Failed to get business {business_id}: {e}")
            raise PersistenceError("get_business") from e

        if "Item" not in response:
            return None

        return Business.from_dynamodb_item(response["Item"])

    def get_business_for_owner(self, business_id: str, owner_id: str) -> Business | None:
        """Retrieve a business only if it belongs to the given owner.

        Args:
            business_id: Business identifier
            owner_id: Principal expected to own the business

        Returns:
            Business if found and owned by owner_id, None otherwise
        """
        business = self.get_business(business_id)
        if business is None or business.owner_id != owner_id:
            return None
        return business

    def get_business_by_slug(self, slug: str, published_only: bool = False) -> Business | None:
        """Retrieve a business by its slug.

        Args:
            slug: URL slug
            published_only: Only match businesses that are active and published

        Returns:
            Business if found, None otherwise
        """
        query_args: dict[str, Any] = {
            "IndexName": "slug-index",
            "KeyConditionExpression": Key("slug").eq(slug),
        }
        if published_only:
            query_args["FilterExpression"] = Attr("is_active").eq(True) & Attr(
                "is_published"
            ).eq(True)

        try:
            items = query_all(self.table, **query_args)

        except ClientError as e:
            logger.error(f"Failed to get business by slug {slug}: {e}")
            raise PersistenceError("get_business_by_slug") from e

        if not items:
            return None

        return Business.from_dynamodb_item(items[0])

    def slug_exists(self, slug: str) -> bool:
        """Check whether a slug is already taken."""
        return self.get_business_by_slug(slug) is not None

    def list_businesses_for_owner(self, owner_id: str) -> list[Business]:
        """List businesses owned by a principal, newest first.

        Args:
            owner_id: Principal identifier

        Returns:
            list: Businesses (empty list if none found)
        """
        try:
            items = query_all(
                self.table,
                IndexName="owner_id-index",
                KeyConditionExpression=Key("owner_id").eq(owner_id),
            )

        except ClientError as e:
            logger.error(f"Failed to list businesses for owner {owner_id}: {e}")
            raise PersistenceError("list_businesses_for_owner") from e

        businesses = [Business.from_dynamodb_item(item) for item in items]
        return sorted(businesses, key=lambda b: b.created_at, reverse=True)

    def list_businesses(self) -> list[Business]:
        """List every business. Only used behind the admin boundary.

        Returns:
            list: All businesses, newest first
        """
        try:
            response = self.table.scan()
            items = list(response.get("Items", []))
            while "LastEvaluatedKey" in response:
                response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
                items.extend(response.get("Items", []))

        except ClientError as e:
            logger.error(f"Failed to list businesses: {e}")
            raise PersistenceError("list_businesses") from e

        businesses = [Business.from_dynamodb_item(item) for item in items]
        return sorted(businesses, key=lambda b: b.created_at, reverse=True)

    def update_business(self, business_id: str, updates: dict[str, Any]) -> Business | None:
        """Merge attributes into an existing business.

        Args:
            business_id: Business identifier
            updates: Attributes to set (None removes the attribute)

        Returns:
            Updated Business, or None if it no longer exists
        """
        try:
            response = self.table.update_item(
                Key={"id": business_id},
                ConditionExpression="attribute_exists(id)",
                ReturnValues="ALL_NEW",
                **build_update_arguments(updates),
            )

        except ClientError as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update business {business_id}: {e}")
            raise PersistenceError("update_business") from e

        return Business.from_dynamodb_item(response["Attributes"])

    def delete_business(self, business_id: str) -> bool:
        """Delete a business together with its categories and items.

        Args:
            business_id: Business identifier

        Returns:
            bool: True once the business is removed
        """
        removed = self.category_repository.delete_categories_for_business(business_id)
        logger.info(f"Removed {removed} categories for business {business_id}")

        try:
            self.table.delete_item(Key={"id": business_id})
            return True

        except ClientError as e:
            logger.error(f"Failed to delete business {business_id}: {e}")
            raise PersistenceError("delete_business") from e


class SiblingRepository(Generic[ModelT]):
    """Shared operations for records ordered by sort_order within a parent scope.

    Subclasses set the model class, the scope attribute (the parent foreign key)
    and the index that is partitioned by scope and sorted by sort_order.
    """

    model: type[ModelT]
    scope_attribute: str
    scope_index: str
    resource_name: str

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.serializer = TypeSerializer()

    def _create(self, record: ModelT) -> ModelT:
        try:
            self.table.put_item(
                Item=record.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(id)",
            )
            return record

        except ClientError as e:
            logger.error(f"Failed to create {self.resource_name}: {e}")
            raise PersistenceError(f"create_{self.resource_name}") from e

    def _get(self, record_id: str) -> ModelT | None:
        try:
            response = self.table.get_item(Key={"id": record_id})

        except ClientError as e:
            logger.error(f"Failed to get {self.resource_name} {record_id}: {e}")
            raise PersistenceError(f"get_{self.resource_name}") from e

        if "Item" not in response:
            return None

        return self.model.from_dynamodb_item(response["Item"])

    def _list_for_scope(self, scope_id: str, available_only: bool = False) -> list[ModelT]:
        query_args: dict[str, Any] = {
            "IndexName": self.scope_index,
            "KeyConditionExpression": Key(self.scope_attribute).eq(scope_id),
            "ScanIndexForward": True,
        }
        if available_only:
            query_args["FilterExpression"] = Attr("is_available").eq(True)

        try:
            items = query_all(self.table, **query_args)

        except ClientError as e:
            logger.error(f"Failed to list {self.resource_name} records for {scope_id}: {e}")
            raise PersistenceError(f"list_{self.resource_name}") from e

        records = [self.model.from_dynamodb_item(item) for item in items]
        # Colliding sort_order values fall back to insertion order
        return sorted(records, key=lambda r: (r.sort_order, r.created_at))

    def get_max_sort_order(self, scope_id: str) -> int | None:
        """Read the highest sort_order in a scope.

        Args:
            scope_id: Parent identifier

        Returns:
            The maximum sort_order, or None if the scope is empty
        """
        try:
            response = self.table.query(
                IndexName=self.scope_index,
                KeyConditionExpression=Key(self.scope_attribute).eq(scope_id),
                ScanIndexForward=False,
                Limit=1,
            )

        except ClientError as e:
            logger.error(f"Failed to read max sort order for {scope_id}: {e}")
            raise PersistenceError(f"get_max_sort_order_{self.resource_name}") from e

        items = response.get("Items", [])
        if not items:
            return None

        return int(items[0]["sort_order"])

    def _update(self, record_id: str, updates: dict[str, Any]) -> ModelT | None:
        try:
            response = self.table.update_item(
                Key={"id": record_id},
                ConditionExpression="attribute_exists(id)",
                ReturnValues="ALL_NEW",
                **build_update_arguments(updates),
            )

        except ClientError as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update {self.resource_name} {record_id}: {e}")
            raise PersistenceError(f"update_{self.resource_name}") from e

        return self.model.from_dynamodb_item(response["Attributes"])

    def update_sort_orders(self, entries: list[ReorderEntry], scope_id: str) -> bool:
        """Write new sort_order values for a batch of siblings.

        Each chunk of up to 100 entries is written in a single transaction, and
        every write is conditioned on the record existing in scope_id. If a later
        chunk fails, earlier chunks stay applied.

        Args:
            entries: Target (id, sort_order) pairs
            scope_id: Parent every entry must belong to

        Returns:
            bool: True if all chunks were written, False if a record was missing
            or belonged to another scope
        """
        for start in range(0, len(entries), MAX_TRANSACTION_ITEMS):
            chunk = entries[start : start + MAX_TRANSACTION_ITEMS]
            transact_items = [
                {
                    "Update": {
                        "TableName": self.table_name,
                        "Key": {"id": self.serializer.serialize(entry.id)},
                        "UpdateExpression": "SET sort_order = :sort_order",
                        "ConditionExpression": "attribute_exists(id) AND #scope = :scope",
                        "ExpressionAttributeNames": {"#scope": self.scope_attribute},
                        "ExpressionAttributeValues": {
                            ":sort_order": self.serializer.serialize(entry.sort_order),
                            ":scope": self.serializer.serialize(scope_id),
                        },
                    }
                }
                for entry in chunk
            ]

            try:
                self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)

            except ClientError as e:
                if is_conditional_check_failure(e):
                    logger.warning(
                        f"Reorder of {self.resource_name} records in {scope_id} rejected "
                        f"after {start} entries: {e}"
                    )
                    return False
                logger.error(f"Failed to reorder {self.resource_name} records: {e}")
                raise PersistenceError(f"reorder_{self.resource_name}") from e

        return True

    def _delete_many(self, record_ids: list[str]) -> None:
        try:
            with self.table.batch_writer() as batch:
                for record_id in record_ids:
                    batch.delete_item(Key={"id": record_id})

        except ClientError as e:
            logger.error(f"Failed to delete {self.resource_name} records: {e}")
            raise PersistenceError(f"delete_{self.resource_name}") from e


class ItemRepository(SiblingRepository[Item]):
    """Repository for menu items, ordered within a category."""

    model = Item
    scope_attribute = "category_id"
    scope_index = "category_id-sort_order-index"
    resource_name = "item"

    def create_item(self, item: Item) -> Item:
        """Insert a new item."""
        return self._create(item)

    def get_item(self, item_id: str) -> Item | None:
        """Retrieve an item by id, or None if it does not exist."""
        return self._get(item_id)

    def list_items_for_category(self, category_id: str) -> list[Item]:
        """List a category's items ascending by sort_order."""
        return self._list_for_scope(category_id)

    def list_available_items_for_categories(self, category_ids: list[str]) -> list[Item]:
        """List available items across several categories.

        DynamoDB has no IN condition on key attributes, so the category index
        is queried once per category.

        Args:
            category_ids: Categories to read

        Returns:
            list: Available items, ascending by sort_order within each category
        """
        items: list[Item] = []
        for category_id in category_ids:
            items.extend(self._list_for_scope(category_id, available_only=True))
        return items

    def update_item(self, item_id: str, updates: dict[str, Any]) -> Item | None:
        """Merge attributes into an item, or return None if it no longer exists."""
        return self._update(item_id, updates)

    def delete_item(self, item_id: str) -> bool:
        """Delete a single item.

        Returns:
            bool: True once the item is removed
        """
        try:
            self.table.delete_item(Key={"id": item_id})
            return True

        except ClientError as e:
            logger.error(f"Failed to delete item {item_id}: {e}")
            raise PersistenceError("delete_item") from e

    def delete_items_for_category(self, category_id: str) -> int:
        """Delete every item in a category.

        Returns:
            int: Number of items removed
        """
        item_ids = [item.id for item in self._list_for_scope(category_id)]
        if item_ids:
            self._delete_many(item_ids)
        return len(item_ids)


class CategoryRepository(SiblingRepository[Category]):
    """Repository for categories, ordered within a business."""

    model = Category
    scope_attribute = "business_id"
    scope_index = "business_id-sort_order-index"
    resource_name = "category"

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        item_repository: ItemRepository,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
            item_repository: Repository used to cascade deletes to items
        """
        super().__init__(dynamodb_resource, table_name)
        self.item_repository = item_repository

    def create_category(self, category: Category) -> Category:
        """Insert a new category."""
        return self._create(category)

    def get_category(self, category_id: str) -> Category | None:
        """Retrieve a category by id, or None if it does not exist."""
        return self._get(category_id)

    def list_categories_for_business(self, business_id: str) -> list[Category]:
        """List a business's categories ascending by sort_order."""
        return self._list_for_scope(business_id)

    def update_category(self, category_id: str, updates: dict[str, Any]) -> Category | None:
        """Merge attributes into a category, or return None if it no longer exists."""
        return self._update(category_id, updates)

    def delete_category(self, category_id: str) -> bool:
        """Delete a category and its items.

        Returns:
            bool: True once the category is removed
        """
        self.item_repository.delete_items_for_category(category_id)

        try:
            self.table.delete_item(Key={"id": category_id})
            return True

        except ClientError as e:
            logger.error(f"Failed to delete category {category_id}: {e}")
            raise PersistenceError("delete_category") from e

    def delete_categories_for_business(self, business_id: str) -> int:
        """Delete every category of a business and their items.

        Returns:
            int: Number of categories removed
        """
        category_ids = [category.id for category in self._list_for_scope(business_id)]
        for category_id in category_ids:
            self.item_repository.delete_items_for_category(category_id)

        if category_ids:
            self._delete_many(category_ids)
        return len(category_ids)
