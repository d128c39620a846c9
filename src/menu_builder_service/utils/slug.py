"""URL slug helpers for business storefronts."""

import re
import secrets
import string

MAX_SLUG_LENGTH = 100
SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_slug(text: str) -> str:
    """Convert text into a URL-friendly slug.

    Args:
        text: Source text, usually the business name

    Returns:
        Lowercase slug with hyphens instead of whitespace, at most 100 characters
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug[:MAX_SLUG_LENGTH]


def generate_unique_slug(text: str) -> str:
    """Generate a slug with a random 4-character suffix.

    Args:
        text: Source text, usually the business name

    Returns:
        Slug in the form "<base>-<suffix>"
    """
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(4))
    base_slug = generate_slug(text)
    if not base_slug:
        return suffix
    return f"{base_slug}-{suffix}"
