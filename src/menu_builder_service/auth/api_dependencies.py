"""FastAPI dependencies for the owner and admin boundaries.

Owner routes trust the principal id injected by the upstream authorizer.
Admin routes require a configured API key.
"""

from typing import Annotated

from fastapi import Header, HTTPException

from menu_builder_service.auth.api_key_validator import APIKeyValidator


def get_principal_id_from_header(
    x_principal_id: Annotated[str | None, Header()] = None,
) -> str:
    """FastAPI dependency to read the verified principal from X-Principal-Id.

    Args:
        x_principal_id: Principal id set by the authorizer in front of the service

    Returns:
        str: The principal id

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_principal_id or not x_principal_id.strip():
        raise HTTPException(status_code=401, detail="Missing principal")

    return x_principal_id.strip()


def get_api_key_from_header(
    x_api_key: Annotated[str | None, Header()] = None,
    validator: APIKeyValidator | None = None,
) -> str:
    """FastAPI dependency to extract and validate the admin key from X-API-Key.

    Args:
        x_api_key: API key from X-API-Key header (injected by FastAPI)
        validator: APIKeyValidator holding the configured keys

    Returns:
        str: The validated API key

    Raises:
        HTTPException: 401 if API key is missing or invalid
    """
    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if validator is None or not validator.validate(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key
