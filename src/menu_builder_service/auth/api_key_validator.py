"""API key validation for the admin boundary.

Admin routes bypass ownership checks, so they are gated by a shared secret
sent in the X-API-Key header and compared against the configured keys.
"""


class APIKeyValidator:
    """Validates API keys for admin endpoint authentication."""

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with the accepted admin keys.

        Args:
            api_keys: Valid API key strings

        Raises:
            ValueError: If no non-empty key is configured
        """
        keys = {key.strip() for key in api_keys if key and key.strip()}
        if not keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = keys

    def validate(self, api_key: str) -> bool:
        """Check an API key against the configured keys.

        Args:
            api_key: Key sent by the caller

        Returns:
            bool: True if the key is accepted
        """
        return api_key in self.api_keys
