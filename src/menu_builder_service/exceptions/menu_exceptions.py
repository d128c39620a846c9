"""Exceptions raised by the menu builder core.

Ownership failures are not exceptions: services return None/False for
resources that are missing or owned by someone else.
"""


class MenuBuilderError(Exception):
    """Base exception for menu builder errors."""

    pass


class InvalidRequestError(MenuBuilderError):
    """Raised when a request is rejected before reaching persistence."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)


class PersistenceError(MenuBuilderError):
    """Raised when a DynamoDB call fails."""

    def __init__(self, operation: str, message: str = "Database operation failed"):
        self.operation = operation
        super().__init__(f"{message}: {operation}")
