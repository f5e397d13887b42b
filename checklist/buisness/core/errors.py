"""
Domain exceptions raised by the business layer.

Routes translate them into flash messages (ValidationError, stock errors)
or HTTP 403/404 responses (PermissionDenied, NotFoundError).
"""


class ChecklistError(Exception):
    """Base class for business rule violations."""


class ValidationError(ChecklistError, ValueError):
    """Submitted data failed a boundary check."""


class NotFoundError(ChecklistError, LookupError):
    pass


class PermissionDenied(ChecklistError):
    def __init__(self, capability: str, username: str = None):
        self.capability = capability
        self.username = username
        who = username or 'anonymous user'
        super().__init__(f"{who} lacks permission '{capability}'")


class InsufficientStockError(ValidationError):
    def __init__(self, item_name: str, requested: int, available: int):
        self.item_name = item_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot withdraw {requested} of '{item_name}': only {available} in stock"
        )


class StockHierarchyError(ValidationError):
    """Parent/child assignment would break the one-level hierarchy."""
