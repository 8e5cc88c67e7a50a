class InventoryError(Exception):
    """Base class for every failure the inventory reports to its callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(InventoryError):
    pass


class DuplicateKey(InventoryError):
    pass


class MissingField(InventoryError):
    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"{field} is required")
        self.field = field


class BackendUnavailable(InventoryError):
    """The spreadsheet service could not be reached or answered with an unexpected shape."""
