from .config import SheetsConfig
from .errors import BackendUnavailable, DuplicateKey, InventoryError, MissingField, NotFound
from .inventory import Inventory
from .models import Book, Field
from .repository import SheetRecordStore
from .services import BookLookupService

__all__ = [
    "BackendUnavailable",
    "Book",
    "BookLookupService",
    "DuplicateKey",
    "Field",
    "Inventory",
    "InventoryError",
    "MissingField",
    "NotFound",
    "SheetRecordStore",
    "SheetsConfig",
    "open_inventory",
]


def open_inventory(config: SheetsConfig) -> Inventory:
    return Inventory(SheetRecordStore(config))
