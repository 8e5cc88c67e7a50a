"""Inventory rules on top of the sheet record store.

A book is either shelved (``location`` set, ``requested_by`` empty) or
requested (both set). ``request_book`` only fills in the requester;
``move_book`` sets a new location and always clears the requester.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

from .cells import cell_text, encode_cover_cell, encode_text_cell
from .errors import DuplicateKey, InventoryError, MissingField, NotFound
from .logging_config import get_logger
from .models import Book, Field, LOCATION_COLUMN, REQUESTED_BY_COLUMN, WRITE_ORDER
from .repository import SheetRecordStore

logger = get_logger(__name__)


def normalize_isbn(isbn: Any) -> str:
    return cell_text(isbn).strip()


def book_to_row(book: Book) -> list[str]:
    """Cells A..K for a new row. Only the cover is a formula; everything else is forced text."""
    row = []
    for field in WRITE_ORDER:
        if field is Field.COVER:
            row.append(encode_cover_cell(book.cover))
        else:
            row.append(encode_text_cell(book.get(field)))
    return row


class Inventory:
    def __init__(self, store: SheetRecordStore, default_sheet: Optional[str] = None):
        self.store = store
        self.default_sheet = default_sheet or store.config.inventory_sheet

    def _sheet(self, sheet_name: Optional[str]) -> str:
        return sheet_name or self.default_sheet

    def _locate(self, sheet: str, isbn: Any) -> tuple[str, int]:
        normalized = normalize_isbn(isbn)
        if not normalized:
            raise MissingField("isbn", "ISBN is required")
        row_number = self.store.find_row_index_by_isbn(sheet, normalized)
        if row_number is None:
            raise NotFound(f"Book with ISBN {normalized} not found")
        return normalized, row_number

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def list_books(self, sheet_name: Optional[str] = None) -> list[Book]:
        return self.store.read_all(self._sheet(sheet_name))

    def get_book(self, isbn: Any, sheet_name: Optional[str] = None) -> Book:
        normalized = normalize_isbn(isbn)
        for book in self.list_books(sheet_name):
            if book.isbn == normalized:
                return book
        raise NotFound(f"Book with ISBN {normalized} not found")

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def add_book(self, candidate: Book, sheet_name: Optional[str] = None) -> Book:
        sheet = self._sheet(sheet_name)
        isbn = normalize_isbn(candidate.isbn)
        if not isbn:
            raise MissingField("isbn", "ISBN is required")
        if not candidate.location.strip():
            raise MissingField("location", "Location is required")

        if any(book.isbn == isbn for book in self.store.read_all(sheet)):
            raise DuplicateKey(f"Book with ISBN {isbn} already exists in the library")

        book = replace(candidate, isbn=isbn, requested_by="")
        self.store.append_row(sheet, book_to_row(book))
        logger.info("Added %s (%s) to %s at %s", isbn, book.title, sheet, book.location)
        return book

    def move_book(self, isbn: Any, new_location: str, sheet_name: Optional[str] = None) -> None:
        """Check a book out to ``new_location``; any pending request is cleared."""
        sheet = self._sheet(sheet_name)
        new_location = cell_text(new_location).strip()
        if not new_location:
            raise MissingField("location", "Location is required")
        normalized, row_number = self._locate(sheet, isbn)
        self.store.write_cells(
            sheet,
            [
                (LOCATION_COLUMN, row_number, new_location),
                (REQUESTED_BY_COLUMN, row_number, ""),
            ],
        )
        logger.info("Moved %s to %s", normalized, new_location)

    def request_book(self, isbn: Any, requested_by: str, sheet_name: Optional[str] = None) -> None:
        sheet = self._sheet(sheet_name)
        requested_by = cell_text(requested_by).strip()
        if not requested_by:
            raise MissingField("requested_by", "Requester is required")
        normalized, row_number = self._locate(sheet, isbn)
        self.store.write_cell(sheet, REQUESTED_BY_COLUMN, row_number, requested_by)
        logger.info("%s requested by %s", normalized, requested_by)

    # ------------------------------------------------------------------ #
    # Allowed values
    # ------------------------------------------------------------------ #
    def _options(self, sheet: str, column: str) -> list[str]:
        try:
            return self.store.get_validation_list(sheet, column)
        except InventoryError as e:
            # the UI falls back to free-text entry
            logger.warning("Could not load validation list for %s!%s: %s", sheet, column, e)
            return []

    def get_location_options(self, sheet_name: Optional[str] = None, column: str = LOCATION_COLUMN) -> list[str]:
        return self._options(self._sheet(sheet_name), column)

    def get_requester_options(self, sheet_name: Optional[str] = None, column: str = REQUESTED_BY_COLUMN) -> list[str]:
        return self._options(self._sheet(sheet_name), column)
