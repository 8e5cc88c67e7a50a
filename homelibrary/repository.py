# homelibrary/repository.py
"""Record store over a Google spreadsheet.

Each tab is one table: row 1 holds the headers, every later non-blank row
with an ISBN is a ``Book``. Reads ask for formulas rather than computed
values so ``=IMAGE("...")`` cover cells come back as text we can decode.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Optional

import gspread
import requests
from gspread.exceptions import APIError, SpreadsheetNotFound
from gspread.utils import absolute_range_name, rowcol_to_a1
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from .cells import canonical_header, cell_text, decode_cover_cell, is_blank
from .config import SheetsConfig
from .errors import BackendUnavailable
from .logging_config import get_logger
from .models import Book, Field

logger = get_logger(__name__)

HEADER_ROW = 1
FIRST_DATA_ROW = 2


def _status_code(err: APIError) -> Optional[int]:
    return getattr(getattr(err, "response", None), "status_code", None)


def _is_missing_range(err: APIError) -> bool:
    """Sheets answers 400 "Unable to parse range" when the tab does not exist."""
    return _status_code(err) == 400 or "Unable to parse range" in str(err)


def _column_letter(index: int) -> str:
    return rowcol_to_a1(HEADER_ROW, index).rstrip("0123456789")


def _unique(values: Iterable[Any]) -> list[str]:
    out = []
    for v in values:
        text = cell_text(v).strip()
        if text and text not in out:
            out.append(text)
    return out


def _dig(node: Any, range_name: str, *path: Any) -> Any:
    """Walk a metadata payload. Absent keys give None; a wrong container type is a backend fault."""
    for step in path:
        if node is None:
            return None
        if isinstance(step, int):
            if not isinstance(node, list):
                raise BackendUnavailable(f"Unexpected metadata shape for {range_name}: expected a list")
            node = node[step] if step < len(node) else None
        else:
            if not isinstance(node, dict):
                raise BackendUnavailable(f"Unexpected metadata shape for {range_name}: expected an object")
            node = node.get(step)
    return node


@contextmanager
def _backend(action: str):
    try:
        yield
    except APIError as e:
        raise BackendUnavailable(f"Google Sheets error while {action} (HTTP {_status_code(e)}): {e}") from e
    except SpreadsheetNotFound as e:
        raise BackendUnavailable(f"Spreadsheet not found while {action}; is it shared with the service account?") from e
    except (GoogleAuthError, requests.RequestException) as e:
        raise BackendUnavailable(f"Could not reach Google Sheets while {action}: {e}") from e


class SheetRecordStore:
    """Row-oriented access to the tabs of one spreadsheet."""

    def __init__(self, config: SheetsConfig, client: Optional[gspread.Client] = None):
        self.config = config
        self._client = client
        self._spreadsheet = None

    # ------------------------------------------------------------------ #
    # Connection
    # ------------------------------------------------------------------ #
    def _authorize(self) -> gspread.Client:
        creds = Credentials.from_service_account_info(
            self.config.service_account_info, scopes=self.config.scopes
        )
        return gspread.authorize(creds)

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            with _backend("opening the spreadsheet"):
                if self._client is None:
                    self._client = self._authorize()
                self._spreadsheet = self._client.open_by_key(self.config.spreadsheet_id)
        return self._spreadsheet

    def _values_get(self, range_name: str, params: Optional[dict] = None) -> Optional[list[list[Any]]]:
        """Raw grid for ``range_name``, or None when the range names a tab that does not exist."""
        with _backend(f"reading {range_name}"):
            try:
                response = self.spreadsheet.values_get(range_name, params=params)
            except APIError as e:
                if _is_missing_range(e):
                    logger.info("Range %s not found, treating as empty", range_name)
                    return None
                raise
        if not isinstance(response, dict):
            raise BackendUnavailable(f"Unexpected response reading {range_name}: {type(response).__name__}")
        grid = response.get("values", [])
        if not isinstance(grid, list):
            raise BackendUnavailable(f"Unexpected 'values' payload reading {range_name}")
        return grid

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #
    def _read_rows(self, sheet_name: str) -> list[tuple[int, Book]]:
        """(physical row number, record) pairs in sheet order."""
        grid = self._values_get(
            absolute_range_name(sheet_name), params={"valueRenderOption": "FORMULA"}
        )
        if not grid:
            return []

        # first column wins when a header is repeated
        columns: dict[Field, int] = {}
        for index, header in enumerate(grid[0]):
            field = canonical_header(header)
            if field is not None and field not in columns:
                columns[field] = index

        rows = []
        for row_number, cells in enumerate(grid[1:], start=FIRST_DATA_ROW):
            if not cells or all(is_blank(c) for c in cells):
                continue
            values = {
                field.value: cell_text(cells[index]) if index < len(cells) else ""
                for field, index in columns.items()
            }
            isbn = values.get(Field.ISBN.value, "").strip()
            if not isbn:
                continue
            book = Book(**values)
            book.isbn = isbn
            book.cover = decode_cover_cell(book.cover)
            rows.append((row_number, book))

        logger.debug("Read %d records from %s", len(rows), sheet_name)
        return rows

    def read_all(self, sheet_name: str) -> list[Book]:
        return [book for _, book in self._read_rows(sheet_name)]

    def find_row_index_by_isbn(self, sheet_name: str, isbn: Any) -> Optional[int]:
        """1-based sheet row holding ``isbn``, or None. Re-reads the whole tab."""
        wanted = cell_text(isbn).strip()
        if not wanted:
            return None
        for row_number, book in self._read_rows(sheet_name):
            if book.isbn == wanted:
                return row_number
        return None

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #
    def write_cell(self, sheet_name: str, column: str, row_number: int, value: Any) -> None:
        if row_number < FIRST_DATA_ROW:
            raise ValueError("row_number must point below the header row.")
        range_name = absolute_range_name(sheet_name, f"{column}{row_number}")
        with _backend(f"writing {range_name}"):
            self.spreadsheet.values_update(
                range_name,
                params={"valueInputOption": "RAW"},
                body={"values": [[value]]},
            )
        logger.info("Wrote %s", range_name)

    def write_cells(self, sheet_name: str, updates: Iterable[tuple[str, int, Any]]) -> None:
        """Several single-cell writes sent as one batch request."""
        data = []
        for column, row_number, value in updates:
            if row_number < FIRST_DATA_ROW:
                raise ValueError("row_number must point below the header row.")
            data.append(
                {
                    "range": absolute_range_name(sheet_name, f"{column}{row_number}"),
                    "values": [[value]],
                }
            )
        if not data:
            return
        with _backend(f"writing {len(data)} cells in {sheet_name}"):
            self.spreadsheet.values_batch_update(
                body={"valueInputOption": "RAW", "data": data}
            )
        logger.info("Wrote %s", ", ".join(d["range"] for d in data))

    def append_row(self, sheet_name: str, values: list[Any]) -> None:
        """Append after the last used row. USER_ENTERED so formulas stay live."""
        range_name = absolute_range_name(sheet_name, f"A:{_column_letter(max(len(values), 1))}")
        with _backend(f"appending to {sheet_name}"):
            self.spreadsheet.values_append(
                range_name,
                params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
                body={"values": [list(values)]},
            )
        logger.info("Appended row to %s", sheet_name)

    # ------------------------------------------------------------------ #
    # Data validation
    # ------------------------------------------------------------------ #
    def get_validation_list(self, sheet_name: str, column: str) -> list[str]:
        """Allowed values configured on ``column``: inline list or a range in another tab."""
        range_name = absolute_range_name(sheet_name, f"{column}:{column}")
        with _backend(f"reading validation for {range_name}"):
            try:
                meta = self.spreadsheet.fetch_sheet_metadata(
                    params={"includeGridData": "true", "ranges": range_name}
                )
            except APIError as e:
                if _is_missing_range(e):
                    logger.info("Range %s not found, no validation", range_name)
                    return []
                raise

        row_data = _dig(meta, range_name, "sheets", 0, "data", 0, "rowData") or []
        if not isinstance(row_data, list):
            raise BackendUnavailable(f"Unexpected metadata shape for {range_name}: rowData is not a list")
        for row in row_data:
            for cell in _dig(row, range_name, "values") or []:
                rule = _dig(cell, range_name, "dataValidation")
                if rule:
                    return self._resolve_rule(rule, range_name)
        return []

    def _resolve_rule(self, rule: Any, range_name: str) -> list[str]:
        condition = _dig(rule, range_name, "condition") or {}
        values = [
            _dig(v, range_name, "userEnteredValue") or ""
            for v in _dig(condition, range_name, "values") or []
        ]
        kind = _dig(condition, range_name, "type")

        if kind == "ONE_OF_LIST":
            return _unique(values)

        if kind == "ONE_OF_RANGE":
            source = cell_text(values[0] if values else "").strip()
            if source.startswith("="):
                source = source[1:].strip()
            if not source:
                return []
            grid = self._values_get(source)
            if not grid:
                return []
            return _unique(cell for row in grid for cell in row)

        logger.debug("Ignoring %s validation rule", kind)
        return []
