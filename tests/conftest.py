from __future__ import annotations

import json
from typing import Any, Optional

import pytest
import requests
from gspread.exceptions import APIError
from gspread.utils import a1_range_to_grid_range, a1_to_rowcol

from homelibrary.config import SheetsConfig
from homelibrary.inventory import Inventory
from homelibrary.repository import SheetRecordStore

HEADERS = [
    "ISBN",
    "Cover",
    "Title",
    "Authors",
    "Reading Level",
    "Location",
    "Publishers",
    "Pages",
    "Genres",
    "Language",
    "Notes",
    "Requested By",
]


def make_api_error(status: int, message: str) -> APIError:
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(
        {"error": {"code": status, "message": message, "status": "ERROR"}}
    ).encode()
    return APIError(response)


def _split_range(range_name: str) -> tuple[str, Optional[str]]:
    if "!" in range_name:
        sheet, a1 = range_name.rsplit("!", 1)
    else:
        sheet, a1 = range_name, None
    if sheet.startswith("'") and sheet.endswith("'"):
        sheet = sheet[1:-1].replace("''", "'")
    return sheet, a1


def _user_entered(value: Any) -> Any:
    """What Sheets stores for a USER_ENTERED value: quote-prefixed text verbatim, bare digit runs as numbers."""
    if isinstance(value, str):
        if value.startswith("'"):
            return value[1:]
        if value.isdigit():
            return int(value)
    return value


class FakeSpreadsheet:
    """In-memory stand-in for the gspread Spreadsheet calls the store makes."""

    def __init__(self) -> None:
        self.tabs: dict[str, list[list[Any]]] = {}
        # (sheet, column letter) -> dataValidation rule dict
        self.validation: dict[tuple[str, str], dict] = {}
        self.calls: list[tuple[str, Any]] = []
        self.fail: dict[str, Exception] = {}

    def calls_to(self, method: str) -> list[Any]:
        return [args for name, args in self.calls if name == method]

    @property
    def writes(self) -> list[tuple[str, Any]]:
        return [c for c in self.calls if c[0] in ("values_update", "values_batch_update", "values_append")]

    def _record(self, method: str, args: Any) -> None:
        self.calls.append((method, args))
        if method in self.fail:
            raise self.fail[method]

    def _grid(self, sheet: str, range_name: str) -> list[list[Any]]:
        if sheet not in self.tabs:
            raise make_api_error(400, f"Unable to parse range: {range_name}")
        return self.tabs[sheet]

    def _set(self, range_name: str, value: Any) -> None:
        sheet, a1 = _split_range(range_name)
        grid = self._grid(sheet, range_name)
        row, col = a1_to_rowcol(a1)
        while len(grid) < row:
            grid.append([])
        cells = grid[row - 1]
        while len(cells) < col:
            cells.append("")
        cells[col - 1] = value

    # gspread.Spreadsheet API ------------------------------------------------
    def values_get(self, range_name: str, params: Optional[dict] = None) -> dict:
        self._record("values_get", (range_name, params))
        sheet, a1 = _split_range(range_name)
        grid = self._grid(sheet, range_name)
        if a1:
            bounds = a1_range_to_grid_range(a1)
            rows = grid[bounds.get("startRowIndex", 0):bounds.get("endRowIndex")]
            grid = [r[bounds.get("startColumnIndex", 0):bounds.get("endColumnIndex")] for r in rows]
        out: dict[str, Any] = {"range": range_name, "majorDimension": "ROWS"}
        if grid:
            out["values"] = [list(r) for r in grid]
        return out

    def values_update(self, range_name: str, params: Optional[dict] = None, body: Optional[dict] = None) -> dict:
        self._record("values_update", (range_name, params, body))
        self._set(range_name, body["values"][0][0])
        return {"updatedCells": 1}

    def values_batch_update(self, body: Optional[dict] = None) -> dict:
        self._record("values_batch_update", body)
        for item in body["data"]:
            self._set(item["range"], item["values"][0][0])
        return {"totalUpdatedCells": len(body["data"])}

    def values_append(self, range_name: str, params: Optional[dict] = None, body: Optional[dict] = None) -> dict:
        self._record("values_append", (range_name, params, body))
        sheet, _ = _split_range(range_name)
        grid = self._grid(sheet, range_name)
        grid.extend([_user_entered(v) for v in r] for r in body["values"])
        return {"updates": {"updatedRows": len(body["values"])}}

    def fetch_sheet_metadata(self, params: Optional[dict] = None) -> dict:
        self._record("fetch_sheet_metadata", params)
        range_name = params["ranges"]
        sheet, a1 = _split_range(range_name)
        grid = self._grid(sheet, range_name)
        column = a1.split(":")[0]
        rule = self.validation.get((sheet, column))
        row_data: list[dict] = [{"values": [{"userEnteredValue": {"stringValue": "header"}}]}]
        for _ in grid[1:] or [[]]:
            row_data.append({"values": [{"dataValidation": rule}]} if rule else {})
        return {"sheets": [{"properties": {"title": sheet}, "data": [{"rowData": row_data}]}]}


class FakeClient:
    def __init__(self, spreadsheet: FakeSpreadsheet) -> None:
        self.spreadsheet = spreadsheet
        self.opened: list[str] = []

    def open_by_key(self, key: str) -> FakeSpreadsheet:
        self.opened.append(key)
        return self.spreadsheet


@pytest.fixture
def spreadsheet() -> FakeSpreadsheet:
    fake = FakeSpreadsheet()
    fake.tabs["Inventory"] = [list(HEADERS)]
    return fake


@pytest.fixture
def client(spreadsheet: FakeSpreadsheet) -> FakeClient:
    return FakeClient(spreadsheet)


@pytest.fixture
def config() -> SheetsConfig:
    return SheetsConfig(service_account_info={}, spreadsheet_id="sheet-123")


@pytest.fixture
def store(config: SheetsConfig, client: FakeClient) -> SheetRecordStore:
    return SheetRecordStore(config, client=client)


@pytest.fixture
def inventory(store: SheetRecordStore) -> Inventory:
    return Inventory(store)


@pytest.fixture
def api_error():
    return make_api_error
