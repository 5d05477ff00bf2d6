import json
import logging
import zlib
from contextlib import contextmanager

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from expense_bot.config import Settings
from expense_bot.errors import StoreUnavailableError
from expense_bot.store import HEADER

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Cells starting with these are parsed as formulas under USER_ENTERED
FORMULA_PREFIXES = ("=", "+", "-", "@")


def _sheet_id_for(name: str) -> int:
    """Stable sheet id for a title, so concurrent creators send the same addSheet."""
    return zlib.crc32(name.encode("utf-8")) & 0x7FFFFFFF


def _literal(cell: str) -> str:
    if isinstance(cell, str) and cell.startswith(FORMULA_PREFIXES):
        return "'" + cell
    return cell


def load_credentials(settings: Settings) -> Credentials:
    """Service account credentials: inline JSON from the environment first, then the key file."""
    if settings.google_service_account_json:
        info = json.loads(settings.google_service_account_json)
        return Credentials.from_service_account_info(info, scopes=SCOPES)
    return Credentials.from_service_account_file(settings.google_service_account_file, scopes=SCOPES)


@contextmanager
def _store_errors(action: str):
    try:
        yield
    except HttpError as e:
        raise StoreUnavailableError(f"Sheets API error while {action}: {e}") from e
    except OSError as e:
        raise StoreUnavailableError(f"Sheets API unreachable while {action}: {e}") from e


class SheetsClient:
    """One spreadsheet, one sheet per month."""

    def __init__(self, spreadsheet_id: str, credentials: Credentials | None = None, service=None):
        self.spreadsheet_id = spreadsheet_id
        self._creds = credentials
        if service is not None:
            self.sheet = service.spreadsheets()
        else:
            self._build_service()

    def _build_service(self):
        service = build("sheets", "v4", credentials=self._creds)
        self.sheet = service.spreadsheets()

    def _execute_with_retry(self, request):
        """Execute a Google Sheets API request, rebuilding the connection on BrokenPipeError."""
        try:
            return request.execute()
        except BrokenPipeError:
            self._build_service()
            return request.execute()

    def _range(self, sheet_name: str, range_str: str) -> str:
        quoted = sheet_name.replace("'", "''")
        return f"'{quoted}'!{range_str}"

    def list_partitions(self) -> list[str]:
        with _store_errors("listing sheets"):
            result = self._execute_with_retry(self.sheet.get(
                spreadsheetId=self.spreadsheet_id,
                fields="sheets.properties",
            ))
        return [s["properties"]["title"] for s in result.get("sheets", [])]

    def ensure_partition(self, name: str) -> bool:
        """Create the month sheet with header row and filter. Returns False if it already existed.

        Sheet, header and filter go out in one batchUpdate, which the API
        applies atomically, so a sheet is never visible without its header.
        When another writer creates it first the duplicate add is rejected and
        the whole batch is dropped.
        """
        if name in self.list_partitions():
            return False

        sheet_id = _sheet_id_for(name)
        with _store_errors(f"creating sheet {name!r}"):
            try:
                self._execute_with_retry(self.sheet.batchUpdate(
                    spreadsheetId=self.spreadsheet_id,
                    body={"requests": [
                        {"addSheet": {"properties": {"title": name, "sheetId": sheet_id}}},
                        {
                            "updateCells": {
                                "start": {"sheetId": sheet_id, "rowIndex": 0, "columnIndex": 0},
                                "rows": [{"values": [{"userEnteredValue": {"stringValue": h}} for h in HEADER]}],
                                "fields": "userEnteredValue",
                            }
                        },
                        {
                            "setBasicFilter": {
                                "filter": {
                                    "range": {
                                        "sheetId": sheet_id,
                                        "startRowIndex": 0,
                                        "endRowIndex": 1,
                                        "startColumnIndex": 0,
                                        "endColumnIndex": len(HEADER),
                                    }
                                }
                            }
                        },
                    ]},
                ))
            except HttpError as e:
                if e.resp.status == 400 and "already exists" in str(e):
                    logger.info(f"Sheet '{name}' was created concurrently, reusing it")
                    return False
                raise

        logger.info(f"Created sheet '{name}' (id {sheet_id})")
        return True

    def append_row(self, name: str, row: list[str]) -> None:
        with _store_errors(f"appending to {name!r}"):
            self._execute_with_retry(self.sheet.values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(name, "A:D"),
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={"values": [[_literal(cell) for cell in row]]},
            ))

    def read_rows(self, name: str) -> list[list]:
        """Fetch all data rows (excluding header). Amounts come back as numbers, dates as display strings."""
        with _store_errors(f"reading {name!r}"):
            result = self._execute_with_retry(self.sheet.values().get(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(name, "A2:D"),
                valueRenderOption="UNFORMATTED_VALUE",
                dateTimeRenderOption="FORMATTED_STRING",
            ))
        return result.get("values", [])
