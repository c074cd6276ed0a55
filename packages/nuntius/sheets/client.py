from __future__ import annotations

import os
from typing import Any, List, Optional, Protocol

from google.oauth2 import service_account
from googleapiclient.discovery import build


SCOPES_DEFAULT = ["https://www.googleapis.com/auth/spreadsheets"]
VALUE_INPUT_OPTION = "USER_ENTERED"


class SheetsClient(Protocol):
    def read_column(self, range_name: str) -> List[List[Any]]:
        """Return the raw rows of a range (each row is a list of cells)."""

    def update_values(self, range_name: str, values: List[List[Any]]) -> None:
        """Overwrite the cells of a range."""

    def append_values(self, range_name: str, values: List[List[Any]]) -> None:
        """Append rows after the last row of a range."""


class GoogleSheetsClient(SheetsClient):
    def __init__(
        self,
        spreadsheet_id: str,
        credentials_path: str,
        scopes: Optional[List[str]] = None,
    ) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._credentials_path = credentials_path
        self._scopes = scopes or SCOPES_DEFAULT
        self._values_api = None

    def _values(self):
        if self._values_api is None:
            if not os.path.exists(self._credentials_path):
                raise RuntimeError(
                    "Missing Google service account file. "
                    "Set GOOGLE_CREDENTIALS_PATH to your credentials.json."
                )
            creds = service_account.Credentials.from_service_account_file(
                self._credentials_path, scopes=self._scopes
            )
            service = build("sheets", "v4", credentials=creds, cache_discovery=False)
            self._values_api = service.spreadsheets().values()
        return self._values_api

    def read_column(self, range_name: str) -> List[List[Any]]:
        response = (
            self._values()
            .get(spreadsheetId=self._spreadsheet_id, range=range_name)
            .execute()
        )
        return response.get("values", [])

    def update_values(self, range_name: str, values: List[List[Any]]) -> None:
        (
            self._values()
            .update(
                spreadsheetId=self._spreadsheet_id,
                range=range_name,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": values},
            )
            .execute()
        )

    def append_values(self, range_name: str, values: List[List[Any]]) -> None:
        (
            self._values()
            .append(
                spreadsheetId=self._spreadsheet_id,
                range=range_name,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": values},
            )
            .execute()
        )
