from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, List, Optional
from zoneinfo import ZoneInfo

from ..reminders.models import Recipient
from ..reminders.templates import format_money
from .client import SheetsClient


logger = logging.getLogger("nuntius.sheets")

DEFAULT_SHEET_NAME = "Clientes"
DEFAULT_STATUS = "IMPAGA"
SENT_FLAG = "TRUE"
UNKNOWN_NAME = "Sin Nombre"
TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"


def _digits(value: Any) -> str:
    return "".join(ch for ch in str(value if value is not None else "") if ch.isdigit())


def find_phone_row(rows: List[List[Any]], phone: str) -> Optional[int]:
    """Return the 1-based sheet row whose phone cell matches ``phone``.

    Either number may carry a country prefix the other lacks, so a cell
    matches when one digit string contains the other. First match wins.
    """
    target = _digits(phone)
    if not target:
        return None
    for index, row in enumerate(rows):
        cell = _digits(row[0] if row else "")
        if cell and (cell in target or target in cell):
            return index + 1
    return None


class SheetSynchronizer:
    """Best-effort upsert of send outcomes into the operator's spreadsheet."""

    def __init__(
        self,
        client: Optional[SheetsClient],
        sheet_name: str = DEFAULT_SHEET_NAME,
        timezone: str = "America/Bogota",
        clock: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self._client = client
        self._sheet = sheet_name
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: dt.datetime.now(dt.timezone.utc))

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def _timestamp(self) -> str:
        return self._clock().astimezone(self._tz).strftime(TIMESTAMP_FORMAT)

    def sync_row(self, recipient: Recipient, reason: str) -> None:
        if self._client is None:
            return
        try:
            self._sync(recipient, reason)
        except Exception as exc:
            logger.exception(
                "sheet_sync_failed phone=%s reason=%s error=%s",
                recipient.telefono,
                reason,
                exc,
            )

    def _sync(self, recipient: Recipient, reason: str) -> None:
        rows = self._client.read_column(f"{self._sheet}!D:D")
        row = find_phone_row(rows, recipient.telefono or "")
        now = self._timestamp()
        if row is not None:
            self._client.update_values(
                f"{self._sheet}!A{row}:B{row}", [[reason, SENT_FLAG]]
            )
            self._client.update_values(f"{self._sheet}!H{row}", [[now]])
            logger.info("sheet_row_updated row=%s reason=%s", row, reason)
            return

        new_row = [
            reason,
            SENT_FLAG,
            recipient.nombre or UNKNOWN_NAME,
            recipient.telefono,
            format_money(recipient.monto),
            recipient.fecha or recipient.fecha_nacimiento or "",
            DEFAULT_STATUS,
            now,
        ]
        self._client.append_values(f"{self._sheet}!A:H", [new_row])
        logger.info("sheet_row_appended name=%s reason=%s", recipient.nombre, reason)
