from .client import GoogleSheetsClient, SheetsClient
from .sync import SheetSynchronizer, find_phone_row

__all__ = [
    "GoogleSheetsClient",
    "SheetSynchronizer",
    "SheetsClient",
    "find_phone_row",
]
