from .base import ReminderStore, StoreError, TemplateStore
from .json_store import (
    JsonReminderStore,
    JsonTemplateStore,
    open_reminder_store,
    open_template_store,
)

__all__ = [
    "JsonReminderStore",
    "JsonTemplateStore",
    "ReminderStore",
    "StoreError",
    "TemplateStore",
    "open_reminder_store",
    "open_template_store",
]
