from __future__ import annotations

import json
import os
import tempfile
import threading
from functools import lru_cache
from typing import Any, Callable, Dict, Generic, List, TypeVar

from ..reminders.models import MessageTemplate, Reminder
from .base import ReminderStore, StoreError, TemplateStore


T = TypeVar("T")


class _JsonCollection(Generic[T]):
    """A JSON file holding ``{key: [item, ...]}``, rewritten as a whole."""

    def __init__(
        self,
        path: str,
        key: str,
        decode: Callable[[Dict[str, Any]], T],
        encode: Callable[[T], Dict[str, Any]],
    ) -> None:
        self._path = path
        self._key = key
        self._decode = decode
        self._encode = encode
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> List[T]:
        with self._lock:
            if not os.path.exists(self._path):
                return []
            try:
                with open(self._path, "r", encoding="utf-8") as handle:
                    payload = json.load(handle)
                return [self._decode(item) for item in payload.get(self._key, [])]
            except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
                raise StoreError(f"Cannot read {self._path}: {exc}") from exc

    def save(self, items: List[T]) -> None:
        payload = {self._key: [self._encode(item) for item in items]}
        directory = os.path.dirname(os.path.abspath(self._path))
        with self._lock:
            tmp_path = None
            try:
                os.makedirs(directory, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self._path)
            except (OSError, TypeError, ValueError) as exc:
                if tmp_path is not None and os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise StoreError(f"Cannot write {self._path}: {exc}") from exc


class JsonReminderStore(_JsonCollection[Reminder], ReminderStore):
    def __init__(self, path: str) -> None:
        super().__init__(path, "recordatorios", Reminder.from_dict, Reminder.to_dict)


class JsonTemplateStore(_JsonCollection[MessageTemplate], TemplateStore):
    def __init__(self, path: str) -> None:
        super().__init__(
            path, "plantillas", MessageTemplate.from_dict, MessageTemplate.to_dict
        )


@lru_cache(maxsize=None)
def open_reminder_store(path: str) -> JsonReminderStore:
    """One store instance per path, shared by the API and the scheduler."""
    return JsonReminderStore(path)


@lru_cache(maxsize=None)
def open_template_store(path: str) -> JsonTemplateStore:
    return JsonTemplateStore(path)
