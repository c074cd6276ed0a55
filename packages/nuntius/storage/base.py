from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from ..reminders.models import MessageTemplate, Reminder


class StoreError(Exception):
    """The persisted document could not be read or written."""


@runtime_checkable
class ReminderStore(Protocol):
    def load(self) -> List[Reminder]:
        """Return every reminder in the collection. Raises StoreError."""

    def save(self, reminders: List[Reminder]) -> None:
        """Replace the whole collection. Raises StoreError."""


@runtime_checkable
class TemplateStore(Protocol):
    def load(self) -> List[MessageTemplate]:
        """Return every message template."""

    def save(self, templates: List[MessageTemplate]) -> None:
        """Replace the whole template collection."""
