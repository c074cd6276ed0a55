from __future__ import annotations

import datetime as dt
import uuid
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from .models import MessageTemplate, Recipient, Reminder, ReminderKind
from .schedule import compute_next_send, parse_send_time

if TYPE_CHECKING:
    from ..storage.base import ReminderStore, TemplateStore


DEFAULT_TIMEZONE = "America/Bogota"


class ReminderNotFound(LookupError):
    pass


class TemplateNotFound(LookupError):
    pass


class PermissionDenied(Exception):
    pass


def _local_now(timezone: str, now: Optional[dt.datetime] = None) -> dt.datetime:
    current = now or dt.datetime.now(dt.timezone.utc)
    return current.astimezone(ZoneInfo(timezone))


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def _check_owner(owner_id: Optional[str], row_owner: Optional[str], is_admin: bool) -> None:
    if not is_admin and row_owner != owner_id:
        raise PermissionDenied("not_owner")


def _visible(rows: Iterable[Any], owner_id: Optional[str], is_admin: bool) -> List[Any]:
    if is_admin:
        return list(rows)
    return [row for row in rows if row.owner_id == owner_id]


def create_reminder(
    store: ReminderStore,
    owner_id: Optional[str],
    kind: str,
    instance_name: str,
    message: str,
    recipients: Optional[List[Dict[str, Any]]] = None,
    recipient_mode: Optional[Any] = None,
    send_at: Optional[dt.datetime] = None,
    lead_days: int = 0,
    send_weekday: Optional[str] = None,
    send_time: Optional[str] = None,
    timezone: str = DEFAULT_TIMEZONE,
    now: Optional[dt.datetime] = None,
) -> Reminder:
    if not kind or not instance_name or not message:
        raise ValueError("kind, instance_name and message are required")
    reminder_kind = ReminderKind(kind)
    if send_time:
        parse_send_time(send_time)
    if send_at is not None and send_at.tzinfo is None:
        send_at = send_at.replace(tzinfo=ZoneInfo(timezone))

    local_now = _local_now(timezone, now)
    snapshot = [Recipient.from_dict(item) for item in recipients or []]
    reminder = Reminder(
        id=_new_id("rec"),
        owner_id=owner_id,
        kind=reminder_kind,
        instance_name=instance_name.strip(),
        message=message,
        recipient_mode=recipient_mode,
        recipients=snapshot,
        lead_days=lead_days or 0,
        send_weekday=send_weekday or None,
        send_time=send_time or None,
        active=True,
        created_at=local_now,
        next_send_at=compute_next_send(
            reminder_kind, send_weekday, send_time, local_now, send_at=send_at
        ),
        last_send_at=None,
        total_recipients=len(snapshot),
        history=[],
    )
    reminders = store.load()
    reminders.append(reminder)
    store.save(reminders)
    return reminder


def list_reminders(
    store: ReminderStore, owner_id: Optional[str] = None, is_admin: bool = False
) -> List[Reminder]:
    return _visible(store.load(), owner_id, is_admin)


def get_reminder(store: ReminderStore, reminder_id: str) -> Reminder:
    for reminder in store.load():
        if reminder.id == reminder_id:
            return reminder
    raise ReminderNotFound(reminder_id)


def toggle_reminder(
    store: ReminderStore,
    reminder_id: str,
    owner_id: Optional[str] = None,
    is_admin: bool = False,
    timezone: str = DEFAULT_TIMEZONE,
    now: Optional[dt.datetime] = None,
) -> Reminder:
    """Flip ``active``. Re-arming a recurring reminder whose next send is
    missing or already past schedules its next occurrence."""
    reminders = store.load()
    reminder = next((item for item in reminders if item.id == reminder_id), None)
    if reminder is None:
        raise ReminderNotFound(reminder_id)
    _check_owner(owner_id, reminder.owner_id, is_admin)

    reminder.active = not reminder.active
    local_now = _local_now(timezone, now)
    if (
        reminder.active
        and reminder.kind.is_recurring
        and (reminder.next_send_at is None or reminder.next_send_at < local_now)
    ):
        reminder.next_send_at = compute_next_send(
            reminder.kind, reminder.send_weekday, reminder.send_time, local_now
        )
    store.save(reminders)
    return reminder


def delete_reminder(
    store: ReminderStore,
    reminder_id: str,
    owner_id: Optional[str] = None,
    is_admin: bool = False,
) -> None:
    reminders = store.load()
    reminder = next((item for item in reminders if item.id == reminder_id), None)
    if reminder is None:
        raise ReminderNotFound(reminder_id)
    _check_owner(owner_id, reminder.owner_id, is_admin)
    store.save([item for item in reminders if item.id != reminder_id])


def create_template(
    store: TemplateStore,
    owner_id: Optional[str],
    name: str,
    message: str,
    now: Optional[dt.datetime] = None,
) -> MessageTemplate:
    if not name or not message:
        raise ValueError("name and message are required")
    template = MessageTemplate(
        id=_new_id("plt"),
        owner_id=owner_id,
        name=name.strip(),
        message=message,
        created_at=now or dt.datetime.now(dt.timezone.utc),
    )
    templates = store.load()
    templates.append(template)
    store.save(templates)
    return template


def list_templates(
    store: TemplateStore, owner_id: Optional[str] = None, is_admin: bool = False
) -> List[MessageTemplate]:
    return _visible(store.load(), owner_id, is_admin)


def update_template(
    store: TemplateStore,
    template_id: str,
    name: Optional[str] = None,
    message: Optional[str] = None,
    owner_id: Optional[str] = None,
    is_admin: bool = False,
) -> MessageTemplate:
    templates = store.load()
    for index, template in enumerate(templates):
        if template.id != template_id:
            continue
        _check_owner(owner_id, template.owner_id, is_admin)
        updated = MessageTemplate(
            id=template.id,
            owner_id=template.owner_id,
            name=name.strip() if name is not None else template.name,
            message=message if message is not None else template.message,
            created_at=template.created_at,
        )
        templates[index] = updated
        store.save(templates)
        return updated
    raise TemplateNotFound(template_id)


def delete_template(
    store: TemplateStore,
    template_id: str,
    owner_id: Optional[str] = None,
    is_admin: bool = False,
) -> None:
    templates = store.load()
    template = next((item for item in templates if item.id == template_id), None)
    if template is None:
        raise TemplateNotFound(template_id)
    _check_owner(owner_id, template.owner_id, is_admin)
    store.save([item for item in templates if item.id != template_id])
