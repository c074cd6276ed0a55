from __future__ import annotations

import datetime as dt
import logging
import time
from typing import TYPE_CHECKING, Callable, List, Optional

from .models import ExecutionRecord, Reminder, ReminderKind
from .templates import render_message

if TYPE_CHECKING:
    from ..gateway.client import MessageGateway
    from ..sheets.sync import SheetSynchronizer
    from ..storage.base import ReminderStore


logger = logging.getLogger("nuntius.reminders")

DEFAULT_SEND_DELAY = 2.0


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def execute_reminder(
    reminder: Reminder,
    gateway: MessageGateway,
    synchronizer: Optional[SheetSynchronizer],
    clock: Callable[[], dt.datetime] = _utc_now,
    sleep: Callable[[float], None] = time.sleep,
    send_delay: float = DEFAULT_SEND_DELAY,
) -> ExecutionRecord:
    """Send ``reminder`` to each recipient in order and close out the run.

    Recipients are sent one at a time with ``send_delay`` seconds between
    sends. A failed send is counted and the next recipient still goes out.
    The run is stamped with ``clock()`` once the last send returns.
    """
    reason = reminder.kind.value.upper()
    sent = 0
    failed = 0
    for index, recipient in enumerate(reminder.recipients):
        if index and send_delay > 0:
            sleep(send_delay)
        text = render_message(reminder.message, recipient)
        if gateway.send_text(reminder.instance_name, recipient.phone_digits, text):
            sent += 1
            logger.info("reminder_sent id=%s name=%s", reminder.id, recipient.nombre)
            if synchronizer is not None:
                synchronizer.sync_row(recipient, reason)
        else:
            failed += 1
            logger.error("reminder_send_failed id=%s name=%s", reminder.id, recipient.nombre)

    finished = clock()
    record = ExecutionRecord(
        at=finished,
        sent_count=sent,
        failed_count=failed,
        total_recipients=sent + failed,
    )
    reminder.last_send_at = finished
    reminder.history.append(record)
    # Recurring kinds fire once per activation; the toggle endpoint re-arms them.
    reminder.active = False
    if reminder.kind is ReminderKind.ONE_TIME:
        reminder.next_send_at = None
    return record


def merge_executed(current: List[Reminder], executed: List[Reminder]) -> List[Reminder]:
    """Overlay the reminders a tick ran onto the collection as it is now.

    Rows added or removed while the tick was sending are left as they are.
    """
    by_id = {reminder.id: reminder for reminder in executed}
    return [by_id.get(reminder.id, reminder) for reminder in current]


def process_due_reminders(
    store: ReminderStore,
    gateway: MessageGateway,
    synchronizer: Optional[SheetSynchronizer] = None,
    now: Optional[dt.datetime] = None,
    sleep: Callable[[float], None] = time.sleep,
    send_delay: float = DEFAULT_SEND_DELAY,
    clock: Callable[[], dt.datetime] = _utc_now,
) -> int:
    """Run every due reminder once. Returns how many reminders ran.

    Only the reminders that ran are written back, merged into a fresh read
    of the collection, and only when something ran.
    """
    now = now or clock()
    try:
        reminders = store.load()
    except Exception as exc:
        logger.exception("reminders_load_failed error=%s", exc)
        return 0

    executed: List[Reminder] = []
    for reminder in reminders:
        if not reminder.is_due(now):
            continue
        logger.info(
            "reminder_executing id=%s kind=%s recipients=%s",
            reminder.id,
            reminder.kind.value,
            len(reminder.recipients),
        )
        try:
            record = execute_reminder(
                reminder,
                gateway,
                synchronizer,
                clock=clock,
                sleep=sleep,
                send_delay=send_delay,
            )
        except Exception as exc:
            logger.exception("reminder_execute_failed id=%s error=%s", reminder.id, exc)
            continue
        executed.append(reminder)
        logger.info(
            "reminder_executed id=%s sent=%s failed=%s",
            reminder.id,
            record.sent_count,
            record.failed_count,
        )

    if executed:
        try:
            store.save(merge_executed(store.load(), executed))
        except Exception as exc:
            logger.exception("reminders_save_failed error=%s", exc)
    return len(executed)
