from __future__ import annotations

import datetime as dt
import logging
import threading
import time
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from packages.nuntius.config import Settings
from packages.nuntius.gateway.client import EvolutionClient, MessageGateway
from packages.nuntius.reminders.runner import process_due_reminders
from packages.nuntius.sheets.client import GoogleSheetsClient
from packages.nuntius.sheets.sync import SheetSynchronizer
from packages.nuntius.storage.base import ReminderStore
from packages.nuntius.storage.json_store import open_reminder_store


logger = logging.getLogger("nuntius.scheduler")

JOB_ID = "reminders"


class ReminderScheduler:
    """Polls the reminder store on a fixed interval, one tick at a time."""

    def __init__(
        self,
        store: ReminderStore,
        gateway: MessageGateway,
        synchronizer: Optional[SheetSynchronizer] = None,
        interval_seconds: int = 60,
        send_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._synchronizer = synchronizer
        self._interval = interval_seconds
        self._send_delay = send_delay
        self._sleep = sleep
        self._in_flight = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def tick(self) -> bool:
        """Run one poll. Returns False when skipped because a tick is in flight."""
        if not self._in_flight.acquire(blocking=False):
            logger.warning("reminders_tick_skipped reason=in_flight")
            return False
        try:
            process_due_reminders(
                self._store,
                self._gateway,
                self._synchronizer,
                sleep=self._sleep,
                send_delay=self._send_delay,
            )
        except Exception as exc:
            logger.exception("reminders_tick_failed error=%s", exc)
        finally:
            self._in_flight.release()
        return True

    def start(self) -> BackgroundScheduler:
        if self._scheduler is not None:
            return self._scheduler
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.tick,
            "interval",
            seconds=self._interval,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=dt.datetime.now(dt.timezone.utc),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("reminders_scheduler_started interval=%ss", self._interval)
        return scheduler

    def shutdown(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None


def build_scheduler(settings: Settings) -> ReminderScheduler:
    gateway = EvolutionClient(
        settings.evolution_api_url,
        settings.evolution_api_key,
        timeout=settings.evolution_timeout,
    )
    sheets_client = None
    if settings.google_sheet_id:
        sheets_client = GoogleSheetsClient(
            settings.google_sheet_id, settings.google_credentials_path
        )
    synchronizer = SheetSynchronizer(
        sheets_client,
        sheet_name=settings.google_sheet_name,
        timezone=settings.scheduler_timezone,
    )
    return ReminderScheduler(
        open_reminder_store(settings.reminders_path),
        gateway,
        synchronizer,
        interval_seconds=settings.scheduler_interval_seconds,
        send_delay=settings.send_delay_seconds,
    )


def start_scheduler(settings: Settings) -> ReminderScheduler:
    scheduler = build_scheduler(settings)
    scheduler.start()
    return scheduler
