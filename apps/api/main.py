from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

try:
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
except Exception:  # pragma: no cover - optional dependency resolution
    FastAPIInstrumentor = None

from apps.api.observability import init_observability
from apps.api.reminders_scheduler import ReminderScheduler, start_scheduler
from apps.api.routes.reminders import router as reminders_router
from apps.api.routes.templates import router as templates_router
from packages.nuntius.config import load_settings
from packages.nuntius.logging_config import configure_logging


configure_logging()

init_observability()
app = FastAPI(title="Nuntius API")
if FastAPIInstrumentor is not None:
    FastAPIInstrumentor.instrument_app(app)
else:
    logging.getLogger("nuntius.api").warning(
        "OpenTelemetry instrumentation not available. "
        "Install observability dependencies to enable tracing."
    )
# Templates first: "/api/recordatorios/plantillas" must not be read as a reminder id.
app.include_router(templates_router)
app.include_router(reminders_router)

_SCHEDULER: Optional[ReminderScheduler] = None


@app.on_event("startup")
def _start_reminder_scheduler() -> None:
    global _SCHEDULER
    settings = load_settings()
    if not settings.scheduler_enabled:
        return
    if _SCHEDULER is not None:
        return
    _SCHEDULER = start_scheduler(settings)


@app.on_event("shutdown")
def _stop_reminder_scheduler() -> None:
    global _SCHEDULER
    if _SCHEDULER is not None:
        _SCHEDULER.shutdown()
        _SCHEDULER = None
