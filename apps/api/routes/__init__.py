from .reminders import router as reminders_router
from .templates import router as templates_router

__all__ = [
    "reminders_router",
    "templates_router",
]
