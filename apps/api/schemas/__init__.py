from .reminders import ExecutionRecordResponse, ReminderCreateRequest, ReminderResponse
from .templates import TemplateCreateRequest, TemplateResponse, TemplateUpdateRequest

__all__ = [
    "ExecutionRecordResponse",
    "ReminderCreateRequest",
    "ReminderResponse",
    "TemplateCreateRequest",
    "TemplateResponse",
    "TemplateUpdateRequest",
]
