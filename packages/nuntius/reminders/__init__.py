from .models import ExecutionRecord, MessageTemplate, Recipient, Reminder, ReminderKind
from .runner import execute_reminder, merge_executed, process_due_reminders
from .schedule import compute_next_send
from .service import (
    PermissionDenied,
    ReminderNotFound,
    TemplateNotFound,
    create_reminder,
    create_template,
    delete_reminder,
    delete_template,
    get_reminder,
    list_reminders,
    list_templates,
    toggle_reminder,
    update_template,
)
from .templates import format_money, render_message

__all__ = [
    "ExecutionRecord",
    "MessageTemplate",
    "PermissionDenied",
    "Recipient",
    "Reminder",
    "ReminderKind",
    "ReminderNotFound",
    "TemplateNotFound",
    "compute_next_send",
    "create_reminder",
    "create_template",
    "delete_reminder",
    "delete_template",
    "execute_reminder",
    "format_money",
    "get_reminder",
    "list_reminders",
    "list_templates",
    "merge_executed",
    "process_due_reminders",
    "render_message",
    "toggle_reminder",
    "update_template",
]
