from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from apps.api.deps import CurrentUser, current_user
from apps.api.schemas.reminders import ReminderCreateRequest, ReminderResponse
from packages.nuntius.config import load_settings
from packages.nuntius.reminders.service import (
    PermissionDenied,
    ReminderNotFound,
    create_reminder,
    delete_reminder,
    list_reminders,
    toggle_reminder,
)
from packages.nuntius.storage.base import ReminderStore
from packages.nuntius.storage.json_store import open_reminder_store


router = APIRouter(prefix="/api/recordatorios", tags=["reminders"])


def _store() -> ReminderStore:
    return open_reminder_store(load_settings().reminders_path)


def _timezone() -> str:
    return load_settings().scheduler_timezone


@router.get("", response_model=List[ReminderResponse])
def list_all(user: CurrentUser = Depends(current_user)) -> List[ReminderResponse]:
    reminders = list_reminders(_store(), owner_id=user.id, is_admin=user.is_admin)
    return [ReminderResponse.from_reminder(reminder) for reminder in reminders]


@router.post("", response_model=ReminderResponse, status_code=201)
def create(
    payload: ReminderCreateRequest, user: CurrentUser = Depends(current_user)
) -> ReminderResponse:
    try:
        reminder = create_reminder(
            _store(),
            owner_id=user.id,
            kind=payload.kind,
            instance_name=payload.instance_name,
            message=payload.message,
            recipients=payload.recipients,
            recipient_mode=payload.recipient_mode,
            send_at=payload.send_at,
            lead_days=payload.lead_days,
            send_weekday=payload.send_weekday,
            send_time=payload.send_time,
            timezone=_timezone(),
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ReminderResponse.from_reminder(reminder)


@router.patch("/{reminder_id}/toggle", response_model=ReminderResponse)
def toggle(reminder_id: str, user: CurrentUser = Depends(current_user)) -> ReminderResponse:
    try:
        reminder = toggle_reminder(
            _store(),
            reminder_id,
            owner_id=user.id,
            is_admin=user.is_admin,
            timezone=_timezone(),
        )
    except ReminderNotFound as exc:
        raise HTTPException(status_code=404, detail="Reminder not found") from exc
    except PermissionDenied as exc:
        raise HTTPException(status_code=403, detail="Forbidden") from exc
    return ReminderResponse.from_reminder(reminder)


@router.delete("/{reminder_id}")
def delete(reminder_id: str, user: CurrentUser = Depends(current_user)) -> Dict[str, Any]:
    try:
        delete_reminder(_store(), reminder_id, owner_id=user.id, is_admin=user.is_admin)
    except ReminderNotFound as exc:
        raise HTTPException(status_code=404, detail="Reminder not found") from exc
    except PermissionDenied as exc:
        raise HTTPException(status_code=403, detail="Forbidden") from exc
    return {"status": "deleted", "id": reminder_id}
