from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from packages.nuntius.reminders.models import Reminder


class ReminderCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(..., alias="tipo", min_length=1)
    instance_name: str = Field(..., alias="instanceName", min_length=1)
    message: str = Field(..., alias="mensaje", min_length=1)
    recipient_mode: Optional[Any] = Field(default=None, alias="modoDestinatarios")
    recipients: List[Dict[str, Any]] = Field(default_factory=list, alias="destinatarios")
    send_at: Optional[datetime] = Field(default=None, alias="fechaHoraEnvio")
    lead_days: int = Field(default=0, alias="diasAnticipacion", ge=0)
    send_weekday: Optional[str] = Field(default=None, alias="diaEnvio")
    send_time: Optional[str] = Field(default=None, alias="horaEnvio")


class ExecutionRecordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    at: Optional[str] = Field(default=None, alias="fecha")
    sent_count: int = Field(alias="enviados")
    failed_count: int = Field(alias="fallidos")
    total_recipients: int = Field(alias="destinatarios")


class ReminderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    kind: str = Field(alias="tipo")
    instance_name: str = Field(alias="instanceName")
    message: str = Field(alias="mensaje")
    recipient_mode: Optional[Any] = Field(default=None, alias="modoDestinatarios")
    recipients: List[Dict[str, Any]] = Field(default_factory=list, alias="destinatarios")
    lead_days: int = Field(default=0, alias="diasAnticipacion")
    send_weekday: Optional[str] = Field(default=None, alias="diaEnvio")
    send_time: Optional[str] = Field(default=None, alias="horaEnvio")
    active: bool = Field(alias="activo")
    created_at: Optional[str] = Field(default=None, alias="fechaCreacion")
    next_send_at: Optional[str] = Field(default=None, alias="proximoEnvio")
    last_send_at: Optional[str] = Field(default=None, alias="ultimoEnvio")
    total_recipients: int = Field(default=0, alias="totalDestinatarios")
    history: List[ExecutionRecordResponse] = Field(default_factory=list, alias="historial")

    @classmethod
    def from_reminder(cls, reminder: Reminder) -> "ReminderResponse":
        return cls.model_validate(reminder.to_dict())
