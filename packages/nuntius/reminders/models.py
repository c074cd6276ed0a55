from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ReminderKind(str, Enum):
    ONE_TIME = "prueba"
    WEEKLY = "semanal"
    MONTHLY = "mensual"
    REVIEW = "revision"
    ANNIVERSARY = "aniversario"
    BIRTHDAY = "cumpleanos"

    @property
    def is_recurring(self) -> bool:
        return self is not ReminderKind.ONE_TIME


_RECIPIENT_KEYS = ("nombre", "telefono", "ciudad", "monto", "fecha", "fechaNacimiento")


def parse_iso(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    parsed = dt.datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def to_iso(value: Optional[dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(dt.timezone.utc).isoformat()


@dataclass
class Recipient:
    """Contact data frozen into a reminder when it is created or edited."""

    nombre: Optional[str] = None
    telefono: Optional[str] = None
    ciudad: Optional[str] = None
    monto: Optional[Any] = None
    fecha: Optional[str] = None
    fecha_nacimiento: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def phone_digits(self) -> str:
        return "".join(ch for ch in str(self.telefono or "") if ch.isdigit())

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Recipient":
        return cls(
            nombre=payload.get("nombre"),
            telefono=_as_text(payload.get("telefono")),
            ciudad=payload.get("ciudad"),
            monto=payload.get("monto"),
            fecha=payload.get("fecha"),
            fecha_nacimiento=payload.get("fechaNacimiento"),
            extra={k: v for k, v in payload.items() if k not in _RECIPIENT_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        for key, value in (
            ("nombre", self.nombre),
            ("telefono", self.telefono),
            ("ciudad", self.ciudad),
            ("monto", self.monto),
            ("fecha", self.fecha),
            ("fechaNacimiento", self.fecha_nacimiento),
        ):
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True)
class ExecutionRecord:
    at: dt.datetime
    sent_count: int
    failed_count: int
    total_recipients: int

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ExecutionRecord":
        return cls(
            at=parse_iso(payload.get("fecha")),
            sent_count=int(payload.get("enviados", 0)),
            failed_count=int(payload.get("fallidos", 0)),
            total_recipients=int(payload.get("destinatarios", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fecha": to_iso(self.at),
            "enviados": self.sent_count,
            "fallidos": self.failed_count,
            "destinatarios": self.total_recipients,
        }


@dataclass
class Reminder:
    id: str
    owner_id: Optional[str]
    kind: ReminderKind
    instance_name: str
    message: str
    recipient_mode: Optional[Any] = None
    recipients: List[Recipient] = field(default_factory=list)
    lead_days: int = 0
    send_weekday: Optional[str] = None
    send_time: Optional[str] = None
    active: bool = True
    created_at: Optional[dt.datetime] = None
    next_send_at: Optional[dt.datetime] = None
    last_send_at: Optional[dt.datetime] = None
    total_recipients: int = 0
    history: List[ExecutionRecord] = field(default_factory=list)

    def is_due(self, now: dt.datetime) -> bool:
        return self.active and self.next_send_at is not None and self.next_send_at <= now

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Reminder":
        recipients = [Recipient.from_dict(item) for item in payload.get("destinatarios") or []]
        return cls(
            id=payload["id"],
            owner_id=payload.get("ownerId"),
            kind=ReminderKind(payload["tipo"]),
            instance_name=payload.get("instanceName", ""),
            message=payload.get("mensaje", ""),
            recipient_mode=payload.get("modoDestinatarios"),
            recipients=recipients,
            lead_days=int(payload.get("diasAnticipacion") or 0),
            send_weekday=payload.get("diaEnvio"),
            send_time=payload.get("horaEnvio"),
            active=bool(payload.get("activo", False)),
            created_at=parse_iso(payload.get("fechaCreacion")),
            next_send_at=parse_iso(payload.get("proximoEnvio")),
            last_send_at=parse_iso(payload.get("ultimoEnvio")),
            total_recipients=int(payload.get("totalDestinatarios") or len(recipients)),
            history=[ExecutionRecord.from_dict(item) for item in payload.get("historial") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "tipo": self.kind.value,
            "instanceName": self.instance_name,
            "mensaje": self.message,
            "modoDestinatarios": self.recipient_mode,
            "destinatarios": [recipient.to_dict() for recipient in self.recipients],
            "diasAnticipacion": self.lead_days,
            "diaEnvio": self.send_weekday,
            "horaEnvio": self.send_time,
            "activo": self.active,
            "fechaCreacion": to_iso(self.created_at),
            "proximoEnvio": to_iso(self.next_send_at),
            "ultimoEnvio": to_iso(self.last_send_at),
            "totalDestinatarios": self.total_recipients,
            "historial": [record.to_dict() for record in self.history],
        }


@dataclass(frozen=True)
class MessageTemplate:
    id: str
    owner_id: Optional[str]
    name: str
    message: str
    created_at: Optional[dt.datetime] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MessageTemplate":
        return cls(
            id=payload["id"],
            owner_id=payload.get("ownerId"),
            name=payload.get("nombre", ""),
            message=payload.get("mensaje", ""),
            created_at=parse_iso(payload.get("fechaCreacion")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "nombre": self.name,
            "mensaje": self.message,
            "fechaCreacion": to_iso(self.created_at),
        }


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)
