from __future__ import annotations

import re
from typing import Any

from .models import Recipient


DEFAULT_NAME = "Estimado Cliente"
PENDING_DATE = "Pendiente"
CURRENCY_SYMBOL = "$"

_NON_DIGITS = re.compile(r"\D")


def format_money(raw: Any) -> str:
    """Format an amount as Colombian pesos: ``"1500"`` -> ``"$ 1.500"``."""
    digits = _NON_DIGITS.sub("", str(raw)) if raw is not None else ""
    amount = int(digits) if digits else 0
    grouped = f"{amount:,}".replace(",", ".")
    return f"{CURRENCY_SYMBOL} {grouped}"


def _token(name: str) -> re.Pattern:
    return re.compile(re.escape("{" + name + "}"), re.IGNORECASE)


_TOKENS = {
    "nombre": _token("nombre"),
    "telefono": _token("telefono"),
    "ciudad": _token("ciudad"),
    "monto": _token("monto"),
    "fecha": _token("fecha"),
}


def render_message(template: str, recipient: Recipient) -> str:
    values = {
        "nombre": recipient.nombre or DEFAULT_NAME,
        "telefono": recipient.telefono or "",
        "ciudad": recipient.ciudad or "",
        "monto": format_money(recipient.monto),
        "fecha": recipient.fecha or recipient.fecha_nacimiento or PENDING_DATE,
    }
    message = template
    for name, pattern in _TOKENS.items():
        value = str(values[name])
        message = pattern.sub(lambda _match, value=value: value, message)
    return message
