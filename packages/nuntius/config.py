from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_DATA_DIR = os.path.join("apps", "api", "data")


@dataclass(frozen=True)
class Settings:
    evolution_api_url: str
    evolution_api_key: str
    evolution_timeout: float
    reminders_path: str
    templates_path: str
    google_sheet_id: str
    google_credentials_path: str
    google_sheet_name: str
    scheduler_interval_seconds: int
    send_delay_seconds: float
    scheduler_timezone: str
    scheduler_enabled: bool


def _data_dir() -> str:
    return os.getenv("NUNTIUS_DATA_DIR", DEFAULT_DATA_DIR)


def load_settings() -> Settings:
    return Settings(
        evolution_api_url=os.getenv("EVOLUTION_API_URL", ""),
        evolution_api_key=os.getenv("EVOLUTION_API_KEY", ""),
        evolution_timeout=float(os.getenv("EVOLUTION_TIMEOUT_SECONDS", "15")),
        reminders_path=os.getenv(
            "RECORDATORIOS_PATH", os.path.join(_data_dir(), "recordatorios.json")
        ),
        templates_path=os.getenv(
            "PLANTILLAS_PATH", os.path.join(_data_dir(), "plantillas.json")
        ),
        google_sheet_id=os.getenv("GOOGLE_SHEET_ID", ""),
        google_credentials_path=os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"),
        google_sheet_name=os.getenv("GOOGLE_SHEET_NAME", "Clientes"),
        scheduler_interval_seconds=int(os.getenv("SCHEDULER_INTERVAL_SECONDS", "60")),
        send_delay_seconds=float(os.getenv("SEND_DELAY_SECONDS", "2")),
        scheduler_timezone=os.getenv("SCHEDULER_TIMEZONE", "America/Bogota"),
        scheduler_enabled=os.getenv("REMINDERS_SCHEDULER_ENABLED", "true").lower() == "true",
    )
