from packages.nuntius.config import load_settings


def test_settings_defaults(monkeypatch):
    for name in (
        "EVOLUTION_API_URL",
        "GOOGLE_SHEET_ID",
        "SCHEDULER_INTERVAL_SECONDS",
        "SEND_DELAY_SECONDS",
        "SCHEDULER_TIMEZONE",
        "REMINDERS_SCHEDULER_ENABLED",
        "RECORDATORIOS_PATH",
        "NUNTIUS_DATA_DIR",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.evolution_api_url == ""
    assert settings.google_sheet_id == ""
    assert settings.scheduler_interval_seconds == 60
    assert settings.send_delay_seconds == 2.0
    assert settings.scheduler_timezone == "America/Bogota"
    assert settings.scheduler_enabled is True
    assert settings.reminders_path.endswith("recordatorios.json")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("EVOLUTION_API_URL", "https://evo.example.com")
    monkeypatch.setenv("SCHEDULER_INTERVAL_SECONDS", "30")
    monkeypatch.setenv("SEND_DELAY_SECONDS", "0.5")
    monkeypatch.setenv("REMINDERS_SCHEDULER_ENABLED", "false")
    monkeypatch.setenv("NUNTIUS_DATA_DIR", "/srv/nuntius")

    settings = load_settings()

    assert settings.evolution_api_url == "https://evo.example.com"
    assert settings.scheduler_interval_seconds == 30
    assert settings.send_delay_seconds == 0.5
    assert settings.scheduler_enabled is False
    assert settings.templates_path == "/srv/nuntius/plantillas.json"
