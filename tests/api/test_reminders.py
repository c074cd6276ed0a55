from fastapi.testclient import TestClient

from apps.api.main import app
from apps.api.routes import reminders as reminders_module
from packages.nuntius.storage.json_store import JsonReminderStore


OWNER = {"X-User-Id": "u1"}
OTHER = {"X-User-Id": "u2"}
ADMIN = {"X-User-Id": "root", "X-User-Role": "admin"}


def _client(monkeypatch, tmp_path):
    store = JsonReminderStore(str(tmp_path / "recordatorios.json"))
    monkeypatch.setattr(reminders_module, "_store", lambda: store)
    return TestClient(app), store


def test_reminders_crud(monkeypatch, tmp_path):
    client, store = _client(monkeypatch, tmp_path)

    create_resp = client.post(
        "/api/recordatorios",
        headers=OWNER,
        json={
            "tipo": "semanal",
            "instanceName": "ventas",
            "mensaje": "Hola {nombre}",
            "modoDestinatarios": "manual",
            "destinatarios": [
                {"nombre": "Ana", "telefono": "3001234567"},
                {"nombre": "Beto", "telefono": "3007654321"},
            ],
            "diaEnvio": "lunes",
            "horaEnvio": "09:00",
        },
    )
    assert create_resp.status_code == 201
    reminder = create_resp.json()
    assert reminder["id"].startswith("rec_")
    assert reminder["ownerId"] == "u1"
    assert reminder["activo"] is True
    assert reminder["totalDestinatarios"] == 2
    assert reminder["proximoEnvio"]
    assert reminder["historial"] == []

    assert len(client.get("/api/recordatorios", headers=OWNER).json()) == 1
    assert client.get("/api/recordatorios", headers=OTHER).json() == []
    assert len(client.get("/api/recordatorios", headers=ADMIN).json()) == 1

    forbidden = client.patch(f"/api/recordatorios/{reminder['id']}/toggle", headers=OTHER)
    assert forbidden.status_code == 403

    toggle_resp = client.patch(f"/api/recordatorios/{reminder['id']}/toggle", headers=OWNER)
    assert toggle_resp.status_code == 200
    assert toggle_resp.json()["activo"] is False

    delete_resp = client.delete(f"/api/recordatorios/{reminder['id']}", headers=OWNER)
    assert delete_resp.status_code == 200
    assert store.load() == []

    missing = client.delete(f"/api/recordatorios/{reminder['id']}", headers=OWNER)
    assert missing.status_code == 404


def test_create_requires_fields(monkeypatch, tmp_path):
    client, _ = _client(monkeypatch, tmp_path)

    missing = client.post(
        "/api/recordatorios", headers=OWNER, json={"tipo": "prueba", "mensaje": "Hola"}
    )
    assert missing.status_code == 422

    unknown_kind = client.post(
        "/api/recordatorios",
        headers=OWNER,
        json={"tipo": "diario", "instanceName": "ventas", "mensaje": "Hola"},
    )
    assert unknown_kind.status_code == 400

    bad_time = client.post(
        "/api/recordatorios",
        headers=OWNER,
        json={
            "tipo": "mensual",
            "instanceName": "ventas",
            "mensaje": "Hola",
            "horaEnvio": "25:99",
        },
    )
    assert bad_time.status_code == 400


def test_requires_caller_identity(monkeypatch, tmp_path):
    client, _ = _client(monkeypatch, tmp_path)
    assert client.get("/api/recordatorios").status_code == 401
