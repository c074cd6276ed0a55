import datetime as dt
from zoneinfo import ZoneInfo

import pytest

from packages.nuntius.reminders.models import ReminderKind
from packages.nuntius.reminders.service import (
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
from packages.nuntius.storage.json_store import JsonReminderStore, JsonTemplateStore


BOGOTA = ZoneInfo("America/Bogota")
# Sunday 2026-10-18 12:00 in Bogota
NOW = dt.datetime(2026, 10, 18, 17, 0, tzinfo=dt.timezone.utc)


def _store(tmp_path):
    return JsonReminderStore(str(tmp_path / "recordatorios.json"))


def _weekly(store, now=NOW, owner_id="u1"):
    return create_reminder(
        store,
        owner_id=owner_id,
        kind="semanal",
        instance_name="ventas",
        message="Hola {nombre}",
        recipients=[{"nombre": "Ana", "telefono": "3001234567"}],
        recipient_mode="manual",
        send_weekday="lunes",
        send_time="09:00",
        now=now,
    )


def test_create_weekly_reminder(tmp_path):
    store = _store(tmp_path)

    reminder = _weekly(store)

    assert reminder.id.startswith("rec_")
    assert reminder.kind is ReminderKind.WEEKLY
    assert reminder.active is True
    assert reminder.total_recipients == 1
    assert reminder.history == []
    assert reminder.next_send_at == dt.datetime(2026, 10, 19, 9, 0, tzinfo=BOGOTA)

    stored = get_reminder(store, reminder.id)
    assert stored.next_send_at == reminder.next_send_at
    assert stored.recipients[0].nombre == "Ana"
    assert stored.recipient_mode == "manual"


def test_create_one_time_defaults_to_now(tmp_path):
    reminder = create_reminder(
        _store(tmp_path),
        owner_id="u1",
        kind="prueba",
        instance_name="ventas",
        message="Hola",
        now=NOW,
    )
    assert reminder.next_send_at == NOW


def test_create_one_time_naive_send_at_is_local(tmp_path):
    reminder = create_reminder(
        _store(tmp_path),
        owner_id="u1",
        kind="prueba",
        instance_name="ventas",
        message="Hola",
        send_at=dt.datetime(2026, 10, 20, 8, 30),
        now=NOW,
    )
    assert reminder.next_send_at == dt.datetime(2026, 10, 20, 8, 30, tzinfo=BOGOTA)


def test_create_birthday_sends_tomorrow_at_nine(tmp_path):
    reminder = create_reminder(
        _store(tmp_path),
        owner_id="u1",
        kind="cumpleanos",
        instance_name="ventas",
        message="Feliz cumple {nombre}",
        now=NOW,
    )
    assert reminder.next_send_at == dt.datetime(2026, 10, 19, 9, 0, tzinfo=BOGOTA)


@pytest.mark.parametrize(
    "overrides",
    [
        {"kind": ""},
        {"kind": "diario"},
        {"instance_name": ""},
        {"message": ""},
        {"kind": "semanal", "send_time": "9am"},
    ],
)
def test_create_rejects_invalid_definitions(tmp_path, overrides):
    values = dict(owner_id="u1", kind="prueba", instance_name="ventas", message="Hola")
    values.update(overrides)
    with pytest.raises(ValueError):
        create_reminder(_store(tmp_path), **values)


def test_toggle_rearms_stale_recurring_reminder(tmp_path):
    store = _store(tmp_path)
    reminder = _weekly(store, now=NOW - dt.timedelta(days=30))
    paused = toggle_reminder(store, reminder.id, owner_id="u1", now=NOW - dt.timedelta(days=30))
    assert paused.active is False

    resumed = toggle_reminder(store, reminder.id, owner_id="u1", now=NOW)

    assert resumed.active is True
    assert resumed.next_send_at > NOW
    assert resumed.next_send_at == dt.datetime(2026, 10, 19, 9, 0, tzinfo=BOGOTA)
    assert get_reminder(store, reminder.id).next_send_at == resumed.next_send_at


def test_toggle_keeps_future_schedule(tmp_path):
    store = _store(tmp_path)
    reminder = _weekly(store)
    toggle_reminder(store, reminder.id, owner_id="u1", now=NOW)

    resumed = toggle_reminder(store, reminder.id, owner_id="u1", now=NOW + dt.timedelta(hours=1))

    assert resumed.active is True
    assert resumed.next_send_at == reminder.next_send_at


def test_toggle_one_time_does_not_reschedule(tmp_path):
    store = _store(tmp_path)
    reminder = create_reminder(
        store, owner_id="u1", kind="prueba", instance_name="ventas", message="Hola", now=NOW
    )
    toggle_reminder(store, reminder.id, owner_id="u1", now=NOW)

    resumed = toggle_reminder(store, reminder.id, owner_id="u1", now=NOW + dt.timedelta(days=1))

    assert resumed.active is True
    assert resumed.next_send_at == NOW


def test_owner_scoping(tmp_path):
    store = _store(tmp_path)
    mine = _weekly(store, owner_id="u1")
    _weekly(store, owner_id="u2")

    assert [item.id for item in list_reminders(store, owner_id="u1")] == [mine.id]
    assert len(list_reminders(store, owner_id="admin", is_admin=True)) == 2

    with pytest.raises(PermissionDenied):
        toggle_reminder(store, mine.id, owner_id="u2")
    with pytest.raises(PermissionDenied):
        delete_reminder(store, mine.id, owner_id="u2")

    delete_reminder(store, mine.id, owner_id="admin", is_admin=True)
    with pytest.raises(ReminderNotFound):
        get_reminder(store, mine.id)
    with pytest.raises(ReminderNotFound):
        toggle_reminder(store, mine.id, owner_id="u1")


def test_template_crud(tmp_path):
    store = JsonTemplateStore(str(tmp_path / "plantillas.json"))

    template = create_template(store, "u1", " Cobro ", "Hola {nombre}, debes {monto}")
    assert template.id.startswith("plt_")
    assert template.name == "Cobro"
    create_template(store, "u2", "Otro", "Hola")

    assert [item.id for item in list_templates(store, owner_id="u1")] == [template.id]

    updated = update_template(store, template.id, message="Nuevo", owner_id="u1")
    assert updated.name == "Cobro"
    assert updated.message == "Nuevo"

    with pytest.raises(PermissionDenied):
        update_template(store, template.id, name="x", owner_id="u2")
    with pytest.raises(ValueError):
        create_template(store, "u1", "", "Hola")

    delete_template(store, template.id, owner_id="u1")
    with pytest.raises(TemplateNotFound):
        delete_template(store, template.id, owner_id="u1")
