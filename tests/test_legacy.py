import json

import pytest
from fastapi.testclient import TestClient

from legacy import import_legacy_data

BOOKINGS = {
    "2024-06-01": [
        {"id": 1717200000000, "customerName": "Alex", "phone": "555-1111",
         "date": "2024-06-01", "time": "09:00", "createdAt": "2024-05-20T10:00:00.000Z"},
        {"id": 1717200000001, "customerName": "Sam", "phone": "555-2222",
         "date": "2024-06-01", "time": "10:00", "createdAt": "2024-05-20T11:00:00.000Z"},
    ],
}

NOTIFICATIONS = [
    dict(BOOKINGS["2024-06-01"][1], read=False),
    dict(BOOKINGS["2024-06-01"][0], read=True),
]


@pytest.fixture
def legacy_dir(tmp_path):
    data_dir = tmp_path / "legacy"
    data_dir.mkdir()
    (data_dir / "bookings.json").write_text(json.dumps(BOOKINGS))
    (data_dir / "notifications.json").write_text(json.dumps(NOTIFICATIONS))
    return data_dir


@pytest.mark.asyncio
async def test_import_into_empty_store(legacy_dir, store, notification_log):
    assert await import_legacy_data(legacy_dir, store) is True

    bookings = await store.load()
    assert [b.id for b in bookings["2024-06-01"]] == [1717200000000, 1717200000001]
    assert await store.available_slots("2024-06-01") == [
        slot for slot in await store.available_slots("2024-06-02") if slot not in ("09:00", "10:00")
    ]
    feed = await notification_log.list()
    assert [(n.customer_name, n.read) for n in feed] == [("Sam", False), ("Alex", True)]


@pytest.mark.asyncio
async def test_import_skipped_when_store_has_data(legacy_dir, store):
    await store.create("2024-07-01", "09:00", "Kim", "1")

    assert await import_legacy_data(legacy_dir, store) is False
    assert list(await store.load()) == ["2024-07-01"]


@pytest.mark.asyncio
async def test_missing_or_corrupt_files(tmp_path, store):
    assert await import_legacy_data(tmp_path, store) is False

    (tmp_path / "bookings.json").write_text("{not json")
    (tmp_path / "notifications.json").write_text('{"not": "a list"}')
    assert await import_legacy_data(tmp_path, store) is False
    assert await store.load() == {}


@pytest.mark.asyncio
async def test_malformed_entries_import_nothing(tmp_path, store):
    (tmp_path / "bookings.json").write_text(json.dumps({"2024-06-01": [{"id": "x"}]}))

    assert await import_legacy_data(tmp_path, store) is False
    assert await store.load() == {}


@pytest.mark.asyncio
async def test_bad_notifications_keep_bookings_out_too(legacy_dir, store, notification_log):
    (legacy_dir / "notifications.json").write_text(json.dumps([{"id": "x"}]))

    assert await import_legacy_data(legacy_dir, store) is False
    assert await store.load() == {}
    assert await notification_log.list() == []

    # Once the file is fixed the next startup imports everything
    (legacy_dir / "notifications.json").write_text(json.dumps(NOTIFICATIONS))
    assert await import_legacy_data(legacy_dir, store) is True
    assert len(await notification_log.list()) == 2


@pytest.mark.asyncio
async def test_double_booked_slot_imports_nothing(tmp_path, store, notification_log):
    clash = dict(BOOKINGS["2024-06-01"][1], time="09:00")
    (tmp_path / "bookings.json").write_text(json.dumps({"2024-06-01": [BOOKINGS["2024-06-01"][0], clash]}))
    (tmp_path / "notifications.json").write_text(json.dumps(NOTIFICATIONS))

    assert await import_legacy_data(tmp_path, store) is False
    assert await store.load() == {}
    assert await notification_log.list() == []


@pytest.mark.asyncio
async def test_bucket_that_is_not_a_list(tmp_path, store):
    (tmp_path / "bookings.json").write_text(json.dumps({"2024-06-01": "oops"}))

    assert await import_legacy_data(tmp_path, store) is False
    assert await store.load() == {}


def test_bad_legacy_file_does_not_stop_startup(tmp_path, database_url, monkeypatch):
    (tmp_path / "bookings.json").write_text(json.dumps({"2024-06-01": "oops"}))
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("LEGACY_DATA_DIR", str(tmp_path))
    from main import app

    with TestClient(app) as client:
        assert client.get("/api/bookings").json() == {}
        assert client.get("/health").json() == {"status": "ok"}


def test_import_on_startup(legacy_dir, database_url, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("LEGACY_DATA_DIR", str(legacy_dir))
    from main import app

    with TestClient(app) as client:
        stored = client.get("/api/bookings").json()
        feed = client.get("/api/notifications").json()

    assert [b["customerName"] for b in stored["2024-06-01"]] == ["Alex", "Sam"]
    assert [n["customerName"] for n in feed] == ["Sam", "Alex"]
