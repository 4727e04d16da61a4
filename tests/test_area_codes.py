import threading
import time
from pathlib import Path

import pytest

from stationdesk.persistence.store import LocalStore
from stationdesk.services.area_codes import (
    AreaCodeError,
    assign_area_code,
    create_area_code,
    delete_area_code,
    toggle_area_code_status,
    update_area_code,
)


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(root=tmp_path)


def _create(store, **overrides):
    params = {"code": "AC001", "name": "Nairobi CBD", "region": "Nairobi", "min_range": 100, "max_range": 500}
    params.update(overrides)
    return create_area_code(store, **params)


def test_create_prepends_new_codes(store: LocalStore) -> None:
    first = _create(store)
    second = _create(store, code="AC002", name="Westlands", min_range=501, max_range=800)

    assert [item.id for item in store.list_area_codes()] == [second.id, first.id]
    assert first.status == "active"
    assert first.assigned_to is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"code": " "},
        {"min_range": 0},
        {"min_range": 600, "max_range": 500},
        {"status": "archived"},
    ],
)
def test_create_validates_fields(store: LocalStore, overrides: dict) -> None:
    with pytest.raises(AreaCodeError):
        _create(store, **overrides)
    assert store.list_area_codes() == []


def test_update_toggle_assign_and_delete(store: LocalStore) -> None:
    item = _create(store)

    updated = update_area_code(store, item.id, name="CBD", max_range=450)
    assert (updated.name, updated.max_range) == ("CBD", 450)

    assert toggle_area_code_status(store, item.id).status == "inactive"
    assert toggle_area_code_status(store, item.id).status == "active"

    assert assign_area_code(store, item.id, "user-2").assigned_to == "user-2"
    assert assign_area_code(store, item.id, "").assigned_to is None

    delete_area_code(store, item.id)
    assert store.list_area_codes() == []


def test_update_rejects_inverted_range_and_unknown_id(store: LocalStore) -> None:
    item = _create(store)
    with pytest.raises(AreaCodeError):
        update_area_code(store, item.id, min_range=900)
    with pytest.raises(LookupError):
        update_area_code(store, "missing", name="x")
    with pytest.raises(LookupError):
        delete_area_code(store, "missing")


def test_concurrent_creates_keep_every_code(store: LocalStore, monkeypatch: pytest.MonkeyPatch) -> None:
    read_json = store.storage.read_json

    def slow_read(key, default):
        data = read_json(key, default)
        time.sleep(0.05)
        return data

    monkeypatch.setattr(store.storage, "read_json", slow_read)
    threads = [
        threading.Thread(target=_create, args=(store,), kwargs={"code": f"AC00{n}", "min_range": n, "max_range": n})
        for n in (1, 2, 3)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(item.code for item in store.list_area_codes()) == ["AC001", "AC002", "AC003"]


def test_concurrent_toggle_and_assign_keep_both_changes(store: LocalStore, monkeypatch: pytest.MonkeyPatch) -> None:
    item = _create(store)
    read_json = store.storage.read_json

    def slow_read(key, default):
        data = read_json(key, default)
        time.sleep(0.05)
        return data

    monkeypatch.setattr(store.storage, "read_json", slow_read)
    threads = [
        threading.Thread(target=toggle_area_code_status, args=(store, item.id)),
        threading.Thread(target=assign_area_code, args=(store, item.id, "user-9")),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    (stored,) = store.list_area_codes()
    assert (stored.status, stored.assigned_to) == ("inactive", "user-9")
