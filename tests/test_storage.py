from __future__ import annotations

import logging

from dormattend.models import AttendanceRecord, Dataset, Student
from dormattend.sample import sample_dataset
from dormattend.storage import LocalStorage, load_dataset, save_dataset
from dormattend.utils import STORAGE_KEY


def test_round_trip_preserves_everything(tmp_path):
    storage = LocalStorage(tmp_path)
    ds = Dataset(
        students=[Student("s2", "Zeynep Arslan", "2024-01"), Student("s1", "Bob")],
        records=[
            AttendanceRecord("s1", "2025-01-02", False, False),
            AttendanceRecord("s2", "2025-01-01", True, False),
        ],
    )

    assert save_dataset(storage, ds)

    assert load_dataset(storage) == ds


def test_round_trip_sample(tmp_path):
    storage = LocalStorage(tmp_path)
    ds = sample_dataset()
    save_dataset(storage, ds)

    assert load_dataset(storage) == ds


def test_persisted_layout_uses_camel_case(tmp_path):
    storage = LocalStorage(tmp_path)
    save_dataset(storage, Dataset([Student("s1", "A")], [AttendanceRecord("s1", "2025-01-01", True, False)]))

    raw = storage.load(STORAGE_KEY)

    assert raw == {
        "students": [{"id": "s1", "name": "A"}],
        "records": [{"studentId": "s1", "date": "2025-01-01", "morning": True, "evening": False}],
    }


def test_missing_key_is_empty_dataset(tmp_path):
    assert load_dataset(LocalStorage(tmp_path)) == Dataset.empty()


def test_corrupt_value_is_empty_dataset_and_logged(tmp_path, caplog):
    storage = LocalStorage(tmp_path)
    storage._path(STORAGE_KEY).write_text("{broken", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        ds = load_dataset(storage)

    assert ds == Dataset.empty()
    assert "Error loading" in caplog.text


def test_wrong_shape_is_empty_dataset(tmp_path):
    storage = LocalStorage(tmp_path)
    storage.save(STORAGE_KEY, {"students": [{"nope": 1}], "records": []})
    assert load_dataset(storage) == Dataset.empty()

    storage.save(STORAGE_KEY, [1, 2, 3])
    assert load_dataset(storage) == Dataset.empty()


def test_save_failure_is_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    storage = LocalStorage(blocker / "sub")

    with caplog.at_level(logging.ERROR):
        ok = storage.save(STORAGE_KEY, {"students": [], "records": []})

    assert ok is False
    assert "Error saving" in caplog.text


def test_unserializable_value_is_not_raised(tmp_path):
    assert LocalStorage(tmp_path).save("k", {"x": object()}) is False


def test_remove(tmp_path):
    storage = LocalStorage(tmp_path)
    storage.save("k", 1)
    storage.remove("k")
    storage.remove("k")

    assert storage.load("k") is None


def test_unusable_data_dir_starts_empty(tmp_path, monkeypatch):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr("dormattend.utils.USER_DATA_DIR", blocker / "sub")

    storage = LocalStorage()

    assert storage.directory == blocker / "sub"
    assert load_dataset(storage) == Dataset.empty()
    assert save_dataset(storage, Dataset.empty()) is False
