"""Tests for JSON storage of the todo list."""

import json
import sys
import pytest
from datetime import datetime, timezone
from unittest.mock import patch

from pocket_todo.storage import (
    Storage,
    StorageError,
    StorageCorruptError,
    InitStatus,
)
from pocket_todo.todo import ToDoItem


CREATED = datetime(2022, 1, 1, tzinfo=timezone.utc)
COMPLETED = datetime(2022, 1, 2, 8, 0, 0, tzinfo=timezone.utc)


def sample_items():
    return [
        ToDoItem(id=1, text="Walk the dog", created_date=CREATED),
        ToDoItem(id=4, text="Pay rent", done=True,
                 created_date=CREATED, completed_date=COMPLETED),
        ToDoItem(id=2, text="Buy milk", created_date=CREATED),
    ]


class TestLoad:
    """Reading the storage file."""

    def test_missing_file_means_uninitialized(self, config):
        storage = Storage(config)

        assert storage.load() is None

    def test_empty_array_loads_empty_list(self, storage):
        assert storage.load() == []

    def test_reads_items_in_file_order(self, storage):
        storage.storage_path.write_text(json.dumps([
            {"id": 3, "text": "c", "done": False, "created_date": 1640995200},
            {"id": 1, "text": "a", "done": True, "created_date": 1640995200,
             "completed_date": 1641110400},
        ]))

        items = storage.load()

        assert [i.id for i in items] == [3, 1]
        assert items[1].completed_date == COMPLETED

    @pytest.mark.parametrize("contents", [
        "",
        "not json",
        "{\"id\": 1}",
        "[{\"id\": 1, \"text\": \"a\"}]",
        "[1, 2, 3]",
    ])
    def test_bad_contents_raise_corrupt(self, storage, contents):
        storage.storage_path.write_text(contents)

        with pytest.raises(StorageCorruptError) as exc_info:
            storage.load()

        assert exc_info.value.path == storage.storage_path
        assert exc_info.value.reason

    def test_out_of_range_timestamp_is_corrupt(self, storage):
        storage.storage_path.write_text(
            '[{"id": 1, "text": "a", "done": false, "created_date": 100000000000000000000}]'
        )

        with pytest.raises(StorageCorruptError, match="created_date"):
            storage.load()

    def test_out_of_range_completed_date_is_corrupt(self, storage):
        storage.storage_path.write_text(
            '[{"id": 1, "text": "a", "done": true, "created_date": 0,'
            ' "completed_date": -100000000000000000000}]'
        )

        with pytest.raises(StorageCorruptError, match="completed_date"):
            storage.load()

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"),
                        reason="integer digit limit needs Python 3.11+")
    def test_integer_over_digit_limit_is_corrupt(self, storage):
        huge_id = "9" * (sys.get_int_max_str_digits() + 100)
        storage.storage_path.write_text(
            f'[{{"id": {huge_id}, "text": "a", "done": false, "created_date": 0}}]'
        )

        with pytest.raises(StorageCorruptError):
            storage.load()

    def test_deeply_nested_json_is_corrupt(self, storage):
        depth = sys.getrecursionlimit() * 10
        storage.storage_path.write_text("[" * depth + "]" * depth)

        with pytest.raises(StorageCorruptError):
            storage.load()

    def test_invalid_utf8_is_corrupt(self, storage):
        storage.storage_path.write_bytes(b'[{"text": "\xff\xfe"}]')

        with pytest.raises(StorageCorruptError, match="UTF-8"):
            storage.load()

    def test_corrupt_error_is_a_storage_error(self, storage):
        storage.storage_path.write_text("{")

        with pytest.raises(StorageError, match="is corrupt"):
            storage.load()

    def test_unreadable_path_raises_storage_error(self, storage):
        storage.storage_path.unlink()
        storage.storage_path.mkdir()

        with pytest.raises(StorageError) as exc_info:
            storage.load()

        assert not isinstance(exc_info.value, StorageCorruptError)


class TestSave:
    """Writing the storage file."""

    def test_round_trip(self, storage):
        items = sample_items()

        assert storage.save(items) is True

        assert storage.load() == items

    def test_writes_json_array_with_epoch_seconds(self, storage):
        storage.save(sample_items())

        data = json.loads(storage.storage_path.read_text())

        assert isinstance(data, list)
        assert data[0] == {
            "id": 1,
            "text": "Walk the dog",
            "done": False,
            "created_date": 1640995200,
            "completed_date": None,
        }
        assert data[1]["completed_date"] == 1641110400

    def test_save_overwrites_whole_list(self, storage):
        storage.save(sample_items())
        storage.save([ToDoItem(id=9, text="only", created_date=CREATED)])

        assert [i.id for i in storage.load()] == [9]

    def test_missing_directory_fails_without_raising(self, config):
        storage = Storage(config)

        assert storage.save(sample_items()) is False
        assert not storage.storage_path.exists()

    def test_failed_write_keeps_previous_contents(self, storage):
        storage.save(sample_items())
        before = storage.storage_path.read_text()

        with patch("pocket_todo.storage.json.dumps", side_effect=TypeError("boom")):
            assert storage.save([]) is False

        assert storage.storage_path.read_text() == before

    def test_failed_rename_cleans_up_temp_file(self, storage):
        with patch("pathlib.Path.replace", side_effect=OSError("disk full")):
            assert storage.save(sample_items()) is False

        assert storage.load() == []
        assert list(storage.data_dir.glob("*.tmp")) == []


class TestInitialize:
    """Creating the storage directory and placeholder file."""

    def test_fresh_init_creates_dir_and_placeholder(self, config):
        storage = Storage(config)

        result = storage.initialize()

        assert result.status is InitStatus.CREATED
        assert result.ok
        assert storage.data_dir.is_dir()
        assert storage.placeholder_path.name == "todo.txt"
        assert storage.placeholder_path.exists()

    def test_init_does_not_create_json_storage(self, config):
        storage = Storage(config)
        storage.initialize()

        assert not storage.storage_path.exists()
        assert storage.load() is None

    def test_existing_directory_is_fine(self, config):
        storage = Storage(config)
        storage.data_dir.mkdir(parents=True)

        result = storage.initialize()

        assert result.status is InitStatus.CREATED

    def test_second_init_reports_existing_file(self, config):
        storage = Storage(config)
        storage.initialize()

        result = storage.initialize()

        assert result.status is InitStatus.FILE_ERROR
        assert not result.ok
        assert result.error

    def test_directory_error_is_reported(self, config, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        config.data_dir = str(blocker / "todo")

        result = Storage(config).initialize()

        assert result.status is InitStatus.DIR_ERROR
        assert result.error
