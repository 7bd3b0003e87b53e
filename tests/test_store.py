import json
import os

import pytest

from interview_coach.infrastructure.data import MemorySessionStore, FileSessionStore


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemorySessionStore()
    return FileSessionStore(str(tmp_path / "store"))


def test_save_load_delete(store):
    store.save("interview_data_s1", {"sessionId": "s1", "responses": [{"score": 10}]})

    assert store.load("interview_data_s1") == {"sessionId": "s1", "responses": [{"score": 10}]}
    assert "interview_data_s1" in store
    assert store.keys() == ["interview_data_s1"]

    store.delete("interview_data_s1")
    assert store.load("interview_data_s1") is None
    store.delete("interview_data_s1")


def test_pop(store):
    store.save("resumeData", {"skills": ["sql"]})
    assert store.pop("resumeData") == {"skills": ["sql"]}
    assert store.pop("resumeData") is None


def test_loaded_values_are_copies(store):
    value = {"items": [1]}
    store.save("k", value)
    value["items"].append(2)

    loaded = store.load("k")
    loaded["items"].append(3)
    assert store.load("k") == {"items": [1]}


def test_file_store_sanitizes_keys(tmp_path):
    store = FileSessionStore(str(tmp_path))
    store.save("../escape/key", {"a": 1})

    assert os.listdir(tmp_path) == [".._escape_key.json"]
    assert store.load("../escape/key") == {"a": 1}


def test_file_store_ignores_bad_files(tmp_path):
    store = FileSessionStore(str(tmp_path))
    (tmp_path / "list.json").write_text(json.dumps([1, 2]))
    (tmp_path / "broken.json").write_text("{not json")

    assert store.load("list") is None
    assert store.load("broken") is None
