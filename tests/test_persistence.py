"""Test snapshot save/load and the key-value stores."""

import sys
import os
import json
import logging
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from ecoquest.core.errors import PersistenceCorruptError
from ecoquest.core.persistence import (
    JsonFileStore, MemoryStore, PersistenceGateway, deserialize_snapshot, serialize_snapshot,
)
from ecoquest.core.state import GUEST_ID, default_snapshot, make_learner

KEY = "ecoQuestAdventure_cartoon_v2"


class CountingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, key, value):
        self.writes += 1
        super().set(key, value)


def test_missing_snapshot_gives_default():
    snap = PersistenceGateway(MemoryStore(), KEY).load()
    assert [l.id for l in snap.learners] == [GUEST_ID]
    assert snap.settings.mission == "all"
    assert snap.settings.active_learner_id == GUEST_ID


@pytest.mark.parametrize("raw", [
    "{not json",
    "[1, 2, 3]",
    json.dumps({"students": [{"id": "s_1", "stars": -4}]}),
    json.dumps({"readAloud": "yes"}),
])
def test_corrupt_snapshot_falls_back_to_default(raw, caplog):
    gw = PersistenceGateway(MemoryStore({KEY: raw}), KEY)
    with caplog.at_level(logging.WARNING):
        snap = gw.load()
    assert [l.id for l in snap.learners] == [GUEST_ID]
    assert "unreadable snapshot" in caplog.text


def test_missing_fields_are_defaulted():
    raw = json.dumps({"students": [{"id": "s_1", "name": "Ava", "avatar": {"hat": "cap_leaf"}}]})
    snap = PersistenceGateway(MemoryStore({KEY: raw}), KEY).load()

    ava = snap.find("s_1")
    assert ava.stars == 0 and ava.score == 0
    assert ava.zone_progress == {}
    # Partial avatar merged over the default one
    assert ava.avatar["hat"] == "cap_leaf"
    assert ava.avatar["skin"] == "warm2"
    # Guest is always present
    assert snap.find(GUEST_ID) is not None
    assert snap.settings.class_name == ""


def test_save_writes_once_and_reloads():
    store = CountingStore()
    gw = PersistenceGateway(store, KEY)
    snap = default_snapshot()
    ava = make_learner("s_1", "Ava")
    ava.stars = 9
    ava.zone_progress["forest"] = True
    snap.learners.append(ava)
    snap.settings.class_name = "4B"

    gw.save(snap)
    assert store.writes == 1

    again = gw.load()
    assert again.find("s_1").stars == 9
    assert again.find("s_1").is_zone_complete("forest")
    assert again.settings.class_name == "4B"


def test_stored_layout_keys():
    data = serialize_snapshot(default_snapshot())
    assert set(data) == {"readAloud", "projectorMode", "className", "teacherMission",
                         "activeStudentId", "students"}
    assert set(data["students"][0]) >= {"id", "name", "stars", "score", "zoneProgress", "avatar"}


def test_deserialize_raises_on_schema_violation():
    with pytest.raises(PersistenceCorruptError):
        deserialize_snapshot({"students": "nope"})


def test_clear_removes_snapshot():
    store = MemoryStore()
    gw = PersistenceGateway(store, KEY)
    gw.save(default_snapshot())
    gw.clear()
    assert store.get(KEY) is None


def test_json_file_store_roundtrip(tmp_path):
    store = JsonFileStore(tmp_path / "saves")
    assert store.get("k") is None
    store.set("k", '{"a": 1}')
    store.set("k", '{"a": 2}')

    assert store.get("k") == '{"a": 2}'
    # No temporary files left behind
    assert [p.name for p in (tmp_path / "saves").iterdir()] == ["k.json"]
    store.delete("k")
    assert store.get("k") is None
