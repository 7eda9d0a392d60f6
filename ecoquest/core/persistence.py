"""Save/Load gateway for Eco Quest.

The whole application state is one JSON snapshot stored under a single key
of a key-value store. Loading never fails: a missing or unreadable snapshot
is replaced by a fresh default one.
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import jsonschema

from .errors import PersistenceCorruptError
from .schema import SNAPSHOT_SCHEMA
from .state import (
    GUEST_ID, MISSION_ALL, LearnerProfile, Settings, Snapshot, default_snapshot,
)
from .avatar import default_avatar

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-memory store, mainly for tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """One file per key inside a directory.

    Writes go to a temporary file in the same directory which is then moved
    over the target with os.replace, so a reader sees either the old or the
    new snapshot, never a partial one.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


def serialize_snapshot(snapshot: Snapshot) -> Dict[str, Any]:
    """Convert a Snapshot to the stored dict layout."""
    s = snapshot.settings
    return {
        "readAloud": s.read_aloud,
        "projectorMode": s.projector_mode,
        "className": s.class_name,
        "teacherMission": s.mission,
        "activeStudentId": s.active_learner_id,
        "students": [
            {
                "id": p.id,
                "name": p.name,
                "stars": p.stars,
                "score": p.score,
                "zoneProgress": dict(p.zone_progress),
                "avatar": dict(p.avatar),
                "updatedAt": p.updated_at,
            }
            for p in snapshot.learners
        ],
    }


def deserialize_snapshot(data: Dict[str, Any]) -> Snapshot:
    """Convert a stored dict back to a Snapshot, defaulting missing fields.

    Raises:
        PersistenceCorruptError: If the data violates the snapshot schema
    """
    try:
        jsonschema.validate(data, SNAPSHOT_SCHEMA)
    except jsonschema.ValidationError as e:
        raise PersistenceCorruptError(f"Snapshot failed validation: {e.message}") from e

    settings = Settings(
        read_aloud=data.get("readAloud", False),
        projector_mode=data.get("projectorMode", False),
        class_name=data.get("className", ""),
        mission=data.get("teacherMission", MISSION_ALL),
        active_learner_id=data.get("activeStudentId", GUEST_ID),
    )

    learners = []
    for raw in data.get("students", []):
        avatar = default_avatar()
        avatar.update(raw.get("avatar", {}))
        learner = LearnerProfile(
            id=raw["id"],
            name=raw.get("name", raw["id"]),
            stars=raw.get("stars", 0),
            score=raw.get("score", 0),
            zone_progress=dict(raw.get("zoneProgress", {})),
            avatar=avatar,
        )
        if "updatedAt" in raw:
            learner.updated_at = raw["updatedAt"]
        learners.append(learner)

    snapshot = Snapshot(settings=settings, learners=learners)
    snapshot.ensure_guest()
    return snapshot


class PersistenceGateway:
    """Reads and writes the single application snapshot."""

    def __init__(self, store: KeyValueStore, key: str = "ecoQuestAdventure_cartoon_v2"):
        self.store = store
        self.key = key

    def load(self) -> Snapshot:
        """Load the snapshot, substituting defaults on absence or corruption."""
        raw = self.store.get(self.key)
        if raw is None:
            logger.info("No saved snapshot under '%s', starting fresh", self.key)
            return default_snapshot()
        try:
            return self._parse(raw)
        except PersistenceCorruptError as e:
            logger.warning("Discarding unreadable snapshot: %s", e)
            return default_snapshot()

    def _parse(self, raw: str) -> Snapshot:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceCorruptError(f"Invalid JSON in snapshot: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceCorruptError("Snapshot root must be an object")
        return deserialize_snapshot(data)

    def save(self, snapshot: Snapshot) -> None:
        """Serialize the full snapshot in a single write."""
        payload = json.dumps(serialize_snapshot(snapshot), ensure_ascii=False)
        self.store.set(self.key, payload)
        logger.debug("Snapshot saved (%d learners)", len(snapshot.learners))

    def clear(self) -> None:
        delete = getattr(self.store, "delete", None)
        if delete is not None:
            delete(self.key)
