"""Persisted state containers.

The snapshot is the single object written by the persistence gateway: the
global settings plus the list of learner profiles.
"""
from __future__ import annotations
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .avatar import default_avatar

GUEST_ID = "guest"
GUEST_NAME = "Guest"
MISSION_ALL = "all"


@dataclass
class LearnerProfile:
    id: str
    name: str
    stars: int = 0
    score: int = 0
    zone_progress: Dict[str, bool] = field(default_factory=dict)
    avatar: Dict[str, Any] = field(default_factory=default_avatar)
    updated_at: float = field(default_factory=time.time)

    def is_zone_complete(self, zone_id: str) -> bool:
        return bool(self.zone_progress.get(zone_id, False))

    def touch(self) -> None:
        self.updated_at = time.time()


@dataclass
class Settings:
    read_aloud: bool = False
    projector_mode: bool = False
    class_name: str = ""
    # "all" or a single zone id
    mission: str = MISSION_ALL
    active_learner_id: str = GUEST_ID


@dataclass
class Snapshot:
    settings: Settings = field(default_factory=Settings)
    learners: List[LearnerProfile] = field(default_factory=list)

    def find(self, learner_id: str) -> LearnerProfile | None:
        for learner in self.learners:
            if learner.id == learner_id:
                return learner
        return None

    def ensure_guest(self) -> LearnerProfile:
        """Return the guest profile, re-adding it when missing."""
        guest = self.find(GUEST_ID)
        if guest is None:
            guest = make_learner(GUEST_ID, GUEST_NAME)
            self.learners.append(guest)
        return guest


def make_learner(learner_id: str, name: str) -> LearnerProfile:
    """Fresh profile with zero progress and the default avatar."""
    return LearnerProfile(id=learner_id, name=name)


def default_snapshot() -> Snapshot:
    """Snapshot used on first run or after an unreadable save."""
    return Snapshot(settings=Settings(), learners=[make_learner(GUEST_ID, GUEST_NAME)])
