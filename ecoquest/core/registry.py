"""Learner registry: the roster, the active learner and class settings.

Every mutation is persisted through the gateway before the call returns.
"""
from __future__ import annotations
import logging
import secrets
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import UnknownLearnerError
from .ledger import current_badge, sanitize_avatar
from .persistence import PersistenceGateway
from .state import (
    GUEST_ID, GUEST_NAME, MISSION_ALL, LearnerProfile, Settings, Snapshot,
    default_snapshot, make_learner,
)

logger = logging.getLogger(__name__)


class LearnerRegistry:
    """Owns learner profiles and the notion of the active learner."""

    def __init__(self, gateway: PersistenceGateway, score_per_star: int = 10,
                 zone_ids: Optional[Iterable[str]] = None):
        self.gateway = gateway
        self.score_per_star = score_per_star
        # Used to validate mission restrictions; None accepts any id
        self.zone_ids = set(zone_ids) if zone_ids is not None else None
        self.snapshot: Snapshot = gateway.load()
        mission = self.settings.mission
        if mission != MISSION_ALL and self.zone_ids is not None and mission not in self.zone_ids:
            logger.warning("Stored mission '%s' names no known zone, using 'all'", mission)
            self.settings.mission = MISSION_ALL
            self.save()

    @property
    def settings(self) -> Settings:
        return self.snapshot.settings

    def save(self) -> None:
        self.gateway.save(self.snapshot)

    # --- Lookup ---
    def list_learners(self) -> List[LearnerProfile]:
        return list(self.snapshot.learners)

    def get(self, learner_id: str) -> LearnerProfile:
        learner = self.snapshot.find(learner_id)
        if learner is None:
            raise UnknownLearnerError(learner_id)
        return learner

    def get_active(self) -> LearnerProfile:
        """Active learner, falling back to the guest if the id is stale."""
        learner = self.snapshot.find(self.settings.active_learner_id)
        if learner is not None:
            return learner
        logger.warning("Active learner '%s' not found, falling back to guest",
                       self.settings.active_learner_id)
        guest = self.snapshot.ensure_guest()
        self.settings.active_learner_id = guest.id
        self.save()
        return guest

    def set_active(self, learner_id: str) -> LearnerProfile:
        learner = self.get(learner_id)
        self.settings.active_learner_id = learner.id
        self.save()
        logger.info("Active learner: %s", learner.name)
        return learner

    # --- Currency ---
    def _target(self, learner_id: Optional[str]) -> LearnerProfile:
        return self.get(learner_id) if learner_id is not None else self.get_active()

    def award_currency(self, amount: int, reason: str = "", learner_id: Optional[str] = None) -> LearnerProfile:
        """Add stars (and proportional score) to a learner, the active one by default.

        Negative amounts are teacher adjustments; balances never drop below 0.

        Raises:
            UnknownLearnerError: If learner_id is given and does not exist
        """
        learner = self._target(learner_id)
        learner.stars = max(0, learner.stars + amount)
        learner.score = max(0, learner.score + amount * self.score_per_star)
        learner.touch()
        self.save()
        logger.info("%+d stars for %s (%s) -> %d", amount, learner.name, reason or "award", learner.stars)
        return learner

    def mark_zone_complete(self, zone_id: str, learner_id: Optional[str] = None) -> bool:
        """Set the completion flag of a learner, the active one by default.

        Returns:
            True if the flag was newly set, False if it was already set
        """
        learner = self._target(learner_id)
        if learner.is_zone_complete(zone_id):
            return False
        learner.zone_progress[zone_id] = True
        learner.touch()
        self.save()
        return True

    # --- Roster CRUD ---
    def create_learner(self, name: str) -> LearnerProfile:
        name = (name or "").strip()
        if not name:
            raise ValueError("Learner name must not be empty")
        learner_id = self._new_id()
        learner = make_learner(learner_id, name)
        self.snapshot.learners.append(learner)
        self.save()
        logger.info("Learner added: %s (%s)", name, learner_id)
        return learner

    def _new_id(self) -> str:
        while True:
            candidate = "s_" + secrets.token_hex(4)
            if self.snapshot.find(candidate) is None:
                return candidate

    def rename_learner(self, learner_id: str, name: str) -> LearnerProfile:
        name = (name or "").strip()
        if not name:
            raise ValueError("Learner name must not be empty")
        learner = self.get(learner_id)
        learner.name = name
        learner.touch()
        self.save()
        return learner

    def remove_learner(self, learner_id: str) -> None:
        """Delete a profile. The guest can only be reset, never removed."""
        if learner_id == GUEST_ID:
            raise ValueError("The guest learner cannot be removed")
        learner = self.get(learner_id)
        self.snapshot.learners.remove(learner)
        if self.settings.active_learner_id == learner_id:
            self.settings.active_learner_id = GUEST_ID
        self.save()

    def save_avatar(self, avatar: Mapping[str, Any]) -> Dict[str, Any]:
        """Store the active learner's avatar, dropping locked options."""
        learner = self.get_active()
        merged = dict(learner.avatar)
        merged.update(avatar)
        learner.avatar = sanitize_avatar(merged, learner.stars)
        learner.touch()
        self.save()
        return learner.avatar

    def badge_for(self, learner_id: str) -> str:
        return current_badge(self.get(learner_id).stars)

    # --- Resets ---
    def _reset(self, learner: LearnerProfile) -> None:
        learner.stars = 0
        learner.score = 0
        learner.zone_progress = {}
        learner.touch()

    def reset_learner(self, learner_id: str) -> LearnerProfile:
        learner = self.get(learner_id)
        self._reset(learner)
        self.save()
        return learner

    def reset_all_except_guest(self) -> None:
        """Zero every non-guest learner's progress, keeping the profiles."""
        for learner in self.snapshot.learners:
            if learner.id != GUEST_ID:
                self._reset(learner)
        self.save()

    def reset_class(self) -> None:
        """Keep only the guest, clear class name and mission."""
        guest = self.snapshot.ensure_guest()
        self.snapshot.learners = [guest]
        self.settings.active_learner_id = GUEST_ID
        self.settings.class_name = ""
        self.settings.mission = MISSION_ALL
        self.save()

    def factory_reset(self) -> None:
        self.gateway.clear()
        self.snapshot = default_snapshot()
        self.save()

    # --- Settings ---
    def set_class_name(self, class_name: str) -> None:
        self.settings.class_name = class_name or ""
        self.save()

    def set_mission(self, mission: str) -> None:
        mission = mission or MISSION_ALL
        if mission != MISSION_ALL and self.zone_ids is not None and mission not in self.zone_ids:
            raise ValueError(f"Unknown mission zone: {mission}")
        self.settings.mission = mission
        self.save()

    def toggle_read_aloud(self) -> bool:
        self.settings.read_aloud = not self.settings.read_aloud
        self.save()
        return self.settings.read_aloud

    def toggle_projector_mode(self) -> bool:
        self.settings.projector_mode = not self.settings.projector_mode
        self.save()
        return self.settings.projector_mode


__all__ = ["LearnerRegistry", "GUEST_ID", "GUEST_NAME"]
