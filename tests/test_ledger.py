"""Test unlock rules: zones, badges and avatar gear."""

import sys
import os
import random
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from ecoquest.core.avatar import AVATAR_OPTIONS, GATED_SLOTS, find_option
from ecoquest.core.ledger import (
    NO_BADGE, UnlockLedger, current_badge, is_option_usable, is_zone_allowed_by_mission,
    is_zone_enterable, next_badge, random_avatar, sanitize_avatar, unlock_progress,
)
from ecoquest.core.persistence import MemoryStore, PersistenceGateway
from ecoquest.core.registry import LearnerRegistry


@pytest.mark.parametrize("stars,badge", [
    (0, NO_BADGE),
    (4, NO_BADGE),
    (5, "Seedling Saver"),
    (11, "Seedling Saver"),
    (12, "Super Recycler"),
    (19, "Super Recycler"),
    (20, "Energy Guardian"),
    (29, "Energy Guardian"),
    (30, "Planet Pal"),
    (37, "Planet Pal"),
])
def test_current_badge(stars, badge):
    assert current_badge(stars) == badge


def test_next_badge():
    assert next_badge(0).name == "Seedling Saver"
    assert next_badge(12).name == "Energy Guardian"
    assert next_badge(30) is None


def test_unlock_progress_is_capped():
    assert unlock_progress(0) == 0
    assert unlock_progress(15) == 50
    assert unlock_progress(45) == 100


def test_zone_enterable(zones):
    assert is_zone_enterable("forest", {}, zones)
    assert not is_zone_enterable("ocean", {}, zones)
    assert is_zone_enterable("ocean", {"forest": True}, zones)
    assert not is_zone_enterable("moon", {"forest": True}, zones)


def test_mission_filter():
    assert is_zone_allowed_by_mission("ocean", "all")
    assert is_zone_allowed_by_mission("ocean", "ocean")
    assert not is_zone_allowed_by_mission("forest", "ocean")


def test_gated_options_follow_thresholds():
    crown = find_option("hat", "hat_crown")
    assert not is_option_usable(crown, 29)
    assert is_option_usable(crown, 30)
    # Ungated slots are always usable
    assert is_option_usable(find_option("skin", "deep2"), 0)


def test_sanitize_avatar():
    clean = sanitize_avatar({
        "displayName": "  A very very long hero name  ",
        "hat": "cap_leaf",
        "accessory": "acc_glow",
        "sidekick": "not_a_sidekick",
    }, stars=5)
    assert clean["displayName"] == "A very very long h"
    assert clean["hat"] == "cap_leaf"
    assert clean["accessory"] == "none"
    assert clean["sidekick"] == "none"

    assert sanitize_avatar({"displayName": "   "}, 0)["displayName"] == "Eco Hero"


def test_random_avatar_only_uses_unlocked_gear():
    rng = random.Random(4)
    for _ in range(50):
        cfg = random_avatar(0, rng)
        for slot in GATED_SLOTS:
            assert cfg[slot] == "none"
        assert set(cfg) >= set(AVATAR_OPTIONS)


def test_ledger_map_status(zones):
    registry = LearnerRegistry(PersistenceGateway(MemoryStore()))
    ledger = UnlockLedger(registry, zones)
    registry.mark_zone_complete("forest")
    registry.set_mission("ocean")

    status = ledger.map_status()
    assert status["forest"] == {"unlocked": True, "complete": True, "allowed": False}
    assert status["ocean"] == {"unlocked": True, "complete": False, "allowed": True}
    assert status["city"]["unlocked"] is False
    assert ledger.current_badge() == NO_BADGE
