"""Unlock ledger: pure queries over a learner's progress and stars.

Nothing here mutates state. The sequencer asks whether a zone may be
entered, the avatar builder asks which options to gray out, and the roster
asks for the current badge.
"""
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .avatar import (
    AVATAR_OPTIONS, DEFAULT_DISPLAY_NAME, DISPLAY_NAME_MAX, GATED_SLOTS,
    MAX_UNLOCK_STARS, NONE_OPTION, AvatarOption, find_option,
)
from .state import MISSION_ALL

NO_BADGE = "—"


@dataclass(frozen=True)
class Badge:
    name: str
    stars: int
    icon: str


# Ascending by threshold
BADGES = (
    Badge("Seedling Saver", 5, "🌱"),
    Badge("Super Recycler", 12, "♻️"),
    Badge("Energy Guardian", 20, "💡"),
    Badge("Planet Pal", 30, "🌍"),
)


def is_zone_enterable(zone_id: str, zone_progress: Mapping[str, bool], zones: Mapping[str, Any]) -> bool:
    """Check whether a zone's prerequisite is satisfied.

    Args:
        zone_id: Zone to check
        zone_progress: Learner completion flags
        zones: Known zones by id (anything with a ``requires`` attribute)

    Returns:
        False for unknown zones, True for zones without a prerequisite,
        otherwise the prerequisite's completion flag
    """
    zone = zones.get(zone_id)
    if zone is None:
        return False
    if not zone.requires:
        return True
    return bool(zone_progress.get(zone.requires, False))


def is_zone_allowed_by_mission(zone_id: str, mission: str) -> bool:
    """True iff the mission is unrestricted or names exactly this zone."""
    if mission == MISSION_ALL:
        return True
    return mission == zone_id


def is_option_usable(option: Optional[AvatarOption], stars: int) -> bool:
    if option is None or option.req is None:
        return True
    return stars >= option.req


def current_badge(stars: int) -> str:
    """Name of the highest badge reached, or the NO_BADGE sentinel."""
    unlocked = [b for b in BADGES if stars >= b.stars]
    return unlocked[-1].name if unlocked else NO_BADGE


def next_badge(stars: int) -> Optional[Badge]:
    for badge in BADGES:
        if stars < badge.stars:
            return badge
    return None


def unlock_progress(stars: int) -> int:
    """Percent (0-100) toward the top gear threshold."""
    pct = round((max(stars, 0) / MAX_UNLOCK_STARS) * 100)
    return min(100, pct)


def sanitize_avatar(avatar: Mapping[str, Any], stars: int) -> Dict[str, Any]:
    """Return a copy of the avatar that only uses options the stars allow.

    Locked or unknown gated options fall back to "none"; the display name is
    trimmed and capped.
    """
    clean = dict(avatar)
    name = str(clean.get("displayName") or DEFAULT_DISPLAY_NAME).strip()
    clean["displayName"] = (name or DEFAULT_DISPLAY_NAME)[:DISPLAY_NAME_MAX]
    for slot in GATED_SLOTS:
        value = clean.get(slot) or NONE_OPTION
        opt = find_option(slot, value)
        if opt is None or not is_option_usable(opt, stars):
            value = NONE_OPTION
        clean[slot] = value
    return clean


def random_avatar(stars: int, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Roll a random hero, picking gated options only among unlocked ones."""
    rng = rng or random.Random()
    cfg: Dict[str, Any] = {"displayName": DEFAULT_DISPLAY_NAME}
    for slot, options in AVATAR_OPTIONS.items():
        if slot in GATED_SLOTS:
            pool = [o for o in options if is_option_usable(o, stars)]
            if not pool:
                pool = [o for o in options if o.id == NONE_OPTION]
        else:
            pool = options
        cfg[slot] = rng.choice(pool).id
    return cfg


class UnlockLedger:
    """Ledger queries bound to the active learner of a registry."""

    def __init__(self, registry, zones: Mapping[str, Any]):
        self.registry = registry
        self.zones = zones

    def is_zone_enterable(self, zone_id: str) -> bool:
        return is_zone_enterable(zone_id, self.registry.get_active().zone_progress, self.zones)

    def is_zone_complete(self, zone_id: str) -> bool:
        return self.registry.get_active().is_zone_complete(zone_id)

    def is_zone_allowed_by_mission(self, zone_id: str, mission: Optional[str] = None) -> bool:
        if mission is None:
            mission = self.registry.settings.mission
        return is_zone_allowed_by_mission(zone_id, mission)

    def is_option_usable(self, slot: str, option_id: str) -> bool:
        return is_option_usable(find_option(slot, option_id), self.registry.get_active().stars)

    def current_badge(self) -> str:
        return current_badge(self.registry.get_active().stars)

    def map_status(self) -> Dict[str, Dict[str, bool]]:
        """Per-zone flags the map uses to gray out nodes."""
        status = {}
        for zone_id in self.zones:
            status[zone_id] = {
                "unlocked": self.is_zone_enterable(zone_id),
                "complete": self.is_zone_complete(zone_id),
                "allowed": self.is_zone_allowed_by_mission(zone_id),
            }
        return status
