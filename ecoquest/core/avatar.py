"""Avatar option tables and the default hero configuration.

The engine treats an avatar as an opaque dict. Only the gated slots (hat,
accessory, sidekick) matter to progression: each of their options carries a
star threshold in ``req``.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

DISPLAY_NAME_MAX = 18
DEFAULT_DISPLAY_NAME = "Eco Hero"
NONE_OPTION = "none"


@dataclass(frozen=True)
class AvatarOption:
    id: str
    label: str
    req: Optional[int] = None  # minimum stars, None = ungated


def _opts(*pairs) -> List[AvatarOption]:
    return [AvatarOption(id=p[0], label=p[1], req=p[2] if len(p) > 2 else None) for p in pairs]


AVATAR_OPTIONS: Dict[str, List[AvatarOption]] = {
    "skin": _opts(("cool1", "Cool 1"), ("cool2", "Cool 2"), ("warm1", "Warm 1"), ("warm2", "Warm 2"),
                  ("tan1", "Tan 1"), ("deep1", "Deep 1"), ("deep2", "Deep 2")),
    "body": _opts(("small", "Small"), ("regular", "Regular"), ("tall", "Tall"), ("round", "Round")),
    "pose": _opts(("wave", "Wave"), ("hero", "Hero Pose"), ("peace", "Peace"), ("jump", "Jump")),
    "outline": _opts(("dark", "Dark Outline"), ("light", "Light Outline")),
    "eyes": _opts(("happy", "Happy"), ("sparkle", "Sparkle"), ("focused", "Focused"), ("sleepy", "Sleepy")),
    "mouth": _opts(("smile", "Smile"), ("biggrin", "Big Grin"), ("ooh", "Ooh!"), ("brave", "Brave")),
    "cheeks": _opts(("none", "None"), ("blush", "Blush"), ("freckles", "Freckles")),
    "hairStyle": _opts(("spiky", "Spiky"), ("curly", "Curly"), ("bob", "Bob Cut"), ("pony", "Ponytail")),
    "hairColor": _opts(("black", "Black"), ("brown", "Brown"), ("blonde", "Blonde"),
                       ("blue", "Blue"), ("pink", "Pink"), ("green", "Green")),
    "outfit": _opts(("ranger", "Forest Ranger"), ("diver", "Ocean Explorer"),
                    ("hero", "City Eco Hero"), ("casual", "Casual Tee")),
    "outfitColor": _opts(("green", "Green"), ("blue", "Blue"), ("yellow", "Yellow"),
                         ("pink", "Pink"), ("orange", "Orange")),
    # Gated slots
    "hat": _opts(("none", "None (free)", 0), ("cap_leaf", "Leaf Cap", 5), ("hat_ocean", "Ocean Cap", 12),
                 ("hat_city", "City Beanie", 20), ("hat_crown", "Planet Crown", 30)),
    "accessory": _opts(("none", "None (free)", 0), ("acc_magnify", "Magnifier", 5), ("acc_badge", "Eco Badge", 12),
                       ("acc_cape", "Hero Cape", 20), ("acc_glow", "Glow Aura", 30)),
    "sidekick": _opts(("none", "None (free)", 0), ("side_owl", "Ollie", 5), ("side_turtle", "Tara", 12),
                      ("side_crab", "Coach", 20), ("side_bot", "MiniBot", 30)),
}

GATED_SLOTS = ("hat", "accessory", "sidekick")

# Stars needed for the top gear; drives the builder's progress bar
MAX_UNLOCK_STARS = 30


def find_option(slot: str, option_id: str) -> Optional[AvatarOption]:
    for opt in AVATAR_OPTIONS.get(slot, []):
        if opt.id == option_id:
            return opt
    return None


def default_avatar() -> Dict[str, Any]:
    return {
        "displayName": DEFAULT_DISPLAY_NAME,
        "skin": "warm2",
        "body": "regular",
        "pose": "wave",
        "outline": "dark",
        "eyes": "happy",
        "mouth": "smile",
        "cheeks": "none",
        "hairStyle": "spiky",
        "hairColor": "black",
        "outfit": "ranger",
        "outfitColor": "green",
        "hat": "none",
        "accessory": "none",
        "sidekick": "none",
    }
