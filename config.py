"""Central configuration for Eco Quest.

All tunable engine parameters live here (save location, mini-game sizes,
awards, countdown length, logging). Every value has a sensible default and
can be overridden through environment variables.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from logging.config import dictConfig


def _get_int_env(name: str, default: int, minval: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw)
        if minval is not None and v < minval:
            return default
        return v
    except ValueError:
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in {"1", "true", "yes", "on"}


# ---------------- Persistence ----------------
DEFAULT_SAVE_DIR = "data/saves"
STORAGE_KEY = "ecoQuestAdventure_cartoon_v2"


def get_save_dir() -> str:
    """Directory holding the snapshot file. Var: EQ_SAVE_DIR."""
    return os.getenv("EQ_SAVE_DIR", DEFAULT_SAVE_DIR).strip() or DEFAULT_SAVE_DIR


# ---------------- Mini-games ----------------
# Items drawn per sorter round
SORTER_ITEM_COUNT: int = _get_int_env("EQ_SORTER_ITEMS", 7, minval=1)

# Devices drawn per countdown round
COUNTDOWN_DEVICE_COUNT: int = _get_int_env("EQ_COUNTDOWN_DEVICES", 5, minval=1)

# Starting seconds of the conservation countdown
COUNTDOWN_SECONDS: int = _get_int_env("EQ_COUNTDOWN_SECONDS", 20, minval=1)

# Stars for beating the countdown / for running out of time
COUNTDOWN_FULL_AWARD: int = _get_int_env("EQ_COUNTDOWN_FULL_AWARD", 2, minval=0)
COUNTDOWN_PARTIAL_AWARD: int = _get_int_env("EQ_COUNTDOWN_PARTIAL_AWARD", 0, minval=0)

# Stars for a good / not-good single choice
CHOICE_GOOD_AWARD: int = _get_int_env("EQ_CHOICE_GOOD_AWARD", 1, minval=0)
CHOICE_POOR_AWARD: int = _get_int_env("EQ_CHOICE_POOR_AWARD", 0, minval=0)

# ---------------- Progression ----------------
ZONE_COMPLETION_BONUS: int = _get_int_env("EQ_ZONE_BONUS", 3, minval=0)

# Score points granted per star
SCORE_PER_STAR: int = 10

# Strict mode makes stale learner ids loud instead of falling back
STRICT_MODE: bool = _get_bool_env("EQ_STRICT", False)


@dataclass
class EngineConfig:
    """Snapshot of the tunables an engine instance runs with."""
    save_dir: str = DEFAULT_SAVE_DIR
    sorter_item_count: int = 7
    countdown_device_count: int = 5
    countdown_seconds: int = 20
    countdown_full_award: int = 2
    countdown_partial_award: int = 0
    choice_good_award: int = 1
    choice_poor_award: int = 0
    zone_completion_bonus: int = 3
    score_per_star: int = SCORE_PER_STAR
    strict: bool = False


def load_engine_config() -> EngineConfig:
    """Build an EngineConfig from the environment."""
    return EngineConfig(
        save_dir=get_save_dir(),
        sorter_item_count=SORTER_ITEM_COUNT,
        countdown_device_count=COUNTDOWN_DEVICE_COUNT,
        countdown_seconds=COUNTDOWN_SECONDS,
        countdown_full_award=COUNTDOWN_FULL_AWARD,
        countdown_partial_award=COUNTDOWN_PARTIAL_AWARD,
        choice_good_award=CHOICE_GOOD_AWARD,
        choice_poor_award=CHOICE_POOR_AWARD,
        zone_completion_bonus=ZONE_COMPLETION_BONUS,
        strict=STRICT_MODE,
    )


# ---------------- Logging ----------------
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure root logging. Var: EQ_LOG_LEVEL (default INFO)."""
    level = os.getenv("EQ_LOG_LEVEL", "INFO").upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        level = "INFO"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": DEFAULT_LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )


__all__ = [
    # Persistence
    "DEFAULT_SAVE_DIR", "STORAGE_KEY", "get_save_dir",
    # Mini-games
    "SORTER_ITEM_COUNT", "COUNTDOWN_DEVICE_COUNT", "COUNTDOWN_SECONDS",
    "COUNTDOWN_FULL_AWARD", "COUNTDOWN_PARTIAL_AWARD",
    "CHOICE_GOOD_AWARD", "CHOICE_POOR_AWARD",
    # Progression
    "ZONE_COMPLETION_BONUS", "SCORE_PER_STAR", "STRICT_MODE",
    "EngineConfig", "load_engine_config",
    # Logging
    "configure_logging", "DEFAULT_LOG_FORMAT",
]
