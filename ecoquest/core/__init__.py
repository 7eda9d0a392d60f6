"""Persistent state, unlock rules and infrastructure for Eco Quest."""

from .errors import (
    EcoQuestError, GatingError, ZoneLockedError, ZoneRestrictedError, SceneNotReadyError,
    UnknownLearnerError, PersistenceCorruptError, MiniGameNotComplete, ContentError,
)
from .state import LearnerProfile, Settings, Snapshot, GUEST_ID, MISSION_ALL
from .persistence import KeyValueStore, MemoryStore, JsonFileStore, PersistenceGateway
from .registry import LearnerRegistry
from .ledger import UnlockLedger, current_badge, next_badge, unlock_progress, sanitize_avatar, random_avatar
from .scheduler import Scheduler, ThreadScheduler, ManualScheduler
from .export import export_csv, csv_filename, certificate_html

__all__ = [
    'EcoQuestError', 'GatingError', 'ZoneLockedError', 'ZoneRestrictedError', 'SceneNotReadyError',
    'UnknownLearnerError', 'PersistenceCorruptError', 'MiniGameNotComplete', 'ContentError',
    'LearnerProfile', 'Settings', 'Snapshot', 'GUEST_ID', 'MISSION_ALL',
    'KeyValueStore', 'MemoryStore', 'JsonFileStore', 'PersistenceGateway',
    'LearnerRegistry',
    'UnlockLedger', 'current_badge', 'next_badge', 'unlock_progress', 'sanitize_avatar', 'random_avatar',
    'Scheduler', 'ThreadScheduler', 'ManualScheduler',
    'export_csv', 'csv_filename', 'certificate_html',
]
