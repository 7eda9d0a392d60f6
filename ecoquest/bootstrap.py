"""Bootstrap utilities: load zone/theme content and wire the engine together."""
from __future__ import annotations
import logging
import random
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from config import STORAGE_KEY, EngineConfig, load_engine_config
from .core.ledger import UnlockLedger
from .core.persistence import JsonFileStore, KeyValueStore, PersistenceGateway
from .core.registry import LearnerRegistry
from .core.scheduler import Scheduler, ThreadScheduler
from .minigames import ThemeContent, load_theme_content
from .quest.factory import MiniGameFactory
from .quest.loader import load_zones
from .quest.model import Zone
from .quest.sequencer import QuestSequencer

logger = logging.getLogger(__name__)


@dataclass
class EcoQuestEngine:
    """Everything a presentation layer needs, already wired."""
    config: EngineConfig
    gateway: PersistenceGateway
    registry: LearnerRegistry
    ledger: UnlockLedger
    zones: Mapping[str, Zone]
    content: ThemeContent
    scheduler: Scheduler
    sequencer: QuestSequencer
    # Guards engine state shared with timer threads
    lock: Any = field(default_factory=threading.RLock)

    @property
    def zone_ids(self):
        return list(self.zones)


def create_engine(config: Optional[EngineConfig] = None,
                  store: Optional[KeyValueStore] = None,
                  scheduler: Optional[Scheduler] = None,
                  rng: Optional[random.Random] = None,
                  announce: Optional[Callable[[str], None]] = None,
                  zones: Optional[Mapping[str, Zone]] = None,
                  content: Optional[ThemeContent] = None) -> EcoQuestEngine:
    """Load assets and build the engine.

    Args:
        config: Tunables; read from the environment when omitted
        store: Key-value backend; a JsonFileStore in config.save_dir by default
        scheduler: Timer source; real threads by default
        rng: Random source shared by the mini-games
        announce: Narration sink (read-aloud); logs at DEBUG by default
        zones: Zone table overriding the bundled zones.json
        content: Mini-game pools overriding the bundled themes.json

    Returns:
        A ready EcoQuestEngine

    Raises:
        ContentError: Bundled or supplied content is invalid
    """
    config = config or load_engine_config()
    if zones is None:
        zones = load_zones()
    if content is None:
        content = load_theme_content()
    if store is None:
        store = JsonFileStore(config.save_dir)
    scheduler = scheduler or ThreadScheduler()

    gateway = PersistenceGateway(store, STORAGE_KEY)
    registry = LearnerRegistry(gateway, score_per_star=config.score_per_star, zone_ids=zones.keys())
    ledger = UnlockLedger(registry, zones)
    factory = MiniGameFactory(content, scheduler, config=config, rng=rng)
    sequencer = QuestSequencer(registry, ledger, zones, factory,
                               zone_bonus=config.zone_completion_bonus, announce=announce)
    logger.info("-- Loaded %d zones, %d learners --", len(zones), len(registry.list_learners()))
    return EcoQuestEngine(
        config=config,
        gateway=gateway,
        registry=registry,
        ledger=ledger,
        zones=zones,
        content=content,
        scheduler=scheduler,
        sequencer=sequencer,
        lock=getattr(scheduler, "lock", None) or threading.RLock(),
    )
