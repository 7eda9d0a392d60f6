"""Builds the mini-game state machine for a game scene."""
from __future__ import annotations
import random
from typing import Optional

from config import EngineConfig
from ..core.scheduler import Scheduler
from ..minigames import ChoiceGame, CountdownGame, MiniGame, SorterGame, ThemeContent
from .model import ChoiceScene, CountdownScene, GameScene, SorterScene


class MiniGameFactory:
    def __init__(self, content: ThemeContent, scheduler: Scheduler,
                 config: Optional[EngineConfig] = None, rng: Optional[random.Random] = None):
        self.content = content
        self.scheduler = scheduler
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()

    def create(self, scene: GameScene) -> MiniGame:
        """Create an unstarted machine for the scene's kind."""
        cfg = self.config
        if isinstance(scene, SorterScene):
            return SorterGame(self.content, item_count=cfg.sorter_item_count, rng=self.rng)
        if isinstance(scene, CountdownScene):
            return CountdownGame(
                self.content, self.scheduler,
                seconds=cfg.countdown_seconds,
                device_count=cfg.countdown_device_count,
                full_award=cfg.countdown_full_award,
                partial_award=cfg.countdown_partial_award,
                rng=self.rng,
            )
        if isinstance(scene, ChoiceScene):
            return ChoiceGame(self.content, good_award=cfg.choice_good_award, poor_award=cfg.choice_poor_award)
        raise TypeError(f"Not a game scene: {type(scene).__name__}")
