"""Waste sorter mini-game.

A random subset of the theme's items must each be dropped into its correct
bin. Every first correct drop pays one star immediately; wrong drops cost
nothing and leave the item pending.
"""
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .base import MiniGame, Outcome
from .content import SortItem, ThemeContent
from .shuffle import draw

STARS_PER_ITEM = 1


@dataclass(frozen=True)
class SortResult:
    correct: bool
    already_sorted: bool
    remaining: int


class SorterGame(MiniGame):
    kind = "sorter"

    def __init__(self, content: ThemeContent, item_count: int = 7, rng: Optional[random.Random] = None):
        super().__init__()
        self.content = content
        self.item_count = item_count
        self.rng = rng or random.Random()
        self.items: List[SortItem] = []
        self.pending: Dict[str, SortItem] = {}
        self.awarded = 0

    def _setup(self, theme: str) -> None:
        self.items = draw(self.content.sort_pool(theme), self.item_count, self.rng)
        self.pending = {item.id: item for item in self.items}
        self.awarded = 0
        if not self.pending:
            self._finish(Outcome(0, "full"), "Sorter complete!", pay=False)

    @property
    def categories(self) -> List[str]:
        return list(self.content.categories)

    def assign(self, item_id: str, category: str) -> SortResult:
        """Drop a presented item into a bin.

        Args:
            item_id: Id of one of the presented items
            category: Bin chosen by the learner

        Returns:
            SortResult describing the drop

        Raises:
            RuntimeError: If the round has not been started
            KeyError: If the item was not presented in this round
        """
        if not self.started:
            raise RuntimeError("Sorter round not started")
        item = next((i for i in self.items if i.id == item_id), None)
        if item is None:
            raise KeyError(f"Item '{item_id}' is not part of this round")

        correct = category == item.category
        if item_id not in self.pending:
            return SortResult(correct=correct, already_sorted=True, remaining=len(self.pending))
        if not correct:
            return SortResult(correct=False, already_sorted=False, remaining=len(self.pending))

        del self.pending[item_id]
        self.awarded += STARS_PER_ITEM
        self._award(STARS_PER_ITEM, "Correct sort!")
        if not self.pending:
            self._finish(Outcome(self.awarded, "full"), "Sorter complete!", pay=False)
        return SortResult(correct=True, already_sorted=False, remaining=len(self.pending))

    def report_state(self) -> Dict[str, Any]:
        state = super().report_state()
        state.update({
            "categories": self.categories,
            "items": [
                {"id": i.id, "name": i.name, "emoji": i.emoji, "sorted": i.id not in self.pending}
                for i in self.items
            ],
            "remaining": len(self.pending),
            "awarded": self.awarded,
        })
        return state
