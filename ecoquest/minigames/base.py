"""Common contract of the mini-game state machines.

Every machine follows the same lifecycle::

    game.start(theme)        # new round, previous one discarded
    game.report_state()      # dict for presentation
    game.is_complete()       # monotonic: never goes back to False
    game.outcome()           # Outcome, only once complete
    game.cancel()            # idempotent, safe at any point

Stars are announced to listeners registered with ``on_award`` the moment they
are earned, so the sorter can pay per item while the others pay on finish.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Optional

from ..core.errors import MiniGameNotComplete

logger = logging.getLogger(__name__)

OutcomeTier = Literal["full", "partial", "none"]
AwardListener = Callable[[int, str], None]


@dataclass(frozen=True)
class Outcome:
    currency_delta: int
    tier: OutcomeTier


class MiniGame:
    """Base class holding the round bookkeeping shared by all variants."""

    kind = "minigame"

    def __init__(self):
        self.theme: Optional[str] = None
        self.started = False
        self._complete = False
        self._outcome: Optional[Outcome] = None
        self._listeners: List[AwardListener] = []

    def on_award(self, listener: AwardListener) -> None:
        self._listeners.append(listener)

    def _award(self, amount: int, reason: str) -> None:
        if amount == 0:
            return
        for listener in list(self._listeners):
            listener(amount, reason)

    def start(self, theme: str) -> None:
        self.cancel()
        self.theme = theme
        self.started = True
        self._complete = False
        self._outcome = None
        self._setup(theme)
        logger.debug("%s round started (theme=%s)", self.kind, theme)

    def _setup(self, theme: str) -> None:
        raise NotImplementedError

    def _finish(self, outcome: Outcome, reason: str, pay: bool = True) -> None:
        """Seal the round. Only the first call has any effect.

        Args:
            outcome: Final outcome of the round
            reason: Label passed to award listeners
            pay: Announce the outcome delta; False when it was paid as earned
        """
        if self._complete:
            return
        self._complete = True
        self._outcome = outcome
        self.cancel()
        logger.debug("%s round complete: %s", self.kind, outcome)
        if pay:
            self._award(outcome.currency_delta, reason)

    def is_complete(self) -> bool:
        return self._complete

    def outcome(self) -> Outcome:
        if not self._complete or self._outcome is None:
            raise MiniGameNotComplete(f"{self.kind} round is not complete")
        return self._outcome

    def cancel(self) -> None:
        """Release resources held by the round. No-op by default."""
        pass

    def report_state(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "theme": self.theme,
            "complete": self._complete,
        }
