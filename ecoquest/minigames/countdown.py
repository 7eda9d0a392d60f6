"""Energy dash: switch devices to their required state before time runs out.

The countdown ticks once per second through a scheduler-owned timer. The
round ends on whichever comes first: every device in its required end state
(full award) or the clock reaching zero (partial award). After that the
machine is terminal and the timer is gone.
"""
from __future__ import annotations
import random
from typing import Any, Dict, List, Optional

from ..core.scheduler import Scheduler, TimerHandle
from .base import MiniGame, Outcome
from .content import Device, ThemeContent
from .shuffle import draw

TICK_SECONDS = 1.0


class CountdownGame(MiniGame):
    kind = "countdown"

    def __init__(self, content: ThemeContent, scheduler: Scheduler, seconds: int = 20,
                 device_count: int = 5, full_award: int = 2, partial_award: int = 0,
                 rng: Optional[random.Random] = None):
        super().__init__()
        self.content = content
        self.scheduler = scheduler
        self.seconds = seconds
        self.device_count = device_count
        self.full_award = full_award
        self.partial_award = partial_award
        self.rng = rng or random.Random()
        self.devices: List[Device] = []
        self.switches: Dict[str, bool] = {}
        self.time_left = seconds
        self._timer: Optional[TimerHandle] = None

    def _setup(self, theme: str) -> None:
        self.devices = draw(self.content.device_pool(theme), self.device_count, self.rng)
        self.switches = {d.id: d.starts_on for d in self.devices}
        self.time_left = self.seconds
        if self._all_set():
            self._finish(Outcome(self.full_award, "full"), "Energy saved!")
            return
        self._timer = self.scheduler.call_every(TICK_SECONDS, self.tick)

    def _all_set(self) -> bool:
        return all(self.switches[d.id] == d.must_end_on for d in self.devices)

    def mismatched(self) -> int:
        return sum(1 for d in self.devices if self.switches[d.id] != d.must_end_on)

    def toggle(self, device_id: str) -> Optional[bool]:
        """Flip a device.

        Returns:
            The device's new state, or None when the round is over
        """
        if not self.started:
            raise RuntimeError("Countdown round not started")
        if self.is_complete():
            return None
        if device_id not in self.switches:
            raise KeyError(f"Device '{device_id}' is not part of this round")
        self.switches[device_id] = not self.switches[device_id]
        if self._all_set():
            self._finish(Outcome(self.full_award, "full"), "Energy saved!")
        return self.switches[device_id]

    def tick(self) -> None:
        if self.is_complete() or not self.started:
            return
        self.time_left = max(0, self.time_left - 1)
        if self.time_left == 0:
            self._finish(Outcome(self.partial_award, "partial"), "Time up!")

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def timer_active(self) -> bool:
        return self._timer is not None and self._timer.active

    def report_state(self) -> Dict[str, Any]:
        state = super().report_state()
        state.update({
            "time_left": self.time_left,
            "devices": [
                {"id": d.id, "name": d.name, "emoji": d.emoji,
                 "on": self.switches[d.id], "must_end_on": d.must_end_on}
                for d in self.devices
            ],
            "remaining": self.mismatched(),
        })
        if self.is_complete():
            state["tier"] = self.outcome().tier
        return state
