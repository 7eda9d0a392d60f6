"""Clean travel choice: one prompt, one answer, no retries."""
from __future__ import annotations
from typing import Any, Dict, Optional

from .base import MiniGame, Outcome
from .content import ChoiceQuestion, ThemeContent


class ChoiceGame(MiniGame):
    kind = "choice"

    def __init__(self, content: ThemeContent, good_award: int = 1, poor_award: int = 0):
        super().__init__()
        self.content = content
        self.good_award = good_award
        self.poor_award = poor_award
        self.question: Optional[ChoiceQuestion] = None
        self.chosen: Optional[int] = None

    def _setup(self, theme: str) -> None:
        self.question = self.content.question(theme)
        self.chosen = None

    def choose(self, index: int) -> Optional[bool]:
        """Pick an option; the first pick ends the round.

        Returns:
            Whether the picked option was good, or None if a choice was
            already made
        """
        if not self.started or self.question is None:
            raise RuntimeError("Choice round not started")
        if self.is_complete():
            return None
        if not 0 <= index < len(self.question.options):
            raise IndexError(f"No option {index}")
        self.chosen = index
        option = self.question.options[index]
        if option.good:
            self._finish(Outcome(self.good_award, "full"), "Green travel!")
        else:
            self._finish(Outcome(self.poor_award, "none"), "Not the greenest choice")
        return option.good

    def report_state(self) -> Dict[str, Any]:
        state = super().report_state()
        if self.question is not None:
            state.update({
                "prompt": self.question.prompt,
                "options": [o.label for o in self.question.options],
                "chosen": self.chosen,
            })
            if self.chosen is not None:
                state["good"] = self.question.options[self.chosen].good
        return state
