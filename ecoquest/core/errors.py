"""Error taxonomy for the quest progression engine.

Gating errors are rejected state transitions, not faults: the command layer
turns them into ordinary failure results. PersistenceCorruptError never leaves
the persistence gateway.
"""
from __future__ import annotations


class EcoQuestError(Exception):
    """Base class for every engine error."""
    pass


class GatingError(EcoQuestError):
    """A requested transition was refused; state is unchanged."""
    pass


class ZoneLockedError(GatingError):
    """Zone is unknown or its prerequisite zone is not complete yet."""

    def __init__(self, zone_id: str, requires: str | None = None):
        self.zone_id = zone_id
        self.requires = requires
        if requires:
            msg = f"Zone '{zone_id}' is locked until '{requires}' is complete"
        else:
            msg = f"Zone '{zone_id}' does not exist"
        super().__init__(msg)


class ZoneRestrictedError(GatingError):
    """The teacher mission lock forbids entering this zone."""

    def __init__(self, zone_id: str, mission: str):
        self.zone_id = zone_id
        self.mission = mission
        super().__init__(f"Zone '{zone_id}' is not allowed by mission '{mission}'")


class SceneNotReadyError(GatingError):
    """advance() was called while the current mini-game is unfinished."""
    pass


class UnknownLearnerError(EcoQuestError):
    """Reference to a learner id that does not exist."""

    def __init__(self, learner_id: str):
        self.learner_id = learner_id
        super().__init__(f"Unknown learner: {learner_id}")


class PersistenceCorruptError(EcoQuestError):
    """Stored snapshot could not be parsed or validated."""
    pass


class MiniGameNotComplete(EcoQuestError):
    """outcome() was requested before the round finished."""
    pass


class ContentError(EcoQuestError):
    """Zone or theme content is malformed."""
    pass
