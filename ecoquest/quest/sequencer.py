"""Quest sequencer: drives one learner through one zone at a time.

States: IDLE -> SCENE_NARRATIVE / SCENE_GAME -> ... -> ZONE_COMPLETE -> IDLE

The session (learner, zone, scene list, index, live mini-game) is transient
and never persisted; re-entering a zone always starts from its first scene.
Stars are committed through the learner registry the moment a mini-game earns
them, always to the learner who entered the zone even if the active learner
changes meanwhile. The completion bonus is paid only on the first completion
of a zone.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core.errors import SceneNotReadyError, ZoneLockedError, ZoneRestrictedError
from ..core.ledger import UnlockLedger
from ..core.registry import LearnerRegistry
from ..minigames import MiniGame
from .factory import MiniGameFactory
from .model import NarrativeScene, Scene, SequencerState, Zone, is_game_scene, scene_kind

logger = logging.getLogger(__name__)

Announcer = Callable[[str], None]


@dataclass
class QuestSession:
    learner_id: str
    zone: Zone
    scenes: List[Scene]
    scene_index: int = 0
    game: Optional[MiniGame] = None

    @property
    def scene(self) -> Scene:
        return self.scenes[self.scene_index]


@dataclass(frozen=True)
class SceneView:
    """Read-only projection of the current scene for presentation."""
    zone_id: str
    scene_index: int
    total: int
    kind: str
    scene: Scene
    ready: bool
    game_state: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ZoneResult:
    zone_id: str
    first_completion: bool
    bonus_awarded: int
    message: str = ""


class QuestSequencer:
    """Owns the scene list of the active zone traversal."""

    def __init__(self, registry: LearnerRegistry, ledger: UnlockLedger, zones: Mapping[str, Zone],
                 game_factory: MiniGameFactory, zone_bonus: int = 3,
                 announce: Optional[Announcer] = None):
        self.registry = registry
        self.ledger = ledger
        self.zones = zones
        self.game_factory = game_factory
        self.zone_bonus = zone_bonus
        self.announce = announce or self._read_aloud
        self.session: Optional[QuestSession] = None
        self.last_result: Optional[ZoneResult] = None

    # --- Queries ---
    @property
    def state(self) -> SequencerState:
        if self.session is None:
            return "ZONE_COMPLETE" if self.last_result is not None else "IDLE"
        if is_game_scene(self.session.scene):
            return "SCENE_GAME"
        return "SCENE_NARRATIVE"

    @property
    def game(self) -> Optional[MiniGame]:
        """Live mini-game of the current scene, if it is a game scene."""
        return self.session.game if self.session else None

    def is_ready(self) -> bool:
        """Whether advance() would be accepted right now."""
        if self.session is None:
            return False
        if self.session.game is None:
            return True
        return self.session.game.is_complete()

    def current_scene(self) -> Optional[SceneView]:
        session = self.session
        if session is None:
            return None
        return SceneView(
            zone_id=session.zone.id,
            scene_index=session.scene_index,
            total=len(session.scenes),
            kind=scene_kind(session.scene),
            scene=session.scene,
            ready=self.is_ready(),
            game_state=session.game.report_state() if session.game else None,
        )

    # --- Transitions ---
    def enter_zone(self, zone_id: str) -> SceneView:
        """Start a traversal of a zone from its first scene.

        Args:
            zone_id: Zone to enter

        Returns:
            View of scene 0

        Raises:
            ZoneLockedError: Unknown zone or prerequisite not complete
            ZoneRestrictedError: Teacher mission does not allow this zone
        """
        zone = self.zones.get(zone_id)
        if zone is None or not self.ledger.is_zone_enterable(zone_id):
            raise ZoneLockedError(zone_id, zone.requires if zone else None)
        mission = self.registry.settings.mission
        if not self.ledger.is_zone_allowed_by_mission(zone_id, mission):
            raise ZoneRestrictedError(zone_id, mission)

        self._discard_session()
        learner = self.registry.get_active()
        self.session = QuestSession(learner_id=learner.id, zone=zone, scenes=zone.build_scenes(learner.name))
        self.last_result = None
        logger.info("%s entered zone '%s'", learner.name, zone_id)
        self._activate()
        return self.current_scene()

    def advance(self):
        """Move to the next scene, finishing the zone after the last one.

        Returns:
            SceneView of the new scene, or ZoneResult when the zone ended

        Raises:
            SceneNotReadyError: No active zone, the learner who entered it was
                removed, or the current mini-game is not complete yet (state
                unchanged)
        """
        session = self.session
        if session is None:
            raise SceneNotReadyError("No zone in progress")
        self._check_learner()
        if not self.is_ready():
            raise SceneNotReadyError(f"Finish the {scene_kind(session.scene)} game first")

        self._release_game()
        session.scene_index += 1
        if session.scene_index >= len(session.scenes):
            return self._finalize()
        self._activate()
        return self.current_scene()

    def retreat(self) -> Optional[SceneView]:
        """Go back one scene (clamped at 0) and restart it fresh.

        Stars already earned are kept.

        Raises:
            SceneNotReadyError: The learner who entered the zone was removed
                (the session is dropped)
        """
        session = self.session
        if session is None:
            return None
        self._check_learner()
        self._release_game()
        session.scene_index = max(0, session.scene_index - 1)
        self._activate()
        return self.current_scene()

    def exit_to_map(self) -> None:
        """Drop the session. Committed stars and progress are untouched."""
        if self.session is not None:
            logger.info("Left zone '%s' at scene %d", self.session.zone.id, self.session.scene_index)
        self._discard_session()
        self.last_result = None

    # --- Internals ---
    def _check_learner(self) -> None:
        learner_id = self.session.learner_id
        if self.registry.snapshot.find(learner_id) is None:
            logger.warning("Learner '%s' was removed mid-zone, dropping the session", learner_id)
            self._discard_session()
            raise SceneNotReadyError("The learner playing this zone no longer exists")

    def _read_aloud(self, text: str) -> None:
        if self.registry.settings.read_aloud:
            logger.info("narration: %s", text)

    def _activate(self) -> None:
        session = self.session
        scene = session.scene
        if isinstance(scene, NarrativeScene):
            session.game = None
            self.announce(scene.text)
            return
        game = self.game_factory.create(scene)
        game.on_award(lambda amount, reason, g=game: self._on_award(g, amount, reason))
        session.game = game
        game.start(scene.theme)

    def _on_award(self, game: MiniGame, amount: int, reason: str) -> None:
        # A discarded round must not pay
        session = self.session
        if session is None or session.game is not game:
            logger.debug("Ignoring award from a discarded %s round", game.kind)
            return
        if self.registry.snapshot.find(session.learner_id) is None:
            logger.warning("Ignoring award for removed learner '%s'", session.learner_id)
            return
        self.registry.award_currency(amount, reason, learner_id=session.learner_id)
        self.announce(f"+{amount} stars: {reason}")

    def _release_game(self) -> None:
        if self.session is not None and self.session.game is not None:
            self.session.game.cancel()
            self.session.game = None

    def _discard_session(self) -> None:
        self._release_game()
        self.session = None

    def _finalize(self) -> ZoneResult:
        zone_id = self.session.zone.id
        learner_id = self.session.learner_id
        self.session = None
        if self.registry.mark_zone_complete(zone_id, learner_id=learner_id):
            self.registry.award_currency(self.zone_bonus, "Zone complete!", learner_id=learner_id)
            result = ZoneResult(zone_id, True, self.zone_bonus, f"{zone_id.title()} complete!")
        else:
            result = ZoneResult(zone_id, False, 0, "Zone already completed")
        logger.info("Zone '%s' finished (first=%s)", zone_id, result.first_completion)
        self.announce(result.message)
        self.last_result = result
        return result
