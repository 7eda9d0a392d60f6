"""Quest data models: zones and their scenes.

A scene is one of a closed set of variants. Code that interprets scenes
dispatches on the concrete class and raises on anything else, so a new kind
of scene has to be handled everywhere before it can be used.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import List, Literal, Optional, Tuple, Union

PLAYER_PLACEHOLDER = "{player}"

# Sequencer states
SequencerState = Literal["IDLE", "SCENE_NARRATIVE", "SCENE_GAME", "ZONE_COMPLETE"]


@dataclass(frozen=True)
class NarrativeScene:
    """A story beat. Always satisfied; advancing never needs anything."""
    speaker: str
    text: str
    avatar: str = ""
    why: str = ""


@dataclass(frozen=True)
class SorterScene:
    theme: str


@dataclass(frozen=True)
class CountdownScene:
    theme: str


@dataclass(frozen=True)
class ChoiceScene:
    theme: str


Scene = Union[NarrativeScene, SorterScene, CountdownScene, ChoiceScene]
GameScene = Union[SorterScene, CountdownScene, ChoiceScene]


def scene_kind(scene: Scene) -> str:
    if isinstance(scene, NarrativeScene):
        return "narrative"
    if isinstance(scene, SorterScene):
        return "sorter"
    if isinstance(scene, CountdownScene):
        return "countdown"
    if isinstance(scene, ChoiceScene):
        return "choice"
    raise TypeError(f"Unknown scene type: {type(scene).__name__}")


def is_game_scene(scene: Scene) -> bool:
    return scene_kind(scene) != "narrative"


@dataclass(frozen=True)
class Zone:
    id: str
    name: str
    scenes: Tuple[Scene, ...] = field(default_factory=tuple)
    requires: Optional[str] = None  # zone that must be complete first
    icon: str = ""
    description: str = ""

    def build_scenes(self, player_name: str) -> List[Scene]:
        """Materialize the scene list for one traversal.

        Args:
            player_name: Active learner's display name for narrative text

        Returns:
            New list of scenes with the player placeholder filled in
        """
        scenes: List[Scene] = []
        for scene in self.scenes:
            if isinstance(scene, NarrativeScene) and PLAYER_PLACEHOLDER in scene.text:
                scene = replace(scene, text=scene.text.replace(PLAYER_PLACEHOLDER, player_name))
            scenes.append(scene)
        return scenes
