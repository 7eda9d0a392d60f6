"""Command handlers for presentation layers.

Each handler returns a result dict with keys:
- ok: False when the request was refused (state unchanged)
- lines: List[str] text to display or narrate
- hints: List[str] short suggestions for the next action
- events_triggered: List[str] machine-readable event names

Gating errors never escape from here; they come back as ``ok=False``.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from ..core.errors import (
    GatingError, SceneNotReadyError, UnknownLearnerError, ZoneLockedError, ZoneRestrictedError,
)
from ..core.ledger import current_badge
from ..core.registry import LearnerRegistry
from ..minigames import ChoiceGame, CountdownGame, SorterGame
from .model import NarrativeScene
from .sequencer import QuestSequencer, SceneView, ZoneResult

logger = logging.getLogger(__name__)


def _result(lines: List[str], ok: bool = True, hints: Optional[List[str]] = None,
            events: Optional[List[str]] = None) -> Dict[str, Any]:
    return {"ok": ok, "lines": lines, "hints": hints or [], "events_triggered": events or []}


def _refused(error: GatingError) -> Dict[str, Any]:
    if isinstance(error, ZoneLockedError):
        if error.requires:
            return _result([f"Locked! Finish {error.requires.title()} first."], ok=False,
                           events=["zone_locked"])
        return _result([f"There is no zone called '{error.zone_id}'."], ok=False, events=["zone_locked"])
    if isinstance(error, ZoneRestrictedError):
        return _result([f"Your teacher's mission today is {error.mission.title()} only."], ok=False,
                       events=["zone_restricted"])
    if isinstance(error, SceneNotReadyError):
        return _result([str(error)], ok=False, hints=["Finish the mini-game to continue."],
                       events=["scene_not_ready"])
    return _result([str(error)], ok=False)


def describe_scene(view: Optional[SceneView]) -> List[str]:
    """Plain text lines for the current scene."""
    if view is None:
        return ["You are on the map."]
    lines = [f"[{view.zone_id.title()} {view.scene_index + 1}/{view.total}]"]
    scene = view.scene
    if isinstance(scene, NarrativeScene):
        lines.append(f"{scene.avatar} {scene.speaker}: {scene.text}".strip())
        if scene.why:
            lines.append(f"Why it matters: {scene.why}")
        return lines

    state = view.game_state or {}
    if view.kind == "sorter":
        lines.append(f"Waste Sorter - bins: {', '.join(state.get('categories', []))}")
        for item in state.get("items", []):
            mark = "x" if item["sorted"] else " "
            lines.append(f"  [{mark}] {item['id']}: {item['emoji']} {item['name']}")
        lines.append(f"{state.get('remaining', 0)} left.")
    elif view.kind == "countdown":
        lines.append(f"Energy Dash - time: {state.get('time_left', 0)}s")
        for dev in state.get("devices", []):
            lines.append(f"  {dev['id']}: {dev['emoji']} {dev['name']} - {'ON' if dev['on'] else 'OFF'}")
    elif view.kind == "choice":
        lines.append(f"Clean Travel Choice: {state.get('prompt', '')}")
        for i, label in enumerate(state.get("options", [])):
            lines.append(f"  {i}) {label}")
    else:
        raise TypeError(f"Unknown scene kind: {view.kind}")
    if view.ready:
        lines.append("Complete! Say 'next' to continue.")
    return lines


def _zone_done_lines(result: ZoneResult) -> List[str]:
    if result.first_completion:
        return [result.message, f"+{result.bonus_awarded} bonus stars!"]
    return [result.message]


def enter_zone_command(seq: QuestSequencer, zone_id: str) -> Dict[str, Any]:
    try:
        view = seq.enter_zone(zone_id)
    except GatingError as e:
        return _refused(e)
    return _result(describe_scene(view), events=["zone_entered"])


def advance_command(seq: QuestSequencer) -> Dict[str, Any]:
    try:
        outcome = seq.advance()
    except GatingError as e:
        return _refused(e)
    if isinstance(outcome, ZoneResult):
        events = ["zone_completed"] if outcome.first_completion else ["zone_replayed"]
        return _result(_zone_done_lines(outcome), events=events)
    return _result(describe_scene(outcome))


def retreat_command(seq: QuestSequencer) -> Dict[str, Any]:
    try:
        view = seq.retreat()
    except GatingError as e:
        return _refused(e)
    if view is None:
        return _result(["You are on the map."], ok=False)
    return _result(describe_scene(view))


def map_command(seq: QuestSequencer) -> Dict[str, Any]:
    """Leave the current zone (if any) and list the zones."""
    seq.exit_to_map()
    lines = ["=== Map ==="]
    for zone_id, status in seq.ledger.map_status().items():
        zone = seq.zones[zone_id]
        if status["complete"]:
            marker = "done"
        elif status["unlocked"]:
            marker = "open"
        else:
            marker = "locked"
        suffix = "" if status["allowed"] else " (not in today's mission)"
        lines.append(f"{zone.icon} {zone.name} [{marker}]{suffix}")
    return _result(lines)


def scene_command(seq: QuestSequencer) -> Dict[str, Any]:
    return _result(describe_scene(seq.current_scene()))


def sort_command(seq: QuestSequencer, item_id: str, category: str) -> Dict[str, Any]:
    game = seq.game
    if not isinstance(game, SorterGame):
        return _result(["There is nothing to sort here."], ok=False)
    if category not in game.categories:
        return _result([f"Pick a bin: {', '.join(game.categories)}."], ok=False)
    try:
        res = game.assign(item_id, category)
    except KeyError:
        return _result([f"No item '{item_id}' here."], ok=False)
    if res.already_sorted:
        return _result(["Already sorted!"])
    if not res.correct:
        return _result(["Oops! Try a different bin."], hints=game.categories)
    lines = [f"Nice! {res.remaining} left."]
    events = ["star_awarded"]
    if game.is_complete():
        lines.append("Sorter complete!")
        events.append("game_complete")
    return _result(lines, events=events)


def toggle_command(seq: QuestSequencer, device_id: str) -> Dict[str, Any]:
    game = seq.game
    if not isinstance(game, CountdownGame):
        return _result(["There is nothing to switch here."], ok=False)
    if game.is_complete():
        return _result(["The dash is over."], ok=False)
    try:
        now_on = game.toggle(device_id)
    except KeyError:
        return _result([f"No device '{device_id}' here."], ok=False)
    lines = [f"{device_id} is now {'ON' if now_on else 'OFF'}."]
    if game.is_complete():
        return _result(lines + ["All set! Energy saved!"], events=["game_complete"])
    return _result(lines + [f"{game.mismatched()} still to fix... keep going!"])


def choose_command(seq: QuestSequencer, index: int) -> Dict[str, Any]:
    game = seq.game
    if not isinstance(game, ChoiceGame):
        return _result(["There is no question here."], ok=False)
    try:
        good = game.choose(index)
    except IndexError:
        return _result([f"No option {index}."], ok=False)
    if good is None:
        return _result(["You already chose."], ok=False)
    if good:
        return _result(["Awesome! Cleaner travel = less pollution."], events=["game_complete"])
    return _result(["Hmm... not the greenest choice. Try again next time!"], events=["game_complete"])


def select_learner_command(registry: LearnerRegistry, learner_id: str, strict: bool = False) -> Dict[str, Any]:
    """Switch the active learner.

    A stale id is a presentation bug: strict mode re-raises it, otherwise
    the current active learner stays selected.
    """
    try:
        learner = registry.set_active(learner_id)
    except UnknownLearnerError:
        if strict:
            raise
        logger.warning("Stale learner id '%s', keeping current active learner", learner_id)
        learner = registry.get_active()
        return _result([f"Active learner: {learner.name}"], ok=False)
    return _result([f"Active learner: {learner.name}"])


def roster_command(registry: LearnerRegistry, zone_ids: List[str]) -> Dict[str, Any]:
    lines = [f"Class: {registry.settings.class_name or '-'}  Mission: {registry.settings.mission}"]
    active_id = registry.get_active().id
    for learner in registry.list_learners():
        marker = "*" if learner.id == active_id else " "
        progress = " ".join(
            f"{z}:{'Y' if learner.is_zone_complete(z) else '-'}" for z in zone_ids
        )
        lines.append(f"{marker} {learner.id} {learner.name} stars={learner.stars} "
                     f"badge={current_badge(learner.stars)} {progress}")
    return _result(lines)
