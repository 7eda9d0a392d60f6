"""Test the command layer result dicts."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from conftest import solve_sorter
from ecoquest.core.errors import UnknownLearnerError
from ecoquest.quest import commands


def _assert_shape(res):
    assert set(res) == {"ok", "lines", "hints", "events_triggered"}
    assert isinstance(res["lines"], list)


def test_enter_locked_zone_is_refused(engine):
    res = commands.enter_zone_command(engine.sequencer, "ocean")
    _assert_shape(res)
    assert res["ok"] is False
    assert "Finish Forest first" in res["lines"][0]
    assert res["events_triggered"] == ["zone_locked"]


def test_enter_restricted_zone_is_refused(engine):
    engine.registry.set_mission("city")
    res = commands.enter_zone_command(engine.sequencer, "forest")
    assert res["ok"] is False
    assert res["events_triggered"] == ["zone_restricted"]


def test_enter_and_describe_scene(engine):
    res = commands.enter_zone_command(engine.sequencer, "forest")
    assert res["ok"]
    assert res["lines"][0] == "[Forest 1/4]"
    assert "EcoBot: Hi Guest!" in res["lines"][1]


def test_advance_not_ready_gives_hint(engine):
    seq = engine.sequencer
    commands.enter_zone_command(seq, "forest")
    commands.advance_command(seq)
    res = commands.advance_command(seq)
    assert res["ok"] is False
    assert res["hints"]
    assert res["events_triggered"] == ["scene_not_ready"]


def test_full_zone_through_commands(engine):
    seq = engine.sequencer
    commands.enter_zone_command(seq, "forest")
    res = commands.advance_command(seq)
    assert any("bins" in line for line in res["lines"])

    items = list(seq.game.items)
    res = commands.sort_command(seq, items[0].id, "compost" if items[0].category != "compost" else "trash")
    assert res["ok"] and "Oops" in res["lines"][0]
    for item in items:
        res = commands.sort_command(seq, item.id, item.category)
    assert "game_complete" in res["events_triggered"]

    commands.advance_command(seq)
    commands.advance_command(seq)
    res = commands.choose_command(seq, 0)
    assert res["events_triggered"] == ["game_complete"]
    assert commands.choose_command(seq, 1)["ok"] is False

    res = commands.advance_command(seq)
    assert res["events_triggered"] == ["zone_completed"]
    assert "+3 bonus stars!" in res["lines"]


def test_game_commands_on_wrong_scene(engine):
    seq = engine.sequencer
    assert commands.sort_command(seq, "bottle", "recycle")["ok"] is False
    assert commands.toggle_command(seq, "tv")["ok"] is False
    assert commands.choose_command(seq, 0)["ok"] is False


def test_sort_command_bad_input(engine):
    seq = engine.sequencer
    commands.enter_zone_command(seq, "forest")
    commands.advance_command(seq)
    assert commands.sort_command(seq, "bottle", "space")["ok"] is False
    assert commands.sort_command(seq, "rocket", "trash")["ok"] is False


def test_toggle_command(engine):
    seq = engine.sequencer
    engine.registry.mark_zone_complete("forest")
    commands.enter_zone_command(seq, "ocean")
    commands.advance_command(seq)
    devices = [d.id for d in seq.game.devices]
    res = commands.toggle_command(seq, devices[0])
    assert res["lines"][0] == f"{devices[0]} is now OFF."
    for dev in devices[1:]:
        res = commands.toggle_command(seq, dev)
    assert res["events_triggered"] == ["game_complete"]
    assert commands.toggle_command(seq, devices[0])["ok"] is False


def test_map_command_lists_zones(engine):
    engine.registry.mark_zone_complete("forest")
    res = commands.map_command(engine.sequencer)
    assert res["lines"][0] == "=== Map ==="
    assert "Forest [done]" in res["lines"][1]
    assert "Ocean [open]" in res["lines"][2]
    assert "City [locked]" in res["lines"][3]


def test_retreat_on_map(engine):
    assert commands.retreat_command(engine.sequencer)["ok"] is False


def test_select_learner(engine):
    ava = engine.registry.create_learner("Ava")
    res = commands.select_learner_command(engine.registry, ava.id)
    assert res["ok"] and res["lines"] == ["Active learner: Ava"]


def test_select_stale_learner_degrades(engine):
    res = commands.select_learner_command(engine.registry, "s_gone")
    assert res["ok"] is False
    assert engine.registry.get_active().id == "guest"


def test_select_stale_learner_strict(engine):
    with pytest.raises(UnknownLearnerError):
        commands.select_learner_command(engine.registry, "s_gone", strict=True)


def test_roster_command(engine):
    engine.registry.create_learner("Ava")
    engine.registry.mark_zone_complete("forest")
    res = commands.roster_command(engine.registry, ["forest", "ocean"])
    assert len(res["lines"]) == 3
    assert res["lines"][1].startswith("* guest Guest")
    assert "forest:Y ocean:-" in res["lines"][1]


def test_commands_refuse_after_player_was_removed(engine):
    reg = engine.registry
    seq = engine.sequencer
    ava = reg.create_learner("Ava")
    reg.set_active(ava.id)
    commands.enter_zone_command(seq, "forest")
    reg.remove_learner(ava.id)

    res = commands.retreat_command(seq)
    _assert_shape(res)
    assert res["ok"] is False
    assert res["events_triggered"] == ["scene_not_ready"]
    assert commands.advance_command(seq)["ok"] is False
    assert commands.scene_command(seq)["lines"] == ["You are on the map."]
