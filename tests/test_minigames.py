"""Test the sorter, countdown and single-choice mini-games."""

import sys
import os
import random
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from ecoquest.core.errors import MiniGameNotComplete
from ecoquest.core.scheduler import ManualScheduler
from ecoquest.minigames import ChoiceGame, CountdownGame, SorterGame
from ecoquest.minigames.content import Device, ThemeContent


def _collect(game):
    awards = []
    game.on_award(lambda amount, reason: awards.append(amount))
    return awards


# --- Sorter ---

def test_sorter_pays_one_star_per_item_despite_mistakes(content):
    game = SorterGame(content, item_count=4, rng=random.Random(2))
    awards = _collect(game)
    game.start("forest")
    assert len(game.items) == 4

    wrong = {"recycle": "trash", "compost": "recycle", "trash": "compost"}
    for item in game.items:
        res = game.assign(item.id, wrong[item.category])
        assert not res.correct
        assert not game.is_complete()
        res = game.assign(item.id, item.category)
        assert res.correct
        # Re-dropping a sorted item pays nothing
        assert game.assign(item.id, item.category).already_sorted

    assert game.is_complete()
    assert sum(awards) == 4
    assert game.outcome().currency_delta == 4
    assert game.outcome().tier == "full"


def test_sorter_draws_from_theme_pool(content):
    game = SorterGame(content, item_count=10, rng=random.Random(0))
    game.start("ocean")
    assert {i.id for i in game.items} == {"bottle", "paper", "banana", "wrapper", "net"}


def test_sorter_rejects_unknown_item_and_unstarted_round(content):
    game = SorterGame(content, item_count=2)
    with pytest.raises(RuntimeError):
        game.assign("bottle", "recycle")
    game.start("forest")
    with pytest.raises(KeyError):
        game.assign("spaceship", "trash")


def test_sorter_with_no_items_completes_immediately():
    game = SorterGame(ThemeContent(categories=["trash"]), item_count=7)
    game.start("forest")
    assert game.is_complete()
    assert game.outcome().currency_delta == 0


def test_outcome_before_completion_raises(content):
    game = SorterGame(content)
    game.start("forest")
    with pytest.raises(MiniGameNotComplete):
        game.outcome()


def test_restart_discards_previous_round(content):
    game = SorterGame(content, item_count=4, rng=random.Random(5))
    game.start("forest")
    first = game.items[0]
    game.assign(first.id, first.category)
    game.start("forest")
    assert len(game.pending) == 4
    assert game.awarded == 0


# --- Countdown ---

def test_countdown_all_set_before_zero(content):
    sched = ManualScheduler()
    game = CountdownGame(content, sched, seconds=20, device_count=3, rng=random.Random(1))
    awards = _collect(game)
    game.start("forest")
    assert game.timer_active

    sched.advance(5)
    assert game.time_left == 15
    for dev in game.devices:
        assert game.toggle(dev.id) is False

    assert game.is_complete()
    assert game.outcome().tier == "full"
    assert awards == [2]
    assert not game.timer_active
    assert sched.active_count() == 0
    # Clock moving on changes nothing
    sched.advance(30)
    assert game.time_left == 15


def test_countdown_time_up_first(content):
    sched = ManualScheduler()
    game = CountdownGame(content, sched, seconds=20, device_count=3, full_award=2, partial_award=0)
    awards = _collect(game)
    game.start("forest")
    game.toggle(game.devices[0].id)

    sched.advance(20)
    assert game.is_complete()
    assert game.time_left == 0
    assert game.outcome().tier == "partial"
    assert game.outcome().currency_delta < 2
    assert awards == []
    assert sched.active_count() == 0

    # Later toggles are ignored
    before = dict(game.switches)
    assert game.toggle(game.devices[1].id) is None
    assert game.switches == before


def test_countdown_toggle_back_and_forth(content):
    sched = ManualScheduler()
    game = CountdownGame(content, sched, device_count=3)
    game.start("forest")
    dev = game.devices[0].id
    assert game.toggle(dev) is False
    assert game.toggle(dev) is True
    assert game.mismatched() == 3
    with pytest.raises(KeyError):
        game.toggle("toaster")


def test_countdown_already_solved_finishes_without_timer():
    content = ThemeContent(categories=["trash"], device_base=[Device("lamp", "Lamp", starts_on=False)])
    sched = ManualScheduler()
    game = CountdownGame(content, sched)
    game.start("forest")
    assert game.is_complete()
    assert sched.active_count() == 0


def test_countdown_cancel_stops_timer(content):
    sched = ManualScheduler()
    game = CountdownGame(content, sched, device_count=3)
    game.start("forest")
    game.cancel()
    game.cancel()
    sched.advance(30)
    assert not game.is_complete()
    assert game.time_left == 20


# --- Choice ---

def test_choice_good_and_poor_differ(content):
    good = ChoiceGame(content)
    good_awards = _collect(good)
    good.start("forest")
    assert good.choose(0) is True

    poor = ChoiceGame(content)
    poor_awards = _collect(poor)
    poor.start("forest")
    assert poor.choose(1) is False

    assert good.outcome().currency_delta > poor.outcome().currency_delta
    assert good_awards == [1]
    assert poor_awards == []


def test_choice_second_pick_ignored(content):
    game = ChoiceGame(content)
    awards = _collect(game)
    game.start("forest")
    game.choose(1)
    assert game.choose(0) is None
    assert game.outcome().tier == "none"
    assert game.report_state()["chosen"] == 1
    assert awards == []


def test_choice_unknown_theme_uses_forest_question(content):
    game = ChoiceGame(content)
    game.start("desert")
    assert game.report_state()["prompt"] == "How should we travel?"


def test_choice_invalid_index(content):
    game = ChoiceGame(content)
    with pytest.raises(RuntimeError):
        game.choose(0)
    game.start("forest")
    with pytest.raises(IndexError):
        game.choose(5)
    assert not game.is_complete()
