"""Shared fixtures: an engine wired with in-memory storage and a manual clock."""

import sys
import os
import random
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from config import EngineConfig
from ecoquest import create_engine
from ecoquest.core.persistence import MemoryStore
from ecoquest.core.scheduler import ManualScheduler
from ecoquest.minigames.content import ChoiceOption, ChoiceQuestion, Device, SortItem, ThemeContent
from ecoquest.quest.model import ChoiceScene, CountdownScene, NarrativeScene, SorterScene, Zone


@pytest.fixture
def content():
    """Small, fully known theme content."""
    return ThemeContent(
        categories=["recycle", "compost", "trash"],
        sort_base=[
            SortItem("bottle", "Plastic Bottle", "recycle"),
            SortItem("paper", "Paper", "recycle"),
            SortItem("banana", "Banana Peel", "compost"),
            SortItem("wrapper", "Candy Wrapper", "trash"),
        ],
        sort_themes={"ocean": [SortItem("net", "Old Fishing Net", "trash")]},
        device_base=[
            Device("light", "Lights", starts_on=True, must_end_on=False),
            Device("fan", "Fan", starts_on=True, must_end_on=False),
            Device("tv", "TV", starts_on=True, must_end_on=False),
        ],
        questions={
            "forest": ChoiceQuestion("How should we travel?", (
                ChoiceOption("Walk", True),
                ChoiceOption("Car alone", False),
            )),
        },
    )


@pytest.fixture
def zones():
    """Three chained zones with short scene lists."""
    return {
        "forest": Zone("forest", "Forest", scenes=(
            NarrativeScene("EcoBot", "Hi {player}!"),
            SorterScene("forest"),
            NarrativeScene("Owl", "Now travel."),
            ChoiceScene("forest"),
        )),
        "ocean": Zone("ocean", "Ocean", requires="forest", scenes=(
            NarrativeScene("Turtle", "Splash!"),
            CountdownScene("ocean"),
        )),
        "city": Zone("city", "City", requires="ocean", scenes=(
            NarrativeScene("Narrator", "City!"),
        )),
    }


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def config(tmp_path):
    return EngineConfig(save_dir=str(tmp_path), sorter_item_count=4, countdown_device_count=3)


@pytest.fixture
def narration():
    return []


@pytest.fixture
def engine(config, store, scheduler, zones, content, narration):
    return create_engine(config=config, store=store, scheduler=scheduler, rng=random.Random(7),
                         announce=narration.append, zones=zones, content=content)


def solve_sorter(game):
    """Drop every presented item into its correct bin."""
    for item in list(game.items):
        game.assign(item.id, item.category)
