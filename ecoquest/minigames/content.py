"""Themed content for the mini-games, loaded from a JSON asset.

The asset holds three sections: sorter items per theme, countdown devices
per theme and one single-choice question per theme. Themes add to the base
pools; an unknown theme simply gets the base pool (or the fallback question).
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import jsonschema

from ..core.errors import ContentError
from ..core.schema import THEMES_SCHEMA

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
THEMES_FILE = ASSETS_DIR / "themes.json"
FALLBACK_CHOICE_THEME = "forest"


@dataclass(frozen=True)
class SortItem:
    id: str
    name: str
    category: str
    emoji: str = ""


@dataclass(frozen=True)
class Device:
    id: str
    name: str
    emoji: str = ""
    starts_on: bool = True
    must_end_on: bool = False


@dataclass(frozen=True)
class ChoiceOption:
    label: str
    good: bool


@dataclass(frozen=True)
class ChoiceQuestion:
    prompt: str
    options: Tuple[ChoiceOption, ...]


@dataclass
class ThemeContent:
    categories: List[str]
    sort_base: List[SortItem] = field(default_factory=list)
    sort_themes: Dict[str, List[SortItem]] = field(default_factory=dict)
    device_base: List[Device] = field(default_factory=list)
    device_themes: Dict[str, List[Device]] = field(default_factory=dict)
    questions: Dict[str, ChoiceQuestion] = field(default_factory=dict)

    def sort_pool(self, theme: str) -> List[SortItem]:
        return self.sort_base + self.sort_themes.get(theme, [])

    def device_pool(self, theme: str) -> List[Device]:
        return self.device_base + self.device_themes.get(theme, [])

    def question(self, theme: str) -> ChoiceQuestion:
        if theme in self.questions:
            return self.questions[theme]
        if FALLBACK_CHOICE_THEME in self.questions:
            return self.questions[FALLBACK_CHOICE_THEME]
        raise ContentError(f"No choice question for theme '{theme}'")


def _parse_item(data: Dict[str, Any], categories: List[str]) -> SortItem:
    if data["type"] not in categories:
        raise ContentError(f"Sorter item '{data['id']}' has unknown category '{data['type']}'")
    return SortItem(id=data["id"], name=data["name"], category=data["type"], emoji=data.get("emoji", ""))


def _parse_device(data: Dict[str, Any]) -> Device:
    return Device(
        id=data["id"],
        name=data["name"],
        emoji=data.get("emoji", ""),
        starts_on=data.get("on", True),
        must_end_on=data.get("mustEndOn", False),
    )


def _check_unique_ids(kind: str, base: List[Any], themes: Dict[str, List[Any]]) -> None:
    # A theme pool is base + theme items; ids must be unique across both
    pools = {"base": base}
    pools.update({theme: base + items for theme, items in themes.items()})
    for pool_name, pool in pools.items():
        seen = set()
        for entry in pool:
            if entry.id in seen:
                raise ContentError(f"Duplicate {kind} id '{entry.id}' in the {pool_name} pool")
            seen.add(entry.id)


def parse_theme_content(data: Dict[str, Any]) -> ThemeContent:
    """Validate and convert raw theme data.

    Raises:
        ContentError: If the data violates the schema, references an
            unknown sorter category or repeats an id within a pool
    """
    try:
        jsonschema.validate(data, THEMES_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ContentError(f"Invalid theme content: {e.message}") from e

    sorter = data["sorter"]
    categories = list(sorter["categories"])
    energy = data["energy"]

    sort_base = [_parse_item(i, categories) for i in sorter["base"]]
    sort_themes = {
        theme: [_parse_item(i, categories) for i in items]
        for theme, items in sorter.get("themes", {}).items()
    }
    device_base = [_parse_device(d) for d in energy["base"]]
    device_themes = {
        theme: [_parse_device(d) for d in devices]
        for theme, devices in energy.get("themes", {}).items()
    }
    _check_unique_ids("sorter item", sort_base, sort_themes)
    _check_unique_ids("device", device_base, device_themes)

    return ThemeContent(
        categories=categories,
        sort_base=sort_base,
        sort_themes=sort_themes,
        device_base=device_base,
        device_themes=device_themes,
        questions={
            theme: ChoiceQuestion(
                prompt=q["prompt"],
                options=tuple(ChoiceOption(label=o["label"], good=o["good"]) for o in q["options"]),
            )
            for theme, q in data["travel"].items()
        },
    )


def load_theme_content(path: str | Path = THEMES_FILE) -> ThemeContent:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ContentError(f"Theme file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in theme file: {e}") from e
    return parse_theme_content(data)
