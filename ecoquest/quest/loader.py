"""Zone loader from structured JSON files.

Zones are defined once in a JSON asset, validated against ZONES_SCHEMA and
converted into immutable Zone objects. The prerequisite graph is checked
too: every ``requires`` must name a zone defined earlier in the file, and
the first zone must be open.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from ..core.errors import ContentError
from ..core.schema import ZONES_SCHEMA
from .model import ChoiceScene, CountdownScene, NarrativeScene, Scene, SorterScene, Zone

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
ZONES_FILE = ASSETS_DIR / "zones.json"


def load_zones(zones_file_path: str | Path = ZONES_FILE) -> Dict[str, Zone]:
    """Load zone definitions from a JSON file.

    Args:
        zones_file_path: Path to the zones JSON file

    Returns:
        Zones by id, in topology order

    Raises:
        ContentError: If the file is missing, not JSON, or invalid
    """
    zones_path = Path(zones_file_path)
    if not zones_path.exists():
        raise ContentError(f"Zones file not found: {zones_file_path}")

    try:
        with open(zones_path, 'r', encoding='utf-8') as f:
            zones_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in zones file: {e}")

    return parse_zones(zones_data)


def parse_zones(zones_data: Dict[str, Any]) -> Dict[str, Zone]:
    """Validate raw zone data and build Zone objects."""
    errors = validate_zone_structure(zones_data)
    if errors:
        raise ContentError("; ".join(errors))

    zones: Dict[str, Zone] = {}
    for zone_data in zones_data['zones']:
        zone = _parse_zone(zone_data)
        zones[zone.id] = zone
    logger.debug("Loaded %d zones", len(zones))
    return zones


def _parse_zone(zone_data: Dict[str, Any]) -> Zone:
    return Zone(
        id=zone_data['id'],
        name=zone_data.get('name', zone_data['id']),
        scenes=tuple(_parse_scene(s) for s in zone_data['scenes']),
        requires=zone_data.get('requires'),
        icon=zone_data.get('icon', ''),
        description=zone_data.get('description', ''),
    )


def _parse_scene(scene_data: Dict[str, Any]) -> Scene:
    scene_type = scene_data['type']
    if scene_type == 'story':
        return NarrativeScene(
            speaker=scene_data.get('who', ''),
            text=scene_data.get('text', ''),
            avatar=scene_data.get('avatar', ''),
            why=scene_data.get('why', ''),
        )
    if scene_type == 'sorter':
        return SorterScene(theme=scene_data['theme'])
    if scene_type == 'energy':
        return CountdownScene(theme=scene_data['theme'])
    if scene_type == 'travel':
        return ChoiceScene(theme=scene_data['theme'])
    raise ContentError(f"Unknown scene type: {scene_type}")


def validate_zone_structure(zones_data: Dict[str, Any]) -> List[str]:
    """Validate zone data.

    Args:
        zones_data: Parsed zones JSON data

    Returns:
        List of validation error messages (empty if valid)
    """
    try:
        jsonschema.validate(zones_data, ZONES_SCHEMA)
    except jsonschema.ValidationError as e:
        return [f"Schema error at {'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"]

    errors = []
    seen = set()
    for i, zone in enumerate(zones_data['zones']):
        zone_id = zone['id']
        if zone_id in seen:
            errors.append(f"Zone {i} duplicates id '{zone_id}'")
        requires = zone.get('requires')
        if i == 0 and requires:
            errors.append(f"First zone '{zone_id}' must not have a prerequisite")
        if requires and requires not in seen:
            errors.append(f"Zone '{zone_id}' requires unknown or later zone '{requires}'")
        for j, scene in enumerate(zone['scenes']):
            if scene['type'] != 'story' and not scene.get('theme'):
                errors.append(f"Zone '{zone_id}' scene {j} needs a 'theme'")
        seen.add(zone_id)
    return errors
