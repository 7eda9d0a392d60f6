"""Quest sequencing for Eco Quest."""

from .model import NarrativeScene, SorterScene, CountdownScene, ChoiceScene, Zone, SequencerState
from .loader import load_zones, parse_zones, validate_zone_structure
from .factory import MiniGameFactory
from .sequencer import QuestSequencer, SceneView, ZoneResult

__all__ = [
    'NarrativeScene', 'SorterScene', 'CountdownScene', 'ChoiceScene', 'Zone', 'SequencerState',
    'load_zones', 'parse_zones', 'validate_zone_structure',
    'MiniGameFactory',
    'QuestSequencer', 'SceneView', 'ZoneResult',
]
