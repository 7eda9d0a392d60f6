"""Mini-game state machines."""

from .base import MiniGame, Outcome
from .shuffle import fisher_yates, draw
from .content import ThemeContent, load_theme_content
from .sorter import SorterGame, SortResult
from .countdown import CountdownGame
from .choice import ChoiceGame

__all__ = [
    'MiniGame', 'Outcome',
    'fisher_yates', 'draw',
    'ThemeContent', 'load_theme_content',
    'SorterGame', 'SortResult',
    'CountdownGame',
    'ChoiceGame',
]
