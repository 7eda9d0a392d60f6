"""Eco Quest: zone-based progression engine for an eco-literacy classroom game."""

from .bootstrap import EcoQuestEngine, create_engine

__all__ = ['EcoQuestEngine', 'create_engine']

__version__ = "0.1.0"
