"""Core domain layer - pure card/board logic with zero external dependencies.

Quick start::

    from pairmatch.core import BoardConfiguration, BoardEngine, ThemeConfiguration

    engine = BoardEngine()
    engine.initialize(BoardConfiguration.classic(), ThemeConfiguration.default())
    engine.reveal(0)
    engine.reveal(1)
    if engine.check_match():
        engine.resolve_match()
    else:
        engine.resolve_mismatch()
"""

from pairmatch.core.board import (
    BASE_MATCH_SCORE,
    ERROR_PENALTY,
    MINIMUM_MATCH_SCORE,
    BoardEngine,
    BoardSnapshot,
    deal_sprites,
    match_score,
    shuffle_in_place,
)
from pairmatch.core.card import Card, InvalidTransitionError
from pairmatch.core.config import (
    MAX_MATCH_REQUIREMENT,
    MIN_MATCH_REQUIREMENT,
    BoardConfiguration,
    InvalidConfigurationError,
    ThemeConfiguration,
)
from pairmatch.core.enums import CardState

__all__ = [
    # Enums
    "CardState",
    # Errors
    "InvalidConfigurationError",
    "InvalidTransitionError",
    # Configuration
    "MAX_MATCH_REQUIREMENT",
    "MIN_MATCH_REQUIREMENT",
    "BoardConfiguration",
    "ThemeConfiguration",
    # Domain objects
    "BoardEngine",
    "BoardSnapshot",
    "Card",
    # Scoring / dealing
    "BASE_MATCH_SCORE",
    "ERROR_PENALTY",
    "MINIMUM_MATCH_SCORE",
    "deal_sprites",
    "match_score",
    "shuffle_in_place",
]
