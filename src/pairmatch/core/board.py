"""BoardEngine - card arena, revealed set, scoring and win detection."""

from __future__ import annotations

import logging
import random
from collections.abc import MutableSequence
from dataclasses import dataclass
from typing import TypeVar

from pairmatch.core.card import Card
from pairmatch.core.config import (
    BoardConfiguration,
    InvalidConfigurationError,
    ThemeConfiguration,
)
from pairmatch.core.enums import CardState

_LOGGER = logging.getLogger(__name__)

BASE_MATCH_SCORE = 100
ERROR_PENALTY = 10
MINIMUM_MATCH_SCORE = 10

_T = TypeVar("_T")


def match_score(error_count: int) -> int:
    """Points awarded for a match given the errors made so far."""
    return max(BASE_MATCH_SCORE - error_count * ERROR_PENALTY, MINIMUM_MATCH_SCORE)


def shuffle_in_place(items: MutableSequence[_T], rng: random.Random) -> None:
    """Uniform Fisher-Yates shuffle driven by *rng*."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def deal_sprites(config: BoardConfiguration, theme: ThemeConfiguration) -> list[str]:
    """Unshuffled sprite labels: one pair per slot, cycling through the theme."""
    sprites = theme.card_sprites
    labels: list[str] = []
    for pair_index in range(config.total_pairs):
        sprite_id = sprites[pair_index % len(sprites)]
        labels.append(sprite_id)
        labels.append(sprite_id)
    return labels


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Read-only view of the engine state at one instant."""

    cards: tuple[Card, ...]
    revealed_ids: tuple[int, ...]
    matched_pairs: int
    error_count: int
    score: int
    is_won: bool


class BoardEngine:
    """Owns every card of one board and decides matches.

    All mutation goes through this class.  Cards live in an arena indexed
    by id; callers only ever receive immutable :class:`Card` snapshots.

    Thread-safety: none.  The engine is meant to be driven from a single
    thread (the coordinator / UI thread).
    """

    __slots__ = (
        "_rng",
        "_config",
        "_cards",
        "_revealed",
        "_matched_pairs",
        "_error_count",
        "_score",
    )

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._config: BoardConfiguration | None = None
        self._cards: list[Card] = []
        self._revealed: list[int] = []
        self._matched_pairs = 0
        self._error_count = 0
        self._score = 0

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def config(self) -> BoardConfiguration | None:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._config is not None

    @property
    def matched_pairs(self) -> int:
        return self._matched_pairs

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def score(self) -> int:
        return self._score

    @property
    def revealed_ids(self) -> tuple[int, ...]:
        return tuple(self._revealed)

    # ── Setup ────────────────────────────────────────────────────────────

    def initialize(self, config: BoardConfiguration, theme: ThemeConfiguration) -> None:
        """Deal a freshly shuffled board.

        Raises:
            InvalidConfigurationError: *config* or *theme* is unusable.  The
                engine is left exactly as it was.
        """
        _check_configuration(config, theme)

        labels = deal_sprites(config, theme)
        shuffle_in_place(labels, self._rng)

        self._config = config
        self._cards = [Card(card_id, sprite_id) for card_id, sprite_id in enumerate(labels)]
        self._revealed = []
        self._reset_counters()
        _LOGGER.info(
            "Board initialized: %r with theme %r (%d cards)",
            config,
            theme.theme_id,
            len(self._cards),
        )

    def reset(self) -> None:
        """Discard the board.  ``initialize`` must be called before reuse."""
        self._config = None
        self._cards = []
        self._revealed = []
        self._reset_counters()

    # ── Queries ──────────────────────────────────────────────────────────

    def get_card(self, card_id: int) -> Card | None:
        if 0 <= card_id < len(self._cards):
            return self._cards[card_id]
        return None

    def cards(self) -> tuple[Card, ...]:
        return tuple(self._cards)

    def count(self, state: CardState) -> int:
        """Number of cards currently in *state*."""
        return sum(1 for card in self._cards if card.state == state)

    def can_reveal(self, card_id: int) -> bool:
        if self._config is None:
            return False
        card = self.get_card(card_id)
        if card is None or not card.can_flip:
            return False
        return len(self._revealed) < self._config.match_requirement

    def can_process_match(self) -> bool:
        if self._config is None:
            return False
        return len(self._revealed) == self._config.match_requirement

    def check_match(self) -> bool:
        if not self._revealed or not self.can_process_match():
            return False
        first = self._cards[self._revealed[0]].sprite_id
        return all(self._cards[card_id].sprite_id == first for card_id in self._revealed)

    def is_game_won(self) -> bool:
        if self._config is None:
            return False
        return self._matched_pairs >= self._config.total_pairs

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            cards=tuple(self._cards),
            revealed_ids=tuple(self._revealed),
            matched_pairs=self._matched_pairs,
            error_count=self._error_count,
            score=self._score,
            is_won=self.is_game_won(),
        )

    # ── Mutations ────────────────────────────────────────────────────────

    def reveal(self, card_id: int) -> bool:
        """Turn a hidden card face up.

        Invalid requests (unknown id, card not hidden, group already full)
        are ignored and return False.
        """
        if not self.can_reveal(card_id):
            _LOGGER.debug("Ignoring reveal of card %s", card_id)
            return False
        self._cards[card_id] = self._cards[card_id].revealed()
        self._revealed.append(card_id)
        return True

    def resolve_match(self) -> None:
        """Lock the revealed group as matched and award points."""
        if not self._revealed:
            return
        for card_id in self._revealed:
            self._cards[card_id] = self._cards[card_id].matched()
        self._matched_pairs += 1
        # Uses the error count from before this resolution.
        self._score += match_score(self._error_count)
        self._revealed.clear()

    def resolve_mismatch(self) -> None:
        """Turn the revealed group face down and count an error."""
        if not self._revealed:
            return
        for card_id in self._revealed:
            self._cards[card_id] = self._cards[card_id].hidden()
        self._error_count += 1
        self._revealed.clear()

    # ── Internal ─────────────────────────────────────────────────────────

    def _reset_counters(self) -> None:
        self._matched_pairs = 0
        self._error_count = 0
        self._score = 0


def _check_configuration(config: BoardConfiguration, theme: ThemeConfiguration) -> None:
    if not config.is_valid():
        raise InvalidConfigurationError(f"Invalid board configuration: {config!r}")
    if not theme.is_valid():
        raise InvalidConfigurationError(f"Invalid theme configuration: {theme.theme_id!r}")
    if not theme.has_sufficient_sprites(config):
        raise InvalidConfigurationError(
            f"Theme {theme.theme_id!r} has {len(theme.card_sprites)} sprites, "
            f"board needs at least {config.total_pairs}"
        )
