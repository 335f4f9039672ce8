"""Abstract interfaces for the game layer.

Follows Dependency Inversion: the coordinator and presenters depend on
these ABCs / protocols, not on a concrete toolkit.  Qt implementations
live in :mod:`pairmatch.qt_bridge`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pairmatch.core.config import BoardConfiguration, ThemeConfiguration


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states of a match coordinator."""

    NOT_STARTED = auto()
    AWAITING_REVEAL = auto()
    RESOLVING = auto()  # a match attempt is being evaluated / animated
    GAME_OVER = auto()


# ── Timing ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MatchTimings:
    """Fixed pauses of the resolution sequence, in milliseconds.

    Args:
        reveal_settle_ms: Pause after the last card of a group is shown.
        match_celebration_ms: Pause after a match before checking for a win.
        mismatch_display_ms: How long a failed group stays face up.
    """

    reveal_settle_ms: int = 300
    match_celebration_ms: int = 500
    mismatch_display_ms: int = 300

    @classmethod
    def instant(cls) -> MatchTimings:
        """Zero delays; steps still run through the scheduler."""
        return cls(0, 0, 0)


class Scheduler(Protocol):
    """Runs *callback* once after *delay_ms* without blocking the caller."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None: ...


# ── Abstract interfaces ─────────────────────────────────────────────────────


class ICardView(ABC):
    """Visual representation of a single card."""

    @abstractmethod
    def set_card_id(self, card_id: int) -> None: ...

    @abstractmethod
    def show_card(self, sprite_id: str) -> None:
        """Display the card face up with *sprite_id*."""

    @abstractmethod
    def hide_card(self) -> None:
        """Display the card face down."""

    @abstractmethod
    def set_matched(self) -> None:
        """Switch to the permanent matched look."""

    @abstractmethod
    def play_match_animation(self) -> None: ...

    @abstractmethod
    def play_mismatch_animation(self) -> None: ...

    @abstractmethod
    def set_interactable(self, interactable: bool) -> None: ...


class IBoardView(ABC):
    """Visual representation of the whole board and its counters."""

    @abstractmethod
    def setup_board(self, config: BoardConfiguration) -> None:
        """Lay out an empty grid for *config*."""

    @abstractmethod
    def clear_board(self) -> None: ...

    @abstractmethod
    def create_card_view(self, card_id: int) -> ICardView: ...

    @abstractmethod
    def update_score(self, score: int) -> None: ...

    @abstractmethod
    def update_error_count(self, error_count: int) -> None: ...

    @abstractmethod
    def show_game_won(self, final_score: int) -> None: ...

    @abstractmethod
    def set_board_interactable(self, interactable: bool) -> None:
        """Enable or disable player input for every card."""


class IMatchCoordinator(ABC):
    """Interface for the match orchestrator."""

    @abstractmethod
    def new_game(self, config: BoardConfiguration, theme: ThemeConfiguration) -> None:
        """Deal a new board.  Raises ``InvalidConfigurationError``."""

    @abstractmethod
    def on_card_selected(self, card_id: int) -> bool:
        """Handle a player's click.  Returns True if the card was revealed."""

    @abstractmethod
    def reset(self) -> None:
        """Throw the board away."""
