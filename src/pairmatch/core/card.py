"""Card value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from pairmatch.core.enums import CardState

# from-state -> states it may move to
_TRANSITIONS: dict[CardState, frozenset[CardState]] = {
    CardState.HIDDEN: frozenset({CardState.REVEALED}),
    CardState.REVEALED: frozenset({CardState.HIDDEN, CardState.MATCHED}),
    CardState.MATCHED: frozenset(),
}


class InvalidTransitionError(ValueError):
    """Raised when a card is asked to leave its lifecycle."""


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable snapshot of one card on the board.

    ``id`` is stable for the lifetime of a board; ``sprite_id`` decides
    which cards belong to the same match group.
    """

    id: int
    sprite_id: str
    state: CardState = CardState.HIDDEN

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def can_flip(self) -> bool:
        """Only hidden cards may be revealed."""
        return self.state == CardState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        return self.state == CardState.REVEALED

    @property
    def is_matched(self) -> bool:
        return self.state == CardState.MATCHED

    def matches(self, other: Card | None) -> bool:
        return other is not None and self.sprite_id == other.sprite_id

    # ── Transitions (return a new record) ────────────────────────────────

    def revealed(self) -> Card:
        return self._moved_to(CardState.REVEALED)

    def hidden(self) -> Card:
        return self._moved_to(CardState.HIDDEN)

    def matched(self) -> Card:
        return self._moved_to(CardState.MATCHED)

    def _moved_to(self, target: CardState) -> Card:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Card {self.id} cannot go from {self.state.name} to {target.name}"
            )
        return replace(self, state=target)
