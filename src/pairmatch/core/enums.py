"""Enumerations for the card domain."""

from __future__ import annotations

from enum import IntEnum, auto


class CardState(IntEnum):
    """Lifecycle state of a single card."""

    HIDDEN = auto()
    REVEALED = auto()
    MATCHED = auto()  # terminal

    @property
    def is_face_up(self) -> bool:
        return self is not CardState.HIDDEN
