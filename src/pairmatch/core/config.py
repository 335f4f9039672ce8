"""Board shape and theme descriptors."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

MIN_MATCH_REQUIREMENT = 2
MAX_MATCH_REQUIREMENT = 4

_DEFAULT_SPRITES = (
    "apple",
    "banana",
    "cherry",
    "grape",
    "lemon",
    "lime",
    "mango",
    "melon",
    "orange",
    "peach",
    "pear",
    "pineapple",
    "plum",
    "raspberry",
    "strawberry",
    "kiwi",
    "coconut",
    "fig",
)


class InvalidConfigurationError(ValueError):
    """Board or theme descriptors cannot be used to build a board."""


def _is_count(value: object) -> bool:
    # bool is an int subclass but never a dimension
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class BoardConfiguration:
    """Immutable board shape.

    Args:
        width: Number of columns.
        height: Number of rows.
        match_requirement: How many equal cards form one match group.
    """

    width: int
    height: int
    match_requirement: int = MIN_MATCH_REQUIREMENT

    # Common presets
    @classmethod
    def small(cls, match_requirement: int = MIN_MATCH_REQUIREMENT) -> BoardConfiguration:
        return cls(2, 2, match_requirement)

    @classmethod
    def classic(cls, match_requirement: int = MIN_MATCH_REQUIREMENT) -> BoardConfiguration:
        return cls(4, 4, match_requirement)

    @classmethod
    def large(cls, match_requirement: int = MIN_MATCH_REQUIREMENT) -> BoardConfiguration:
        return cls(6, 6, match_requirement)

    @property
    def total_cards(self) -> int:
        return self.width * self.height

    @property
    def total_pairs(self) -> int:
        return self.total_cards // 2

    def is_valid(self) -> bool:
        if not all(
            _is_count(value) for value in (self.width, self.height, self.match_requirement)
        ):
            return False
        return (
            self.width > 0
            and self.height > 0
            and self.total_cards % 2 == 0
            and MIN_MATCH_REQUIREMENT <= self.match_requirement <= MAX_MATCH_REQUIREMENT
        )

    def __repr__(self) -> str:
        return (
            f"BoardConfiguration({self.width}x{self.height}, "
            f"match={self.match_requirement})"
        )


@dataclass(frozen=True, slots=True)
class ThemeConfiguration:
    """Visual theme: an identifier plus the ordered sprite ids it offers."""

    theme_id: str
    card_sprites: tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept any sequence but keep the stored value hashable and read-only.
        object.__setattr__(self, "card_sprites", tuple(self.card_sprites))

    @classmethod
    def from_names(cls, theme_id: str, names: Iterable[str]) -> ThemeConfiguration:
        return cls(theme_id, tuple(names))

    @classmethod
    def default(cls) -> ThemeConfiguration:
        """Built-in fruit theme, large enough for a 6x6 board."""
        return cls("fruits", _DEFAULT_SPRITES)

    def is_valid(self) -> bool:
        return bool(self.theme_id) and len(self.card_sprites) > 0

    def has_sufficient_sprites(self, board: BoardConfiguration) -> bool:
        return len(self.card_sprites) >= board.total_cards // 2
