"""MatchCoordinator - sequences reveal, pause, evaluation and resolution.

Coordinates: BoardEngine, Scheduler, listeners.
Emits events via simple callbacks so presenters / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from pairmatch.core.board import BoardEngine
from pairmatch.core.config import (
    BoardConfiguration,
    InvalidConfigurationError,
    ThemeConfiguration,
)
from pairmatch.game.interfaces import (
    GamePhase,
    IMatchCoordinator,
    MatchTimings,
    Scheduler,
)

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

BoardInitializedCallback = Callable[[BoardConfiguration], None]
CardRevealedCallback = Callable[[int, str], None]  # card_id, sprite_id
CardsMatchedCallback = Callable[[tuple[int, ...], int], None]  # ids, score
MismatchBeganCallback = Callable[[tuple[int, ...]], None]
CardsMismatchedCallback = Callable[[tuple[int, ...], int], None]  # ids, errors
GameWonCallback = Callable[[int], None]  # final score
PhaseCallback = Callable[[GamePhase], None]
InteractableCallback = Callable[[bool], None]
BoardResetCallback = Callable[[], None]


@dataclass
class MatchEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_board_initialized: list[BoardInitializedCallback] = field(default_factory=list)
    on_card_revealed: list[CardRevealedCallback] = field(default_factory=list)
    on_cards_matched: list[CardsMatchedCallback] = field(default_factory=list)
    on_mismatch_began: list[MismatchBeganCallback] = field(default_factory=list)
    on_cards_mismatched: list[CardsMismatchedCallback] = field(default_factory=list)
    on_game_won: list[GameWonCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_interactable_changed: list[InteractableCallback] = field(default_factory=list)
    on_board_reset: list[BoardResetCallback] = field(default_factory=list)


# ── Coordinator ──────────────────────────────────────────────────────────────


class MatchCoordinator(IMatchCoordinator):
    """Drives a memory game on top of a :class:`BoardEngine`.

    Revealing the last card of a group does not resolve it at once: the
    coordinator marks itself as resolving, waits through the fixed pauses
    of :class:`MatchTimings` via the injected scheduler and only then lets
    the engine commit the match or mismatch.  Selections that arrive while
    resolving are dropped, not queued.

    Thread-safety: all methods (and scheduler callbacks) must run on one
    thread, normally the Qt main thread.
    """

    __slots__ = (
        "_engine",
        "_scheduler",
        "_timings",
        "_phase",
        "_resolving",
        "_pending_ids",
        "_epoch",
        "events",
    )

    def __init__(
        self,
        engine: BoardEngine | None = None,
        *,
        scheduler: Scheduler,
        timings: MatchTimings | None = None,
    ) -> None:
        self._engine = engine if engine is not None else BoardEngine()
        self._scheduler = scheduler
        self._timings = timings if timings is not None else MatchTimings()
        self._phase = GamePhase.NOT_STARTED
        self._resolving = False
        self._pending_ids: tuple[int, ...] = ()
        # Bumped by new_game/reset so steps of an abandoned board never run.
        self._epoch = 0
        self.events = MatchEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def engine(self) -> BoardEngine:
        return self._engine

    @property
    def timings(self) -> MatchTimings:
        return self._timings

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def is_resolving(self) -> bool:
        return self._resolving

    @property
    def is_interactable(self) -> bool:
        return self._phase == GamePhase.AWAITING_REVEAL

    # ── IMatchCoordinator impl ───────────────────────────────────────────

    def new_game(self, config: BoardConfiguration, theme: ThemeConfiguration) -> None:
        try:
            self._engine.initialize(config, theme)
        except InvalidConfigurationError as exc:
            _LOGGER.warning("Rejected board setup: %s", exc)
            raise

        self._abandon_pending_steps()
        for cb in self.events.on_board_initialized:
            cb(config)
        self._set_phase(GamePhase.AWAITING_REVEAL)
        self._emit_interactable(True)

    def on_card_selected(self, card_id: int) -> bool:
        if self._resolving:
            _LOGGER.debug("Selection of card %s dropped: resolution in progress", card_id)
            return False
        if self._phase != GamePhase.AWAITING_REVEAL:
            return False
        if not self._engine.can_reveal(card_id):
            _LOGGER.debug("Selection of card %s ignored", card_id)
            return False

        self._engine.reveal(card_id)
        card = self._engine.get_card(card_id)
        assert card is not None
        for cb in self.events.on_card_revealed:
            cb(card.id, card.sprite_id)

        if self._engine.can_process_match():
            self._begin_resolution()
        return True

    def reset(self) -> None:
        self._abandon_pending_steps()
        self._engine.reset()
        self._set_phase(GamePhase.NOT_STARTED)
        for cb in self.events.on_board_reset:
            cb()

    # ── Resolution sequence ──────────────────────────────────────────────

    def _begin_resolution(self) -> None:
        self._resolving = True
        self._pending_ids = self._engine.revealed_ids
        _LOGGER.debug("Resolving cards %s", self._pending_ids)
        self._set_phase(GamePhase.RESOLVING)
        self._emit_interactable(False)
        self._schedule(self._timings.reveal_settle_ms, self._evaluate)

    def _evaluate(self) -> None:
        ids = self._pending_ids
        if self._engine.check_match():
            self._engine.resolve_match()
            score = self._engine.score
            for cb in self.events.on_cards_matched:
                cb(ids, score)
            self._schedule(self._timings.match_celebration_ms, self._finish_match)
            return

        for cb in self.events.on_mismatch_began:
            cb(ids)
        self._schedule(self._timings.mismatch_display_ms, self._finish_mismatch)

    def _finish_match(self) -> None:
        if self._engine.is_game_won():
            final_score = self._engine.score
            _LOGGER.info("Game won with score %d", final_score)
            for cb in self.events.on_game_won:
                cb(final_score)
            self._end_resolution(game_over=True)
            return
        self._end_resolution(game_over=False)

    def _finish_mismatch(self) -> None:
        ids = self._pending_ids
        self._engine.resolve_mismatch()
        error_count = self._engine.error_count
        for cb in self.events.on_cards_mismatched:
            cb(ids, error_count)
        self._end_resolution(game_over=False)

    def _end_resolution(self, *, game_over: bool) -> None:
        self._resolving = False
        self._pending_ids = ()
        self._set_phase(GamePhase.GAME_OVER if game_over else GamePhase.AWAITING_REVEAL)
        # Board input comes back on either way; GAME_OVER still drops selections.
        self._emit_interactable(True)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _schedule(self, delay_ms: int, step: Callable[[], None]) -> None:
        epoch = self._epoch

        def run() -> None:
            if epoch != self._epoch:
                _LOGGER.debug("Skipping stale resolution step %s", step.__name__)
                return
            step()

        self._scheduler.schedule(delay_ms, run)

    def _abandon_pending_steps(self) -> None:
        self._epoch += 1
        self._resolving = False
        self._pending_ids = ()

    def _set_phase(self, phase: GamePhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_interactable(self, interactable: bool) -> None:
        for cb in self.events.on_interactable_changed:
            cb(interactable)
