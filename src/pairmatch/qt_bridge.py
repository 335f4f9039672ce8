"""Qt bridge: event-loop scheduling and signal relays for the coordinator."""

from __future__ import annotations

import random
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from pairmatch.core.board import BoardEngine
from pairmatch.game.coordinator import MatchCoordinator
from pairmatch.game.interfaces import GamePhase, MatchTimings


class QtScheduler:
    """Runs callbacks from single-shot ``QTimer``s on the Qt event loop.

    Nothing blocks: the caller returns immediately and the callback fires
    once the event loop has been idle for the requested delay.
    """

    __slots__ = ("_parent", "_timers")

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent
        self._timers: list[QTimer] = []

    @property
    def pending(self) -> int:
        """Timers that have been started but not fired yet."""
        return len(self._timers)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)

        def fire() -> None:
            if timer in self._timers:
                self._timers.remove(timer)
            timer.deleteLater()
            callback()

        timer.timeout.connect(fire)
        # Keep a Python reference until the timer fires.
        self._timers.append(timer)
        timer.start(max(0, delay_ms))

    def stop_all(self) -> None:
        """Drop every pending callback (used on shutdown)."""
        for timer in self._timers:
            timer.stop()
            timer.deleteLater()
        self._timers.clear()


class QtMatchSignals(QObject):
    """Re-emits :class:`MatchEvents` notifications as Qt signals."""

    board_initialized = pyqtSignal(object)  # BoardConfiguration
    card_revealed = pyqtSignal(int, str)
    cards_matched = pyqtSignal(object, int)  # tuple[int, ...], score
    mismatch_began = pyqtSignal(object)
    cards_mismatched = pyqtSignal(object, int)  # tuple[int, ...], error count
    game_won = pyqtSignal(int)
    phase_changed = pyqtSignal(int)
    interactable_changed = pyqtSignal(bool)
    board_reset = pyqtSignal()

    def __init__(self, coordinator: MatchCoordinator, parent: QObject | None = None) -> None:
        super().__init__(parent)
        events = coordinator.events
        # Stored so dispose() can remove the exact callables it added.
        self._subscriptions: list[tuple[list, Callable[..., None]]] = [
            (events.on_board_initialized, self.board_initialized.emit),
            (events.on_card_revealed, self.card_revealed.emit),
            (events.on_cards_matched, self.cards_matched.emit),
            (events.on_mismatch_began, self.mismatch_began.emit),
            (events.on_cards_mismatched, self.cards_mismatched.emit),
            (events.on_game_won, self.game_won.emit),
            (events.on_phase_changed, self._relay_phase),
            (events.on_interactable_changed, self.interactable_changed.emit),
            (events.on_board_reset, self.board_reset.emit),
        ]
        for handlers, handler in self._subscriptions:
            handlers.append(handler)

    def dispose(self) -> None:
        """Stop relaying.  Call before deleting this object if the coordinator lives on."""
        for handlers, handler in self._subscriptions:
            if handler in handlers:
                handlers.remove(handler)
        self._subscriptions = []

    def _relay_phase(self, phase: GamePhase) -> None:
        self.phase_changed.emit(int(phase))


def create_qt_coordinator(
    *,
    parent: QObject | None = None,
    timings: MatchTimings | None = None,
    rng: random.Random | None = None,
) -> tuple[MatchCoordinator, QtMatchSignals]:
    """Build an engine + coordinator driven by the Qt event loop."""
    coordinator = MatchCoordinator(
        BoardEngine(rng),
        scheduler=QtScheduler(parent),
        timings=timings,
    )
    return coordinator, QtMatchSignals(coordinator, parent)
