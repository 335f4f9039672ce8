"""Tests for MatchCoordinator - the resolution orchestrator."""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from pairmatch.core.board import BoardEngine
from pairmatch.core.config import (
    BoardConfiguration,
    InvalidConfigurationError,
    ThemeConfiguration,
)
from pairmatch.core.enums import CardState
from pairmatch.game.coordinator import MatchCoordinator
from pairmatch.game.interfaces import GamePhase, MatchTimings

AB_THEME = ThemeConfiguration("ab", ("a", "b"))


class _ManualScheduler:
    """Collects scheduled steps; tests release them one at a time."""

    def __init__(self) -> None:
        self.pending: list[tuple[int, Callable[[], None]]] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.pending.append((delay_ms, callback))

    def step(self) -> int:
        delay_ms, callback = self.pending.pop(0)
        callback()
        return delay_ms

    def run_all(self) -> list[int]:
        delays: list[int] = []
        while self.pending:
            delays.append(self.step())
        return delays


def _make_coordinator(
    timings: MatchTimings | None = None,
) -> tuple[MatchCoordinator, _ManualScheduler]:
    """Helper: started 2x2 game with a manual scheduler."""
    scheduler = _ManualScheduler()
    coordinator = MatchCoordinator(
        BoardEngine(random.Random(5)),
        scheduler=scheduler,
        timings=timings,
    )
    coordinator.new_game(BoardConfiguration.small(), AB_THEME)
    return coordinator, scheduler


def _ids_by_sprite(coordinator: MatchCoordinator) -> dict[str, list[int]]:
    groups: dict[str, list[int]] = {}
    for card in coordinator.engine.cards():
        groups.setdefault(card.sprite_id, []).append(card.id)
    return groups


class _Recorder:
    """Subscribes to every event and logs (name, payload) tuples."""

    def __init__(self, coordinator: MatchCoordinator) -> None:
        self.log: list[tuple[object, ...]] = []
        ev = coordinator.events
        ev.on_board_initialized.append(lambda c: self.log.append(("init", c)))
        ev.on_card_revealed.append(lambda i, s: self.log.append(("revealed", i, s)))
        ev.on_cards_matched.append(lambda ids, sc: self.log.append(("matched", ids, sc)))
        ev.on_mismatch_began.append(lambda ids: self.log.append(("mismatch_began", ids)))
        ev.on_cards_mismatched.append(
            lambda ids, err: self.log.append(("mismatched", ids, err))
        )
        ev.on_game_won.append(lambda sc: self.log.append(("won", sc)))
        ev.on_interactable_changed.append(lambda b: self.log.append(("input", b)))
        ev.on_board_reset.append(lambda: self.log.append(("reset",)))

    def names(self) -> list[object]:
        return [entry[0] for entry in self.log]


class TestNewGame:
    def test_phase_awaiting(self) -> None:
        coordinator, _ = _make_coordinator()
        assert coordinator.phase == GamePhase.AWAITING_REVEAL
        assert coordinator.is_interactable
        assert not coordinator.is_resolving

    def test_board_initialized_event(self) -> None:
        scheduler = _ManualScheduler()
        coordinator = MatchCoordinator(scheduler=scheduler)
        recorder = _Recorder(coordinator)
        coordinator.new_game(BoardConfiguration.small(), AB_THEME)
        assert recorder.log == [("init", BoardConfiguration.small()), ("input", True)]

    def test_phase_event(self) -> None:
        coordinator = MatchCoordinator(scheduler=_ManualScheduler())
        phases: list[GamePhase] = []
        coordinator.events.on_phase_changed.append(phases.append)
        coordinator.new_game(BoardConfiguration.small(), AB_THEME)
        assert phases == [GamePhase.AWAITING_REVEAL]

    def test_invalid_configuration_propagates(self) -> None:
        coordinator = MatchCoordinator(scheduler=_ManualScheduler())
        recorder = _Recorder(coordinator)
        with pytest.raises(InvalidConfigurationError):
            coordinator.new_game(BoardConfiguration(3, 3), AB_THEME)
        assert coordinator.phase == GamePhase.NOT_STARTED
        assert not coordinator.is_resolving
        assert recorder.log == []

    def test_invalid_configuration_keeps_running_game(self) -> None:
        coordinator, _ = _make_coordinator()
        cards = coordinator.engine.cards()
        with pytest.raises(InvalidConfigurationError):
            coordinator.new_game(BoardConfiguration.small(), ThemeConfiguration("x", ()))
        assert coordinator.engine.cards() == cards
        assert coordinator.phase == GamePhase.AWAITING_REVEAL

    def test_default_timings(self) -> None:
        coordinator = MatchCoordinator(scheduler=_ManualScheduler())
        assert coordinator.timings == MatchTimings(300, 500, 300)


class TestSelection:
    def test_first_card_revealed(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        assert coordinator.on_card_selected(0)
        card = coordinator.engine.get_card(0)
        assert card is not None
        assert recorder.log == [("revealed", 0, card.sprite_id)]
        assert scheduler.pending == []
        assert coordinator.phase == GamePhase.AWAITING_REVEAL

    def test_same_card_twice_ignored(self) -> None:
        coordinator, _ = _make_coordinator()
        coordinator.on_card_selected(0)
        assert not coordinator.on_card_selected(0)
        assert coordinator.engine.revealed_ids == (0,)

    def test_unknown_card_ignored(self) -> None:
        coordinator, _ = _make_coordinator()
        recorder = _Recorder(coordinator)
        assert not coordinator.on_card_selected(99)
        assert recorder.log == []

    def test_selection_before_new_game_ignored(self) -> None:
        coordinator = MatchCoordinator(scheduler=_ManualScheduler())
        assert not coordinator.on_card_selected(0)

    def test_full_group_starts_resolution(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        coordinator.on_card_selected(0)
        coordinator.on_card_selected(1)
        assert coordinator.is_resolving
        assert coordinator.phase == GamePhase.RESOLVING
        assert not coordinator.is_interactable
        assert recorder.log[-1] == ("input", False)
        assert [delay for delay, _ in scheduler.pending] == [300]

    def test_selection_dropped_while_resolving(self) -> None:
        coordinator, scheduler = _make_coordinator()
        coordinator.on_card_selected(0)
        coordinator.on_card_selected(1)
        assert not coordinator.on_card_selected(2)
        assert not coordinator.on_card_selected(3)
        card = coordinator.engine.get_card(2)
        assert card is not None and card.state == CardState.HIDDEN
        assert len(scheduler.pending) == 1

    def test_dropped_selection_is_not_queued(self) -> None:
        coordinator, scheduler = _make_coordinator()
        groups = _ids_by_sprite(coordinator)
        coordinator.on_card_selected(groups["a"][0])
        coordinator.on_card_selected(groups["b"][0])
        coordinator.on_card_selected(groups["a"][1])
        scheduler.run_all()
        assert coordinator.engine.revealed_ids == ()
        assert coordinator.engine.count(CardState.HIDDEN) == 4


class TestMatchSequence:
    def test_match_flow(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        a_ids = _ids_by_sprite(coordinator)["a"]
        for card_id in a_ids:
            coordinator.on_card_selected(card_id)

        # reveal-settle pause: nothing resolved yet
        assert coordinator.engine.matched_pairs == 0
        assert scheduler.step() == 300

        assert coordinator.engine.matched_pairs == 1
        assert recorder.log[-1] == ("matched", tuple(a_ids), 100)
        assert coordinator.is_resolving

        assert scheduler.step() == 500
        assert not coordinator.is_resolving
        assert coordinator.phase == GamePhase.AWAITING_REVEAL
        assert recorder.log[-1] == ("input", True)
        assert "won" not in recorder.names()

    def test_matched_event_after_state_committed(self) -> None:
        coordinator, scheduler = _make_coordinator()
        seen: list[CardState] = []

        def on_matched(ids: tuple[int, ...], _score: int) -> None:
            for card_id in ids:
                card = coordinator.engine.get_card(card_id)
                assert card is not None
                seen.append(card.state)

        coordinator.events.on_cards_matched.append(on_matched)
        for card_id in _ids_by_sprite(coordinator)["a"]:
            coordinator.on_card_selected(card_id)
        scheduler.run_all()
        assert seen == [CardState.MATCHED, CardState.MATCHED]

    def test_game_won(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        groups = _ids_by_sprite(coordinator)
        for sprite in ("a", "b"):
            for card_id in groups[sprite]:
                coordinator.on_card_selected(card_id)
            scheduler.run_all()

        assert recorder.log[-2:] == [("won", 200), ("input", True)]
        assert coordinator.phase == GamePhase.GAME_OVER
        assert not coordinator.is_resolving
        assert not coordinator.is_interactable
        assert not coordinator.on_card_selected(0)

    def test_game_won_emitted_after_celebration_pause(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        groups = _ids_by_sprite(coordinator)
        for card_id in groups["a"]:
            coordinator.on_card_selected(card_id)
        scheduler.run_all()
        for card_id in groups["b"]:
            coordinator.on_card_selected(card_id)
        scheduler.step()
        assert coordinator.engine.is_game_won()
        assert "won" not in recorder.names()
        scheduler.step()
        assert recorder.names()[-2:] == ["won", "input"]


class TestMismatchSequence:
    def test_mismatch_flow(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        groups = _ids_by_sprite(coordinator)
        pair = (groups["a"][0], groups["b"][0])
        for card_id in pair:
            coordinator.on_card_selected(card_id)

        assert scheduler.step() == 300
        assert recorder.log[-1] == ("mismatch_began", pair)
        # Cards stay face up during the failure cue.
        assert coordinator.engine.error_count == 0
        assert coordinator.engine.revealed_ids == pair

        assert scheduler.step() == 300
        assert recorder.log[-2] == ("mismatched", pair, 1)
        assert recorder.log[-1] == ("input", True)
        assert coordinator.engine.count(CardState.HIDDEN) == 4
        assert coordinator.phase == GamePhase.AWAITING_REVEAL

    def test_score_after_error(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        groups = _ids_by_sprite(coordinator)
        coordinator.on_card_selected(groups["a"][0])
        coordinator.on_card_selected(groups["b"][0])
        scheduler.run_all()
        for card_id in groups["a"]:
            coordinator.on_card_selected(card_id)
        scheduler.run_all()
        assert ("matched", tuple(groups["a"]), 90) in recorder.log

    def test_custom_timings(self) -> None:
        coordinator, scheduler = _make_coordinator(MatchTimings(10, 20, 30))
        groups = _ids_by_sprite(coordinator)
        coordinator.on_card_selected(groups["a"][0])
        coordinator.on_card_selected(groups["b"][0])
        assert scheduler.run_all() == [10, 30]


class TestEventOrder:
    def test_full_game_order(self) -> None:
        coordinator, scheduler = _make_coordinator()
        recorder = _Recorder(coordinator)
        groups = _ids_by_sprite(coordinator)

        coordinator.on_card_selected(groups["a"][0])
        coordinator.on_card_selected(groups["b"][0])
        scheduler.run_all()
        for sprite in ("a", "b"):
            for card_id in groups[sprite]:
                coordinator.on_card_selected(card_id)
            scheduler.run_all()

        assert recorder.names() == [
            "revealed", "revealed", "input", "mismatch_began", "mismatched", "input",
            "revealed", "revealed", "input", "matched", "input",
            "revealed", "revealed", "input", "matched", "won", "input",
        ]  # fmt: skip


class TestReset:
    def test_reset_discards_board(self) -> None:
        coordinator, _ = _make_coordinator()
        recorder = _Recorder(coordinator)
        coordinator.reset()
        assert coordinator.phase == GamePhase.NOT_STARTED
        assert not coordinator.engine.is_initialized
        assert recorder.log == [("reset",)]

    def test_reset_abandons_in_flight_resolution(self) -> None:
        coordinator, scheduler = _make_coordinator()
        coordinator.on_card_selected(0)
        coordinator.on_card_selected(1)
        recorder = _Recorder(coordinator)
        coordinator.reset()
        assert not coordinator.is_resolving
        scheduler.run_all()
        assert recorder.names() == ["reset"]

    def test_new_game_abandons_in_flight_resolution(self) -> None:
        coordinator, scheduler = _make_coordinator()
        coordinator.on_card_selected(0)
        coordinator.on_card_selected(1)
        coordinator.new_game(BoardConfiguration.small(), AB_THEME)
        scheduler.run_all()
        engine = coordinator.engine
        assert (engine.matched_pairs, engine.error_count) == (0, 0)
        assert coordinator.phase == GamePhase.AWAITING_REVEAL
        assert coordinator.on_card_selected(0)
