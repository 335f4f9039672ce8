"""Presenters binding coordinator events to board / card views."""

from __future__ import annotations

from collections.abc import Callable

from pairmatch.core.config import BoardConfiguration, ThemeConfiguration
from pairmatch.game.coordinator import MatchCoordinator
from pairmatch.game.interfaces import IBoardView, ICardView


class CardPresenter:
    """Keeps one :class:`ICardView` in sync with one card id.

    The view starts face down.  Clicks are forwarded to *on_clicked*; the
    coordinator decides whether they have any effect.
    """

    __slots__ = ("_card_id", "_view", "_on_clicked")

    def __init__(
        self,
        card_id: int,
        view: ICardView,
        on_clicked: Callable[[int], object] | None = None,
    ) -> None:
        self._card_id = card_id
        self._view = view
        self._on_clicked = on_clicked

        self._view.set_card_id(card_id)
        self._view.hide_card()

    @property
    def card_id(self) -> int:
        return self._card_id

    def clicked(self) -> None:
        if self._on_clicked is not None:
            self._on_clicked(self._card_id)

    def show_card(self, sprite_id: str) -> None:
        self._view.show_card(sprite_id)

    def hide_card(self) -> None:
        self._view.hide_card()

    def set_matched(self) -> None:
        self._view.set_matched()
        self._view.play_match_animation()

    def play_mismatch_animation(self) -> None:
        self._view.play_mismatch_animation()

    def set_interactable(self, interactable: bool) -> None:
        self._view.set_interactable(interactable)


class BoardPresenter:
    """Applies coordinator notifications to an :class:`IBoardView`."""

    __slots__ = ("_coordinator", "_view", "_card_presenters", "_subscriptions")

    def __init__(self, coordinator: MatchCoordinator, view: IBoardView) -> None:
        self._coordinator = coordinator
        self._view = view
        self._card_presenters: dict[int, CardPresenter] = {}

        events = coordinator.events
        self._subscriptions: list[tuple[list, Callable[..., None]]] = [
            (events.on_board_initialized, self._on_board_initialized),
            (events.on_card_revealed, self._on_card_revealed),
            (events.on_cards_matched, self._on_cards_matched),
            (events.on_mismatch_began, self._on_mismatch_began),
            (events.on_cards_mismatched, self._on_cards_mismatched),
            (events.on_game_won, self._on_game_won),
            (events.on_interactable_changed, self._on_interactable_changed),
            (events.on_board_reset, self._on_board_reset),
        ]
        for handlers, handler in self._subscriptions:
            handlers.append(handler)

    # ── Public API ────────────────────────────────────────────────────────

    def start(self, config: BoardConfiguration, theme: ThemeConfiguration) -> None:
        """Deal a new board.  Raises ``InvalidConfigurationError``."""
        self._coordinator.new_game(config, theme)

    def card_presenter(self, card_id: int) -> CardPresenter | None:
        return self._card_presenters.get(card_id)

    def click(self, card_id: int) -> None:
        """Route a click on *card_id* (unknown ids are ignored)."""
        presenter = self._card_presenters.get(card_id)
        if presenter is not None:
            presenter.clicked()

    def dispose(self) -> None:
        """Unsubscribe from the coordinator and empty the view."""
        for handlers, handler in self._subscriptions:
            if handler in handlers:
                handlers.remove(handler)
        self._subscriptions = []
        self._card_presenters.clear()
        self._view.clear_board()

    # ── Event handlers ───────────────────────────────────────────────────

    def _on_board_initialized(self, config: BoardConfiguration) -> None:
        self._card_presenters.clear()
        self._view.setup_board(config)
        for card in self._coordinator.engine.cards():
            card_view = self._view.create_card_view(card.id)
            self._card_presenters[card.id] = CardPresenter(
                card.id, card_view, self._coordinator.on_card_selected
            )
        self._update_counters()

    def _on_card_revealed(self, card_id: int, sprite_id: str) -> None:
        presenter = self._card_presenters.get(card_id)
        if presenter is not None:
            presenter.show_card(sprite_id)

    def _on_cards_matched(self, card_ids: tuple[int, ...], _score: int) -> None:
        for presenter in self._presenters_for(card_ids):
            presenter.set_matched()
        self._update_counters()

    def _on_mismatch_began(self, card_ids: tuple[int, ...]) -> None:
        for presenter in self._presenters_for(card_ids):
            presenter.play_mismatch_animation()

    def _on_cards_mismatched(self, card_ids: tuple[int, ...], _error_count: int) -> None:
        for presenter in self._presenters_for(card_ids):
            presenter.hide_card()
        self._update_counters()

    def _on_game_won(self, final_score: int) -> None:
        self._view.show_game_won(final_score)

    def _on_interactable_changed(self, interactable: bool) -> None:
        self._view.set_board_interactable(interactable)
        for presenter in self._card_presenters.values():
            presenter.set_interactable(interactable)

    def _on_board_reset(self) -> None:
        self._card_presenters.clear()
        self._view.clear_board()

    # ── Internal ─────────────────────────────────────────────────────────

    def _presenters_for(self, card_ids: tuple[int, ...]) -> list[CardPresenter]:
        return [
            self._card_presenters[card_id]
            for card_id in card_ids
            if card_id in self._card_presenters
        ]

    def _update_counters(self) -> None:
        engine = self._coordinator.engine
        self._view.update_score(engine.score)
        self._view.update_error_count(engine.error_count)
