"""Game management layer - coordinator, presenters, view contracts.

Quick start::

    from pairmatch.game import BoardPresenter, MatchCoordinator
    from pairmatch.qt_bridge import QtScheduler

    coordinator = MatchCoordinator(scheduler=QtScheduler())
    presenter = BoardPresenter(coordinator, my_board_view)
    presenter.start(BoardConfiguration.classic(), ThemeConfiguration.default())
"""

from pairmatch.game.coordinator import MatchCoordinator, MatchEvents
from pairmatch.game.interfaces import (
    GamePhase,
    IBoardView,
    ICardView,
    IMatchCoordinator,
    MatchTimings,
    Scheduler,
)
from pairmatch.game.presenter import BoardPresenter, CardPresenter

__all__ = [
    # Interfaces
    "GamePhase",
    "IBoardView",
    "ICardView",
    "IMatchCoordinator",
    "MatchTimings",
    "Scheduler",
    # Concrete
    "BoardPresenter",
    "CardPresenter",
    "MatchCoordinator",
    "MatchEvents",
]
