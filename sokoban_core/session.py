from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from .board import Board, Coord, Direction
from .boxes import BoxRegistry
from .config import DEFAULT_HISTORY
from .errors import HistoryFullError
from .history import History
from .moves import BoxMove, resolve_move
from .state import GameState

logger = logging.getLogger(__name__)


def is_won(state: GameState) -> bool:
    """
    True when no box stands off storage. Storage tiles may stay empty;
    a board without boxes is therefore already solved.
    """
    return not state.boxes_off_storage()


@dataclass(frozen=True)
class TurnResult:
    """What a directional command did. rejected is set when the history was full."""
    moved: bool
    won: bool
    move_counter: int
    box_moves: Tuple[BoxMove, ...] = ()
    rejected: bool = False


class GameSession:
    """Owns the board, the box registry and the history for one level."""

    def __init__(
        self,
        board: Board,
        registry: BoxRegistry,
        player: Coord,
        history_capacity: int = DEFAULT_HISTORY,
    ) -> None:
        board.lock()
        self.board = board
        self.registry = registry
        self.history = History(registry.snapshot(player), history_capacity)
        logger.info('session started: %dx%d board, %d box(es), player at %s',
                    board.height, board.width, len(registry), player)

    @property
    def state(self) -> GameState:
        return self.history.current

    @property
    def player(self) -> Coord:
        return self.state.player

    @property
    def move_counter(self) -> int:
        return self.history.move_counter

    def is_won(self) -> bool:
        return is_won(self.state)

    def move(self, direction: Direction) -> TurnResult:
        """Plays one directional command. A move that changes nothing leaves the counter alone."""
        result = resolve_move(self.state, self.registry, direction)
        if not result.moved:
            return TurnResult(moved=False, won=self.is_won(), move_counter=self.move_counter)
        try:
            committed = self.history.commit(result.state)
        except HistoryFullError as e:
            logger.warning('move %s rejected: %s', direction, e)
            return TurnResult(moved=False, won=self.is_won(), move_counter=self.move_counter, rejected=True)
        self._sync(committed)
        return TurnResult(
            moved=True,
            won=is_won(committed),
            move_counter=committed.move_counter,
            box_moves=result.box_moves,
        )

    def undo(self) -> bool:
        """Restores the previous snapshot. Returns False when already at the start."""
        previous = self.history.undo()
        if previous is None:
            return False
        self._sync(previous)
        return True

    def reset(self) -> None:
        logger.info('resetting game')
        self._sync(self.history.reset())

    def counter_message(self) -> str:
        return f'Number of moves so far: {self.move_counter}'

    def _sync(self, state: GameState) -> None:
        self.registry.load(state)
        if __debug__:
            self.registry.check_invariants()
