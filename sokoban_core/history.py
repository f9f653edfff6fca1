from __future__ import annotations

import logging
from typing import List, Optional

from .config import DEFAULT_HISTORY
from .errors import HistoryFullError
from .state import GameState

logger = logging.getLogger(__name__)


class History:
    """
    Committed snapshots for undo and reset.

    snapshots[0] is the state after setup and snapshots[k] the state after the
    k-th successful move. The cursor is the current move counter; committing
    after an undo discards the undone tail. A full history rejects new commits
    with HistoryFullError rather than evicting, so reset and undo always have
    every snapshot they need.
    """

    def __init__(self, initial: GameState, capacity: int = DEFAULT_HISTORY) -> None:
        if capacity < 1:
            raise ValueError('capacity must be at least 1')
        self.capacity = capacity
        self._snapshots: List[GameState] = [initial.with_counter(0)]
        self._cursor = 0

    def __len__(self) -> int:
        return self._cursor + 1

    @property
    def move_counter(self) -> int:
        return self._cursor

    @property
    def current(self) -> GameState:
        return self._snapshots[self._cursor]

    @property
    def initial(self) -> GameState:
        return self._snapshots[0]

    def commit(self, state: GameState) -> GameState:
        """Appends state as the newest snapshot and returns it, stamped with the new counter."""
        if self._cursor + 1 >= self.capacity:
            raise HistoryFullError(self.capacity)
        del self._snapshots[self._cursor + 1:]
        self._cursor += 1
        stamped = state if state.move_counter == self._cursor else state.with_counter(self._cursor)
        self._snapshots.append(stamped)
        logger.debug('committed snapshot %d', self._cursor)
        return stamped

    def undo(self) -> Optional[GameState]:
        """Steps back one snapshot. Returns None, changing nothing, at the initial state."""
        if self._cursor == 0:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def reset(self) -> GameState:
        self._cursor = 0
        return self._snapshots[0]
