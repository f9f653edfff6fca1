"""
Level setup: terrain, boxes, links and the player start.

Every call validates its coordinates and raises a SetupError subclass on bad
input, leaving the level as it was, so a driver can report the problem and
keep reading setup commands.
"""

from __future__ import annotations

import logging
from typing import Optional

from .board import EMPTY, STORAGE, WALL, Board
from .boxes import BoxRegistry
from .config import DEFAULT_HISTORY, DEFAULT_MAX_BOXES, Settings
from .errors import InvalidStartError, NotABoxError, OutOfBoundsError, SetupError
from .session import GameSession
from .state import NO_BOX, BoxId, GameState

logger = logging.getLogger(__name__)


class LevelBuilder:
    def __init__(
        self,
        height: int,
        width: int,
        max_boxes: int = DEFAULT_MAX_BOXES,
        history_capacity: int = DEFAULT_HISTORY,
    ) -> None:
        self.board = Board(width=width, height=height)
        self.registry = BoxRegistry(self.board, max_boxes)
        self.history_capacity = history_capacity
        self._started = False

    @classmethod
    def from_settings(cls, settings: Settings) -> 'LevelBuilder':
        return cls(settings.rows, settings.cols, settings.max_boxes, settings.history_capacity)

    def _check_open(self) -> None:
        if self._started:
            raise SetupError('Level setup is closed once play has started')

    def add_wall(self, r: int, c: int) -> None:
        """Turns a cell into a wall. A box standing there is removed."""
        self._check_open()
        self.board.set_terrain(r, c, WALL)
        box_id = self.registry.box_at((r, c))
        if box_id != NO_BOX:
            self.registry.remove_box(box_id)

    def add_walls(self, r1: int, c1: int, r2: int, c2: int) -> None:
        """
        Walls in every in-bounds cell of the rectangle (r1, c1)..(r2, c2).
        Rejected only when both corners are off the board.
        """
        self._check_open()
        if not (self.board.in_bounds(r1, c1) or self.board.in_bounds(r2, c2)):
            raise OutOfBoundsError((r1, c1))
        for r in range(r1, r2 + 1):
            for c in range(c1, c2 + 1):
                if self.board.in_bounds(r, c):
                    self.add_wall(r, c)

    def add_storage(self, r: int, c: int) -> None:
        self._check_open()
        self.board.set_terrain(r, c, STORAGE)

    def add_box(self, r: int, c: int) -> BoxId:
        """Places a box. A wall on that cell is cleared to empty floor."""
        self._check_open()
        self.board.check_bounds(r, c)
        previous = self.board.at(r, c)
        if previous == WALL:
            self.board.set_terrain(r, c, EMPTY)
        try:
            return self.registry.register_box((r, c))
        except SetupError:
            self.board.set_terrain(r, c, previous)
            raise

    def link(self, r1: int, c1: int, r2: int, c2: int) -> BoxId:
        """Links the boxes on two cells. Returns the representative of the merged group."""
        self._check_open()
        if not self.board.in_bounds(r1, c1) or not self.board.in_bounds(r2, c2):
            raise OutOfBoundsError((r1, c1), 'Invalid Location(s)')
        box_a = self.registry.box_at((r1, c1))
        box_b = self.registry.box_at((r2, c2))
        if box_a == NO_BOX:
            raise NotABoxError((r1, c1))
        if box_b == NO_BOX:
            raise NotABoxError((r2, c2))
        return self.registry.link(box_a, box_b)

    def preview(self) -> GameState:
        """Snapshot of the level so far, for display before the player is placed."""
        return self.registry.snapshot((-1, -1))

    def validate_start(self, r: int, c: int) -> Optional[str]:
        """Returns why (r, c) cannot be the player start, or None if it can."""
        if not self.board.in_bounds(r, c):
            return 'out of bounds'
        if self.board.at(r, c) == WALL:
            return 'wall'
        if self.registry.box_at((r, c)) != NO_BOX:
            return 'box'
        return None

    def start(self, r: int, c: int) -> GameSession:
        """Validates the player start and hands the level over to a new session."""
        self._check_open()
        reason = self.validate_start(r, c)
        if reason is not None:
            logger.debug('rejected start (%d, %d): %s', r, c, reason)
            raise InvalidStartError((r, c))
        self._started = True
        return GameSession(self.board, self.registry, (r, c), self.history_capacity)
