"""
Move resolution for one directional input.

A pass pushes a straight line of movers at a time, starting with the player.
Every cell carries a mark for the duration of the pass:

- UNVISITED: not looked at yet.
- PENDING: holds a linked box queued to be pushed once the current line
  has settled.
- FREE: the cell ends up passable (it was empty, or its mover left). A cell
  is marked FREE as soon as its mover starts to advance, so a line that wraps
  all the way round onto its own first cell rotates as a whole.
- BLOCKED: a wall, or a mover that could not advance and stays.

A line advances iff the cell past its last mover ends up FREE. After each box
in the line settles, the other members of its link group that are still
UNVISITED are queued. The queue is drained one line at a time, so a queued
box never enters a cell whose occupant may still be put back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .board import DIRECTIONS, WALL, Coord, Direction
from .boxes import BoxRegistry
from .state import NO_BOX, BoxId, GameState

logger = logging.getLogger(__name__)

UNVISITED = 0
PENDING = 1
FREE = 2
BLOCKED = 3

PLAYER = -1

BoxMove = Tuple[BoxId, Coord, Coord]  # (box, from, to)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a resolution pass. state is unchanged when moved is False."""
    state: GameState
    moved: bool
    player_moved: bool
    box_moves: Tuple[BoxMove, ...]


class _Pass:
    """Working data for a single resolution pass."""

    def __init__(self, work: BoxRegistry, player: Coord, direction: Direction) -> None:
        self.work = work
        self.board = work.board
        self.player = player
        self.direction = direction
        self.marks: List[int] = [UNVISITED] * (self.board.width * self.board.height)
        self.queue: List[BoxId] = []
        self.box_moves: List[BoxMove] = []
        self.player_moved = False

    def mark(self, coord: Coord) -> int:
        return self.marks[self.board.index(*coord)]

    def _set(self, coord: Coord, mark: int) -> None:
        self.marks[self.board.index(*coord)] = mark

    def _occupant(self, coord: Coord) -> int:
        if coord == self.player:
            return PLAYER
        return self.work.box_at(coord)

    def push(self, start: Coord) -> bool:
        """
        Pushes the mover on start and every mover lined up in front of it.
        Returns True if the line advanced.
        """
        line: List[Tuple[Coord, int]] = []
        coord = start
        while True:
            current = self.mark(coord)
            if current in (FREE, BLOCKED):
                free = current == FREE
                break
            self._set(coord, FREE)
            mover = self._occupant(coord)
            if mover == NO_BOX:
                free = self.board.at(*coord) != WALL
                if not free:
                    self._set(coord, BLOCKED)
                break
            if mover != PLAYER:
                self.work.vacate(coord)
            line.append((coord, mover))
            coord = self.board.step(coord, self.direction)

        for coord, mover in reversed(line):
            dest = self.board.step(coord, self.direction)
            if mover == PLAYER:
                self.player_moved = free
            elif free:
                self.work.move_box_to(mover, dest)
                self.box_moves.append((mover, coord, dest))
            else:
                self.work.move_box_to(mover, coord)
            if not free:
                self._set(coord, BLOCKED)
            if mover != PLAYER:
                self._queue_members(mover)
        return free

    def _queue_members(self, box_id: BoxId) -> None:
        for member in sorted(self.work.group_members(box_id), reverse=True):
            pos = self.work.position_of(member)
            if self.mark(pos) == UNVISITED:
                self._set(pos, PENDING)
                self.queue.append(member)

    def run(self) -> None:
        self.push(self.player)
        while self.queue:
            self.push(self.work.position_of(self.queue.pop()))


def resolve_move(state: GameState, registry: BoxRegistry, direction: Direction) -> MoveResult:
    """
    Resolves one directional input against a committed state.

    The registry supplies link groups and is never mutated; the pass runs on a
    private copy loaded with state. On success the returned state carries the
    incremented move counter.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f'unknown direction {direction!r}')
    state.board.check_bounds(*state.player)

    work = registry.copy()
    work.load(state)
    rp = _Pass(work, state.player, direction)
    rp.run()
    player_moved = rp.player_moved
    box_moves = tuple(rp.box_moves)

    if not player_moved and not box_moves:
        logger.debug('%s: nothing moved', direction)
        return MoveResult(state=state, moved=False, player_moved=False, box_moves=())

    player = state.board.step(state.player, direction) if player_moved else state.player
    new_state = work.snapshot(player, state.move_counter + 1)
    logger.debug('%s: player %s -> %s, %d box move(s)', direction, state.player, player, len(box_moves))
    return MoveResult(state=new_state, moved=True, player_moved=player_moved, box_moves=box_moves)
