"""
Box identities, positions and link groups.

Groups are a union-find over box ids (union by size, path compression).
Each root also keeps the full member set so group_members() does not have
to scan the forest; merging moves the smaller set into the larger one.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Set

from .board import Board, Coord
from .config import DEFAULT_MAX_BOXES
from .errors import InvariantError, SetupError, TooManyBoxesError
from .state import NO_BOX, BoxId, GameState

logger = logging.getLogger(__name__)


class BoxRegistry:
    """Tracks where every box is and which boxes are linked together."""

    def __init__(self, board: Board, max_boxes: int = DEFAULT_MAX_BOXES) -> None:
        self.board = board
        self.max_boxes = max_boxes
        self._next_id: BoxId = 1
        self._positions: Dict[BoxId, Coord] = {}
        self._occupancy: List[BoxId] = [NO_BOX] * (board.width * board.height)
        self._parent: Dict[BoxId, BoxId] = {}
        self._members: Dict[BoxId, Set[BoxId]] = {}  # root -> members

    # ---------- positions ----------

    def __len__(self) -> int:
        return len(self._positions)

    def box_ids(self) -> List[BoxId]:
        return sorted(self._positions)

    def box_at(self, coord: Coord) -> BoxId:
        """Returns the box standing on coord, or NO_BOX."""
        return self._occupancy[self.board.index(*coord)]

    def position_of(self, box_id: BoxId) -> Coord:
        return self._positions[box_id]

    def register_box(self, coord: Coord) -> BoxId:
        """Places a new box at coord in a group of its own and returns its id."""
        self.board.check_bounds(*coord)
        if len(self._positions) >= self.max_boxes:
            raise TooManyBoxesError(self.max_boxes)
        if self.box_at(coord) != NO_BOX:
            raise SetupError(f'Location [{coord[0]}][{coord[1]}] already holds a box')
        box_id = self._next_id
        self._next_id += 1
        self._positions[box_id] = coord
        self._occupancy[self.board.index(*coord)] = box_id
        self._parent[box_id] = box_id
        self._members[box_id] = {box_id}
        logger.debug('registered box %d at %s', box_id, coord)
        return box_id

    def remove_box(self, box_id: BoxId) -> None:
        """Removes a box during setup. The rest of its group stays linked."""
        coord = self._positions.pop(box_id)
        self._occupancy[self.board.index(*coord)] = NO_BOX
        root = self.find(box_id)
        members = self._members.pop(root)
        members.discard(box_id)
        del self._parent[box_id]
        if members:
            new_root = min(members)
            for member in members:
                self._parent[member] = new_root
            self._members[new_root] = members
        logger.debug('removed box %d from %s', box_id, coord)

    def move_box_to(self, box_id: BoxId, coord: Coord) -> None:
        """
        Moves a box, updating its position and the occupancy map together.
        Raises InvariantError, leaving both untouched, if another box holds coord.
        """
        if box_id not in self._positions:
            raise InvariantError(f'unknown box {box_id}', box_id)
        dest = self.board.index(*coord)
        holder = self._occupancy[dest]
        if holder not in (NO_BOX, box_id):
            raise InvariantError(f'box {box_id} cannot move onto box {holder} at {coord}', box_id)
        src = self.board.index(*self._positions[box_id])
        if self._occupancy[src] == box_id:
            self._occupancy[src] = NO_BOX
        self._occupancy[dest] = box_id
        self._positions[box_id] = coord

    def vacate(self, coord: Coord) -> BoxId:
        """
        Lifts the box off coord in the occupancy map only; its stored position is kept.
        Used while resolving a push; follow with move_box_to to land or restore it.
        """
        idx = self.board.index(*coord)
        box_id = self._occupancy[idx]
        self._occupancy[idx] = NO_BOX
        return box_id

    # ---------- groups ----------

    def find(self, box_id: BoxId) -> BoxId:
        """Returns the representative of the group holding box_id."""
        parent = self._parent
        while parent[box_id] != box_id:
            parent[box_id] = parent[parent[box_id]]
            box_id = parent[box_id]
        return box_id

    def link(self, box_a: BoxId, box_b: BoxId) -> BoxId:
        """Merges the groups of both boxes and returns the surviving representative."""
        root_a = self.find(box_a)
        root_b = self.find(box_b)
        if root_a == root_b:
            return root_a
        if len(self._members[root_a]) < len(self._members[root_b]):
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._members[root_a] |= self._members.pop(root_b)
        logger.debug('linked boxes %d and %d (group %d, size %d)',
                     box_a, box_b, root_a, len(self._members[root_a]))
        return root_a

    def group_members(self, box_id: BoxId) -> FrozenSet[BoxId]:
        """All boxes transitively linked with box_id, itself included."""
        return frozenset(self._members[self.find(box_id)])

    def groups(self) -> List[FrozenSet[BoxId]]:
        return sorted((frozenset(m) for m in self._members.values()), key=min)

    # ---------- snapshots ----------

    def snapshot(self, player: Coord, move_counter: int = 0) -> GameState:
        return GameState(
            board=self.board,
            occupancy=tuple(self._occupancy),
            boxes=tuple(sorted(self._positions.items())),
            player=player,
            move_counter=move_counter,
        )

    def load(self, state: GameState) -> None:
        """Replaces positions and occupancy with those of state. Groups are untouched."""
        positions = state.box_positions()
        if set(positions) != set(self._positions):
            raise InvariantError('snapshot does not hold the same boxes as the registry')
        self._positions = positions
        self._occupancy = list(state.occupancy)

    def copy(self) -> 'BoxRegistry':
        """Independent copy; mutating it never affects this registry."""
        other = BoxRegistry(self.board, self.max_boxes)
        other._next_id = self._next_id
        other._positions = dict(self._positions)
        other._occupancy = list(self._occupancy)
        other._parent = dict(self._parent)
        other._members = {root: set(m) for root, m in self._members.items()}
        return other

    def check_invariants(self) -> None:
        """Raises InvariantError if any position and the occupancy map disagree."""
        seen: Dict[Coord, BoxId] = {}
        for box_id, coord in self._positions.items():
            if coord in seen:
                raise InvariantError(f'boxes {seen[coord]} and {box_id} share {coord}', box_id)
            seen[coord] = box_id
            if self.box_at(coord) != box_id:
                raise InvariantError(f'occupancy at {coord} does not name box {box_id}', box_id)
        occupied = sum(1 for b in self._occupancy if b != NO_BOX)
        if occupied != len(self._positions):
            raise InvariantError(f'{occupied} occupied cells for {len(self._positions)} boxes')
