from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .board import STORAGE, Board, Coord

BoxId = int
NO_BOX: BoxId = 0


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the dynamic game state: occupancy, box positions, player and move counter."""
    board: Board = field(compare=False, repr=False)  # shared, read-only once play starts
    occupancy: Tuple[BoxId, ...]  # row-major, NO_BOX where empty
    boxes: Tuple[Tuple[BoxId, Coord], ...]  # sorted by box id
    player: Coord
    move_counter: int = 0

    def box_at(self, coord: Coord) -> BoxId:
        return self.occupancy[self.board.index(*coord)]

    def box_positions(self) -> Dict[BoxId, Coord]:
        return dict(self.boxes)

    def position_of(self, box_id: BoxId) -> Coord:
        for bid, pos in self.boxes:
            if bid == box_id:
                return pos
        raise KeyError(box_id)

    def boxes_off_storage(self) -> List[BoxId]:
        """Lists the boxes not standing on a storage tile."""
        return [bid for bid, pos in self.boxes if self.board.at(*pos) != STORAGE]

    def with_counter(self, move_counter: int) -> 'GameState':
        return GameState(self.board, self.occupancy, self.boxes, self.player, move_counter)
