from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .errors import OutOfBoundsError, SetupError

Terrain = str  # EMPTY, WALL or STORAGE
Coord = Tuple[int, int]
Direction = str  # 'up', 'down', 'left', 'right'

EMPTY: Terrain = ' '
WALL: Terrain = '#'
STORAGE: Terrain = '.'
TERRAINS: Tuple[Terrain, ...] = (EMPTY, WALL, STORAGE)

DIRECTIONS: Dict[Direction, Coord] = {
    'up': (-1, 0),
    'down': (1, 0),
    'left': (0, -1),
    'right': (0, 1),
}


@dataclass
class Board:
    """Static terrain of a toroidal board. Terrain is editable until lock() is called."""
    width: int
    height: int
    grid: List[Terrain] = field(default_factory=list)  # row-major, length == width * height
    locked: bool = False

    def __post_init__(self) -> None:
        if not self.grid:
            self.grid = [EMPTY] * (self.width * self.height)
        if len(self.grid) != self.width * self.height:
            raise ValueError(f'grid has {len(self.grid)} cells, expected {self.width * self.height}')

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> 'Board':
        """Builds a board from equal-length strings of terrain glyphs."""
        lines = list(rows)
        height = len(lines)
        width = len(lines[0]) if lines else 0
        grid: List[Terrain] = []
        for line in lines:
            if len(line) != width:
                raise ValueError('all rows must have the same width')
            for ch in line:
                if ch not in TERRAINS:
                    raise ValueError(f'unknown terrain glyph {ch!r}')
                grid.append(ch)
        return cls(width=width, height=height, grid=grid)

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return r * self.width + c

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.height and 0 <= c < self.width

    def check_bounds(self, r: int, c: int) -> None:
        if not self.in_bounds(r, c):
            raise OutOfBoundsError((r, c))

    def wrap(self, r: int, c: int) -> Coord:
        """Wraps coordinates around the board."""
        return r % self.height, c % self.width

    def step(self, coord: Coord, direction: Direction) -> Coord:
        """Returns the cell one step from coord in the given direction, wrapping at the edges."""
        dr, dc = DIRECTIONS[direction]
        return self.wrap(coord[0] + dr, coord[1] + dc)

    def at(self, r: int, c: int) -> Terrain:
        """Gets the terrain at a given row and column with wrap-around logic."""
        return self.grid[self.index(r % self.height, c % self.width)]

    def terrain_at(self, r: int, c: int) -> Terrain:
        """Gets the terrain at an in-bounds cell. Raises OutOfBoundsError otherwise."""
        self.check_bounds(r, c)
        return self.grid[self.index(r, c)]

    def set_terrain(self, r: int, c: int, terrain: Terrain) -> None:
        if self.locked:
            raise SetupError('Board terrain is fixed once play has started')
        if terrain not in TERRAINS:
            raise ValueError(f'unknown terrain {terrain!r}')
        self.check_bounds(r, c)
        self.grid[self.index(r, c)] = terrain

    def lock(self) -> None:
        self.locked = True

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates on the board."""
        for r in range(self.height):
            for c in range(self.width):
                yield (r, c)

    def storage_cells(self) -> List[Coord]:
        return [coord for coord in self.coords() if self.at(*coord) == STORAGE]
