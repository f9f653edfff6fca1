"""
Exception taxonomy for the game core.
"""

from __future__ import annotations

from typing import Optional, Tuple

Coord = Tuple[int, int]


class SokobanError(Exception):
    """Base class for every error raised by the game core."""


class SetupError(SokobanError):
    """Raised for a rejected level-setup call. Setup may continue afterwards."""


class OutOfBoundsError(SetupError):
    """Raised when coordinates fall outside the board."""

    def __init__(self, coord: Coord, message: str = "Location out of bounds") -> None:
        super().__init__(message)
        self.coord = coord


class NotABoxError(SetupError):
    """Raised when a link references a cell that holds no box."""

    def __init__(self, coord: Coord, message: str = "Location not box(s)") -> None:
        super().__init__(message)
        self.coord = coord


class InvalidStartError(SetupError):
    """Raised when the player start is off-board, a wall, or on a box."""

    def __init__(self, coord: Coord) -> None:
        super().__init__(f"Position [{coord[0]}][{coord[1]}] is invalid")
        self.coord = coord


class TooManyBoxesError(SetupError):
    """Raised when registering a box would exceed the configured limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Cannot place more than {limit} boxes")
        self.limit = limit


class HistoryFullError(SokobanError):
    """
    Raised when committing to a history that already holds its capacity.
    The session treats this as a rejected move, not a crash.
    """

    def __init__(self, capacity: int) -> None:
        super().__init__(f"History is full ({capacity} snapshots)")
        self.capacity = capacity


class InvariantError(SokobanError):
    """Raised when box positions and the occupancy map disagree."""

    def __init__(self, message: str, box_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.box_id = box_id
