from __future__ import annotations

# Facade module that re-exports the Sokoban core.
# The Flask app and the tests import from here; single-responsibility
# modules live under sokoban_core/*.

from sokoban_core.board import (  # noqa: F401
    Board,
    Coord,
    Direction,
    Terrain,
    DIRECTIONS,
    EMPTY,
    STORAGE,
    TERRAINS,
    WALL,
)
from sokoban_core.state import GameState, BoxId, NO_BOX  # noqa: F401
from sokoban_core.boxes import BoxRegistry  # noqa: F401
from sokoban_core.moves import (  # noqa: F401
    BLOCKED,
    FREE,
    PENDING,
    UNVISITED,
    BoxMove,
    MoveResult,
    resolve_move,
)
from sokoban_core.history import History  # noqa: F401
from sokoban_core.session import GameSession, TurnResult, is_won  # noqa: F401
from sokoban_core.level import LevelBuilder  # noqa: F401
from sokoban_core.render import render_board, victory_message  # noqa: F401
from sokoban_core.config import Settings, load_settings  # noqa: F401
from sokoban_core.errors import (  # noqa: F401
    HistoryFullError,
    InvalidStartError,
    InvariantError,
    NotABoxError,
    OutOfBoundsError,
    SetupError,
    SokobanError,
    TooManyBoxesError,
)


def main() -> None:
    # CLI driver delegated to sokoban_core.cli
    from sokoban_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
