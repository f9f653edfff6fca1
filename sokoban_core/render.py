from __future__ import annotations

from typing import List, Optional

from .board import STORAGE, WALL, Coord
from .state import NO_BOX, GameState

TITLE = 'S O K O B A N'

PLAYER_GLYPH = '^_^'
WALL_GLYPH = '==='
STORAGE_GLYPH = ' o '
BOX_ON_STORAGE_GLYPH = '[o]'
BOX_GLYPH = '[ ]'
EMPTY_GLYPH = '   '


def _rule(width: int) -> str:
    return '-' * (width * 4 + 1)


def _title(width: int) -> List[str]:
    span = width * 4 + 1
    n_white = max(span - len(TITLE) - 2, 0)
    left = ' ' * (n_white // 2)
    right = ' ' * ((n_white + 1) // 2)
    return [_rule(width), f'|{left}{TITLE}{right}|']


def cell_glyph(state: GameState, coord: Coord, player: Optional[Coord]) -> str:
    """Three-character glyph for one cell."""
    if coord == player:
        return PLAYER_GLYPH
    terrain = state.board.at(*coord)
    has_box = state.box_at(coord) != NO_BOX
    if terrain == WALL:
        return WALL_GLYPH
    if terrain == STORAGE:
        return BOX_ON_STORAGE_GLYPH if has_box else STORAGE_GLYPH
    return BOX_GLYPH if has_box else EMPTY_GLYPH


def render_board(state: GameState, show_player: bool = True) -> str:
    """Generates the console picture of the board, title bar included."""
    board = state.board
    player = state.player if show_player else None
    lines = _title(board.width)
    for r in range(board.height):
        lines.append(_rule(board.width))
        cells = [cell_glyph(state, (r, c), player) for c in range(board.width)]
        lines.append('|' + '|'.join(cells) + '|')
    lines.append(_rule(board.width))
    return '\n'.join(lines) + '\n'


def victory_message(move_counter: int) -> str:
    if move_counter == 1:
        return '=== Level Solved in 1 Move! ==='
    return f'=== Level Solved in {move_counter} Moves! ==='
