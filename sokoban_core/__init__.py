"""
Sokoban core Python package.

This package holds the data structures and pure-logic helpers behind the
game: a wrap-around board, boxes that can be linked into groups, and the
move resolution that pushes chains and groups of boxes in one turn.
Modules:
- board.py: Board, terrain glyphs, directions
- state.py: GameState snapshots
- boxes.py: BoxRegistry (positions, occupancy, link groups)
- moves.py: resolve_move
- history.py: undo/reset snapshots
- session.py: GameSession, is_won
- level.py: LevelBuilder
- render.py, cli.py: console front end
"""
