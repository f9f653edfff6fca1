from __future__ import annotations

import argparse
import itertools
import sys
from typing import Iterable, Iterator, List, Optional, TextIO

from .board import Direction
from .config import configure_logging, load_settings
from .errors import SetupError
from .level import LevelBuilder
from .render import render_board, victory_message
from .session import GameSession

KEY_TO_DIRECTION = {
    'w': 'up',
    'a': 'left',
    's': 'down',
    'd': 'right',
}


class Scanner:
    """Reads single-character commands and integers from a stream of lines, scanf style."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._buf = ''
        self._pos = 0

    def _skip_space(self) -> bool:
        while True:
            while self._pos < len(self._buf) and self._buf[self._pos].isspace():
                self._pos += 1
            if self._pos < len(self._buf):
                return True
            try:
                self._buf = next(self._lines)
            except StopIteration:
                return False
            self._pos = 0

    def next_char(self) -> Optional[str]:
        """Next non-space character, or None at end of input."""
        if not self._skip_space():
            return None
        ch = self._buf[self._pos]
        self._pos += 1
        return ch

    def next_int(self) -> Optional[int]:
        """
        Next integer, or None at end of input.
        Raises ValueError, consuming the offending word, if the input is not a number.
        """
        if not self._skip_space():
            return None
        start = self._pos
        end = start
        if end < len(self._buf) and self._buf[end] in '+-':
            end += 1
        while end < len(self._buf) and self._buf[end].isdigit():
            end += 1
        text = self._buf[start:end]
        if text in ('', '+', '-'):
            while end < len(self._buf) and not self._buf[end].isspace():
                end += 1
            self._pos = end
            raise ValueError(f'expected a number, got {self._buf[start:end]!r}')
        self._pos = end
        return int(text)

    def next_ints(self, count: int) -> Optional[List[int]]:
        values: List[int] = []
        for _ in range(count):
            value = self.next_int()
            if value is None:
                return None
            values.append(value)
        return values


SETUP_ARITY = {'w': 2, 'W': 4, 'b': 2, 's': 2, 'l': 4}


def apply_setup_command(builder: LevelBuilder, cmd: str, args: List[int]) -> None:
    if cmd == 'w':
        builder.add_wall(*args)
    elif cmd == 'W':
        builder.add_walls(*args)
    elif cmd == 'b':
        builder.add_box(*args)
    elif cmd == 's':
        builder.add_storage(*args)
    elif cmd == 'l':
        builder.link(*args)


def run_setup(scanner: Scanner, builder: LevelBuilder, out: TextIO) -> bool:
    """Reads setup commands until 'q'. Returns False if input ran out first."""
    print('=== Level Setup ===', file=out)
    while True:
        cmd = scanner.next_char()
        if cmd is None:
            return False
        if cmd == 'q':
            return True
        if cmd in SETUP_ARITY:
            try:
                args = scanner.next_ints(SETUP_ARITY[cmd])
            except ValueError:
                print('Could not parse. Try again.', file=out)
                continue
            if args is None:
                return False
            try:
                apply_setup_command(builder, cmd, args)
            except SetupError as e:
                print(e, file=out)
        print(render_board(builder.preview(), show_player=False), file=out)


def prompt_start(scanner: Scanner, builder: LevelBuilder, out: TextIO) -> Optional[GameSession]:
    """Asks for the player start until a valid one is given. None if input ran out."""
    while True:
        out.write('Enter player starting position: ')
        try:
            coords = scanner.next_ints(2)
        except ValueError:
            print('Could not parse. Try again.', file=out)
            continue
        if coords is None:
            return None
        try:
            return builder.start(*coords)
        except SetupError as e:
            print(e, file=out)


def play(scanner: Scanner, session: GameSession, out: TextIO) -> bool:
    """Runs the gameplay loop. Returns True if the level was solved."""
    while True:
        key = scanner.next_char()
        if key is None:
            return False
        direction: Optional[Direction] = KEY_TO_DIRECTION.get(key)
        if direction is not None:
            result = session.move(direction)
            if result.rejected:
                print('History is full: undo or reset to keep playing.', file=out)
        elif key == 'c':
            print(session.counter_message(), file=out)
        elif key == 'r':
            print('=== Resetting Game ===', file=out)
            session.reset()
        elif key == 'u':
            session.undo()
        print(render_board(session.state), file=out)
        if session.is_won():
            print(victory_message(session.move_counter), file=out)
            return True


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    parser = argparse.ArgumentParser(description='Sokoban on a wrap-around board with linked boxes')
    parser.add_argument('--rows', type=int, default=None, help='Board height (default: SOKOBAN_ROWS or 10)')
    parser.add_argument('--cols', type=int, default=None, help='Board width (default: SOKOBAN_COLS or 10)')
    parser.add_argument('--max-boxes', type=int, default=None, help='Box limit (default: SOKOBAN_MAX_BOXES or 100)')
    parser.add_argument('--history', type=int, default=None, help='Undo snapshots kept (default: SOKOBAN_HISTORY or 1000)')
    parser.add_argument('--level', default=None, help='File of setup commands read before standard input')
    parser.add_argument('--log-level', default=None, help='Logging level (default: SOKOBAN_LOG_LEVEL or WARNING)')
    args = parser.parse_args(argv)

    try:
        settings = load_settings().with_overrides(
            rows=args.rows,
            cols=args.cols,
            max_boxes=args.max_boxes,
            history_capacity=args.history,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))
    configure_logging(settings)

    inp = stdin if stdin is not None else sys.stdin
    out = stdout if stdout is not None else sys.stdout
    lines: Iterable[str] = inp
    if args.level:
        with open(args.level, encoding='utf-8') as f:
            level_lines = f.readlines()
        lines = itertools.chain(level_lines, inp)
    scanner = Scanner(lines)

    builder = LevelBuilder.from_settings(settings)
    if not run_setup(scanner, builder, out):
        return
    session = prompt_start(scanner, builder, out)
    if session is None:
        return
    print('\n=== Starting Sokoban! ===', file=out)
    print(render_board(session.state), file=out)
    play(scanner, session, out)


if __name__ == '__main__':
    main()
