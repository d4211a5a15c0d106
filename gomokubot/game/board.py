from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from .types import Move, Side

BOARD_SIZE = 15
WIN_LENGTH = 5

# Column labels: one letter per column, so boards are at most 26 wide
COL_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# 2-bit cell codes used by Board.serialize()
_CELL_CODES = {Side.A: 1, Side.B: 2}


def parse_coordinate(
    text: str, width: int = BOARD_SIZE, height: int = BOARD_SIZE
) -> Optional[Move]:
    """Parse a coordinate string like 'E5' or 'H12' into a Move.

    Column is a letter (A = first column), row is a 1-based number.
    Returns None if the string is invalid or off the board.
    """
    text = text.strip().upper()
    if len(text) < 2 or len(text) > 3:
        return None
    col_char = text[0]
    row_str = text[1:]
    if col_char not in COL_LABELS[:width]:
        return None
    try:
        row = int(row_str)
    except ValueError:
        return None
    if not (1 <= row <= height):
        return None
    return Move(COL_LABELS.index(col_char), row - 1)


def format_move(move: Move) -> str:
    """Format a Move as a coordinate string like 'E5'."""
    return f"{COL_LABELS[move.x]}{move.y + 1}"


@dataclass
class PlayedMove:
    move: Move
    side: Side
    elapsed: Optional[float] = None

    def __str__(self) -> str:
        return f"{self.side}: {format_move(self.move)}"


class Board:
    """width x height gomoku board. Tracks stone placement.

    `place`/`remove` are the raw mutations used for simulation; they never
    touch turn order or win state. Permanent moves go through
    GomokuGameState.apply_move.
    """

    def __init__(self, width: int = BOARD_SIZE, height: int = BOARD_SIZE) -> None:
        assert 0 < width <= len(COL_LABELS), f"Unsupported board width {width}"
        assert height > 0, f"Unsupported board height {height}"
        self.width = width
        self.height = height
        self._grid: dict[Move, Side] = {}

    def place(self, move: Move, side: Side) -> None:
        assert self.is_on_grid(move), f"{move} is off the grid"
        assert self.is_empty(move), f"{format_move(move)} is occupied"
        self._grid[move] = side

    def remove(self, move: Move) -> None:
        assert move in self._grid, f"{format_move(move)} is already empty"
        del self._grid[move]

    @contextmanager
    def simulate(self, move: Move, side: Side) -> Iterator[None]:
        """Temporarily occupy `move` for `side`; always restored on exit."""
        self.place(move, side)
        try:
            yield
        finally:
            self.remove(move)

    def get(self, move: Move) -> Optional[Side]:
        return self._grid.get(move)

    def is_empty(self, move: Move) -> bool:
        return move not in self._grid

    def is_on_grid(self, move: Move) -> bool:
        return 0 <= move.x < self.width and 0 <= move.y < self.height

    def occupied(self) -> list[tuple[Move, Side]]:
        """Snapshot of (move, side) pairs for every occupied cell."""
        return list(self._grid.items())

    def empty_cells(self) -> list[Move]:
        return [
            Move(x, y)
            for x in range(self.width)
            for y in range(self.height)
            if Move(x, y) not in self._grid
        ]

    @property
    def occupied_count(self) -> int:
        return len(self._grid)

    @property
    def is_full(self) -> bool:
        return len(self._grid) == self.width * self.height

    def serialize(self) -> int:
        """Pack the board into an int, 2 bits per cell in x-major order."""
        key = 0
        for move, side in self._grid.items():
            key |= _CELL_CODES[side] << (2 * (move.x * self.height + move.y))
        return key


class GomokuGameState:
    """Full game state: board, side to move, move list and result."""

    def __init__(self, width: int = BOARD_SIZE, height: int = BOARD_SIZE) -> None:
        self.board = Board(width, height)
        self.current_player = Side.A
        self.moves: list[PlayedMove] = []
        self._winner: Optional[Side] = None
        self._is_over = False

    @property
    def is_over(self) -> bool:
        return self._is_over

    @property
    def winner(self) -> Optional[Side]:
        return self._winner

    @property
    def is_draw(self) -> bool:
        return self._is_over and self._winner is None

    def legal_moves(self) -> list[Move]:
        if self._is_over:
            return []
        return self.board.empty_cells()

    def apply_move(self, move: Move, elapsed: Optional[float] = None) -> None:
        """Place a stone for the current player and advance the turn."""
        assert not self._is_over, "Game is already over"
        assert self.board.is_on_grid(move), f"Move {move} is off the grid"
        assert self.board.is_empty(move), f"Move {format_move(move)} is occupied"

        side = self.current_player
        self.board.place(move, side)
        self.moves.append(PlayedMove(move=move, side=side, elapsed=elapsed))

        if self._check_win(move, side):
            self._winner = side
            self._is_over = True
        elif self.board.is_full:
            self._is_over = True

        self.current_player = self.current_player.other

    def undo_move(self) -> Optional[PlayedMove]:
        """Undo the last move. Returns the undone PlayedMove, or None if no moves."""
        if not self.moves:
            return None
        played = self.moves.pop()
        self.board.remove(played.move)
        self.current_player = played.side
        self._winner = None
        self._is_over = False
        return played

    def resign(self, side: Side) -> None:
        """End the game with `side` conceding."""
        assert not self._is_over, "Game is already over"
        self._winner = side.other
        self._is_over = True

    def _check_win(self, move: Move, side: Side) -> bool:
        """Check if placing at `move` creates 5-in-a-row for `side`."""
        directions = [(1, 0), (0, 1), (1, 1), (1, -1)]
        for dx, dy in directions:
            count = 1
            # Count forward
            for step in range(1, WIN_LENGTH):
                m = Move(move.x + dx * step, move.y + dy * step)
                if not self.board.is_on_grid(m) or self.board.get(m) is not side:
                    break
                count += 1
            # Count backward
            for step in range(1, WIN_LENGTH):
                m = Move(move.x - dx * step, move.y - dy * step)
                if not self.board.is_on_grid(m) or self.board.get(m) is not side:
                    break
                count += 1
            if count >= WIN_LENGTH:
                return True
        return False
