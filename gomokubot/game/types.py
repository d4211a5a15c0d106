from __future__ import annotations

import enum
from typing import NamedTuple


class Side(enum.Enum):
    A = 1
    B = 2

    @property
    def other(self) -> Side:
        return Side.B if self is Side.A else Side.A

    @property
    def symbol(self) -> str:
        return "X" if self is Side.A else "O"

    def __str__(self) -> str:
        return self.symbol


class Move(NamedTuple):
    x: int  # 0-indexed column
    y: int  # 0-indexed row, 0 = bottom
