"""Candidate generation and heuristic move ordering."""

from __future__ import annotations

from typing import NamedTuple

from gomokubot.game.board import Board
from gomokubot.game.types import Move, Side

from .patterns import count_threats, has_open_four, is_winning_state

# Candidates are empty cells within this Chebyshev distance of a stone
NEIGHBORHOOD_RADIUS = 2

# Advisory ordering bonuses
WIN_BONUS = 10_000
BLOCK_WIN_BONUS = 9_500
BLOCK_OPEN_FOUR_BONUS = 9_000
BLOCK_OPEN_THREE_BONUS = 8_000
PROXIMITY_WEIGHT = 10
CENTER_WEIGHT = 5
CENTER_RANGE = 10


class ScoredMove(NamedTuple):
    move: Move
    score: int


# ---------------------------------------------------------------------------
# Candidate generation
# ---------------------------------------------------------------------------

def generate_candidates(board: Board, radius: int = NEIGHBORHOOD_RADIUS) -> list[Move]:
    """Return empty cells near existing stones (Chebyshev distance <= radius).

    On an empty board every cell is a candidate. The result is sorted by
    coordinate so that first-found tie-breaks are reproducible.
    """
    occupied = board.occupied()
    if not occupied:
        return board.empty_cells()

    candidates: set[Move] = set()
    for move, _ in occupied:
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                nm = Move(move.x + dx, move.y + dy)
                if board.is_on_grid(nm) and board.is_empty(nm):
                    candidates.add(nm)

    return sorted(candidates)


# ---------------------------------------------------------------------------
# Move ordering
# ---------------------------------------------------------------------------

def count_proximity_pieces(board: Board, move: Move, distance: int = 1) -> int:
    """Number of stones within `distance` (Chebyshev) of `move`."""
    count = 0
    for dx in range(-distance, distance + 1):
        for dy in range(-distance, distance + 1):
            nm = Move(move.x + dx, move.y + dy)
            if board.is_on_grid(nm) and not board.is_empty(nm):
                count += 1
    return count


def _move_heuristic(board: Board, move: Move, side: Side, opp_open_threes: int) -> int:
    """Advisory score for `side` playing `move`. Only affects search order."""
    opponent = side.other
    score = 0

    with board.simulate(move, side):
        if is_winning_state(board, side):
            score += WIN_BONUS
        # Does occupying this cell break up one of the opponent's open threes?
        if count_threats(board, opponent, open_only=True) < opp_open_threes:
            score += BLOCK_OPEN_THREE_BONUS

    with board.simulate(move, opponent):
        if is_winning_state(board, opponent):
            score += BLOCK_WIN_BONUS
        if has_open_four(board, opponent):
            score += BLOCK_OPEN_FOUR_BONUS

    score += count_proximity_pieces(board, move) * PROXIMITY_WEIGHT

    center_x = board.width // 2
    center_y = board.height // 2
    distance = abs(move.x - center_x) + abs(move.y - center_y)
    score += max(0, CENTER_RANGE - distance) * CENTER_WEIGHT

    return score


def order_moves(board: Board, candidates: list[Move], side: Side) -> list[ScoredMove]:
    """Score candidates for `side` (the side to move), best first.

    The sort is stable, so equal scores keep their candidate order.
    """
    opp_open_threes = count_threats(board, side.other, open_only=True)
    scored = [
        ScoredMove(move, _move_heuristic(board, move, side, opp_open_threes))
        for move in candidates
    ]
    return sorted(scored, key=lambda sm: sm.score, reverse=True)
