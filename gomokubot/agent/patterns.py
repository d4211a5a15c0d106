"""Pattern-based position evaluation: run scoring, threat counting, forks.

Every scan starts from an occupied cell and walks one of the four direction
axes. A run is only scored from its first stone (the cell behind it does not
hold the same side), so each physical run contributes exactly once per
direction. Cells off the board behave like opponent stones.
"""

from __future__ import annotations

from typing import NamedTuple

from gomokubot.game.board import WIN_LENGTH, Board
from gomokubot.game.types import Move, Side

# ---------------------------------------------------------------------------
# Pattern scores
# ---------------------------------------------------------------------------

FIVE_IN_A_ROW = 1_000_000
WIN_SCORE = FIVE_IN_A_ROW
OPEN_FOUR = 500_000   # both ends open, wins next move
FOUR = 100_000        # one open end, forces a block
OPEN_THREE = 1_000
THREE = 100
OPEN_TWO = 50

DOUBLE_THREAT = 8_000  # one empty cell that would create two threats (fork)

# Opponent threats are weighted this much more heavily than our own
DEFENSE_WEIGHT = 3

# Fork detection is only run on boards no larger than this in either dimension
FORK_BOARD_LIMIT = 10

# Four direction axes: horizontal, vertical, and the two diagonals
DIRECTIONS = [(1, 0), (0, 1), (1, 1), (1, -1)]


class ThreatInfo(NamedTuple):
    score: int
    is_open: bool
    length: int


NO_THREAT = ThreatInfo(score=0, is_open=False, length=0)


# ---------------------------------------------------------------------------
# Pattern evaluator
# ---------------------------------------------------------------------------

def evaluate_pattern(
    board: Board, start: Move, direction: tuple[int, int], side: Side
) -> ThreatInfo:
    """Score the run of `side` stones that begins at `start` along `direction`.

    Returns NO_THREAT unless `start` holds `side` and is the first stone of
    its run. The run is followed for at most WIN_LENGTH cells; an empty cell
    ending it is probed for up to two empty cells of breathing room.
    """
    if board.get(start) is not side:
        return NO_THREAT

    dx, dy = direction
    prev = Move(start.x - dx, start.y - dy)
    prev_on_grid = board.is_on_grid(prev)
    if prev_on_grid and board.get(prev) is side:
        return NO_THREAT  # not the start of the run

    length = 1
    empty_before = 0
    empty_after = 0
    blocked = False

    if prev_on_grid and board.get(prev) is None:
        empty_before = 1
    else:
        blocked = True  # opponent stone or edge

    for step in range(1, WIN_LENGTH):
        nxt = Move(start.x + dx * step, start.y + dy * step)
        if not board.is_on_grid(nxt):
            blocked = True
            break
        cell = board.get(nxt)
        if cell is side:
            length += 1
        elif cell is None:
            probe = nxt
            while (
                empty_after < 2
                and board.is_on_grid(probe)
                and board.get(probe) is None
            ):
                empty_after += 1
                probe = Move(probe.x + dx, probe.y + dy)
            break
        else:
            blocked = True
            break

    is_open = not blocked and empty_before > 0 and empty_after > 0
    half_open = empty_before > 0 or empty_after > 0

    score = 0
    if length >= 4:
        if is_open:
            score = OPEN_FOUR
        elif half_open:
            score = FOUR
    elif length == 3:
        if is_open:
            score = OPEN_THREE
        elif half_open:
            score = THREE
    elif length == 2 and is_open:
        score = OPEN_TWO

    return ThreatInfo(score=score, is_open=is_open, length=length)


# ---------------------------------------------------------------------------
# Board-wide scans
# ---------------------------------------------------------------------------

def is_winning_state(board: Board, side: Side) -> bool:
    """True if `side` has WIN_LENGTH (or more) stones in a row anywhere."""
    for move, owner in board.occupied():
        if owner is not side:
            continue
        for dx, dy in DIRECTIONS:
            count = 1
            for step in range(1, WIN_LENGTH):
                nxt = Move(move.x + dx * step, move.y + dy * step)
                if not board.is_on_grid(nxt) or board.get(nxt) is not side:
                    break
                count += 1
            if count >= WIN_LENGTH:
                return True
    return False


def count_threats(board: Board, side: Side, open_only: bool = False) -> int:
    """Count threat patterns for `side`.

    With open_only, counts open threes (length 3, both ends open).
    Otherwise counts anything scored OPEN_THREE or better, plus plain fours.
    """
    threats = 0
    for move, owner in board.occupied():
        if owner is not side:
            continue
        for direction in DIRECTIONS:
            threat = evaluate_pattern(board, move, direction, side)
            if open_only:
                if threat.is_open and threat.length == 3:
                    threats += 1
            elif threat.score >= OPEN_THREE or threat.score == FOUR:
                threats += 1
    return threats


def has_open_four(board: Board, side: Side) -> bool:
    for move, owner in board.occupied():
        if owner is not side:
            continue
        for direction in DIRECTIONS:
            threat = evaluate_pattern(board, move, direction, side)
            if threat.length >= 4 and threat.is_open:
                return True
    return False


# ---------------------------------------------------------------------------
# Fork detection
# ---------------------------------------------------------------------------

def evaluate_forks(board: Board) -> dict[Side, int]:
    """Return the DOUBLE_THREAT bonus earned by each side.

    Every empty cell is tried for both sides in turn; a cell that would give
    a side two or more threats adds DOUBLE_THREAT to that side.
    """
    bonus = {Side.A: 0, Side.B: 0}
    for cell in board.empty_cells():
        for side in (Side.A, Side.B):
            with board.simulate(cell, side):
                threats = count_threats(board, side)
            if threats >= 2:
                bonus[side] += DOUBLE_THREAT
    return bonus


# ---------------------------------------------------------------------------
# Static evaluation (viewpoint of `side`)
# ---------------------------------------------------------------------------

def evaluate_board(
    board: Board, side: Side, fork_board_limit: int = FORK_BOARD_LIMIT
) -> int:
    """Static evaluation from `side`'s point of view.

    Returns +/-WIN_SCORE when either side already has five in a row.
    Otherwise own pattern score minus DEFENSE_WEIGHT times the opponent's.
    """
    opponent = side.other
    if is_winning_state(board, side):
        return WIN_SCORE
    if is_winning_state(board, opponent):
        return -WIN_SCORE

    totals = {Side.A: 0, Side.B: 0}
    for move, owner in board.occupied():
        for direction in DIRECTIONS:
            totals[owner] += evaluate_pattern(board, move, direction, owner).score

    if board.width <= fork_board_limit and board.height <= fork_board_limit:
        for fork_side, fork_bonus in evaluate_forks(board).items():
            totals[fork_side] += fork_bonus

    return totals[side] - DEFENSE_WEIGHT * totals[opponent]
