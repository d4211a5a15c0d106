"""Tactical short-circuits and the alpha-beta minimax search.

Scores are always from the deciding side's point of view: the deciding side
maximizes, its opponent minimizes on alternating plies.
"""

from __future__ import annotations

import time
from typing import Optional

from gomokubot.game.board import Board
from gomokubot.game.types import Move, Side

from .config import EngineConfig
from .moves import generate_candidates, order_moves
from .patterns import (
    WIN_SCORE,
    count_threats,
    evaluate_board,
    has_open_four,
    is_winning_state,
)

# Integer infinity, well beyond any reachable evaluation
INF = 10**12

# Critical move scoring (step 3 of find_critical_move)
CRITICAL_BLOCK_SCORE = 1_000
OPEN_THREAT_WEIGHT = 50

# Transposition table bound kinds
EXACT = 0
LOWER_BOUND = 1
UPPER_BOUND = -1


# ---------------------------------------------------------------------------
# Transposition table
# ---------------------------------------------------------------------------

TTKey = tuple[int, int, bool]


class TranspositionTable:
    """(board key, remaining depth, maximizing) -> (value, bound kind)."""

    def __init__(self) -> None:
        self.table: dict[TTKey, tuple[int, int]] = {}
        self.hits = 0

    def __len__(self) -> int:
        return len(self.table)

    def get(self, key: TTKey) -> Optional[tuple[int, int]]:
        entry = self.table.get(key)
        if entry is not None:
            self.hits += 1
        return entry

    def put(self, key: TTKey, value: int, bound: int) -> None:
        self.table[key] = (value, bound)

    def reset(self) -> None:
        self.table.clear()
        self.hits = 0


# ---------------------------------------------------------------------------
# Search context
# ---------------------------------------------------------------------------

class SearchContext:
    """State shared by every node of one decision: board, side, clock, cache."""

    def __init__(
        self,
        board: Board,
        side: Side,
        config: EngineConfig,
        tt: Optional[TranspositionTable] = None,
    ) -> None:
        self.board = board
        self.side = side
        self.config = config
        self.tt = tt if tt is not None else TranspositionTable()
        self.nodes = 0
        self._start = time.perf_counter()

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self._start

    def time_up(self) -> bool:
        return self.config.use_time_limit and self.elapsed > self.config.time_limit

    def evaluate(self) -> int:
        return evaluate_board(self.board, self.side, self.config.fork_board_limit)

    def candidates(self) -> list[Move]:
        return generate_candidates(self.board, self.config.neighborhood_radius)


# ---------------------------------------------------------------------------
# Critical move detection
# ---------------------------------------------------------------------------

def find_critical_move(
    board: Board, side: Side, candidates: list[Move]
) -> Optional[Move]:
    """Return a move that must be played right now, or None.

    In order: a move that wins for `side`; a move that blocks the opponent's
    immediate win; the best move that denies the opponent an open four
    (ties broken by how many new open threes it gives `side`).
    """
    opponent = side.other

    for move in candidates:
        with board.simulate(move, side):
            if is_winning_state(board, side):
                return move

    for move in candidates:
        with board.simulate(move, opponent):
            if is_winning_state(board, opponent):
                return move

    open_threes_before = count_threats(board, side, open_only=True)
    best_move: Optional[Move] = None
    best_score = 0
    for move in candidates:
        with board.simulate(move, opponent):
            denies_open_four = has_open_four(board, opponent)
        with board.simulate(move, side):
            gained = count_threats(board, side, open_only=True) - open_threes_before

        score = OPEN_THREAT_WEIGHT * max(0, gained)
        if denies_open_four:
            score += CRITICAL_BLOCK_SCORE
        if score > best_score:
            best_score = score
            best_move = move

    if best_score >= CRITICAL_BLOCK_SCORE:
        return best_move
    return None


# ---------------------------------------------------------------------------
# Minimax with alpha-beta pruning + transposition table
# ---------------------------------------------------------------------------

def minimax(
    ctx: SearchContext, depth: int, alpha: int, beta: int, maximizing: bool
) -> int:
    """Alpha-beta minimax over ctx.board, `depth` plies deep.

    Cached values carry their bound kind, so a value produced under a narrow
    window is only reused where that bound is enough to decide the node.
    """
    ctx.nodes += 1
    board = ctx.board
    use_tt = ctx.config.use_transposition_table

    key: TTKey = (board.serialize(), depth, maximizing) if use_tt else (0, 0, False)
    if use_tt:
        entry = ctx.tt.get(key)
        if entry is not None:
            value, bound = entry
            if bound == EXACT:
                return value
            if bound == LOWER_BOUND and value >= beta:
                return value
            if bound == UPPER_BOUND and value <= alpha:
                return value

    static = ctx.evaluate()
    if abs(static) >= WIN_SCORE or depth == 0 or ctx.time_up():
        if use_tt:
            ctx.tt.put(key, static, EXACT)
        return static

    candidates = ctx.candidates()
    if not candidates:  # board full
        if use_tt:
            ctx.tt.put(key, static, EXACT)
        return static

    mover = ctx.side if maximizing else ctx.side.other
    ordered = order_moves(board, candidates, mover)

    orig_alpha, orig_beta = alpha, beta
    best = -INF if maximizing else INF
    for scored in ordered:
        with board.simulate(scored.move, mover):
            value = minimax(ctx, depth - 1, alpha, beta, not maximizing)

        if maximizing:
            best = max(best, value)
            alpha = max(alpha, value)
        else:
            best = min(best, value)
            beta = min(beta, value)

        if alpha >= beta:
            break  # cutoff
        if ctx.time_up():
            break

    if use_tt:
        if best <= orig_alpha:
            bound = UPPER_BOUND
        elif best >= orig_beta:
            bound = LOWER_BOUND
        else:
            bound = EXACT
        ctx.tt.put(key, best, bound)

    return best
