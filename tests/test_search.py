"""Tests for critical move detection, the transposition table and minimax."""

from __future__ import annotations

from gomokubot.agent.config import EngineConfig
from gomokubot.agent.moves import generate_candidates
from gomokubot.agent.patterns import WIN_SCORE, count_threats, evaluate_board
from gomokubot.agent.search import (
    EXACT,
    INF,
    LOWER_BOUND,
    UPPER_BOUND,
    SearchContext,
    TranspositionTable,
    find_critical_move,
    minimax,
)
from gomokubot.game.board import Board
from gomokubot.game.types import Move, Side

NO_CLOCK = EngineConfig(use_time_limit=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_board(a=(), b=(), width: int = 15, height: int = 15) -> Board:
    board = Board(width, height)
    for x, y in a:
        board.place(Move(x, y), Side.A)
    for x, y in b:
        board.place(Move(x, y), Side.B)
    return board


def full_minimax(board: Board, side: Side, depth: int, maximizing: bool) -> int:
    """Plain minimax without pruning or caching, for comparison."""
    static = evaluate_board(board, side)
    if abs(static) >= WIN_SCORE or depth == 0:
        return static
    candidates = generate_candidates(board)
    if not candidates:
        return static
    mover = side if maximizing else side.other
    values = []
    for move in candidates:
        with board.simulate(move, mover):
            values.append(full_minimax(board, side, depth - 1, not maximizing))
    return max(values) if maximizing else min(values)


def small_board() -> Board:
    """5x5 position with seven empty cells and no five possible yet."""
    layout = [
        "XOXO.",  # y = 4
        "OX.XO",  # y = 3
        ".OXO.",  # y = 2
        "X.O.X",  # y = 1
        "OX.XO",  # y = 0
    ]
    a, b = [], []
    for i, line in enumerate(layout):
        y = len(layout) - 1 - i
        for x, ch in enumerate(line):
            if ch == "X":
                a.append((x, y))
            elif ch == "O":
                b.append((x, y))
    return make_board(a=a, b=b, width=5, height=5)


# ---------------------------------------------------------------------------
# Critical move detection
# ---------------------------------------------------------------------------

class TestFindCriticalMove:
    def test_completes_own_four(self):
        # A: four against B's stone, open at (7, 7). B also has a four.
        board = make_board(
            a=[(x, 7) for x in range(3, 7)] + [(2, 10)],
            b=[(2, 7)] + [(x, 10) for x in range(3, 7)],
        )
        move = find_critical_move(board, Side.A, generate_candidates(board))
        assert move == Move(7, 7)

    def test_blocks_opponent_five(self):
        board = make_board(b=[(x, 7) for x in range(3, 7)], a=[(2, 7), (12, 12)])
        move = find_critical_move(board, Side.A, generate_candidates(board))
        assert move == Move(7, 7)

    def test_blocks_gapped_four(self):
        board = make_board(b=[(3, 7), (4, 7), (6, 7), (7, 7)], a=[(12, 12)])
        move = find_critical_move(board, Side.A, generate_candidates(board))
        assert move == Move(5, 7)

    def test_denies_open_four(self):
        board = make_board(b=[(5, 7), (6, 7), (7, 7)], a=[(12, 2), (2, 12)])
        move = find_critical_move(board, Side.A, generate_candidates(board))
        assert move == Move(4, 7)

    def test_quiet_position_has_no_critical_move(self):
        board = make_board(a=[(7, 7)], b=[(8, 8)])
        assert find_critical_move(board, Side.A, generate_candidates(board)) is None

    def test_existing_open_threes_do_not_count(self):
        # 21 open threes already on the board (three per column), nothing to block
        a = [(x, y) for x in range(1, 14, 2) for y in (1, 2, 3, 6, 7, 8, 11, 12, 13)]
        board = make_board(a=a)
        assert count_threats(board, Side.A, open_only=True) == 21
        assert find_critical_move(board, Side.A, generate_candidates(board)) is None

    def test_board_unchanged(self):
        board = make_board(b=[(5, 7), (6, 7), (7, 7)], a=[(12, 2)])
        before = board.serialize()
        find_critical_move(board, Side.A, generate_candidates(board))
        assert board.serialize() == before


# ---------------------------------------------------------------------------
# Transposition table
# ---------------------------------------------------------------------------

class TestTranspositionTable:
    def test_put_get_and_hits(self):
        tt = TranspositionTable()
        key = (123, 2, True)
        assert tt.get(key) is None
        tt.put(key, 50, EXACT)
        assert tt.get(key) == (50, EXACT)
        assert tt.hits == 1
        assert len(tt) == 1

    def test_reset(self):
        tt = TranspositionTable()
        tt.put((1, 1, False), -5, LOWER_BOUND)
        tt.get((1, 1, False))
        tt.reset()
        assert len(tt) == 0
        assert tt.hits == 0


# ---------------------------------------------------------------------------
# Minimax
# ---------------------------------------------------------------------------

class TestMinimax:
    def test_depth_zero_is_static_eval(self):
        board = make_board(a=[(5, 7), (6, 7)], b=[(9, 9)])
        ctx = SearchContext(board, Side.A, NO_CLOCK)
        assert minimax(ctx, 0, -INF, INF, True) == evaluate_board(board, Side.A)

    def test_won_position_is_terminal(self):
        board = make_board(a=[(x, 3) for x in range(5)], b=[(x, 5) for x in range(4)])
        ctx = SearchContext(board, Side.B, NO_CLOCK)
        assert minimax(ctx, 3, -INF, INF, True) == -WIN_SCORE
        assert ctx.nodes == 1

    def test_pruned_matches_full_minimax_small_board(self):
        board = small_board()
        expected = full_minimax(board, Side.A, 3, True)
        for use_tt in (False, True):
            config = EngineConfig(use_time_limit=False, use_transposition_table=use_tt)
            ctx = SearchContext(board, Side.A, config)
            assert minimax(ctx, 3, -INF, INF, True) == expected

    def test_pruned_matches_full_minimax_open_board(self):
        board = make_board(a=[(7, 7), (8, 7)], b=[(7, 8)])
        for maximizing in (True, False):
            expected = full_minimax(board, Side.B, 2, maximizing)
            ctx = SearchContext(board, Side.B, NO_CLOCK)
            assert minimax(ctx, 2, -INF, INF, maximizing) == expected

    def test_pruning_visits_fewer_nodes(self):
        board = make_board(a=[(7, 7), (8, 7)], b=[(7, 8)])
        config = EngineConfig(use_time_limit=False, use_transposition_table=False)
        ctx = SearchContext(board, Side.A, config)
        minimax(ctx, 2, -INF, INF, True)
        n = len(generate_candidates(board))
        assert ctx.nodes < 1 + n * n

    def test_transposition_table_is_filled(self):
        board = small_board()
        ctx = SearchContext(board, Side.A, NO_CLOCK)
        minimax(ctx, 3, -INF, INF, True)
        assert len(ctx.tt) > 0

    def test_board_restored_after_search(self):
        board = small_board()
        before = board.serialize()
        ctx = SearchContext(board, Side.A, NO_CLOCK)
        minimax(ctx, 3, -INF, INF, True)
        assert board.serialize() == before

    def test_expired_clock_returns_static_eval(self):
        board = make_board(a=[(7, 7), (8, 7)], b=[(7, 8)])
        ctx = SearchContext(board, Side.A, EngineConfig(time_limit=-1.0))
        assert ctx.time_up()
        assert minimax(ctx, 4, -INF, INF, True) == evaluate_board(board, Side.A)
        assert ctx.nodes == 1

    def test_lower_bound_reused_only_above_beta(self):
        board = make_board(a=[(7, 7), (8, 7)], b=[(7, 8)])
        expected = full_minimax(board, Side.A, 1, True)
        key = (board.serialize(), 1, True)

        ctx = SearchContext(board, Side.A, NO_CLOCK)
        ctx.tt.put(key, 777_777, LOWER_BOUND)
        assert minimax(ctx, 1, -INF, 500, True) == 777_777
        assert ctx.nodes == 1

        ctx = SearchContext(board, Side.A, NO_CLOCK)
        ctx.tt.put(key, 777_777, LOWER_BOUND)
        assert minimax(ctx, 1, -INF, INF, True) == expected
        assert ctx.nodes > 1
        assert ctx.tt.get(key) == (expected, EXACT)

    def test_upper_bound_reused_only_below_alpha(self):
        board = make_board(a=[(7, 7), (8, 7)], b=[(7, 8)])
        expected = full_minimax(board, Side.A, 1, False)
        key = (board.serialize(), 1, False)

        ctx = SearchContext(board, Side.A, NO_CLOCK)
        ctx.tt.put(key, -777_777, UPPER_BOUND)
        assert minimax(ctx, 1, -500, INF, False) == -777_777
        assert ctx.nodes == 1

        ctx = SearchContext(board, Side.A, NO_CLOCK)
        ctx.tt.put(key, -777_777, UPPER_BOUND)
        assert minimax(ctx, 1, -INF, INF, False) == expected
        assert ctx.nodes > 1

    def test_exact_entry_reused_for_any_window(self):
        board = make_board(a=[(7, 7), (8, 7)], b=[(7, 8)])
        ctx = SearchContext(board, Side.A, NO_CLOCK)
        ctx.tt.put((board.serialize(), 3, True), 42, EXACT)
        assert minimax(ctx, 3, -INF, INF, True) == 42
        assert ctx.nodes == 1
