"""Minimax agent: critical-move short-circuit, then iterative deepening
alpha-beta search under a wall-clock budget.

Each decision:
  1. Clear the transposition table and start the clock.
  2. Play an immediate win, a forced block, or an open-four denial if one
     exists (find_critical_move); the search is skipped entirely.
  3. Otherwise order the root candidates once and search depths
     1..max_depth. The best move of each depth that scored at least one
     candidate replaces the previous answer.
  4. Stop when the time budget runs out or max_depth is done.
"""

from __future__ import annotations

import logging
from typing import Optional

from gomokubot.agent.base import Agent
from gomokubot.game.board import Board, GomokuGameState, format_move
from gomokubot.game.types import Move, Side

from .config import EngineConfig, get_difficulty_config
from .moves import order_moves
from .search import INF, SearchContext, TranspositionTable, find_critical_move, minimax

logger = logging.getLogger(__name__)


class MinimaxAgent(Agent):
    """Alpha-beta agent with iterative deepening and a per-decision TT."""

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config if config is not None else EngineConfig()
        self._tt = TranspositionTable()

    @classmethod
    def from_difficulty(cls, difficulty: Optional[str]) -> MinimaxAgent:
        return cls(get_difficulty_config(difficulty))

    @property
    def name(self) -> str:
        return f"MinimaxAgent(d={self.config.max_depth}, t={self.config.time_limit:g}s)"

    def select_move(self, game_state: GomokuGameState) -> Optional[Move]:
        if game_state.is_over:
            return None
        return self.decide(game_state.board, game_state.current_player)

    def decide(self, board: Board, side: Side) -> Optional[Move]:
        """Choose a move for `side` on `board`. The board is left unchanged."""
        self._tt.reset()
        ctx = SearchContext(board, side, self.config, self._tt)
        try:
            return self._decide(ctx)
        finally:
            logger.debug(
                "Searched %d nodes in %.3fs (%d cached, %d hits)",
                ctx.nodes, ctx.elapsed, len(self._tt), self._tt.hits,
            )
            self._tt.reset()

    def _decide(self, ctx: SearchContext) -> Optional[Move]:
        board, side = ctx.board, ctx.side

        candidates = ctx.candidates()
        if not candidates:
            logger.info("No legal moves left for %s", side)
            return None

        critical = find_critical_move(board, side, candidates)
        if critical is not None:
            logger.info("%s plays critical move %s", side, format_move(critical))
            return critical

        ordered = order_moves(board, candidates, side)

        best_move: Optional[Move] = None
        best_score = -INF

        for depth in range(1, self.config.max_depth + 1):
            depth_move: Optional[Move] = None
            depth_score = -INF
            timed_out = False

            for scored in ordered:
                with board.simulate(scored.move, side):
                    score = minimax(ctx, depth - 1, depth_score, INF, False)

                if score > depth_score:
                    depth_score = score
                    depth_move = scored.move

                if ctx.time_up():
                    timed_out = True
                    break

            if depth_move is not None:
                best_move, best_score = depth_move, depth_score

            if timed_out:
                logger.debug("Search timed out at depth %d, using best move found", depth)
                break

        if best_move is not None:
            logger.info(
                "%s selects %s with score %d after %.3fs",
                side, format_move(best_move), best_score, ctx.elapsed,
            )
        return best_move
