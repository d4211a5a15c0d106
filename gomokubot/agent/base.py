from __future__ import annotations

import abc
import time
from typing import Optional

from gomokubot.game.board import GomokuGameState
from gomokubot.game.types import Move


class Agent(abc.ABC):
    @abc.abstractmethod
    def select_move(self, game_state: GomokuGameState) -> Optional[Move]:
        """Return the move this agent wants to play, or None if there is none.

        The game state must be left exactly as it was found.
        """

    def play(self, game_state: GomokuGameState) -> Optional[Move]:
        """Decide a move for the side to move and apply it to the game.

        Returns the applied move, or None when no move exists (game over or
        board full).
        """
        if game_state.is_over:
            return None
        t0 = time.perf_counter()
        move = self.select_move(game_state)
        if move is not None:
            game_state.apply_move(move, elapsed=time.perf_counter() - t0)
        return move

    @property
    def name(self) -> str:
        return self.__class__.__name__
