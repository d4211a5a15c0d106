from __future__ import annotations

import random
from typing import Optional

from gomokubot.game.board import GomokuGameState
from gomokubot.game.types import Move

from .base import Agent


class RandomAgent(Agent):
    def select_move(self, game_state: GomokuGameState) -> Optional[Move]:
        moves = game_state.legal_moves()
        if not moves:
            return None
        return random.choice(moves)
