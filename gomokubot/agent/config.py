from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .moves import NEIGHBORHOOD_RADIUS
from .patterns import FORK_BOARD_LIMIT


@dataclass(frozen=True)
class EngineConfig:
    max_depth: int = 5
    time_limit: float = 5.0  # seconds per decision
    use_time_limit: bool = True
    use_transposition_table: bool = True
    neighborhood_radius: int = NEIGHBORHOOD_RADIUS
    fork_board_limit: int = FORK_BOARD_LIMIT


DEFAULT_DIFFICULTY = "medium"

DIFFICULTY_CONFIGS: dict[str, EngineConfig] = {
    "easy": EngineConfig(max_depth=1, time_limit=1.0),
    "medium": EngineConfig(max_depth=3, time_limit=3.0),
    "hard": EngineConfig(max_depth=5, time_limit=5.0),
}


def get_difficulty_config(difficulty: Optional[str]) -> EngineConfig:
    """Look up a preset by name (case-insensitive); unknown names get the default."""
    if not difficulty:
        return DIFFICULTY_CONFIGS[DEFAULT_DIFFICULTY]
    return DIFFICULTY_CONFIGS.get(
        difficulty.strip().lower(), DIFFICULTY_CONFIGS[DEFAULT_DIFFICULTY]
    )
