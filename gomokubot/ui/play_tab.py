"""Play tab: Human vs MinimaxAgent on the interactive SVG board."""

from __future__ import annotations

import random as _random
import time as _time
from dataclasses import dataclass, field
from typing import Optional

import gradio as gr

from gomokubot.agent.base import Agent
from gomokubot.agent.config import DEFAULT_DIFFICULTY, DIFFICULTY_CONFIGS
from gomokubot.agent.minimax_agent import MinimaxAgent
from gomokubot.game.board import GomokuGameState, format_move, parse_coordinate
from gomokubot.game.types import Side
from gomokubot.ui.board_component import render_board_svg

DIFFICULTY_CHOICES = [name.capitalize() for name in DIFFICULTY_CONFIGS]

# "Play as" radio value -> human side; "Random" picks one per game
SIDE_CHOICES = {"X": Side.A, "O": Side.B}


@dataclass
class GameSession:
    """Per-tab game state held in gr.State."""

    game: GomokuGameState = field(default_factory=GomokuGameState)
    agent: Agent = field(default_factory=lambda: MinimaxAgent.from_difficulty(DEFAULT_DIFFICULTY))
    human_side: Side = Side.A
    _turn_start: float = field(default_factory=_time.time)

    def reset(self, human_side: Optional[Side] = None) -> None:
        self.game = GomokuGameState()
        if human_side is not None:
            self.human_side = human_side
        self.mark_turn_start()

    def mark_turn_start(self) -> None:
        """Restart the human's move clock."""
        self._turn_start = _time.time()

    def elapsed_since_turn_start(self) -> float:
        return _time.time() - self._turn_start

    @property
    def humans_turn(self) -> bool:
        return not self.game.is_over and self.game.current_player is self.human_side

    @property
    def game_over_banner(self) -> str:
        """Short text for the SVG overlay banner. Empty if game is not over."""
        if not self.game.is_over:
            return ""
        if self.game.winner is None:
            return "Draw!"
        return "You win!" if self.game.winner is self.human_side else "AI wins!"

    @property
    def status_text(self) -> str:
        g = self.game
        if g.is_over:
            if g.winner is None:
                return "Game over: Draw!"
            return f"Game over: {self.game_over_banner} ({g.winner} by 5-in-a-row)"
        if self.humans_turn:
            return f"Your turn ({g.current_player})"
        return f"AI is thinking... ({g.current_player})"

    @property
    def move_history_table(self) -> list[list[str]]:
        return [
            [
                str(n),
                str(played.side),
                format_move(played.move),
                "-" if played.elapsed is None else f"{played.elapsed:.2f}",
            ]
            for n, played in enumerate(self.game.moves, start=1)
        ]


def _board_outputs(session: GameSession, status: Optional[str] = None) -> tuple:
    """(board html, status, history, session) for the shared output components."""
    html = render_board_svg(
        session.game,
        clickable=session.humans_turn,
        game_over_message=session.game_over_banner,
    )
    return html, status or session.status_text, session.move_history_table, session


def _ai_turn(session: GameSession) -> None:
    """Let the AI move if it is its turn, then restart the human's clock."""
    if session.game.is_over or session.humans_turn:
        return
    session.agent.play(session.game)
    session.mark_turn_start()


def _apply_human_move(coord_text: str, session: GameSession):
    """Play the human's move, let the AI answer, and clear the coordinate box."""
    game = session.game
    status: Optional[str]

    move = parse_coordinate(coord_text, game.board.width, game.board.height)
    if game.is_over:
        status = None
    elif not session.humans_turn:
        status = "Wait, it's the AI's turn."
    elif move is None:
        status = f"Invalid coordinate: '{coord_text}'. Use format like H8."
    elif not game.board.is_empty(move):
        status = f"{format_move(move)} is already occupied."
    else:
        game.apply_move(move, elapsed=session.elapsed_since_turn_start())
        _ai_turn(session)

    return _board_outputs(session, status) + ("",)


def _new_game(color_choice: str, difficulty_choice: str, session: GameSession):
    """Start a new game. color_choice is 'X', 'O', or 'Random'; X moves first."""
    human = SIDE_CHOICES.get(color_choice) or _random.choice(list(Side))

    session.agent = MinimaxAgent.from_difficulty(difficulty_choice)
    session.reset(human_side=human)
    _ai_turn(session)  # the AI opens when the human plays O

    return _board_outputs(session) + (f"You are {human} vs {session.agent.name}.",)


def _undo_move(session: GameSession):
    """Take back the AI's reply and the human move before it."""
    game = session.game
    if not game.moves:
        return _board_outputs(session, "Nothing to undo.")

    if game.moves[-1].side is not session.human_side:
        game.undo_move()
    game.undo_move()
    # Undoing back to the start can hand the opening move to the AI again
    _ai_turn(session)
    return _board_outputs(session)


def _resign(session: GameSession):
    if not session.game.is_over:
        session.game.resign(session.human_side)
    return _board_outputs(session)


def build_play_tab() -> None:
    """Construct the Play tab UI inside a gr.Blocks context."""

    session_state = gr.State(GameSession())

    with gr.Row():
        with gr.Column(scale=3):
            board_html = gr.HTML(value=render_board_svg(GomokuGameState()), label="Board")

        with gr.Column(scale=1):
            status_box = gr.Textbox(
                value="Your turn (X)", label="Status", interactive=False, lines=2
            )
            side_box = gr.Textbox(value="You are X.", label="Side", interactive=False)

            with gr.Accordion("New Game", open=True):
                color_choice = gr.Radio(
                    choices=["Random", *SIDE_CHOICES], value="X", label="Play as (X moves first)"
                )
                difficulty_choice = gr.Dropdown(
                    choices=DIFFICULTY_CHOICES,
                    value=DEFAULT_DIFFICULTY.capitalize(),
                    label="Difficulty",
                )
                new_game_btn = gr.Button("New Game", variant="primary")

            with gr.Row():
                undo_btn = gr.Button("Undo")
                resign_btn = gr.Button("Resign", variant="stop")

            # The board click handler writes into these two by elem_id
            coord_input = gr.Textbox(
                label="Move (e.g. H8)", placeholder="H8", elem_id="coord-input"
            )
            coord_submit = gr.Button("Submit Move", elem_id="coord-submit")

            move_table = gr.Dataframe(
                headers=["#", "Side", "Move", "Time (s)"],
                datatype=["number", "str", "str", "str"],
                interactive=False,
                column_count=4,
                label="Move History",
            )

    board_outputs = [board_html, status_box, move_table, session_state]

    coord_submit.click(
        _apply_human_move, [coord_input, session_state], board_outputs + [coord_input]
    )
    coord_input.submit(
        _apply_human_move, [coord_input, session_state], board_outputs + [coord_input]
    )
    new_game_btn.click(
        _new_game, [color_choice, difficulty_choice, session_state], board_outputs + [side_box]
    )
    undo_btn.click(_undo_move, [session_state], board_outputs)
    resign_btn.click(_resign, [session_state], board_outputs)
