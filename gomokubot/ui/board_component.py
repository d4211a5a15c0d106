"""SVG board renderer + JavaScript click handler for Gradio."""

from __future__ import annotations

from typing import Optional

from gomokubot.game.board import COL_LABELS, Board, GomokuGameState, format_move
from gomokubot.game.types import Move, Side

# Layout constants
CELL_SIZE = 40
MARGIN = 40
STONE_RADIUS = 15
CLICK_RADIUS = 18  # Invisible click target radius
LABEL_FONT = 'font-size="14" font-family="monospace"'

# Colors
BG_COLOR = "#DCB35C"
LINE_COLOR = "#4A3728"
SIDE_COLORS = {Side.A: "#D63031", Side.B: "#0984E3"}
LAST_MOVE_COLOR = "#F5F5F5"

# Game-over banner colors keyed by message
BANNER_COLORS = {"You win!": "#4ADE80", "AI wins!": "#F87171"}
BANNER_DEFAULT_COLOR = "#FFFFFF"


class _Layout:
    """Pixel geometry for one board size. Row 0 is drawn at the bottom."""

    def __init__(self, board: Board) -> None:
        self.cols = board.width
        self.rows = board.height
        self.width_px = MARGIN * 2 + CELL_SIZE * (self.cols - 1)
        self.height_px = MARGIN * 2 + CELL_SIZE * (self.rows - 1)

    def point(self, x: int, y: int) -> tuple[int, int]:
        return MARGIN + x * CELL_SIZE, MARGIN + (self.rows - 1 - y) * CELL_SIZE


def _grid(layout: _Layout) -> list[str]:
    left, top = layout.point(0, layout.rows - 1)
    right, bottom = layout.point(layout.cols - 1, 0)
    lines = [
        f'<line x1="{px}" y1="{top}" x2="{px}" y2="{bottom}" stroke="{LINE_COLOR}"/>'
        for px in (layout.point(x, 0)[0] for x in range(layout.cols))
    ]
    lines += [
        f'<line x1="{left}" y1="{py}" x2="{right}" y2="{py}" stroke="{LINE_COLOR}"/>'
        for py in (layout.point(0, y)[1] for y in range(layout.rows))
    ]
    cx, cy = layout.point(layout.cols // 2, layout.rows // 2)
    lines.append(f'<circle cx="{cx}" cy="{cy}" r="4" fill="{LINE_COLOR}"/>')
    return lines


def _labels(layout: _Layout) -> list[str]:
    """Column letters along the bottom edge, row numbers down the left."""
    labels = []
    for x in range(layout.cols):
        px, _ = layout.point(x, 0)
        labels.append(
            f'<text x="{px}" y="{layout.height_px - 12}" text-anchor="middle" '
            f'{LABEL_FONT} fill="{LINE_COLOR}">{COL_LABELS[x]}</text>'
        )
    for y in range(layout.rows):
        _, py = layout.point(0, y)
        labels.append(
            f'<text x="{MARGIN - 24}" y="{py + 5}" text-anchor="middle" '
            f'{LABEL_FONT} fill="{LINE_COLOR}">{y + 1}</text>'
        )
    return labels


def _stone(layout: _Layout, move: Move, side: Side, highlighted: bool) -> list[str]:
    px, py = layout.point(move.x, move.y)
    out = []
    if highlighted:
        out.append(
            f'<circle cx="{px}" cy="{py}" r="{STONE_RADIUS}" '
            f'fill="{LAST_MOVE_COLOR}" opacity="0.6"/>'
        )
    out.append(
        f'<text x="{px}" y="{py + 8}" text-anchor="middle" font-size="24" '
        f'font-weight="bold" font-family="sans-serif" '
        f'fill="{SIDE_COLORS[side]}">{side.symbol}</text>'
    )
    return out


def _click_target(layout: _Layout, move: Move) -> str:
    px, py = layout.point(move.x, move.y)
    label = format_move(move)
    return (
        f'<circle cx="{px}" cy="{py}" r="{CLICK_RADIUS}" fill="transparent" '
        f'class="board-click" data-coord="{label}" style="cursor:pointer">'
        f'<title>{label}</title></circle>'
    )


def _banner(layout: _Layout, message: str) -> list[str]:
    color = BANNER_COLORS.get(message, BANNER_DEFAULT_COLOR)
    mid = layout.height_px // 2
    return [
        f'<rect x="0" y="{mid - 30}" width="{layout.width_px}" height="60" '
        f'fill="rgba(0, 0, 0, 0.6)"/>',
        f'<text x="{layout.width_px // 2}" y="{mid + 10}" text-anchor="middle" '
        f'font-size="32" font-weight="bold" font-family="sans-serif" '
        f'fill="{color}">{message}</text>',
    ]


def render_board_svg(
    game_state: GomokuGameState,
    clickable: bool = True,
    highlight_last: bool = True,
    game_over_message: str = "",
) -> str:
    """Render the board as an SVG string.

    Empty intersections get invisible click targets (class "board-click")
    while the game is running and `clickable` is set. A non-empty
    `game_over_message` is drawn as a banner across the middle.
    """
    board = game_state.board
    layout = _Layout(board)
    w, h = layout.width_px, layout.height_px

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
        f'viewBox="0 0 {w} {h}" id="gomoku-board">',
        f'<rect width="{w}" height="{h}" fill="{BG_COLOR}" rx="4"/>',
    ]
    parts += _grid(layout)
    parts += _labels(layout)

    last_move: Optional[Move] = game_state.moves[-1].move if game_state.moves else None
    for move, side in board.occupied():
        parts += _stone(layout, move, side, highlight_last and move == last_move)

    if clickable and not game_state.is_over:
        parts += [_click_target(layout, move) for move in board.empty_cells()]

    if game_over_message:
        parts += _banner(layout, game_over_message)

    parts.append("</svg>")
    return "\n".join(parts)


# Bound once on page load. A click on a target copies its coordinate into the
# #coord-input textbox and presses #coord-submit.
BOARD_CLICK_JS = """
() => {
    if (window._gomokuClickBound) return;
    window._gomokuClickBound = true;

    document.addEventListener('click', (e) => {
        const target = e.target.closest('.board-click');
        const coord = target && target.getAttribute('data-coord');
        if (!coord) return;

        const field = document.querySelector('#coord-input textarea, #coord-input input');
        if (!field) return;
        // Gradio only notices values written through the prototype setter
        const proto = field.tagName === 'TEXTAREA'
            ? window.HTMLTextAreaElement.prototype
            : window.HTMLInputElement.prototype;
        Object.getOwnPropertyDescriptor(proto, 'value').set.call(field, coord);
        field.dispatchEvent(new Event('input', { bubbles: true }));

        const submit = document.querySelector('#coord-submit');
        if (submit) submit.click();
    });
}
"""
