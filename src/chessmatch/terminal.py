"""Terminal front-end: text board rendering and an interactive game loop."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from chessmatch.core.enums import PROMOTION_TYPES, Color, PieceType
from chessmatch.core.errors import ChessError
from chessmatch.core.match import Match
from chessmatch.core.move_generator import MoveGrid
from chessmatch.core.piece import Piece
from chessmatch.core.types import MAX_ROW, MIN_COLUMN, AlgebraicPosition
from chessmatch.game.controller import MatchController

_LOGGER = logging.getLogger(__name__)

ANSI_RESET = "\u001b[0m"
ANSI_WHITE = "\u001b[37m"
ANSI_YELLOW = "\u001b[33m"
ANSI_BLUE_BACKGROUND = "\u001b[44m"

QUIT_COMMANDS = frozenset({"quit", "exit"})

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


# ── Rendering ───────────────────────────────────────────────────────────


def _piece_text(piece: Piece | None, *, use_color: bool, use_unicode: bool) -> str:
    if piece is None:
        return "-"
    text = piece.symbol if use_unicode else str(piece)
    if not use_color:
        return text
    color = ANSI_WHITE if piece.color == Color.WHITE else ANSI_YELLOW
    return f"{color}{text}{ANSI_RESET}"


def render_board(
    pieces: Sequence[Sequence[Piece | None]],
    highlights: MoveGrid | None = None,
    *,
    use_color: bool = True,
    use_unicode: bool = False,
) -> str:
    """Draw the grid with rank numbers on the left and files underneath.

    Cells set in *highlights* are marked: a blue background when colors are
    on, otherwise the cell text is replaced by ``*`` (or ``x`` over a piece).
    """
    lines: list[str] = []
    for r, row in enumerate(pieces):
        cells: list[str] = []
        for c, piece in enumerate(row):
            text = _piece_text(piece, use_color=use_color, use_unicode=use_unicode)
            if highlights is not None and highlights[r][c]:
                if use_color:
                    text = f"{ANSI_BLUE_BACKGROUND}{text}{ANSI_RESET}"
                else:
                    text = "*" if piece is None else "x"
            cells.append(text)
        lines.append(f"{MAX_ROW - r} " + " ".join(cells))
    files = " ".join(chr(ord(MIN_COLUMN) + c) for c in range(len(pieces[0])))
    lines.append(f"  {files}")
    return "\n".join(lines)


def _captured_line(pieces: list[Piece], color: Color) -> str:
    return "[" + ", ".join(str(p) for p in pieces if p.color == color) + "]"


def render_match(match: Match, *, use_color: bool = True, use_unicode: bool = False) -> str:
    """Board, captured pieces by color, turn and status."""
    captured = match.captured_pieces
    lines = [
        render_board(match.pieces(), use_color=use_color, use_unicode=use_unicode),
        "",
        "Captured pieces:",
        f"White: {_captured_line(captured, Color.WHITE)}",
        f"Black: {_captured_line(captured, Color.BLACK)}",
        "",
        f"Turn: {match.turn}",
    ]
    if match.checkmate:
        lines.append("CHECKMATE!")
        lines.append(f"Winner: {match.winner}")
    else:
        lines.append(f"Waiting player: {match.current_player}")
        if match.check:
            lines.append("CHECK!")
    return "\n".join(lines)


# ── Input ───────────────────────────────────────────────────────────────


def read_position(text: str) -> AlgebraicPosition:
    """Parse a square typed by the user; raises InvalidCoordinateError."""
    return AlgebraicPosition.parse(text)


def read_promotion(text: str) -> PieceType | None:
    """Promotion letter (``Q``, ``R``, ``B`` or ``N``); None if not one of them."""
    name = text.strip()
    if len(name) != 1:
        return None
    try:
        kind = PieceType.from_letter(name)
    except ValueError:
        return None
    return kind if kind in PROMOTION_TYPES else None


# ── Game loop ───────────────────────────────────────────────────────────


class TerminalGame:
    """Two players sharing one terminal.

    Every :class:`ChessError` is reported and the same turn is asked again.
    Typing ``quit`` (or closing input) ends the loop early.
    """

    __slots__ = ("_controller", "_input", "_output", "_use_color", "_use_unicode")

    def __init__(
        self,
        controller: MatchController,
        input_fn: InputFn = input,
        output_fn: OutputFn = print,
    ) -> None:
        self._controller = controller
        self._input = input_fn
        self._output = output_fn
        self._use_color = controller.settings.use_color
        self._use_unicode = controller.settings.use_unicode

    def run(self) -> bool:
        """Play until checkmate or quit.  Returns True if the match finished."""
        while not self._controller.match.checkmate:
            match = self._controller.match
            self._output(self._render(match))
            self._output("")
            try:
                if not self._play_turn(match):
                    _LOGGER.info("Terminal game left on turn %d", match.turn)
                    return False
            except ChessError as exc:
                self._output(str(exc))
                self._output("")
        self._output(self._render(self._controller.match))
        return True

    def _play_turn(self, match: Match) -> bool:
        source_text = self._ask("Source: ")
        if source_text is None:
            return False
        source = read_position(source_text)
        highlights = self._controller.legal_moves(source)
        self._output(
            render_board(
                match.pieces(),
                highlights,
                use_color=self._use_color,
                use_unicode=self._use_unicode,
            )
        )
        target_text = self._ask("Target: ")
        if target_text is None:
            return False
        result = self._controller.perform_move(source, read_position(target_text))
        if result.promotion_pending:
            return self._choose_promotion()
        return True

    def _choose_promotion(self) -> bool:
        while True:
            text = self._ask("Enter piece for promotion (Q/R/B/N): ")
            if text is None:
                return False
            kind = read_promotion(text)
            if kind is not None:
                self._controller.replace_promoted_piece(kind)
                return True
            self._output("Invalid value for promotion")

    def _ask(self, prompt: str) -> str | None:
        """Read one line; None when the user quits or input is closed."""
        try:
            text = self._input(prompt)
        except EOFError:
            return None
        if text.strip().lower() in QUIT_COMMANDS:
            return None
        return text

    def _render(self, match: Match) -> str:
        return render_match(match, use_color=self._use_color, use_unicode=self._use_unicode)
