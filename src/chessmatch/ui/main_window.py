"""MainWindow — board of square buttons, status labels and the Game menu."""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QCloseEvent, QFont
from PyQt6.QtWidgets import (
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from chessmatch.config import Settings
from chessmatch.core.enums import Color
from chessmatch.core.errors import ChessError, SnapshotError
from chessmatch.core.move_generator import MoveGrid
from chessmatch.core.types import BOARD_SIZE, MAX_ROW, MIN_COLUMN, AlgebraicPosition
from chessmatch.game.controller import MatchController
from chessmatch.game.match_log import MatchLogger
from chessmatch.ui.promotion_dialog import PromotionDialog

_LOGGER = logging.getLogger(__name__)

LIGHT_COLOR = "#f0d9b5"
DARK_COLOR = "#b58863"
SELECTED_COLOR = "#f6f669"
HIGHLIGHT_COLOR = "#769656"
CAPTURE_COLOR = "#ff6347"
SQUARE_SIZE = 72

SNAPSHOT_FILTER = "Chess match (*.json);;All files (*)"


def _square(row: int, col: int) -> AlgebraicPosition:
    return AlgebraicPosition(chr(ord(MIN_COLUMN) + col), MAX_ROW - row)


class MainWindow(QMainWindow):
    """Two players on one board.

    Click a piece of the side to move to see where it can go, then click a
    highlighted square.  Scores count checkmates since the window opened.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        controller: MatchController | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Chessmatch")
        self._settings = settings if settings is not None else Settings()
        self._controller = controller or MatchController(self._settings)
        self._selected: AlgebraicPosition | None = None
        self._highlights: MoveGrid | None = None
        self._score: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
        self._match_log: MatchLogger | None = None

        self._setup_ui()
        self._setup_menu()
        self._open_match_log()
        self._refresh()

    # ── UI setup ─────────────────────────────────────────────────────────

    def _setup_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(10, 10, 10, 10)

        header_font = QFont()
        header_font.setBold(True)
        header_font.setPointSize(16)
        self._turn_label = QLabel()
        self._turn_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._turn_label.setFont(header_font)
        root.addWidget(self._turn_label)

        self._score_label = QLabel()
        self._score_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._score_label)

        grid = QGridLayout()
        grid.setSpacing(0)
        self._squares: list[list[QPushButton]] = []
        for col in range(BOARD_SIZE):
            file_label = QLabel(chr(ord(MIN_COLUMN) + col))
            file_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            grid.addWidget(file_label, BOARD_SIZE, col + 1)
        for row in range(BOARD_SIZE):
            rank_label = QLabel(str(MAX_ROW - row))
            rank_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            grid.addWidget(rank_label, row, 0)
            buttons: list[QPushButton] = []
            for col in range(BOARD_SIZE):
                btn = QPushButton()
                btn.setFixedSize(SQUARE_SIZE, SQUARE_SIZE)
                btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
                btn.clicked.connect(
                    lambda checked, r=row, c=col: self.click_square(_square(r, c))
                )
                grid.addWidget(btn, row, col + 1)
                buttons.append(btn)
            self._squares.append(buttons)

        board_row = QHBoxLayout()
        board_row.addStretch(1)
        board_row.addLayout(grid)
        board_row.addStretch(1)
        root.addLayout(board_row)

        self._status_label = QLabel()
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._status_label)

    def _setup_menu(self) -> None:
        menu_bar = self.menuBar()
        assert menu_bar is not None
        menu = menu_bar.addMenu("&Game")
        assert menu is not None

        self._act_new = QAction("&New match", self)
        self._act_new.setShortcut("Ctrl+N")
        self._act_new.triggered.connect(self.new_match)
        menu.addAction(self._act_new)

        self._act_save = QAction("&Save match…", self)
        self._act_save.setShortcut("Ctrl+S")
        self._act_save.triggered.connect(self._on_save)
        menu.addAction(self._act_save)

        self._act_load = QAction("&Load match…", self)
        self._act_load.setShortcut("Ctrl+O")
        self._act_load.triggered.connect(self._on_load)
        menu.addAction(self._act_load)

        menu.addSeparator()

        self._act_cancel = QAction("&Cancel selection", self)
        self._act_cancel.setShortcut("Esc")
        self._act_cancel.triggered.connect(self.cancel_selection)
        menu.addAction(self._act_cancel)

        self._act_quit = QAction("&Quit", self)
        self._act_quit.setShortcut("Ctrl+Q")
        self._act_quit.triggered.connect(self.close)
        menu.addAction(self._act_quit)

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def controller(self) -> MatchController:
        return self._controller

    @property
    def selected(self) -> AlgebraicPosition | None:
        return self._selected

    @property
    def score(self) -> dict[Color, int]:
        return dict(self._score)

    @property
    def status_text(self) -> str:
        return self._status_label.text()

    @property
    def turn_text(self) -> str:
        return self._turn_label.text()

    def square_button(self, square: AlgebraicPosition | str) -> QPushButton:
        if isinstance(square, str):
            square = AlgebraicPosition.parse(square)
        c = square.to_coordinate()
        return self._squares[c.row][c.column]

    def is_highlighted(self, square: AlgebraicPosition | str) -> bool:
        if self._highlights is None:
            return False
        if isinstance(square, str):
            square = AlgebraicPosition.parse(square)
        c = square.to_coordinate()
        return self._highlights[c.row][c.column]

    def click_square(self, square: AlgebraicPosition | str) -> None:
        """Select a piece of the side to move, or move the selected one here."""
        if isinstance(square, str):
            square = AlgebraicPosition.parse(square)
        match = self._controller.match
        piece = match.piece_at(square)
        try:
            if piece is not None and piece.color == match.current_player:
                self._select(square)
            elif self._selected is not None:
                self._move(self._selected, square)
        except ChessError as exc:
            self._clear_selection()
            self._show_error(str(exc))
        self._refresh()

    def cancel_selection(self) -> None:
        self._clear_selection()
        self._refresh()

    def new_match(self) -> None:
        self._close_match_log()
        self._controller.new_match()
        self._open_match_log()
        self._clear_selection()
        self._status_label.setText("")
        self._refresh()

    def save_to(self, file_path: Path) -> bool:
        try:
            self._controller.save(file_path)
        except OSError as exc:
            self._show_error(f"Cannot save match: {exc}")
            return False
        self._status_label.setText(f"Match saved to {file_path.name}")
        return True

    def load_from(self, file_path: Path) -> bool:
        try:
            self._controller.load(file_path)
        except (OSError, SnapshotError) as exc:
            self._show_error(f"Cannot load match: {exc}")
            return False
        self._clear_selection()
        self._status_label.setText(f"Match loaded from {file_path.name}")
        self._refresh()
        return True

    # ── Moves ────────────────────────────────────────────────────────────

    def _select(self, square: AlgebraicPosition) -> None:
        self._highlights = self._controller.legal_moves(square)
        self._selected = square

    def _move(self, source: AlgebraicPosition, target: AlgebraicPosition) -> None:
        result = self._controller.perform_move(source, target)
        self._clear_selection()
        if result.promotion_pending:
            kind = PromotionDialog.ask(result.mover, self)
            if kind is not None:
                self._controller.replace_promoted_piece(kind)

        match = self._controller.match
        if match.checkmate:
            winner = match.winner
            assert winner is not None
            self._score[winner] += 1
            self._refresh()
            QMessageBox.information(self, "Checkmate", f"Checkmate! {winner} wins.")
            self.new_match()
        elif match.check:
            self._status_label.setText(f"Check! {match.current_player} must protect the king")
        else:
            self._status_label.setText("")

    def _clear_selection(self) -> None:
        self._selected = None
        self._highlights = None

    # ── Display ──────────────────────────────────────────────────────────

    def _refresh(self) -> None:
        match = self._controller.match
        pieces = match.pieces()
        selected = None if self._selected is None else self._selected.to_coordinate()
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = pieces[row][col]
                btn = self._squares[row][col]
                btn.setText("" if piece is None else piece.symbol)
                if self._highlights is not None and self._highlights[row][col]:
                    capture = piece is not None and piece.color != match.current_player
                    color = CAPTURE_COLOR if capture else HIGHLIGHT_COLOR
                elif selected is not None and (selected.row, selected.column) == (row, col):
                    color = SELECTED_COLOR
                else:
                    color = LIGHT_COLOR if (row + col) % 2 == 0 else DARK_COLOR
                btn.setStyleSheet(
                    f"background-color: {color}; color: black; border: none; font-size: 40px;"
                )
        self._turn_label.setText(f"Turn {match.turn}: {match.current_player}")
        self._score_label.setText(
            f"Score - White: {self._score[Color.WHITE]}, Black: {self._score[Color.BLACK]}"
        )

    def _show_error(self, message: str) -> None:
        _LOGGER.debug("Rejected: %s", message)
        self._status_label.setText(message)
        QMessageBox.warning(self, "Invalid move", message)

    # ── File dialogs ─────────────────────────────────────────────────────

    def _on_save(self) -> None:
        file_path, _ = QFileDialog.getSaveFileName(self, "Save match", "", SNAPSHOT_FILTER)
        if file_path:
            self.save_to(Path(file_path))

    def _on_load(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, "Load match", "", SNAPSHOT_FILTER)
        if file_path:
            self.load_from(Path(file_path))

    # ── Match log ────────────────────────────────────────────────────────

    def _open_match_log(self) -> None:
        if self._settings.log_directory is None:
            return
        self._match_log = MatchLogger(self._controller.match_id, self._settings.log_directory)
        self._match_log.attach(self._controller)

    def _close_match_log(self) -> None:
        if self._match_log is None:
            return
        self._match_log.detach(self._controller)
        self._match_log.close()
        self._match_log = None

    def closeEvent(self, event: QCloseEvent | None) -> None:  # noqa: N802
        self._close_match_log()
        super().closeEvent(event)
