"""Per-match text log.

Each match writes one file, ``chess_game_log_<match id>.txt``, with a
timestamped line per move, capture, promotion and the final result::

    2024/05/01 10:00:00 - Player WHITE move: P e2 -> e4
    2024/05/01 10:00:09 - Player BLACK capture: P WHITE at e4
    2024/05/01 10:01:30 - Player WHITE promoted: Pawn to Queen at e8
    2024/05/01 10:02:10 - Game End: Winner is WHITE
"""

from __future__ import annotations

import logging
from pathlib import Path

from chessmatch.game.controller import MatchController
from chessmatch.game.events import CaptureEvent, MoveEvent, PromotionEvent, WinEvent

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def log_file_name(match_id: str) -> str:
    return f"chess_game_log_{match_id}.txt"


class MatchLogger:
    """Writes the events of one match to its own log file.

    The file is opened on construction and appended to; call :meth:`close`
    when the match is over.
    """

    __slots__ = ("_logger", "_handler", "_path")

    def __init__(self, match_id: str, directory: Path) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        self._path = directory / log_file_name(match_id)
        self._handler = logging.FileHandler(self._path, encoding="utf-8")
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        self._logger = logging.getLogger(f"{__name__}.{match_id}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False
        self._logger.addHandler(self._handler)
        _LOGGER.debug("Match log opened at %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    # ── Subscriptions ────────────────────────────────────────────────────

    def attach(self, controller: MatchController) -> None:
        events = controller.events
        events.on_move.append(self.log_move)
        events.on_capture.append(self.log_capture)
        events.on_promotion.append(self.log_promotion)
        events.on_win.append(self.log_win)

    def detach(self, controller: MatchController) -> None:
        events = controller.events
        for callbacks, cb in (
            (events.on_move, self.log_move),
            (events.on_capture, self.log_capture),
            (events.on_promotion, self.log_promotion),
            (events.on_win, self.log_win),
        ):
            if cb in callbacks:
                callbacks.remove(cb)

    # ── Lines ────────────────────────────────────────────────────────────

    def log_move(self, event: MoveEvent) -> None:
        self._logger.info(
            "Player %s move: %s %s -> %s",
            event.player,
            event.piece,
            event.source,
            event.target,
        )

    def log_capture(self, event: CaptureEvent) -> None:
        self._logger.info(
            "Player %s capture: %s %s at %s",
            event.player,
            event.piece,
            event.piece_color,
            event.position,
        )

    def log_promotion(self, event: PromotionEvent) -> None:
        self._logger.info(
            "Player %s promoted: Pawn to %s at %s",
            event.player,
            event.kind.name.capitalize(),
            event.position,
        )

    def log_win(self, event: WinEvent) -> None:
        self._logger.info("Game End: Winner is %s", event.player)

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()
