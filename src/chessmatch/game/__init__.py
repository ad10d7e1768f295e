"""Game layer — controller, events, match log and snapshot files."""

from chessmatch.game.controller import MatchController, new_match_id
from chessmatch.game.events import (
    CaptureEvent,
    CheckEvent,
    MatchEvents,
    MoveEvent,
    PromotionEvent,
    WinEvent,
)
from chessmatch.game.match_log import MatchLogger, log_file_name
from chessmatch.game.storage import load_match, save_match

__all__ = [
    "CaptureEvent",
    "CheckEvent",
    "MatchController",
    "MatchEvents",
    "MatchLogger",
    "MoveEvent",
    "PromotionEvent",
    "WinEvent",
    "load_match",
    "log_file_name",
    "new_match_id",
    "save_match",
]
