"""Command-line entry point: terminal play, GUI launch and snapshot viewing."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from chessmatch.config import Settings
from chessmatch.core.enums import PieceType
from chessmatch.core.errors import SnapshotError
from chessmatch.game.controller import MatchController
from chessmatch.game.match_log import MatchLogger
from chessmatch.game.storage import load_match
from chessmatch.terminal import TerminalGame, render_match

_LOGGER = logging.getLogger(__name__)


def _promotion_kind(text: str) -> PieceType:
    try:
        kind = PieceType.from_letter(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid promotion piece: {text!r}") from None
    if not kind.is_promotion_target:
        raise argparse.ArgumentTypeError(f"cannot promote to {kind.name.lower()}")
    return kind


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        log_directory=getattr(args, "log_dir", None),
        verify_castling_transit=getattr(args, "strict_castling", False),
        default_promotion=getattr(args, "promotion", PieceType.QUEEN),
        use_unicode=getattr(args, "unicode", False),
        use_color=not getattr(args, "no_color", False),
    )


def cmd_play(args: argparse.Namespace) -> int:
    settings = settings_from_args(args)
    controller = MatchController(settings)
    if args.load is not None:
        try:
            controller.load(args.load)
        except (OSError, SnapshotError) as exc:
            print(f"Cannot load {args.load}: {exc}", file=sys.stderr)
            return 1

    _LOGGER.info("Starting terminal match %s", controller.match_id)
    match_log: MatchLogger | None = None
    if settings.log_directory is not None:
        match_log = MatchLogger(controller.match_id, settings.log_directory)
        match_log.attach(controller)
    try:
        finished = TerminalGame(controller, input, print).run()
    finally:
        if match_log is not None:
            match_log.close()

    if not finished and args.save_on_exit is not None:
        controller.save(args.save_on_exit)
        print(f"Match saved to {args.save_on_exit}")
    return 0


def cmd_gui(args: argparse.Namespace) -> int:
    from chessmatch.ui.bootstrap import run_application

    return run_application(settings_from_args(args))


def cmd_show(args: argparse.Namespace) -> int:
    try:
        match = load_match(args.file)
    except (OSError, SnapshotError) as exc:
        print(f"Cannot load {args.file}: {exc}", file=sys.stderr)
        return 1
    print(render_match(match, use_color=not args.no_color, use_unicode=args.unicode))
    return 0


def _add_display_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--unicode", action="store_true", help="draw pieces as chess glyphs")
    parser.add_argument("--no-color", action="store_true", help="disable ANSI colors")


def _add_rule_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--strict-castling",
        action="store_true",
        help="forbid castling through or into attacked squares",
    )
    parser.add_argument(
        "--promotion",
        type=_promotion_kind,
        default=PieceType.QUEEN,
        metavar="{Q,R,B,N}",
        help="piece a pawn becomes until another is chosen (default: Q)",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="chessmatch", description="Two-player chess.")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    pl = sub.add_parser("play", help="Play in the terminal")
    pl.add_argument("--log-dir", type=Path, default=None, help="write a match log here")
    pl.add_argument("--load", type=Path, default=None, help="resume a saved match")
    pl.add_argument(
        "--save-on-exit",
        type=Path,
        default=None,
        metavar="FILE",
        help="save an unfinished match when quitting",
    )
    _add_display_flags(pl)
    _add_rule_flags(pl)
    pl.set_defaults(fn=cmd_play)

    gu = sub.add_parser("gui", help="Open the desktop window")
    gu.add_argument("--log-dir", type=Path, default=None, help="write match logs here")
    _add_rule_flags(gu)
    gu.set_defaults(fn=cmd_gui)

    sh = sub.add_parser("show", help="Print a saved match")
    sh.add_argument("file", type=Path)
    _add_display_flags(sh)
    sh.set_defaults(fn=cmd_show)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())
