"""Terminal front end.

    salvo play --mode competitive --difficulty 9x9 --player alice
    salvo edit --difficulty 6x6 --out harbour.fieldfile
    salvo stats --player alice

The interactive loops take ``recv_fn``/``notify`` callables so they can be
driven by scripted input as easily as by a human at the keyboard.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Callable, List, Optional

from . import config as _cfg
from .board import Board, RevealedBoard
from .codec import FieldParseError, load_field, save_field
from .commands import (
    AutoCommand,
    ClearCommand,
    CommandParseError,
    FireCommand,
    LoadCommand,
    PlaceCommand,
    QuitCommand,
    RemoveCommand,
    SaveCommand,
    StartCommand,
    parse_command,
)
from .coord_utils import MAX_SIZE, format_coord
from .editor import PlacementEditor
from .events import Category, Event
from .generator import UnderfilledFleet
from .match import Mode, Phase, SetupIncomplete
from .presets import PRESETS, BoardConfig, custom_config, preset
from .session import GameSession
from .stats import StatsRecorder, StatsStore

logger = logging.getLogger(__name__)

RecvFn = Callable[[], str]
NotifyFn = Callable[[str], None]


# ----------------------------- rendering ----------------------------- #
def grid_rows(board: Optional[Board], shots: Optional[RevealedBoard] = None, *, reveal: bool = False) -> List[str]:
    """Render a board as text rows: '.' unknown/water, 'S' ship, 'X' hit, 'o' miss."""
    size = board.size if board is not None else shots.size  # type: ignore[union-attr]
    rows = ["   " + "".join(str(c + 1).rjust(3) for c in range(size))]
    for r in range(size):
        cells = []
        for c in range(size):
            shot = int(shots.grid[r, c]) if shots is not None else 0
            if shot > 0:
                cells.append("X")
            elif shot < 0:
                cells.append("o")
            elif reveal and board is not None and board.grid[r, c] > 0:
                cells.append("S")
            else:
                cells.append(".")
        rows.append(f"{chr(ord('A') + r):2} " + "".join(cell.rjust(3) for cell in cells))
    return rows


def _show(notify: NotifyFn, title: str, rows: List[str]) -> None:
    notify(title)
    for row in rows:
        notify(row)


# ----------------------------- setup loop ----------------------------- #
def run_setup(
    editor: PlacementEditor,
    recv_fn: RecvFn,
    notify: NotifyFn,
    *,
    rng: Optional[random.Random] = None,
    allow_start: bool = True,
) -> bool:
    """Drive manual placement until START (or until the input ends).

    Returns True when the fleet is complete and START was given, False on
    QUIT or end of input.  With ``allow_start=False`` (layout editor) the loop
    only ends on QUIT/end of input and returns True.
    """
    while True:
        _show(notify, "Your fleet:", grid_rows(editor.board, reveal=True))
        pool = ", ".join(f"{ship.key} x{editor.remaining[ship]}" for ship in editor.available())
        notify(f"INFO To place: {pool or 'nothing'}")
        line = recv_fn()
        if not line:
            return not allow_start
        try:
            cmd = parse_command(line, editor.config.size)
        except CommandParseError as exc:
            notify(f"ERR {exc}")
            continue

        if isinstance(cmd, QuitCommand):
            return not allow_start
        elif isinstance(cmd, PlaceCommand):
            ship = editor.place(cmd.ship_type, cmd.row, cmd.col, cmd.rotation)
            if ship is None:
                notify("ERR Cannot place there (bounds, overlap, buffer or none left)")
            else:
                notify(f"INFO Placed {ship.ship_type.name} #{ship.ship_id} at {format_coord(cmd.row, cmd.col)}")
        elif isinstance(cmd, RemoveCommand):
            if not editor.remove(cmd.ship_id):
                notify(f"ERR No removable ship #{cmd.ship_id}")
        elif isinstance(cmd, AutoCommand):
            try:
                editor.auto_place(rng)
            except UnderfilledFleet as exc:
                notify(f"ERR {exc}")
        elif isinstance(cmd, ClearCommand):
            editor.clear()
        elif isinstance(cmd, SaveCommand):
            path = save_field(cmd.path, editor.board.grid, editor.composition)
            notify(f"INFO Saved {path}")
        elif isinstance(cmd, LoadCommand):
            try:
                editor.load(Path(cmd.path).read_text(encoding="utf-8"))
            except (OSError, FieldParseError) as exc:
                notify(f"ERR Could not load {cmd.path}: {exc}")
        elif isinstance(cmd, StartCommand):
            if not allow_start:
                notify("ERR START is not available in the editor")
            elif editor.is_complete:
                return True
            else:
                notify("ERR Place every ship before starting")
        else:
            notify("ERR Command not available during setup")


# ----------------------------- battle loop ----------------------------- #
def run_battle(session: GameSession, recv_fn: RecvFn, notify: NotifyFn) -> bool:
    """Fire until the match finishes (True) or the player quits (False)."""
    while not session.state.finished:
        state = session.state
        if state.player_board is not None:
            _show(notify, "Your waters:", grid_rows(state.player_board, state.shots_at_player, reveal=True))
        _show(notify, "Enemy waters:", grid_rows(state.computer_board, state.shots_at_computer))
        notify(f"INFO Moves: {state.moves}. Your turn, FIRE <coord>")
        line = recv_fn()
        if not line:
            return False
        try:
            cmd = parse_command(line, session.config.size)
        except CommandParseError as exc:
            notify(f"ERR {exc}")
            continue
        if isinstance(cmd, QuitCommand):
            return False
        if not isinstance(cmd, FireCommand):
            notify("ERR Only FIRE and QUIT are available now")
            continue

        outcome = session.fire(cmd.row, cmd.col)
        if not outcome.accepted:
            notify(f"ERR {format_coord(cmd.row, cmd.col)} is not a valid target")
            continue
        notify(f"{outcome.result.value.upper()} {format_coord(cmd.row, cmd.col)}")
        session.wait_for_computer()
    return True


def _announce_computer_shots(notify: NotifyFn) -> Callable[[Event], None]:
    def _on_event(ev: Event) -> None:
        if ev.category is Category.TURN and ev.type == "shot" and ev.payload["shooter"] == "computer":
            coord = format_coord(ev.payload["row"], ev.payload["col"])
            notify(f"INFO Computer fires at {coord}: {ev.payload['result'].upper()}")
        elif ev.category is Category.TURN and ev.type == "end":
            notify(f"INFO Game over, winner: {ev.payload['winner']} after {ev.payload['moves']} moves")

    return _on_event


# ----------------------------- commands ----------------------------- #
def _config_from_args(args: argparse.Namespace) -> BoardConfig:
    if args.ships:
        try:
            counts = [int(tok) for tok in args.ships.split(",")]
        except ValueError:
            raise SystemExit(f"--ships expects comma separated integers, got {args.ships!r}") from None
        return custom_config(args.difficulty, counts)
    return preset(args.difficulty)


def cmd_play(args: argparse.Namespace, recv_fn: RecvFn = input, notify: NotifyFn = print) -> int:
    rng = random.Random(args.seed)
    config = _config_from_args(args)
    mode = Mode(args.mode)
    target = None
    if args.load and mode is Mode.CLASSIC:
        field = load_field(args.load)
        if field.size > MAX_SIZE:
            raise SystemExit(f"Boards larger than {MAX_SIZE}x{MAX_SIZE} cannot be played from the terminal")
        config = BoardConfig(f"{field.size}x{field.size}", field.size, dict(field.composition), custom=True)
        target = Board.from_occupancy(field.grid)

    store = StatsStore(args.stats)
    subscribers = [StatsRecorder(store), _announce_computer_shots(notify)]
    try:
        session = GameSession(
            config, mode, player_name=args.player, target=target, rng=rng, subscribers=subscribers
        )
    except UnderfilledFleet as exc:
        notify(f"ERR {exc}")
        return 1

    with session:
        notify(f"INFO {mode.value} game: {config.describe()}")
        if session.phase is Phase.SETUP:
            assert session.editor is not None
            if args.load:
                session.import_field(Path(args.load).read_text(encoding="utf-8"))
            if not run_setup(session.editor, recv_fn, notify, rng=rng):
                return 0
            try:
                session.start()
            except (SetupIncomplete, UnderfilledFleet) as exc:
                notify(f"ERR {exc}")
                return 1
        run_battle(session, recv_fn, notify)
    return 0


def cmd_edit(args: argparse.Namespace, recv_fn: RecvFn = input, notify: NotifyFn = print) -> int:
    editor = PlacementEditor(_config_from_args(args))
    rng = random.Random(args.seed)
    if args.load:
        editor.load(Path(args.load).read_text(encoding="utf-8"))
    if args.auto:
        editor.auto_place(rng)
    else:
        run_setup(editor, recv_fn, notify, rng=rng, allow_start=False)
    save_field(args.out, editor.board.grid, editor.composition)
    notify(f"INFO Layout written to {args.out}")
    return 0


def cmd_stats(args: argparse.Namespace, notify: NotifyFn = print) -> int:
    store = StatsStore(args.stats)
    players = [args.player] if args.player else store.players()
    if not players:
        notify("No games recorded yet.")
    for name in players:
        summary = store.summary(name)
        notify(f"{name}: {summary['games']} games, {summary['wins']} wins, {summary['losses']} losses")
        for rec in store.history(name):
            extra = f", computer {rec.computer_moves}" if rec.computer_moves is not None else ""
            notify(
                f"  {rec.timestamp} {rec.mode} {rec.difficulty}: {rec.result}, "
                f"{rec.moves} moves{extra}, {rec.elapsed_ms // 1000}s"
            )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="salvo", description="Naval combat puzzle against the computer")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("--stats", default=str(_cfg.STATS_PATH), help="Statistics JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_board_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--difficulty", default=_cfg.DEFAULT_DIFFICULTY, choices=list(PRESETS))
        p.add_argument("--ships", help="Custom counts in order SUBMARINE,DESTROYER,CRUISER,BATTLESHIP,CARRIER")
        p.add_argument("--load", help="Layout file (.fieldfile) to start from")
        p.add_argument("--seed", type=int, help="Random seed")

    play = sub.add_parser("play", help="Play a match")
    add_board_args(play)
    play.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.CLASSIC.value)
    play.add_argument("--player", default=_cfg.DEFAULT_PLAYER)

    edit = sub.add_parser("edit", help="Design and save a board layout")
    add_board_args(edit)
    edit.add_argument("--out", required=True, help=f"Output file (suggested suffix {_cfg.FIELD_SUFFIX})")
    edit.add_argument("--auto", action="store_true", help="Place the fleet randomly and save without prompting")

    stats = sub.add_parser("stats", help="Show recorded matches")
    stats.add_argument("--player")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if (args.debug or _cfg.DEBUG) else logging.WARNING, format=_cfg.LOG_FORMAT
    )
    try:
        if args.command == "play":
            return cmd_play(args)
        if args.command == "edit":
            return cmd_edit(args)
        return cmd_stats(args)
    except (EOFError, KeyboardInterrupt):
        print()
        return 0
    except (OSError, FieldParseError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
