"""
Terminal front end.

Usage:
    python main.py play [--size {small,medium,large}]
    python main.py scores
    python main.py serve [--host HOST] [--port PORT]
"""
import argparse
import logging
from typing import Callable, List, Optional

from .board import BOARD_SIZES, DEFAULT_SIZE, ConfigurationError
from .game import GameHost
from .scores import (
    HighScores,
    LocalStore,
    format_time,
    scores_path_from_env,
    size_label,
)
from .session import GameSession, GameStatus


PLAY_HELP = (
    "Commands: r ROW COL (reveal), f ROW COL (flag), "
    "n [SIZE] (new game), s (scores), q (quit)"
)

FACES = {
    GameStatus.PLAYING: ":)",
    GameStatus.WON: "B)",
    GameStatus.LOST: "X(",
}


def render_session(session: GameSession) -> str:
    """Header line plus board, as shown after every command."""
    header = (
        f"{size_label(session.size_key)}  "
        f"Mines: {session.mines_remaining}  "
        f"{FACES[session.status]}  "
        f"Time: {format_time(session.elapsed_seconds)}  "
        f"Status: {session.status.value}"
    )
    return header + "\n" + session.board.render()


def render_scores(scores: HighScores) -> str:
    """High-score tables, one per board size."""
    table = scores.load_scores()
    if not table:
        return "No high scores yet!"
    lines: List[str] = []
    for size_key, entries in table.items():
        lines.append(size_label(size_key))
        lines.append(f"{'Rank':<6} {'Time':<7} {'Date'}")
        for rank, entry in enumerate(entries, start=1):
            lines.append(
                f"{rank:<6} {format_time(entry.elapsed_seconds):<7} "
                f"{entry.timestamp[:10]}"
            )
        lines.append("")
    return "\n".join(lines).rstrip()


def run_command(host: GameHost, line: str) -> str:
    """
    Apply one line of player input.

    Returns:
        Text to show, or an empty string to redraw the board.
    """
    parts = line.split()
    if not parts:
        return ""
    command, args = parts[0].lower(), parts[1:]

    if command in ("r", "f"):
        try:
            row, col = (int(arg) for arg in args)
        except ValueError:
            return "Expected: " + command + " ROW COL"
        if command == "r":
            host.reveal(row, col)
        else:
            host.toggle_flag(row, col)
        return ""
    if command == "n":
        try:
            host.reset(args[0] if args else None)
        except ConfigurationError as error:
            return str(error)
        return ""
    if command == "s":
        return render_scores(host.scores)
    return PLAY_HELP


def play(host: GameHost, read: Callable[[str], str] = input) -> None:
    """Interactive loop until the player quits or input ends."""
    print(PLAY_HELP)
    while True:
        session = host.current()
        print(render_session(session))
        if session.is_won:
            print(f"\n*** WIN in {format_time(session.elapsed_seconds)}! ***")
        elif session.is_lost:
            print("\n*** LOST (hit mine) ***")
        try:
            line = read("> ")
        except EOFError:
            break
        if line.strip().lower() in ("q", "quit"):
            break
        message = run_command(host, line)
        if message:
            print(message)


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper - play in the terminal or serve the web API"
    )
    parser.add_argument(
        "--scores", default=None,
        help="High-score file (default: $MINESWEEPER_SCORES_PATH or "
             "~/.minesweeper/scores.json)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--size", choices=list(BOARD_SIZES), default=DEFAULT_SIZE,
        help="Board size",
    )

    subparsers.add_parser("scores", help="Show high scores")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")

    args = parser.parse_args(argv)
    scores = HighScores(LocalStore(args.scores or scores_path_from_env()))

    if args.command == "play":
        logging.basicConfig(level=logging.WARNING)
        play(GameHost(scores, size_key=args.size))
    elif args.command == "scores":
        print(render_scores(scores))
    elif args.command == "serve":
        from .server import main as serve
        serve(host=args.host, port=args.port, scores_path=args.scores)
    else:
        parser.print_help()
