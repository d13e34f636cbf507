from __future__ import annotations

import argparse
import json
from typing import List, Optional, Tuple

from .board import Board
from .config import RulesConfig, configure_logging
from .rules import scan_moves
from .session import GamePhase, Session
from .transport import OutboxTransport


def load_layout(path: str, rules: RulesConfig) -> Board:
    """Reads a JSON layout file (a 3-D list of tile codes)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return Board.from_lists(data, layers=rules.layers, columns=rules.columns)


def parse_click(text: str) -> Optional[Tuple[int, int, int]]:
    """Parses 'layer row column' (spaces or commas). Returns None when it cannot."""
    sep = ',' if ',' in text else ' '
    try:
        l_s, r_s, c_s = [t for t in text.split(sep) if t.strip() != '']
        return (int(l_s), int(r_s), int(c_s))
    except ValueError:
        return None


def _print_outbox(outbox: OutboxTransport) -> None:
    for msg in outbox.drain():
        print('->', msg)


def play(board: Board, pid: str, rules: RulesConfig) -> None:
    """Plays a local session, feeding the server messages a real server would send."""
    outbox = OutboxTransport()
    session = Session(outbox, rules=rules)
    session.on_message(f"connected_{pid}")
    session.on_message("start_" + json.dumps(board.to_lists(), separators=(',', ':')))
    print(session.board.pretty())

    while session.game_state is GamePhase.PLAYING:
        try:
            text = input('Click as "layer row column" (q to quit): ').strip()
        except EOFError:
            break
        if text.lower() in ('q', 'quit', 'exit'):
            break
        click = parse_click(text)
        if click is None:
            print('Could not parse. Try again.')
            continue
        before = session.snapshot()
        session.on_tile_click(*click)
        if session.snapshot() is before:
            print('That tile cannot be selected.')
            continue
        _print_outbox(outbox)
        print(session.board.pretty())
        print(f"Score: {session.scores.player}")

    if session.game_state is GamePhase.DEAD_END:
        print('No moves left.')
    elif session.game_state is GamePhase.CLEARED:
        print('Board cleared!')
    print(f"Final score: {session.scores.player}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='MahjonGG board tools and local play')
    parser.add_argument('--layout', required=True, help='JSON layout file (layers x rows x columns of tile codes)')
    parser.add_argument('--scan', action='store_true', help="Also report whether any moves are left")
    parser.add_argument('--play', action='store_true', help='Play the layout locally')
    parser.add_argument('--pid', default='p1', help='Player id used for outbound messages in --play')
    parser.add_argument('--log-level', default=None, help='Logging level (default: MAHJONGG_LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    rules = RulesConfig.from_env()
    board = load_layout(args.layout, rules)

    if args.play:
        play(board, args.pid, rules)
        return

    print(board.pretty())
    print(f"Tiles left: {board.occupied_count()}")
    if args.scan:
        print(f"Moves left: {scan_moves(board).value}")
