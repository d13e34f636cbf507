from __future__ import annotations

# Wire format: "<kind>" followed by "_"-separated positional fields.
# Server -> client:
# - connected_<pid>
# - start_<layoutJSON>
# - update_<pid>_<score>
# - gameOver_<winnerPid>
# Client -> server:
# - match_<pid>_<points>
# - done_<pid>

import json
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .board import Board
from .config import DEFAULT_RULES, RulesConfig

DELIMITER = "_"


class ProtocolError(ValueError):
    """Raised for a known message kind whose fields are missing or unparsable."""


class MessageKind(str, Enum):
    CONNECTED = "connected"
    START = "start"
    UPDATE = "update"
    GAME_OVER = "gameOver"
    MATCH = "match"
    DONE = "done"


@dataclass(frozen=True)
class Connected:
    pid: str
    kind = MessageKind.CONNECTED


@dataclass(frozen=True)
class Start:
    board: Board
    kind = MessageKind.START


@dataclass(frozen=True)
class Update:
    pid: str
    score: int
    kind = MessageKind.UPDATE


@dataclass(frozen=True)
class GameOver:
    winner_pid: str
    kind = MessageKind.GAME_OVER


@dataclass(frozen=True)
class Match:
    pid: str
    points: int
    kind = MessageKind.MATCH

    def encode(self) -> str:
        return encode_fields(self.kind, self.pid, str(self.points))


@dataclass(frozen=True)
class Done:
    pid: str
    kind = MessageKind.DONE

    def encode(self) -> str:
        return encode_fields(self.kind, self.pid)


InboundMessage = Union[Connected, Start, Update, GameOver]
OutboundMessage = Union[Match, Done]


def encode_fields(kind: MessageKind, *fields: str) -> str:
    for f in fields:
        if DELIMITER in f:
            raise ProtocolError(f"field {f!r} contains the delimiter {DELIMITER!r}")
    return DELIMITER.join([kind.value, *fields])


def _field(parts: List[str], i: int, kind: str) -> str:
    if len(parts) <= i or parts[i] == "":
        raise ProtocolError(f"{kind}: missing field {i}")
    return parts[i]


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ProtocolError(f"{what} is not an integer: {text!r}")


def decode_inbound(raw: str, rules: RulesConfig = DEFAULT_RULES) -> Optional[InboundMessage]:
    """
    Decodes one server message.
    Returns None for kinds this client does not know; raises ProtocolError when
    a known kind carries missing or bad fields. Extra trailing fields are ignored.
    """
    parts = raw.split(DELIMITER)
    kind = parts[0]

    if kind == MessageKind.CONNECTED.value:
        return Connected(pid=_field(parts, 1, kind))

    if kind == MessageKind.START.value:
        text = _field(parts, 1, kind)
        try:
            layout = json.loads(text)
        except (ValueError, RecursionError) as e:
            raise ProtocolError(f"start: layout is not valid JSON: {e}")
        try:
            board = Board.from_lists(layout, layers=rules.layers, columns=rules.columns)
        except ValueError as e:
            raise ProtocolError(f"start: bad layout: {e}")
        return Start(board=board)

    if kind == MessageKind.UPDATE.value:
        pid = _field(parts, 1, kind)
        score = _parse_int(_field(parts, 2, kind), "update score")
        if score < 0:
            raise ProtocolError(f"update score must not be negative: {score}")
        return Update(pid=pid, score=score)

    if kind == MessageKind.GAME_OVER.value:
        return GameOver(winner_pid=_field(parts, 1, kind))

    return None
