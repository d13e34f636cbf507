from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .board import Board, SelectedTile
from .config import DEFAULT_RULES, LOSS_OUTCOME, WIN_OUTCOME, RulesConfig
from .protocol import (
    Connected,
    Done,
    GameOver,
    Match,
    OutboundMessage,
    ProtocolError,
    Start,
    Update,
    decode_inbound,
)
from .rules import MovesLeft, points_for_match, scan_moves, toggle_select
from .transport import Transport

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    AWAITING_OPPONENT = "awaitingOpponent"
    PLAYING = "playing"
    DEAD_END = "deadEnd"
    CLEARED = "cleared"
    GAME_OVER = "gameOver"


@dataclass(frozen=True)
class Scores:
    player: int = 0
    opponent: int = 0


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of everything the presentation layer renders."""
    pid: str = ""
    game_state: GamePhase = GamePhase.AWAITING_OPPONENT
    game_outcome: str = ""
    time_since_last_match: int = 0  # ms timestamp of the last match (or of the start)
    board: Board = field(default_factory=Board)
    scores: Scores = field(default_factory=Scores)
    selected_tiles: Tuple[SelectedTile, ...] = ()


Listener = Callable[[SessionSnapshot], None]


def now_ms() -> int:
    return int(time.time() * 1000)


class Session:
    """
    Per-client game session.

    State changes only through on_tile_click (local play) and on_message
    (server traffic). Every change replaces the snapshot and notifies
    subscribers; ignored events leave the snapshot object untouched.
    """

    def __init__(
        self,
        transport: Transport,
        rules: Optional[RulesConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._transport = transport
        self.rules = rules or DEFAULT_RULES
        self._clock = clock or now_ms
        self._state = SessionSnapshot()
        self._listeners: List[Listener] = []

    # ---------- Read side ----------

    def snapshot(self) -> SessionSnapshot:
        return self._state

    @property
    def pid(self) -> str:
        return self._state.pid

    @property
    def game_state(self) -> GamePhase:
        return self._state.game_state

    @property
    def board(self) -> Board:
        return self._state.board

    @property
    def scores(self) -> Scores:
        return self._state.scores

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: SessionSnapshot) -> None:
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def _send(self, message: OutboundMessage) -> None:
        text = message.encode()
        logger.info("WS sending: %s", text)
        try:
            self._transport.send(text)
        except Exception as e:
            # Sends are fire-and-forget; the transport owns recovery.
            logger.warning("Transport send failed for %r: %s", text, e)

    # ---------- Transport lifecycle (logged only) ----------

    def on_open(self) -> None:
        logger.info("Connection opened to server")

    def on_error(self, error: object) -> None:
        logger.warning("WebSocket error: %s", error)

    # ---------- Local play ----------

    def _in_bounds(self, layer: int, row: int, column: int) -> bool:
        board = self._state.board
        return (
            0 <= layer < board.depth
            and 0 <= row < len(board.layout[layer])
            and 0 <= column < len(board.layout[layer][row])
        )

    def on_tile_click(self, layer: int, row: int, column: int) -> None:
        """Handles a click on a tile. Ignored unless the game is in progress and the tile is free."""
        s = self._state
        if s.game_state is not GamePhase.PLAYING:
            logger.debug("Click at %s,%s,%s ignored in state %s", layer, row, column, s.game_state.value)
            return
        if not self._in_bounds(layer, row, column):
            logger.debug("Click at %s,%s,%s is off the board", layer, row, column)
            return

        result = toggle_select(s.board, s.selected_tiles, layer, row, column)
        if result is None:
            return

        if not result.matched:
            self._commit(replace(s, board=result.board, selected_tiles=result.selection))
            return

        outbound: List[OutboundMessage] = []
        now = self._clock()
        points = points_for_match(now - s.time_since_last_match, self.rules)
        player_score = s.scores.player + points
        game_state = s.game_state
        outbound.append(Match(pid=s.pid, points=points))

        moves_left = scan_moves(result.board)
        if moves_left is MovesLeft.NO:
            game_state = GamePhase.DEAD_END
            outbound.append(Done(pid=s.pid))
        elif moves_left is MovesLeft.CLEARED:
            player_score += self.rules.clear_bonus
            game_state = GamePhase.CLEARED
            outbound.append(Match(pid=s.pid, points=self.rules.clear_bonus))
            outbound.append(Done(pid=s.pid))

        self._commit(replace(
            s,
            board=result.board,
            selected_tiles=result.selection,
            scores=replace(s.scores, player=player_score),
            time_since_last_match=now,
            game_state=game_state,
        ))
        for message in outbound:
            self._send(message)

    # ---------- Server traffic ----------

    def on_message(self, raw: str) -> None:
        """Decodes and applies one inbound message. Malformed and unknown messages change nothing."""
        logger.info("WS received: %s", raw)
        try:
            message = decode_inbound(raw, self.rules)
        except ProtocolError as e:
            logger.warning("Ignoring malformed message %r: %s", raw, e)
            return
        if message is None:
            logger.debug("Ignoring unknown message kind in %r", raw)
            return

        if isinstance(message, Connected):
            self._handle_connected(message)
        elif isinstance(message, Start):
            self._handle_start(message)
        elif isinstance(message, Update):
            self._handle_update(message)
        elif isinstance(message, GameOver):
            self._handle_game_over(message)

    def _handle_connected(self, message: Connected) -> None:
        s = self._state
        if s.pid and s.pid != message.pid:
            logger.warning("Already connected as %s; ignoring new pid %s", s.pid, message.pid)
            return
        self._commit(replace(s, pid=message.pid))

    def _handle_start(self, message: Start) -> None:
        s = self._state
        if s.game_state is not GamePhase.AWAITING_OPPONENT:
            logger.warning("Ignoring start in state %s", s.game_state.value)
            return
        self._commit(replace(
            s,
            board=message.board,
            selected_tiles=(),
            time_since_last_match=self._clock(),
            game_state=GamePhase.PLAYING,
        ))

    def _handle_update(self, message: Update) -> None:
        # Our own score is always current locally.
        s = self._state
        if message.pid == s.pid:
            return
        self._commit(replace(s, scores=replace(s.scores, opponent=message.score)))

    def _handle_game_over(self, message: GameOver) -> None:
        s = self._state
        if s.game_state is GamePhase.GAME_OVER:
            return
        outcome = WIN_OUTCOME if message.winner_pid == s.pid else LOSS_OUTCOME
        self._commit(replace(s, game_state=GamePhase.GAME_OVER, game_outcome=outcome))
