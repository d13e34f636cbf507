from __future__ import annotations

# Facade module that re-exports the MahjonGG core functionality.
# Used by the Flask app and tests; single-responsibility modules live under mahjongg_core/*.

from mahjongg_core.board import (  # noqa: F401
    Board,
    Cell,
    SelectedTile,
    base_type,
    is_selected_code,
    is_valid_code,
)
from mahjongg_core.config import (  # noqa: F401
    CLEAR_BONUS,
    CLEARED,
    DEFAULT_RULES,
    EMPTY,
    LOSS_OUTCOME,
    SELECTED_OFFSET,
    WILDCARD,
    WIN_OUTCOME,
    RulesConfig,
)
from mahjongg_core.rules import (  # noqa: F401
    MovesLeft,
    ToggleResult,
    evaluate_pair,
    is_selectable,
    points_for_match,
    scan_moves,
    tiles_match,
    toggle_select,
)
from mahjongg_core.protocol import (  # noqa: F401
    Connected,
    Done,
    GameOver,
    Match,
    MessageKind,
    ProtocolError,
    Start,
    Update,
    decode_inbound,
)
from mahjongg_core.transport import OutboxTransport, Transport  # noqa: F401
from mahjongg_core.session import GamePhase, Scores, Session, SessionSnapshot  # noqa: F401


def main() -> None:
    # CLI driver delegated to mahjongg_core.cli
    from mahjongg_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
