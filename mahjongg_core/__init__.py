"""
MahjonGG client core Python package.

This package contains the tile-board rules and the client session logic
that keeps two players in sync through the game server.
Modules:
- config.py: ruleset constants, RulesConfig, logging setup
- board.py: Board, SelectedTile, tile code helpers
- rules.py: selectability, selection toggle, pair evaluation, scoring, scan
- protocol.py: wire message variants, decode/encode
- transport.py: Transport interface and OutboxTransport
- session.py: Session state machine and SessionSnapshot
- cli.py: command line driver
"""
