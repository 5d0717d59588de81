"""Allow ``python -m spa_server``."""

from spa_server.lifecycle import run

run()
