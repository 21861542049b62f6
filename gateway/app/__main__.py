"""``python -m gateway.app`` entrypoint."""

from gateway.app.cli import main

main()
