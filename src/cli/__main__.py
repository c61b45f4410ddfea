"""Allow ``python -m src.cli`` execution (runs the details command)."""

from src.cli.details import main

main()
