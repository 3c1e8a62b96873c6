"""Allow ``python -m chordscribe``."""

from .cli import main

main()
