"""Allow running as ``python -m project_timer``."""

from project_timer.cli import main

main()
