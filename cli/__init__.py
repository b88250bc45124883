"""CLI package for FlipSide Player

Command-line entry point that validates configuration and runs the API server.
"""

from cli.main import main

__all__ = [
    "main",
]
