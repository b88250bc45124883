"""CLI entry point

Runs the main CLI from the cli package, e.g. `python cli.py --mock`.
"""

from cli.main import main

if __name__ == "__main__":
    main()
