"""CLI entry point and argument parsing"""

import sys
import argparse
from rich.console import Console
import settings
from config import get_config_loader
from api import ApiServer
from cli.status_display import configuration_problems, show_configuration


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FlipSide Player API server")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")
    parser.add_argument(
        "--mock",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use the mock Spotify API (default: USE_MOCK_SPOTIFY)"
    )
    return parser


def main(argv=None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    use_mock = settings.USE_MOCK_SPOTIFY if args.mock is None else args.mock
    bind_address = args.bind or settings.BIND_ADDRESS
    port = args.port or settings.PORT

    problems = configuration_problems(use_mock, get_config_loader())
    if problems:
        for problem in problems:
            console.print(f"[red]ERROR:[/red] {problem}")
        sys.exit(1)

    try:
        server = ApiServer(debug=args.debug, bind_address=bind_address, port=port, use_mock=use_mock)
        show_configuration(console, bind_address, port, use_mock)
        server.run()

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("Goodbye!")
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
