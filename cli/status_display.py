"""Startup configuration display for CLI"""

from typing import List

from rich.table import Table

import settings


def configuration_problems(use_mock: bool, env_loader) -> List[str]:
    """
    Collect configuration errors that prevent the server from starting

    Args:
        use_mock: Whether the mock Spotify client will be used
        env_loader: ConfigLoader used to look up required variables

    Returns:
        Human readable problems, empty when the configuration is usable
    """
    problems = []

    if not use_mock:
        missing = env_loader.missing(settings.REQUIRED_SPOTIFY_VARS)
        if missing:
            problems.append(f"Missing required environment variables: {', '.join(missing)}")

    if len(settings.SESSION_SECRET) < settings.SESSION_SECRET_MIN_LENGTH:
        problems.append(
            f"SESSION_SECRET must be at least {settings.SESSION_SECRET_MIN_LENGTH} characters"
        )

    return problems


def show_configuration(console, bind_address: str, port: int, use_mock: bool):
    """
    Print the effective server configuration

    Args:
        console: Rich console for output
        bind_address: Address the server binds to
        port: Port the server listens on
        use_mock: Whether the mock Spotify client is used
    """
    table = Table(title="FlipSide Player API")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Listening on", f"http://{bind_address}:{port}")
    table.add_row("Environment", settings.ENVIRONMENT)
    table.add_row("Frontend URL", settings.FRONTEND_URL)
    table.add_row("Spotify API", "[yellow]mock[/yellow]" if use_mock else "live")
    table.add_row("Store backend", settings.STORE_BACKEND)
    if settings.STORE_BACKEND == "redis":
        table.add_row("Redis URL", settings.REDIS_URL)

    console.print(table)
