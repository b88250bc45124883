"""Configuration loader for FlipSide Player

Values resolve in this order:
1. Environment variables
2. .env file (never overrides variables already set)
3. Defaults passed by settings.py
"""

import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes')


class ConfigLoader:
    """Typed access to environment configuration

    Args:
        env_path: Path to the .env file, '.env' in the working directory by default
    """

    def __init__(self, env_path: Optional[str] = None):
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f"No .env file at {self.env_path}, using process environment and defaults")

    def _coerce(self, env_var: str, raw: str, default: Any) -> Any:
        """Convert raw to the type of default, falling back to default on bad input"""
        # bool before int: bool is a subclass of int
        if isinstance(default, bool):
            return raw.strip().lower() in TRUE_VALUES
        for kind in (int, float):
            if isinstance(default, kind):
                try:
                    return kind(raw)
                except ValueError:
                    logger.warning(f"{env_var}={raw!r} is not a valid {kind.__name__}, using default: {default}")
                    return default
        return raw

    def get(self, env_var: str, default: Any) -> Any:
        """Environment value converted to the type of default

        Args:
            env_var: Environment variable name
            default: Value used when the variable is unset; its type drives parsing

        Returns:
            The parsed value or default
        """
        raw = os.getenv(env_var)
        if raw is None:
            return default
        return self._coerce(env_var, raw, default)

    def get_url(self, env_var: str, default: str) -> str:
        """Base URL without a trailing slash, so paths can be appended with '/'"""
        return self.get(env_var, default).rstrip("/")

    def get_choice(self, env_var: str, default: str, choices: Sequence[str]) -> str:
        """Lower-cased value restricted to choices

        Raises:
            ValueError: If the variable is set to something outside choices
        """
        value = self.get(env_var, default).strip().lower()
        if value not in choices:
            raise ValueError(f"{env_var} must be one of {', '.join(choices)}, got {value!r}")
        return value

    def missing(self, env_vars: Iterable[str]) -> List[str]:
        """Names among env_vars that are unset or empty, in the order given"""
        return [name for name in env_vars if not os.getenv(name)]


_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
