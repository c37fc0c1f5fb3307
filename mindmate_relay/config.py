"""
Configuration for the MindMate Relay service.

Settings are read once from the environment (and an optional ``.env`` file)
and then passed explicitly to the components that need them.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_API_URL = "https://api.anthropic.com/v1/messages"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the service."""

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    max_tokens: int = 1024
    api_url: str = DEFAULT_API_URL
    llm_timeout: float = 60.0
    max_history_turns: int | None = None
    store_path: str | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            dotenv: Whether to load a ``.env`` file from the working directory first

        Returns:
            A populated Settings instance

        Raises:
            ValueError: If a numeric variable is malformed or out of range
        """
        if dotenv:
            load_dotenv()

        max_turns = os.getenv("MAX_HISTORY_TURNS")
        if max_turns and int(max_turns) < 0:
            raise ValueError(f"MAX_HISTORY_TURNS must be >= 0, got {max_turns}")
        return cls(
            api_key=os.getenv("CLAUDE_API_KEY") or None,
            model=os.getenv("CLAUDE_MODEL", DEFAULT_MODEL),
            max_tokens=int(os.getenv("CLAUDE_MAX_TOKENS", "1024")),
            api_url=os.getenv("CLAUDE_API_URL", DEFAULT_API_URL),
            llm_timeout=float(os.getenv("LLM_TIMEOUT", "60")),
            max_history_turns=int(max_turns) if max_turns else None,
            store_path=os.getenv("MOOD_STORE_PATH") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic log format on the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
