"""
Configuration for the invtrack CLI.
Loaded from environment variables, optionally via a .env file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BACKENDS = ("json", "rest")
CODE_POLICIES = ("category", "sequential")
LEDGER_POLICIES = ("upsert", "append")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Configuration settings for the invtrack CLI."""

    # Storage settings
    backend: str = "json"
    data_dir: Path = Path("data")
    rest_url: str | None = None
    rest_key: str | None = None
    rest_timeout: float = 10.0

    # Catalog policies
    code_policy: str = "category"
    ledger_policy: str = "upsert"

    # Logging settings
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> Config:
        """Create configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            Config: Configuration instance

        Raises:
            ValueError: If a numeric setting cannot be parsed
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        timeout = os.getenv("INVTRACK_REST_TIMEOUT", "10")
        try:
            rest_timeout = float(timeout)
        except ValueError:
            raise ValueError(f"INVTRACK_REST_TIMEOUT must be a number, got {timeout!r}") from None

        return cls(
            backend=os.getenv("INVTRACK_BACKEND", "json").lower(),
            data_dir=Path(os.getenv("INVTRACK_DATA_DIR", "data")),
            rest_url=os.getenv("INVTRACK_REST_URL") or None,
            rest_key=os.getenv("INVTRACK_REST_KEY") or None,
            rest_timeout=rest_timeout,
            code_policy=os.getenv("INVTRACK_CODE_POLICY", "category").lower(),
            ledger_policy=os.getenv("INVTRACK_LEDGER_POLICY", "upsert").lower(),
            log_level=os.getenv("INVTRACK_LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> bool:
        """Validate configuration settings.

        Returns:
            bool: True if configuration is valid
        """
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of: {', '.join(BACKENDS)}")
        if self.backend == "rest" and not (self.rest_url and self.rest_key):
            raise ValueError(
                "INVTRACK_REST_URL and INVTRACK_REST_KEY are required for the rest backend"
            )
        if self.rest_timeout <= 0:
            raise ValueError("rest_timeout must be positive")
        if self.code_policy not in CODE_POLICIES:
            raise ValueError(f"code_policy must be one of: {', '.join(CODE_POLICIES)}")
        if self.ledger_policy not in LEDGER_POLICIES:
            raise ValueError(f"ledger_policy must be one of: {', '.join(LEDGER_POLICIES)}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")
        return True
