"""
Centralized configuration for the bargaining simulator.
Loads settings from environment variables and provides defaults.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .models import MAX_ROUNDS, SessionConfig, Variant

# Load environment variables from .env file
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Game defaults
        self.VARIANT: Variant = Variant(os.getenv("BARGAIN_VARIANT", Variant.FIXED_SKEW.value))
        self.MAX_ROUNDS: int = int(os.getenv("BARGAIN_MAX_ROUNDS", MAX_ROUNDS))
        self.SEED: Optional[int] = _optional_int("BARGAIN_SEED")
        self.MAX_SAMPLER_ITERATIONS: int = int(os.getenv("BARGAIN_MAX_SAMPLER_ITERATIONS", 10_000))

        # Logging
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
        self.LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

        # Output
        self.OUTPUT_DIR: Path = Path(os.getenv("OUTPUT_DIR", "./transcripts"))

        self._validate_settings()

    def _validate_settings(self):
        """Validate critical settings."""
        if self.MAX_ROUNDS < 0:
            raise ValueError("BARGAIN_MAX_ROUNDS must be non-negative")
        if self.MAX_SAMPLER_ITERATIONS < 1:
            raise ValueError("BARGAIN_MAX_SAMPLER_ITERATIONS must be at least 1")

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            key: getattr(self, key)
            for key in vars(self)
            if key.isupper() and not key.startswith("_")
        }

    def session_config(self, **overrides: Any) -> SessionConfig:
        """Build a session config from these settings; ``None`` overrides are ignored."""
        data: Dict[str, Any] = {
            "variant": self.VARIANT,
            "max_rounds": self.MAX_ROUNDS,
            "seed": self.SEED,
            "max_sampler_iterations": self.MAX_SAMPLER_ITERATIONS,
        }
        data.update({k: v for k, v in overrides.items() if v is not None})
        return SessionConfig(**data)

    def get_logging_config(self) -> dict:
        """Get logging configuration."""
        handlers: Dict[str, dict] = {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
            },
        }
        if self.LOG_FILE:
            handlers['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': self.LOG_FILE,
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'formatter': 'default',
            }
        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                },
            },
            'handlers': handlers,
            'root': {
                'level': self.LOG_LEVEL,
                'handlers': list(handlers),
            },
        }


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()

