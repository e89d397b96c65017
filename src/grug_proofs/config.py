"""
Configuration

Settings for the verification API and CLI, read from environment variables.
A `.env` file in the working directory is loaded first.

Variables:
- GRUG_PROOFS_HOST: API bind host (default 127.0.0.1)
- GRUG_PROOFS_PORT: API bind port (default 8000)
- GRUG_PROOFS_LOG_LEVEL: logging level name (default INFO)
- GRUG_PROOFS_CORS_ORIGINS: comma-separated allowed origins (default *)
"""

import logging
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment.

        Raises:
            ValueError: If GRUG_PROOFS_PORT is not an integer
        """
        port = os.getenv("GRUG_PROOFS_PORT", str(cls.port))
        try:
            port = int(port)
        except ValueError:
            raise ValueError(f"GRUG_PROOFS_PORT must be an integer, got {port!r}")

        origins = os.getenv("GRUG_PROOFS_CORS_ORIGINS", ",".join(cls.cors_origins))
        return cls(
            host=os.getenv("GRUG_PROOFS_HOST", cls.host),
            port=port,
            log_level=os.getenv("GRUG_PROOFS_LOG_LEVEL", cls.log_level).upper(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


def setup_logging(verbose: bool = False, level: str = None):
    """Setup logging configuration."""
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, (level or Settings.from_env().log_level), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
