# =============================================================================
# core/config.py  —  Settings from the environment
# =============================================================================
#
# Every knob the server reads lives here, with its default:
#
#   DGRAPH_HOST         localhost:9080   gRPC address of a Dgraph alpha
#   DGRAPH_TIMEOUT      30               per-invocation deadline (s), 0 = none
#   DGRAPH_SEED_MOVIES  false            seed movie schema + sample data
#   LOG_LEVEL           INFO             server log level
#
# Entry points call python-dotenv's load_dotenv() first, so a local .env
# file works the same as exported variables.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Optional

from core.errors import ConfigError

DEFAULT_DGRAPH_HOST = "localhost:9080"
DEFAULT_TIMEOUT_SECONDS = 30.0

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    dgraph_host: str = DEFAULT_DGRAPH_HOST
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS
    seed_movies: bool = False
    log_level: str = "INFO"

    @staticmethod
    def load() -> "Settings":
        host = os.getenv("DGRAPH_HOST", DEFAULT_DGRAPH_HOST).strip()
        if not host:
            raise ConfigError("DGRAPH_HOST must not be empty")

        raw_timeout = os.getenv("DGRAPH_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"DGRAPH_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout < 0:
            raise ConfigError("DGRAPH_TIMEOUT must not be negative")

        return Settings(
            dgraph_host=host,
            timeout_seconds=timeout or None,
            seed_movies=os.getenv("DGRAPH_SEED_MOVIES", "false").strip().lower() in _TRUTHY,
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
