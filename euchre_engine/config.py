"""
Engine configuration from the environment
"""

import os
from typing import Any, Dict, Optional


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def load_config() -> Dict[str, Any]:
    """Read engine settings, falling back to development defaults"""
    return {
        "STORE": os.getenv("EUCHRE_STORE", "memory"),
        "REDIS_URL": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        "GAME_TTL": int(os.getenv("EUCHRE_GAME_TTL", "3600")),
        "MAX_RETRIES": int(os.getenv("EUCHRE_MAX_RETRIES", "5")),
        "SEED": _optional_int(os.getenv("EUCHRE_SEED")),
        "LOG_LEVEL": os.getenv("EUCHRE_LOG_LEVEL", "INFO").upper(),
    }
