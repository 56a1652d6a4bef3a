import logging
import math
import os
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_TIMEOUT_SECONDS = 5.0


def parse_timeout(raw: Optional[str], default: float = DEFAULT_LAYOUT_TIMEOUT_SECONDS) -> float:
    """Positive finite seconds, or the default when unset or unusable."""
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("LAYOUT_TIMEOUT_SECONDS=%r is not a number; using %ss", raw, default)
        return default
    if not math.isfinite(value) or value <= 0:
        logger.warning("LAYOUT_TIMEOUT_SECONDS=%r must be positive; using %ss", raw, default)
        return default
    return value


LAYOUT_ENGINE = os.getenv("LAYOUT_ENGINE", "local")
ELK_BASE_URL = os.getenv("ELK_BASE_URL", "http://localhost:8090")
LAYOUT_TIMEOUT_SECONDS = parse_timeout(os.getenv("LAYOUT_TIMEOUT_SECONDS"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]
