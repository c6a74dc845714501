"""
Request Logger (v2.0.0)
Structured JSON line per recommendation request.
"""
import json
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Optional

from stylist_service.config import get_settings

LOGS_DIR = Path(__file__).parent.parent.parent / "logs"
REQUEST_LOG_FILE = LOGS_DIR / "requests.log"

# Configure request logger
request_logger = logging.getLogger("stylist.requests")
request_logger.setLevel(logging.INFO)

# Prevent propagation to root logger
request_logger.propagate = False


def _ensure_file_handler():
    """Attach the file handler on first use so importing never touches disk."""
    if request_logger.handlers:
        return
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(REQUEST_LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    request_logger.addHandler(file_handler)


def log_request(
    request_id: str,
    image_count: int,
    garments_classified: int,
    fallback_stages: List[str],
    latency_ms: int,
    status: str,
    message: Optional[str] = None,
    error: Optional[str] = None
):
    """
    Log a structured request entry.

    Args:
        request_id: Session key of the response
        image_count: Images received
        garments_classified: Images that produced a garment
        fallback_stages: Stages that degraded (vision, styling, context, image)
        latency_ms: Request latency in milliseconds
        status: success or fail
        message: User message, truncated
        error: Error message if failed
    """
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "request_id": request_id,
        "images": image_count,
        "garments_classified": garments_classified,
        "fallback_stages": list(fallback_stages),
        "latency_ms": latency_ms,
        "status": status,
    }

    if message:
        entry["message"] = message[:200]
    if error:
        entry["error"] = error

    _ensure_file_handler()
    request_logger.info(json.dumps(entry))


def is_logging_enabled() -> bool:
    """Check if request logging is enabled."""
    return get_settings().logging_enabled
