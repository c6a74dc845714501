"""
Metrics Module (v2.0.0)
Track request counts, per-stage fallbacks and classification failures.
"""
import threading
from typing import Dict, Any, Optional

STAGES = ("vision", "styling", "context", "image")

# Thread-safe metrics storage
_lock = threading.Lock()


def _empty_metrics() -> Dict[str, Any]:
    return {
        "total_requests": 0,
        "images_received": 0,
        "garments_classified": 0,
        "fallbacks_by_stage": {stage: 0 for stage in STAGES},
        "classification_failures": {},
        "errors": 0
    }


_metrics = _empty_metrics()


def increment_request(image_count: int = 0, garments_classified: int = 0, error: bool = False):
    """
    Record a finished request.

    Args:
        image_count: Images received
        garments_classified: Successful classifications
        error: Whether the request failed outright
    """
    with _lock:
        _metrics["total_requests"] += 1
        _metrics["images_received"] += image_count
        _metrics["garments_classified"] += garments_classified
        if error:
            _metrics["errors"] += 1


def record_fallback(stage: str):
    """Count one degraded stage."""
    with _lock:
        by_stage = _metrics["fallbacks_by_stage"]
        by_stage[stage] = by_stage.get(stage, 0) + 1


def record_classification_failure(reason: Optional[str]):
    """Count one failed image by reason (timeout, rate_limited, malformed, ...)."""
    key = reason or "unknown"
    with _lock:
        failures = _metrics["classification_failures"]
        failures[key] = failures.get(key, 0) + 1


def get_metrics() -> Dict[str, Any]:
    """Get current metrics snapshot."""
    with _lock:
        images = _metrics["images_received"]
        classified = _metrics["garments_classified"]

        return {
            "total_requests": _metrics["total_requests"],
            "images_received": images,
            "garments_classified": classified,
            "classification_success_ratio": round(classified / images, 3) if images > 0 else 0.0,
            "fallbacks_by_stage": dict(_metrics["fallbacks_by_stage"]),
            "classification_failures": dict(_metrics["classification_failures"]),
            "errors": _metrics["errors"]
        }


def reset_metrics():
    """Reset all metrics (for testing)."""
    global _metrics
    with _lock:
        _metrics = _empty_metrics()
