# Observability module
from stylist_service.observability.logger import log_request, is_logging_enabled
from stylist_service.observability.metrics import (
    increment_request,
    record_fallback,
    record_classification_failure,
    get_metrics,
    reset_metrics,
    STAGES
)
