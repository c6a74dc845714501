# Core module
from stylist_service.core.errors import (
    StylistError,
    UpstreamFailure,
    MalformedOutput,
    InvalidInput,
    upstream_failure_from,
)
from stylist_service.core.validation import (
    ValidationError,
    validate_image_upload,
    validate_recommend_request,
    validate_file_size,
    validate_mime_type,
    parse_context_blob,
)
