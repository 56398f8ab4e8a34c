"""
Error types for the resume document pipeline.

Every error is scoped to a single document: a failure while fetching or
decoding one attachment never affects the others in the same batch.
Field extraction never raises; a missing field is simply None.
"""

from typing import Optional


class ResumePipelineError(Exception):
    """Base class for per-document acquisition and decode failures."""

    error_code = "PIPELINE_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class FormatError(ResumePipelineError):
    """Raised when an inline data URL is malformed."""

    error_code = "INVALID_DATA_URL"


class UnsupportedSourceError(ResumePipelineError):
    """Raised when an attachment URL uses a scheme other than http(s) or data."""

    error_code = "UNSUPPORTED_SOURCE"


class FetchError(ResumePipelineError):
    """Raised when a remote PDF cannot be downloaded."""

    error_code = "FETCH_FAILED"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ResumePipelineError):
    """Raised when the PDF decoder fails or returns nothing usable."""

    error_code = "DECODE_FAILED"


class CancellationError(ResumePipelineError):
    """Raised when acquisition was abandoned (timeout or caller abort)."""

    error_code = "CANCELLED"


class ScreeningError(ResumePipelineError):
    """Raised when there is nothing readable to send to the screening model."""

    error_code = "NO_READABLE_RESUME"
