"""
Exception hierarchy for the CV validation pipeline.

Fatal (abort the submission): ExtractionFailed, StoreFailure.
Non-fatal (absorbed into a degraded ValidationResult): ProviderFailure
and its subclasses, ParseFailure.
"""

from enum import Enum
from typing import Optional


class CVValidatorError(Exception):
    """Base class for all application-specific errors."""
    pass


class ExtractionFailed(CVValidatorError):
    """The uploaded file could not be read at all."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class StoreFailure(CVValidatorError):
    """The submission store could not be read or written."""
    pass


class ParseFailure(ValueError, CVValidatorError):
    """The model reply could not be parsed into a ValidationResult."""

    def __init__(self, message: str, raw_response: str = ""):
        self.raw_response = raw_response
        if raw_response:
            super().__init__(f"{message}. Raw response snippet: {raw_response[:200]}")
        else:
            super().__init__(message)


class FailureKind(str, Enum):
    rate_limited = "rate_limited"
    model_unavailable = "model_unavailable"
    provider_error = "provider_error"
    transport_error = "transport_error"


class ProviderFailure(CVValidatorError):
    """The model provider did not return a usable reply."""

    kind: FailureKind = FailureKind.provider_error

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RateLimited(ProviderFailure):
    kind = FailureKind.rate_limited


class ModelUnavailable(ProviderFailure):
    kind = FailureKind.model_unavailable


class ProviderError(ProviderFailure):
    kind = FailureKind.provider_error


class TransportError(ProviderFailure):
    kind = FailureKind.transport_error
