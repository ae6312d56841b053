"""
Response Normalizer - raw model reply (or provider failure) -> ValidationResult.

Validation is advisory: whatever goes wrong on the AI side, the caller
gets a well-formed ValidationResult and the submission goes through.
Nothing in this module raises.

Fallback results always have:
- isValid = True (the submission is accepted)
- every match = None ("not evaluated", as opposed to False = mismatch)
- the same "validation unavailable" explanation for every field
- a stable error code plus a cause-specific overallSummary
"""

import json
from typing import Optional

from pydantic import ValidationError

from app.core.exceptions import FailureKind, ParseFailure, ProviderFailure
from app.core.logging_config import get_logger
from app.schemas.schemas import DECLARED_FIELDS, ModelReply, ValidationResult

logger = get_logger(__name__)

PARSE_ERROR = "parse_error"

UNAVAILABLE_DETAIL = "Validation unavailable: this field was not evaluated."

FAILURE_SUMMARIES = {
    FailureKind.rate_limited: (
        "AI validation skipped: the AI provider's rate limit or quota was exceeded. "
        "Your submission was saved without automated validation."
    ),
    FailureKind.model_unavailable: (
        "AI validation skipped: the configured AI model is not available from the provider. "
        "Your submission was saved without automated validation."
    ),
    FailureKind.provider_error: (
        "AI validation skipped: the AI provider returned an error. "
        "Your submission was saved without automated validation."
    ),
    FailureKind.transport_error: (
        "AI validation skipped: the AI provider could not be reached or timed out. "
        "Your submission was saved without automated validation."
    ),
}

PARSE_SUMMARY = (
    "AI validation could not be completed: the AI response could not be parsed. "
    "Your submission was saved without automated validation."
)


def strip_code_fence(raw: str) -> str:
    """
    Remove a single outer markdown code fence, if the text starts with one.

    Handles both ``` and ```json (any language tag on the opening line).
    Prose before the fence is left alone.
    """
    text = raw.strip()
    if not text.startswith("```"):
        return text

    # Drop the opening fence line including any language tag
    newline = text.find("\n")
    if newline == -1:
        text = text[3:]
        # Single-line form: ```json {...}```
        for tag in ("json", "JSON"):
            if text.startswith(tag):
                text = text[len(tag):]
                break
    else:
        text = text[newline + 1:]

    text = text.rstrip()
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_model_reply(raw: str) -> ValidationResult:
    """
    Parse a (possibly fenced) model reply into a ValidationResult.

    Raises:
        ParseFailure: reply is not JSON or does not have the expected shape
    """
    cleaned = strip_code_fence(raw or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Response is not valid JSON: {e.msg}", raw_response=raw or "") from e

    if not isinstance(data, dict):
        raise ParseFailure("Response JSON is not an object", raw_response=raw)

    try:
        return ModelReply.model_validate(data).to_result()
    except ValidationError as e:
        raise ParseFailure(
            f"Response JSON has the wrong shape ({e.error_count()} errors)", raw_response=raw
        ) from e


def fallback_result(error_code: str, summary: str) -> ValidationResult:
    """The uniform safe result used whenever normal parsing is impossible."""
    return ValidationResult(
        is_valid=True,
        matches={field: None for field in DECLARED_FIELDS},
        details={field: UNAVAILABLE_DETAIL for field in DECLARED_FIELDS},
        overall_summary=summary,
        error=error_code,
    )


def normalize_reply(raw: str) -> ValidationResult:
    """Raw reply text -> ValidationResult. Falls back on any parse problem."""
    try:
        return parse_model_reply(raw)
    except ParseFailure as e:
        logger.warning("AI response parsing error: %s", e)
        return fallback_result(PARSE_ERROR, PARSE_SUMMARY)


def normalize_failure(failure: ProviderFailure) -> ValidationResult:
    """Provider failure -> fallback ValidationResult specific to the failure kind."""
    kind = getattr(failure, "kind", FailureKind.provider_error)
    logger.warning("AI validation degraded (%s): %s", kind.value, failure)
    return fallback_result(kind.value, FAILURE_SUMMARIES[kind])


def normalize(raw: Optional[str] = None, failure: Optional[ProviderFailure] = None) -> ValidationResult:
    """
    Single entry point: pass either the raw reply or the failure the
    model client raised.
    """
    if failure is not None:
        return normalize_failure(failure)
    return normalize_reply(raw or "")
