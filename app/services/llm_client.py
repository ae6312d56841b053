"""
LLM Client - one chat-completion round trip per prompt.

Talks to OpenAI or any OpenAI-compatible endpoint through the openai
library. This is the only module that knows what provider errors look
like: every SDK exception is translated into one of the ProviderFailure
kinds in app.core.exceptions before it leaves here.

The SDK's own retries are disabled; RetryingModelClient adds an optional
outer retry policy around the whole call.
"""

from typing import Optional, Protocol

import openai
from openai import OpenAI
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.core.config import Settings, get_settings
from app.core.exceptions import (
    ModelUnavailable,
    ProviderError,
    ProviderFailure,
    RateLimited,
    TransportError,
)
from app.core.logging_config import get_logger
from app.services.prompt_builder import SYSTEM_PROMPT

logger = get_logger(__name__)


class ModelClient(Protocol):
    model: str

    def complete(self, prompt: str) -> str:
        ...


def _mentions_model(error: openai.APIStatusError) -> bool:
    code = str(getattr(error, "code", "") or "").lower()
    if code in ("model_not_found", "invalid_model"):
        return True
    message = str(getattr(error, "message", "") or error).lower()
    return "model" in message and any(
        phrase in message for phrase in ("does not exist", "not found", "not supported", "invalid model")
    )


def classify_error(error: Exception) -> ProviderFailure:
    """Translate an openai SDK exception into a ProviderFailure."""
    if isinstance(error, ProviderFailure):
        return error
    if isinstance(error, openai.APIConnectionError):
        # APITimeoutError is a subclass
        return TransportError(f"No response from provider: {error}")
    if isinstance(error, openai.RateLimitError):
        return RateLimited(f"Provider rate limit or quota exceeded: {error}", status_code=429)
    if isinstance(error, openai.NotFoundError):
        return ModelUnavailable(f"Model not available: {error}", status_code=404)
    if isinstance(error, openai.BadRequestError) and _mentions_model(error):
        return ModelUnavailable(f"Model not supported: {error}", status_code=400)
    if isinstance(error, openai.APIStatusError):
        return ProviderError(f"Provider returned an error: {error}", status_code=error.status_code)
    return ProviderError(f"Provider call failed: {error}")


class OpenAIModelClient:
    """
    Wrapper for the chat completions API.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[OpenAI] = None):
        settings = settings or get_settings()
        self.client = client or OpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.llm_timeout_seconds,
            max_retries=0
        )
        self.model = settings.openai_model
        self.json_mode = settings.llm_json_mode

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: Optional[int] = None) -> str:
        """
        Internal method to call the provider.
        Returns raw text response.
        """
        kwargs = {}
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            temperature=0.1,  # Low temp for consistent structured output
            **kwargs
        )
        choices = getattr(response, "choices", None)
        if not choices:
            raise ProviderError("Provider returned no choices")
        message = getattr(choices[0], "message", None)
        if message is None:
            raise ProviderError("Provider returned a choice without a message")
        return message.content or ""

    def complete(self, prompt: str) -> str:
        """
        Send the validation prompt and return the raw reply text.

        Raises:
            ProviderFailure: one of RateLimited, ModelUnavailable,
                ProviderError, TransportError
        """
        try:
            return self._call_api(SYSTEM_PROMPT, prompt)
        except ProviderFailure as e:
            logger.warning("LLM call failed (%s): %s", e.kind.value, e)
            raise
        except openai.OpenAIError as e:
            failure = classify_error(e)
            logger.warning("LLM call failed (%s): %s", failure.kind.value, e)
            raise failure from e

    def test_connection(self) -> bool:
        """Test if the provider is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant. Reply in JSON.",
                'Reply with exactly: {"status": "OK"}',
                max_tokens=20
            )
            return "OK" in response.upper()
        except (openai.OpenAIError, ProviderFailure) as e:
            logger.error("LLM connection failed: %s", e)
            return False


class RetryingModelClient:
    """
    Retry wrapper around a ModelClient.

    Only RateLimited and TransportError are retried; the last failure is
    re-raised unchanged.
    """

    retryable = (RateLimited, TransportError)

    def __init__(self, inner: ModelClient, max_retries: int, wait_min: float = 1.0, wait_max: float = 10.0):
        self.inner = inner
        self.model = inner.model
        self.max_retries = max_retries
        self.wait_min = wait_min
        self.wait_max = wait_max

    def complete(self, prompt: str) -> str:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.wait_min, min=self.wait_min, max=self.wait_max),
            retry=retry_if_exception_type(self.retryable),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info("Retrying LLM call (attempt %d)", attempt.retry_state.attempt_number)
                return self.inner.complete(prompt)


# Singleton instance
_model_client: ModelClient = None


def get_model_client() -> ModelClient:
    """Get or create the configured model client (singleton pattern)"""
    global _model_client
    if _model_client is None:
        settings = get_settings()
        client = OpenAIModelClient(settings)
        if settings.llm_max_retries > 0:
            client = RetryingModelClient(client, settings.llm_max_retries)
        _model_client = client
    return _model_client
