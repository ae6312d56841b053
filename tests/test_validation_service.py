import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import (
    ExtractionFailed,
    ModelUnavailable,
    ProviderError,
    RateLimited,
    StoreFailure,
    TransportError,
)
from app.core.config import Settings
from app.schemas.schemas import DECLARED_FIELDS
from app.services.llm_client import OpenAIModelClient
from app.services.submission_store import InMemorySubmissionStore
from app.services.validation_service import CVValidationService
from conftest import JANE_REPLY, StubModelClient


class FailingStore(InMemorySubmissionStore):

    def create(self, fields, evidence):
        raise StoreFailure("database unavailable")


class TestSubmit:

    def test_matching_cv(self, store, stub_client, jane_request):
        service = CVValidationService(store, stub_client)

        response = service.submit(jane_request)

        assert response.success is True
        assert response.validation_result.is_valid is True
        assert response.validation_result.error is None
        assert response.validation_result.matches == JANE_REPLY["matches"]
        assert response.validation_result.details == JANE_REPLY["details"]
        assert response.validation_result.overall_summary == "All fields match."

        stored = store.get(response.submission.id)
        assert stored.validated is True
        assert stored.validation_result == response.validation_result
        assert "Jane Doe" in stored.pdf_content
        assert stored.pdf_url == jane_request.pdf_path
        assert stored.skills == ["Go", "SQL"]

    def test_prompt_carries_form_and_cv_text(self, store, stub_client, jane_request):
        CVValidationService(store, stub_client).submit(jane_request)

        [prompt] = stub_client.prompts
        for value in ("Jane Doe", "jane@x.com", "+15551234567", "Go, SQL", "5 years backend."):
            assert value in prompt
        assert "5 years backend experience" in prompt

    def test_rate_limited_provider(self, store, jane_request):
        service = CVValidationService(store, StubModelClient(failure=RateLimited("429 Too Many Requests")))

        response = service.submit(jane_request)

        result = response.validation_result
        assert result.is_valid is True
        assert result.error == "rate_limited"
        assert result.matches == {field: None for field in DECLARED_FIELDS}
        assert "quota" in result.overall_summary
        assert len(store) == 1
        assert store.get(response.submission.id).validated is True

    @pytest.mark.parametrize("failure,code", [
        (ModelUnavailable("unknown model"), "model_unavailable"),
        (ProviderError("502"), "provider_error"),
        (TransportError("timed out"), "transport_error"),
    ])
    def test_other_provider_failures_still_store(self, store, jane_request, failure, code):
        response = CVValidationService(store, StubModelClient(failure=failure)).submit(jane_request)

        assert response.success is True
        assert store.get(response.submission.id).validation_result.error == code

    def test_unparseable_reply_still_stores(self, store, jane_request):
        service = CVValidationService(store, StubModelClient(reply="Sure! Everything matches."))

        response = service.submit(jane_request)

        assert response.validation_result.error == "parse_error"
        assert store.get(response.submission.id).validated is True

    def test_fenced_reply(self, store, jane_request):
        reply = "```json\n" + json.dumps(JANE_REPLY) + "\n```"
        response = CVValidationService(store, StubModelClient(reply=reply)).submit(jane_request)
        assert response.validation_result.error is None

    def test_missing_pdf_aborts_before_any_write(self, store, stub_client, jane_request, tmp_path):
        missing = jane_request.model_copy(update={"pdf_path": str(tmp_path / "gone.pdf")})

        with pytest.raises(ExtractionFailed):
            CVValidationService(store, stub_client).submit(missing)

        assert len(store) == 0
        assert stub_client.prompts == []

    def test_store_failure_is_fatal(self, stub_client, jane_request):
        with pytest.raises(StoreFailure):
            CVValidationService(FailingStore(), stub_client).submit(jane_request)
        assert stub_client.prompts == []

    def test_extractor_is_injectable(self, store, stub_client, jane_request):
        service = CVValidationService(store, stub_client, extract_text=lambda path: "injected text")
        response = service.submit(jane_request)
        assert response.submission.pdf_content == "injected text"


def test_validate_never_raises(jane_request):
    service = CVValidationService(InMemorySubmissionStore(), StubModelClient(failure=TransportError("x")))
    result = service.validate(jane_request.declared_fields(), "cv text")
    assert result.error == "transport_error"


class BrokenModelClient:
    model = "broken-model"

    def complete(self, prompt):
        raise RuntimeError("unexpected client bug")


def test_reply_without_choices_still_stores(store, jane_request):
    fake = MagicMock()
    fake.chat.completions.create.return_value = SimpleNamespace(choices=[])
    model_client = OpenAIModelClient(Settings(openai_api_key="test-key"), client=fake)

    response = CVValidationService(store, model_client).submit(jane_request)

    assert response.success is True
    assert response.validation_result.error == "provider_error"
    assert response.validation_result.matches == {field: None for field in DECLARED_FIELDS}
    assert store.get(response.submission.id).validated is True


def test_unexpected_client_error_degrades(store, jane_request):
    response = CVValidationService(store, BrokenModelClient()).submit(jane_request)

    assert response.validation_result.error == "provider_error"
    assert len(store) == 1
    assert store.get(response.submission.id).validation_result.error == "provider_error"
