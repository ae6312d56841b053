"""
CV Validation Service - runs one submission through the pipeline.

Process:
1. Read the uploaded PDF and extract its text
2. Store the submission (declared fields + evidence)
3. Ask the model whether the form matches the CV
4. Normalize the reply into a ValidationResult
5. Attach the result to the stored submission

Only steps 1 and 2 (and the final write) can fail the submission.
Anything that goes wrong on the AI side degrades to a fallback result.
"""

from typing import Callable

from app.core.exceptions import ProviderError, ProviderFailure
from app.core.logging_config import get_logger
from app.schemas.schemas import (
    CVSubmissionRequest, DeclaredFields, Evidence, SubmitCVResponse, ValidationResult
)
from app.services.llm_client import ModelClient
from app.services.prompt_builder import build_validation_prompt
from app.services.response_normalizer import normalize
from app.services.submission_store import SubmissionStore
from app.services.text_extractor import extract_text_from_path

logger = get_logger(__name__)


class CVValidationService:

    def __init__(
        self,
        store: SubmissionStore,
        model_client: ModelClient,
        extract_text: Callable[[str], str] = extract_text_from_path
    ):
        self.store = store
        self.model_client = model_client
        self.extract_text = extract_text

    def validate(self, fields: DeclaredFields, cv_text: str) -> ValidationResult:
        """Compare declared fields with the CV text. Never raises."""
        prompt = build_validation_prompt(fields, cv_text)
        try:
            raw = self.model_client.complete(prompt)
        except ProviderFailure as e:
            return normalize(failure=e)
        except Exception as e:
            logger.exception("Unexpected error from model client")
            return normalize(failure=ProviderError(f"Unexpected model client error: {e}"))
        return normalize(raw=raw)

    def submit(self, request: CVSubmissionRequest) -> SubmitCVResponse:
        """
        Run the full pipeline for one submission.

        Raises:
            ExtractionFailed: the PDF could not be read (nothing is stored)
            StoreFailure: the store could not be written
        """
        logger.info("CV submission received for %s, pdf at %s", request.email, request.pdf_path)

        cv_text = self.extract_text(request.pdf_path)
        fields = request.declared_fields()

        submission_id = self.store.create(
            fields, Evidence(pdf_url=request.pdf_path, pdf_content=cv_text)
        )
        logger.info("CV submission created with ID: %s", submission_id)

        logger.info("Starting AI validation with model %s", self.model_client.model)
        result = self.validate(fields, cv_text)
        logger.info(
            "AI validation completed: isValid=%s error=%s", result.is_valid, result.error
        )

        self.store.attach_result(submission_id, result)
        submission = self.store.get(submission_id)

        return SubmitCVResponse(
            success=True,
            submission=submission,
            validation_result=result
        )
