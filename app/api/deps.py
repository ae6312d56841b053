"""
FastAPI dependencies.

Routes never build the store or the model client themselves; tests swap
them through app.dependency_overrides.
"""

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.db.postgres import get_session_factory
from app.services.llm_client import ModelClient, get_model_client
from app.services.submission_store import PostgresSubmissionStore, SubmissionStore
from app.services.validation_service import CVValidationService


def get_submission_store() -> SubmissionStore:
    return PostgresSubmissionStore(get_session_factory())


def get_llm() -> ModelClient:
    return get_model_client()


def get_validation_service(
    store: SubmissionStore = Depends(get_submission_store),
    model_client: ModelClient = Depends(get_llm),
) -> CVValidationService:
    return CVValidationService(store, model_client)


def get_app_settings() -> Settings:
    return get_settings()
