"""
CV Routes

POST /cv/submit - Validate a CV submission against its uploaded PDF
GET /cv/submissions - All submissions, newest first
GET /cv/submissions/{submission_id} - One submission
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from app.api.deps import get_submission_store, get_validation_service
from app.core.exceptions import ExtractionFailed, StoreFailure
from app.core.logging_config import get_logger
from app.schemas.schemas import CVSubmissionRequest, SubmissionRecord, SubmitCVResponse
from app.services.submission_store import SubmissionStore
from app.services.validation_service import CVValidationService

router = APIRouter(prefix="/cv", tags=["CV"])

logger = get_logger(__name__)


@router.post("/submit", response_model=SubmitCVResponse)
def submit_cv(
    data: CVSubmissionRequest,
    service: CVValidationService = Depends(get_validation_service)
):
    """
    Submit form data for a previously uploaded PDF.

    Process:
    1. Extract text from the PDF at pdfPath
    2. Store the submission
    3. AI compares the form data with the CV text
    4. Store and return the validation result

    AI problems never fail the request; the result carries an error code
    and an explanatory overallSummary instead.
    """
    try:
        return service.submit(data)
    except ExtractionFailed as e:
        logger.error("Error processing CV submission: %s", e)
        raise HTTPException(status_code=400, detail=f"Failed to process CV submission: {e}")
    except StoreFailure as e:
        logger.error("Error processing CV submission: %s", e)
        raise HTTPException(
            status_code=500,
            detail="Failed to process CV submission: could not save it, please try again"
        )


@router.get("/submissions", response_model=List[SubmissionRecord])
def list_submissions(store: SubmissionStore = Depends(get_submission_store)):
    """All submissions ordered by creation time, newest first."""
    try:
        return store.list_recent()
    except StoreFailure as e:
        logger.error("Error listing submissions: %s", e)
        raise HTTPException(status_code=500, detail="Could not load submissions")


@router.get("/submissions/{submission_id}", response_model=SubmissionRecord)
def get_submission(submission_id: str, store: SubmissionStore = Depends(get_submission_store)):
    """Get one submission by id."""
    try:
        record = store.get(submission_id)
    except StoreFailure as e:
        logger.error("Error loading submission %s: %s", submission_id, e)
        raise HTTPException(status_code=500, detail="Could not load submission")
    if record is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return record
