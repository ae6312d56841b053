"""
Upload Routes

POST /upload - Upload a CV PDF (multipart field "cv", max 10MB)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File

from app.api.deps import get_app_settings
from app.core.config import Settings
from app.schemas.schemas import UploadResponse
from app.utils.file_upload import save_pdf_upload

router = APIRouter(tags=["Upload"])

UPLOAD_FIELD = "cv"


@router.post("/upload", response_model=UploadResponse)
async def upload_cv(
    cv: Optional[UploadFile] = File(None, description="CV file (PDF only)"),
    settings: Settings = Depends(get_app_settings)
):
    """
    Store an uploaded CV PDF.

    Returns the absolute path (pass it as pdfPath to /cv/submit) and the
    public URL under /uploads.
    """
    if cv is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    return await save_pdf_upload(cv, UPLOAD_FIELD, settings)
