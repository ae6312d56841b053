"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import (
    BaseModel, ConfigDict, EmailStr, Field, StrictBool, StrictStr, field_validator, model_validator
)
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime


# The five declared fields, in prompt/report order (wire names)
DECLARED_FIELDS = ("fullName", "email", "phone", "skills", "experience")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# SUBMISSION SCHEMAS
# ============================================================

class DeclaredFields(CamelModel):
    """What the user typed into the form. Taken at face value."""
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    skills: List[str] = Field(..., min_length=1)
    experience: str = Field(..., min_length=1)

    @field_validator("full_name", "phone", "experience")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class CVSubmissionRequest(DeclaredFields):
    pdf_path: str = Field(..., min_length=1)

    def declared_fields(self) -> DeclaredFields:
        return DeclaredFields(**self.model_dump(exclude={"pdf_path"}))


class Evidence(BaseModel):
    pdf_url: str
    pdf_content: Optional[str] = None


# ============================================================
# VALIDATION RESULT SCHEMAS
# ============================================================

class ValidationResult(CamelModel):
    is_valid: Optional[bool] = None
    matches: Dict[str, Optional[bool]]
    details: Dict[str, str]
    overall_summary: str
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_shape(self) -> "ValidationResult":
        for name in ("matches", "details"):
            keys = set(getattr(self, name))
            if keys != set(DECLARED_FIELDS):
                raise ValueError(
                    f"{name} must have exactly the keys {', '.join(DECLARED_FIELDS)}"
                )
        if self.error is None and self.is_valid is None:
            raise ValueError("isValid is required when no error is reported")
        return self


class ModelReply(CamelModel):
    """
    Strict shape of a successful model reply.
    Booleans and strings are not coerced; extra per-field keys are dropped.
    """
    is_valid: StrictBool
    matches: Dict[str, StrictBool]
    details: Dict[str, StrictStr]
    overall_summary: StrictStr

    @model_validator(mode="after")
    def keep_declared_fields(self) -> "ModelReply":
        for name in ("matches", "details"):
            values = getattr(self, name)
            missing = [f for f in DECLARED_FIELDS if f not in values]
            if missing:
                raise ValueError(f"{name} is missing {', '.join(missing)}")
            setattr(self, name, {f: values[f] for f in DECLARED_FIELDS})
        return self

    def to_result(self) -> ValidationResult:
        return ValidationResult(
            is_valid=self.is_valid,
            matches=dict(self.matches),
            details=dict(self.details),
            overall_summary=self.overall_summary,
        )


# ============================================================
# RECORD / RESPONSE SCHEMAS
# ============================================================

class SubmissionRecord(CamelModel):
    id: str
    full_name: str
    email: str
    phone: str
    skills: List[str]
    experience: str
    pdf_url: str
    pdf_content: Optional[str] = None
    validated: Optional[bool] = None
    validation_result: Optional[ValidationResult] = None
    created_at: datetime
    updated_at: datetime


class SubmitCVResponse(CamelModel):
    success: bool
    submission: SubmissionRecord
    validation_result: ValidationResult


class UploadResponse(BaseModel):
    filename: str
    path: str
    url: str
    size: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class ErrorResponse(BaseModel):
    detail: str
