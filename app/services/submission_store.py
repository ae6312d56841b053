"""
Submission Store - persistence for CV submissions.

A submission is written twice: create() stores the declared fields and
the evidence, attach_result() later adds the validation outcome. Declared
fields are never updated or deleted after create().

PostgresSubmissionStore is the production store. InMemorySubmissionStore
backs tests and local runs without a database.
"""

import json
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import StoreFailure
from app.db.postgres import get_db_session
from app.schemas.schemas import DeclaredFields, Evidence, SubmissionRecord, ValidationResult


class SubmissionStore(ABC):

    @abstractmethod
    def create(self, fields: DeclaredFields, evidence: Evidence) -> str:
        """Insert a new submission and return its id."""

    @abstractmethod
    def attach_result(self, submission_id: str, result: ValidationResult) -> None:
        """Attach the validation outcome and bump updatedAt."""

    @abstractmethod
    def get(self, submission_id: str) -> Optional[SubmissionRecord]:
        """Return the submission, or None if it does not exist."""

    @abstractmethod
    def list_recent(self) -> List[SubmissionRecord]:
        """All submissions, newest first."""


class PostgresSubmissionStore(SubmissionStore):
    """Raw-SQL store over the "CVSubmission" table."""

    COLUMNS = (
        'id, "fullName", email, phone, skills, experience, "pdfUrl", "pdfContent", '
        'validated, "validationResult", "createdAt", "updatedAt"'
    )

    def __init__(self, session_factory: sessionmaker = None):
        self.session_factory = session_factory

    @staticmethod
    def _to_record(row) -> SubmissionRecord:
        data = dict(row._mapping)
        if isinstance(data.get("validationResult"), str):
            data["validationResult"] = json.loads(data["validationResult"])
        return SubmissionRecord.model_validate(data)

    def create(self, fields: DeclaredFields, evidence: Evidence) -> str:
        try:
            with get_db_session(self.session_factory) as db:
                result = db.execute(
                    text("""
                        INSERT INTO "CVSubmission"
                            ("fullName", email, phone, skills, experience, "pdfUrl", "pdfContent")
                        VALUES (:full_name, :email, :phone, :skills, :experience, :pdf_url, :pdf_content)
                        RETURNING id
                    """),
                    {
                        "full_name": fields.full_name,
                        "email": fields.email,
                        "phone": fields.phone,
                        "skills": list(fields.skills),
                        "experience": fields.experience,
                        "pdf_url": evidence.pdf_url,
                        "pdf_content": evidence.pdf_content
                    }
                )
                submission_id = result.fetchone()[0]
        except SQLAlchemyError as e:
            raise StoreFailure(f"Could not create submission: {e}") from e
        return str(submission_id)

    def attach_result(self, submission_id: str, result: ValidationResult) -> None:
        try:
            with get_db_session(self.session_factory) as db:
                updated = db.execute(
                    text("""
                        UPDATE "CVSubmission"
                        SET validated = :validated,
                            "validationResult" = CAST(:result AS JSONB),
                            "updatedAt" = CURRENT_TIMESTAMP
                        WHERE id = :id
                    """),
                    {
                        "validated": result.is_valid,
                        "result": result.model_dump_json(by_alias=True),
                        "id": submission_id
                    }
                )
                if updated.rowcount == 0:
                    raise StoreFailure(f"Submission {submission_id} not found")
        except SQLAlchemyError as e:
            raise StoreFailure(f"Could not attach result to {submission_id}: {e}") from e

    def get(self, submission_id: str) -> Optional[SubmissionRecord]:
        try:
            with get_db_session(self.session_factory) as db:
                row = db.execute(
                    text(f'SELECT {self.COLUMNS} FROM "CVSubmission" WHERE id = :id'),
                    {"id": submission_id}
                ).fetchone()
        except SQLAlchemyError as e:
            raise StoreFailure(f"Could not read submission {submission_id}: {e}") from e
        return self._to_record(row) if row else None

    def list_recent(self) -> List[SubmissionRecord]:
        try:
            with get_db_session(self.session_factory) as db:
                rows = db.execute(
                    text(f'SELECT {self.COLUMNS} FROM "CVSubmission" ORDER BY "createdAt" DESC')
                ).fetchall()
        except SQLAlchemyError as e:
            raise StoreFailure(f"Could not list submissions: {e}") from e
        return [self._to_record(row) for row in rows]


class InMemorySubmissionStore(SubmissionStore):
    """Dict-backed store guarded by a lock."""

    def __init__(self):
        self._records: Dict[str, SubmissionRecord] = {}
        self._lock = threading.Lock()

    def create(self, fields: DeclaredFields, evidence: Evidence) -> str:
        now = datetime.now(timezone.utc)
        record = SubmissionRecord(
            id=str(uuid.uuid4()),
            full_name=fields.full_name,
            email=fields.email,
            phone=fields.phone,
            skills=list(fields.skills),
            experience=fields.experience,
            pdf_url=evidence.pdf_url,
            pdf_content=evidence.pdf_content,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._records[record.id] = record
        return record.id

    def attach_result(self, submission_id: str, result: ValidationResult) -> None:
        with self._lock:
            record = self._records.get(submission_id)
            if record is None:
                raise StoreFailure(f"Submission {submission_id} not found")
            self._records[submission_id] = record.model_copy(update={
                "validated": result.is_valid,
                "validation_result": result.model_copy(deep=True),
                "updated_at": datetime.now(timezone.utc),
            })

    def get(self, submission_id: str) -> Optional[SubmissionRecord]:
        with self._lock:
            record = self._records.get(submission_id)
        return record.model_copy(deep=True) if record else None

    def list_recent(self) -> List[SubmissionRecord]:
        with self._lock:
            # newest insert first so equal timestamps keep that order
            records = list(reversed(list(self._records.values())))
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [r.model_copy(deep=True) for r in records]

    def __len__(self) -> int:
        return len(self._records)
