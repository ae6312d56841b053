# tests/conftest.py
import os
import tempfile

# Must be set before app settings are first loaded
os.environ.setdefault("INIT_DB_ON_STARTUP", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="cv-validator-uploads-"))
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import json

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import ProviderFailure
from app.schemas.schemas import CVSubmissionRequest
from app.services.submission_store import InMemorySubmissionStore


def make_pdf(*lines: str) -> bytes:
    """Build a one-page PDF whose text layer holds the given lines."""
    ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"({escaped}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_pos = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_pos
    return bytes(out)


JANE_CV_LINES = (
    "Jane Doe",
    "jane@x.com | +15551234567",
    "Skills: Go, SQL",
    "5 years backend experience",
)

JANE_REPLY = {
    "isValid": True,
    "matches": {
        "fullName": True,
        "email": True,
        "phone": True,
        "skills": True,
        "experience": True,
    },
    "details": {
        "fullName": "Name appears at the top of the CV.",
        "email": "Email matches the contact line.",
        "phone": "Phone matches the contact line.",
        "skills": "Go and SQL are both listed.",
        "experience": "CV states 5 years of backend experience.",
    },
    "overallSummary": "All fields match.",
}


class StubModelClient:
    """Model client that returns a canned reply or raises a canned failure."""

    model = "stub-model"

    def __init__(self, reply: str = None, failure: ProviderFailure = None):
        self.reply = reply
        self.failure = failure
        self.prompts = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.failure is not None:
            raise self.failure
        return self.reply


@pytest.fixture
def jane_pdf(tmp_path):
    path = tmp_path / "jane.pdf"
    path.write_bytes(make_pdf(*JANE_CV_LINES))
    return path


@pytest.fixture
def jane_request(jane_pdf):
    return CVSubmissionRequest(
        full_name="Jane Doe",
        email="jane@x.com",
        phone="+15551234567",
        skills=["Go", "SQL"],
        experience="5 years backend.",
        pdf_path=str(jane_pdf),
    )


@pytest.fixture
def store():
    return InMemorySubmissionStore()


@pytest.fixture
def stub_client():
    return StubModelClient(reply=json.dumps(JANE_REPLY))


@pytest.fixture
def client(store, stub_client, tmp_path):
    """API client wired to the in-memory store and the stub model."""
    from app.main import app
    from app.api.deps import get_app_settings, get_llm, get_submission_store
    from app.core.config import Settings

    app.dependency_overrides[get_submission_store] = lambda: store
    app.dependency_overrides[get_llm] = lambda: stub_client
    app.dependency_overrides[get_app_settings] = lambda: Settings(
        upload_dir=str(tmp_path / "uploads"), max_upload_size_mb=1
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
