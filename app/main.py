"""
CV Validator - Main Application

FastAPI backend with:
- PostgreSQL for submissions and validation results
- OpenAI-compatible LLM for form-vs-CV validation
- PDF upload stored on disk and served from /uploads

Run: uvicorn app.main:app --reload
"""

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging_config import get_logger, setup_logging
from app.db.postgres import init_database
from app.utils.file_upload import UPLOAD_URL_PREFIX, ensure_upload_dir

settings = get_settings()
setup_logging(settings)
logger = get_logger(__name__)

UPLOADS_DIR = ensure_upload_dir(settings)
logger.info("Uploads directory: %s", UPLOADS_DIR)

# Create FastAPI app
app = FastAPI(
    title="CV Validator",
    description="""
    Checks form data against an uploaded PDF resume using AI.

    ## Flow
    1. **Upload**: POST the PDF to `/api/upload` (field `cv`, max 10MB)
    2. **Submit**: POST the form data plus the returned `path` to `/api/cv/submit`
    3. **Review**: list or fetch stored submissions under `/api/cv/submissions`

    AI validation is advisory: if the AI call fails, the submission is
    still accepted and the result explains why validation was skipped.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve uploaded files
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create database tables on startup."""
    if not settings.init_db_on_startup:
        return
    try:
        init_database()
    except Exception as e:
        logger.warning("Database initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection

    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uploadsDir": str(UPLOADS_DIR),
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "llm": {
            "model": settings.openai_model,
            "configured": bool(settings.openai_api_key)
        }
    }
