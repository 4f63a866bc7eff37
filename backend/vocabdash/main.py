import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vocabdash.routers import auth, words, history, quiz, progress
from vocabdash.database import init_db
from vocabdash.config import get_settings
from vocabdash.errors import (
    VocabError,
    ValidationError,
    NotFoundError,
    NoCandidatesError,
    InvalidStateError,
    StoreError,
)

settings = get_settings()
logger = logging.getLogger(__name__)

# HTTP status for each domain error; checked in order
ERROR_STATUS_CODES = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (NoCandidatesError, 409),
    (InvalidStateError, 409),
    (StoreError, 503),
]


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    setup_logging()
    await init_db()
    yield


app = FastAPI(
    title="Vocabulary Dashboard API",
    description="Word lists, typed-answer quizzes and progress statistics",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS - configurable via ALLOWED_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(VocabError)
async def vocab_error_handler(request: Request, exc: VocabError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES if isinstance(exc, error_type)),
        400,
    )
    if isinstance(exc, InvalidStateError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# Include routers
app.include_router(auth.router)  # Auth router has its own /api/auth prefix
app.include_router(words.router, prefix="/api", tags=["words"])
app.include_router(history.router, prefix="/api", tags=["history"])
app.include_router(quiz.router, prefix="/api", tags=["quiz"])
app.include_router(progress.router, prefix="/api", tags=["progress"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
