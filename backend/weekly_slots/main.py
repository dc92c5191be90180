"""
FastAPI app entrypoint.

Weekly recurring slots with per-date exceptions. Routes under /api.
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from weekly_slots.api.routes import slots  # noqa: E402
from weekly_slots.config import settings  # noqa: E402
from weekly_slots.core.errors import STATUS_BAD_REQUEST, request_error_detail  # noqa: E402

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Weekly Slots", version="0.1.0")

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the deployed frontend
_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_cors_origins.extend(settings.cors_origin_list)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(slots.router, prefix="/api", tags=["slots"])


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body, query or path values: 400 {field, message} like service-level validation."""
    detail = request_error_detail(list(exc.errors()))
    logger.info("Request validation failed on %s: %s", request.url.path, detail)
    return JSONResponse(status_code=STATUS_BAD_REQUEST, content={"detail": detail})


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Weekly Slots API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
