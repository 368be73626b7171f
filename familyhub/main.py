"""FamilyHub Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from familyhub.config import settings
from familyhub.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    logger.info("%s started, database at %s", settings.server_name, settings.db_path)
    yield


app = FastAPI(
    title="FamilyHub",
    description="Household chores and points tracker",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error envelope: {"error": "..."} ---

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid input"
    return JSONResponse(status_code=422, content={"error": message})


# --- Register API routers ---
from familyhub.api.setup import router as setup_router  # noqa: E402
from familyhub.api.auth import router as auth_router  # noqa: E402
from familyhub.api.members import router as members_router  # noqa: E402
from familyhub.api.categories import router as categories_router  # noqa: E402
from familyhub.api.completions import router as completions_router  # noqa: E402
from familyhub.api.chores import router as chores_router  # noqa: E402
from familyhub.api.points import router as points_router  # noqa: E402
from familyhub.api.activity import router as activity_router  # noqa: E402
from familyhub.api.settings import router as settings_router  # noqa: E402

API_PREFIX = "/api/v1"

app.include_router(setup_router, prefix=API_PREFIX)
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(members_router, prefix=API_PREFIX)
app.include_router(categories_router, prefix=API_PREFIX)
app.include_router(completions_router, prefix=API_PREFIX)
app.include_router(chores_router, prefix=API_PREFIX)
app.include_router(points_router, prefix=API_PREFIX)
app.include_router(activity_router, prefix=API_PREFIX)
app.include_router(settings_router, prefix=API_PREFIX)


@app.get("/")
def root():
    """Server info."""
    return {
        "name": settings.server_name,
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/v1/health")
def health():
    return {"status": "ok"}
