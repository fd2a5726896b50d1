# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from db import get_db_service
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .routes import applications, health, webhooks
from .schemas.error import ErrorResponse
from .services.codat import CodatClientError
from .services.errors import ApplicationOrchestratorError, ErrorKind
from .services.orchestrator import init_orchestrator, shutdown_orchestrator
from .services.store import ApplicationStore, ApplicationStoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    logging.getLogger("src").setLevel(settings.LOG_LEVEL)
    db_service = get_db_service()
    await db_service.init_db()
    init_orchestrator(settings, ApplicationStore(db_service.session_factory))
    yield
    await shutdown_orchestrator()
    await db_service.dispose()


app = FastAPI(
    title="Underwriting Demo API",
    description="Loan application data collection and automated underwriting backed by Codat",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
}

_ERROR_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PRECONDITION: 409,
}


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def _build_error(
    status_code: int, detail: str, request_id: str, kind: str | None = None
) -> ErrorResponse:
    return ErrorResponse(
        type="about:blank",
        title=_HTTP_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        kind=kind,
        request_id=request_id,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to RFC 7807 Problem Details."""
    body = _build_error(exc.status_code, str(exc.detail), _request_id(request))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert Pydantic validation errors to RFC 7807 Problem Details."""
    body = _build_error(422, str(exc.errors()), _request_id(request))
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(ApplicationOrchestratorError)
async def orchestrator_exception_handler(request: Request, exc: ApplicationOrchestratorError):
    """Map orchestrator error kinds to HTTP status codes."""
    status_code = _ERROR_KIND_STATUS[exc.kind]
    body = _build_error(status_code, exc.message, _request_id(request), kind=exc.kind.value)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ApplicationStoreError)
async def store_exception_handler(request: Request, exc: ApplicationStoreError):
    body = _build_error(404, str(exc), _request_id(request), kind=ErrorKind.NOT_FOUND.value)
    return JSONResponse(status_code=404, content=body.model_dump())


@app.exception_handler(CodatClientError)
async def codat_exception_handler(request: Request, exc: CodatClientError):
    """Upstream Codat failures surface as 502 Bad Gateway."""
    request_id = _request_id(request)
    logger.error("Codat error (request_id=%s): %s", request_id, exc)
    body = _build_error(502, "The accounting data provider request failed.", request_id)
    return JSONResponse(status_code=502, content=body.model_dump())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    body = _build_error(500, "An unexpected error occurred.", request_id)
    return JSONResponse(status_code=500, content=body.model_dump())


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(applications.router, prefix="/applications", tags=["applications"])
app.include_router(webhooks.router, prefix="/webhooks/codat", tags=["webhooks"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": f"Welcome to {settings.APP_NAME}"}
