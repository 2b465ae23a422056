import uuid

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from .exceptions import (
    GenerationFailure,
    PersistenceFailure,
    ProfileIncomplete,
    ProgramGenerationError,
    ValidationFailure,
)
from .logging_config import configure_logging
from .routers.programs import router as programs_router

configure_logging()
logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES: dict[type[ProgramGenerationError], int] = {
    ProfileIncomplete: 422,
    GenerationFailure: 502,
    ValidationFailure: 502,
    PersistenceFailure: 503,
}


def create_service_app(*, title: str, version: str = "0.1.0") -> FastAPI:
    application = FastAPI(title=title, version=version)
    Instrumentator().instrument(application).expose(application, endpoint="/metrics", include_in_schema=False)
    application.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        generator=lambda: str(uuid.uuid4()),
        update_request_header=True,
    )
    return application


app = create_service_app(title="program-service", version="0.1.0")


def _error_body(exc: ProgramGenerationError) -> dict:
    body: dict = {"detail": str(exc), "error": exc.code}
    if isinstance(exc, ProfileIncomplete):
        body["missing_fields"] = exc.missing_fields
    elif isinstance(exc, ValidationFailure):
        body["violations"] = exc.violations
    return body


@app.exception_handler(ProgramGenerationError)
async def program_generation_error_handler(request: Request, exc: ProgramGenerationError):
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    logger.warning("program_request_failed", path=request.url.path, error=exc.code, status_code=status_code)
    return JSONResponse(status_code=status_code, content=_error_body(exc))


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(programs_router, prefix="/programs")
