"""FastAPI entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from apps.backend.config import get_settings
from apps.backend.middleware.trace_id import ensure_trace_id
from apps.backend.routers import health, notifications
from apps.backend.services.digest_errors import DigestAuthError
from apps.backend.services.digest_scheduler import DigestScheduler
from apps.backend.utils.api_errors import error_envelope

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = None
    if get_settings().digest_scheduler_enabled:
        scheduler = DigestScheduler()
        scheduler.start()
    app.state.digest_scheduler = scheduler
    yield
    if scheduler is not None:
        scheduler.stop()


app = FastAPI(
    title="SuiteC Digests",
    description="Daily and weekly activity digests for the Asset Library, Engagement Index and Whiteboards",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["System"])
app.include_router(notifications.router, prefix="/v1/courses", tags=["Notifications"])


@app.exception_handler(DigestAuthError)
async def digest_auth_exception_handler(request: Request, exc: DigestAuthError):
    trace_id = ensure_trace_id(request.scope)
    logger.error("digest_trigger_unauthorized trace_id=%s path=%s", trace_id, request.url.path)
    resp = JSONResponse(
        content=error_envelope(code="unauthorized", message=exc.detail, trace_id=trace_id),
        status_code=exc.code,
    )
    resp.headers["X-Trace-Id"] = trace_id
    return resp


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    trace_id = ensure_trace_id(request.scope)
    logger.exception("Unhandled exception trace_id=%s path=%s", trace_id, request.url.path)
    resp = JSONResponse(
        content=error_envelope(
            code="internal_error",
            message="Internal server error",
            trace_id=trace_id,
            detail=str(exc)[:200],
        ),
        status_code=500,
    )
    resp.headers["X-Trace-Id"] = trace_id
    return resp
