import uuid

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from .exceptions import NotFoundException, UpstreamUnavailableException
from .logging_config import configure_logging
from .routers.recovery import router as recovery_router

configure_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="recovery-service",
    version="0.1.0",
    description="Per-body-part recovery and readiness for training sessions",
)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
app.add_middleware(
    CorrelationIdMiddleware,
    header_name="X-Request-ID",
    generator=lambda: str(uuid.uuid4()),
    update_request_header=True,
)


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request, exc: NotFoundException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(UpstreamUnavailableException)
async def upstream_unavailable_exception_handler(request, exc: UpstreamUnavailableException):
    logger.warning("upstream_unavailable", source=exc.source, path=request.url.path)
    content = {"detail": exc.detail, "source": exc.source}
    if exc.recorded_ids is not None:
        content["recorded_ids"] = exc.recorded_ids
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(recovery_router)
