import logging
import sys

import sentry_sdk
import structlog
from asgi_correlation_id.context import correlation_id
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog.contextvars import merge_contextvars

from .config import Settings, get_settings

DEV_ENVS = {"local", "dev", "test"}


def service_fields(settings: Settings):
    """Processor stamping every event with the service name and environment."""

    def add_service_and_env(logger, method_name, event_dict):
        event_dict.setdefault("service", settings.SERVICE_NAME)
        event_dict.setdefault("env", settings.APP_ENV)
        return event_dict

    return add_service_and_env


def add_correlation_id(logger, method_name, event_dict):
    # request id from CorrelationIdMiddleware, mirrored onto the Sentry scope
    cid = correlation_id.get(None)
    if cid is None:
        return event_dict
    event_dict["correlation_id"] = cid
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_tag("correlation_id", cid)
    return event_dict


def bind_request_user(user_id: str) -> None:
    """Attach the caller to every log line emitted for the current request."""
    structlog.contextvars.bind_contextvars(user_id=user_id)


def _init_sentry(settings: Settings) -> None:
    if not settings.SENTRY_DSN:
        return
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.APP_ENV,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", settings.SERVICE_NAME)


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    log_level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    _init_sentry(settings)

    if settings.APP_ENV in DEV_ENVS:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    structlog.configure(
        processors=[
            merge_contextvars,
            service_fields(settings),
            add_correlation_id,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
