"""kitforge FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kitforge import __version__
from kitforge.config import Config
from kitforge.errors import ConfigurationError, KitforgeError
from kitforge.registry import RegistryClient, RegistryProxy
from kitforge.scaffolder import InterruptRegistry, ScaffoldGenerator
from kitforge.utils import setup_logging

from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up logging on startup; interrupt in-flight runs on shutdown."""
    config: Config = app.state.config
    setup_logging(config.log_level)
    config.ensure_directories()
    logger.info("kitforge %s ready (work dir %s)", __version__, config.work_dir)

    yield

    count = app.state.interrupts.interrupt_all()
    if count:
        logger.info("Interrupted %d in-flight runs", count)
    logger.info("kitforge shutdown complete")


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


async def kitforge_error_handler(request: Request, exc: KitforgeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        where = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{where or 'request'}: {error.get('msg', 'invalid value')}")
    error = ConfigurationError("Invalid request: " + "; ".join(problems))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": type(exc).__name__},
    )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_app(
    config: Config | None = None,
    registry_client: RegistryClient | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        config: Settings; read from the environment when omitted.
        registry_client: Upstream client override (tests pass one backed by
            ``httpx.MockTransport``).
    """
    config = config or Config.from_env()

    app = FastAPI(
        title="kitforge",
        version=__version__,
        description="React project scaffolding and a cached npm registry proxy.",
        lifespan=lifespan,
        debug=config.debug,
    )

    interrupts = InterruptRegistry()
    app.state.config = config
    app.state.interrupts = interrupts
    app.state.generator = ScaffoldGenerator(config, interrupts=interrupts)
    app.state.proxy = RegistryProxy.from_config(config, client=registry_client)

    app.add_exception_handler(KitforgeError, kitforge_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    return app
