"""FastAPI app factory: CORS, request logging, health endpoint + file API routes."""
from __future__ import annotations

import time
from collections.abc import Callable
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import router as api_router
from .api.models import Envelope
from .config import Config, load_config
from .domain.auth import compute_digest
from .logging_conf import get_logger, setup_logging

# Configure logging before anything else.
setup_logging()
logger = get_logger("app")

HEALTH_MESSAGE = "File Agent is running (token required for operations)"


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "invalid request: " + "; ".join(parts)


def create_app(config: Config | None = None, *, secret_digest: str | None = None) -> FastAPI:
    """Build the agent app.

    The token digest is computed here, once, and kept on `app.state`. Pass
    `secret_digest` directly to use a digest obtained from somewhere other
    than the config file.
    """
    if secret_digest is None:
        config = config or load_config()
        secret_digest = compute_digest(config.token)

    app = FastAPI(title="File Agent", version=__version__)
    app.state.secret_digest = secret_digest

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["content-type"],
    )

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info("startup", extra={"event": "startup"})

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("shutdown", extra={"event": "shutdown"})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies still get the 200 envelope, never a 422.
        envelope = Envelope[str].fail(_format_validation_error(exc))
        return JSONResponse(status_code=200, content=envelope.model_dump())

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """JSON request logging with correlation id.

        Only the path is logged: /api/list carries the token in its query string.
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/api/health", response_model=Envelope[str], summary="Liveness check (no token)")
    async def health() -> Envelope[str]:
        return Envelope[str].ok(HEALTH_MESSAGE)

    app.include_router(api_router)

    return app
