"""
Base service class for Galaxy gateway services.
"""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Dict, Optional
import time
import os

from shared.config import ServiceConfig, get_config
from shared.logging import configure_logging, get_logger, set_request_id, clear_context
from shared.metrics import get_metrics_collector
from shared.errors import ErrorResponse, GatewayError, GENERIC_INTERNAL


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic validation errors into one client-facing message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request"


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str, port: int, config: Optional[ServiceConfig] = None):
        self.service_name = service_name
        self.port = port
        self.config = config or get_config(service_name, port)
        self.logger = get_logger(service_name)
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.time()

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self.on_startup()
            try:
                yield
            finally:
                await self.on_shutdown()

        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"Galaxy - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url="/redoc" if self.config.env == "local" else None,
            lifespan=lifespan,
        )

    async def on_startup(self) -> None:
        """Hook for subclasses."""

    async def on_shutdown(self) -> None:
        """Hook for subclasses."""

    def _setup_middleware(self):
        """Set up middleware."""

        allow_origins = list(self.config.cors_allow_origins)
        if not allow_origins and self.config.env == "local":
            allow_origins = ["*"]
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def add_request_context(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            start_time = time.time()

            try:
                response = await call_next(request)
                duration = time.time() - start_time

                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=request.url.path,
                    status_code=response.status_code,
                    duration=duration
                )
                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration * 1000, 2)
                )

                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                clear_context()

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            dependencies = await self._check_dependencies()
            status = "ok" if all(value == "ok" for value in dependencies.values()) else "error"
            if status != "ok":
                self.logger.error("Health check failed", dependencies=dependencies)

            self.metrics.record_health_check(status)
            return JSONResponse(
                status_code=200 if status == "ok" else 503,
                content={
                    "service": self.service_name,
                    "status": status,
                    "uptime_seconds": self._get_uptime(),
                    "dependencies": dependencies,
                    "version": "1.0.0",
                    "commit": os.getenv("GIT_COMMIT", "unknown")
                }
            )

        @self.app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            from prometheus_client import CONTENT_TYPE_LATEST
            return Response(
                content=self.metrics.render(),
                media_type=CONTENT_TYPE_LATEST
            )

        @self.app.exception_handler(GatewayError)
        async def gateway_exception_handler(request: Request, exc: GatewayError):
            """Render a classified failure; details stay in the log."""
            log = self.logger.error if exc.status_code >= 500 else self.logger.warning
            log(
                "Request failed",
                kind=exc.kind.value,
                status_code=exc.status_code,
                message=exc.message,
                details=exc.details,
                path=request.url.path,
            )
            self.metrics.record_error(exc.kind.value)
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_response().model_dump()
            )

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            """Malformed JSON or URI parameters."""
            message = format_validation_errors(exc)
            self.logger.warning("Request validation failed", path=request.url.path, error=message)
            self.metrics.record_error("validation")
            return JSONResponse(
                status_code=400,
                content=ErrorResponse(error=message).model_dump()
            )

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            """Keep framework errors (404/405) in the gateway's error shape."""
            return JSONResponse(
                status_code=exc.status_code,
                content=ErrorResponse(error=str(exc.detail)).model_dump(),
                headers=getattr(exc, "headers", None),
            )

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            self.metrics.record_error("unhandled")
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(error=GENERIC_INTERNAL).model_dump()
            )

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check service dependencies. Override in subclasses."""
        return {}

    def _get_uptime(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
