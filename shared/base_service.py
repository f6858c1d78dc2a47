"""
Base service class for Field Management services.
"""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError
from contextlib import asynccontextmanager
from typing import Dict, Optional
import time
import os

from shared.config import ServiceConfig, get_config
from shared.logging import configure_logging, get_logger, set_request_id, clear_context
from shared.metrics import get_metrics_collector
from shared.errors import FieldManagementException, translate_exception


REQUEST_ID_HEADER = "X-Request-ID"


def error_response(exc: Exception) -> JSONResponse:
    """Build the uniform ``{"error": ...}`` response for an exception."""
    status_code, body = translate_exception(exc)
    return JSONResponse(status_code=status_code, content=body.model_dump())


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str, port: int, config: Optional[ServiceConfig] = None):
        self.service_name = service_name
        self.port = port
        self.config = config or get_config(service_name, port)
        self.logger = get_logger(f"{service_name}.service")
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.time()

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"Field Management - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url="/redoc" if self.config.env == "local" else None,
            lifespan=self._lifespan,
        )

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self._on_startup()
        self.logger.info("Service started", port=self.port, env=self.config.env)
        try:
            yield
        finally:
            await self._on_shutdown()
            self.logger.info("Service stopped")

    async def _on_startup(self):
        """Acquire external resources. Override in subclasses."""

    async def _on_shutdown(self):
        """Release external resources. Override in subclasses."""

    def _setup_service_middleware(self):
        """Register service-specific middleware. Override in subclasses.

        Runs before the common middleware is added, so anything registered
        here sits inside the request context and timing layer.
        """

    def _setup_middleware(self):
        """Set up middleware."""

        self._setup_service_middleware()

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if self.config.env == "local" else self.config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.app.middleware("http")
        async def add_request_context(request: Request, call_next):
            start_time = time.time()
            request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
            status_code = 500

            try:
                response = await call_next(request)
                status_code = response.status_code
                response.headers[REQUEST_ID_HEADER] = request_id
                return response
            finally:
                duration = time.time() - start_time
                route = request.scope.get("route")
                endpoint = getattr(route, "path", request.url.path)

                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=endpoint,
                    status_code=status_code,
                    duration=duration
                )

                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round(duration * 1000, 2)
                )
                clear_context()

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            try:
                dependencies = await self._check_dependencies()
                if any(status != "ok" for status in dependencies.values()):
                    raise RuntimeError("dependency check failed")

                self.metrics.record_health_check("ok")

                return {
                    "service": self.service_name,
                    "status": "ok",
                    "uptime_seconds": self._get_uptime(),
                    "dependencies": dependencies,
                    "version": "1.0.0",
                    "commit": os.getenv("GIT_COMMIT", "unknown")
                }
            except Exception as e:
                self.logger.error("Health check failed", error=str(e))
                self.metrics.record_health_check("error")
                return JSONResponse(
                    status_code=503,
                    content={
                        "service": self.service_name,
                        "status": "error",
                        "error": "Service unavailable."
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

        # Error handlers
        @self.app.exception_handler(FieldManagementException)
        async def domain_exception_handler(request: Request, exc: FieldManagementException):
            """Handle classified domain errors."""
            log = self.logger.error if exc.status_code >= 500 else self.logger.info
            log(
                "Request failed",
                code=exc.code,
                message=exc.message,
                details=exc.details,
                path=request.url.path
            )
            self.metrics.record_error(exc.code)
            return error_response(exc)

        @self.app.exception_handler(IntegrityError)
        async def integrity_exception_handler(request: Request, exc: IntegrityError):
            """Store-level constraint violations surface as conflicts."""
            self.logger.error("Database integrity error", error=str(exc.orig), path=request.url.path)
            self.metrics.record_error("CONFLICT")
            return error_response(exc)

        @self.app.exception_handler(RequestValidationError)
        async def request_validation_handler(request: Request, exc: RequestValidationError):
            self.metrics.record_error("INVALID_ARGUMENT")
            return error_response(exc)

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            return error_response(exc)

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=exc)
            self.metrics.record_error("INTERNAL_ERROR")
            return error_response(exc)

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
