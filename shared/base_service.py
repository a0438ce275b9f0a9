"""
FastAPI scaffold shared by native auth services.

Subclasses add their routes after ``super().__init__`` and may override
``_on_startup``, ``_on_shutdown`` and ``_check_dependencies``.
"""

import os
import time
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from shared.config import get_config
from shared.errors import AuthenticationError, ServiceException
from shared.logging import clear_context, configure_logging, get_logger, set_request_id
from shared.metrics import get_metrics_collector

REQUEST_ID_HEADER = "x-request-id"
SERVICE_VERSION = "1.0.0"


class BaseService:
    """Configuration, logging, metrics and the common endpoints of a service."""

    def __init__(self, service_name: str, port: int, **config_overrides: Any):
        self.service_name = service_name
        self.port = port
        self.config = get_config(service_name, port, **config_overrides)

        configure_logging(service_name, self.config.log_level, json_output=self.config.env != "local")
        self.logger = get_logger(service_name)
        self.metrics = get_metrics_collector(service_name)
        self._start_time = time.time()

        self.app = FastAPI(
            title=f"{service_name.replace('_', ' ').title()} Service",
            version=SERVICE_VERSION,
            lifespan=self._lifespan,
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url=None,
        )
        self._setup_middleware()
        self._setup_routes()
        self._setup_exception_handlers()

    def _setup_middleware(self):
        cors_origins = self.config.cors_origins
        if cors_origins is None:
            cors_origins = ["*"] if self.config.env == "local" else []

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        )

        @self.app.middleware("http")
        async def request_context(request: Request, call_next):
            start_time = time.time()
            request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))

            try:
                response = await call_next(request)
            finally:
                clear_context()

            duration = time.time() - start_time
            self.metrics.record_http_request(request.method, request.url.path, response.status_code, duration)
            self.logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
                request_id=request_id
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response

    def _setup_routes(self):

        @self.app.get("/health")
        async def health_check():
            """Liveness plus a probe of each dependency; "degraded" when one fails."""
            try:
                dependencies = await self._check_dependencies()
            except Exception as e:
                self.logger.error("Health check failed", error=str(e))
                self.metrics.record_health_check("error")
                return JSONResponse(
                    status_code=503,
                    content={"service": self.service_name, "status": "error", "error": str(e)}
                )

            status = "ok" if all(state == "ok" for state in dependencies.values()) else "degraded"
            self.metrics.record_health_check(status)

            return {
                "service": self.service_name,
                "status": status,
                "uptime_seconds": time.time() - self._start_time,
                "dependencies": dependencies,
                "version": SERVICE_VERSION,
                "commit": os.getenv("GIT_COMMIT", "unknown")
            }

        @self.app.get("/metrics")
        async def metrics_endpoint():
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    def _setup_exception_handlers(self):

        @self.app.exception_handler(ServiceException)
        async def service_exception_handler(request: Request, exc: ServiceException):
            self.logger.warning("Service error", code=exc.code, message=exc.message, details=exc.details)

            headers = {}
            if isinstance(exc, AuthenticationError):
                headers["WWW-Authenticate"] = f'Bearer error="invalid_token", error_description="{exc.code}"'

            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_response().model_dump(),
                headers=headers
            )

        @self.app.exception_handler(Exception)
        async def unhandled_exception_handler(request: Request, exc: Exception):
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"code": "INTERNAL_ERROR", "message": "Internal server error", "details": {}}
            )

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self._on_startup()
        try:
            yield
        finally:
            await self._on_shutdown()

    async def _on_startup(self):
        """Open connections. Override in subclasses."""

    async def _on_shutdown(self):
        """Release connections. Override in subclasses."""

    async def _check_dependencies(self) -> Dict[str, str]:
        """Map each dependency name to "ok" or "error". Override in subclasses."""
        return {}

    def run(self):
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
