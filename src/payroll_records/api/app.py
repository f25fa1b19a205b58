"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_records import __version__
from payroll_records.api.routes import (
    allowance_types_router,
    allowances_router,
    employees_router,
    health_router,
    payslips_router,
    reports_router,
)
from payroll_records.config import Settings, get_settings
from payroll_records.remote import HttpRemoteGateway, StubRemoteGateway
from payroll_records.services.session import PayrollSession

logger = logging.getLogger(__name__)


def build_session(settings: Settings) -> PayrollSession:
    """Create a session wired to the configured remote backend."""
    if settings.remote_backend == "stub":
        gateway = StubRemoteGateway()
    else:
        gateway = HttpRemoteGateway.from_settings(settings)
    return PayrollSession(gateway, settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    if getattr(app.state, "session", None) is None:
        app.state.session = build_session(get_settings())
    if not await app.state.session.load():
        logger.warning("Starting with partially loaded data: %s", app.state.session.error)
    yield
    # Shutdown
    await app.state.session.close()


def create_app(session: PayrollSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Records API",
        description="Payroll record keeping: employees, allowances, payslips and audit trail",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session = session

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    for router in (
        allowance_types_router,
        employees_router,
        payslips_router,
        allowances_router,
        reports_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app
