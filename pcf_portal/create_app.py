"""
FastAPI application factory following kkb_fastapi pattern.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pcf_portal.api import (
    audit_router,
    bom_router,
    companies_router,
    production_energy_router,
    products_router,
    references_router,
    service_router,
    sharing_requests_router,
    transport_router,
    user_energy_router,
)
from pcf_portal.clients.backend_client import BackendClient
from pcf_portal.clients.exceptions import BackendAuthError, BackendError
from pcf_portal.core.config import get_config
from pcf_portal.core.security import SessionExpiredError
from pcf_portal.pydantic_models.errors import ApiErrorResponse, ErrorDetail
from pcf_portal.services.calculators.emission_resolver import EmissionResolutionError
from pcf_portal.services.forms.validators import FormValidationError
from pcf_portal.services.sharing.pending_writes import PendingWriteStore
from pcf_portal.services.sharing.sharing_gate import (
    InvalidSharingTransition,
    LineItemNotFoundError,
    SharingRequestError,
)
from pcf_portal.utils.constants import LOGIN_REDIRECT

logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def register_routers(app: FastAPI):
    """Register all API routers."""
    app.include_router(service_router)
    app.include_router(companies_router)
    app.include_router(products_router)
    app.include_router(bom_router)
    app.include_router(transport_router)
    app.include_router(production_energy_router)
    app.include_router(user_energy_router)
    app.include_router(references_router)
    app.include_router(sharing_requests_router)
    app.include_router(audit_router)


def upstream_status(status_code: int) -> int:
    """Status to answer with for a backend error: 502 when the backend itself failed."""
    if status_code == 0 or status_code >= 500:
        return status.HTTP_502_BAD_GATEWAY
    return status_code


def logout_response(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": detail, "action": "logout", "redirect": LOGIN_REDIRECT},
    )


def register_exception_handlers(app: FastAPI):
    """Map domain and backend errors to HTTP responses."""

    @app.exception_handler(SessionExpiredError)
    async def session_expired_handler(request: Request, exc: SessionExpiredError):
        logging.info(f"Session rejected: {exc.message}")
        return logout_response(exc.message)

    @app.exception_handler(BackendAuthError)
    async def backend_auth_handler(request: Request, exc: BackendAuthError):
        logging.warning(f"Backend rejected credentials: {exc.message}")
        return logout_response(exc.message)

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError):
        logging.error(f"BackendError occurred: {exc}")
        body = ApiErrorResponse(detail=exc.message, errors=exc.errors)
        return JSONResponse(
            status_code=upstream_status(exc.status_code), content=body.model_dump()
        )

    @app.exception_handler(FormValidationError)
    async def form_validation_handler(request: Request, exc: FormValidationError):
        body = ApiErrorResponse(
            detail=exc.errors[0],
            errors=[ErrorDetail(code="invalid", detail=message) for message in exc.errors],
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body.model_dump()
        )

    @app.exception_handler(InvalidSharingTransition)
    async def sharing_transition_handler(request: Request, exc: InvalidSharingTransition):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(LineItemNotFoundError)
    async def line_item_not_found_handler(request: Request, exc: LineItemNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(SharingRequestError)
    async def sharing_request_handler(request: Request, exc: SharingRequestError):
        cause = exc.__cause__
        status_code = (
            upstream_status(cause.status_code)
            if isinstance(cause, BackendError)
            else status.HTTP_502_BAD_GATEWAY
        )
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.exception_handler(EmissionResolutionError)
    async def resolution_error_handler(request: Request, exc: EmissionResolutionError):
        logging.error(f"EmissionResolutionError occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions."""
        logging.error(f"HTTPException occurred: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code, content={"detail": str(exc.detail)}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": jsonable_encoder(exc.errors()),
                "message": "Validation error",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logging.error(f"Exception occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Opens the shared backend client and closes it on shutdown.
    """
    logging.info("Application startup")
    if getattr(app.state, "backend_client", None) is None:
        app.state.backend_client = BackendClient.from_config(app.state.config)
        logging.info(f"Initialized backend client for {app.state.backend_client.base_url}")

    try:
        yield
    finally:
        await app.state.backend_client.aclose()
        logging.info("Application shutdown")


def get_app(config_file: str) -> FastAPI:
    """
    Application factory function.

    Args:
        config_file: Configuration file name (e.g., "production.toml")

    Returns:
        Configured FastAPI application instance
    """
    config = get_config(config_file)
    api_config = config.section("api")

    app = FastAPI(
        title=api_config.get("title", "Product Carbon Footprint Portal API"),
        description=api_config.get(
            "description", "Resolved emissions for the supply-chain backend"
        ),
        version=api_config.get("version", "1.0.0"),
        debug=api_config.get("debug", False),
        lifespan=lifespan,
        # Generate better OpenAPI schema for enums
        generate_unique_id_function=lambda route: (
            f"{route.tags[0]}-{route.name}" if route.tags else route.name
        ),
    )

    app.state.config = config
    app.state.backend_client = None
    app.state.pending_writes = PendingWriteStore.from_config(config)

    register_routers(app)
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.section("cors").get("origins", ["http://localhost:3000"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
