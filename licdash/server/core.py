"""
License dashboard server using FastAPI.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from licdash.common.config import Config
from licdash.common.exceptions import DashboardError
from licdash.common.logging_utils import setup_logger
from licdash.common.mixins import Configurable

from .credentials import CredentialVerifier
from .authenticator import TokenAuthenticator
from .pagination import PaginationResolver
from .persistence import DataPersistence
from .routes import DashboardRoutes
from .sample_data import sample_dataset
from .services import DashboardService
from .store import InMemoryLicenseStore
from .tokens import TokenIssuer

if TYPE_CHECKING:
    from licdash.common.interfaces import ILicenseStore

DEFAULT_ADMIN_PASSWORD = "supersecret"

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}

OVERRIDABLE_SETTINGS = [
    "token_algorithm",
    "token_ttl",
    "token_leeway",
    "set_cookie",
    "cookie_name",
    "cookie_secure",
    "cookie_samesite",
    "admin_username",
    "admin_password",
    "admin_password_hash",
    "admin_user_id",
    "admin_email",
    "admin_display_name",
    "default_page",
    "default_per_page",
    "max_per_page",
    "overshare_device_limit",
    "data_file_path",
    "revoked_licenses_file_path",
    "server_host",
    "server_port",
    "log_level",
]


class DashboardServer(Configurable):
    """Main dashboard server class wiring the gate, handlers and routes."""

    def __init__(
        self,
        config: Config | None = None,
        secret_key: bytes | str | None = None,
        store: ILicenseStore | None = None,
        **overrides: Any,
    ):
        self.config = config or Config()
        self.apply_overrides(overrides, self.config, OVERRIDABLE_SETTINGS)
        for attr in ("data_file_path", "revoked_licenses_file_path"):
            value = getattr(self, attr)
            if value is not None:
                setattr(self, attr, Path(value))

        self.logger = logging.getLogger(__name__)
        setup_logger(self.logger, self.log_level)

        if secret_key is None:
            secret_key = self.config.get_secret_key()
        self.secret_key = secret_key.encode() if isinstance(secret_key, str) else secret_key

        self.store = store if store is not None else self._build_store()
        self.verifier = self._build_verifier()
        self.issuer = TokenIssuer(
            self.secret_key, ttl=self.token_ttl, algorithm=self.token_algorithm
        )
        self.authenticator = TokenAuthenticator(
            self.secret_key,
            algorithm=self.token_algorithm,
            cookie_name=self.cookie_name,
            leeway=self.token_leeway,
        )
        self.pagination = PaginationResolver(
            default_page=self.default_page,
            default_per_page=self.default_per_page,
            max_per_page=self.max_per_page,
        )
        self.service = DashboardService(
            store=self.store,
            verifier=self.verifier,
            issuer=self.issuer,
            data_persistence=DataPersistence(),
            revoked_licenses_file_path=self.revoked_licenses_file_path,
            logger=self.logger,
        )

        self.app = FastAPI(title="License Dashboard API")
        self._setup_exception_handlers()
        self.routes = DashboardRoutes(
            service=self.service,
            authenticator=self.authenticator,
            pagination=self.pagination,
            token_ttl=self.token_ttl,
            set_cookie=self.set_cookie,
            cookie_secure=self.cookie_secure,
            cookie_samesite=self.cookie_samesite,
        )
        self.routes.setup_routes(self.app)

        self.logger.info(
            "Dashboard server configured for http://%s:%s",
            self.server_host,
            self.server_port,
        )

    def _build_store(self) -> InMemoryLicenseStore:
        if self.data_file_path:
            self.logger.info("Loading dataset from %s", self.data_file_path)
            dataset = DataPersistence.load_dataset(self.data_file_path)
        else:
            dataset = sample_dataset()
        return InMemoryLicenseStore(dataset, device_limit=self.overshare_device_limit)

    def _build_verifier(self) -> CredentialVerifier:
        identity = {
            "user_id": self.admin_user_id,
            "email": self.admin_email,
            "display_name": self.admin_display_name,
        }
        if self.admin_password_hash:
            return CredentialVerifier(
                self.admin_username, self.admin_password_hash, **identity
            )
        if self.admin_password == DEFAULT_ADMIN_PASSWORD:
            self.logger.warning(
                "Using the default operator password; set LICDASH_ADMIN_PASSWORD_HASH"
            )
        return CredentialVerifier.from_password(
            self.admin_username, self.admin_password, **identity
        )

    def _setup_exception_handlers(self) -> None:
        """Render every failure as the ``{"error", "code"}`` envelope."""

        @self.app.exception_handler(DashboardError)
        async def dashboard_error(request: Request, exc: DashboardError) -> JSONResponse:
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

        @self.app.exception_handler(RequestValidationError)
        async def validation_error(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            self.logger.debug("Rejected request to %s: %s", request.url.path, exc.errors())
            return JSONResponse(
                status_code=400, content={"error": "Bad request", "code": "BAD_REQUEST"}
            )

        @self.app.exception_handler(StarletteHTTPException)
        async def http_error(
            request: Request, exc: StarletteHTTPException
        ) -> JSONResponse:
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": str(exc.detail),
                    "code": HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
                },
                headers=getattr(exc, "headers", None),
            )

        @self.app.exception_handler(Exception)
        async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
            self.logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
            )


def create_app() -> FastAPI:
    """Application factory for ``uvicorn --factory licdash.server.core:create_app``."""
    return DashboardServer().app
