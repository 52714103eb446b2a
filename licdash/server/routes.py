"""
Routes for the dashboard server.
"""

from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, Response

from licdash.common.models import (
    Credentials,
    DashboardSnapshot,
    DeletionResult,
    ErrorResponse,
    LicenseRecord,
    LoginResponse,
    OversharedLicense,
    PublicationPage,
    RevocationResult,
    SessionInfo,
    UsageEvent,
)

from .authenticator import TokenAuthenticator
from .pagination import PaginationResolver
from .services import DashboardService

SAMESITE_VALUES = ("lax", "strict", "none")


class DashboardRoutes:
    """Handles FastAPI routes for the dashboard server."""

    def __init__(
        self,
        service: DashboardService,
        authenticator: TokenAuthenticator,
        pagination: PaginationResolver,
        token_ttl: int,
        set_cookie: bool = True,
        cookie_secure: bool = False,
        cookie_samesite: str = "strict",
    ):
        self.service = service
        self.authenticator = authenticator
        self.pagination = pagination
        self.token_ttl = token_ttl
        self.set_cookie = set_cookie
        self.cookie_secure = cookie_secure
        samesite = cookie_samesite.lower()
        self.cookie_samesite = samesite if samesite in SAMESITE_VALUES else "strict"

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""

        app.get("/health")(self.health)
        app.post(
            "/login",
            response_model=LoginResponse,
            responses={401: {"model": ErrorResponse}},
        )(self.login)
        app.post("/logout")(self.logout)

        protected = APIRouter(
            dependencies=[Depends(self.authenticator)],
            responses={
                400: {"model": ErrorResponse},
                401: {"model": ErrorResponse},
            },
        )
        protected.add_api_route(
            "/me", self.me, methods=["GET"], response_model=SessionInfo
        )
        protected.add_api_route(
            "/dashboard/data",
            self.dashboard_data,
            methods=["GET"],
            response_model=DashboardSnapshot,
        )
        protected.add_api_route(
            "/dashboard/overshared",
            self.overshared,
            methods=["GET"],
            response_model=list[OversharedLicense],
        )
        protected.add_api_route(
            "/dashboard/revoke/{license_id}",
            self.revoke,
            methods=["PUT"],
            response_model=RevocationResult,
        )
        protected.add_api_route(
            "/dashboard/user-licenses/{user_id}",
            self.user_licenses,
            methods=["GET"],
            response_model=list[LicenseRecord],
        )
        protected.add_api_route(
            "/dashboard/license-events/{license_id}",
            self.license_events,
            methods=["GET"],
            response_model=list[UsageEvent],
        )
        protected.add_api_route(
            "/dashboard/publications",
            self.publications,
            methods=["GET"],
            response_model=PublicationPage,
            dependencies=[Depends(self.pagination)],
        )
        protected.add_api_route(
            "/dashboard/publications/{uuid}",
            self.delete_publication,
            methods=["DELETE"],
            response_model=DeletionResult,
        )
        app.include_router(protected)

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return self.service.health()

    def login(self, credentials: Credentials, response: Response) -> LoginResponse:
        """Handle /login endpoint."""
        session, body = self.service.login(credentials)
        if self.set_cookie:
            response.set_cookie(
                key=self.authenticator.cookie_name,
                value=session.token,
                max_age=self.token_ttl,
                httponly=True,
                secure=self.cookie_secure,
                samesite=self.cookie_samesite,  # type: ignore[arg-type]
                path="/",
            )
        return body

    async def logout(self, response: Response) -> dict[str, Any]:
        """Handle /logout endpoint. Tokens are stateless; only the cookie is cleared."""
        response.delete_cookie(self.authenticator.cookie_name, path="/")
        return {"success": True}

    async def me(self, request: Request) -> SessionInfo:
        return self.service.session_info(
            request.state.principal, request.state.token_claims
        )

    def dashboard_data(self) -> DashboardSnapshot:
        return self.service.get_snapshot()

    def overshared(self) -> list[OversharedLicense]:
        return self.service.list_overshared_licenses()

    def revoke(self, license_id: str, request: Request) -> RevocationResult:
        self.service.logger.info(
            "Revocation of %s requested by %s", license_id, request.state.username
        )
        return self.service.revoke(license_id)

    def user_licenses(self, user_id: str) -> list[LicenseRecord]:
        return self.service.list_user_licenses(user_id)

    def license_events(self, license_id: str) -> list[UsageEvent]:
        return self.service.list_license_events(license_id)

    def publications(self, request: Request) -> PublicationPage:
        return self.service.list_publications(request.state.pagination)

    def delete_publication(self, uuid: str) -> DeletionResult:
        return self.service.delete_publication(uuid)
