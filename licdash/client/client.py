"""
HTTP client for the license dashboard API.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from licdash.common.config import Config
from licdash.common.exceptions import DashboardAPIError, SessionExpiredError
from licdash.common.models import (
    ClientConfig,
    DashboardSnapshot,
    DeletionResult,
    LicenseRecord,
    LoginResponse,
    OversharedLicense,
    PublicationPage,
    RevocationResult,
    SessionInfo,
    UsageEvent,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class DashboardClient:
    """Client for the dashboard endpoints.

    The token from :meth:`login` is sent as a bearer header. When the server
    reports ``TOKEN_EXPIRED`` and credentials were kept, the client logs in
    again and retries the call once; otherwise :class:`SessionExpiredError`
    is raised.

    ``session`` may be any object with a ``requests``-style ``request``
    method, such as ``fastapi.testclient.TestClient``.
    """

    def __init__(  # noqa: PLR0913
        self,
        server_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        relogin_on_expiry: bool = True,  # noqa: FBT001, FBT002
        session: Any = None,
    ):
        self.config = ClientConfig(
            server_url=(server_url or Config().SERVER_URL).rstrip("/"),
            username=username,
            password=password,
            token=token,
            timeout=timeout,
            relogin_on_expiry=relogin_on_expiry,
        )
        self.session = session or requests.Session()

    @property
    def token(self) -> str | None:
        return self.config.token

    def login(
        self, username: str | None = None, password: str | None = None
    ) -> LoginResponse:
        """Authenticate and keep the issued token for later calls."""
        if username is not None:
            self.config.username = username
        if password is not None:
            self.config.password = password

        data = self._request(
            "POST",
            "/login",
            json={"username": self.config.username, "password": self.config.password},
            authenticated=False,
        )
        result = LoginResponse.model_validate(data)
        self.config.token = result.token
        logger.info("Logged in as %s", result.user.name)
        return result

    def logout(self) -> None:
        self._request("POST", "/logout", authenticated=False)
        self.config.token = None

    def me(self) -> SessionInfo:
        return SessionInfo.model_validate(self._request("GET", "/me"))

    def get_snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot.model_validate(self._request("GET", "/dashboard/data"))

    def list_overshared_licenses(self) -> list[OversharedLicense]:
        data = self._request("GET", "/dashboard/overshared")
        return [OversharedLicense.model_validate(item) for item in data]

    def revoke(self, license_id: str) -> RevocationResult:
        data = self._request("PUT", f"/dashboard/revoke/{license_id}")
        return RevocationResult.model_validate(data)

    def user_licenses(self, user_id: str) -> list[LicenseRecord]:
        data = self._request("GET", f"/dashboard/user-licenses/{user_id}")
        return [LicenseRecord.model_validate(item) for item in data]

    def license_events(self, license_id: str) -> list[UsageEvent]:
        data = self._request("GET", f"/dashboard/license-events/{license_id}")
        return [UsageEvent.model_validate(item) for item in data]

    def publications(
        self, page: int | None = None, per_page: int | None = None
    ) -> PublicationPage:
        params = {}
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page
        data = self._request("GET", "/dashboard/publications", params=params)
        return PublicationPage.model_validate(data)

    def delete_publication(self, uuid: str) -> DeletionResult:
        data = self._request("DELETE", f"/dashboard/publications/{uuid}")
        return DeletionResult.model_validate(data)

    def _can_relogin(self) -> bool:
        return bool(
            self.config.relogin_on_expiry
            and self.config.username
            and self.config.password
        )

    def _request(  # noqa: PLR0913
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,  # noqa: FBT001, FBT002
        retry: bool = True,  # noqa: FBT001, FBT002
    ) -> Any:
        headers = {}
        if authenticated and self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"

        response = self.session.request(
            method,
            f"{self.config.server_url}{path}",
            json=json,
            params=params,
            headers=headers,
            timeout=self.config.timeout,
        )
        if response.status_code < 400:
            return response.json()

        error = self._error_from(response)
        if isinstance(error, SessionExpiredError) and retry and self._can_relogin():
            logger.info("Session expired, logging in again")
            self.login()
            return self._request(method, path, json, params, authenticated, retry=False)
        raise error

    @staticmethod
    def _error_from(response: Any) -> DashboardAPIError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("error") or f"HTTP error {response.status_code}"
        code = body.get("code")
        if code == "TOKEN_EXPIRED":
            return SessionExpiredError(message, response.status_code, code)
        return DashboardAPIError(message, response.status_code, code)
