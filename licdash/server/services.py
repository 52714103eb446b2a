"""Business logic services for the dashboard server.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import logging
    from pathlib import Path

    from licdash.common.interfaces import IDataPersistence, ILicenseStore
    from licdash.common.models import (
        Credentials,
        DashboardSnapshot,
        DeletionResult,
        LicenseRecord,
        LoginResponse,
        OversharedLicense,
        PaginationRequest,
        Principal,
        PublicationPage,
        RevocationResult,
        SessionInfo,
        SessionToken,
        UsageEvent,
    )
    from licdash.server.credentials import CredentialVerifier
    from licdash.server.tokens import TokenIssuer
from licdash.server.domain.auth_handler import AuthHandler
from licdash.server.domain.query_handler import QueryHandler
from licdash.server.domain.revoke_handler import RevokeHandler


class DashboardService:
    """Facade over the login, query and revocation handlers."""

    def __init__(  # noqa: PLR0913
        self,
        store: ILicenseStore,
        verifier: CredentialVerifier,
        issuer: TokenIssuer,
        data_persistence: IDataPersistence,
        revoked_licenses_file_path: Path | None,
        logger: logging.Logger,
    ):
        self.store = store
        self.logger = logger

        # Initialize handlers
        self.auth_handler = AuthHandler(verifier=verifier, issuer=issuer)
        self.query_handler = QueryHandler(store=store)
        self.revoke_handler = RevokeHandler(
            store=store,
            data_persistence=data_persistence,
            revoked_licenses_file_path=revoked_licenses_file_path,
        )

        reapplied = self.revoke_handler.reapply()
        if reapplied:
            self.logger.info("Re-applied %d persisted revocations", reapplied)

    def health(self) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "timestamp": int(time.time())}

    def login(self, credentials: Credentials) -> tuple[SessionToken, LoginResponse]:
        return self.auth_handler.login(credentials)

    def session_info(self, principal: Principal, claims: dict[str, Any]) -> SessionInfo:
        return self.auth_handler.session_info(principal, claims)

    def get_snapshot(self) -> DashboardSnapshot:
        return self.query_handler.get_snapshot()

    def list_overshared_licenses(self) -> list[OversharedLicense]:
        return self.query_handler.list_overshared_licenses()

    def list_user_licenses(self, user_id: str) -> list[LicenseRecord]:
        return self.query_handler.list_user_licenses(user_id)

    def list_license_events(self, license_id: str) -> list[UsageEvent]:
        return self.query_handler.list_license_events(license_id)

    def list_publications(self, pagination: PaginationRequest) -> PublicationPage:
        return self.query_handler.list_publications(pagination)

    def delete_publication(self, uuid: str) -> DeletionResult:
        return self.query_handler.delete_publication(uuid)

    def revoke(self, license_id: str) -> RevocationResult:
        return self.revoke_handler.revoke(license_id)
