"""
Login handler: credential check followed by token issuance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from licdash.common.models import (
    Credentials,
    LoginResponse,
    Principal,
    SessionInfo,
    SessionToken,
)

if TYPE_CHECKING:
    from licdash.server.credentials import CredentialVerifier
    from licdash.server.tokens import TokenIssuer


class AuthHandler:
    """Handles login and session introspection."""

    def __init__(self, verifier: CredentialVerifier, issuer: TokenIssuer):
        self.verifier = verifier
        self.issuer = issuer
        self.logger = logging.getLogger(__name__)

    def login(self, credentials: Credentials) -> tuple[SessionToken, LoginResponse]:
        principal = self.verifier.verify(credentials)
        session = self.issuer.issue(principal)
        self.logger.info("User logged in: %s", principal.username)
        return session, LoginResponse(
            token=session.token, user=self.verifier.profile(principal)
        )

    def session_info(self, principal: Principal, claims: dict[str, Any]) -> SessionInfo:
        return SessionInfo(
            user=self.verifier.profile(principal), expires_at=claims.get("exp")
        )
