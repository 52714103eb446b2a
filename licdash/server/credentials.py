"""
Operator credential verification.
"""

from __future__ import annotations

import logging

from licdash.common.crypto import CryptoUtils
from licdash.common.exceptions import InvalidCredentialsError
from licdash.common.models import Credentials, Principal, UserProfile


class CredentialVerifier:
    """Checks a username/password pair against the configured operator identity."""

    def __init__(
        self,
        username: str,
        password_hash: str,
        user_id: str = "1",
        email: str | None = None,
        display_name: str | None = None,
    ):
        self.username = username
        self.password_hash = password_hash
        self.user_id = user_id
        self.email = email
        self.display_name = display_name
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_password(
        cls,
        username: str,
        password: str,
        user_id: str = "1",
        email: str | None = None,
        display_name: str | None = None,
    ) -> CredentialVerifier:
        """Build a verifier from a plain password, hashing it once."""
        return cls(
            username,
            CryptoUtils.hash_password(password),
            user_id=user_id,
            email=email,
            display_name=display_name,
        )

    def verify(self, credentials: Credentials) -> Principal:
        """Return the principal for a matching pair, raise otherwise."""
        username_ok = CryptoUtils.constant_time_equals(credentials.username, self.username)
        # KDF runs even when the username is wrong
        password_ok = CryptoUtils.verify_password(credentials.password, self.password_hash)
        if not (username_ok and password_ok):
            self.logger.info("Rejected login for %r", credentials.username)
            raise InvalidCredentialsError
        return Principal(username=self.username)

    def profile(self, principal: Principal) -> UserProfile:
        return UserProfile(
            id=self.user_id,
            email=self.email or f"{principal.username}@example.com",
            name=self.display_name or principal.username,
        )
