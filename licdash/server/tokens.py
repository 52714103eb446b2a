"""
Session token issuing.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import jwt

from licdash.common.models import Principal, SessionToken


class TokenIssuer:
    """Mints signed, time-bounded session tokens (JWT) for a principal."""

    def __init__(
        self,
        secret_key: bytes,
        ttl: int = 3600,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ):
        self.secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def issue(self, principal: Principal) -> SessionToken:
        """Sign a token whose expiry is ``issued_at + ttl``."""
        issued_at = int(self.clock())
        expires_at = issued_at + self.ttl
        claims = {
            "username": principal.username,
            "sub": principal.username,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        self.logger.debug(
            "Issued token for %s expiring at %s", principal.username, expires_at
        )
        return SessionToken(
            token=token,
            principal=principal,
            issued_at=issued_at,
            expires_at=expires_at,
            signature=token.rsplit(".", 1)[-1],
        )
