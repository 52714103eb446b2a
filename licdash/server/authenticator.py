"""
Authentication gate for protected routes.
"""

from __future__ import annotations

import logging
from typing import Any

import jwt
from fastapi import Request

from licdash.common.exceptions import (
    AuthenticationError,
    BadAuthorizationError,
    InvalidSignatureError,
    MalformedTokenError,
    MissingTokenError,
    TokenExpiredError,
    TokenNotYetValidError,
    UnverifiableTokenError,
)
from licdash.common.models import Principal

BEARER_SCHEME = "bearer"


class TokenAuthenticator:
    """FastAPI dependency validating the session token of a request.

    On success the principal is attached to ``request.state`` and returned;
    on failure a typed ``AuthenticationError`` ends the request before any
    route logic runs.
    """

    def __init__(
        self,
        secret_key: bytes,
        algorithm: str = "HS256",
        cookie_name: str = "token",
        leeway: int = 0,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.cookie_name = cookie_name
        self.leeway = leeway
        self.logger = logging.getLogger(__name__)

    def __call__(self, request: Request) -> Principal:
        try:
            token = self.extract_token(request)
            claims = self.decode(token)
        except (AuthenticationError, BadAuthorizationError) as err:
            self.logger.info(
                "Authentication failed for %s %s: %s",
                request.method,
                request.url.path,
                err.code,
            )
            raise

        principal = Principal(username=claims["username"])
        request.state.principal = principal
        request.state.username = principal.username
        request.state.token_claims = claims
        return principal

    def extract_token(self, request: Request) -> str:
        """Bearer header first, then the session cookie."""
        header = request.headers.get("Authorization")
        if header:
            scheme, _, credentials = header.strip().partition(" ")
            if scheme.lower() == BEARER_SCHEME:
                token = credentials.strip()
                if not token:
                    raise BadAuthorizationError("Empty bearer credential")
                return token

        token = request.cookies.get(self.cookie_name)
        if not token:
            raise MissingTokenError
        return token

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature and time claims, returning the claims."""
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
                leeway=self.leeway,
            )
        except jwt.ExpiredSignatureError as err:
            raise TokenExpiredError from err
        except jwt.ImmatureSignatureError as err:
            raise TokenNotYetValidError from err
        except jwt.InvalidSignatureError as err:
            raise InvalidSignatureError from err
        except jwt.InvalidAlgorithmError as err:
            raise UnverifiableTokenError from err
        except jwt.DecodeError as err:
            raise MalformedTokenError from err
        except jwt.InvalidTokenError as err:
            raise MalformedTokenError("Invalid or malformed token") from err

        username = claims.get("username")
        if not isinstance(username, str) or not username:
            raise MalformedTokenError("Token carries no principal")
        return claims
