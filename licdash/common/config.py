"""
Configuration settings for the license dashboard.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from licdash.common.logging_utils import LOG_FORMAT


def _env_bool(name: str, default: bool) -> bool:  # noqa: FBT001
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value) if value else None


class Config:
    """Central configuration class for all system settings."""

    def __init__(self) -> None:
        # Session token settings
        self.TOKEN_ALGORITHM: str = os.getenv("LICDASH_TOKEN_ALGORITHM", "HS256")
        self.TOKEN_TTL: int = int(os.getenv("LICDASH_TOKEN_TTL", "3600"))  # 1 hour
        self.TOKEN_LEEWAY: int = int(os.getenv("LICDASH_TOKEN_LEEWAY", "0"))
        self.SECRET_KEY: str | None = os.getenv("LICDASH_SECRET_KEY")

        # Cookie transport
        self.SET_COOKIE: bool = _env_bool("LICDASH_SET_COOKIE", True)
        self.COOKIE_NAME: str = os.getenv("LICDASH_COOKIE_NAME", "token")
        self.COOKIE_SECURE: bool = _env_bool("LICDASH_COOKIE_SECURE", False)
        self.COOKIE_SAMESITE: str = os.getenv("LICDASH_COOKIE_SAMESITE", "strict")

        # Operator identity
        self.ADMIN_USERNAME: str = os.getenv("LICDASH_ADMIN_USERNAME", "admin")
        self.ADMIN_PASSWORD: str = os.getenv("LICDASH_ADMIN_PASSWORD", "supersecret")
        self.ADMIN_PASSWORD_HASH: str | None = os.getenv("LICDASH_ADMIN_PASSWORD_HASH")
        self.ADMIN_USER_ID: str = os.getenv("LICDASH_ADMIN_USER_ID", "1")
        self.ADMIN_EMAIL: str | None = os.getenv("LICDASH_ADMIN_EMAIL")
        self.ADMIN_DISPLAY_NAME: str | None = os.getenv("LICDASH_ADMIN_DISPLAY_NAME")

        # Pagination
        self.DEFAULT_PAGE: int = 1
        self.DEFAULT_PER_PAGE: int = 20
        self.MAX_PER_PAGE: int = int(os.getenv("LICDASH_MAX_PER_PAGE", "100"))

        # Store policy
        self.OVERSHARE_DEVICE_LIMIT: int = int(
            os.getenv("LICDASH_OVERSHARE_DEVICE_LIMIT", "2")
        )

        # Server settings
        self.SERVER_HOST: str = os.getenv("LICDASH_SERVER_HOST", "127.0.0.1")
        self.SERVER_PORT: int = int(os.getenv("LICDASH_SERVER_PORT", "8989"))
        self.SERVER_URL: str = f"http://{self.SERVER_HOST}:{self.SERVER_PORT}"

        # File paths
        self.BASE_DIR: Path = Path(__file__).parent.parent
        self.SECRET_KEY_PATH: Path = _env_path("LICDASH_SECRET_KEY_FILE") or (
            self.BASE_DIR / "server" / "secret.key"
        )
        self.DATA_FILE_PATH: Path | None = _env_path("LICDASH_DATA_FILE")
        self.REVOKED_LICENSES_FILE_PATH: Path | None = _env_path(
            "LICDASH_REVOKED_FILE"
        )

        # Logging
        self.LOG_LEVEL: int = getattr(
            logging, os.getenv("LICDASH_LOG_LEVEL", "INFO").upper(), logging.INFO
        )
        self.LOG_FORMAT: str = LOG_FORMAT
        self.LOG_FILE: str | None = os.getenv("LICDASH_LOG_FILE")

    def get_secret_key(self) -> bytes:
        """Return the token signing secret from the environment or key file."""
        if self.SECRET_KEY:
            return self.SECRET_KEY.encode()
        try:
            with self.SECRET_KEY_PATH.open("rb") as f:
                secret = f.read().strip()
        except FileNotFoundError as err:
            msg = (
                f"Signing secret not found at {self.SECRET_KEY_PATH} and "
                "LICDASH_SECRET_KEY is not set. Run 'licdash keygen' to generate one."
            )
            raise ValueError(msg) from err
        if not secret:
            msg = f"Signing secret file {self.SECRET_KEY_PATH} is empty"
            raise ValueError(msg)
        return secret
