"""
Signing secret generator for session tokens.
"""

from __future__ import annotations

import logging
from pathlib import Path

from licdash.common.config import Config
from licdash.common.crypto import CryptoUtils

logger = logging.getLogger(__name__)


class KeyGenerator:
    """Creates the HMAC secret used to sign session tokens."""

    def __init__(self, secret_path: Path | None = None):
        config = Config()
        self.secret_path = secret_path or config.SECRET_KEY_PATH

    def generate_secret(self, overwrite: bool = False) -> Path:  # noqa: FBT001, FBT002
        """Generate and save a new signing secret, returning its path."""
        if self.secret_path.exists() and not overwrite:
            msg = f"Signing secret already exists at {self.secret_path}"
            raise FileExistsError(msg)

        logger.info("Generating token signing secret...")
        self.secret_path.parent.mkdir(parents=True, exist_ok=True)
        self.secret_path.write_text(CryptoUtils.generate_secret() + "\n")
        self.secret_path.chmod(0o600)

        logger.info("Secret saved: %s", self.secret_path)
        logger.info("Keep the secret private; every token is signed with it!")
        return self.secret_path
