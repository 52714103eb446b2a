"""Common cryptographic utilities.
"""

import hmac
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
SALT_LEN = 16
HASH_LEN = 32
HASH_SCHEME = "scrypt"


class CryptoUtils:
    """Utility class for cryptographic operations."""

    @staticmethod
    def _kdf(salt: bytes, n: int, r: int, p: int) -> Scrypt:
        return Scrypt(salt=salt, length=HASH_LEN, n=n, r=r, p=p)

    @staticmethod
    def hash_password(password: str, n: int = SCRYPT_N) -> str:
        """Hash a password as ``scrypt$n$r$p$salt$hash`` (hex fields).

        The cost parameters travel with the hash, so raising ``SCRYPT_N`` later
        keeps existing hashes verifiable.
        """
        salt = os.urandom(SALT_LEN)
        digest = CryptoUtils._kdf(salt, n, SCRYPT_R, SCRYPT_P).derive(password.encode())
        return "$".join(
            [HASH_SCHEME, str(n), str(SCRYPT_R), str(SCRYPT_P), salt.hex(), digest.hex()]
        )

    @staticmethod
    def verify_password(password: str, encoded: str) -> bool:
        """Check a password against a hash produced by ``hash_password``."""
        try:
            scheme, n, r, p, salt_hex, digest_hex = encoded.split("$")
            if scheme != HASH_SCHEME:
                return False
            kdf = CryptoUtils._kdf(bytes.fromhex(salt_hex), int(n), int(r), int(p))
            kdf.verify(password.encode(), bytes.fromhex(digest_hex))
        except (ValueError, InvalidKey):
            return False
        return True

    @staticmethod
    def constant_time_equals(left: str, right: str) -> bool:
        return hmac.compare_digest(left.encode(), right.encode())

    @staticmethod
    def generate_secret(length: int = 32) -> str:
        """Random HMAC signing secret, hex encoded."""
        return os.urandom(length).hex()
