"""Password hashing helpers.

Hashes look like ``scrypt$<n>$<r>$<p>$<salt>$<key>`` with salt and key in
URL-safe Base64 without padding, so they drop cleanly into the JSON
snapshot.
"""
import base64
import os

from typing import Protocol

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

SCHEME = "scrypt"
SALT_BYTES = 16
KEY_BYTES = 32


def b64url_encode(data: bytes) -> str:
    """URL-safe Base64 without '=' padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    pad_len = (-len(data)) % 4
    return base64.urlsafe_b64decode(data + "=" * pad_len)


class PasswordHasher(Protocol):
    """What the chat service needs from a password primitive."""

    def hash(self, plain_password: str) -> str:
        ...

    def verify(self, plain_password: str, hashed: str) -> bool:
        ...


class ScryptPasswordHasher:
    """Salted scrypt hashing.

    Cost parameters are stored in each hash, so lowering them (tests do)
    never breaks verification of hashes made with other settings.
    """

    def __init__(self, n: int = 2 ** 14, r: int = 8, p: int = 1):
        self.n = n
        self.r = r
        self.p = p

    def hash(self, plain_password: str) -> str:
        salt = os.urandom(SALT_BYTES)
        kdf = Scrypt(salt=salt, length=KEY_BYTES, n=self.n, r=self.r, p=self.p)
        key = kdf.derive(plain_password.encode("utf-8"))
        return "$".join((SCHEME, str(self.n), str(self.r), str(self.p),
                         b64url_encode(salt), b64url_encode(key)))

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Check a password. Malformed hashes raise ValueError."""
        scheme, n, r, p, salt_b64, key_b64 = hashed.split("$")
        if scheme != SCHEME:
            raise ValueError(f"Unsupported hash scheme: {scheme}")
        key = b64url_decode(key_b64)
        kdf = Scrypt(salt=b64url_decode(salt_b64), length=len(key), n=int(n), r=int(r), p=int(p))
        try:
            kdf.verify(plain_password.encode("utf-8"), key)
            return True
        except InvalidKey:
            return False
