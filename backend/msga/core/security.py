"""Security helpers for password hashing, secret encryption, and JWT signing."""
from __future__ import annotations

import base64
import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from cryptography.fernet import Fernet, InvalidToken
from passlib.context import CryptContext

from .config import get_settings
from .exceptions import InvalidTokenError


_password_context = CryptContext(schemes=["argon2"], deprecated="auto")


class PasswordHasher:
    """Hash and verify user passwords using Argon2id."""

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        try:
            return _password_context.verify(password, hashed)
        except ValueError:
            # Unrecognized or corrupted hash.
            return False


def _derive_fernet_key(secret: str) -> bytes:
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class SecretManager:
    """Encrypt and decrypt sensitive secrets, such as webhook URLs, with Fernet."""

    def __init__(self, key: str | None = None) -> None:
        settings = get_settings()
        raw_key = key or settings.encryption_key or settings.secret_key
        derived = _derive_fernet_key(raw_key)
        self._fernet = Fernet(derived)

    def encrypt(self, value: str) -> str:
        return self._fernet.encrypt(value.encode("utf-8")).decode("utf-8")

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt(token.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise ValueError("Invalid encryption token") from exc


class TokenService:
    """Issue and decode signed access tokens.

    Every token carries a random ``jti`` so that it can be revoked
    individually on logout while its signature and expiry stay valid.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ) -> None:
        settings = get_settings()
        self._secret_key = secret_key or settings.secret_key
        self._algorithm = algorithm or settings.jwt_algorithm
        self._expire = timedelta(minutes=expire_minutes or settings.jwt_expire_minutes)

    def issue(self, user_id: int, username: str, role: str) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "id": user_id,
            "username": username,
            "role": role,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + self._expire,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc
        if not claims.get("jti") or "id" not in claims:
            raise InvalidTokenError()
        return claims
