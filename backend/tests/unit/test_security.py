"""Tests for password hashing, secret encryption and token signing."""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from msga.core.exceptions import InvalidTokenError
from msga.core.security import PasswordHasher, SecretManager, TokenService


class TestPasswordHasher:
    def test_hash_is_salted_and_verifiable(self):
        first = PasswordHasher.hash("s3cret-pass")
        second = PasswordHasher.hash("s3cret-pass")

        assert first != second
        assert PasswordHasher.verify("s3cret-pass", first)
        assert not PasswordHasher.verify("wrong-pass", first)

    def test_garbage_hash_does_not_verify(self):
        assert not PasswordHasher.verify("anything", "not-a-hash")


class TestSecretManager:
    def test_encrypt_roundtrip(self):
        manager = SecretManager(key="unit-test-key")
        token = manager.encrypt("https://discord.com/api/webhooks/1/abc")

        assert "discord" not in token
        assert manager.decrypt(token) == "https://discord.com/api/webhooks/1/abc"

    def test_wrong_key_fails(self):
        token = SecretManager(key="one").encrypt("value")
        with pytest.raises(ValueError):
            SecretManager(key="two").decrypt(token)


class TestTokenService:
    def test_issued_token_carries_identity_and_jti(self):
        service = TokenService(secret_key="k")
        claims = service.decode(service.issue(4, "alice", "user"))

        assert claims["id"] == 4
        assert claims["username"] == "alice"
        assert claims["role"] == "user"
        assert claims["jti"]
        assert claims["exp"] > claims["iat"]

    def test_each_token_has_unique_jti(self):
        service = TokenService(secret_key="k")
        first = service.decode(service.issue(1, "a", "user"))
        second = service.decode(service.issue(1, "a", "user"))
        assert first["jti"] != second["jti"]

    def test_wrong_signature_rejected(self):
        token = TokenService(secret_key="one").issue(1, "a", "user")
        with pytest.raises(InvalidTokenError):
            TokenService(secret_key="two").decode(token)

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"id": 1, "username": "a", "role": "user", "jti": "x", "iat": past, "exp": past + timedelta(minutes=1)},
            "k",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            TokenService(secret_key="k").decode(token)

    def test_token_without_jti_rejected(self):
        token = jwt.encode({"id": 1, "username": "a"}, "k", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            TokenService(secret_key="k").decode(token)
