"""User service functions for registration, authentication and account management."""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

from msga.core.exceptions import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from msga.core.security import PasswordHasher, TokenService
from msga.db.store import BLOCKED_TOKENS, DELETION_REQUESTS, USERS, Document, DocumentStore, next_id

logger = logging.getLogger(__name__)

SH_PROFILE_URL_PATTERN = re.compile(r"^https://www\.scribblehub\.com/profile/\d+/[a-zA-Z0-9-_]+/?$")

ROLE_ADMIN = "admin"
ROLE_USER = "user"

USER_NOT_FOUND = "User not found. Please check your username."


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def public_user(user_id: int | str, user: Document) -> dict[str, Any]:
    """Return the client-safe view of a stored user record."""

    return {
        "id": int(user_id),
        "username": user["username"],
        "shProfileURL": user["shProfileURL"],
        "role": user.get("role", ROLE_USER),
        "approved": bool(user.get("approved", False)),
    }


async def get_user_by_username(store: DocumentStore, username: str) -> tuple[int, Document] | None:
    users = await store.get(USERS)
    for key, user in users.items():
        if user.get("username") == username:
            return int(key), user
    return None


async def register_user(store: DocumentStore, username: str, sh_profile_url: str, password: str) -> dict[str, Any]:
    if not username or not sh_profile_url or not password:
        raise ValidationError("Username, SH profile URL and password are required.")
    if not SH_PROFILE_URL_PATTERN.match(sh_profile_url):
        raise ValidationError("Invalid SH profile URL format.")

    users = await store.get(USERS)
    if any(u.get("username") == username or u.get("shProfileURL") == sh_profile_url for u in users.values()):
        logger.warning("Registration failed, user exists: %s", username)
        raise ConflictError("Username or SH profile URL already in use.")

    user_id = next_id(users, start=0)
    users[str(user_id)] = {
        "username": username,
        "shProfileURL": sh_profile_url,
        "passwordHash": PasswordHasher.hash(password),
        "role": ROLE_USER,
        "approved": False,
        "dateCreated": _now_iso(),
    }
    await store.set(USERS, users)
    logger.info("User registered: id=%s username=%s", user_id, username)
    return public_user(user_id, users[str(user_id)])


async def create_admin(store: DocumentStore, username: str, sh_profile_url: str, password: str) -> dict[str, Any]:
    """Register an account and immediately promote and approve it."""

    created = await register_user(store, username, sh_profile_url, password)
    users = await store.get(USERS)
    record = users[str(created["id"])]
    record["role"] = ROLE_ADMIN
    record["approved"] = True
    await store.set(USERS, users)
    logger.info("Admin account created: %s", username)
    return public_user(created["id"], record)


async def login(store: DocumentStore, tokens: TokenService, username: str, password: str) -> dict[str, Any]:
    """Check credentials and return a signed token with the user's public fields."""

    logger.info("Login attempt: %s", username)
    found = await get_user_by_username(store, username)
    if not found:
        logger.warning("Login failed, user not found: %s", username)
        raise NotFoundError(USER_NOT_FOUND)
    user_id, user = found

    if not PasswordHasher.verify(password, user.get("passwordHash", "")):
        raise AuthError("Wrong password. Please try again.")
    if not user.get("approved"):
        raise ForbiddenError("Account pending approval.")

    token = tokens.issue(user_id, user["username"], user.get("role", ROLE_USER))
    logger.info("Login successful: id=%s username=%s", user_id, username)
    return {"token": token, **public_user(user_id, user)}


async def revoke_token(store: DocumentStore, jti: str, expires_at: int | float) -> None:
    """Add ``jti`` to the blocked set. Entries are kept forever."""

    blocked = await store.get(BLOCKED_TOKENS)
    blocked[jti] = {"blockedAt": _now_iso(), "expiresAt": int(expires_at * 1000)}
    await store.set(BLOCKED_TOKENS, blocked)


async def is_token_revoked(store: DocumentStore, jti: str) -> bool:
    blocked = await store.get(BLOCKED_TOKENS)
    return jti in blocked


async def list_users(store: DocumentStore) -> list[dict[str, Any]]:
    users = await store.get(USERS)
    return [public_user(key, user) for key, user in sorted(users.items(), key=lambda item: int(item[0]))]


async def set_user_approval(store: DocumentStore, user_id: int, approved: bool | None) -> dict[str, Any]:
    users = await store.get(USERS)
    user = users.get(str(user_id))
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    if approved is None:
        raise ValidationError("Approval status must be provided.")
    user["approved"] = approved
    await store.set(USERS, users)
    logger.info("User %s approval set to %s", user_id, approved)
    return public_user(user_id, user)


async def delete_user(store: DocumentStore, user_id: int, caller: dict[str, Any]) -> dict[str, Any]:
    """Delete a non-admin account and resolve its pending deletion request, if any."""

    users = await store.get(USERS)
    user = users.get(str(user_id))
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    if caller.get("id") == user_id:
        raise ValidationError("Admins cannot delete themselves.")
    if user.get("role") == ROLE_ADMIN:
        raise ForbiddenError("You cannot delete other admins.")
    if caller.get("role") != ROLE_ADMIN:
        raise ForbiddenError("You are not authorized to delete this entry.")

    del users[str(user_id)]
    await store.set(USERS, users)

    requests = await store.get(DELETION_REQUESTS)
    for key, request in sorted(requests.items(), key=lambda item: int(item[0])):
        if request.get("userId") == user_id and request.get("status") == "pending":
            request["status"] = "resolved"
            request["resolvedAt"] = _now_iso()
            await store.set(DELETION_REQUESTS, requests)
            logger.info("Deletion request %s resolved", key)
            break

    logger.info("User deleted: id=%s username=%s by=%s", user_id, user["username"], caller.get("id"))
    return {"success": True, "deletedId": user_id, "username": user["username"]}


async def get_profile(store: DocumentStore, user_id: int) -> dict[str, Any]:
    users = await store.get(USERS)
    user = users.get(str(user_id))
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return {
        "username": user["username"],
        "shProfileURL": user["shProfileURL"],
        "role": user.get("role", ROLE_USER),
        "approved": bool(user.get("approved", False)),
        "dateCreated": user.get("dateCreated") or "Unknown",
    }


async def change_password(store: DocumentStore, user_id: int, old_password: str | None, new_password: str | None) -> None:
    if not old_password or not new_password:
        raise ValidationError("Old and new password are required.")
    users = await store.get(USERS)
    user = users.get(str(user_id))
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    if not PasswordHasher.verify(old_password, user.get("passwordHash", "")):
        raise ForbiddenError("Wrong password. Please try again.")
    user["passwordHash"] = PasswordHasher.hash(new_password)
    await store.set(USERS, users)
    logger.info("User %s updated password", user_id)


async def request_deletion(store: DocumentStore, user_id: int, reason: str | None) -> dict[str, Any]:
    if not reason:
        raise ValidationError("A reason is required.")
    users = await store.get(USERS)
    user = users.get(str(user_id))
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)

    requests = await store.get(DELETION_REQUESTS)
    if any(r.get("userId") == user_id and r.get("status") == "pending" for r in requests.values()):
        raise ConflictError("A deletion request is already pending for this account.")

    request_id = next_id(requests)
    requests[str(request_id)] = {
        "id": request_id,
        "userId": user_id,
        "username": user["username"],
        "requestDate": _now_iso(),
        "reason": reason,
        "status": "pending",
    }
    await store.set(DELETION_REQUESTS, requests)
    logger.info("User %s submitted deletion request %s", user_id, request_id)
    return requests[str(request_id)]


async def list_deletion_requests(store: DocumentStore) -> list[Document]:
    requests = await store.get(DELETION_REQUESTS)
    return [requests[key] for key in sorted(requests, key=int)]
