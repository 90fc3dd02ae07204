"""Service layer for webhook registration persistence."""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

from msga.core.exceptions import ConflictError, NotFoundError, ValidationError
from msga.core.security import SecretManager
from msga.db.store import WEBHOOKS, Document, DocumentStore, next_id

logger = logging.getLogger(__name__)

DISCORD_WEBHOOK_PATTERN = re.compile(r"^https://discord\.com/api/webhooks/\d+/[\w-]+$", re.IGNORECASE)


def _decrypted(webhook: Document, secret_manager: SecretManager) -> dict[str, Any]:
    return {**webhook, "url": secret_manager.decrypt(webhook["url"])}


async def list_webhooks(store: DocumentStore, secret_manager: SecretManager) -> list[dict[str, Any]]:
    webhooks = await store.get(WEBHOOKS)
    return [_decrypted(webhooks[key], secret_manager) for key in sorted(webhooks, key=int)]


async def create_webhook(
    store: DocumentStore,
    secret_manager: SecretManager,
    url: str | None,
    name: str | None,
    created_by: str,
) -> dict[str, Any]:
    if not url or not DISCORD_WEBHOOK_PATTERN.match(url):
        raise ValidationError("Invalid Discord webhook URL format")

    webhooks = await store.get(WEBHOOKS)
    if any(secret_manager.decrypt(webhook["url"]) == url for webhook in webhooks.values()):
        raise ConflictError("Webhook with this URL already exists")

    webhook_id = next_id(webhooks)
    webhooks[str(webhook_id)] = {
        "id": webhook_id,
        "url": secret_manager.encrypt(url),
        "name": name or f"Webhook {webhook_id}",
        "created": datetime.now(timezone.utc).isoformat(),
        "createdBy": created_by,
        "lastUsed": None,
    }
    await store.set(WEBHOOKS, webhooks)
    logger.info("New webhook added: id=%s by=%s", webhook_id, created_by)
    return _decrypted(webhooks[str(webhook_id)], secret_manager)


async def delete_webhook(store: DocumentStore, webhook_id: int) -> None:
    webhooks = await store.get(WEBHOOKS)
    if str(webhook_id) not in webhooks:
        raise NotFoundError("Webhook not found")
    del webhooks[str(webhook_id)]
    await store.set(WEBHOOKS, webhooks)
    logger.info("Webhook deleted: id=%s", webhook_id)
