"""Discord webhook notifications for report changes."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from msga.core.config import get_settings
from msga.core.security import SecretManager
from msga.db.store import WEBHOOKS, Document, DocumentStore

logger = logging.getLogger(__name__)

NOTIFIER_NAME = "MSGA Notifier"
NOTIFIER_AVATAR = "https://decaded.dev/public/assets/MSGA/logo.png"
FOOTER_TEXT = "msga.decaded.dev"
DEFAULT_COLOR = 0x58B058

STATUS_COLORS = {
    "pending_review": 0xFFCC00,
    "in_progress": 0x3498DB,
    "confirmed_violator": 0xE74C3C,
    "false_positive": 0x9B59B6,
    "confirmed": 0x2ECC71,
    "taken_down": 0xE74C3C,
    "original": 0x9B59B6,
}


class NotificationError(RuntimeError):
    """Raised when a notification attempt fails."""


def _event_title(event_type: str) -> str:
    return event_type.replace("_", " ", 1).upper()


def build_discord_message(event_type: str, data: dict[str, Any]) -> dict[str, Any]:
    """Format a report event as a Discord webhook payload with one embed."""

    status = str(data.get("status", ""))
    reporter = data.get("reporter") or "Anonymous"
    if event_type.startswith("profile_"):
        fields = [
            {"name": "Profile", "value": data.get("title") or "-"},
            {"name": "Status", "value": status.upper(), "inline": True},
            {"name": "Reporter", "value": reporter, "inline": True},
            {"name": "URL", "value": f"[View Profile]({data.get('url')})"},
        ]
    else:
        fields = [
            {"name": "Title", "value": data.get("title") or "-"},
            {"name": "Status", "value": status.upper(), "inline": True},
            {"name": "Reporter", "value": reporter, "inline": True},
        ]
        updated_by = data.get("updatedBy")
        if updated_by and updated_by != "Anonymous":
            fields.append({"name": "Updated by", "value": updated_by, "inline": True})
        fields.append({"name": "URL", "value": f"[View on ScribbleHub]({data.get('url')})"})

    return {
        "username": NOTIFIER_NAME,
        "avatar_url": NOTIFIER_AVATAR,
        "embeds": [
            {
                "title": _event_title(event_type),
                "color": STATUS_COLORS.get(status, DEFAULT_COLOR),
                "fields": fields,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "footer": {"text": FOOTER_TEXT},
            }
        ],
    }


class DiscordProvider:
    """Post messages to a single Discord webhook endpoint."""

    def __init__(self, endpoint: str, client: httpx.AsyncClient) -> None:
        self._endpoint = endpoint
        self._client = client

    async def send(self, payload: dict[str, Any]) -> None:
        try:
            response = await self._client.post(self._endpoint, json=payload)
        except httpx.HTTPError as exc:
            raise NotificationError(f"Webhook transport error: {exc}") from exc
        if not response.is_success:
            raise NotificationError(f"Webhook response {response.status_code}: {response.text}")


async def _deliver(webhook: Document, message: dict[str, Any], client: httpx.AsyncClient, secret_manager: SecretManager) -> bool:
    try:
        endpoint = secret_manager.decrypt(webhook["url"])
        await DiscordProvider(endpoint, client).send(message)
    except NotificationError as exc:
        logger.error("Webhook %s failed: %s", webhook.get("id"), exc)
        return False
    except Exception:  # noqa: BLE001
        # Unreadable records must not abort delivery to the other webhooks.
        logger.exception("Webhook %s could not be delivered", webhook.get("id"))
        return False
    return True


async def notify_webhooks(
    store: DocumentStore,
    secret_manager: SecretManager,
    event_type: str,
    data: dict[str, Any],
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Send ``event_type`` to every registered webhook concurrently.

    Failures are logged per endpoint and never raised. Returns the number of
    successful deliveries.
    """

    webhooks = await store.get(WEBHOOKS)
    if not webhooks:
        return 0

    message = build_discord_message(event_type, data)
    timeout = get_settings().webhook_timeout_seconds
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        results = await asyncio.gather(
            *(_deliver(webhook, message, client, secret_manager) for webhook in webhooks.values())
        )

    delivered = [webhook["id"] for webhook, ok in zip(webhooks.values(), results) if ok]
    if delivered:
        # Re-read so webhooks added or removed meanwhile are not clobbered.
        current = await store.get(WEBHOOKS)
        used_at = datetime.now(timezone.utc).isoformat()
        for webhook_id in delivered:
            if str(webhook_id) in current:
                current[str(webhook_id)]["lastUsed"] = used_at
        await store.set(WEBHOOKS, current)
    logger.info("Event %s delivered to %d/%d webhooks", event_type, len(delivered), len(webhooks))
    return len(delivered)


async def notify_report_event(
    store: DocumentStore,
    secret_manager: SecretManager,
    event_type: str,
    report: Document,
    updated_by: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Background-task entry point; never lets an error escape."""

    try:
        await notify_webhooks(
            store, secret_manager, event_type, {**report, "updatedBy": updated_by}, transport=transport
        )
    except Exception:  # noqa: BLE001
        logger.exception("Failed to dispatch %s notifications", event_type)
