"""Webhook registration endpoints (admin only)."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from msga.core.dependencies import Claims, get_secret_manager, get_store, require_admin
from msga.core.security import SecretManager
from msga.db.store import DocumentStore
from msga.schemas.user import MessageResponse
from msga.schemas.webhook import WebhookCreate, WebhookRead
from msga.services import webhooks as webhook_service

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.get("", response_model=list[WebhookRead])
async def list_webhooks(
    store: DocumentStore = Depends(get_store),
    secret_manager: SecretManager = Depends(get_secret_manager),
    _: Claims = Depends(require_admin),
) -> list[WebhookRead]:
    webhooks = await webhook_service.list_webhooks(store, secret_manager)
    return [WebhookRead.model_validate(item) for item in webhooks]


@router.post("", response_model=WebhookRead, status_code=status.HTTP_201_CREATED)
async def create_webhook(
    payload: WebhookCreate,
    store: DocumentStore = Depends(get_store),
    secret_manager: SecretManager = Depends(get_secret_manager),
    current_user: Claims = Depends(require_admin),
) -> WebhookRead:
    webhook = await webhook_service.create_webhook(
        store, secret_manager, payload.url, payload.name, current_user["username"]
    )
    return WebhookRead.model_validate(webhook)


@router.delete("/{webhook_id}", response_model=MessageResponse)
async def delete_webhook(
    webhook_id: int,
    store: DocumentStore = Depends(get_store),
    _: Claims = Depends(require_admin),
) -> MessageResponse:
    await webhook_service.delete_webhook(store, webhook_id)
    return MessageResponse(message="Webhook deleted.")
