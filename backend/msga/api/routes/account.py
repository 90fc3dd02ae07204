"""Self-service endpoints for the signed-in user's own account."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from msga.core.dependencies import Claims, get_current_user, get_store
from msga.db.store import DocumentStore
from msga.schemas.user import DeletionRequestCreate, MessageResponse, PasswordChange, ProfileRead
from msga.services import users as user_service

router = APIRouter(prefix="/user/profile", tags=["account"])


@router.get("", response_model=ProfileRead)
async def get_profile(
    store: DocumentStore = Depends(get_store),
    current_user: Claims = Depends(get_current_user),
) -> ProfileRead:
    return ProfileRead.model_validate(await user_service.get_profile(store, current_user["id"]))


@router.patch("/password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    store: DocumentStore = Depends(get_store),
    current_user: Claims = Depends(get_current_user),
) -> MessageResponse:
    await user_service.change_password(store, current_user["id"], payload.old_password, payload.new_password)
    return MessageResponse(message="Password updated successfully.")


@router.post("/delete-request", response_model=MessageResponse)
async def request_deletion(
    payload: DeletionRequestCreate,
    store: DocumentStore = Depends(get_store),
    current_user: Claims = Depends(get_current_user),
) -> MessageResponse:
    await user_service.request_deletion(store, current_user["id"], payload.reason)
    return MessageResponse(message="Your account deletion request has been submitted.")
