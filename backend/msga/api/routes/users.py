"""Admin user management endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from msga.core.dependencies import Claims, get_store, require_admin
from msga.db.store import DocumentStore
from msga.schemas.user import DeletionRequestRead, UserApprovalUpdate, UserDeleteResponse, UserRead
from msga.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(
    store: DocumentStore = Depends(get_store),
    _: Claims = Depends(require_admin),
) -> list[UserRead]:
    return [UserRead.model_validate(user) for user in await user_service.list_users(store)]


@router.get("/deletion-requests", response_model=list[DeletionRequestRead])
async def list_deletion_requests(
    store: DocumentStore = Depends(get_store),
    _: Claims = Depends(require_admin),
) -> list[DeletionRequestRead]:
    requests = await user_service.list_deletion_requests(store)
    return [DeletionRequestRead.model_validate(item) for item in requests]


@router.put("/{user_id}", response_model=UserRead)
async def update_user_approval(
    user_id: int,
    payload: UserApprovalUpdate,
    store: DocumentStore = Depends(get_store),
    _: Claims = Depends(require_admin),
) -> UserRead:
    user = await user_service.set_user_approval(store, user_id, payload.approved)
    return UserRead.model_validate(user)


@router.delete("/{user_id}", response_model=UserDeleteResponse)
async def delete_user(
    user_id: int,
    store: DocumentStore = Depends(get_store),
    current_user: Claims = Depends(require_admin),
) -> UserDeleteResponse:
    result = await user_service.delete_user(store, user_id, current_user)
    return UserDeleteResponse.model_validate(result)
