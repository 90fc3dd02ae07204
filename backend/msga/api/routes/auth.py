"""Authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from msga.core.dependencies import Claims, get_current_user, get_store, get_token_service
from msga.core.security import TokenService
from msga.db.store import DocumentStore
from msga.schemas.auth import LoginRequest, LogoutResponse, RegisterRequest, TokenResponse
from msga.schemas.user import UserRead
from msga.services import users as user_service

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    store: DocumentStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
) -> TokenResponse:
    result = await user_service.login(store, tokens, payload.username, payload.password)
    return TokenResponse.model_validate(result)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(payload: RegisterRequest, store: DocumentStore = Depends(get_store)) -> UserRead:
    user = await user_service.register_user(store, payload.username, payload.sh_profile_url, payload.password)
    return UserRead.model_validate(user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    store: DocumentStore = Depends(get_store),
    current_user: Claims = Depends(get_current_user),
) -> LogoutResponse:
    await user_service.revoke_token(store, current_user["jti"], current_user["exp"])
    return LogoutResponse()
