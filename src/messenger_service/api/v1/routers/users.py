from __future__ import annotations

from fastapi import APIRouter

from messenger_service.api.deps import CurrentPrincipal, UoWDep
from messenger_service.api.v1.schemas.user import UpdateProfileRequest, UserResponse
from messenger_service.application.dto.user import ProfileUpdateDTO
from messenger_service.services import user_service

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[UserResponse]:
    users = await user_service.list_users(uow)
    return [UserResponse.model_validate(u, from_attributes=True) for u in users]


@router.get("/me", response_model=UserResponse)
async def get_me(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UserResponse:
    user = await user_service.get_user(principal.user_id, uow)
    return UserResponse.model_validate(user, from_attributes=True)


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: UpdateProfileRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UserResponse:
    user = await user_service.update_profile(
        principal.user_id,
        ProfileUpdateDTO(**body.model_dump()),
        uow,
    )
    return UserResponse.model_validate(user, from_attributes=True)
