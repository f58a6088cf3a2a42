from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from fieldtasks.db.session import get_db
from fieldtasks.schemas.user import UserOut, UserUpdate, ProfileUpdate, ProfileOut, RoleUpdate
from fieldtasks.schemas.auth import TokenClaims
from fieldtasks.core.enums import UserRole
from fieldtasks.core.security import get_current_claims, require_manager
from fieldtasks.core.response_builders import build_user_response, build_user_response_list
from fieldtasks.services import users as user_service

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/technicians", response_model=List[UserOut])
async def list_technicians(db: AsyncSession = Depends(get_db), claims=Depends(get_current_claims)):
    users = await user_service.list_users_by_role(db, UserRole.TECHNICIAN)
    return build_user_response_list(users)


@router.get("/users/managers", response_model=List[UserOut])
async def list_managers(db: AsyncSession = Depends(get_db), claims=Depends(require_manager)):
    users = await user_service.list_users_by_role(db, UserRole.MANAGER)
    return build_user_response_list(users)


# must be registered before /users/{user_id}
@router.put("/users/profile", response_model=ProfileOut)
async def update_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    claims: TokenClaims = Depends(get_current_claims)
):
    user = await user_service.update_profile(db, claims.user_id, payload)
    return ProfileOut(user=build_user_response(user))


@router.put("/users/{user_id}", response_class=PlainTextResponse)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    claims=Depends(require_manager)
):
    await user_service.update_user(db, user_id, payload)
    return f"User {user_id} updated"


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db), claims=Depends(require_manager)):
    await user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/users/{user_id}/role", response_class=PlainTextResponse)
async def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    claims=Depends(require_manager)
):
    await user_service.update_user_role(db, user_id, payload.role)
    return f"User {user_id} role updated"
