from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fieldtasks.schemas.auth import SignupIn, LoginIn, TokenOut
from fieldtasks.schemas.user import UserOut
from fieldtasks.db.session import get_db
from fieldtasks.core.security import get_auth_service
from fieldtasks.core.response_builders import build_user_response

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupIn, db: AsyncSession = Depends(get_db), auth_service=Depends(get_auth_service)):
    user = await auth_service.signup(db, payload)
    return build_user_response(user)


@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db), auth_service=Depends(get_auth_service)):
    token, user = await auth_service.login(db, payload)
    return TokenOut(token=token, user=build_user_response(user))
