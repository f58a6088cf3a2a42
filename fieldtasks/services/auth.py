import logging
from typing import Optional

from jose import JWTError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fieldtasks.core.config import Settings
from fieldtasks.core.enums import UserRole
from fieldtasks.core.errors import BadRequest, Conflict, Forbidden, Internal, Unauthorized
from fieldtasks.core.security import (
    MAX_BCRYPT_BYTES,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from fieldtasks.models.user import User
from fieldtasks.schemas.auth import LoginIn, SignupIn, TokenClaims

logger = logging.getLogger(__name__)


class AuthService:
    """Password hashing, token issuance and role checks.

    Holds the immutable process settings (signing key, token lifetime, bcrypt
    cost) handed over by the app factory; no other state.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    async def signup(self, db: AsyncSession, payload: SignupIn) -> User:
        if len(payload.password.encode("utf-8")) > MAX_BCRYPT_BYTES:
            raise BadRequest(f"Password too long. Max {MAX_BCRYPT_BYTES} bytes allowed.")

        user = User(
            email=payload.email,
            password_hash=hash_password(payload.password, self.settings.BCRYPT_ROUNDS),
            name=payload.name,
            role=payload.role,
        )
        db.add(user)
        try:
            await db.commit()
            await db.refresh(user)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning(f"Signup rejected for {payload.email}: {e}")
            raise Conflict("User already exists or DB error")

        logger.info(f"User {user.id} signed up with role {user.role}")
        return user

    async def login(self, db: AsyncSession, payload: LoginIn) -> tuple[str, User]:
        try:
            res = await db.execute(select(User).where(User.email == payload.email))
            user = res.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Login lookup failed for {payload.email}: {e}")
            raise Internal()

        if not user or not verify_password(payload.password, user.password_hash):
            raise Unauthorized("Invalid credentials")

        token = create_access_token(str(user.id), user.role, self.settings)
        logger.info(f"User {user.id} logged in")
        return token, user

    def authorize(self, token: str, required_role: Optional[UserRole] = None) -> TokenClaims:
        try:
            payload = decode_access_token(token, self.settings)
            claims = TokenClaims(user_id=int(payload.get("sub")), role=payload.get("role"))
        except (JWTError, TypeError, ValueError):
            raise Unauthorized("Invalid token")

        if required_role is not None and claims.role != required_role:
            raise Forbidden(f"{required_role} role required")
        return claims
