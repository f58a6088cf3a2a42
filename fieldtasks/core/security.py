from datetime import datetime, timezone, timedelta
from functools import lru_cache
from jose import jwt
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext
from fieldtasks.core.config import Settings
from fieldtasks.core.enums import UserRole
from fieldtasks.schemas.auth import TokenClaims

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

MAX_BCRYPT_BYTES = 72  # bcrypt ignores input past this length

# verification reads the cost factor from the stored hash
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@lru_cache
def get_pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, rounds: int = 10) -> str:
    return get_pwd_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(subject: str, role: str, settings: Settings, expires_minutes: int | None = None) -> str:
    expires = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire_dt = datetime.now(timezone.utc) + timedelta(minutes=expires)
    to_encode = {"sub": str(subject), "role": str(role), "exp": expire_dt}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    """Verify signature and expiry; raises jose.JWTError on any failure."""
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require_exp": True, "require_sub": True},
    )


def get_auth_service(request: Request):
    return request.app.state.auth_service


async def get_current_claims(
    token: str = Depends(oauth2_scheme),
    auth_service=Depends(get_auth_service),
) -> TokenClaims:
    return auth_service.authorize(token)


async def require_manager(
    token: str = Depends(oauth2_scheme),
    auth_service=Depends(get_auth_service),
) -> TokenClaims:
    return auth_service.authorize(token, UserRole.MANAGER)
