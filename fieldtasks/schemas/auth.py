from pydantic import BaseModel
from fieldtasks.core.enums import UserRole
from fieldtasks.schemas.user import UserOut


class SignupIn(BaseModel):
    email: str
    password: str
    name: str
    role: UserRole = UserRole.TECHNICIAN


class LoginIn(BaseModel):
    email: str
    password: str


class TokenOut(BaseModel):
    token: str
    user: UserOut


class TokenClaims(BaseModel):
    user_id: int
    role: UserRole
