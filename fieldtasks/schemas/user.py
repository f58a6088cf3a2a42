from pydantic import BaseModel
from fieldtasks.core.enums import UserRole


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: UserRole


class UserUpdate(BaseModel):
    name: str
    email: str
    role: UserRole


class ProfileUpdate(BaseModel):
    name: str
    email: str


class RoleUpdate(BaseModel):
    role: UserRole


class ProfileOut(BaseModel):
    user: UserOut
