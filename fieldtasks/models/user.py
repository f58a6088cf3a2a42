from sqlalchemy import Column, String, Enum
from fieldtasks.models.base import BaseModel
from fieldtasks.core.enums import UserRole


class User(BaseModel):
    __tablename__ = "users"
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column("password", String(255), nullable=False)
    name = Column(String(120), nullable=False)
    role = Column(Enum(UserRole, native_enum=False, length=20), nullable=False, default=UserRole.TECHNICIAN)
