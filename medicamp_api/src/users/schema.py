from typing import Optional

from pydantic import BaseModel, EmailStr

from ..auth.schema import UserRole


class UserCreateRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    image: Optional[str] = None


class AdminCheckResponse(BaseModel):
    admin: bool


class UserRoleUpdateRequest(BaseModel):
    role: UserRole
