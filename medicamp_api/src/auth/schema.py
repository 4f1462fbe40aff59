from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr


class UserRole(str, Enum):
    ADMIN = "admin"
    PARTICIPANT = "participant"


class TokenRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = None


class TokenResponse(BaseModel):
    success: bool = True
    token: str


class JWTClaims(BaseModel):
    email: str
    exp: datetime
    iat: datetime
