import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from pymongo.database import Database

from ..config import MediCampSettings, get_settings
from ..database.db import get_database
from ..errors import ForbiddenError, UnauthorizedError
from ..src.auth.schema import JWTClaims, UserRole

logger = logging.getLogger(__name__)


class JWTAuthController:
    """Signs and verifies the shared-secret access token and its cookie"""

    def __init__(self, settings: Optional[MediCampSettings] = None):
        self.settings = settings or get_settings()
        self.secret = self.settings.ACCESS_TOKEN_SECRET
        self.algorithm = self.settings.JWT_ALGORITHM
        self.expire_days = self.settings.JWT_EXPIRE_DAYS
        self.cookie_name = self.settings.JWT_COOKIE_NAME

    def create_access_token(self, payload: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        claims = dict(payload)
        claims["iat"] = now
        claims["exp"] = now + timedelta(days=self.expire_days)
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> JWTClaims:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("Rejected access token: %s", e)
            raise UnauthorizedError()

        if not payload.get("email"):
            raise UnauthorizedError()
        return JWTClaims(
            email=payload["email"],
            exp=payload["exp"],
            iat=payload["iat"],
        )

    def set_auth_cookie(self, response: Response, token: str) -> None:
        production = self.settings.is_production
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            httponly=True,
            secure=production,
            samesite="none" if production else "strict",
            max_age=self.expire_days * 24 * 60 * 60,
            path="/",
        )

    def clear_auth_cookie(self, response: Response) -> None:
        production = self.settings.is_production
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            secure=production,
            httponly=True,
            samesite="none" if production else "strict",
        )

    def get_current_user(self, request: Request) -> JWTClaims:
        """Get current user from the Authorization header or the token cookie"""
        access_token = None
        auth_header = request.headers.get("Authorization")
        if auth_header:
            scheme, _, value = auth_header.partition(" ")
            if scheme.lower() == "bearer" and value:
                access_token = value.strip()
        if not access_token:
            access_token = request.cookies.get(self.cookie_name)

        if not access_token:
            raise UnauthorizedError()

        return self.verify_access_token(access_token)


def get_jwt_auth() -> JWTAuthController:
    return JWTAuthController()


def get_current_user(
    request: Request,
    jwt_auth: JWTAuthController = Depends(get_jwt_auth),
) -> JWTClaims:
    return jwt_auth.get_current_user(request)


def is_admin(db: Database, email: str) -> bool:
    user = db.users.find_one({"email": email})
    return bool(user) and user.get("role") == UserRole.ADMIN.value


def admin_only(
    user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
) -> JWTClaims:
    if not is_admin(db, user.email):
        raise ForbiddenError("Admin access required")
    return user


def ensure_self_or_admin(db: Database, user: JWTClaims, email: str) -> None:
    """Participants may only act on their own email; admins on anyone's"""
    if user.email == email:
        return
    if not is_admin(db, user.email):
        raise ForbiddenError()
