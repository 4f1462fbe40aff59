from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from ...config import get_settings
from ...database.db import get_database
from ...errors import ForbiddenError
from ...middlewares.jwt_auth import admin_only, get_current_user, is_admin
from ...utils.helperFunctions import path_email
from ..auth.schema import JWTClaims
from .controller import create_user_controller, list_users_controller, update_user_role_controller
from .schema import AdminCheckResponse, UserCreateRequest, UserRoleUpdateRequest

router = APIRouter(prefix="/users", tags=["Users"])
settings = get_settings()


@router.post("")
async def create_user(body: UserCreateRequest, db: Database = Depends(get_database)):
    return await create_user_controller(db, body)


@router.get("")
async def list_users(
    search: Optional[str] = Query(None, description="Search by email or name"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, alias="perPage"),
    _: JWTClaims = Depends(admin_only),
    db: Database = Depends(get_database),
):
    return await list_users_controller(db, search=search, page=page, per_page=per_page)


@router.get("/admin/{email}", response_model=AdminCheckResponse)
async def check_admin(
    email: str = Depends(path_email),
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
):
    if current_user.email != email:
        raise ForbiddenError()
    return AdminCheckResponse(admin=is_admin(db, email))


@router.patch("/{email}/role")
async def update_user_role(
    body: UserRoleUpdateRequest,
    email: str = Depends(path_email),
    _: JWTClaims = Depends(admin_only),
    db: Database = Depends(get_database),
):
    return await update_user_role_controller(db, email=email, role=body.role)
