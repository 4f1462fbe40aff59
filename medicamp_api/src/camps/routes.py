# medicamp_api/src/camps/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...errors import ForbiddenError
from ...middlewares.jwt_auth import admin_only
from ...utils.helperFunctions import path_email
from ..auth.schema import JWTClaims
from .controller import CampController, get_camp_controller
from .schema import CampCreateRequest, CampUpdateRequest

router = APIRouter(tags=["Camps"])


@router.get("/all-camps")
async def all_camps(
    search: Optional[str] = Query(None, description="Case-insensitive match on camp name"),
    sort_by: Optional[str] = Query(None, alias="sortBy", pattern="^(most-registered|camp-fees|alphabetical)$"),
    controller: CampController = Depends(get_camp_controller),
):
    return await controller.list_camps(search, sort_by)


@router.get("/camp/{camp_id}")
async def camp_details(camp_id: str, controller: CampController = Depends(get_camp_controller)):
    return await controller.get_camp(camp_id)


@router.get("/popular-camps")
async def popular_camps(controller: CampController = Depends(get_camp_controller)):
    return await controller.popular_camps()


@router.post("/add-camp", status_code=status.HTTP_201_CREATED)
async def add_camp(
    body: CampCreateRequest,
    current_user: JWTClaims = Depends(admin_only),
    controller: CampController = Depends(get_camp_controller),
):
    if body.email is None:
        body.email = current_user.email
    return await controller.add_camp(body)


@router.get("/camps/organizer/{email}")
async def organizer_camps(
    email: str = Depends(path_email),
    current_user: JWTClaims = Depends(admin_only),
    controller: CampController = Depends(get_camp_controller),
):
    if current_user.email != email:
        raise ForbiddenError()
    return await controller.camps_by_organizer(email)


@router.patch("/update-camp/{camp_id}")
async def update_camp(
    camp_id: str,
    body: CampUpdateRequest,
    _: JWTClaims = Depends(admin_only),
    controller: CampController = Depends(get_camp_controller),
):
    return await controller.update_camp(camp_id, body)


@router.delete("/delete-camp/{camp_id}")
async def delete_camp(
    camp_id: str,
    _: JWTClaims = Depends(admin_only),
    controller: CampController = Depends(get_camp_controller),
):
    return await controller.delete_camp(camp_id)
