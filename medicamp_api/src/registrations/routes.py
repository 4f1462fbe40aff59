# medicamp_api/src/registrations/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from ...config import get_settings
from ...database.db import get_database
from ...middlewares.jwt_auth import admin_only, ensure_self_or_admin, get_current_user
from ...utils.helperFunctions import path_email
from ..auth.schema import JWTClaims
from ..reconciliation.controller import ReconciliationController, get_reconciliation_controller
from .schema import ConfirmationUpdateRequest, RegistrationPage, RegistrationRequest

router = APIRouter(prefix="/registered-camps", tags=["Registrations"])
settings = get_settings()


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_for_camp(
    body: RegistrationRequest,
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    """Join a camp: creates the registration and raises the camp's participant count"""
    ensure_self_or_admin(db, current_user, body.participant_email)
    return await controller.register(
        camp_id=body.camp_id,
        participant_email=body.participant_email,
        participant_details=body.participant_details(),
    )


@router.get("", response_model=RegistrationPage)
async def list_all_registrations(
    search: Optional[str] = Query(None, description="Search camp name, location or professional"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, alias="perPage"),
    _: JWTClaims = Depends(admin_only),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    return await controller.list_registrations(None, search, page, per_page)


@router.get("/{email}", response_model=RegistrationPage)
async def list_participant_registrations(
    email: str = Depends(path_email),
    search: Optional[str] = Query(None, description="Search camp name, location or professional"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, alias="perPage"),
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    ensure_self_or_admin(db, current_user, email)
    return await controller.list_registrations(email, search, page, per_page)


@router.patch("/{email}")
async def update_confirmation_status(
    body: ConfirmationUpdateRequest,
    email: str = Depends(path_email),
    _: JWTClaims = Depends(admin_only),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    """Admin review: set the confirmation status of a participant's registration"""
    await controller.set_confirmation_status(email, body.camp_id, body.confirmation_status)
    return {"success": True, "confirmationStatus": body.confirmation_status.value}


@router.delete("/{registration_id}")
async def cancel_registration(
    registration_id: str,
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    registration = await controller.get_registration(registration_id)
    ensure_self_or_admin(db, current_user, registration["participantEmail"])
    await controller.cancel(registration_id)
    return {"deletedCount": 1}
