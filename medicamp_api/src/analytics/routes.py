from typing import List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from ...database.db import get_database
from ...middlewares.jwt_auth import ensure_self_or_admin, get_current_user
from ...utils.helperFunctions import path_email
from ..auth.schema import JWTClaims
from ..reconciliation.controller import ReconciliationController, get_reconciliation_controller
from .schema import ParticipantCampAnalytics

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/{email}", response_model=List[ParticipantCampAnalytics])
async def participant_analytics(
    email: str = Depends(path_email),
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    """Per-camp fees and payments for one participant, in registration order"""
    ensure_self_or_admin(db, current_user, email)
    return await controller.compute_participant_analytics(email)
