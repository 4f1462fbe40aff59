# medicamp_api/src/payments/routes.py
from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from ...config import get_settings
from ...database.db import get_database
from ...middlewares.jwt_auth import ensure_self_or_admin, get_current_user
from ...utils.helperFunctions import path_email
from ..auth.schema import JWTClaims
from ..reconciliation.controller import ReconciliationController, get_reconciliation_controller
from .schema import PaymentIntentRequest, PaymentIntentResponse, PaymentRequest

router = APIRouter(tags=["Payments"])
settings = get_settings()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    _: JWTClaims = Depends(get_current_user),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    """Authorize a charge for a camp fee and hand the client secret to the browser"""
    client_secret = await controller.charge_amount(body.camp_fees)
    return PaymentIntentResponse(client_secret=client_secret)


@router.post("/payments", status_code=status.HTTP_201_CREATED)
async def record_payment(
    body: PaymentRequest,
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    ensure_self_or_admin(db, current_user, body.participant_email)
    return await controller.record_payment(
        registration_id=body.registration_id,
        amount=body.amount,
        participant_email=body.participant_email,
        camp_id=body.camp_id,
        transaction_id=body.transaction_id,
    )


@router.get("/payments/{email}")
async def payment_history(
    email: str = Depends(path_email),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, alias="perPage"),
    current_user: JWTClaims = Depends(get_current_user),
    db: Database = Depends(get_database),
    controller: ReconciliationController = Depends(get_reconciliation_controller),
):
    ensure_self_or_admin(db, current_user, email)
    return await controller.payment_history(email, page, per_page)
