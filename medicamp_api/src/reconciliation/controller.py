# medicamp_api/src/reconciliation/controller.py
"""
Registration, payment and analytics reconciliation.

Keeps three collections consistent with each other:
- camps.participantCount equals the number of registrations for the camp
- registered_camps holds the authoritative confirmation and payment status
- payments holds one immutable record per paid registration, plus a
  confirmation mirror refreshed from the registration

Register, Cancel and RecordPayment run in one MongoDB transaction when the
deployment supports it. Without transactions the pair of writes is ordered so
that a failure can be compensated (Register) or healed by a retry
(RecordPayment).
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from ...config import MediCampSettings, get_settings
from ...database.db import get_database
from ...database.mongo_helper import run_in_transaction
from ...errors import ConflictError, NotFoundError, ValidationError
from ...utils.helperFunctions import (
    parse_object_id,
    search_filter,
    serialize_document,
    serialize_documents,
    utc_now,
)
from ..camps.store import CampStore
from ..payments.gateway import MAX_CHARGE_MINOR_UNITS, PaymentGateway, to_minor_units
from ..payments.store import PaymentStore
from ..registrations.schema import ConfirmationStatus, PaymentStatus
from ..registrations.store import SEARCH_FIELDS, RegistrationStore

logger = logging.getLogger(__name__)

# Camp fields copied onto a registration at the time it is made
DENORMALIZED_CAMP_FIELDS = ("campName", "campFees", "location", "healthcareProfessional", "dateTime")


class ReconciliationController:
    def __init__(
        self,
        camps: CampStore,
        registrations: RegistrationStore,
        payments: PaymentStore,
        client: Any,
        use_transactions: bool = True,
        gateway: Optional[PaymentGateway] = None,
        max_charge_minor: int = MAX_CHARGE_MINOR_UNITS,
    ):
        self.camps = camps
        self.registrations = registrations
        self.payments = payments
        self.client = client
        self.use_transactions = use_transactions
        self.gateway = gateway
        self.max_charge_minor = max_charge_minor

    @classmethod
    def from_database(cls, db: Database, settings: MediCampSettings,
                      gateway: Optional[PaymentGateway] = None) -> "ReconciliationController":
        return cls(
            camps=CampStore(db),
            registrations=RegistrationStore(db),
            payments=PaymentStore(db),
            client=db.client,
            use_transactions=settings.MONGODB_USE_TRANSACTIONS,
            gateway=gateway,
            max_charge_minor=settings.PAYMENT_MAX_CHARGE_MINOR_UNITS,
        )

    def _transaction(self, callback):
        return run_in_transaction(self.client, self.use_transactions, callback)

    # ------------------------------------------------------------------
    # Registration lifecycle
    # ------------------------------------------------------------------

    async def register(self, camp_id: str, participant_email: str,
                       participant_details: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a pending, unpaid registration and bump the camp counter"""
        camp_oid = parse_object_id(camp_id, "campId")
        camp_key = str(camp_oid)

        def _register(session):
            camp = self.camps.get(camp_oid, session=session)
            if camp is None:
                raise NotFoundError("Camp not found")
            if self.registrations.find_for(participant_email, camp_key, session=session):
                raise ConflictError("Participant is already registered for this camp")

            registration = {
                "campId": camp_key,
                **{field: camp.get(field) for field in DENORMALIZED_CAMP_FIELDS},
                "participantEmail": participant_email,
                **participant_details,
                "confirmationStatus": ConfirmationStatus.PENDING.value,
                "paymentStatus": PaymentStatus.UNPAID.value,
                "createdAt": utc_now(),
            }
            try:
                registration["_id"] = self.registrations.insert(registration, session=session)
            except DuplicateKeyError:
                raise ConflictError("Participant is already registered for this camp")

            try:
                incremented = self.camps.increment_participants(camp_oid, session=session)
            except PyMongoError:
                if session is None:
                    self._compensate_registration(registration["_id"])
                raise
            if not incremented:
                if session is None:
                    self._compensate_registration(registration["_id"])
                raise NotFoundError("Camp not found")
            return registration

        registration = self._transaction(_register)
        logger.info("Registered %s for camp %s", participant_email, camp_key)
        return serialize_document(registration)

    def _compensate_registration(self, registration_id) -> None:
        logger.warning("Counter update failed; removing registration %s", registration_id)
        self.registrations.delete(registration_id)

    async def get_registration(self, registration_id: str) -> Dict[str, Any]:
        registration = self.registrations.get(parse_object_id(registration_id, "registrationId"))
        if registration is None:
            raise NotFoundError("Registration not found")
        return serialize_document(registration)

    async def cancel(self, registration_id: str) -> None:
        """Delete a registration and release its seat on the camp counter"""
        registration_oid = parse_object_id(registration_id, "registrationId")

        def _cancel(session):
            registration = self.registrations.get(registration_oid, session=session)
            if registration is None or not self.registrations.delete(registration_oid, session=session):
                raise NotFoundError("Registration not found")
            self.camps.decrement_participants(parse_object_id(registration["campId"], "campId"), session=session)
            return registration

        registration = self._transaction(_cancel)
        logger.info("Cancelled registration %s of %s", registration_id, registration.get("participantEmail"))

    async def set_confirmation_status(self, participant_email: str, camp_id: str,
                                      status: ConfirmationStatus) -> None:
        camp_key = str(parse_object_id(camp_id, "campId"))
        try:
            status = ConfirmationStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown confirmation status: {status!r}")

        if not self.registrations.set_confirmation_status(participant_email, camp_key, status.value):
            raise NotFoundError("Registration not found")

        try:
            self.payments.refresh_confirmation_mirror(participant_email, camp_key, status.value)
        except PyMongoError as e:
            logger.warning(
                "Confirmation mirror refresh failed for %s / %s: %s", participant_email, camp_key, e
            )

    async def list_registrations(self, participant_email: Optional[str], search: Optional[str],
                                 page: int, per_page: int) -> Dict[str, Any]:
        query = search_filter(search, SEARCH_FIELDS)
        if participant_email is not None:
            query["participantEmail"] = participant_email
        items, total = self.registrations.page(query, page, per_page)
        return {"items": serialize_documents(items), "total": total, "page": page, "perPage": per_page}

    # ------------------------------------------------------------------
    # Payment linkage
    # ------------------------------------------------------------------

    async def charge_amount(self, fee: Any) -> str:
        amount = to_minor_units(fee, self.max_charge_minor)
        if self.gateway is None:
            raise RuntimeError("No payment gateway configured")
        return self.gateway.create_payment_intent(amount)

    async def record_payment(self, registration_id: str, amount: float, participant_email: str,
                             camp_id: str, transaction_id: Optional[str] = None) -> Dict[str, Any]:
        """Store the payment for a registration and mark it paid.

        Payments are keyed on registrationId: repeating the call returns the
        stored payment and only re-applies the paid flag.
        """
        registration_oid = parse_object_id(registration_id, "registrationId")
        registration_key = str(registration_oid)
        camp_key = str(parse_object_id(camp_id, "campId"))

        def _record(session):
            registration = self.registrations.get(registration_oid, session=session)
            if registration is None:
                raise NotFoundError("Registration not found")
            if registration.get("participantEmail") != participant_email or registration.get("campId") != camp_key:
                raise ValidationError("Payment does not match the registration")

            payment = self.payments.for_registration(registration_key, session=session)
            if payment is None:
                payment = {
                    "registrationId": registration_key,
                    "campId": camp_key,
                    "campName": registration.get("campName"),
                    "participantEmail": participant_email,
                    "amount": amount,
                    "transactionId": transaction_id,
                    "paymentStatus": PaymentStatus.PAID.value,
                    "confirmationStatus": registration.get("confirmationStatus", ConfirmationStatus.PENDING.value),
                    "createdAt": utc_now(),
                }
                try:
                    payment["_id"] = self.payments.insert(payment, session=session)
                except DuplicateKeyError:
                    if session is not None:
                        raise
                    payment = self.payments.for_registration(registration_key)
            else:
                logger.info("Payment for registration %s already recorded", registration_key)

            if registration.get("paymentStatus") != PaymentStatus.PAID.value:
                self.registrations.set_payment_status(registration_oid, PaymentStatus.PAID.value, session=session)
            return payment

        payment = self._transaction(_record)
        return serialize_document(payment)

    async def payment_history(self, participant_email: str, page: int, per_page: int) -> Dict[str, Any]:
        items, total = self.payments.history(participant_email, page, per_page)
        return {"items": serialize_documents(items), "total": total, "page": page, "perPage": per_page}

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    async def compute_participant_analytics(self, participant_email: str) -> List[Dict[str, Any]]:
        """Left join of a participant's registrations with their payments.

        Rows follow registration creation order. A registration without a
        payment reports unpaid with nothing paid.
        """
        registrations = self.registrations.for_participant(participant_email)
        camp_ids = [r["campId"] for r in registrations]
        payments = self.payments.for_participant_camps(participant_email, camp_ids)

        payment_by_camp: Dict[str, Dict[str, Any]] = {}
        for payment in payments:
            payment_by_camp.setdefault(payment["campId"], payment)

        rows = []
        for registration in registrations:
            payment = payment_by_camp.get(registration["campId"])
            rows.append({
                "campId": registration["campId"],
                "campName": registration.get("campName"),
                "campFees": registration.get("campFees") or 0,
                "confirmationStatus": registration.get("confirmationStatus", ConfirmationStatus.PENDING.value),
                "paymentStatus": payment.get("paymentStatus", PaymentStatus.PAID.value) if payment else PaymentStatus.UNPAID.value,
                "amountPaid": payment.get("amount", 0) if payment else 0,
            })
        return rows


def get_payment_gateway(settings: MediCampSettings = Depends(get_settings)) -> PaymentGateway:
    return PaymentGateway(currency=settings.PAYMENT_CURRENCY)


def get_reconciliation_controller(
    db: Database = Depends(get_database),
    settings: MediCampSettings = Depends(get_settings),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> ReconciliationController:
    return ReconciliationController.from_database(db, settings, gateway=gateway)
