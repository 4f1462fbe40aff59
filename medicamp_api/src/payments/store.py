# medicamp_api/src/payments/store.py
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING
from pymongo.client_session import ClientSession
from pymongo.database import Database

from ...utils.helperFunctions import page_window


class PaymentStore:
    """Payments are written once; only the confirmation mirror is ever refreshed"""

    def __init__(self, db: Database):
        self.collection = db.payments

    def for_registration(self, registration_id: str,
                         session: Optional[ClientSession] = None) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"registrationId": registration_id}, session=session)

    def insert(self, payment: Dict[str, Any], session: Optional[ClientSession] = None):
        return self.collection.insert_one(payment, session=session).inserted_id

    def refresh_confirmation_mirror(self, participant_email: str, camp_id: str, confirmation_status: str) -> int:
        result = self.collection.update_many(
            {"participantEmail": participant_email, "campId": camp_id},
            {"$set": {"confirmationStatus": confirmation_status}},
        )
        return result.modified_count

    def for_participant_camps(self, participant_email: str, camp_ids: List[str]) -> List[Dict[str, Any]]:
        if not camp_ids:
            return []
        return list(self.collection.find({"participantEmail": participant_email, "campId": {"$in": camp_ids}}))

    def history(self, participant_email: str, page: int, per_page: int) -> Tuple[List[Dict[str, Any]], int]:
        query = {"participantEmail": participant_email}
        window = page_window(page, per_page)
        total = self.collection.count_documents(query)
        cursor = (
            self.collection.find(query)
            .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            .skip(window["skip"])
            .limit(window["limit"])
        )
        return list(cursor), total
