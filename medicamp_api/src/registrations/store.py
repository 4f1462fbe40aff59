# medicamp_api/src/registrations/store.py
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.client_session import ClientSession
from pymongo.database import Database

from ...utils.helperFunctions import page_window

SEARCH_FIELDS = ["campName", "location", "healthcareProfessional"]


class RegistrationStore:
    def __init__(self, db: Database):
        self.collection = db.registered_camps

    def get(self, registration_id: ObjectId, session: Optional[ClientSession] = None) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": registration_id}, session=session)

    def find_for(self, participant_email: str, camp_id: str,
                 session: Optional[ClientSession] = None) -> Optional[Dict[str, Any]]:
        return self.collection.find_one(
            {"participantEmail": participant_email, "campId": camp_id}, session=session
        )

    def insert(self, registration: Dict[str, Any], session: Optional[ClientSession] = None) -> ObjectId:
        return self.collection.insert_one(registration, session=session).inserted_id

    def delete(self, registration_id: ObjectId, session: Optional[ClientSession] = None) -> bool:
        return self.collection.delete_one({"_id": registration_id}, session=session).deleted_count == 1

    def set_payment_status(self, registration_id: ObjectId, payment_status: str,
                           session: Optional[ClientSession] = None) -> bool:
        result = self.collection.update_one(
            {"_id": registration_id}, {"$set": {"paymentStatus": payment_status}}, session=session
        )
        return result.matched_count == 1

    def set_confirmation_status(self, participant_email: str, camp_id: str, confirmation_status: str) -> bool:
        result = self.collection.update_one(
            {"participantEmail": participant_email, "campId": camp_id},
            {"$set": {"confirmationStatus": confirmation_status}},
        )
        return result.matched_count == 1

    def count_for_camp(self, camp_id: str) -> int:
        return self.collection.count_documents({"campId": camp_id})

    def for_participant(self, participant_email: str) -> List[Dict[str, Any]]:
        """All registrations of a participant, oldest first"""
        cursor = self.collection.find({"participantEmail": participant_email}).sort(
            [("createdAt", ASCENDING), ("_id", ASCENDING)]
        )
        return list(cursor)

    def page(self, query: Dict[str, Any], page: int, per_page: int) -> Tuple[List[Dict[str, Any]], int]:
        window = page_window(page, per_page)
        total = self.collection.count_documents(query)
        cursor = (
            self.collection.find(query)
            .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            .skip(window["skip"])
            .limit(window["limit"])
        )
        return list(cursor), total
