# medicamp_api/src/camps/store.py
"""
Camp Store: camp documents and the participant counter.

The counter is only ever moved with single-document `$inc` updates so
concurrent registrations cannot lose increments.
"""
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.client_session import ClientSession
from pymongo.database import Database

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "most-registered": ("participantCount", DESCENDING),
    "camp-fees": ("campFees", ASCENDING),
    "alphabetical": ("campName", ASCENDING),
}


class CampStore:
    def __init__(self, db: Database):
        self.collection = db.camps

    def get(self, camp_id: ObjectId, session: Optional[ClientSession] = None) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": camp_id}, session=session)

    def insert(self, camp: Dict[str, Any]) -> ObjectId:
        return self.collection.insert_one(camp).inserted_id

    def update_fields(self, camp_id: ObjectId, fields: Dict[str, Any]) -> bool:
        result = self.collection.update_one({"_id": camp_id}, {"$set": fields})
        return result.matched_count == 1

    def delete(self, camp_id: ObjectId) -> bool:
        return self.collection.delete_one({"_id": camp_id}).deleted_count == 1

    def search(self, query: Dict[str, Any], sort_by: Optional[str] = None) -> List[Dict[str, Any]]:
        cursor = self.collection.find(query)
        if sort_by in SORT_OPTIONS:
            cursor = cursor.sort(*SORT_OPTIONS[sort_by])
        return list(cursor)

    def most_popular(self, limit: int) -> List[Dict[str, Any]]:
        return list(self.collection.find({}).sort("participantCount", DESCENDING).limit(limit))

    def by_organizer(self, email: str) -> List[Dict[str, Any]]:
        return list(self.collection.find({"email": email}))

    def increment_participants(self, camp_id: ObjectId, session: Optional[ClientSession] = None) -> bool:
        result = self.collection.update_one(
            {"_id": camp_id}, {"$inc": {"participantCount": 1}}, session=session
        )
        return result.matched_count == 1

    def decrement_participants(self, camp_id: ObjectId, session: Optional[ClientSession] = None) -> bool:
        """Decrement unless already at zero. Returns False when nothing moved."""
        result = self.collection.update_one(
            {"_id": camp_id, "participantCount": {"$gt": 0}},
            {"$inc": {"participantCount": -1}},
            session=session,
        )
        if result.matched_count == 1:
            return True

        if self.collection.find_one({"_id": camp_id}, session=session) is None:
            logger.warning("Camp %s vanished before its counter could be decremented", camp_id)
        else:
            logger.warning("Participant counter of camp %s already at zero; left unchanged", camp_id)
        return False
