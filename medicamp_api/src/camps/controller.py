# medicamp_api/src/camps/controller.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pymongo.database import Database

from ...config import MediCampSettings, get_settings
from ...database.db import get_database
from ...errors import ConflictError, NotFoundError, ValidationError
from ...utils.helperFunctions import parse_object_id, search_filter, serialize_document, serialize_documents
from ..registrations.store import RegistrationStore
from .schema import CampCreateRequest, CampUpdateRequest
from .store import CampStore

logger = logging.getLogger(__name__)


class CampController:
    def __init__(self, camps: CampStore, registrations: RegistrationStore, popular_limit: int = 6):
        self.camps = camps
        self.registrations = registrations
        self.popular_limit = popular_limit

    async def list_camps(self, search: Optional[str], sort_by: Optional[str]) -> List[Dict[str, Any]]:
        query = search_filter(search, ["campName"])
        return serialize_documents(self.camps.search(query, sort_by))

    async def get_camp(self, camp_id: str) -> Dict[str, Any]:
        camp = self.camps.get(parse_object_id(camp_id, "campId"))
        if camp is None:
            raise NotFoundError("Camp not found")
        return serialize_document(camp)

    async def popular_camps(self) -> List[Dict[str, Any]]:
        return serialize_documents(self.camps.most_popular(self.popular_limit))

    async def camps_by_organizer(self, email: str) -> List[Dict[str, Any]]:
        return serialize_documents(self.camps.by_organizer(email))

    async def add_camp(self, request: CampCreateRequest) -> Dict[str, Any]:
        inserted_id = self.camps.insert(request.to_document())
        logger.info("Camp %s created by %s", inserted_id, request.email)
        return {"insertedId": str(inserted_id)}

    async def update_camp(self, camp_id: str, request: CampUpdateRequest) -> Dict[str, Any]:
        fields = request.changed_fields()
        if not fields:
            raise ValidationError("Nothing to update")
        if not self.camps.update_fields(parse_object_id(camp_id, "campId"), fields):
            raise NotFoundError("Camp not found")
        return {"updated": sorted(fields)}

    async def delete_camp(self, camp_id: str) -> Dict[str, Any]:
        camp_oid = parse_object_id(camp_id, "campId")
        if self.camps.get(camp_oid) is None:
            raise NotFoundError("Camp not found")
        registered = self.registrations.count_for_camp(str(camp_oid))
        if registered:
            raise ConflictError(f"Camp still has {registered} registration(s)")
        self.camps.delete(camp_oid)
        logger.info("Camp %s deleted", camp_id)
        return {"deletedCount": 1}


def get_camp_controller(
    db: Database = Depends(get_database),
    settings: MediCampSettings = Depends(get_settings),
) -> CampController:
    return CampController(CampStore(db), RegistrationStore(db), popular_limit=settings.POPULAR_CAMPS_LIMIT)
