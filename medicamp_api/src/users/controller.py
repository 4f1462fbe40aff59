import logging
from typing import Any, Dict, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ...errors import NotFoundError
from ...utils.helperFunctions import page_window, search_filter, serialize_documents, utc_now
from ..auth.schema import UserRole
from .schema import UserCreateRequest

logger = logging.getLogger(__name__)

ALREADY_EXISTS = {"message": "user already exists", "insertedId": None}


async def create_user_controller(db: Database, request: UserCreateRequest) -> Dict[str, Any]:
    """Insert the user unless the email is already known"""
    if db.users.find_one({"email": request.email}):
        return dict(ALREADY_EXISTS)

    doc = {
        "email": request.email,
        "name": request.name,
        "image": request.image,
        "role": UserRole.PARTICIPANT.value,
        "createdAt": utc_now(),
    }
    try:
        inserted_id = db.users.insert_one(doc).inserted_id
    except DuplicateKeyError:
        return dict(ALREADY_EXISTS)
    logger.info("New user %s", request.email)
    return {"acknowledged": True, "insertedId": str(inserted_id)}


async def list_users_controller(db: Database, *, search: Optional[str], page: int, per_page: int) -> Dict[str, Any]:
    filt = search_filter(search, ["email", "name"])
    window = page_window(page, per_page)
    total = db.users.count_documents(filt)
    users = list(db.users.find(filt).sort("email", 1).skip(window["skip"]).limit(window["limit"]))
    return {"items": serialize_documents(users), "total": total, "page": page, "perPage": per_page}


async def update_user_role_controller(db: Database, *, email: str, role: UserRole) -> Dict[str, Any]:
    result = db.users.update_one({"email": email}, {"$set": {"role": role.value}})
    if result.matched_count == 0:
        raise NotFoundError("User not found")
    logger.info("Role of %s set to %s", email, role.value)
    return {"email": email, "role": role.value}
