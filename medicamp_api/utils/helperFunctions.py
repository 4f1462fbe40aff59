# medicamp_api/utils/helperFunctions.py
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Path
from pydantic import validate_email

from ..errors import ValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_object_id(value: str, field: str = "id") -> ObjectId:
    """Parse a hex string into an ObjectId, raising a 400 on malformed input"""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {field}: {value!r}")


def serialize_document(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return a JSON-friendly copy of a Mongo document (ObjectIds become strings)"""
    if doc is None:
        return None
    out: Dict[str, Any] = {}
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            out[key] = str(value)
        elif isinstance(value, datetime):
            out[key] = value.isoformat()
        else:
            out[key] = value
    return out


def serialize_documents(docs) -> List[Dict[str, Any]]:
    return [serialize_document(d) for d in docs]


def search_filter(search: Optional[str], fields: List[str]) -> Dict[str, Any]:
    """Case-insensitive substring match over `fields`; empty search matches all"""
    if not search:
        return {}
    pattern = re.escape(search.strip())
    return {"$or": [{f: {"$regex": pattern, "$options": "i"}} for f in fields]}


def page_window(page: int, per_page: int) -> Dict[str, int]:
    page = max(page, 1)
    return {"skip": (page - 1) * per_page, "limit": per_page}


def normalize_email(value: str) -> str:
    """Normalise an address the way `EmailStr` fields do (lower-cased domain)"""
    try:
        return validate_email(value.strip())[1]
    except ValueError:
        raise ValidationError(f"Invalid email: {value!r}")


def path_email(email: str = Path(..., description="Participant email")) -> str:
    """Dependency for `{email}` path segments, so they compare equal to stored emails"""
    return normalize_email(email)
