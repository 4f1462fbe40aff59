from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CampCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    camp_name: str = Field(..., alias="campName", min_length=1)
    camp_fees: float = Field(..., alias="campFees", ge=0)
    date_time: str = Field(..., alias="dateTime")
    location: str
    healthcare_professional: str = Field(..., alias="healthcareProfessional")
    description: Optional[str] = None
    image: Optional[str] = None
    email: Optional[EmailStr] = None

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True)
        # New camps always start empty
        doc["participantCount"] = 0
        return doc


class CampUpdateRequest(BaseModel):
    """Editable camp fields; the participant counter is deliberately absent"""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    camp_name: Optional[str] = Field(None, alias="campName", min_length=1)
    camp_fees: Optional[float] = Field(None, alias="campFees", ge=0)
    date_time: Optional[str] = Field(None, alias="dateTime")
    location: Optional[str] = None
    healthcare_professional: Optional[str] = Field(None, alias="healthcareProfessional")
    description: Optional[str] = None
    image: Optional[str] = None

    def changed_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
