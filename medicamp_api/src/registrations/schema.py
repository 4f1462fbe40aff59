from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ConfirmationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class RegistrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    camp_id: str = Field(..., alias="campId", min_length=1)
    participant_email: EmailStr = Field(..., alias="participantEmail")
    participant_name: str = Field(..., alias="participantName", min_length=1)
    age: Optional[int] = Field(None, ge=0, le=150)
    phone: Optional[str] = None
    gender: Optional[str] = None
    emergency_contact: Optional[str] = Field(None, alias="emergencyContact")

    def participant_details(self) -> Dict[str, Any]:
        return {
            "participantName": self.participant_name,
            "age": self.age,
            "phone": self.phone,
            "gender": self.gender,
            "emergencyContact": self.emergency_contact,
        }


class ConfirmationUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    camp_id: str = Field(..., alias="campId", min_length=1)
    confirmation_status: ConfirmationStatus = Field(..., alias="confirmationStatus")


class RegistrationPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[Dict[str, Any]]
    total: int
    page: int
    per_page: int = Field(..., alias="perPage")
