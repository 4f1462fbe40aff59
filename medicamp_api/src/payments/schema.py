from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class PaymentIntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped so the charge path can answer malformed fees with its own 400
    camp_fees: Any = Field(..., alias="campFees")


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(..., alias="clientSecret")


class PaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    registration_id: str = Field(..., alias="registrationId", min_length=1)
    amount: float = Field(..., ge=0)
    participant_email: EmailStr = Field(..., alias="participantEmail")
    camp_id: str = Field(..., alias="campId", min_length=1)
    transaction_id: Optional[str] = Field(None, alias="transactionId")
