from pydantic import BaseModel, ConfigDict, Field

from ..registrations.schema import ConfirmationStatus, PaymentStatus


class ParticipantCampAnalytics(BaseModel):
    """One row of the registration/payment left join"""

    model_config = ConfigDict(populate_by_name=True)

    camp_id: str = Field(..., alias="campId")
    camp_name: str = Field(..., alias="campName")
    camp_fees: float = Field(..., alias="campFees")
    confirmation_status: ConfirmationStatus = Field(..., alias="confirmationStatus")
    payment_status: PaymentStatus = Field(..., alias="paymentStatus")
    amount_paid: float = Field(..., alias="amountPaid")
