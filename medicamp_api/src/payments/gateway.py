# medicamp_api/src/payments/gateway.py
"""
Charge authorization collaborator.

Amounts cross this boundary in minor currency units (cents); conversion from
the decimal camp fee happens in `to_minor_units` before any call out.
"""
import logging
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any, Optional

from .client import get_stripe
from ...errors import ValidationError

logger = logging.getLogger(__name__)

# Largest single charge Stripe accepts, in minor units
MAX_CHARGE_MINOR_UNITS = 99_999_999


def to_minor_units(fee: Any, max_minor: int = MAX_CHARGE_MINOR_UNITS) -> int:
    """Multiply a decimal fee by 100 and truncate.

    The textual value is used so binary float artefacts do not eat a cent
    (19.99 -> 1999, 10.005 -> 1000).
    """
    if isinstance(fee, bool) or fee is None:
        raise ValidationError("campFees must be a number")
    try:
        amount = Decimal(str(fee).strip())
    except InvalidOperation:
        raise ValidationError("campFees must be a number")
    if not amount.is_finite():
        raise ValidationError("campFees must be a finite number")
    if amount < 0:
        raise ValidationError("campFees must not be negative")

    try:
        minor = (amount * 100).to_integral_value(rounding=ROUND_DOWN)
    except ArithmeticError:
        raise ValidationError("campFees exceeds the maximum charge")
    if minor == 0:
        raise ValidationError("campFees is too small to charge")
    if minor > max_minor:
        raise ValidationError("campFees exceeds the maximum charge")
    return int(minor)


class PaymentGateway:
    """Thin wrapper around Stripe PaymentIntents"""

    def __init__(self, currency: str, client: Optional[Any] = None):
        self.currency = currency
        self.client = client if client is not None else get_stripe()

    def create_payment_intent(self, amount: int) -> str:
        intent = self.client.PaymentIntent.create(
            amount=amount,
            currency=self.currency,
            payment_method_types=["card"],
        )
        logger.info("Created payment intent %s for %s %s", intent.get("id"), amount, self.currency)
        return intent["client_secret"]
