"""DTOs para reservas."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class CreateBookingDTO:
    """DTO con la solicitud de reserva tal como llega del llamador."""

    property_id: str
    user_id: str
    check_in: date
    check_out: date
    guests: int
    total_amount: Decimal


@dataclass
class PaymentIntentDTO:
    """DTO con los datos que el cliente necesita para completar el pago."""

    reservation_id: str
    payment_intent_id: str
    client_secret: str | None
    amount: Decimal
    currency_code: str
