from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, condecimal, constr

from homehive.domain.entities.reservation import PaymentStatus, Reservation, ReservationStatus

Money = condecimal(max_digits=12, decimal_places=2)


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    property_id: constr(strip_whitespace=True, min_length=1, max_length=64)
    check_in: date
    check_out: date
    guests: int
    total_amount: Money


class CreateBookingResponse(BaseModel):
    reservation_id: str
    status: ReservationStatus = ReservationStatus.PENDING


class BookingResponse(BaseModel):
    id: str
    property_id: str
    host_id: str
    user_id: str
    check_in: date
    check_out: date
    guests: int
    total_amount: Decimal
    currency_code: str
    status: ReservationStatus
    payment_status: PaymentStatus
    payment_intent_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> "BookingResponse":
        return cls(
            id=reservation.id,
            property_id=reservation.property_id,
            host_id=reservation.host_id,
            user_id=reservation.user_id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            guests=reservation.guests,
            total_amount=reservation.total_amount,
            currency_code=reservation.currency_code,
            status=reservation.status,
            payment_status=reservation.payment_status,
            payment_intent_id=reservation.payment_intent_id,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
            confirmed_at=reservation.confirmed_at,
        )


class DateRangeOut(BaseModel):
    check_in: date
    check_out: date


class CheckAvailabilityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    property_id: constr(strip_whitespace=True, min_length=1, max_length=64)
    check_in: date
    check_out: date


class CheckAvailabilityResponse(BaseModel):
    property_id: str
    available: bool
    blocking_ranges: list[DateRangeOut] = []


class PropertyAvailabilityResponse(BaseModel):
    property_id: str
    month: int
    year: int
    booked_dates: list[str]


class CreatePaymentIntentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reservation_id: constr(strip_whitespace=True, min_length=1, max_length=64)


class CreatePaymentIntentResponse(BaseModel):
    reservation_id: str
    payment_intent_id: str
    client_secret: str | None
    amount: Decimal
    currency_code: str


class WebhookResponse(BaseModel):
    received: bool = True
    outcome: str


class CompleteStaysResponse(BaseModel):
    completed: list[str]
    count: int
