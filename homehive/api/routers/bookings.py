from fastapi import APIRouter, Depends, Header, Query, status

from homehive.api.dependencies import get_actor, get_use_cases
from homehive.api.schemas.bookings import (
    BookingResponse,
    CheckAvailabilityRequest,
    CheckAvailabilityResponse,
    CreateBookingRequest,
    CreateBookingResponse,
    DateRangeOut,
    PropertyAvailabilityResponse,
)
from homehive.application.dtos.booking_dto import CreateBookingDTO
from homehive.application.interfaces.access_policy import Actor
from homehive.domain.entities.reservation import ReservationAction
from homehive.domain.value_objects.date_range import DateRange

router = APIRouter()


@router.post(
    "/bookings",
    response_model=CreateBookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    idem_key: str | None = Header(default=None, convert_underscores=False, alias="Idempotency-Key"),
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> CreateBookingResponse:
    reservation_id = await use_cases["create_booking"].execute(
        CreateBookingDTO(
            property_id=payload.property_id,
            user_id=actor.user_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            guests=payload.guests,
            total_amount=payload.total_amount,
        ),
        idem_key=idem_key,
    )
    return CreateBookingResponse(reservation_id=reservation_id)


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings(
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> list[BookingResponse]:
    reservations = await use_cases["list_bookings"].execute(actor)
    return [BookingResponse.from_entity(r) for r in reservations]


@router.post("/bookings/check-availability", response_model=CheckAvailabilityResponse)
async def check_availability(
    payload: CheckAvailabilityRequest,
    use_cases=Depends(get_use_cases),
) -> CheckAvailabilityResponse:
    date_range = DateRange.from_dates(payload.check_in, payload.check_out)
    result = await use_cases["check_availability"].execute(payload.property_id, date_range)
    return CheckAvailabilityResponse(
        property_id=payload.property_id,
        available=result.available,
        blocking_ranges=[
            DateRangeOut(check_in=start, check_out=end) for start, end in result.blocking_ranges
        ],
    )


@router.post("/bookings/{reservation_id}/transitions/{action}", response_model=BookingResponse)
async def transition_booking(
    reservation_id: str,
    action: ReservationAction,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> BookingResponse:
    reservation = await use_cases["transition"].execute(reservation_id, action, actor)
    return BookingResponse.from_entity(reservation)


@router.get(
    "/properties/{property_id}/availability",
    response_model=PropertyAvailabilityResponse,
)
async def property_availability(
    property_id: str,
    month: int = Query(...),
    year: int = Query(...),
    use_cases=Depends(get_use_cases),
) -> PropertyAvailabilityResponse:
    booked = await use_cases["property_availability"].execute(property_id, month, year)
    return PropertyAvailabilityResponse(
        property_id=property_id, month=month, year=year, booked_dates=booked
    )
