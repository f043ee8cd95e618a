from datetime import date

from fastapi import APIRouter, Depends, Query, status

from homehive.api.dependencies import get_use_cases
from homehive.api.schemas.bookings import CompleteStaysResponse

router = APIRouter()


@router.post(
    "/workers/complete-stays",
    response_model=CompleteStaysResponse,
    status_code=status.HTTP_200_OK,
)
async def complete_finished_stays(
    use_cases=Depends(get_use_cases),
    as_of: date | None = Query(default=None, alias="as-of"),
) -> CompleteStaysResponse:
    """Checkout sweep, triggered by an external scheduler."""
    completed = await use_cases["complete_stays"].execute(today=as_of)
    return CompleteStaysResponse(completed=completed, count=len(completed))
