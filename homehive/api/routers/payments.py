from fastapi import APIRouter, Depends, Request, status

from homehive.api.dependencies import get_actor, get_use_cases
from homehive.api.schemas.bookings import (
    CreatePaymentIntentRequest,
    CreatePaymentIntentResponse,
    WebhookResponse,
)
from homehive.application.interfaces.access_policy import Actor

router = APIRouter()


@router.post(
    "/payments/create-intent",
    response_model=CreatePaymentIntentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment_intent(
    payload: CreatePaymentIntentRequest,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> CreatePaymentIntentResponse:
    intent = await use_cases["request_payment"].execute(payload.reservation_id, actor)
    return CreatePaymentIntentResponse(
        reservation_id=intent.reservation_id,
        payment_intent_id=intent.payment_intent_id,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency_code=intent.currency_code,
    )


@router.post("/payments/webhook", response_model=WebhookResponse, status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    use_cases=Depends(get_use_cases),
) -> WebhookResponse:
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    outcome = await use_cases["handle_webhook"].execute(raw_body=raw_body, signature=signature)
    return WebhookResponse(outcome=outcome)
