import json
from decimal import Decimal
from typing import Any
from uuid import uuid4

from homehive.application.interfaces.payment_gateway import PaymentGateway, PaymentIntentResult
from homehive.domain.errors import WebhookVerificationError


class StubPaymentGateway(PaymentGateway):
    """
    Offline stand-in for Stripe.

    Intents are keyed by idempotency key like Stripe does, so a retried
    request gets the same intent back. Webhook payloads are trusted as-is.
    """

    def __init__(self) -> None:
        self.intents: dict[str, PaymentIntentResult] = {}
        self.refunds: list[tuple[str, str]] = []

    async def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: str,
    ) -> PaymentIntentResult:
        if idempotency_key not in self.intents:
            intent_id = f"pi_{uuid4().hex[:14]}"
            self.intents[idempotency_key] = PaymentIntentResult(
                payment_intent_id=intent_id,
                client_secret=f"{intent_id}_secret_{uuid4().hex[:10]}",
                status="requires_payment_method",
            )
        return self.intents[idempotency_key]

    async def refund_payment(self, payment_intent_id: str, reason: str) -> None:
        self.refunds.append((payment_intent_id, reason))

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict[str, Any]:
        if not payload:
            raise WebhookVerificationError("Empty webhook payload")
        try:
            event = json.loads(payload.decode() or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise WebhookVerificationError("Invalid webhook payload") from exc
        if not isinstance(event, dict):
            raise WebhookVerificationError("Invalid webhook payload")
        return event
