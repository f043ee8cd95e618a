from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass
class PaymentIntentResult:
    payment_intent_id: str
    client_secret: str | None
    status: str


class PaymentGateway:
    async def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: str,
    ) -> PaymentIntentResult:
        raise NotImplementedError

    async def refund_payment(self, payment_intent_id: str, reason: str) -> None:
        raise NotImplementedError

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict[str, Any]:
        raise NotImplementedError
