import asyncio
import json
import logging
from decimal import Decimal
from typing import Any

import stripe

from homehive.application.interfaces.payment_gateway import PaymentGateway, PaymentIntentResult
from homehive.domain.errors import PaymentGatewayError, WebhookVerificationError
from homehive.domain.value_objects.money import Money
from homehive.infrastructure.circuit_breaker import CircuitBreakerError, stripe_breaker

logger = logging.getLogger(__name__)


class StripePaymentGateway(PaymentGateway):
    def __init__(self, api_key: str | None) -> None:
        stripe.api_key = api_key
        stripe.max_network_retries = 2

    async def create_payment_intent(
        self,
        amount: Decimal,
        currency: str,
        metadata: dict[str, str],
        idempotency_key: str,
    ) -> PaymentIntentResult:
        """
        Create a PaymentIntent, protected by the Stripe circuit breaker.

        Raises:
            PaymentGatewayError: circuit open or Stripe API failure.
        """
        intent = await self._call(
            stripe.PaymentIntent.create,
            amount=Money(amount=amount, currency_code=currency).to_cents(),
            currency=currency.lower(),
            metadata=metadata,
            automatic_payment_methods={"enabled": True},
            idempotency_key=idempotency_key,
        )
        return PaymentIntentResult(
            payment_intent_id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
        )

    async def refund_payment(self, payment_intent_id: str, reason: str) -> None:
        await self._call(
            stripe.Refund.create,
            payment_intent=payment_intent_id,
            reason=reason,
            idempotency_key=f"refund-{payment_intent_id}",
        )
        logger.info(
            "Stripe refund created",
            extra={"payment_intent_id": payment_intent_id, "reason": reason},
        )

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict[str, Any]:
        try:
            text = payload.decode()
        except UnicodeDecodeError as exc:
            raise WebhookVerificationError("Invalid Stripe webhook payload") from exc

        if webhook_secret:
            if not signature_header:
                raise WebhookVerificationError("Missing Stripe-Signature header")
            try:
                stripe.WebhookSignature.verify_header(text, signature_header, webhook_secret)
            except stripe.SignatureVerificationError as exc:
                raise WebhookVerificationError("Invalid Stripe signature") from exc
        else:
            logger.warning("Stripe webhook secret not configured; skipping signature check")

        try:
            event = json.loads(text or "{}")
        except json.JSONDecodeError as exc:
            raise WebhookVerificationError("Invalid Stripe webhook payload") from exc
        if not isinstance(event, dict):
            raise WebhookVerificationError("Invalid Stripe webhook payload")
        return event

    async def _call(self, func, **kwargs):
        # The stripe SDK is synchronous; keep it off the event loop.
        try:
            return await asyncio.to_thread(stripe_breaker.call, func, **kwargs)
        except CircuitBreakerError as exc:
            logger.error(
                "Stripe circuit breaker is open - service unavailable",
                extra={"circuit_state": str(exc)},
            )
            raise PaymentGatewayError("Stripe no disponible temporalmente") from exc
        except stripe.StripeError as exc:
            logger.error(
                "Stripe API error",
                exc_info=exc,
                extra={"stripe_code": getattr(exc, "code", None)},
            )
            raise PaymentGatewayError(f"Error de Stripe: {exc.user_message or exc}") from exc
