import hashlib
import hmac
import json
import time
from decimal import Decimal
from types import SimpleNamespace

import pytest
import stripe

from homehive.domain.errors import PaymentGatewayError, WebhookVerificationError
from homehive.infrastructure.circuit_breaker import stripe_breaker
from homehive.infrastructure.gateways.stripe_gateway import StripePaymentGateway

SECRET = "whsec_test"


def _signature(payload: bytes, secret: str = SECRET) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode()}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.fixture
def gateway() -> StripePaymentGateway:
    return StripePaymentGateway(api_key="sk_test_dummy")


async def test_valid_signature_returns_event(gateway):
    payload = json.dumps({"id": "evt_1", "type": "payment_intent.succeeded", "data": {}}).encode()

    event = await gateway.parse_webhook_event(payload, _signature(payload), SECRET)

    assert event["id"] == "evt_1"


async def test_bad_signature_is_rejected(gateway):
    payload = b'{"id": "evt_1"}'

    with pytest.raises(WebhookVerificationError):
        await gateway.parse_webhook_event(payload, _signature(payload, "whsec_other"), SECRET)


async def test_missing_signature_is_rejected_when_secret_configured(gateway):
    with pytest.raises(WebhookVerificationError):
        await gateway.parse_webhook_event(b'{"id": "evt_1"}', None, SECRET)


async def test_unsigned_payload_accepted_without_secret(gateway):
    event = await gateway.parse_webhook_event(b'{"id": "evt_1", "type": "x"}', None, None)

    assert event["type"] == "x"


async def test_create_payment_intent_sends_cents_and_idempotency_key(gateway, monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(id="pi_123", client_secret="pi_123_secret", status="requires_payment_method")

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

    result = await gateway.create_payment_intent(
        amount=Decimal("400.50"),
        currency="USD",
        metadata={"reservation_id": "res-1"},
        idempotency_key="booking-res-1-intent",
    )

    assert result.payment_intent_id == "pi_123"
    assert calls[0]["amount"] == 40050
    assert calls[0]["currency"] == "usd"
    assert calls[0]["idempotency_key"] == "booking-res-1-intent"


async def test_stripe_errors_become_gateway_errors_and_trip_breaker(gateway, monkeypatch):
    def failing_create(**kwargs):
        raise stripe.StripeError("boom")

    monkeypatch.setattr(stripe.PaymentIntent, "create", failing_create)

    for _ in range(stripe_breaker.fail_max + 1):
        with pytest.raises(PaymentGatewayError):
            await gateway.create_payment_intent(
                amount=Decimal("10"), currency="USD", metadata={}, idempotency_key="k"
            )

    assert stripe_breaker.current_state == "open"
