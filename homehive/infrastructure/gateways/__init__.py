"""Adaptadores para servicios externos."""

from homehive.infrastructure.gateways.stripe_gateway import StripePaymentGateway

__all__ = ["StripePaymentGateway"]
