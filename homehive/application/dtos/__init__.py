"""Data Transfer Objects de la capa de aplicación."""

from homehive.application.dtos.booking_dto import CreateBookingDTO, PaymentIntentDTO

__all__ = [
    "CreateBookingDTO",
    "PaymentIntentDTO",
]
