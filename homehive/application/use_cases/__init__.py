"""Casos de uso de la capa de aplicación."""

from homehive.application.use_cases.check_availability import CheckAvailabilityUseCase
from homehive.application.use_cases.complete_finished_stays import CompleteFinishedStaysUseCase
from homehive.application.use_cases.create_booking import CreateBookingUseCase
from homehive.application.use_cases.get_property_availability import (
    GetPropertyAvailabilityUseCase,
)
from homehive.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from homehive.application.use_cases.list_bookings import ListBookingsUseCase
from homehive.application.use_cases.request_payment import RequestPaymentUseCase
from homehive.application.use_cases.transition_reservation import TransitionReservationUseCase

__all__ = [
    "CheckAvailabilityUseCase",
    "CompleteFinishedStaysUseCase",
    "CreateBookingUseCase",
    "GetPropertyAvailabilityUseCase",
    "HandleStripeWebhookUseCase",
    "ListBookingsUseCase",
    "RequestPaymentUseCase",
    "TransitionReservationUseCase",
]
