"""Entidad Reservation - Agregado raíz del dominio."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from homehive.domain.errors import InvalidTransitionError
from homehive.domain.value_objects.date_range import DateRange
from homehive.domain.value_objects.money import Money


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    PAYMENT_FAILED = "payment_failed"


class PaymentStatus(str, Enum):
    """Estados de pago de una reservación."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class ReservationAction(str, Enum):
    """Acciones del ciclo de vida de una reservación."""

    REQUEST_PAYMENT = "request_payment"
    CONFIRM_PAYMENT = "confirm_payment"
    FAIL_PAYMENT = "fail_payment"
    CANCEL = "cancel"
    COMPLETE = "complete"


TERMINAL_STATUSES = frozenset(
    {
        ReservationStatus.CANCELLED,
        ReservationStatus.COMPLETED,
        ReservationStatus.PAYMENT_FAILED,
    }
)

# Estados que representan una solicitud activa aún no pagada.
ACTIVE_HOLD_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.PAYMENT_PENDING})

# Estados que no ocupan el calendario de la propiedad.
RELEASED_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.PAYMENT_FAILED})

# acción -> (estados de origen permitidos, estado destino)
TRANSITIONS: dict[ReservationAction, tuple[frozenset[ReservationStatus], ReservationStatus]] = {
    ReservationAction.REQUEST_PAYMENT: (
        frozenset({ReservationStatus.PENDING}),
        ReservationStatus.PAYMENT_PENDING,
    ),
    ReservationAction.CONFIRM_PAYMENT: (
        frozenset({ReservationStatus.PAYMENT_PENDING}),
        ReservationStatus.CONFIRMED,
    ),
    ReservationAction.FAIL_PAYMENT: (
        frozenset({ReservationStatus.PAYMENT_PENDING}),
        ReservationStatus.PAYMENT_FAILED,
    ),
    ReservationAction.CANCEL: (
        frozenset(
            {
                ReservationStatus.PENDING,
                ReservationStatus.PAYMENT_PENDING,
                ReservationStatus.CONFIRMED,
            }
        ),
        ReservationStatus.CANCELLED,
    ),
    ReservationAction.COMPLETE: (
        frozenset({ReservationStatus.CONFIRMED}),
        ReservationStatus.COMPLETED,
    ),
}


@dataclass
class Reservation:
    """
    Entidad principal del dominio - Agregado Raíz.

    Representa la reserva de una propiedad para un rango de noches. El estado
    solo avanza mediante apply(); nunca se elimina físicamente.
    """

    # Identificadores
    id: str
    property_id: str
    host_id: str
    user_id: str

    # Fechas y huéspedes
    check_in: date
    check_out: date
    guests: int

    # Financieros
    total_amount: Decimal
    currency_code: str = "USD"

    # Estados
    status: ReservationStatus = ReservationStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_intent_id: str | None = None

    # Control de concurrencia
    lock_version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None
    confirmed_at: datetime | None = None

    # === Propiedades calculadas ===

    @property
    def date_range(self) -> DateRange:
        """Retorna el rango de noches como Value Object."""
        return DateRange(start=self.check_in, end=self.check_out)

    @property
    def total(self) -> Money:
        return Money(amount=self.total_amount, currency_code=self.currency_code)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    # === Métodos de negocio ===

    def can_apply(self, action: ReservationAction) -> bool:
        """Indica si la acción cambiaría el estado o sería un no-op idempotente."""
        allowed_from, target = TRANSITIONS[action]
        if self.status in allowed_from:
            return True
        return self.status == target and action != ReservationAction.CONFIRM_PAYMENT

    def apply(self, action: ReservationAction, now: datetime) -> bool:
        """
        Aplica una acción del ciclo de vida.

        Args:
            action: Acción a aplicar.
            now: Momento de la transición (para updated_at / confirmed_at).

        Returns:
            True si el estado cambió, False si fue un no-op idempotente
            (la reservación ya estaba en el estado destino).

        Raises:
            InvalidTransitionError: si el estado actual no permite la acción.
                confirm_payment nunca es idempotente.
        """
        allowed_from, target = TRANSITIONS[action]
        if self.status not in allowed_from:
            if self.status == target and action != ReservationAction.CONFIRM_PAYMENT:
                return False
            raise InvalidTransitionError(self.id, self.status.value, action.value)

        if action == ReservationAction.CONFIRM_PAYMENT:
            self.payment_status = PaymentStatus.PAID
            self.confirmed_at = now
        elif action == ReservationAction.FAIL_PAYMENT:
            self.payment_status = PaymentStatus.FAILED
        elif action == ReservationAction.CANCEL and self.is_paid:
            self.payment_status = PaymentStatus.REFUNDED

        self.status = target
        self.updated_at = now
        return True

    def attach_payment_intent(self, payment_intent_id: str) -> None:
        """Asocia el payment intent de Stripe (solo antes de confirmar el pago)."""
        if self.status not in ACTIVE_HOLD_STATUSES:
            raise InvalidTransitionError(self.id, self.status.value, "attach_payment_intent")
        self.payment_intent_id = payment_intent_id
