"""Excepciones de dominio para el motor de reservas."""

from collections.abc import Sequence
from datetime import date


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de Validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code=code,
        )
        self.field = field


class InvalidDateRangeError(ValidationError):
    """Rango de fechas inválido (check_out debe ser posterior a check_in)."""

    def __init__(self, message: str):
        super().__init__(field="date_range", message=message, code="INVALID_DATE_RANGE")


class InvalidMoneyError(ValidationError):
    """Monto monetario inválido."""

    def __init__(self, message: str):
        super().__init__(field="total_amount", message=message, code="INVALID_MONEY")


# === Errores de Búsqueda ===


class NotFoundError(DomainError):
    """La entidad solicitada no existe."""


class PropertyNotFoundError(NotFoundError):
    """La propiedad no existe."""

    def __init__(self, property_id: str):
        super().__init__(
            message=f"Propiedad no encontrada: {property_id}",
            code="PROPERTY_NOT_FOUND",
        )
        self.property_id = property_id


class ReservationNotFoundError(NotFoundError):
    """La reservación no existe."""

    def __init__(self, reservation_id: str):
        super().__init__(
            message=f"Reservación no encontrada: {reservation_id}",
            code="RESERVATION_NOT_FOUND",
        )
        self.reservation_id = reservation_id


# === Errores de Disponibilidad ===


class ConflictError(DomainError):
    """
    Las fechas solicitadas se superponen con una reservación pagada.

    Attributes:
        blocking_ranges: Rangos (check_in, check_out) que bloquean la solicitud,
            para que el cliente pueda sugerir alternativas.
    """

    def __init__(self, property_id: str, blocking_ranges: Sequence[tuple[date, date]]):
        ranges = ", ".join(f"{start.isoformat()} -> {end.isoformat()}" for start, end in blocking_ranges)
        super().__init__(
            message=f"La propiedad {property_id} ya está reservada en: {ranges}",
            code="BOOKING_CONFLICT",
        )
        self.property_id = property_id
        self.blocking_ranges = list(blocking_ranges)


class DuplicateError(DomainError):
    """Ya existe una solicitud idéntica activa."""

    def __init__(self, message: str, reservation_id: str | None = None):
        super().__init__(message=message, code="DUPLICATE_RESERVATION")
        self.reservation_id = reservation_id


# === Errores de Ciclo de Vida ===


class InvalidTransitionError(DomainError):
    """El estado actual de la reservación no permite la acción."""

    def __init__(self, reservation_id: str | None, current_status: str, action: str):
        super().__init__(
            message=f"No se puede aplicar '{action}' a la reservación {reservation_id}: "
            f"estado actual '{current_status}'",
            code="INVALID_TRANSITION",
        )
        self.reservation_id = reservation_id
        self.current_status = current_status
        self.action = action


class OptimisticLockError(DomainError):
    """Conflicto de concurrencia al actualizar la reservación."""

    def __init__(self, reservation_id: str, expected_version: int):
        super().__init__(
            message=f"Conflicto de concurrencia en reservación {reservation_id}: "
            f"versión esperada {expected_version}",
            code="OPTIMISTIC_LOCK_ERROR",
        )
        self.reservation_id = reservation_id
        self.expected_version = expected_version


class PermissionDeniedError(DomainError):
    """El actor no tiene permiso para la acción solicitada."""

    def __init__(self, actor_id: str, action: str, reservation_id: str):
        super().__init__(
            message=f"El usuario {actor_id} no puede aplicar '{action}' a la reservación {reservation_id}",
            code="PERMISSION_DENIED",
        )
        self.actor_id = actor_id
        self.action = action
        self.reservation_id = reservation_id


# === Errores de Idempotencia ===


class IdempotencyConflictError(DomainError):
    """Conflicto de idempotencia: mismo key pero diferente request."""

    def __init__(self, idem_key: str, scope: str):
        super().__init__(
            message=f"Conflicto de idempotencia: key '{idem_key}' en scope '{scope}' "
            f"ya existe con diferente request hash",
            code="IDEMPOTENCY_CONFLICT",
        )
        self.idem_key = idem_key
        self.scope = scope


# === Errores de Infraestructura ===


class StoreUnavailableError(DomainError):
    """Falla de E/S en el almacén de reservaciones. El llamador debe reintentar."""

    def __init__(self, operation: str, detail: str | None = None):
        super().__init__(
            message=f"Almacén de reservaciones no disponible durante '{operation}'"
            + (f": {detail}" if detail else ""),
            code="STORE_UNAVAILABLE",
        )
        self.operation = operation


class PaymentGatewayError(DomainError):
    """Falla en la comunicación con la pasarela de pago."""

    def __init__(self, message: str):
        super().__init__(message=message, code="PAYMENT_GATEWAY_ERROR")


class WebhookVerificationError(DomainError):
    """El webhook recibido es inválido o su firma no coincide."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_WEBHOOK")
