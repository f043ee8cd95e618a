"""Política de acceso por rol para las acciones del ciclo de vida."""

from homehive.application.interfaces.access_policy import AccessPolicy, Actor, ActorRole
from homehive.domain.entities.reservation import Reservation, ReservationAction
from homehive.domain.errors import PermissionDeniedError

# Acciones que el huésped puede pedir sobre sus propias reservaciones.
GUEST_ACTIONS = frozenset({ReservationAction.REQUEST_PAYMENT, ReservationAction.CANCEL})

# Acciones que el anfitrión puede pedir sobre reservaciones de sus propiedades.
HOST_ACTIONS = frozenset({ReservationAction.CANCEL, ReservationAction.COMPLETE})


class RoleBasedAccessPolicy(AccessPolicy):
    """
    Reglas:
    - admin y system pueden aplicar cualquier acción.
    - El huésped solicita el pago o cancela sus propias reservaciones.
    - El anfitrión cancela o completa reservaciones de sus propiedades.
    - Confirmar o fallar un pago queda reservado al sistema (webhook de Stripe).
    """

    def ensure_allowed(
        self,
        actor: Actor,
        reservation: Reservation,
        action: ReservationAction,
    ) -> None:
        if actor.role in (ActorRole.ADMIN, ActorRole.SYSTEM):
            return
        if action in GUEST_ACTIONS and actor.user_id == reservation.user_id:
            return
        if (
            actor.role == ActorRole.HOST
            and action in HOST_ACTIONS
            and actor.user_id == reservation.host_id
        ):
            return
        raise PermissionDeniedError(actor.user_id, action.value, reservation.id)
