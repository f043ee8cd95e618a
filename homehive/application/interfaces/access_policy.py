from dataclasses import dataclass
from enum import Enum

from homehive.domain.entities.reservation import Reservation, ReservationAction


class ActorRole(str, Enum):
    USER = "user"
    HOST = "host"
    ADMIN = "admin"
    SYSTEM = "system"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as resolved by the credential service."""

    user_id: str
    role: ActorRole = ActorRole.USER


SYSTEM_ACTOR = Actor(user_id="system", role=ActorRole.SYSTEM)


class AccessPolicy:
    """Decides whether an actor may apply an action. State legality is checked elsewhere."""

    def ensure_allowed(
        self,
        actor: Actor,
        reservation: Reservation,
        action: ReservationAction,
    ) -> None:
        raise NotImplementedError
