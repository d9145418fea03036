"""Domain enums for the restaurant availability engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional


@dataclass(frozen=True)
class StatusPolicy:
    """Transition rules attached to a reservation status."""
    description: str
    active: bool
    allows_confirmation: bool
    allows_cancellation: bool
    final: bool


@dataclass(frozen=True)
class LocationPolicy:
    """Seating rules attached to a table location."""
    description: str
    outdoor: bool
    weather_dependent: bool
    minimum_party_size: Optional[int] = None


class ReservationStatus(str, Enum):
    """Reservation slot status enumeration."""

    AVAILABLE = "AVAILABLE"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def policy(self) -> StatusPolicy:
        return _STATUS_POLICIES[self]

    @property
    def description(self) -> str:
        return self.policy.description

    @property
    def is_active(self) -> bool:
        """Active statuses count toward live bookings."""
        return self.policy.active

    @property
    def allows_confirmation(self) -> bool:
        return self.policy.allows_confirmation

    @property
    def allows_cancellation(self) -> bool:
        return self.policy.allows_cancellation

    @property
    def is_final(self) -> bool:
        """No further transitions are allowed from a final status."""
        return self.policy.final


_STATUS_POLICIES: Dict[ReservationStatus, StatusPolicy] = {
    ReservationStatus.AVAILABLE: StatusPolicy("Reservation available", True, True, False, False),
    ReservationStatus.CONFIRMED: StatusPolicy("Reservation confirmed", True, False, True, False),
    ReservationStatus.COMPLETED: StatusPolicy("Service finished", False, False, False, True),
    ReservationStatus.CANCELLED: StatusPolicy("Reservation cancelled", False, False, False, True),
}

# Slots in these statuses make a table unavailable for reads (is_available_at)
# and count as occupied seats.
READ_BLOCKING_STATUSES: FrozenSet[ReservationStatus] = frozenset(
    s for s in ReservationStatus if s.is_active
)

# Slots in these statuses reject a new overlapping slot. COMPLETED still blocks.
WRITE_BLOCKING_STATUSES: FrozenSet[ReservationStatus] = frozenset(
    s for s in ReservationStatus if s is not ReservationStatus.CANCELLED
)


class TableLocation(str, Enum):
    """Seating zones of a restaurant."""

    WINDOW = "WINDOW"
    INDOOR = "INDOOR"
    TERRACE = "TERRACE"
    PRIVATE_ROOM = "PRIVATE_ROOM"

    @property
    def policy(self) -> LocationPolicy:
        return _LOCATION_POLICIES[self]

    @property
    def description(self) -> str:
        return self.policy.description

    @property
    def is_outdoor(self) -> bool:
        return self.policy.outdoor

    @property
    def is_weather_dependent(self) -> bool:
        return self.policy.weather_dependent

    @property
    def requires_minimum_party(self) -> bool:
        return self.policy.minimum_party_size is not None

    @property
    def minimum_party_size(self) -> Optional[int]:
        return self.policy.minimum_party_size


_LOCATION_POLICIES: Dict[TableLocation, LocationPolicy] = {
    TableLocation.WINDOW: LocationPolicy("Window table", outdoor=False, weather_dependent=False),
    TableLocation.INDOOR: LocationPolicy("Indoor table", outdoor=False, weather_dependent=False),
    TableLocation.TERRACE: LocationPolicy("Outdoor terrace table", outdoor=True, weather_dependent=True),
    TableLocation.PRIVATE_ROOM: LocationPolicy(
        "Private room table", outdoor=False, weather_dependent=False, minimum_party_size=4
    ),
}
