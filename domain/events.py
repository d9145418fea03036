"""Domain events published after a successful mutation."""

from datetime import date, datetime, time
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.utils_datetime import get_current_datetime


class DomainEvent(BaseModel):
    """Base event carrying the aggregate id and occurrence timestamp."""

    event_type: ClassVar[str] = "DomainEvent"

    restaurant_id: Optional[int] = None
    occurred_at: datetime = Field(default_factory=get_current_datetime)

    model_config = ConfigDict(frozen=True)

    @property
    def aggregate_id(self) -> Optional[int]:
        return self.restaurant_id

    def to_log_dict(self) -> dict:
        """Flat JSON-friendly payload including the event type."""
        return {"event_type": self.event_type, **self.model_dump(mode="json")}


class RestaurantCreated(DomainEvent):
    event_type: ClassVar[str] = "RestaurantCreated"

    name: str
    address: str
    capacity: int


class RestaurantStatusChanged(DomainEvent):
    event_type: ClassVar[str] = "RestaurantStatusChanged"

    active: bool


class TableAdded(DomainEvent):
    event_type: ClassVar[str] = "TableAdded"

    table_id: Optional[int]
    table_number: Optional[int]
    seats: int
    location: str


class TableAvailabilityChanged(DomainEvent):
    event_type: ClassVar[str] = "TableAvailabilityChanged"

    table_id: Optional[int]
    table_number: Optional[int]
    available: bool


class ReservationCreated(DomainEvent):
    event_type: ClassVar[str] = "ReservationCreated"

    table_id: Optional[int]
    time_slot_id: Optional[int]
    date: date
    start_time: time
    end_time: time
    party_size: int
    customer_email: Optional[str] = None


class ReservationStatusChanged(DomainEvent):
    event_type: ClassVar[str] = "ReservationStatusChanged"

    table_id: Optional[int]
    time_slot_id: Optional[int]
    previous_status: str
    new_status: str


class CapacityThresholdReached(DomainEvent):
    event_type: ClassVar[str] = "CapacityThresholdReached"

    restaurant_name: str
    date: date
    time: time
    utilization_rate: float = Field(..., ge=0.0, le=1.0)
    threshold: float
