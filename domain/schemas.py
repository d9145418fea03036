"""Commands, queries and read models for the use-case layer (Pydantic v2).

Field bounds are enforced by the domain entities, not here, so that invalid
input surfaces as a domain ValidationError at the point of use.
"""

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import TableLocation


class CreateRestaurantCommand(BaseModel):
    """Command for creating a restaurant."""

    name: str = Field(..., description="Restaurant name")
    address: str = Field(..., description="Street address")
    capacity: int = Field(..., description="Informational seat cap")
    phone_number: Optional[str] = None
    email: Optional[str] = None
    opening_time: Optional[time] = Field(None, description="Defaults to the configured opening time")
    closing_time: Optional[time] = Field(None, description="Defaults to the configured closing time")

    model_config = ConfigDict(str_strip_whitespace=True)


class UpdateRestaurantCommand(BaseModel):
    """Command for updating an existing restaurant."""

    id: int
    name: str
    address: str
    capacity: int
    phone_number: Optional[str] = None
    email: Optional[str] = None
    opening_time: time
    closing_time: time

    model_config = ConfigDict(str_strip_whitespace=True)


class CreateTableCommand(BaseModel):
    """Command for adding a table to a restaurant."""

    restaurant_id: int
    seats: int
    location: TableLocation


class UpdateTableCommand(BaseModel):
    """Command for resizing or relocating a table."""

    id: int
    seats: int
    location: TableLocation


class AvailabilityQuery(BaseModel):
    """Query for tables free for a party over a time range."""

    restaurant_id: int
    date: date
    start_time: time
    end_time: time
    party_size: int


class CreateReservationCommand(BaseModel):
    """Command for booking a time slot on a specific table."""

    table_id: int
    date: date
    start_time: time
    end_time: time
    party_size: int
    customer_name: Optional[str] = Field(None, max_length=100)
    customer_phone: Optional[str] = Field(None, max_length=30)
    customer_email: Optional[str] = Field(None, max_length=255)
    special_requests: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(str_strip_whitespace=True)


class CapacityStats(BaseModel):
    """Restaurant capacity statistics."""

    restaurant_id: Optional[int]
    total_seats: int
    available_seats: int
    total_tables: int
    available_tables: int
    availability_rate: float = Field(..., ge=0.0, le=1.0)


class TableUtilizationStats(BaseModel):
    """Table utilization statistics."""

    restaurant_id: Optional[int]
    total_tables: int
    available_tables: int
    unavailable_tables: int
    total_seats: int
    availability_rate: float = Field(..., ge=0.0, le=1.0)


class RestaurantStats(BaseModel):
    """Aggregate restaurant statistics."""

    restaurant_id: Optional[int]
    name: str
    active: bool
    total_tables: int
    total_seats: int
    available_seats: int
    reservations: int
    active_reservations: int
