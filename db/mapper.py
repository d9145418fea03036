"""Conversion between Restaurant aggregates and SQLAlchemy rows."""

from domain.enums import ReservationStatus, TableLocation
from domain.models import ReservationSlot, Restaurant, Table

from .models_sqlalchemy import RestaurantRow, TableRow, TimeSlotRow


def restaurant_from_row(row: RestaurantRow) -> Restaurant:
    """Rebuild a fully hydrated aggregate from its rows."""
    restaurant = Restaurant(
        name=row.name,
        address=row.address,
        capacity=row.capacity,
        phone_number=row.phone_number,
        email=row.email,
        opening_time=row.opening_time,
        closing_time=row.closing_time,
    )
    restaurant._set_id(row.id)
    restaurant.version = row.version
    restaurant.active = row.active

    for table_row in row.tables:
        table = table_from_row(table_row)
        restaurant.add_table(table)
    return restaurant


def table_from_row(row: TableRow) -> Table:
    table = Table(
        seats=row.seats,
        location=TableLocation(row.location),
        table_number=row.table_number,
        available=row.available,
    )
    table.id = row.id
    table.version = row.version
    for slot_row in row.slots:
        table._restore_slot(slot_from_row(slot_row))
    return table


def slot_from_row(row: TimeSlotRow) -> ReservationSlot:
    return ReservationSlot.restore(
        id=row.id,
        date=row.reservation_date,
        start_time=row.start_time,
        end_time=row.end_time,
        reserved_seats=row.reserved_seats,
        party_size=row.party_size,
        status=ReservationStatus(row.status),
        customer_name=row.customer_name,
        customer_phone=row.customer_phone,
        customer_email=row.customer_email,
        special_requests=row.special_requests,
        version=row.version,
    )


def _assign(row: object, values: dict) -> bool:
    """Set changed attributes on a row. Returns True if anything differed."""
    changed = False
    for key, value in values.items():
        if getattr(row, key, None) != value:
            setattr(row, key, value)
            changed = True
    return changed


def write_restaurant(row: RestaurantRow, restaurant: Restaurant) -> bool:
    return _assign(row, {
        "name": restaurant.name,
        "address": restaurant.address,
        "phone_number": restaurant.phone_number,
        "email": restaurant.email,
        "capacity": restaurant.capacity,
        "active": restaurant.active,
        "opening_time": restaurant.opening_time,
        "closing_time": restaurant.closing_time,
    })


def write_table(row: TableRow, table: Table) -> bool:
    return _assign(row, {
        "table_number": table.table_number,
        "seats": table.seats,
        "location": table.location.value,
        "available": table.available,
    })


def write_slot(row: TimeSlotRow, slot: ReservationSlot) -> bool:
    return _assign(row, {
        "reservation_date": slot.date,
        "start_time": slot.start_time,
        "end_time": slot.end_time,
        "reserved_seats": slot.reserved_seats,
        "party_size": slot.party_size,
        "status": slot.status.value,
        "customer_name": slot.customer_name,
        "customer_phone": slot.customer_phone,
        "customer_email": slot.customer_email,
        "special_requests": slot.special_requests,
    })
