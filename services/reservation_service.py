"""
Use-case services for restaurants, tables and reservations.
Each use case loads a Restaurant aggregate, mutates it through entity
methods or the availability engine, saves it, and only then publishes
domain events.
"""
import logging
from datetime import date, time
from typing import Callable, List, Optional

from core.config import Settings, settings
from core.logging import LogContext
from core.utils_datetime import Clock, get_clock
from domain.enums import READ_BLOCKING_STATUSES, ReservationStatus, TableLocation
from domain.errors import DomainError, NoTablesAvailableError
from domain.events import (
    CapacityThresholdReached,
    DomainEvent,
    ReservationCreated,
    ReservationStatusChanged,
    RestaurantCreated,
    RestaurantStatusChanged,
    TableAdded,
    TableAvailabilityChanged,
)
from domain.models import ReservationSlot, Restaurant, Table, TimeRange
from domain.ports import EventPublisher, RestaurantRepository
from domain.schemas import (
    AvailabilityQuery,
    CapacityStats,
    CreateReservationCommand,
    CreateRestaurantCommand,
    CreateTableCommand,
    RestaurantStats,
    TableUtilizationStats,
    UpdateRestaurantCommand,
    UpdateTableCommand,
)
from services import availability
from services.events import safe_publish


logger = logging.getLogger(__name__)


class _UseCaseService:
    """Shared wiring for the use-case services."""

    def __init__(
        self,
        repository: RestaurantRepository,
        publisher: Optional[EventPublisher] = None,
        clock: Optional[Clock] = None,
        config: Optional[Settings] = None,
    ):
        """
        Args:
            repository: Restaurant aggregate repository
            publisher: Event publisher; events are dropped when None
            clock: Source of "today"; defaults to the system clock
            config: Settings override, mainly for tests
        """
        self.repository = repository
        self.publisher = publisher
        self.clock = get_clock(clock)
        self.settings = config or settings

    def _publish(self, event_class, **fields) -> DomainEvent:
        event = event_class(occurred_at=self.clock.now(), **fields)
        safe_publish(self.publisher, event)
        return event


# ============================================================================
# Restaurant Management
# ============================================================================

class RestaurantManagementService(_UseCaseService):
    """Create, update, query and retire restaurants."""

    def create_restaurant(self, command: CreateRestaurantCommand) -> Restaurant:
        default_opening, default_closing = self.settings.default_opening_hours
        restaurant = Restaurant(
            name=command.name,
            address=command.address,
            capacity=command.capacity,
            phone_number=command.phone_number,
            email=command.email,
            opening_time=command.opening_time or default_opening,
            closing_time=command.closing_time or default_closing,
        )
        self.repository.save(restaurant)
        logger.info(f"Created restaurant {restaurant.id}: {restaurant.name}")

        self._publish(
            RestaurantCreated,
            restaurant_id=restaurant.id,
            name=restaurant.name,
            address=restaurant.address,
            capacity=restaurant.capacity,
        )
        return restaurant

    def update_restaurant(self, command: UpdateRestaurantCommand) -> Restaurant:
        """
        Replace a restaurant's details and opening hours.

        Raises:
            RestaurantNotFoundError: unknown id
            ValidationError: invalid details or hours; nothing is changed
        """
        restaurant = self.repository.get(command.id)
        restaurant.update_details(
            name=command.name,
            address=command.address,
            phone_number=command.phone_number,
            email=command.email,
            capacity=command.capacity,
        )
        restaurant.set_opening_hours(command.opening_time, command.closing_time)
        self.repository.save(restaurant)
        logger.info(f"Updated restaurant {restaurant.id}")
        return restaurant

    def get_restaurant(self, restaurant_id: int) -> Restaurant:
        return self.repository.get(restaurant_id)

    def list_restaurants(self) -> List[Restaurant]:
        return self.repository.find_all()

    def search_restaurants(self, name: Optional[str]) -> List[Restaurant]:
        """Case-insensitive search by name fragment; a blank name lists everything."""
        if not name or not name.strip():
            return self.repository.find_all()
        return self.repository.find_by_name(name.strip())

    def activate_restaurant(self, restaurant_id: int) -> Restaurant:
        return self._set_active(restaurant_id, True)

    def deactivate_restaurant(self, restaurant_id: int) -> Restaurant:
        return self._set_active(restaurant_id, False)

    def _set_active(self, restaurant_id: int, active: bool) -> Restaurant:
        restaurant = self.repository.get(restaurant_id)
        if restaurant.active == active:
            return restaurant

        if active:
            restaurant.activate()
        else:
            restaurant.deactivate()
        self.repository.save(restaurant)
        logger.info(f"Restaurant {restaurant_id} {'activated' if active else 'deactivated'}")

        self._publish(RestaurantStatusChanged, restaurant_id=restaurant.id, active=active)
        return restaurant

    def delete_restaurant(self, restaurant_id: int) -> None:
        self.repository.delete(restaurant_id)
        logger.info(f"Deleted restaurant {restaurant_id}")

    def get_restaurant_stats(self, restaurant_id: int) -> RestaurantStats:
        restaurant = self.repository.get(restaurant_id)
        slots = [slot for _, slot in restaurant.iter_slots()]
        return RestaurantStats(
            restaurant_id=restaurant.id,
            name=restaurant.name,
            active=restaurant.active,
            total_tables=len(restaurant.tables),
            total_seats=restaurant.total_seats,
            available_seats=restaurant.total_available_seats,
            reservations=len(slots),
            active_reservations=sum(1 for slot in slots if slot.status.is_active),
        )


# ============================================================================
# Table Management
# ============================================================================

class TableManagementService(_UseCaseService):
    """Add, edit and query the tables of a restaurant."""

    def create_table(self, command: CreateTableCommand) -> Table:
        restaurant = self.repository.get(command.restaurant_id)
        table = restaurant.add_table(Table(seats=command.seats, location=command.location))
        self.repository.save(restaurant)
        logger.info(
            f"Added table {table.table_number} ({table.seats} seats, {table.location.value}) "
            f"to restaurant {restaurant.id}"
        )

        self._publish(
            TableAdded,
            restaurant_id=restaurant.id,
            table_id=table.id,
            table_number=table.table_number,
            seats=table.seats,
            location=table.location.value,
        )
        return table

    def update_table(self, command: UpdateTableCommand) -> Table:
        """
        Resize and/or relocate a table.

        Raises:
            TableNotFoundError: unknown id
            ValidationError: seats out of range or location missing
            CapacityError: new size is below seats already reserved
        """
        restaurant = self.repository.find_by_table_id(command.id)
        table = restaurant.table_by_id(command.id)
        table.resize(command.seats)
        table.relocate(command.location)
        self.repository.save(restaurant)
        logger.info(f"Updated table {table.id}: {table.seats} seats, {table.location.value}")
        return table

    def get_table(self, table_id: int) -> Table:
        restaurant = self.repository.find_by_table_id(table_id)
        return restaurant.table_by_id(table_id)

    def list_tables(self, restaurant_id: int) -> List[Table]:
        return list(self.repository.get(restaurant_id).tables)

    def list_available_tables(self, restaurant_id: int) -> List[Table]:
        return [table for table in self.list_tables(restaurant_id) if table.available]

    def list_tables_by_location(self, restaurant_id: int, location: TableLocation) -> List[Table]:
        location = TableLocation(location)
        return [table for table in self.list_tables(restaurant_id) if table.location is location]

    def list_tables_for_party(self, restaurant_id: int, party_size: int) -> List[Table]:
        """Available tables with at least ``party_size`` seats, smallest first."""
        tables = [
            table for table in self.list_available_tables(restaurant_id)
            if table.seats >= party_size
        ]
        return sorted(tables, key=lambda table: table.seats)

    def make_table_available(self, table_id: int) -> Table:
        return self._set_available(table_id, True)

    def make_table_unavailable(self, table_id: int) -> Table:
        return self._set_available(table_id, False)

    def _set_available(self, table_id: int, available: bool) -> Table:
        restaurant = self.repository.find_by_table_id(table_id)
        table = restaurant.table_by_id(table_id)
        if table.available == available:
            return table

        if available:
            table.make_available()
        else:
            table.make_unavailable()
        self.repository.save(restaurant)
        logger.info(f"Table {table.table_number} of restaurant {restaurant.id} available={available}")

        self._publish(
            TableAvailabilityChanged,
            restaurant_id=restaurant.id,
            table_id=table.id,
            table_number=table.table_number,
            available=available,
        )
        return table

    def delete_table(self, table_id: int) -> None:
        restaurant = self.repository.find_by_table_id(table_id)
        table = restaurant.table_by_id(table_id)
        restaurant.remove_table(table)
        self.repository.save(restaurant)
        logger.info(f"Deleted table {table_id} from restaurant {restaurant.id}")

    def get_utilization_stats(self, restaurant_id: int) -> TableUtilizationStats:
        restaurant = self.repository.get(restaurant_id)
        tables = restaurant.tables
        available_tables = sum(1 for table in tables if table.available)
        return TableUtilizationStats(
            restaurant_id=restaurant.id,
            total_tables=len(tables),
            available_tables=available_tables,
            unavailable_tables=len(tables) - available_tables,
            total_seats=restaurant.total_seats,
            availability_rate=availability.calculate_availability_rate(restaurant),
        )


# ============================================================================
# Availability & Reservations
# ============================================================================

class AvailabilityManagementService(_UseCaseService):
    """Table search, reservation lifecycle and occupancy reporting."""

    # Search

    def find_available_tables(self, query: AvailabilityQuery) -> List[Table]:
        restaurant = self.repository.get(query.restaurant_id)
        return availability.find_available_tables(
            restaurant,
            query.party_size,
            query.date,
            query.start_time,
            query.end_time,
            clock=self.clock,
        )

    def find_best_available_table(self, query: AvailabilityQuery) -> Table:
        """
        Smallest table that fits the party for the whole range.

        Raises:
            NoTablesAvailableError: when no table qualifies
        """
        restaurant = self.repository.get(query.restaurant_id)
        table = availability.find_best_table(
            restaurant,
            query.party_size,
            query.date,
            query.start_time,
            query.end_time,
            clock=self.clock,
        )
        if table is None:
            raise NoTablesAvailableError(restaurant.id, query.date, query.start_time, query.end_time)
        return table

    def get_available_time_ranges(
        self,
        table_id: int,
        day: date,
        interval_minutes: Optional[int] = None,
    ) -> List[TimeRange]:
        restaurant = self.repository.find_by_table_id(table_id)
        return availability.get_available_time_ranges(
            restaurant.table_by_id(table_id),
            day,
            interval_minutes or self.settings.slot_interval_minutes,
            opening_hours=restaurant.opening_hours,
        )

    # Reservation lifecycle

    def create_reservation(self, command: CreateReservationCommand) -> ReservationSlot:
        """
        Book a slot on a specific table.

        Raises:
            TableNotFoundError: unknown table
            ValidationError: a reservation constraint failed
            CapacityError / OverlapError / OpeningHoursError: the table refused the slot
            ConcurrentModificationError: the table changed since it was loaded
        """
        with LogContext(
            __name__,
            table_id=command.table_id,
            reservation_date=command.date.isoformat(),
            party_size=command.party_size,
        ) as ctx:
            # Rejections log as warnings; anything else falls through to the context error log
            try:
                restaurant, table, slot = self._book(command)
            except DomainError as e:
                ctx.log("warning", f"Reservation rejected: {e}", error_code=e.code)
                rejected = e
            else:
                rejected = None
                ctx.log("info", f"Created reservation {slot.id} on table {table.table_number}")

        if rejected is not None:
            raise rejected

        self._publish(
            ReservationCreated,
            restaurant_id=restaurant.id,
            table_id=table.id,
            time_slot_id=slot.id,
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            party_size=slot.party_size,
            customer_email=slot.customer_email,
        )
        self._check_capacity_threshold(restaurant, slot)
        return slot

    def _book(self, command: CreateReservationCommand):
        restaurant = self.repository.find_by_table_id(command.table_id)
        table = restaurant.table_by_id(command.table_id)

        availability.validate_reservation_constraints(
            restaurant,
            table,
            command.party_size,
            command.date,
            command.start_time,
            command.end_time,
            clock=self.clock,
        )

        slot = ReservationSlot(
            command.date,
            command.start_time,
            command.end_time,
            reserved_seats=command.party_size,
            party_size=command.party_size,
            customer_name=command.customer_name,
            customer_phone=command.customer_phone,
            customer_email=command.customer_email,
            special_requests=command.special_requests,
            clock=self.clock,
        )
        table.add_time_slot(slot)
        self.repository.save(restaurant)
        return restaurant, table, slot

    def confirm_reservation(self, slot_id: int) -> ReservationSlot:
        return self._transition(slot_id, ReservationSlot.confirm, check_capacity=True)

    def cancel_reservation(self, slot_id: int) -> ReservationSlot:
        return self._transition(slot_id, ReservationSlot.cancel)

    def complete_reservation(self, slot_id: int) -> ReservationSlot:
        return self._transition(slot_id, ReservationSlot.complete)

    def _transition(
        self,
        slot_id: int,
        action: Callable[[ReservationSlot], None],
        check_capacity: bool = False,
    ) -> ReservationSlot:
        restaurant = self.repository.find_by_slot_id(slot_id)
        table, slot = restaurant.find_slot(slot_id)
        previous = slot.status

        try:
            action(slot)
        except Exception as e:
            logger.warning(f"Reservation {slot_id} transition from {previous.value} rejected: {e}")
            raise

        self.repository.save(restaurant)
        logger.info(f"Reservation {slot_id}: {previous.value} -> {slot.status.value}")

        self._publish(
            ReservationStatusChanged,
            restaurant_id=restaurant.id,
            table_id=table.id,
            time_slot_id=slot.id,
            previous_status=previous.value,
            new_status=slot.status.value,
        )
        if check_capacity:
            self._check_capacity_threshold(restaurant, slot)
        return slot

    def _check_capacity_threshold(self, restaurant: Restaurant, slot: ReservationSlot) -> None:
        rate = availability.calculate_utilization_rate(restaurant, slot.date, slot.start_time)
        threshold = self.settings.capacity_alert_threshold
        if rate < threshold:
            return

        logger.warning(
            f"Restaurant {restaurant.id} at {rate:.0%} utilization on {slot.date} {slot.start_time} "
            f"(threshold {threshold:.0%}, notify {self.settings.capacity_alert_recipient})"
        )
        self._publish(
            CapacityThresholdReached,
            restaurant_id=restaurant.id,
            restaurant_name=restaurant.name,
            date=slot.date,
            time=slot.start_time,
            utilization_rate=rate,
            threshold=threshold,
        )

    # Reservation queries

    def get_reservations_for_date(self, restaurant_id: int, day: date) -> List[ReservationSlot]:
        restaurant = self.repository.get(restaurant_id)
        slots = [slot for _, slot in restaurant.iter_slots() if slot.date == day]
        return sorted(slots, key=lambda slot: (slot.start_time, slot.table_number))

    def get_reservations_by_status(
        self,
        restaurant_id: int,
        status: ReservationStatus,
    ) -> List[ReservationSlot]:
        status = ReservationStatus(status)
        restaurant = self.repository.get(restaurant_id)
        slots = [slot for _, slot in restaurant.iter_slots() if slot.status is status]
        return sorted(slots, key=lambda slot: (slot.date, slot.start_time, slot.table_number))

    def get_upcoming_reservations(self, restaurant_id: int) -> List[ReservationSlot]:
        """AVAILABLE/CONFIRMED slots starting now or later, earliest first."""
        now = self.clock.now()
        today, current_time = now.date(), now.time()
        restaurant = self.repository.get(restaurant_id)
        slots = [
            slot for _, slot in restaurant.iter_slots()
            if slot.status in READ_BLOCKING_STATUSES
            and (slot.date > today or (slot.date == today and slot.start_time >= current_time))
        ]
        return sorted(slots, key=lambda slot: (slot.date, slot.start_time, slot.table_number))

    # Rates

    def get_availability_rate(self, restaurant_id: int, day: Optional[date] = None) -> float:
        return availability.calculate_availability_rate(self.repository.get(restaurant_id), day)

    def get_utilization_rate(self, restaurant_id: int, day: date, at: time) -> float:
        return availability.calculate_utilization_rate(self.repository.get(restaurant_id), day, at)

    def get_capacity_stats(self, restaurant_id: int) -> CapacityStats:
        return availability.get_capacity_stats(self.repository.get(restaurant_id))

    def can_accommodate(self, restaurant_id: int, party_size: int, day: date) -> bool:
        return availability.can_accommodate_on_date(self.repository.get(restaurant_id), party_size, day)
