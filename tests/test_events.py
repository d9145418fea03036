"""Tests for domain events and publisher adapters."""
import logging
import pytest
from datetime import time
from unittest.mock import Mock

from conftest import TOMORROW
from domain.events import CapacityThresholdReached, ReservationCreated, TableAdded
from domain.schemas import CreateReservationCommand
from services.events import InMemoryEventPublisher, LoggingEventPublisher, safe_publish
from services.reservation_service import AvailabilityManagementService


@pytest.mark.unit
class TestDomainEvents:
    """Test event models."""

    def test_event_payload(self):
        """Test the log payload carries the event type."""
        event = TableAdded(restaurant_id=3, table_id=7, table_number=1, seats=4, location="WINDOW")
        payload = event.to_log_dict()

        assert event.aggregate_id == 3
        assert payload["event_type"] == "TableAdded"
        assert payload["seats"] == 4
        assert "occurred_at" in payload

    def test_events_are_frozen(self):
        """Test events cannot be mutated after creation."""
        event = TableAdded(restaurant_id=3, table_id=7, table_number=1, seats=4, location="WINDOW")
        with pytest.raises(Exception):
            event.seats = 6


@pytest.mark.unit
class TestPublishers:
    """Test publisher adapters."""

    def test_in_memory_publisher(self):
        """Test collecting and filtering events."""
        publisher = InMemoryEventPublisher()
        publisher.publish(TableAdded(restaurant_id=1, table_id=1, table_number=1, seats=2, location="INDOOR"))

        assert len(publisher.of_type(TableAdded)) == 1
        assert publisher.of_type(ReservationCreated) == []
        publisher.clear()
        assert publisher.events == []

    def test_logging_publisher_levels(self, caplog):
        """Test capacity alerts log as warnings, other events as info."""
        publisher = LoggingEventPublisher("test.events")
        with caplog.at_level(logging.INFO, logger="test.events"):
            publisher.publish(TableAdded(restaurant_id=1, table_id=1, table_number=1, seats=2, location="INDOOR"))
            publisher.publish(
                CapacityThresholdReached(
                    restaurant_id=1, restaurant_name="Chez Test", date=TOMORROW,
                    time=time(19, 0), utilization_rate=0.9, threshold=0.8,
                )
            )

        levels = [record.levelno for record in caplog.records if record.name == "test.events"]
        assert levels == [logging.INFO, logging.WARNING]
        assert caplog.records[-1].event["event_type"] == "CapacityThresholdReached"

    def test_safe_publish_swallows_failures(self, caplog):
        """Test a failing publisher is logged, not raised."""
        publisher = Mock()
        publisher.publish.side_effect = RuntimeError("broker down")
        event = TableAdded(restaurant_id=1, table_id=1, table_number=1, seats=2, location="INDOOR")

        with caplog.at_level(logging.ERROR, logger="services.events"):
            assert safe_publish(publisher, event) is False
        assert "broker down" in caplog.text

    def test_safe_publish_without_publisher(self):
        """Test publishing to nothing."""
        event = TableAdded(restaurant_id=1, table_id=1, table_number=1, seats=2, location="INDOOR")
        assert safe_publish(None, event) is False


@pytest.mark.integration
class TestPublishFailureDoesNotRollBack:
    """Test a failing publisher leaves the mutation in place."""

    def test_reservation_survives_publisher_failure(self, repository, stored_restaurant, clock):
        """Test the slot is stored even though publishing raised."""
        publisher = Mock()
        publisher.publish.side_effect = RuntimeError("broker down")
        service = AvailabilityManagementService(repository, publisher, clock=clock)
        table_id = stored_restaurant.table(2).id

        slot = service.create_reservation(
            CreateReservationCommand(
                table_id=table_id, date=TOMORROW,
                start_time=time(19, 0), end_time=time(21, 0), party_size=2,
            )
        )

        assert publisher.publish.called
        stored = repository.find_by_table_id(table_id).table_by_id(table_id)
        assert [s.id for s in stored.time_slots] == [slot.id]
