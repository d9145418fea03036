"""SQLAlchemy models for the restaurant availability engine tables.

Every row carries a ``version`` column managed by SQLAlchemy's
``version_id_col``: an UPDATE against a row whose version moved on since it
was loaded affects zero rows and raises StaleDataError.
"""

from datetime import date, time
from typing import List, Optional

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from domain.enums import ReservationStatus


class RestaurantRow(Base, TimestampMixin):
    """Restaurant table model."""

    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    address: Mapped[str] = mapped_column(String(500), nullable=False)

    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    capacity: Mapped[int] = mapped_column(Integer, nullable=False)

    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    opening_time: Mapped[time] = mapped_column(Time, nullable=False)

    closing_time: Mapped[time] = mapped_column(Time, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    tables: Mapped[List["TableRow"]] = relationship(
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="TableRow.id",
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        """String representation of RestaurantRow."""
        return (
            f"<RestaurantRow(id={self.id}, name='{self.name}', "
            f"capacity={self.capacity}, active={self.active})>"
        )


class TableRow(Base, TimestampMixin):
    """Restaurant table (seating resource) model."""

    __tablename__ = "restaurant_tables"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    restaurant_id: Mapped[int] = mapped_column(
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    table_number: Mapped[int] = mapped_column(Integer, nullable=False)

    seats: Mapped[int] = mapped_column(Integer, nullable=False)

    location: Mapped[str] = mapped_column(String(20), nullable=False)

    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    restaurant: Mapped[RestaurantRow] = relationship(back_populates="tables")

    slots: Mapped[List["TimeSlotRow"]] = relationship(
        back_populates="table",
        cascade="all, delete-orphan",
        order_by="TimeSlotRow.id",
    )

    __table_args__ = (
        UniqueConstraint("restaurant_id", "table_number", name="restaurant_table_number"),
        Index("ix_restaurant_tables_restaurant_available", "restaurant_id", "available"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        """String representation of TableRow."""
        return (
            f"<TableRow(id={self.id}, restaurant_id={self.restaurant_id}, "
            f"table_number={self.table_number}, seats={self.seats}, "
            f"location='{self.location}', available={self.available})>"
        )


class TimeSlotRow(Base, TimestampMixin):
    """Reservation time slot model."""

    __tablename__ = "time_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    table_id: Mapped[int] = mapped_column(
        ForeignKey("restaurant_tables.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    reservation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    start_time: Mapped[time] = mapped_column(Time, nullable=False)

    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    reserved_seats: Mapped[int] = mapped_column(Integer, nullable=False)

    party_size: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ReservationStatus.AVAILABLE.value,
        index=True,
    )

    customer_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    customer_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    special_requests: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    table: Mapped[TableRow] = relationship(back_populates="slots")

    __table_args__ = (
        Index("ix_time_slots_table_date", "table_id", "reservation_date"),
        Index("ix_time_slots_status_date", "status", "reservation_date"),
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        """String representation of TimeSlotRow."""
        return (
            f"<TimeSlotRow(id={self.id}, table_id={self.table_id}, "
            f"date={self.reservation_date}, start={self.start_time}, end={self.end_time}, "
            f"seats={self.reserved_seats}, status='{self.status}')>"
        )
