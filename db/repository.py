"""SQLAlchemy-backed restaurant repository.

Aggregates are loaded whole (restaurant, tables, slots) and saved whole.
Each row's ``version`` must match the version the aggregate was loaded
with; a mismatch means another writer got there first.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from domain.errors import (
    ConcurrentModificationError,
    RestaurantNotFoundError,
    TableNotFoundError,
    TimeSlotNotFoundError,
)
from domain.models import Restaurant, Table

from .mapper import restaurant_from_row, write_restaurant, write_slot, write_table
from .models_sqlalchemy import RestaurantRow, TableRow, TimeSlotRow


logger = logging.getLogger(__name__)


class SqlAlchemyRestaurantRepository:
    """Restaurant repository on top of a SQLAlchemy session.

    The repository flushes but never commits; the caller owns the
    transaction (see ``db.session.get_session_context``).
    """

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _select(self):
        return select(RestaurantRow).options(
            selectinload(RestaurantRow.tables).selectinload(TableRow.slots)
        )

    def _load_row(self, restaurant_id: int, refresh: bool = False) -> Optional[RestaurantRow]:
        stmt = self._select().where(RestaurantRow.id == restaurant_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        return self.session.execute(stmt).scalar_one_or_none()

    def get(self, restaurant_id: int) -> Restaurant:
        row = self._load_row(restaurant_id)
        if row is None:
            raise RestaurantNotFoundError(restaurant_id)
        return restaurant_from_row(row)

    def find_all(self) -> List[Restaurant]:
        rows = self.session.execute(self._select().order_by(RestaurantRow.id)).scalars().all()
        return [restaurant_from_row(row) for row in rows]

    def find_by_name(self, fragment: str) -> List[Restaurant]:
        """Case-insensitive substring match on the restaurant name."""
        stmt = (
            self._select()
            .where(RestaurantRow.name.ilike(f"%{fragment}%"))
            .order_by(RestaurantRow.id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [restaurant_from_row(row) for row in rows]

    def find_by_table_id(self, table_id: int) -> Restaurant:
        stmt = select(TableRow.restaurant_id).where(TableRow.id == table_id)
        restaurant_id = self.session.execute(stmt).scalar_one_or_none()
        if restaurant_id is None:
            raise TableNotFoundError(table_id)
        return self.get(restaurant_id)

    def find_by_slot_id(self, slot_id: int) -> Restaurant:
        stmt = (
            select(TableRow.restaurant_id)
            .join(TableRow.slots)
            .where(TimeSlotRow.id == slot_id)
        )
        restaurant_id = self.session.execute(stmt).scalar_one_or_none()
        if restaurant_id is None:
            raise TimeSlotNotFoundError(slot_id)
        return self.get(restaurant_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, restaurant: Restaurant) -> Restaurant:
        """
        Insert or update the whole aggregate.

        Raises:
            RestaurantNotFoundError: the aggregate has an id unknown to storage
            ConcurrentModificationError: a row changed since the aggregate was loaded
        """
        if restaurant.id is None:
            row = RestaurantRow()
            self.session.add(row)
        else:
            row = self._load_row(restaurant.id, refresh=True)
            if row is None:
                raise RestaurantNotFoundError(restaurant.id)
            self._check_version("Restaurant", restaurant.id, restaurant.version, row.version)

        write_restaurant(row, restaurant)
        orphans = self._orphan_tables(row, restaurant)
        if restaurant.id is not None and (orphans or any(t.id is None for t in restaurant.tables)):
            # Bump the restaurant version so concurrent table additions collide
            flag_modified(row, "name")
        if orphans:
            for table_row in orphans:
                row.tables.remove(table_row)
            # Deletes go out first so a freed table number can be taken again
            self._flush(restaurant)
        pairs = self._sync_tables(row, restaurant)
        self._flush(restaurant)

        restaurant._set_id(row.id)
        restaurant.version = row.version
        for table, table_row, slot_pairs in pairs:
            table.id = table_row.id
            table.version = table_row.version
            for slot, slot_row in slot_pairs:
                slot.id = slot_row.id
                slot.version = slot_row.version
                slot.table_id = table_row.id
                slot.table_number = table.table_number

        logger.debug(f"Saved restaurant {row.id} (version {row.version}, {len(pairs)} tables)")
        return restaurant

    def delete(self, restaurant_id: int) -> None:
        row = self.session.get(RestaurantRow, restaurant_id)
        if row is None:
            raise RestaurantNotFoundError(restaurant_id)
        self.session.delete(row)
        self.session.flush()

    def _flush(self, restaurant: Restaurant) -> None:
        try:
            self.session.flush()
        except StaleDataError as e:
            logger.warning(f"Stale write for restaurant {restaurant.id}: {e}")
            raise ConcurrentModificationError(
                f"Restaurant {restaurant.id} was modified concurrently",
                code="CONCURRENT_MODIFICATION",
                details={"restaurant_id": restaurant.id},
            ) from e
        except IntegrityError as e:
            logger.warning(f"Conflicting write for restaurant {restaurant.id}: {e.orig}")
            raise ConcurrentModificationError(
                f"Restaurant {restaurant.id} conflicts with a concurrent change",
                code="CONCURRENT_MODIFICATION",
                details={"restaurant_id": restaurant.id},
            ) from e

    @staticmethod
    def _orphan_tables(row: RestaurantRow, restaurant: Restaurant) -> List[TableRow]:
        kept = {table.id for table in restaurant.tables if table.id is not None}
        return [table_row for table_row in row.tables if table_row.id not in kept]

    def _sync_tables(self, row: RestaurantRow, restaurant: Restaurant) -> list:
        existing: Dict[int, TableRow] = {table_row.id: table_row for table_row in row.tables}
        pairs = []
        table_rows = []

        for table in restaurant.tables:
            if table.id is None:
                table_row = TableRow()
            else:
                table_row = existing.pop(table.id, None)
                if table_row is None:
                    raise TableNotFoundError(table.id)
                self._check_version("Table", table.id, table.version, table_row.version)

            write_table(table_row, table)
            slot_pairs, slots_changed = self._sync_slots(table_row, table)
            if slots_changed and table.id is not None:
                # Bump the table version so concurrent bookings on one table collide
                flag_modified(table_row, "available")

            table_rows.append(table_row)
            pairs.append((table, table_row, slot_pairs))

        row.tables = table_rows
        return pairs

    def _sync_slots(self, table_row: TableRow, table: Table):
        existing: Dict[int, TimeSlotRow] = {slot_row.id: slot_row for slot_row in table_row.slots}
        slot_pairs = []
        slot_rows = []
        changed = False

        for slot in table.time_slots:
            if slot.id is None:
                slot_row = TimeSlotRow()
                changed = True
            else:
                slot_row = existing.pop(slot.id, None)
                if slot_row is None:
                    raise TimeSlotNotFoundError(slot.id)
                self._check_version("Time slot", slot.id, slot.version, slot_row.version)

            if write_slot(slot_row, slot):
                changed = True
            slot_rows.append(slot_row)
            slot_pairs.append((slot, slot_row))

        if existing:
            changed = True
        table_row.slots = slot_rows
        return slot_pairs, changed

    @staticmethod
    def _check_version(entity: str, entity_id: int, loaded: Optional[int], stored: int) -> None:
        if loaded is not None and loaded != stored:
            raise ConcurrentModificationError(
                f"{entity} {entity_id} was modified concurrently (loaded version {loaded}, stored {stored})",
                code="CONCURRENT_MODIFICATION",
                details={"entity": entity, "id": entity_id, "loaded": loaded, "stored": stored},
            )
