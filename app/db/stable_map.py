import logging
import threading
from typing import Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import TypeAdapter
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.models.stable_entry import StableEntry

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Process-wide: one request runs its store operations to completion at a time.
STORE_LOCK = threading.RLock()


class StoreCapacityExceeded(Exception):
    """The stable region cannot accommodate another entry."""


class StableOrderedMap(Generic[V]):
    """
    Ordered ``str -> V`` map persisted in the ``stable_map_entries`` table.

    Entries are scoped by ``memory_id`` so several maps can share one database
    file. Keys are kept in ascending order by the table's primary key index,
    values are stored as JSON produced by a pydantic ``TypeAdapter`` for
    ``value_type``. Every mutation is committed before the call returns, so
    the contents survive a process restart with nothing else to save.

    Lookups report absence as ``None`` instead of raising.
    """

    def __init__(
        self,
        db: Session,
        value_type: Type[V],
        memory_id: int = 0,
        max_entries: int = 0,
    ):
        self.db = db
        self.memory_id = memory_id
        self.max_entries = max_entries
        self._adapter = TypeAdapter(value_type)

    def insert(self, key: str, value: V) -> Optional[V]:
        encoded = self._encode(value)

        with STORE_LOCK:
            entry = self._entry(key)
            if entry:
                previous = self._decode(entry.value)
                entry.value = encoded
            else:
                previous = None
                self._check_capacity()
                self.db.add(
                    StableEntry(memory_id=self.memory_id, key=key, value=encoded)
                )

            self._commit()
        return previous

    def get(self, key: str) -> Optional[V]:
        entry = self._entry(key)
        return self._decode(entry.value) if entry else None

    def remove(self, key: str) -> Optional[V]:
        with STORE_LOCK:
            entry = self._entry(key)
            if not entry:
                return None

            previous = self._decode(entry.value)
            self.db.delete(entry)
            self._commit()
        return previous

    def contains_key(self, key: str) -> bool:
        return self._entry(key) is not None

    def is_empty(self) -> bool:
        return len(self) == 0

    def keys(self, start_index: int = 0, length: Optional[int] = None) -> List[str]:
        stmt = self._window(select(StableEntry.key), start_index, length)
        return list(self.db.scalars(stmt))

    def values(self, start_index: int = 0, length: Optional[int] = None) -> List[V]:
        stmt = self._window(select(StableEntry.value), start_index, length)
        return [self._decode(raw) for raw in self.db.scalars(stmt)]

    def items(
        self, start_index: int = 0, length: Optional[int] = None
    ) -> List[Tuple[str, V]]:
        stmt = self._window(
            select(StableEntry.key, StableEntry.value), start_index, length
        )
        return [(key, self._decode(raw)) for key, raw in self.db.execute(stmt)]

    def __len__(self) -> int:
        stmt = (
            select(func.count())
            .select_from(StableEntry)
            .where(StableEntry.memory_id == self.memory_id)
        )
        return self.db.scalar(stmt) or 0

    def __contains__(self, key: str) -> bool:
        return self.contains_key(key)

    def _entry(self, key: str) -> Optional[StableEntry]:
        # refresh so writes committed by other sessions are visible
        return self.db.get(
            StableEntry, (self.memory_id, key), populate_existing=True
        )

    def _window(self, stmt, start_index: int, length: Optional[int]):
        stmt = (
            stmt.where(StableEntry.memory_id == self.memory_id)
            .order_by(StableEntry.key)
            .offset(start_index)
        )
        if length is not None:
            stmt = stmt.limit(length)
        return stmt

    def _check_capacity(self) -> None:
        if self.max_entries and len(self) >= self.max_entries:
            raise StoreCapacityExceeded(
                f"memory {self.memory_id} is full ({self.max_entries} entries)"
            )

    def _commit(self) -> None:
        try:
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            # sqlite reports SQLITE_FULL as "database or disk is full"
            if "full" in str(e).lower():
                raise StoreCapacityExceeded(str(e.orig)) from e
            raise

    def _encode(self, value: V) -> str:
        return self._adapter.dump_json(value).decode("utf-8")

    def _decode(self, raw: str) -> V:
        return self._adapter.validate_json(raw)
