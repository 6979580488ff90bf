"""
Read-write view bound to one mirrored collection.
"""
import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorCollection

from mirrordb.core.exceptions import MissingKeyError, RecordNotFoundError
from mirrordb.models.keys import KeyGenerator
from mirrordb.models.results import ChangeLike, Record, normalize_changes
from mirrordb.schemas.collection import CollectionConfig
from mirrordb.services.persistence_service import PersistenceService
from mirrordb.views.base import QueryableView

if TYPE_CHECKING:
    from mirrordb.mirror import Mirror

logger = logging.getLogger("mirrordb.views")


class CollectionView(QueryableView):
    """
    CRUD over a collection's in-memory records.

    The view shares its record list with the mirror, so every view of the
    same collection sees the same data. Mutations apply to memory first and
    are then handed to the persistence service without waiting.
    """

    def __init__(
        self,
        mirror: "Mirror",
        name: str,
        records: list[Record],
        config: CollectionConfig,
        writer: PersistenceService,
        keys: Optional[KeyGenerator] = None,
    ):
        super().__init__(mirror, name, records)
        self.config = config
        self._writer = writer
        if keys is None and config.auto_increment:
            keys = KeyGenerator.seeded(config.key_of(r) for r in records)
        self._keys = keys

    @property
    def store_collection(self) -> AsyncIOMotorCollection:
        """Underlying MongoDB collection, for direct store access."""
        return self._writer.db[self._name]

    # ==================== Key Lookup ====================

    def get_index(self, key: Any) -> Optional[int]:
        """Position of the record with ``key``, or None."""
        key_field = self.config.key_field
        for i, record in enumerate(self._records):
            if key_field in record and record[key_field] == key:
                return i
        return None

    def get(self, key: Any) -> Optional[Record]:
        """Record with ``key``, or None."""
        index = self.get_index(key)
        if index is None:
            return None
        return self._records[index]

    # ==================== Mutations ====================

    def insert(self, record: Record) -> Record:
        """
        Append a record and persist it in the background.

        Auto-increment collections assign the next integer key to records
        inserted without one; otherwise the record is returned unchanged.

        Raises:
            MissingKeyError: If the record has no key and the collection
                does not auto-increment
        """
        if self.config.key_of(record) is None:
            if not self.config.auto_increment:
                raise MissingKeyError(
                    f"Record has no '{self.config.key_field}' and '{self._name}' "
                    f"does not auto-increment"
                )
            record[self.config.key_field] = self._keys.next()
            self._save_key_counter()
        else:
            self._observe_key(self.config.key_of(record))
        self._records.append(record)
        self._writer.add(self._name, self.config.to_document(record))
        return record

    def delete(self, key: Any) -> Optional[Record]:
        """Remove the record with ``key``; returns it, or None if absent."""
        index = self.get_index(key)
        if index is None:
            return None
        record = self._records.pop(index)
        self._writer.delete(self._name, self.config.key_of(record))
        return record

    def update(self, key: Any, changes: Iterable[ChangeLike]) -> Record:
        """
        Overwrite fields of the record with ``key``.

        Changes apply in order, so a later change to the same field wins.

        Raises:
            RecordNotFoundError: If no record has ``key``
        """
        index = self.get_index(key)
        if index is None:
            raise RecordNotFoundError(f"No record with key {key!r} in '{self._name}'")

        normalized = normalize_changes(changes)
        record = self._records[index]
        old_key = self.config.key_of(record)
        for change in normalized:
            record[change.field] = change.value
        self._records[index] = record

        new_key = self.config.key_of(record)
        if new_key != old_key:
            logger.debug(f"Key of record in '{self._name}' changed from {old_key!r} to {new_key!r}")
            self._writer.delete(self._name, old_key)
            self._observe_key(new_key)
        self._writer.put(self._name, new_key, self.config.to_document(record))
        return record

    def truncate(self) -> None:
        """Remove every record, in memory and in the store."""
        self._records.clear()
        self._writer.clear(self._name)

    # ==================== Internals ====================

    def _observe_key(self, key: Any) -> None:
        if self._keys is not None and self._keys.observe(key):
            self._save_key_counter()

    def _save_key_counter(self) -> None:
        self._writer.save_key_counter(self._name, self._keys.current)
