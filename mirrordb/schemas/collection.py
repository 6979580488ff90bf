"""
Collection schema declared before the mirror is opened.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CollectionConfig(BaseModel):
    """
    Per-collection configuration.

    The key field value is persisted as the MongoDB ``_id`` so that point
    writes and deletes address the same document the mirror holds in memory.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key_field: str = Field(
        default="_id",
        alias="keyPath",
        min_length=1,
        description="Record field used as the lookup key",
    )
    auto_increment: bool = Field(
        default=False,
        alias="autoIncrement",
        description="Assign integer keys to records inserted without one",
    )
    unique: frozenset[str] = Field(
        default_factory=frozenset,
        description="Fields backed by a unique index in the store",
    )

    @property
    def uses_native_id(self) -> bool:
        return self.key_field == "_id"

    def key_of(self, record: dict[str, Any]) -> Optional[Any]:
        """Return the record's key value, or None when it has none."""
        return record.get(self.key_field)

    def to_document(self, record: dict[str, Any]) -> dict[str, Any]:
        """Copy a record into the document shape written to the store."""
        doc = dict(record)
        if not self.uses_native_id and self.key_field in record:
            doc["_id"] = record[self.key_field]
        return doc

    def from_document(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Strip store-only fields from a loaded document."""
        if self.uses_native_id:
            return doc
        record = dict(doc)
        record.pop("_id", None)
        return record
