"""
Pydantic base class shared by every persisted record.

This module provides:
- StoreModel: frozen model with camelCase aliases (snapshot format)
- new_id: short random identifier used for tenants, sections, feed items
"""

import uuid
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

M = TypeVar("M", bound="StoreModel")


def new_id() -> str:
    """Generate a short opaque identifier."""
    return uuid.uuid4().hex[:9]


class StoreModel(BaseModel):
    """
    Base class for all store records.

    Records are immutable: every change produces a new instance, either via
    model_copy(update=...) for already-validated values or via merged() for
    caller-supplied partial updates.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @classmethod
    def field_name(cls, key: str) -> str:
        """Resolve a field name or its camelCase alias to the field name."""
        if key in cls.model_fields:
            return key
        for name, field in cls.model_fields.items():
            if field.alias == key:
                return name
        return key

    def merged(self: M, updates: Mapping[str, Any]) -> M:
        """Shallow-merge `updates` into a re-validated copy."""
        data = self.model_dump()
        data.update({self.field_name(key): value for key, value in updates.items()})
        return self.__class__.model_validate(data)

    def to_snapshot(self) -> dict:
        """JSON-compatible dict in the persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)
