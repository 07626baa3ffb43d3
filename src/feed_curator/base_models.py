# feed_curator/base_models.py
"""Base model for message payloads and persisted records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Model whose wire form uses camelCase keys.

    Python code works with snake_case attributes; ``to_wire()`` produces the
    camelCase dict that crosses context boundaries and lands in storage.
    Dict-style access (``obj["isRunning"]`` or ``obj["is_running"]``) is
    supported so consumers of raw payloads keep working.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> WireModel:
        return cls.model_validate(data)

    def _field_for(self, key: str) -> str | None:
        fields = type(self).model_fields
        if key in fields:
            return key
        for name, info in fields.items():
            if info.alias == key:
                return name
        return None

    def __getitem__(self, key: str) -> Any:
        name = self._field_for(key)
        if name is None:
            raise KeyError(key)
        return getattr(self, name)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            return self._field_for(key) is not None
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, dict):
            return self.to_wire() == other or self.model_dump() == other
        return super().__eq__(other)
