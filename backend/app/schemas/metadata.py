import json
from collections.abc import Mapping
from typing import Any

from pydantic import Field, model_validator

from app.schemas.common import CamelModel


class FileMetadata(CamelModel):
    """Descriptive metadata attached to an uploaded object.

    Only the named fields are persisted as object-store headers. Any other key
    supplied by a client lands in ``extensions``; those values are accepted for
    the request but are not stored with the object.
    """

    user_id: str | None = None
    original_filename: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    description: str | None = None
    extensions: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extensions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        known: set[str] = set()
        for name, field in cls.model_fields.items():
            known.add(name)
            if field.alias:
                known.add(field.alias)

        raw = data.get("extensions") or {}
        if not isinstance(raw, Mapping):
            raise ValueError("extensions must be an object")
        extra = dict(raw)
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key in known:
                values[key] = value
            else:
                extra[key] = value
        values["extensions"] = {
            str(key): value if isinstance(value, str) else json.dumps(value)
            for key, value in extra.items()
        }
        return values

    def with_updates(self, **changes: Any) -> "FileMetadata":
        return self.model_copy(update=changes)
