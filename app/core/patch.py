"""Partial-update ("patch") support.

A request body for PUT/PATCH may leave a field out, send a value, or send an
explicit null. Pydantic records which fields the client actually sent in
``model_fields_set``; :class:`Patch` is built from that set so the three
cases stay distinct all the way to the ORM row.
"""

from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from app.core.exceptions import raise_validation_error


class Patch(Mapping[str, Any]):
    """Immutable mapping of the fields a client explicitly supplied.

    Keys are ORM attribute names (snake_case). A key mapped to None means
    "clear this column"; an absent key means "leave it untouched".
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._fields = dict(fields or {})

    @classmethod
    def from_model(
        cls,
        model: BaseModel,
        *,
        nullable: frozenset[str] = frozenset(),
        rename: Mapping[str, str] | None = None,
    ) -> "Patch":
        """Build a patch from the fields set on a pydantic model.

        Args:
            model: Parsed request body.
            nullable: Fields that may be explicitly cleared with null.
            rename: Optional map from schema field name to ORM attribute name.

        Raises:
            APIException: 400 VALIDATION_ERROR if a non-nullable field is null.
        """
        rename = rename or {}
        fields: dict[str, Any] = {}
        rejected: dict[str, list[str]] = {}
        for name in model.model_fields_set:
            value = getattr(model, name)
            if value is None and name not in nullable:
                rejected[name] = ["Field may not be null"]
                continue
            if isinstance(value, Enum):
                value = value.value  # stored as plain strings
            fields[rename.get(name, name)] = value
        if rejected:
            raise_validation_error("Validation failed", rejected)
        return cls(fields)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Patch({self._fields!r})"

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(self._fields)

    def without(self, *keys: str) -> "Patch":
        return Patch({k: v for k, v in self._fields.items() if k not in keys})

    def require_any(self) -> None:
        """Reject an empty patch with 400 VALIDATION_ERROR."""
        if not self._fields:
            raise_validation_error("No fields provided for update")


def apply_patch(row: Any, patch: Patch) -> list[str]:
    """Write the patch onto an ORM row and return the attributes that changed."""
    changed = []
    for key, value in patch.items():
        if getattr(row, key) != value:
            setattr(row, key, value)
            changed.append(key)
    return changed
