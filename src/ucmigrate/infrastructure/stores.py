"""Settings stores — the in-memory targets of a migration.

A store exposes a declared type per field plus get/set by name. The
migration never enumerates a store; it only looks fields up by the names
found in the settings file being imported.

Two implementations ship here:

- :class:`DictSettingsStore` — a plain name → type table with values.
- :class:`ModelSettingsStore` — adapts a Pydantic model instance, using
  its field annotations and constraints as the declared types.

Both validate on :meth:`set`, so an assignment-time type failure raises
``pydantic.ValidationError`` and the transfer layer can skip that field.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, TypeAdapter


@functools.lru_cache(maxsize=256)
def _cached_adapter(declared_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(declared_type)


def type_adapter_for(declared_type: Any) -> TypeAdapter[Any]:
    """:class:`TypeAdapter` for *declared_type*, cached when it is hashable.

    Raises ``pydantic.PydanticSchemaGenerationError`` when pydantic cannot
    build a schema for the type.
    """
    try:
        hash(declared_type)
    except TypeError:
        return TypeAdapter(declared_type)
    return _cached_adapter(declared_type)


@runtime_checkable
class SettingsStore(Protocol):
    """Target schema plus get/set accessors, keyed by field name."""

    def field_type(self, name: str) -> Any | None:
        """Declared type of *name*, or None if the store has no such field."""
        ...

    def get(self, name: str) -> Any: ...

    def set(self, name: str, value: Any) -> None: ...


class DictSettingsStore:
    """Store backed by a type table and a value dict."""

    def __init__(
        self,
        types: Mapping[str, Any],
        values: Mapping[str, Any] | None = None,
    ) -> None:
        self._types = dict(types)
        self._values: dict[str, Any] = dict(values or {})

    def field_type(self, name: str) -> Any | None:
        return self._types.get(name)

    def get(self, name: str) -> Any:
        if name not in self._types:
            msg = f"Unknown setting: {name!r}"
            raise KeyError(msg)
        return self._values.get(name)

    def set(self, name: str, value: Any) -> None:
        declared = self._types.get(name)
        if declared is None:
            msg = f"Unknown setting: {name!r}"
            raise KeyError(msg)
        self._values[name] = type_adapter_for(declared).validate_python(value, strict=True)

    def as_dict(self) -> dict[str, Any]:
        """Snapshot of the values assigned so far."""
        return dict(self._values)


class ModelSettingsStore:
    """Store view over a Pydantic model instance.

    Values are validated against the field annotation before assignment;
    the model's own ``validate_assignment`` / ``frozen`` settings still
    apply on top.
    """

    def __init__(self, model: BaseModel) -> None:
        self._model = model

    @property
    def model(self) -> BaseModel:
        return self._model

    def field_type(self, name: str) -> Any | None:
        info = type(self._model).model_fields.get(name)
        if info is None:
            return None
        # Constraints declared through Field() live in metadata, not the annotation.
        return info.rebuild_annotation()

    def get(self, name: str) -> Any:
        if name not in type(self._model).model_fields:
            msg = f"Unknown setting: {name!r}"
            raise KeyError(msg)
        return getattr(self._model, name)

    def set(self, name: str, value: Any) -> None:
        declared = self.field_type(name)
        if declared is None:
            msg = f"Unknown setting: {name!r}"
            raise KeyError(msg)
        validated = type_adapter_for(declared).validate_python(value)
        setattr(self._model, name, validated)
