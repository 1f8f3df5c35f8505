"""Immutable structural value for opaque JSON documents.

Rule conditions and options are documents the engine never interprets. It only
compares them, so they are frozen into nested tuples that compare structurally.
Object key order is part of the value: two objects holding the same members in
a different order are different documents. Scalars are tagged with their JSON
type so that ``1``, ``1.0`` and ``true`` stay distinct.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import cast

type JsonValue = None | bool | int | float | str | list[JsonValue] | dict[str, JsonValue]
type FrozenValue = tuple[str, object]

_OBJECT = "object"
_ARRAY = "array"


def _freeze(value: object) -> FrozenValue:
    if isinstance(value, Mapping):
        members = cast(Mapping[object, object], value)
        frozen_members: list[tuple[str, FrozenValue]] = []
        for key, member in members.items():
            if not isinstance(key, str):
                raise TypeError(f"Document keys must be strings, got {type(key).__name__}")
            frozen_members.append((key, _freeze(member)))
        return (_OBJECT, tuple(frozen_members))
    if isinstance(value, Sequence) and not isinstance(value, str):
        return (_ARRAY, tuple(_freeze(item) for item in cast(Sequence[object], value)))
    if value is None:
        return ("null", None)
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, int):
        return ("int", value)
    if isinstance(value, float):
        return ("float", value)
    if isinstance(value, str):
        return ("string", value)
    raise TypeError(f"Unsupported document value of type {type(value).__name__}")


def _thaw(frozen: FrozenValue) -> JsonValue:
    kind, payload = frozen
    if kind == _OBJECT:
        members = cast(tuple[tuple[str, FrozenValue], ...], payload)
        return {key: _thaw(member) for key, member in members}
    if kind == _ARRAY:
        return [_thaw(item) for item in cast(tuple[FrozenValue, ...], payload)]
    return cast(JsonValue, payload)


@dataclass(frozen=True, slots=True)
class Document:
    """A frozen JSON value supporting equality, hashing and lookup of top-level keys."""

    tree: FrozenValue

    @classmethod
    def of(cls, value: object) -> Document:
        return cls(_freeze(value))

    @classmethod
    def empty(cls) -> Document:
        return cls((_OBJECT, ()))

    @property
    def is_object(self) -> bool:
        return self.tree[0] == _OBJECT

    def get(self, key: str) -> JsonValue:
        """Return a top-level member of an object document, or ``None``."""

        if not self.is_object:
            return None
        for member_key, member in cast(tuple[tuple[str, FrozenValue], ...], self.tree[1]):
            if member_key == key:
                return _thaw(member)
        return None

    def to_json(self) -> JsonValue:
        return _thaw(self.tree)
