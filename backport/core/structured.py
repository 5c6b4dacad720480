"""Helpers for safely reading untyped TOML data.

They provide runtime validation and static type narrowing at the boundary
where ``.backport.toml`` is parsed.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def get_str(data: Mapping[str, object], key: str) -> str | None:
    """Return a non-empty string value, or None when missing or mistyped."""
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def get_table(data: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(data.get(key))
