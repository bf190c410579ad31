"""Narrowing helpers for parsed TOML (the manifest) and JSON (GitHub replies).

Both parsers hand back ``object`` trees; these helpers check the shape at the
boundary so the rest of the code works with typed values.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

__all__ = ["StrDict", "as_obj_list", "as_str_dict", "get_int", "get_list", "get_str", "get_table"]

StrDict = dict[str, object]


def as_str_dict(obj: object) -> StrDict | None:
    """obj as a string-keyed dict, or None."""
    if isinstance(obj, dict) and all(isinstance(k, str) for k in cast(dict[object, object], obj)):
        return cast(StrDict, obj)
    return None


def as_obj_list(obj: object) -> list[object] | None:
    return cast(list[object], obj) if isinstance(obj, list) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped non-empty string at key, or None."""
    match table.get(key):
        case str(value) if value.strip():
            return value.strip()
        case _:
            return None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    match table.get(key):
        case bool():
            return None
        case int(value):
            return value
        case _:
            return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> list[object] | None:
    return as_obj_list(table.get(key))
