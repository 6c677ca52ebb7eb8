"""Plain-tree helpers: copy, merge, compare, and address JSON-shaped data.

A tree is a dict with str keys whose leaves are lists, str, int, float,
bool or None. Nothing here mutates its inputs.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Iterator


class _Missing:
    """Marker for "nothing at this path". Distinct from None (JSON null)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_SCALARS = (str, int, float, bool, type(None))


def deep_copy(value: Any) -> Any:
    """Copy a JSON-shaped value. Tuples become lists.

    Raises TypeError for anything that would not survive serialization
    (objects, sets, non-str dict keys, ...).
    """
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"State keys must be str, got {type(key).__name__}: {key!r}")
            out[key] = deep_copy(item)
        return out
    if isinstance(value, (list, tuple)):
        return [deep_copy(item) for item in value]
    if isinstance(value, _SCALARS):
        return value
    raise TypeError(f"Value of type {type(value).__name__} cannot be stored in state")


def deep_merge(target: Any, source: Any) -> Any:
    """Merge source into a copy of target.

    Dict values merge key-wise; any other source value (list, scalar, None)
    replaces the target value. Keys only in target are kept.
    """
    if not isinstance(source, dict):
        return deep_copy(target)
    if not isinstance(target, dict):
        return deep_copy(source)
    output = deep_copy(target)
    _merge_into(output, source)
    return output


def _merge_into(output: dict, source: dict) -> None:
    for key, value in source.items():
        existing = output.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            _merge_into(existing, value)
        else:
            if not isinstance(key, str):
                raise TypeError(f"State keys must be str, got {type(key).__name__}: {key!r}")
            output[key] = deep_copy(value)


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality for trees.

    - dicts compare by key set and values; key order is ignored
    - lists (and tuples) compare element-wise
    - NaN equals NaN, so re-writing a NaN is not a change
    - bool never equals a number (True != 1)
    - MISSING equals only MISSING; in particular MISSING != None
    """
    if a is MISSING or b is MISSING:
        return a is b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            return False
        return all(deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b


def get_nested_value(tree: Any, path: Any, default: Any = None) -> Any:
    """Resolve a dot path such as ``settings.background.color``.

    Numeric segments index into lists. Returns default when a segment is
    missing, the walk hits a scalar, or path is not a string. The empty
    path returns tree itself.
    """
    if not isinstance(path, str):
        return default
    if path == "":
        return tree
    value = tree
    for segment in path.split("."):
        if isinstance(value, dict):
            if segment not in value:
                return default
            value = value[segment]
        elif isinstance(value, list):
            if not segment.isdecimal() or int(segment) >= len(value):
                return default
            value = value[int(segment)]
        else:
            return default
    return value


def iter_paths(tree: Any, base: str = "") -> Iterator[str]:
    """Yield every dot path present in tree, each branch before its children."""
    if not isinstance(tree, dict):
        return
    for key, value in tree.items():
        path = f"{base}.{key}" if base else key
        yield path
        if isinstance(value, dict):
            yield from iter_paths(value, path)


def with_ancestors(paths: Iterable[str]) -> list[str]:
    """Expand paths with every prefix, root-to-leaf, without duplicates."""
    seen: dict[str, None] = {}
    for path in paths:
        parts = path.split(".")
        for i in range(1, len(parts) + 1):
            seen[".".join(parts[:i])] = None
    return list(seen)


def build_partial(path: str, value: Any) -> Any:
    """Nest value under a dot path: ``build_partial("a.b", 1) == {"a": {"b": 1}}``."""
    if not path:
        return value
    for segment in reversed(path.split(".")):
        value = {segment: value}
    return value
