"""Small path helpers for walking weakly-typed Innertube JSON documents.

Upstream responses are deep trees of dicts and lists whose exact layout shifts between
endpoints. These helpers never raise on a missing key, a wrong type or an index out of
range; they return ``None`` (or an empty list) instead so callers can treat absence as an
ordinary outcome.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

JsonValue = Any
PathStep = Union[str, int]
JsonPath = Tuple[PathStep, ...]

WILDCARD = "*"


def find_all(node: JsonValue, key: str) -> List[JsonValue]:
    """Return every value stored under ``key`` anywhere in ``node`` (``$..key``).

    Matches are returned in document order: a parent match precedes matches nested
    inside it, and siblings keep their list/dict order.
    """

    return list(_descend(node, key))


def _descend(node: JsonValue, key: str) -> Iterator[JsonValue]:
    if isinstance(node, dict):
        for name, child in node.items():
            if name == key:
                yield child
            yield from _descend(child, key)
    elif isinstance(node, list):
        for child in node:
            yield from _descend(child, key)


def select(node: JsonValue, path: Sequence[PathStep]) -> List[JsonValue]:
    """Return all values reached by following ``path`` from ``node``.

    Steps are dict keys, list indices, or ``"*"`` which fans out over every element of a
    list (or every value of a dict).
    """

    current: List[JsonValue] = [node]
    for step in path:
        following: List[JsonValue] = []
        for value in current:
            if step == WILDCARD:
                if isinstance(value, list):
                    following.extend(value)
                elif isinstance(value, dict):
                    following.extend(value.values())
            elif isinstance(step, int):
                if isinstance(value, list) and -len(value) <= step < len(value):
                    following.append(value[step])
            elif isinstance(value, dict) and step in value:
                following.append(value[step])
        current = following
        if not current:
            break
    return current


def get_path(node: JsonValue, path: Sequence[PathStep]) -> Optional[JsonValue]:
    """Return the first value reached by ``path``, or ``None``."""

    matches = select(node, path)
    return matches[0] if matches else None


def get_str(node: JsonValue, path: Sequence[PathStep]) -> Optional[str]:
    """Return the first value reached by ``path`` when it is a non-empty string."""

    for value in select(node, path):
        if isinstance(value, str) and value:
            return value
        if value is not None:
            return None
    return None


def first_str(node: JsonValue, paths: Sequence[Sequence[PathStep]]) -> Optional[str]:
    """Try each path in order and return the first non-empty string found."""

    for path in paths:
        value = get_str(node, path)
        if value is not None:
            return value
    return None


def count_items(value: JsonValue) -> int:
    """Length of a list or dict, zero for anything else."""

    if isinstance(value, (list, dict)):
        return len(value)
    return 0


__all__ = [
    "JsonPath",
    "JsonValue",
    "PathStep",
    "WILDCARD",
    "count_items",
    "find_all",
    "first_str",
    "get_path",
    "get_str",
    "select",
]
