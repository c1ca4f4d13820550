"""Small helpers for lists of field names and qualified identifiers."""

from __future__ import annotations

from collections.abc import Iterable


def join_fields(values: Iterable[str]) -> str:
    """Join field names with ", ".

    An empty accumulated result is replaced by the next value instead of
    being joined to it, so leading empty strings disappear.
    """
    result = ""
    for value in values:
        result = value if not result else f"{result}, {value}"
    return result


def intersection(first: Iterable[str], second: Iterable[str]) -> list[str]:
    """Return the items of ``second`` that occur in ``first``, each once.

    The result follows the order of ``second``.
    """
    remaining = set(first)
    result = []
    for item in second:
        if item in remaining:
            remaining.discard(item)
            result.append(item)
    return result


def union(first: Iterable[str], second: Iterable[str]) -> list[str]:
    """Return every distinct item of ``first`` and ``second``.

    Items keep the order of their first appearance.
    """
    return list(dict.fromkeys([*first, *second]))


def remove_duplicates(values: Iterable[str]) -> list[str]:
    """Drop repeated values, keeping the first occurrence of each."""
    return list(dict.fromkeys(values))


def split_qualified(name: str) -> list[str]:
    """Split a dotted name into its parts.

    A trailing empty part is not produced, and an empty name gives no parts.
    """
    parts = name.split(".")
    if parts[-1] == "":
        parts.pop()
    return parts