"""Structural equality for JSON-like entity values.

Mappings compare by key set and value regardless of key order; sequences compare
element-wise and in order. Booleans never equal numbers, so ``True`` and ``1``
are different values even though Python's ``==`` treats them as equal.
"""

from __future__ import annotations

from collections.abc import Mapping

from guild_logbook.domain.types import is_sequence


def deep_equal(left: object, right: object) -> bool:
    """Return whether ``left`` and ``right`` hold the same structured value."""

    if left is right:
        return True
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():  # pyright: ignore[reportUnknownMemberType]
            return False
        return all(deep_equal(left[key], right[key]) for key in left)  # pyright: ignore[reportUnknownVariableType]
    if is_sequence(left) and is_sequence(right):
        if len(left) != len(right):  # type: ignore[arg-type]
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right, strict=True))  # type: ignore[call-overload]
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Mapping) or isinstance(right, Mapping):
        return False
    if is_sequence(left) or is_sequence(right):
        return False
    return left == right
