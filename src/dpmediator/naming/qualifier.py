"""Attribute-name qualification.

A caller may address an attribute by its bare name, by ``group/attribute``
or by the fully qualified ``collection/group/attribute``.  Qualification
left-pads the missing levels with wildcard segments::

    attribute1               -> */*/attribute1
    data/attribute2          -> */data/attribute2
    dataset/data/attribute3  -> dataset/data/attribute3

Names with more than two separators, or with an empty segment, are
rejected rather than truncated.
"""
from __future__ import annotations

from collections.abc import Iterable

from dpmediator.core.errors import MalformedName, UnsupportedLeafWildcard
from dpmediator.core.types import SEPARATOR, WILDCARD, AttributeName

_MAX_SEPARATORS = 2


def _malformed(name: str, reason: str) -> MalformedName:
    return MalformedName(
        f"Malformed attribute name {name!r}: {reason}",
        details={"attribute_name": name, "reason": reason},
    )


def qualify(name: str) -> AttributeName:
    """Return *name* in its fully qualified 3-segment form.

    Raises
    ------
    MalformedName
        If *name* has more than two separators or an empty segment.
    """
    separators = name.count(SEPARATOR)
    if separators > _MAX_SEPARATORS:
        raise _malformed(name, f"{separators} separators, at most 2 allowed")
    qualified = f"{WILDCARD}{SEPARATOR}" * (_MAX_SEPARATORS - separators) + name
    if "" in qualified.split(SEPARATOR):
        raise _malformed(name, "empty segment")
    return AttributeName(qualified)


def qualify_all(names: Iterable[str]) -> list[AttributeName]:
    """Qualify every name, preserving order."""
    return [qualify(name) for name in names]


def split_name(name: str) -> tuple[str, str, str]:
    """Split a fully qualified name into ``(collection, group, attribute)``.

    Raises
    ------
    MalformedName
        If *name* is not made of exactly three non-empty segments.
    """
    segments = name.split(SEPARATOR)
    if len(segments) != _MAX_SEPARATORS + 1:
        raise _malformed(name, "expected collection/group/attribute")
    if "" in segments:
        raise _malformed(name, "empty segment")
    collection, group, attribute = segments
    return collection, group, attribute


def is_wildcarded(name: str) -> bool:
    """Return ``True`` if any segment of *name* contains a wildcard."""
    return WILDCARD in name


def has_leaf_wildcard(name: str) -> bool:
    """Return ``True`` if the attribute (last) segment contains a wildcard."""
    return WILDCARD in name.rpartition(SEPARATOR)[2]


def require_concrete_leaves(names: Iterable[str], operation: str) -> None:
    """Reject names whose attribute segment is wildcarded.

    Raises
    ------
    UnsupportedLeafWildcard
        For the first offending name.
    """
    for name in names:
        if has_leaf_wildcard(name):
            raise UnsupportedLeafWildcard(
                f"Attribute name {name!r} ends with a wildcard, which "
                f"{operation} does not support",
                details={"attribute_name": name, "operation": operation},
            )
