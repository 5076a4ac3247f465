"""Concrete candidate set for one request.

A governed entry such as ``*/*/pat_name`` ("``pat_name`` in any group of
any collection") only becomes concrete once it meets a request: the
request's own prefixes tell which collection and group are being
addressed.  :func:`build_candidates` derives every governed name that is
reachable under the request, never inventing a prefix the request does not
contain.

Steps:

1. governed names without a wildcard are kept as they are;
2. ``<c>*/<g>*/leaf`` entries are instantiated with the ``collection/group/``
   prefix of every requested name matching the wildcarded prefix;
3. ``<c>*/group/leaf`` entries are instantiated with the ``collection/``
   prefix of every requested name matching the wildcarded collection;
4. the union is de-duplicated, first-seen order preserved.
"""
from __future__ import annotations

from collections.abc import Sequence

from dpmediator.core.types import SEPARATOR, AttributeName
from dpmediator.naming.patterns import (
    LEADING_ONE_WILDCARD,
    LEADING_TWO_WILDCARDS,
    compile_pattern,
)
from dpmediator.naming.qualifier import is_wildcarded, split_name


def _group_prefix(name: str) -> str:
    return name[: name.rindex(SEPARATOR) + 1]


def _collection_prefix(name: str) -> str:
    return name[: name.index(SEPARATOR) + 1]


def build_candidates(
    requested: Sequence[str],
    governed: Sequence[str],
) -> list[AttributeName]:
    """Return the governed names reachable under *requested*.

    Parameters
    ----------
    requested:
        Fully qualified requested names; they are the only source of
        prefixes for wildcarded governed entries.
    governed:
        The governed name set, in policy order.

    Raises
    ------
    MalformedName
        If a requested name is not fully qualified.
    """
    for name in requested:
        split_name(name)

    concrete = [name for name in governed if not is_wildcarded(name)]

    group_level: list[str] = []
    for name in governed:
        shape = LEADING_TWO_WILDCARDS.fullmatch(name)
        if shape is None:
            continue
        prefix_pattern = compile_pattern(shape.group(1))
        leaf = shape.group(2)
        for request in requested:
            prefix = _group_prefix(request)
            if prefix_pattern.fullmatch(prefix):
                group_level.append(prefix + leaf)

    collection_level: list[str] = []
    for name in governed:
        shape = LEADING_ONE_WILDCARD.fullmatch(name)
        if shape is None:
            continue
        prefix_pattern = compile_pattern(shape.group(1))
        remainder = shape.group(2)
        for request in requested:
            prefix = _collection_prefix(request)
            if prefix_pattern.fullmatch(prefix):
                collection_level.append(prefix + remainder)

    return [
        AttributeName(name)
        for name in dict.fromkeys([*concrete, *group_level, *collection_level])
    ]
