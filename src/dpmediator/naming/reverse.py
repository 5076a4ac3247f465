"""Reverse resolution: concretise one protected name from a reference name.

Used when a single concrete caller-facing name is known and a protected
name whose leading segments are wildcards must be aligned with it::

    */patient/pat_name   + postgres/patient/pat_id -> postgres/patient/pat_name
    */*/pat_name         + postgres/patient/pat_id -> postgres/patient/pat_name
    */episode/ep_pat     + postgres/patient/pat_id -> */episode/ep_pat   (other group)
    csp1/*/*/pat_name    + postgres/patient/pat_id -> postgres/patient/pat_name

This is a direct substitution keyed on one reference; it never looks at
the governed name set.
"""
from __future__ import annotations

from dpmediator.core.types import SEPARATOR
from dpmediator.naming.patterns import LEADING_ONE_WILDCARD, LEADING_TWO_WILDCARDS

_QUALIFIED_SEPARATORS = 2


def strip_provider_prefix(protected_name: str) -> str:
    """Drop the provider-scoped qualifier of a 4-segment protected name."""
    if protected_name.count(SEPARATOR) > _QUALIFIED_SEPARATORS:
        return protected_name.split(SEPARATOR, 1)[1]
    return protected_name


def resolve_protected_name(protected_name: str, reference_name: str) -> str:
    """Return *protected_name* with its leading wildcards taken from *reference_name*.

    Parameters
    ----------
    protected_name:
        A governed/protected name, optionally carrying a provider prefix.
    reference_name:
        A fully qualified caller-facing name (exactly two separators).
        When it is not, *protected_name* is returned untouched.
    """
    if reference_name.count(SEPARATOR) != _QUALIFIED_SEPARATORS:
        return protected_name

    name = strip_provider_prefix(protected_name)
    collection, group, _ = reference_name.split(SEPARATOR)

    shape = LEADING_TWO_WILDCARDS.fullmatch(name)
    if shape is not None:
        return SEPARATOR.join((collection, group, shape.group(2)))

    # a concrete group only aligns with a reference addressing that group
    shape = LEADING_ONE_WILDCARD.fullmatch(name)
    if shape is not None and shape.group(2).split(SEPARATOR)[0] == group:
        return SEPARATOR.join((collection, shape.group(2)))

    return name
