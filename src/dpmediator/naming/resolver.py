"""Resolution of requested attribute names against the governed name set.

This is the entry point used by every outbound operation.

* **Fast path** -- when no requested name contains a wildcard the request
  is returned as-is, without compiling a single pattern.
* **Expansion** -- otherwise every requested name is matched against the
  candidate set (:func:`~dpmediator.naming.candidates.build_candidates`)
  and replaced by all candidates it matches, in candidate order.
* **Fallback** -- a requested name matching nothing is kept verbatim, in
  place, so the absence surfaces at the provider instead of silently
  dropping a column.

Requested names are never de-duplicated against each other: overlapping
requests produce repeated names, and downstream column alignment relies on
that.

Example with the governed set ``*/patient/pat_id, */patient/pat_name,
*/patient/pat_last1, */patient/pat_last2``::

    [*/patient/pat_name, */patient/*, */patient/pat_id]
    -> [*/patient/pat_name,
        */patient/pat_id, */patient/pat_name,
        */patient/pat_last1, */patient/pat_last2,
        */patient/pat_id]

    [*/patient/pat_name, */episode/*, */patient/pat_id]
    -> [*/patient/pat_name, */episode/*, */patient/pat_id]
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from dpmediator.core.types import AttributeName
from dpmediator.naming.candidates import build_candidates
from dpmediator.naming.patterns import PatternCompiler
from dpmediator.naming.qualifier import is_wildcarded

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Expansion:
    """What one requested name resolved to.

    Attributes
    ----------
    requested:
        The requested name.
    resolved:
        The names it stands for, in order.
    fallback:
        ``True`` when the requested name was wildcarded but matched no
        candidate, so ``resolved`` only holds the name itself.
    """

    requested: AttributeName
    resolved: tuple[AttributeName, ...]
    fallback: bool = False


class NameResolver:
    """Resolves requested names against a governed name set.

    Parameters
    ----------
    compiler:
        Pattern front-end; a default :class:`PatternCompiler` is used when
        omitted.
    """

    def __init__(self, compiler: PatternCompiler | None = None) -> None:
        self._compiler = compiler or PatternCompiler()

    def resolve(
        self,
        requested: Sequence[str],
        governed: Sequence[str],
    ) -> list[AttributeName]:
        """Return the concatenated resolution of every requested name.

        Raises
        ------
        MalformedName
            If wildcards are present and a requested name is not fully
            qualified.
        """
        if not any(is_wildcarded(name) for name in requested):
            return [AttributeName(name) for name in requested]
        return [
            name
            for expansion in self._expand_wildcarded(requested, governed)
            for name in expansion.resolved
        ]

    def expand(
        self,
        requested: Sequence[str],
        governed: Sequence[str],
    ) -> list[Expansion]:
        """Like :meth:`resolve`, but grouped per requested name."""
        if not any(is_wildcarded(name) for name in requested):
            return [
                Expansion(AttributeName(name), (AttributeName(name),))
                for name in requested
            ]
        return self._expand_wildcarded(requested, governed)

    def _expand_wildcarded(
        self,
        requested: Sequence[str],
        governed: Sequence[str],
    ) -> list[Expansion]:
        candidates = build_candidates(requested, governed)
        expansions: list[Expansion] = []
        for name in requested:
            matches = self._compiler.filter(name, candidates)
            if matches:
                expansions.append(
                    Expansion(AttributeName(name), tuple(AttributeName(m) for m in matches))
                )
            else:
                logger.debug("No governed name matches %r; keeping it verbatim", name)
                expansions.append(
                    Expansion(AttributeName(name), (AttributeName(name),), fallback=True)
                )
        return expansions


def resolve_names(
    requested: Sequence[str],
    governed: Sequence[str],
) -> list[AttributeName]:
    """Module-level shortcut for :meth:`NameResolver.resolve`."""
    return NameResolver().resolve(requested, governed)
