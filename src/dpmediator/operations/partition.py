"""Per-provider partitioning of resolved attribute names.

Given a :class:`~dpmediator.core.policy.SecurityPolicy`, the
:class:`Partitioner` decides which provider receives each resolved name,
under which protected name, and which payload column feeds it.

Rules
-----
* A resolved name is **owned** by every provider that has a governed entry
  whose pattern fully matches it.
* An owned name is sent under the provider's protected name (its
  ``name_prefix`` prepended, when configured).
* A name nobody owns -- including fallback entries of unmatched
  wildcards -- is sent unchanged to the *clear provider*, so every caller
  name appears in at least one mapping.
* HEAD is the exception: names nobody owns are dropped.

A partitioner keeps no per-call state.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dpmediator.core.errors import SchemaMismatch
from dpmediator.core.types import (
    AttributeMapping,
    Criteria,
    OperationCommand,
    Row,
    Table,
)
from dpmediator.naming.patterns import compile_pattern
from dpmediator.naming.resolver import NameResolver
from dpmediator.naming.reverse import resolve_protected_name

if TYPE_CHECKING:
    from dpmediator.core.policy import SecurityPolicy

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider share
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ProviderShare:
    """What one provider receives for a list of caller names.

    Attributes
    ----------
    provider_id:
        The provider this share belongs to.
    protected_names:
        Protected names, in request order (repeats preserved).
    entries:
        ``(caller_name, protected_name)`` pairs aligned with
        ``protected_names``.
    source_columns:
        For each protected name, the index of the caller column that feeds
        it.
    """

    provider_id: str
    protected_names: list[str] = field(default_factory=list)
    entries: list[tuple[str, str]] = field(default_factory=list)
    source_columns: list[int] = field(default_factory=list)

    def add(self, caller_name: str, protected_name: str, column: int) -> None:
        self.protected_names.append(protected_name)
        self.entries.append((caller_name, protected_name))
        self.source_columns.append(column)

    @property
    def mapping(self) -> AttributeMapping:
        return AttributeMapping(entries=tuple(self.entries))

    def project(self, rows: Sequence[Sequence[str | None]]) -> Table:
        """Project caller rows onto this provider's protected columns.

        An uninvolved provider (no protected names) receives no rows.
        """
        if not self.protected_names:
            return ()
        return tuple(
            tuple(row[column] for column in self.source_columns) for row in rows
        )


# ---------------------------------------------------------------------------
# Partitioner
# ---------------------------------------------------------------------------

class Partitioner:
    """Splits resolved attribute names between the policy's providers.

    Parameters
    ----------
    policy:
        The active security policy.
    clear_provider_index:
        Position of the provider receiving names no provider governs.
    resolver:
        Name resolver; a default :class:`NameResolver` when omitted.
    """

    def __init__(
        self,
        policy: SecurityPolicy,
        clear_provider_index: int = 0,
        resolver: NameResolver | None = None,
    ) -> None:
        self._policy = policy
        self._clear_index = clear_provider_index
        self._resolver = resolver or NameResolver()

    @property
    def resolver(self) -> NameResolver:
        return self._resolver

    # -- ownership ------------------------------------------------------

    def owners(self, resolved_name: str) -> list[int]:
        """Return the positions of the providers governing *resolved_name*."""
        return [
            index
            for index, provider in enumerate(self._policy.providers)
            if any(
                compile_pattern(governed).fullmatch(resolved_name)
                for governed in provider.governed_names
            )
        ]

    def _targets(self, resolved_name: str) -> list[tuple[int, str]]:
        """``(provider position, protected name)`` for an outbound name."""
        owners = self.owners(resolved_name)
        if not owners:
            logger.debug(
                "%r is not governed; routing it to provider %d unchanged",
                resolved_name,
                self._clear_index,
            )
            return [(self._clear_index, resolved_name)]
        providers = self._policy.providers
        return [(i, providers[i].protected_name(resolved_name)) for i in owners]

    # -- outbound -------------------------------------------------------

    def partition(
        self,
        attribute_names: Sequence[str],
        qualified_names: Sequence[str],
    ) -> list[ProviderShare]:
        """Split the request between providers.

        Parameters
        ----------
        attribute_names:
            The caller's names, verbatim (they become the mapping keys).
        qualified_names:
            The same names, fully qualified, in the same order.
        """
        shares = [ProviderShare(p.provider_id) for p in self._policy.providers]
        expansions = self._resolver.expand(
            qualified_names, self._policy.governed_name_set
        )
        for column, (caller_name, expansion) in enumerate(
            zip(attribute_names, expansions, strict=True)
        ):
            for resolved in expansion.resolved:
                for index, protected in self._targets(resolved):
                    shares[index].add(caller_name, protected, column)
        return shares

    def translate_criteria(
        self,
        criteria: Sequence[Criteria],
        qualified_names: Sequence[str],
    ) -> list[list[Criteria]]:
        """Translate caller criteria into per-provider criteria.

        Each provider receives the predicates on the names it owns,
        renamed to its protected names, in the caller's order.
        """
        translated: list[list[Criteria]] = [[] for _ in self._policy.providers]
        if not criteria:
            return translated
        expansions = self._resolver.expand(
            qualified_names, self._policy.governed_name_set
        )
        for criterion, expansion in zip(criteria, expansions, strict=True):
            for resolved in expansion.resolved:
                for index, protected in self._targets(resolved):
                    translated[index].append(criterion.with_attribute_name(protected))
        return translated

    # -- head -----------------------------------------------------------

    def head(self, qualified_names: Sequence[str]) -> list[AttributeMapping]:
        """Map governed names to protected names, dropping unknown names."""
        entries: list[list[tuple[str, str]]] = [[] for _ in self._policy.providers]
        providers = self._policy.providers
        for resolved in self._resolver.resolve(
            qualified_names, self._policy.governed_name_set
        ):
            owners = self.owners(resolved)
            if not owners:
                logger.debug("HEAD: %r is not governed; dropped", resolved)
                continue
            for index in owners:
                pair = (str(resolved), providers[index].protected_name(resolved))
                if pair not in entries[index]:
                    entries[index].append(pair)
        return [AttributeMapping(entries=tuple(pairs)) for pairs in entries]


# ---------------------------------------------------------------------------
# Inbound reconstruction
# ---------------------------------------------------------------------------

def _locate(
    commands: Sequence[OperationCommand],
    attribute_name: str,
) -> tuple[int, int] | None:
    """Find ``(command position, column)`` holding *attribute_name*.

    The mapping is consulted first; names a transport layer concretised
    after the fact are matched by reverse-resolving the protected names.
    """
    for position, command in enumerate(commands):
        mapped = command.mapping.protected_names_for(attribute_name)
        if mapped:
            return position, command.protected_attribute_names.index(mapped[0])
    for position, command in enumerate(commands):
        for column, protected in enumerate(command.protected_attribute_names):
            if resolve_protected_name(protected, attribute_name) == attribute_name:
                return position, column
    return None


def reconstruct(
    commands: Sequence[OperationCommand],
    contents: Sequence[Sequence[Sequence[str | None]]],
) -> tuple[tuple[str, ...], Table]:
    """Rebuild caller-facing rows from per-provider tables.

    Returns
    -------
    tuple
        ``(attribute_names, rows)`` where every row follows the caller's
        attribute order.

    Raises
    ------
    SchemaMismatch
        If the tables do not line up with the commands.
    """
    if len(contents) != len(commands):
        raise SchemaMismatch(
            f"Expected one table per command ({len(commands)}), got {len(contents)}",
            details={"commands": len(commands), "tables": len(contents)},
        )
    if not commands:
        return (), ()

    attribute_names = commands[0].attribute_names
    if any(command.attribute_names != attribute_names for command in commands):
        raise SchemaMismatch(
            "Commands of one operation must share their attribute names",
            details={"attribute_names": list(attribute_names)},
        )

    row_counts: set[int] = set()
    for command, table in zip(commands, contents, strict=True):
        width = len(command.protected_attribute_names)
        if width == 0:
            if len(table) != 0:
                raise SchemaMismatch(
                    f"Provider {command.provider_id!r} was not involved but "
                    f"returned {len(table)} rows",
                    details={"provider_id": command.provider_id, "rows": len(table)},
                )
            continue
        for row in table:
            if len(row) != width:
                raise SchemaMismatch(
                    f"Provider {command.provider_id!r} returned a row with "
                    f"{len(row)} values, expected {width}",
                    details={
                        "provider_id": command.provider_id,
                        "columns": len(row),
                        "expected": width,
                    },
                )
        row_counts.add(len(table))
    if len(row_counts) > 1:
        raise SchemaMismatch(
            "Involved providers returned different row counts",
            details={"row_counts": sorted(row_counts)},
        )
    row_count = row_counts.pop() if row_counts else 0

    locations: list[tuple[int, int]] = []
    for attribute_name in attribute_names:
        location = _locate(commands, attribute_name)
        if location is None:
            raise SchemaMismatch(
                f"No provider column holds attribute {attribute_name!r}",
                details={"attribute_name": attribute_name},
            )
        locations.append(location)

    rows: list[Row] = [
        tuple(contents[position][index][column] for position, column in locations)
        for index in range(row_count)
    ]
    return attribute_names, tuple(rows)
