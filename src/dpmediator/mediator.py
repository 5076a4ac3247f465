"""Data-operation mediator -- the reference :class:`DataOperation`.

This module implements :class:`DataOperationMediator`, the entry point of
the package.  It composes the naming components (qualification,
resolution, reverse resolution) with the :class:`Partitioner` and turns
every caller-facing operation into one command per configured provider.

Pipeline (outbound)
-------------------

1. **Qualify** -- left-pad every attribute and criteria name.
2. **Validate** -- leaf wildcards (except HEAD), duplicate names (when
   configured), payload width.
3. **Resolve** -- requested names against the policy's governed name set.
4. **Partition** -- protected names, mappings, criteria and payload per
   provider.
5. **Return** one :class:`OperationCommand` per provider, in policy order.

Any failure aborts the whole operation: no provider receives a command
unless every provider does.

Usage
-----
::

    from dpmediator import (
        DataOperationMediator,
        MediatorConfig,
        ProviderPolicy,
        SecurityPolicy,
    )

    policy = SecurityPolicy(
        policy_id="hospital",
        providers=[
            ProviderPolicy(provider_id="clear"),
            ProviderPolicy(
                provider_id="vault",
                governed_names=["*/patient/pat_name"],
                name_prefix="csp1",
            ),
        ],
    )
    mediator = DataOperationMediator(policy, MediatorConfig(module_id="m1"))

    commands = mediator.get(["patient/pat_id", "patient/pat_name"])
"""
from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from dpmediator.core.errors import ProviderNotConfigured, SchemaMismatch
from dpmediator.core.types import (
    AttributeMapping,
    AttributeName,
    Criteria,
    Operation,
    OperationCommand,
    OperationOutcome,
    OperationResult,
)
from dpmediator.naming.qualifier import qualify_all, require_concrete_leaves
from dpmediator.operations.partition import Partitioner, reconstruct

if TYPE_CHECKING:
    from dpmediator.core.config import MediatorConfig
    from dpmediator.core.policy import SecurityPolicy
    from dpmediator.naming.resolver import NameResolver

logger = logging.getLogger(__name__)


class DataOperationMediator:
    """Partitions data operations between the providers of a security policy.

    Values are routed, never transformed: a provider receives the payload
    columns of the names it governs under its protected names, and the
    clear provider receives everything nobody governs.

    Parameters
    ----------
    policy:
        The active security policy; its provider order is the order of
        every returned list.
    config:
        Mediator configuration.
    resolver:
        Optional name resolver (a default one is built when omitted).

    Raises
    ------
    ProviderNotConfigured
        If ``config.clear_provider_index`` does not point at a provider.
    """

    def __init__(
        self,
        policy: SecurityPolicy,
        config: MediatorConfig,
        resolver: NameResolver | None = None,
    ) -> None:
        if config.clear_provider_index >= len(policy.providers):
            raise ProviderNotConfigured(
                f"Clear provider index {config.clear_provider_index} is out of "
                f"range for {len(policy.providers)} provider(s)",
                details={
                    "clear_provider_index": config.clear_provider_index,
                    "providers": policy.provider_ids,
                },
            )
        self._policy = policy
        self._config = config
        self._partitioner = Partitioner(
            policy,
            clear_provider_index=config.clear_provider_index,
            resolver=resolver,
        )
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Properties for introspection
    # ------------------------------------------------------------------

    @property
    def policy(self) -> SecurityPolicy:
        """The active security policy."""
        return self._policy

    @property
    def config(self) -> MediatorConfig:
        """The mediator configuration."""
        return self._config

    @property
    def partitioner(self) -> Partitioner:
        """The per-provider partitioner."""
        return self._partitioner

    @property
    def clear_provider_id(self) -> str:
        """Identifier of the provider receiving ungoverned names."""
        return self._policy.providers[self._config.clear_provider_index].provider_id

    # ------------------------------------------------------------------
    # Outbound operations
    # ------------------------------------------------------------------

    def get(
        self,
        attribute_names: Sequence[str],
        criteria: Sequence[Criteria] = (),
    ) -> list[OperationCommand]:
        """Outbound read of *attribute_names*, filtered by *criteria*.

        Raises
        ------
        MalformedName
            If an attribute or criteria name cannot be qualified.
        UnsupportedLeafWildcard
            If an attribute or criteria name ends with a wildcard.
        """
        return self._outbound(Operation.GET, attribute_names, criteria=criteria)

    def post(
        self,
        attribute_names: Sequence[str],
        contents: Sequence[Sequence[str | None]],
    ) -> list[OperationCommand]:
        """Outbound insert.

        Raises
        ------
        SchemaMismatch
            If a row of *contents* does not carry one value per attribute
            name.
        """
        return self._outbound(Operation.POST, attribute_names, contents=contents)

    def put(
        self,
        attribute_names: Sequence[str],
        criteria: Sequence[Criteria],
        contents: Sequence[Sequence[str | None]],
    ) -> list[OperationCommand]:
        """Outbound update of the rows selected by *criteria*."""
        return self._outbound(
            Operation.PUT, attribute_names, criteria=criteria, contents=contents
        )

    def delete(
        self,
        attribute_names: Sequence[str],
        criteria: Sequence[Criteria] = (),
    ) -> list[OperationCommand]:
        """Outbound delete of the rows selected by *criteria*."""
        return self._outbound(Operation.DELETE, attribute_names, criteria=criteria)

    def head(self, attribute_names: Sequence[str]) -> list[AttributeMapping]:
        """Resolve *attribute_names* without building commands.

        Leaf wildcards are accepted and expand to every matching governed
        name; names no provider governs are left out of every mapping.
        Malformed names still raise :class:`MalformedName`.
        """
        mappings = self._partitioner.head(qualify_all(attribute_names))
        logger.debug(
            "HEAD %d name(s) -> %s",
            len(attribute_names),
            {pid: len(m) for pid, m in zip(self._policy.provider_ids, mappings)},
        )
        return mappings

    # ------------------------------------------------------------------
    # Inbound operations
    # ------------------------------------------------------------------

    def get_result(
        self,
        commands: Sequence[OperationCommand],
        contents: Sequence[Sequence[Sequence[str | None]]],
    ) -> list[OperationOutcome]:
        """Rebuild caller-facing rows from one provider table per command.

        Parameters
        ----------
        commands:
            The commands returned by :meth:`get`, possibly renamed by a
            transport layer (:meth:`OperationCommand.with_attribute_names`).
        contents:
            For every command, the rows its provider returned, columns
            aligned with the command's protected names.

        Returns
        -------
        list
            A single :class:`OperationResult`.

        Raises
        ------
        SchemaMismatch
            If the tables do not line up with *commands*.
        """
        attribute_names, rows = reconstruct(commands, contents)
        result = OperationResult(
            id=next(self._ids),
            attribute_names=attribute_names,
            contents=rows,
        )
        logger.debug(
            "GET result %d: %d row(s) from %d provider table(s)",
            result.id,
            len(rows),
            len(contents),
        )
        return [result]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _outbound(
        self,
        operation: Operation,
        attribute_names: Sequence[str],
        *,
        criteria: Sequence[Criteria] = (),
        contents: Sequence[Sequence[str | None]] | None = None,
    ) -> list[OperationCommand]:
        qualified = qualify_all(attribute_names)
        criteria_names = qualify_all(c.attribute_name for c in criteria)
        if operation.affects_payload:
            require_concrete_leaves(qualified, operation.name)
            require_concrete_leaves(criteria_names, operation.name)
        if self._config.reject_duplicate_names:
            self._check_duplicates(qualified)
        if contents is not None:
            self._check_width(attribute_names, contents)

        shares = self._partitioner.partition(attribute_names, qualified)
        translated = self._partitioner.translate_criteria(criteria, criteria_names)

        commands = [
            OperationCommand(
                id=next(self._ids),
                provider_id=share.provider_id,
                attribute_names=tuple(attribute_names),
                protected_attribute_names=tuple(share.protected_names),
                mapping=share.mapping,
                protected_contents=(
                    share.project(contents) if contents is not None else None
                ),
                criteria=tuple(provider_criteria),
            )
            for share, provider_criteria in zip(shares, translated, strict=True)
        ]
        logger.debug(
            "%s %d name(s) -> %s",
            operation.name,
            len(attribute_names),
            {c.provider_id: len(c.protected_attribute_names) for c in commands},
        )
        return commands

    @staticmethod
    def _check_duplicates(qualified: Sequence[AttributeName]) -> None:
        seen: set[str] = set()
        for name in qualified:
            if name in seen:
                raise SchemaMismatch(
                    f"Attribute {name!r} is requested more than once",
                    details={"attribute_name": name},
                )
            seen.add(name)

    @staticmethod
    def _check_width(
        attribute_names: Sequence[str],
        contents: Sequence[Sequence[str | None]],
    ) -> None:
        width = len(attribute_names)
        for index, row in enumerate(contents):
            if len(row) != width:
                raise SchemaMismatch(
                    f"Row {index} has {len(row)} values for {width} attribute names",
                    details={"row": index, "columns": len(row), "expected": width},
                )
