"""Caller-facing data-operation interface.

:class:`DataOperation` is the *structural* interface (``typing.Protocol``)
every mediation module exposes.  It is decorated with
``@runtime_checkable`` so ``isinstance`` checks work at run-time in
addition to static analysis.

Every list-returning method yields exactly one entry per configured
provider, in policy order, including providers the call does not involve.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from dpmediator.core.types import (
    AttributeMapping,
    Criteria,
    OperationCommand,
    OperationOutcome,
)


@runtime_checkable
class DataOperation(Protocol):
    """The five caller-facing operations, plus inbound GET reconstruction."""

    def get(
        self,
        attribute_names: Sequence[str],
        criteria: Sequence[Criteria] = (),
    ) -> list[OperationCommand]:
        """Outbound read of *attribute_names*, filtered by *criteria*."""
        ...

    def get_result(
        self,
        commands: Sequence[OperationCommand],
        contents: Sequence[Sequence[Sequence[str | None]]],
    ) -> list[OperationOutcome]:
        """Inbound read: rebuild caller rows from one table per command.

        Raises :class:`~dpmediator.core.errors.SchemaMismatch` when the
        tables do not line up with *commands*.
        """
        ...

    def post(
        self,
        attribute_names: Sequence[str],
        contents: Sequence[Sequence[str | None]],
    ) -> list[OperationCommand]:
        """Outbound insert; *contents* columns align with *attribute_names*."""
        ...

    def put(
        self,
        attribute_names: Sequence[str],
        criteria: Sequence[Criteria],
        contents: Sequence[Sequence[str | None]],
    ) -> list[OperationCommand]:
        """Outbound update of the rows selected by *criteria*."""
        ...

    def delete(
        self,
        attribute_names: Sequence[str],
        criteria: Sequence[Criteria] = (),
    ) -> list[OperationCommand]:
        """Outbound delete of the rows selected by *criteria*."""
        ...

    def head(self, attribute_names: Sequence[str]) -> list[AttributeMapping]:
        """Name resolution only; unknown names are dropped, never rejected."""
        ...
