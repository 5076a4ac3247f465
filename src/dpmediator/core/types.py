"""Shared domain types for the data-operation mediation core.

This module defines every value type, enum, and Pydantic model that is
shared across the implementation.

Key design decisions:

* ``AttributeName`` is a ``NewType`` wrapper around ``str``: names stay
  plain strings on the wire while remaining distinct for static checking.
* Operation records (:class:`OperationCommand`, :class:`OperationResult`)
  are *frozen* models built in one constructor call.  A transport layer
  that needs a variant asks for a copy (``with_attribute_names``).
* Commands and results form a tagged union (:data:`OperationOutcome`)
  discriminated on ``kind``, so callers dispatch with ``match`` instead of
  ``isinstance`` ladders.
* A mapping is an ordered sequence of pairs rather than a ``dict``: one
  caller name legitimately maps to several protected names.
"""
from __future__ import annotations

import enum
from typing import Annotated, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

AttributeName = NewType("AttributeName", str)
"""Attribute name in the form ``collection/group/attribute``."""

SEPARATOR = "/"
"""Separator between the segments of an attribute name."""

WILDCARD = "*"
"""Wildcard token matching any run of characters inside one segment."""

Cell = str | None
"""A single payload value; ``None`` stands for a missing value."""

Row = tuple[Cell, ...]
Table = tuple[Row, ...]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Operation(enum.StrEnum):
    """Caller-facing data operations."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    HEAD = "head"

    @property
    def affects_payload(self) -> bool:
        """Return ``True`` for operations that forbid leaf wildcards."""
        return self is not Operation.HEAD


class CriteriaOperator(enum.StrEnum):
    """Comparison operators accepted in search criteria."""

    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LIKE = "like"
    IN = "in"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class Criteria(BaseModel):
    """A search predicate on one attribute."""

    model_config = ConfigDict(frozen=True)

    attribute_name: str
    operator: CriteriaOperator = CriteriaOperator.EQ
    value: str | None = None

    def with_attribute_name(self, attribute_name: str) -> Criteria:
        """Return a copy of this predicate applied to *attribute_name*."""
        return self.model_copy(update={"attribute_name": attribute_name})


class AttributeMapping(BaseModel):
    """Per-provider association of caller names to protected names.

    Entries are kept in the order the protected names were produced.  A
    caller name may appear several times as a key (wildcard expansion, or
    the same name requested twice).
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[tuple[str, str], ...] = ()

    def keys(self) -> list[str]:
        return [attribute_name for attribute_name, _ in self.entries]

    def values(self) -> list[str]:
        return [protected_name for _, protected_name in self.entries]

    def items(self) -> list[tuple[str, str]]:
        return list(self.entries)

    def protected_names_for(self, attribute_name: str) -> list[str]:
        """Return every protected name *attribute_name* maps to, in order."""
        return [p for a, p in self.entries if a == attribute_name]

    def as_dict(self) -> dict[str, str]:
        """Collapse the mapping to a ``dict`` (first entry per key wins)."""
        collapsed: dict[str, str] = {}
        for attribute_name, protected_name in self.entries:
            collapsed.setdefault(attribute_name, protected_name)
        return collapsed

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


class OperationCommand(BaseModel):
    """The unit of work one provider has to execute for an operation.

    One command is produced per configured provider, even when the provider
    is not involved; in that case every provider-specific field is empty.

    Invariants (validated on construction):

    * ``mapping.values()`` lists exactly ``protected_attribute_names``.
    * every row of ``protected_contents`` has one value per protected name.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["command"] = "command"
    id: int = Field(description="Bookkeeping identifier.")
    provider_id: str
    attribute_names: tuple[str, ...] = Field(
        description="Caller-facing names, verbatim and in request order.",
    )
    protected_attribute_names: tuple[str, ...] = ()
    mapping: AttributeMapping = Field(default_factory=AttributeMapping)
    protected_contents: Table | None = Field(
        default=None,
        description="Payload aligned with protected_attribute_names, if any.",
    )
    criteria: tuple[Criteria, ...] = ()
    extra_protected_attribute_names: tuple[str, ...] = ()
    extra_binary_content: bytes | None = None

    @model_validator(mode="after")
    def check_alignment(self) -> OperationCommand:
        if self.mapping.values() != list(self.protected_attribute_names):
            raise ValueError(
                "mapping values must list exactly the protected attribute names"
            )
        if self.protected_contents is not None:
            width = len(self.protected_attribute_names)
            for row in self.protected_contents:
                if len(row) != width:
                    raise ValueError(
                        f"protected row has {len(row)} values, expected {width}"
                    )
        return self

    @property
    def involved(self) -> bool:
        """Whether the provider has anything to do for this command."""
        return bool(self.protected_attribute_names or self.criteria)

    @property
    def row_count(self) -> int:
        return len(self.protected_contents) if self.protected_contents else 0

    def with_attribute_names(self, attribute_names: list[str] | tuple[str, ...]) -> OperationCommand:
        """Return a copy whose caller-facing names are *attribute_names*.

        Transport layers use this once they know the concrete collection
        and group behind a wildcarded request name.
        """
        if len(attribute_names) != len(self.attribute_names):
            raise ValueError(
                f"expected {len(self.attribute_names)} attribute names, "
                f"got {len(attribute_names)}"
            )
        return self.model_copy(update={"attribute_names": tuple(attribute_names)})


class OperationResult(BaseModel):
    """Caller-facing data reconstructed from the providers' responses."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["result"] = "result"
    id: int
    attribute_names: tuple[str, ...]
    contents: Table = ()

    @model_validator(mode="after")
    def check_width(self) -> OperationResult:
        width = len(self.attribute_names)
        for row in self.contents:
            if len(row) != width:
                raise ValueError(f"result row has {len(row)} values, expected {width}")
        return self


OperationOutcome = Annotated[
    OperationCommand | OperationResult,
    Field(discriminator="kind"),
]
"""Anything an inbound operation may hand back to the caller."""
