"""Data-operation error-code hierarchy.

Every failure the mediation core can report is represented as a concrete
exception class carrying a stable error code.

Hierarchy
---------
::

    DataOperationError
    +-- NamingError           (DP-E1xx)
    +-- ContentError          (DP-E2xx)
    +-- ConfigurationError    (DP-E3xx)

Usage
-----
Raise concrete subclasses directly::

    raise MalformedName("dataset/data/attribute/extra")

Catch by category::

    try:
        ...
    except NamingError:
        # handles MalformedName and UnsupportedLeafWildcard
        ...

The resolver fails fast: a raised error aborts the whole operation for
every provider, so no partially built command list ever escapes.
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class DataOperationError(Exception):
    """Base exception for all data-operation errors.

    Attributes
    ----------
    code : str
        Error code, e.g. ``"DP-E100"``.
    message : str
        Human-readable description (MUST NOT contain protected values).
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the caller.
    """

    code: str = "DP-E000"
    message: str = "Unknown data-operation error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error to a plain ``{"error": {...}}`` mapping."""
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["detail"] = self.details
        if self.resolution:
            payload["resolution"] = self.resolution
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# Category base classes
# ===================================================================

class NamingError(DataOperationError):
    """DP-E1xx -- Attribute-name structure and wildcard errors."""

    code = "DP-E1XX"


class ContentError(DataOperationError):
    """DP-E2xx -- Payload shape errors."""

    code = "DP-E2XX"


class ConfigurationError(DataOperationError):
    """DP-E3xx -- Mediator configuration errors."""

    code = "DP-E3XX"


# ===================================================================
# DP-E1xx  Naming Errors
# ===================================================================

class MalformedName(NamingError):
    """DP-E100 -- Attribute name violates the 3-segment contract."""

    code = "DP-E100"
    message = "Malformed attribute name"
    resolution = (
        "Use at most three '/'-separated, non-empty segments "
        "(collection/group/attribute)."
    )


class UnsupportedLeafWildcard(NamingError):
    """DP-E101 -- Wildcard in the attribute segment where it is forbidden."""

    code = "DP-E101"
    message = "Wildcard is not supported in the attribute segment"
    resolution = (
        "Resolve the attribute names with a HEAD operation first and "
        "pass the concrete names."
    )


# ===================================================================
# DP-E2xx  Content Errors
# ===================================================================

class SchemaMismatch(ContentError):
    """DP-E200 -- Payload columns or rows disagree with the attribute names."""

    code = "DP-E200"
    message = "Payload shape does not match the attribute names"
    resolution = (
        "Make every row carry one value per attribute name, in the same "
        "order, and return one table per provider command."
    )


# ===================================================================
# DP-E3xx  Configuration Errors
# ===================================================================

class ProviderNotConfigured(ConfigurationError):
    """DP-E300 -- A configured provider position does not exist in the policy."""

    code = "DP-E300"
    message = "Provider is not configured in the security policy"
    resolution = "Point the configuration at one of the policy's providers."


# ===================================================================
# Lookup table: code -> exception class
# ===================================================================

_CODE_MAP: dict[str, type[DataOperationError]] = {
    cls.code: cls
    for cls in [
        MalformedName,
        UnsupportedLeafWildcard,
        SchemaMismatch,
        ProviderNotConfigured,
    ]
}


def error_from_code(code: str, message: str | None = None) -> DataOperationError:
    """Instantiate the correct exception class for a data-operation error code.

    Parameters
    ----------
    code:
        An error code such as ``"DP-E100"``.
    message:
        Optional override for the default error message.

    Raises
    ------
    KeyError
        If *code* is not a recognised error code.
    """
    cls = _CODE_MAP[code]
    return cls(message) if message else cls()
