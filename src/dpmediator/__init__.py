"""Data-Protection Mediator -- attribute-name resolution core.

Reconciles the attribute names a caller uses with the names a security
policy governs, and partitions every data operation into one command per
storage provider.

Layers
------
1. Core types, errors, config and policy (:mod:`dpmediator.core`)
2. Name qualification and resolution (:mod:`dpmediator.naming`)
3. Operations and partitioning (:mod:`dpmediator.operations`)
4. The mediator (:mod:`dpmediator.mediator`)
"""
from __future__ import annotations

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Core -- types, errors, config, policy
# ---------------------------------------------------------------------------
from dpmediator.core.config import MediatorConfig
from dpmediator.core.errors import (
    # Category bases
    ConfigurationError,
    ContentError,
    DataOperationError,
    # Concrete errors
    MalformedName,
    NamingError,
    ProviderNotConfigured,
    SchemaMismatch,
    UnsupportedLeafWildcard,
    error_from_code,
)
from dpmediator.core.policy import ProviderPolicy, SecurityPolicy
from dpmediator.core.types import (
    AttributeMapping,
    AttributeName,
    Criteria,
    CriteriaOperator,
    Operation,
    OperationCommand,
    OperationOutcome,
    OperationResult,
)

# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------
from dpmediator.mediator import DataOperationMediator

# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------
from dpmediator.naming import (
    NameResolver,
    PatternCompiler,
    build_candidates,
    qualify,
    qualify_all,
    resolve_names,
    resolve_protected_name,
)

# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
from dpmediator.operations import DataOperation, Partitioner

__all__ = [
    # Meta
    "__version__",
    # Core types & enums
    "AttributeName",
    "AttributeMapping",
    "Criteria",
    "CriteriaOperator",
    "Operation",
    "OperationCommand",
    "OperationResult",
    "OperationOutcome",
    # Config & policy
    "MediatorConfig",
    "ProviderPolicy",
    "SecurityPolicy",
    # Error hierarchy
    "DataOperationError",
    "NamingError",
    "ContentError",
    "ConfigurationError",
    "MalformedName",
    "UnsupportedLeafWildcard",
    "SchemaMismatch",
    "ProviderNotConfigured",
    "error_from_code",
    # Naming
    "qualify",
    "qualify_all",
    "PatternCompiler",
    "build_candidates",
    "NameResolver",
    "resolve_names",
    "resolve_protected_name",
    # Operations
    "DataOperation",
    "Partitioner",
    "DataOperationMediator",
]
