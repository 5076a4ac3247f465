"""Mediator configuration.

Defines the validated configuration model consumed by the mediator and the
partitioning helpers.  A minimal configuration (just ``module_id``) is
sufficient for development.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MediatorConfig(BaseModel):
    """Configuration for a :class:`~dpmediator.mediator.DataOperationMediator`."""

    model_config = ConfigDict(strict=True)

    module_id: str = Field(
        description="Identifier of this mediation module instance.",
    )
    clear_provider_index: int = Field(
        default=0,
        ge=0,
        description=(
            "Position, in policy order, of the provider that receives "
            "attribute names no provider governs."
        ),
    )
    reject_duplicate_names: bool = Field(
        default=False,
        description=(
            "When True, GET/POST/PUT/DELETE refuse a request that names "
            "the same attribute more than once."
        ),
    )
