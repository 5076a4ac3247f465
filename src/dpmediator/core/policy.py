"""Security-policy model.

The policy lists, for every provider, the attribute names it governs.  How
a policy is authored or stored is up to the caller; this module only
validates the document and exposes the views the resolver needs.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dpmediator.core.errors import MalformedName
from dpmediator.core.types import SEPARATOR, AttributeName
from dpmediator.naming.qualifier import qualify


class ProviderPolicy(BaseModel):
    """Attribute names one provider is responsible for."""

    model_config = ConfigDict(frozen=True)

    provider_id: str = Field(min_length=1)
    governed_names: tuple[str, ...] = Field(
        default=(),
        description="Governed attribute names; wildcard segments allowed.",
    )
    name_prefix: str | None = Field(
        default=None,
        description="Provider-scoped qualifier prepended to protected names.",
    )

    @field_validator("governed_names", mode="before")
    @classmethod
    def qualify_governed_names(cls, value: object) -> object:
        if isinstance(value, list | tuple):
            try:
                return tuple(qualify(name) for name in value)
            except MalformedName as exc:
                raise ValueError(exc.message) from exc
        return value

    @field_validator("name_prefix")
    @classmethod
    def check_prefix(cls, value: str | None) -> str | None:
        if value is not None and (not value or SEPARATOR in value):
            raise ValueError(
                f"name_prefix must be a non-empty segment without '{SEPARATOR}'"
            )
        return value

    def protected_name(self, attribute_name: str) -> str:
        """Return the name this provider knows *attribute_name* under."""
        if self.name_prefix is None:
            return attribute_name
        return f"{self.name_prefix}{SEPARATOR}{attribute_name}"


class SecurityPolicy(BaseModel):
    """The active security policy, one entry per provider in fixed order."""

    model_config = ConfigDict(frozen=True)

    policy_id: str
    providers: tuple[ProviderPolicy, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_providers(self) -> SecurityPolicy:
        seen: set[str] = set()
        for provider in self.providers:
            if provider.provider_id in seen:
                raise ValueError(f"duplicate provider_id: {provider.provider_id}")
            seen.add(provider.provider_id)
        return self

    @property
    def provider_ids(self) -> list[str]:
        return [p.provider_id for p in self.providers]

    @property
    def governed_name_set(self) -> list[AttributeName]:
        """Union of every provider's governed names, first-seen order."""
        return [
            AttributeName(name)
            for name in dict.fromkeys(
                name for provider in self.providers for name in provider.governed_names
            )
        ]
