"""Shared fixtures for the data-operation conformance tests.

Provides the reference governed name set and a multi-provider policy
with a mediator built on top of it.
"""
from __future__ import annotations

import pytest

from dpmediator.core.config import MediatorConfig
from dpmediator.core.policy import ProviderPolicy, SecurityPolicy
from dpmediator.mediator import DataOperationMediator
from dpmediator.naming.resolver import NameResolver

# ---------------------------------------------------------------------------
# Governed names used across tests
# ---------------------------------------------------------------------------
PATIENT_SET = [
    "*/patient/pat_id",
    "*/patient/pat_name",
    "*/patient/pat_last1",
    "*/patient/pat_last2",
]
REFERENCE_NAME = "postgres/patient/pat_id"


# ---------------------------------------------------------------------------
# Resolution fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def patient_set() -> list[str]:
    return list(PATIENT_SET)


@pytest.fixture()
def resolver() -> NameResolver:
    return NameResolver()


# ---------------------------------------------------------------------------
# Policy and mediator fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def policy() -> SecurityPolicy:
    """Four providers, one of which governs nothing."""
    return SecurityPolicy(
        policy_id="conformance",
        providers=[
            ProviderPolicy(provider_id="clear"),
            ProviderPolicy(
                provider_id="csp1",
                governed_names=["patient/pat_name", "patient/pat_last1"],
                name_prefix="csp1",
            ),
            ProviderPolicy(
                provider_id="csp2",
                governed_names=["pat_last2", "episode/ep_pat"],
                name_prefix="csp2",
            ),
            ProviderPolicy(provider_id="idle"),
        ],
    )


@pytest.fixture()
def mediator(policy: SecurityPolicy) -> DataOperationMediator:
    return DataOperationMediator(policy, MediatorConfig(module_id="conformance"))
