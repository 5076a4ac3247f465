#!/usr/bin/env python3
"""Data-operation mediator quickstart -- two providers, one round trip.

Demonstrates the core workflow of the mediator:

1. Describe which provider governs which attribute names.
2. Create a mediator over that policy.
3. Resolve names with HEAD.
4. Partition a GET into one command per provider.
5. Feed the providers' tables back and rebuild the caller's rows.
6. Partition a POST payload.

Run:
    python examples/quickstart.py
"""
from __future__ import annotations

import logging

from dpmediator import (
    Criteria,
    DataOperationError,
    DataOperationMediator,
    MediatorConfig,
    ProviderPolicy,
    SecurityPolicy,
)


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # -- Step 1: The security policy -----------------------------------------
    policy = SecurityPolicy(
        policy_id="hospital",
        providers=[
            ProviderPolicy(provider_id="clear-db"),
            ProviderPolicy(
                provider_id="vault",
                governed_names=["patient/pat_name", "patient/pat_last1"],
                name_prefix="csp1",
            ),
        ],
    )
    print(f"[1] Policy {policy.policy_id!r}: governed {policy.governed_name_set}")

    # -- Step 2: The mediator ------------------------------------------------
    mediator = DataOperationMediator(policy, MediatorConfig(module_id="quickstart"))
    print(f"[2] Ungoverned names go to {mediator.clear_provider_id!r}")

    # -- Step 3: HEAD --------------------------------------------------------
    for provider_id, mapping in zip(policy.provider_ids, mediator.head(["patient/*"])):
        print(f"[3] HEAD {provider_id}: {mapping.as_dict()}")

    # -- Step 4: Outbound GET ------------------------------------------------
    names = ["patient/pat_id", "patient/pat_name"]
    commands = mediator.get(names, [Criteria(attribute_name="patient/pat_name", value="Ann")])
    for command in commands:
        print(
            f"[4] GET -> {command.provider_id}: {list(command.protected_attribute_names)} "
            f"where {[(c.attribute_name, c.value) for c in command.criteria]}"
        )

    # -- Step 5: Inbound GET -------------------------------------------------
    tables = [
        [["17"], ["42"]],  # clear-db: */patient/pat_id
        [["Ann"], ["Ann"]],  # vault: csp1/*/patient/pat_name
    ]
    (result,) = mediator.get_result(commands, tables)
    print(f"[5] Result {list(result.attribute_names)}")
    for row in result.contents:
        print(f"    {row}")

    # -- Step 6: Outbound POST -----------------------------------------------
    for command in mediator.post(names, [["99", "Bob"]]):
        print(f"[6] POST -> {command.provider_id}: {command.protected_contents}")

    try:
        mediator.post(names, [["100"]])
    except DataOperationError as exc:
        print(f"[6] Rejected: {exc.to_dict()}")


if __name__ == "__main__":
    main()
