"""Tests for the core models: types, policy, configuration and errors."""
from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from dpmediator.core.config import MediatorConfig
from dpmediator.core.errors import (
    ConfigurationError,
    ContentError,
    DataOperationError,
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
    Criteria,
    CriteriaOperator,
    Operation,
    OperationCommand,
    OperationOutcome,
    OperationResult,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_command(**overrides: object) -> OperationCommand:
    fields: dict[str, object] = {
        "id": 1,
        "provider_id": "vault",
        "attribute_names": ("patient/pat_id", "patient/pat_name"),
        "protected_attribute_names": ("csp1/*/patient/pat_name",),
        "mapping": AttributeMapping(
            entries=(("patient/pat_name", "csp1/*/patient/pat_name"),),
        ),
    }
    fields.update(overrides)
    return OperationCommand(**fields)


# ===================================================================
# Types
# ===================================================================


class TestEnums:
    def test_operation_values(self) -> None:
        assert [op.value for op in Operation] == ["get", "post", "put", "delete", "head"]

    def test_only_head_allows_leaf_wildcards(self) -> None:
        assert not Operation.HEAD.affects_payload
        assert all(op.affects_payload for op in Operation if op is not Operation.HEAD)

    def test_criteria_operator_from_symbol(self) -> None:
        assert CriteriaOperator("<=") is CriteriaOperator.LE


class TestCriteria:
    def test_defaults(self) -> None:
        criteria = Criteria(attribute_name="patient/pat_id", value="42")
        assert criteria.operator is CriteriaOperator.EQ

    def test_with_attribute_name(self) -> None:
        criteria = Criteria(attribute_name="patient/pat_id", operator=">", value="42")
        renamed = criteria.with_attribute_name("csp1/*/patient/pat_id")
        assert renamed.attribute_name == "csp1/*/patient/pat_id"
        assert renamed.operator is CriteriaOperator.GT
        assert renamed.value == "42"
        assert criteria.attribute_name == "patient/pat_id"

    def test_frozen(self) -> None:
        criteria = Criteria(attribute_name="patient/pat_id")
        with pytest.raises(ValidationError):
            criteria.value = "1"  # type: ignore[misc]


class TestAttributeMapping:
    def test_views(self) -> None:
        mapping = AttributeMapping(entries=(("a", "p1"), ("b", "p2"), ("a", "p3")))
        assert mapping.keys() == ["a", "b", "a"]
        assert mapping.values() == ["p1", "p2", "p3"]
        assert mapping.items() == [("a", "p1"), ("b", "p2"), ("a", "p3")]
        assert mapping.protected_names_for("a") == ["p1", "p3"]
        assert len(mapping) == 3

    def test_as_dict_first_entry_wins(self) -> None:
        mapping = AttributeMapping(entries=(("a", "p1"), ("a", "p2")))
        assert mapping.as_dict() == {"a": "p1"}

    def test_empty_mapping_is_falsy(self) -> None:
        assert not AttributeMapping()


class TestOperationCommand:
    def test_valid_command(self) -> None:
        command = _make_command(protected_contents=(("Ann",), ("Bob",)))
        assert command.kind == "command"
        assert command.involved
        assert command.row_count == 2

    def test_uninvolved_command(self) -> None:
        command = _make_command(
            protected_attribute_names=(),
            mapping=AttributeMapping(),
            protected_contents=(),
        )
        assert not command.involved
        assert command.row_count == 0

    def test_criteria_alone_involves_provider(self) -> None:
        command = _make_command(
            protected_attribute_names=(),
            mapping=AttributeMapping(),
            criteria=(Criteria(attribute_name="csp1/*/patient/pat_name", value="Ann"),),
        )
        assert command.involved

    def test_mapping_must_list_protected_names(self) -> None:
        with pytest.raises(ValidationError, match="mapping values"):
            _make_command(protected_attribute_names=("csp1/*/patient/other",))

    def test_rows_must_match_protected_names(self) -> None:
        with pytest.raises(ValidationError, match="protected row"):
            _make_command(protected_contents=(("Ann", "extra"),))

    def test_lists_are_coerced(self) -> None:
        command = _make_command(protected_contents=[["Ann"], [None]])
        assert command.protected_contents == (("Ann",), (None,))

    def test_frozen(self) -> None:
        command = _make_command()
        with pytest.raises(ValidationError):
            command.provider_id = "other"  # type: ignore[misc]

    def test_with_attribute_names(self) -> None:
        command = _make_command()
        renamed = command.with_attribute_names(
            ["postgres/patient/pat_id", "postgres/patient/pat_name"]
        )
        assert renamed.attribute_names == (
            "postgres/patient/pat_id",
            "postgres/patient/pat_name",
        )
        assert renamed.mapping == command.mapping
        assert command.attribute_names == ("patient/pat_id", "patient/pat_name")

    def test_with_attribute_names_length_checked(self) -> None:
        with pytest.raises(ValueError, match="expected 2"):
            _make_command().with_attribute_names(["postgres/patient/pat_id"])

    def test_auxiliary_binary_payload(self) -> None:
        command = _make_command(
            extra_protected_attribute_names=("csp1/*/patient/photo",),
            extra_binary_content=b"\x89PNG",
        )
        assert command.extra_binary_content == b"\x89PNG"


class TestOperationResult:
    def test_rows_must_match_names(self) -> None:
        with pytest.raises(ValidationError, match="result row"):
            OperationResult(id=1, attribute_names=("a", "b"), contents=(("x",),))

    def test_outcome_union_dispatch(self) -> None:
        adapter = TypeAdapter(list[OperationOutcome])
        outcomes = adapter.validate_python(
            [
                {"kind": "result", "id": 3, "attribute_names": ["a"], "contents": [["x"]]},
                {"kind": "command", "id": 4, "provider_id": "vault", "attribute_names": ["a"]},
            ]
        )
        kinds = []
        for outcome in outcomes:
            match outcome:
                case OperationResult(contents=contents):
                    kinds.append(("result", contents))
                case OperationCommand(provider_id=provider_id):
                    kinds.append(("command", provider_id))
        assert kinds == [("result", (("x",),)), ("command", "vault")]

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TypeAdapter(OperationOutcome).validate_python({"kind": "other", "id": 1})


# ===================================================================
# Policy
# ===================================================================


class TestProviderPolicy:
    def test_governed_names_are_qualified(self) -> None:
        provider = ProviderPolicy(
            provider_id="vault",
            governed_names=["pat_name", "patient/pat_id", "db/patient/pat_ssn"],
        )
        assert provider.governed_names == (
            "*/*/pat_name",
            "*/patient/pat_id",
            "db/patient/pat_ssn",
        )

    def test_malformed_governed_name(self) -> None:
        with pytest.raises(ValidationError, match="Malformed attribute name"):
            ProviderPolicy(provider_id="vault", governed_names=["a/b/c/d"])

    @pytest.mark.parametrize("prefix", ["", "csp/1"])
    def test_invalid_prefix(self, prefix: str) -> None:
        with pytest.raises(ValidationError):
            ProviderPolicy(provider_id="vault", name_prefix=prefix)

    def test_protected_name(self) -> None:
        assert (
            ProviderPolicy(provider_id="v", name_prefix="csp1").protected_name("*/p/a")
            == "csp1/*/p/a"
        )
        assert ProviderPolicy(provider_id="v").protected_name("*/p/a") == "*/p/a"

    def test_empty_provider_id(self) -> None:
        with pytest.raises(ValidationError):
            ProviderPolicy(provider_id="")


class TestSecurityPolicy:
    def test_requires_a_provider(self) -> None:
        with pytest.raises(ValidationError):
            SecurityPolicy(policy_id="p", providers=[])

    def test_unique_provider_ids(self) -> None:
        with pytest.raises(ValidationError, match="duplicate provider_id"):
            SecurityPolicy(
                policy_id="p",
                providers=[ProviderPolicy(provider_id="a"), ProviderPolicy(provider_id="a")],
            )

    def test_governed_name_set_union(self) -> None:
        policy = SecurityPolicy(
            policy_id="p",
            providers=[
                ProviderPolicy(provider_id="a", governed_names=["patient/pat_id", "pat_name"]),
                ProviderPolicy(provider_id="b", governed_names=["pat_name", "episode/ep_id"]),
            ],
        )
        assert policy.provider_ids == ["a", "b"]
        assert policy.governed_name_set == [
            "*/patient/pat_id",
            "*/*/pat_name",
            "*/episode/ep_id",
        ]

    def test_from_json(self) -> None:
        policy = SecurityPolicy.model_validate_json(
            '{"policy_id": "p", "providers": ['
            '{"provider_id": "vault", "governed_names": ["pat_name"], "name_prefix": "csp1"}'
            "]}"
        )
        assert policy.providers[0].governed_names == ("*/*/pat_name",)


# ===================================================================
# Configuration
# ===================================================================


class TestMediatorConfig:
    def test_defaults(self) -> None:
        config = MediatorConfig(module_id="m1")
        assert config.clear_provider_index == 0
        assert config.reject_duplicate_names is False

    def test_negative_index_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MediatorConfig(module_id="m1", clear_provider_index=-1)

    def test_strict_types(self) -> None:
        with pytest.raises(ValidationError):
            MediatorConfig(module_id="m1", clear_provider_index="1")


# ===================================================================
# Errors
# ===================================================================


class TestErrors:
    @pytest.mark.parametrize(
        ("cls", "code", "category"),
        [
            (MalformedName, "DP-E100", NamingError),
            (UnsupportedLeafWildcard, "DP-E101", NamingError),
            (SchemaMismatch, "DP-E200", ContentError),
            (ProviderNotConfigured, "DP-E300", ConfigurationError),
        ],
    )
    def test_codes_and_hierarchy(
        self,
        cls: type[DataOperationError],
        code: str,
        category: type[DataOperationError],
    ) -> None:
        error = cls()
        assert error.code == code
        assert isinstance(error, category)
        assert isinstance(error, DataOperationError)
        assert error.resolution

    def test_to_dict(self) -> None:
        error = MalformedName("bad name", details={"attribute_name": "a/b/c/d"})
        payload = error.to_dict()["error"]
        assert payload["code"] == "DP-E100"
        assert payload["message"] == "bad name"
        assert payload["detail"] == {"attribute_name": "a/b/c/d"}
        assert payload["resolution"] == MalformedName.resolution

    def test_to_dict_without_details(self) -> None:
        assert "detail" not in SchemaMismatch().to_dict()["error"]

    def test_str_and_repr(self) -> None:
        error = SchemaMismatch("2 columns for 3 names")
        assert str(error) == "2 columns for 3 names"
        assert repr(error) == (
            "SchemaMismatch(code='DP-E200', message='2 columns for 3 names')"
        )

    def test_error_from_code(self) -> None:
        error = error_from_code("DP-E101", "custom")
        assert isinstance(error, UnsupportedLeafWildcard)
        assert error.message == "custom"
        assert isinstance(error_from_code("DP-E300"), ProviderNotConfigured)

    def test_error_from_unknown_code(self) -> None:
        with pytest.raises(KeyError):
            error_from_code("DP-E999")
