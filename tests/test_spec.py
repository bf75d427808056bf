"""
Tests for the Resolver Builder and Resolver.

These tests verify:
    - Base, variant and default application
    - Ordering and de-duplication of tokens
    - Compound rule matching
    - Graceful handling of unrecognized selections
    - Immutability of the built resolver
"""

import copy
import dataclasses
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from specced import (
    CompoundRule,
    SpecDefinition,
    SpecDefinitionError,
    UnrecognizedOptionWarning,
    UnrecognizedVariantWarning,
    create_spec,
)


def build_definition():
    return {
        "base": "base",
        "variants": {
            "a": {1: "a-1 dup dup", 2: "a-2", 3: "a-3"},
            "b": {1: "b-1", 2: "b-2", 3: "b-3"},
        },
        "defaults": {"a": 1, "b": 1},
        "compound": [
            {"when": {"a": 1, "b": 1}, "value": "a1b1"},
            {"when": {"a": 2, "b": 2}, "value": "a2b2"},
            {"when": {"a": 3, "b": 3}, "value": "a3b3"},
        ],
    }


@pytest.fixture
def spec():
    return create_spec(build_definition(), diagnostics=False)


class TestScenario:
    """The reference scenario, token for token."""

    def test_defaults_only(self, spec):
        assert spec() == "base a-1 dup b-1 a1b1"

    def test_override_breaks_compound(self, spec):
        assert spec({"a": 2}) == "base a-2 b-1"

    def test_keyword_selection(self, spec):
        assert spec(a=2) == "base a-2 b-1"


class TestVariants:
    """Variant options and defaults."""

    def test_every_combination(self, spec):
        for a in (1, 2, 3):
            for b in (1, 2, 3):
                tokens = spec.tokens({"a": a, "b": b})
                assert f"a-{a}" in tokens
                assert f"b-{b}" in tokens

    def test_empty_selection_equals_defaults(self, spec):
        assert spec() == spec({}) == spec({"a": 1, "b": 1})

    def test_mixes_selection_with_defaults(self, spec):
        for option in (1, 2, 3):
            result_a = spec.tokens({"a": option})
            assert f"a-{option}" in result_a
            assert "b-1" in result_a

            result_b = spec.tokens({"b": option})
            assert "a-1" in result_b
            assert f"b-{option}" in result_b

    def test_none_falls_back_to_default(self, spec):
        assert spec({"a": None, "b": 2}) == "base a-1 dup b-2"

    def test_keywords_override_mapping(self, spec):
        assert spec({"a": 2}, a=3) == "base a-3 b-1"

    def test_string_and_int_options_are_equivalent(self, spec):
        assert spec({"a": "2", "b": "2"}) == spec({"a": 2, "b": 2})

    def test_boolean_options(self):
        toggle = create_spec({
            "variants": {"disabled": {"true": "opacity-50", "false": "opacity-100"}},
            "defaults": {"disabled": False},
        })
        assert toggle() == "opacity-100"
        assert toggle(disabled=True) == "opacity-50"

    def test_variant_without_default_contributes_nothing(self):
        resolver = create_spec({"base": "x", "variants": {"size": {"sm": "s"}}})
        assert resolver() == "x"
        assert resolver(size="sm") == "x s"


class TestOrdering:
    """Order stability and de-duplication."""

    def test_base_then_variants_then_compound(self, spec):
        tokens = spec.tokens({"a": 3, "b": 3})
        assert tokens == ("base", "a-3", "b-3", "a3b3")

    def test_token_in_base_and_option_kept_once_at_base_position(self):
        resolver = create_spec({
            "base": "btn shared",
            "variants": {"tone": {"loud": "shared loud"}},
            "defaults": {"tone": "loud"},
        })
        assert resolver() == "btn shared loud"

    def test_defaults_order_then_new_selection_names(self):
        resolver = create_spec(
            {
                "variants": {
                    "x": {"on": "x-on"},
                    "y": {"on": "y-on"},
                    "z": {"on": "z-on"},
                },
                "defaults": {"y": "on", "x": "on"},
            },
            diagnostics=False,
        )
        # defaults keep definition order even when the caller overrides one
        assert resolver({"z": "on", "x": "on"}) == "y-on x-on z-on"

    def test_repeated_calls_are_stable(self, spec):
        first = spec({"b": 2})
        assert all(spec({"b": 2}) == first for _ in range(10))

    def test_later_compound_only_adds_missing(self):
        resolver = create_spec({
            "variants": {"a": {"on": "one"}},
            "defaults": {"a": "on"},
            "compound": [
                {"when": {"a": "on"}, "value": "two three"},
                {"when": {"a": "on"}, "value": "three one four"},
            ],
        })
        assert resolver() == "one two three four"

    def test_empty_definition(self):
        assert create_spec({})() == ""
        assert create_spec()() == ""
        assert create_spec(SpecDefinition(base="only"))() == "only"


class TestCompound:
    """Compound rule matching."""

    def test_exact_match_required(self, spec):
        assert "a2b2" in spec.tokens({"a": 2, "b": 2})
        assert "a2b2" not in spec.tokens({"a": 1, "b": 2})
        assert "a2b2" not in spec.tokens({"a": 2, "b": 1})

    def test_non_matching_rules_do_not_short_circuit(self, spec):
        tokens = spec.tokens({"a": 3, "b": 3})
        assert "a1b1" not in tokens
        assert "a3b3" in tokens

    def test_missing_variant_never_matches(self):
        resolver = create_spec({
            "variants": {"a": {"1": "a-1"}, "b": {"1": "b-1"}},
            "compound": [{"when": {"a": "1", "b": "1"}, "value": "both"}],
        })
        assert resolver(a=1) == "a-1"
        assert resolver(a=1, b=1) == "a-1 b-1 both"

    def test_empty_when_always_matches(self):
        resolver = create_spec({"base": "x", "compound": [{"when": {}, "value": "always"}]})
        assert resolver() == "x always"

    def test_bool_does_not_match_int(self):
        resolver = create_spec(
            {
                "variants": {"flag": {"true": "t", "1": "one"}},
                "compound": [{"when": {"flag": 1}, "value": "numeric"}],
            },
            diagnostics=False,
        )
        assert resolver(flag=True) == "t"
        assert resolver(flag=1) == "one numeric"

    def test_compound_rule_instances(self):
        resolver = create_spec(SpecDefinition(
            variants={"size": {"lg": "text-lg"}},
            defaults={"size": "lg"},
            compound=[CompoundRule(when={"size": "lg"}, value=["font-bold", "font-bold"])],
        ))
        assert resolver() == "text-lg font-bold"


class TestDiagnostics:
    """Unrecognized selections degrade gracefully."""

    def test_unknown_variant_warns(self):
        resolver = create_spec(build_definition(), diagnostics=True)
        with pytest.warns(UnrecognizedVariantWarning, match="unrecognized variant name: color"):
            result = resolver({"color": "red"})
        assert result == resolver()

    def test_unknown_option_warns(self):
        resolver = create_spec(build_definition(), diagnostics=True)
        with pytest.warns(UnrecognizedOptionWarning, match="unrecognized value for variant a: 9"):
            result = resolver({"a": 9})
        assert result == "base b-1"

    def test_warnings_point_at_caller(self):
        """Diagnostics are attributed to the line making the selection."""
        resolver = create_spec(build_definition(), diagnostics=True)
        with pytest.warns(UserWarning) as record:
            resolver({"a": 9})
            resolver.tokens({"color": "red"})
        assert len(record) == 2
        assert all(Path(w.filename).name == "test_spec.py" for w in record)

    def test_warnings_are_user_warnings(self):
        assert issubclass(UnrecognizedVariantWarning, UserWarning)
        assert issubclass(UnrecognizedOptionWarning, UserWarning)

    def test_disabled_diagnostics_are_silent(self, recwarn):
        resolver = create_spec(build_definition(), diagnostics=False)
        assert resolver({"a": 2, "color": "red"}) == resolver({"a": 2})
        assert resolver({"a": "nope"}) == "base b-1"
        assert len(recwarn) == 0

    def test_unknown_default_is_reported_per_call(self):
        resolver = create_spec({"defaults": {"ghost": "x"}}, diagnostics=True)
        with pytest.warns(UnrecognizedVariantWarning):
            assert resolver() == ""


class TestBuilder:
    """Normalization and immutability of the built resolver."""

    def test_definition_not_mutated(self, spec):
        definition = build_definition()
        before = copy.deepcopy(definition)
        resolver = create_spec(definition, diagnostics=False)
        resolver({"a": 3, "extra": 1})
        assert definition == before

    def test_resolver_is_frozen(self, spec):
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.base = ("other",)
        with pytest.raises(TypeError):
            spec.table["a"] = {}
        with pytest.raises(TypeError):
            spec.table["a"]["1"] = ("x",)

    def test_variants_introspection(self, spec):
        assert dict(spec.variants) == {"a": ("1", "2", "3"), "b": ("1", "2", "3")}
        assert dict(spec.default_selection) == {"a": "1", "b": "1"}

    def test_effective_selection(self, spec):
        assert spec.effective_selection({"b": 2, "c": True}) == {"a": "1", "b": "2", "c": "true"}

    def test_malformed_token_value_rejected(self):
        with pytest.raises(SpecDefinitionError):
            create_spec({"base": 42})
        with pytest.raises(SpecDefinitionError):
            create_spec({"variants": {"a": {"1": ["ok", None]}}})

    def test_malformed_section_rejected(self):
        with pytest.raises(SpecDefinitionError):
            create_spec({"variants": ["a", "b"]})
        with pytest.raises(SpecDefinitionError):
            create_spec({"compound": {"when": {}}})

    def test_typed_definition_validated(self):
        resolver = create_spec(SpecDefinition(
            variants={"a": {"1": "a-1"}},
            defaults={"a": "1"},
            compound=[{"when": {"a": "1"}, "value": "x"}],
        ))
        assert resolver() == "a-1 x"
        with pytest.raises(SpecDefinitionError):
            create_spec(SpecDefinition(variants={"a": "not-a-mapping"}))

    def test_shared_across_threads(self, spec):
        selections = [{"a": a, "b": b} for a in (1, 2, 3) for b in (1, 2, 3)] * 20
        expected = [spec(selection) for selection in selections]
        with ThreadPoolExecutor(max_workers=8) as pool:
            assert list(pool.map(spec, selections)) == expected
