"""
Spec Analyzer: early diagnostics and inventory of spec definitions.

A resolver only notices a misspelled variant or option when a call
selects it. This module checks a SpecDefinition up front:
    - Inventory of variants, options and compound rules
    - Defaults naming unknown variants or options
    - Compound rules naming unknown variants or options
    - Compound rules that always match or contribute nothing
    - Duplicated tokens within a single token value
    - Options contributing no tokens
    - Option names that collide once coerced to strings

IMPORTANT: This does NOT modify the definition and never blocks
create_spec(). It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Set, Union

from specced.model import SpecDefinition
from specced.tokens import TokenValue, canonical_option, to_tokens


def _duplicates(value: TokenValue) -> List[str]:
    """Tokens repeated inside one token value, in first-occurrence order."""
    to_tokens(value)  # shape check
    if value is None:
        return []
    fragments = [value] if isinstance(value, str) else value
    counts = Counter(token for fragment in fragments for token in fragment.split())
    return [token for token, count in counts.items() if count > 1]


@dataclass
class SpecReport:
    """Analysis report for a spec definition."""

    total_variants: int = 0
    total_options: int = 0
    total_compound_rules: int = 0
    base_token_count: int = 0

    # Defaults
    unknown_default_variants: Set[str] = field(default_factory=set)
    invalid_defaults: Dict[str, str] = field(default_factory=dict)
    variants_without_default: List[str] = field(default_factory=list)

    # Compound rules, keyed by index in definition order
    compound_unknown_variants: Dict[int, List[str]] = field(default_factory=dict)
    compound_invalid_options: Dict[int, Dict[str, str]] = field(default_factory=dict)
    unconditional_compound_rules: List[int] = field(default_factory=list)
    empty_compound_rules: List[int] = field(default_factory=list)

    # Token values
    duplicate_tokens: Dict[str, List[str]] = field(default_factory=dict)
    empty_options: List[str] = field(default_factory=list)
    option_collisions: Dict[str, List[str]] = field(default_factory=dict)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def is_clean(self) -> bool:
        return not self.warnings


def analyze_spec(definition: Union[SpecDefinition, Mapping[str, Any], None]) -> SpecReport:
    """
    Perform static analysis of a spec definition.

    Checks for:
    - Defaults consistency
    - Compound rule consistency
    - Token value hygiene (duplicates, empty options)

    Returns a SpecReport with counts and warnings.

    Raises:
        SpecDefinitionError: definition is malformed (same as create_spec)
    """
    spec = SpecDefinition.coerce(definition)
    report = SpecReport()

    options_by_variant = {
        name: {canonical_option(option) for option in options}
        for name, options in spec.variants.items()
    }

    report.total_variants = len(spec.variants)
    report.total_options = sum(len(options) for options in spec.variants.values())
    report.total_compound_rules = len(spec.compound)
    report.base_token_count = len(to_tokens(spec.base))

    # =========================================================================
    # 1. DEFAULTS
    # =========================================================================

    for variant, option in spec.defaults.items():
        if variant not in options_by_variant:
            report.unknown_default_variants.add(variant)
        elif option is not None and canonical_option(option) not in options_by_variant[variant]:
            report.invalid_defaults[variant] = canonical_option(option)

    report.variants_without_default = [
        name for name in spec.variants if spec.defaults.get(name) is None
    ]

    # =========================================================================
    # 2. COMPOUND RULES
    # =========================================================================

    for index, rule in enumerate(spec.compound):
        if not rule.when:
            report.unconditional_compound_rules.append(index)
        if not to_tokens(rule.value):
            report.empty_compound_rules.append(index)

        unknown = [variant for variant in rule.when if variant not in options_by_variant]
        if unknown:
            report.compound_unknown_variants[index] = unknown

        invalid = {
            variant: canonical_option(option)
            for variant, option in rule.when.items()
            if variant in options_by_variant
            and canonical_option(option) not in options_by_variant[variant]
        }
        if invalid:
            report.compound_invalid_options[index] = invalid

        dupes = _duplicates(rule.value)
        if dupes:
            report.duplicate_tokens[f"compound[{index}]"] = dupes

    # =========================================================================
    # 3. TOKEN VALUES
    # =========================================================================

    dupes = _duplicates(spec.base)
    if dupes:
        report.duplicate_tokens["base"] = dupes

    for name, options in spec.variants.items():
        counts = Counter(canonical_option(option) for option in options)
        collided = [option for option, count in counts.items() if count > 1]
        if collided:
            report.option_collisions[name] = collided

        for option, value in options.items():
            where = f"{name}.{canonical_option(option)}"
            if not to_tokens(value):
                report.empty_options.append(where)
            dupes = _duplicates(value)
            if dupes:
                report.duplicate_tokens[where] = dupes

    # =========================================================================
    # 4. WARNING FLAGS
    # =========================================================================

    if report.unknown_default_variants:
        report.add_warning(
            f"Defaults for unknown variants: {', '.join(sorted(report.unknown_default_variants))}"
        )

    for variant, option in report.invalid_defaults.items():
        report.add_warning(f"Default for variant {variant} is not a defined option: {option}")

    for index, variants in report.compound_unknown_variants.items():
        report.add_warning(
            f"Compound rule {index} refers to unknown variants: {', '.join(variants)}"
        )

    for index, invalid in report.compound_invalid_options.items():
        pairs = ", ".join(f"{variant}={option}" for variant, option in invalid.items())
        report.add_warning(f"Compound rule {index} can never match: {pairs}")

    if report.unconditional_compound_rules:
        report.add_warning(
            "Compound rules without conditions always apply: "
            + ", ".join(str(i) for i in report.unconditional_compound_rules)
        )

    if report.empty_compound_rules:
        report.add_warning(
            "Compound rules contribute no tokens: "
            + ", ".join(str(i) for i in report.empty_compound_rules)
        )

    for where, tokens in report.duplicate_tokens.items():
        report.add_warning(f"Duplicate tokens in {where}: {', '.join(tokens)}")

    for name, collided in report.option_collisions.items():
        report.add_warning(
            f"Options of variant {name} collide after string coercion: {', '.join(collided)}"
        )

    if report.empty_options:
        report.add_warning(f"Options without tokens: {', '.join(report.empty_options)}")

    return report
