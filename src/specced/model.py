"""
Spec Definition Model Objects

Defines the declarative input of specced.

These are pure data classes representing:
    - Compound rules (extra tokens for an exact combination of options)
    - Spec definitions (base, variants, defaults, compound rules)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about resolution or output order
        - Are immutable (frozen)
        - Are fully serializable
        - Represent configuration, not behavior
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from .tokens import SpecDefinitionError, TokenValue, canonical_option


OptionValue = Union[str, int, float, bool]
Selection = Mapping[str, Optional[OptionValue]]


@dataclass(frozen=True)
class CompoundRule:
    """
    Contributes extra tokens when an exact combination of options is active.

    Example:
        Add "shadow-lg" when intent is "primary" and size is "lg":

        CompoundRule(
            when={"intent": "primary", "size": "lg"},
            value="shadow-lg",
        )

    Properties:
        when:
            Partial mapping of variant name -> required option.
            Every entry must hold in the effective selection.
            An empty mapping is always satisfied.

        value:
            Token value contributed on a match
    """

    when: Mapping[str, OptionValue] = field(default_factory=dict)
    value: TokenValue = None


@dataclass(frozen=True)
class SpecDefinition:
    """
    Root container for one resolvable token specification.

    Properties:
        base:
            Token value that is always contributed, first

        variants:
            variant name -> option name -> token value
            Example: {"size": {"sm": "text-sm px-2", "lg": "text-lg px-4"}}

        defaults:
            variant name -> option used when the caller omits that variant

        compound:
            Ordered compound rules. Order is significant: later rules
            only add tokens that are still missing.

    INVARIANTS:
        - Variant names are unique (mapping keys)
        - Option names are unique within a variant (mapping keys)
        - Nothing here is mutated by a resolver
    """

    base: TokenValue = None
    variants: Mapping[str, Mapping[Any, TokenValue]] = field(default_factory=dict)
    defaults: Mapping[str, OptionValue] = field(default_factory=dict)
    compound: List[CompoundRule] = field(default_factory=list)

    @classmethod
    def coerce(cls, obj: Union["SpecDefinition", Mapping[str, Any], None]) -> "SpecDefinition":
        """
        Build a SpecDefinition from an instance or a plain mapping.

        Args:
            obj: SpecDefinition, dict with keys base/variants/defaults/compound,
                or None for an empty definition

        Returns:
            SpecDefinition

        Raises:
            SpecDefinitionError: unknown keys or wrongly shaped sections
        """
        if isinstance(obj, SpecDefinition):
            # Instances are re-checked: their fields are not validated on construction
            obj = {
                "base": obj.base,
                "variants": obj.variants,
                "defaults": obj.defaults,
                "compound": obj.compound,
            }
        if obj is None:
            return cls()
        if not isinstance(obj, Mapping):
            raise SpecDefinitionError(
                f"Spec definition must be a mapping, got {type(obj).__name__}"
            )

        unknown = set(obj) - {"base", "variants", "defaults", "compound"}
        if unknown:
            raise SpecDefinitionError(
                f"Unknown spec definition keys: {', '.join(sorted(map(str, unknown)))}"
            )

        variants = obj.get("variants") or {}
        _require_mapping(variants, "variants")
        for name, options in variants.items():
            _require_mapping(options, f"variants.{name}")

        defaults = obj.get("defaults") or {}
        _require_mapping(defaults, "defaults")

        compound = obj.get("compound") or []
        if not isinstance(compound, (list, tuple)):
            raise SpecDefinitionError(
                f"compound must be a list, got {type(compound).__name__}"
            )

        return cls(
            base=obj.get("base"),
            variants={name: dict(options) for name, options in variants.items()},
            defaults=dict(defaults),
            compound=[_coerce_rule(rule, i) for i, rule in enumerate(compound)],
        )

    def variant_names(self) -> List[str]:
        """Variant names in definition order."""
        return list(self.variants)

    def option_names(self, variant: str) -> Optional[List[str]]:
        """
        Canonical option names of a variant.

        Returns:
            List of option names, or None if the variant is not defined
        """
        options = self.variants.get(variant)
        if options is None:
            return None
        return [canonical_option(option) for option in options]


def _require_mapping(value: Any, where: str) -> None:
    if not isinstance(value, Mapping):
        raise SpecDefinitionError(f"{where} must be a mapping, got {type(value).__name__}")


def _coerce_rule(rule: Any, index: int) -> CompoundRule:
    if isinstance(rule, CompoundRule):
        when, value = rule.when, rule.value
    else:
        _require_mapping(rule, f"compound[{index}]")
        when, value = rule.get("when"), rule.get("value")
    when = when or {}
    _require_mapping(when, f"compound[{index}].when")
    return CompoundRule(when=dict(when), value=value)


__all__ = [
    "OptionValue",
    "Selection",
    "CompoundRule",
    "SpecDefinition",
]
