"""
Resolver Builder and Resolver.

Two phases:
    1. create_spec() normalizes a SpecDefinition once into read-only
       lookup tables and returns a Resolver.
    2. Calling the Resolver with a selection merges it over the defaults,
       accumulates tokens (base, then variants, then compound rules) and
       returns them space-joined.

Example:
    button = create_spec({
        "base": "btn",
        "variants": {"size": {"sm": "btn-sm", "lg": "btn-lg"}},
        "defaults": {"size": "sm"},
    })
    button()           -> "btn btn-sm"
    button(size="lg")  -> "btn btn-lg"

A Resolver holds no per-call state, so one instance can be shared
freely, including across threads.
"""

import warnings
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from .config import diagnostics_enabled
from .model import Selection, SpecDefinition
from .tokens import canonical_option, join_tokens, to_tokens


class UnrecognizedVariantWarning(UserWarning):
    """A selection named a variant the definition does not declare."""
    pass


class UnrecognizedOptionWarning(UserWarning):
    """A selection chose an option the variant does not define."""
    pass


Tokens = Tuple[str, ...]
Condition = Tuple[Tuple[str, str], ...]


def _extend(output: Dict[str, None], tokens: Iterable[str]) -> None:
    """Append tokens not yet present, keeping first-occurrence order."""
    for token in tokens:
        output.setdefault(token, None)


@dataclass(frozen=True, eq=False)
class Resolver:
    """
    Resolves a selection of variant options into a token string.

    Built by create_spec(); do not construct directly.

    Properties:
        base: Normalized base tokens
        table: variant name -> canonical option name -> tokens
        default_selection: variant name -> canonical default option
        compound: (condition, tokens) pairs in definition order, where a
            condition is a tuple of (variant name, canonical option)
        diagnostics: Whether unrecognized selections emit warnings
    """

    base: Tokens
    table: Mapping[str, Mapping[str, Tokens]]
    default_selection: Mapping[str, str]
    compound: Tuple[Tuple[Condition, Tokens], ...]
    diagnostics: bool

    @property
    def variants(self) -> Mapping[str, Tuple[str, ...]]:
        """variant name -> option names, in definition order."""
        return MappingProxyType({name: tuple(options) for name, options in self.table.items()})

    def __call__(self, selection: Optional[Selection] = None, /, **options: Any) -> str:
        return join_tokens(self._resolve(selection, options))

    def tokens(self, selection: Optional[Selection] = None, /, **options: Any) -> Tokens:
        """
        Resolve a selection into an ordered tuple of tokens.

        Args:
            selection: Mapping of variant name -> option
            **options: Same as selection, applied on top of it

        Returns:
            Tokens in order: base, variant options (in effective
            selection order), matched compound rules
        """
        return self._resolve(selection, options)

    def _resolve(self, selection: Optional[Selection], options: Mapping[str, Any]) -> Tokens:
        # Both public entry points call this directly, so warnings sit at the same depth
        effective = self.effective_selection(selection, **options)
        output = dict.fromkeys(self.base)

        for variant, option in effective.items():
            option_table = self.table.get(variant)
            if option_table is None:
                self._warn(
                    UnrecognizedVariantWarning,
                    f"[specced] unrecognized variant name: {variant}",
                )
                continue
            option_tokens = option_table.get(option)
            if option_tokens is None:
                self._warn(
                    UnrecognizedOptionWarning,
                    f"[specced] unrecognized value for variant {variant}: {option}",
                )
                continue
            _extend(output, option_tokens)

        for condition, rule_tokens in self.compound:
            if all(effective.get(variant) == option for variant, option in condition):
                _extend(output, rule_tokens)

        return tuple(output)

    def effective_selection(self, selection: Optional[Selection] = None, /, **options: Any) -> Dict[str, str]:
        """
        Overlay the caller's choices on the defaults.

        Defaults keep their definition order; variants only the caller
        names follow in the caller's order. A value of None counts as
        not selected. All values come back as canonical option names.
        """
        effective = dict(self.default_selection)
        for source in (selection or {}, options):
            for variant, option in source.items():
                if option is not None:
                    effective[variant] = canonical_option(option)
        return effective

    def _warn(self, category: type, message: str) -> None:
        if self.diagnostics:
            # caller -> __call__/tokens -> _resolve -> _warn
            warnings.warn(message, category, stacklevel=4)


def create_spec(
    definition: Union[SpecDefinition, Mapping[str, Any], None] = None,
    *,
    diagnostics: Optional[bool] = None,
) -> Resolver:
    """
    Build a Resolver from a spec definition.

    Args:
        definition: SpecDefinition or a plain mapping with optional keys
            base, variants, defaults, compound. Missing keys are empty.
        diagnostics: Emit warnings for unrecognized selections. None
            uses the process setting (see specced.config).

    Returns:
        Resolver closing over read-only normalized tables

    Raises:
        SpecDefinitionError: definition holds a malformed token value
            or section
    """
    spec = SpecDefinition.coerce(definition)

    table = {}
    for name, options in spec.variants.items():
        table[name] = MappingProxyType({
            canonical_option(option): to_tokens(value)
            for option, value in options.items()
        })

    compound = tuple(
        (
            tuple((variant, canonical_option(option)) for variant, option in rule.when.items()),
            to_tokens(rule.value),
        )
        for rule in spec.compound
    )

    return Resolver(
        base=to_tokens(spec.base),
        table=MappingProxyType(table),
        default_selection=MappingProxyType({
            variant: canonical_option(option)
            for variant, option in spec.defaults.items()
            if option is not None
        }),
        compound=compound,
        diagnostics=diagnostics_enabled(diagnostics),
    )


__all__ = [
    "Resolver",
    "UnrecognizedVariantWarning",
    "UnrecognizedOptionWarning",
    "create_spec",
]
