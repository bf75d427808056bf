"""
specced

Resolves an ordered, duplicate-free token string (typically CSS class
names) from a declarative spec: base tokens, named variants, defaults
and compound rules.

Build a resolver once, call it many times:

    from specced import create_spec

    badge = create_spec({
        "base": "badge",
        "variants": {"tone": {"info": "badge-info", "warn": "badge-warn"}},
        "defaults": {"tone": "info"},
    })
    badge(tone="warn")  # "badge badge-warn"

This package contains ZERO knowledge of what the tokens mean. It only
decides which tokens are present and in what order they first appeared.
"""

from .model import CompoundRule, Selection, SpecDefinition
from .spec import (
    Resolver,
    UnrecognizedOptionWarning,
    UnrecognizedVariantWarning,
    create_spec,
)
from .tokens import SpecDefinitionError

__version__ = "0.1.0"

__all__ = [
    "CompoundRule",
    "Selection",
    "SpecDefinition",
    "SpecDefinitionError",
    "Resolver",
    "UnrecognizedOptionWarning",
    "UnrecognizedVariantWarning",
    "create_spec",
]
