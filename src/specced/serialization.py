"""
Serialization helpers for spec definitions.

Lets spec definitions live in JSON or YAML files next to templates, via
an intermediate dict representation that matches the keyword layout
accepted by create_spec().
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List

import yaml

from specced.model import CompoundRule, SpecDefinition
from specced.tokens import SpecDefinitionError, canonical_option


_BOOL_TAG = "tag:yaml.org,2002:bool"


class SpecLoader(yaml.SafeLoader):
    """
    SafeLoader that reads only true/false as booleans.

    PyYAML follows YAML 1.1, where on/off/yes/no are booleans too. Those
    are common option names, so here they stay strings.
    """


SpecLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
SpecLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _token_value_to_data(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


def rule_to_dict(rule: CompoundRule) -> Dict[str, Any]:
    return {"when": dict(rule.when), "value": _token_value_to_data(rule.value)}


def definition_to_dict(d: SpecDefinition) -> Dict[str, Any]:
    # Option names become strings so JSON and YAML agree on key types
    return {
        "base": _token_value_to_data(d.base),
        "variants": {
            name: {canonical_option(option): _token_value_to_data(value) for option, value in options.items()}
            for name, options in d.variants.items()
        },
        "defaults": dict(d.defaults),
        "compound": [rule_to_dict(rule) for rule in d.compound],
    }


def definition_from_dict(d: Dict[str, Any] | None) -> SpecDefinition:
    return SpecDefinition.coerce(d)


def definition_to_json(d: SpecDefinition) -> str:
    return json.dumps(definition_to_dict(d))


def definition_from_json(s: str) -> SpecDefinition:
    return definition_from_dict(json.loads(s))


def definition_to_yaml(d: SpecDefinition) -> str:
    return yaml.safe_dump(definition_to_dict(d), sort_keys=False)


def definition_from_yaml(s: str) -> SpecDefinition:
    return definition_from_dict(yaml.load(s, Loader=SpecLoader))


_LOADERS = {
    ".json": definition_from_json,
    ".yaml": definition_from_yaml,
    ".yml": definition_from_yaml,
}


def load_definition(path: str | Path) -> SpecDefinition:
    """
    Load a spec definition from a .json, .yaml or .yml file.

    Raises:
        FileNotFoundError: If file doesn't exist
        SpecDefinitionError: Unsupported suffix or malformed definition
    """
    path = Path(path)
    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        supported: List[str] = sorted(_LOADERS)
        raise SpecDefinitionError(
            f"Unsupported spec file type '{path.suffix}' (expected one of {', '.join(supported)})"
        )
    return loader(path.read_text(encoding="utf-8"))
