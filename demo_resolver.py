#!/usr/bin/env python3
"""
Demo: Analyze the example button spec, resolve a few selections and
export the definition to YAML.
"""

from specced import create_spec
from specced.analyzer import analyze_spec
from specced.examples import build_example_button_spec
from specced.serialization import definition_to_yaml


SELECTIONS = [
    {},
    {"intent": "danger"},
    {"intent": "primary", "size": "lg"},
    {"intent": "secondary", "disabled": True},
    {"size": "xl"},  # unrecognized option, warns outside production
]


def print_report(report):
    """Pretty-print a SpecReport."""
    print()
    print("=" * 70)
    print("SPEC ANALYSIS REPORT")
    print("=" * 70)
    print(f"  Variants:        {report.total_variants}")
    print(f"  Options:         {report.total_options}")
    print(f"  Compound Rules:  {report.total_compound_rules}")
    print(f"  Base Tokens:     {report.base_token_count}")
    print()

    if report.warnings:
        print("WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("NO WARNINGS - Spec looks clean!")
    print()


def main():
    spec = build_example_button_spec()

    print_report(analyze_spec(spec))

    button = create_spec(spec)
    print("=" * 70)
    print("RESOLVED CLASSES")
    print("=" * 70)
    for selection in SELECTIONS:
        print(f"  {selection}")
        print(f"    -> {button(selection)}")
    print()

    with open("example_button_spec.yaml", "w") as f:
        f.write(definition_to_yaml(spec))
    print("Spec exported to example_button_spec.yaml")


if __name__ == "__main__":
    main()
