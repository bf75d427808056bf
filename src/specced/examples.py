"""
Example spec for documentation, the demo script and tests.

Builds a Tailwind-style button with intent, size and disabled variants,
defaults, and compound rules for a couple of combinations.
"""
from specced.model import CompoundRule, SpecDefinition


def build_example_button_spec() -> SpecDefinition:
    return SpecDefinition(
        base="inline-flex items-center rounded font-medium",
        variants={
            "intent": {
                "primary": "bg-blue-600 text-white",
                "secondary": ["bg-white text-gray-900", "border border-gray-300"],
                "danger": "bg-red-600 text-white",
            },
            "size": {
                "sm": "text-sm px-2 py-1",
                "md": "text-base px-4 py-2",
                "lg": "text-lg px-6 py-3",
            },
            # Boolean-like options: select with disabled=True / False
            "disabled": {
                "true": "opacity-50 cursor-not-allowed",
                "false": "",
            },
        },
        defaults={"intent": "primary", "size": "md", "disabled": False},
        compound=[
            CompoundRule(when={"intent": "primary", "disabled": False}, value="hover:bg-blue-700"),
            CompoundRule(when={"intent": "danger", "disabled": False}, value="hover:bg-red-700"),
            CompoundRule(when={"intent": "primary", "size": "lg"}, value="shadow-lg uppercase"),
        ],
    )
