"""
Token normalization for specced.

Every token value in a spec definition (base, variant options, compound
values) goes through `to_tokens` exactly once, when a resolver is built.

A token value is either:
    - a string, possibly holding several whitespace-separated tokens
    - a list or tuple of such strings
    - None (no tokens)

The result is a tuple of unique tokens, ordered by first occurrence.
Order matters: it decides the order of the resolved output string.
"""

from typing import Any, Iterable, Sequence, Tuple, Union


TokenValue = Union[str, Sequence[str], None]


class SpecDefinitionError(TypeError):
    """Raised when a spec definition contains a value of the wrong shape."""
    pass


def canonical_option(value: Any) -> str:
    """
    Convert an option name or selection value to its canonical string.

    Booleans map to "true"/"false" so that `disabled=True` selects an
    option declared as "true". Everything else goes through str().
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def _fragments(value: TokenValue) -> Iterable[str]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        for member in value:
            if not isinstance(member, str):
                raise SpecDefinitionError(
                    f"Token value members must be strings, got {type(member).__name__}: {member!r}"
                )
        return value
    raise SpecDefinitionError(
        f"Token value must be a string or a list of strings, got {type(value).__name__}: {value!r}"
    )


def to_tokens(value: TokenValue) -> Tuple[str, ...]:
    """
    Normalize a token value into an ordered, duplicate-free tuple.

    Examples:
        to_tokens("btn  btn-primary btn")   -> ("btn", "btn-primary")
        to_tokens(["px-2 py-1", "", "px-2"]) -> ("px-2", "py-1")
        to_tokens(None)                     -> ()

    Raises:
        SpecDefinitionError: value is neither None, a string, nor a
            list/tuple of strings
    """
    seen = {}
    for fragment in _fragments(value):
        for token in fragment.split():
            seen.setdefault(token, None)
    return tuple(seen)


def join_tokens(tokens: Iterable[str]) -> str:
    """Serialize tokens with a single space separator."""
    return " ".join(tokens)


__all__ = [
    "TokenValue",
    "SpecDefinitionError",
    "canonical_option",
    "to_tokens",
    "join_tokens",
]
