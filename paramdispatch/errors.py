"""
Error taxonomy for the parameter dispatcher.

Every error carries its diagnostic fields as attributes so that a host
system can report them without parsing the message text.

    BindingNotFoundError: register() could not resolve a setter
    UnsupportedValueKindError: a binding declares a kind we cannot coerce
    CoercionError: value text does not parse as the bound kind
    UnresolvedParametersError: strict submission left names unmatched
    SourceFormatError: malformed flag or properties input
"""

from __future__ import annotations

from typing import Any, Iterable, Optional


class ParameterError(Exception):
    """Base class for all errors raised by paramdispatch."""
    pass


class BindingNotFoundError(ParameterError):
    """Raised when a registration target is not a usable one-argument setter."""

    def __init__(self, owner_type: str, target: Any, reason: str):
        self.owner_type = owner_type
        self.target = target
        self.reason = reason
        super().__init__(
            f"Could not find an appropriate setter {target!r} with 1 parameter "
            f"in class {owner_type}: {reason}"
        )


class UnsupportedValueKindError(ParameterError):
    """Raised when a binding whose declared kind is not supported is applied."""

    def __init__(self, name: str, kind: Any):
        self.name = name
        self.kind = kind
        super().__init__(
            f"Don't know how to handle setter argument of kind {kind!r} for "
            f"parameter '{name}'; allowed kinds are: float, int, bool, str"
        )


class CoercionError(ParameterError):
    """Raised when a value string cannot be parsed as the bound kind."""

    def __init__(self, name: str, kind: Any, value: Optional[str]):
        self.name = name
        self.kind = kind
        self.value = value
        super().__init__(
            f"Cannot parse value {value!r} of parameter '{name}' as {kind}"
        )


class UnresolvedParametersError(ParameterError):
    """
    Raised by a strict submission that left names unmatched.

    Carries the offending names and every name the subtree can handle,
    so the caller can point out typos.
    """

    def __init__(self, names: Iterable[str], handled_names: Iterable[str]):
        self.names = sorted(names)
        self.handled_names = list(handled_names)
        super().__init__(
            f"Parameters {', '.join(self.names)} unhandled! "
            f"Known parameters: {self.handled_names}"
        )


class SourceFormatError(ParameterError):
    """Raised when flag or properties input cannot be parsed."""

    def __init__(self, source: str, line_number: Optional[int], text: str):
        self.source = source
        self.line_number = line_number
        self.text = text
        location = f"{source}:{line_number}" if line_number is not None else source
        super().__init__(f"Malformed parameter assignment at {location}: {text!r}")
