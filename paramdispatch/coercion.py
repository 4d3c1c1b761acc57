"""
Value Coercion: turning parameter strings into typed setter calls.

A Binding pairs a setter with the kind of value it expects. Exactly four
kinds are supported:

    float: decimal floating point, CoercionError on malformed text
    int: base-10 signed integer, CoercionError on malformed text
    bool: "true" (any case) is True, ANY other text is False
    str: passed through unchanged

The boolean rule is deliberately lenient: "yes", "1" or "on" all parse
to False without an error. Hosts that need strict parsing should bind a
str setter and validate the text themselves.

A declared kind outside these four is accepted when the binding is made
and only fails (UnsupportedValueKindError) when the binding is applied.
"""

from __future__ import annotations

import inspect
import logging
import re
import typing
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from .errors import BindingNotFoundError, CoercionError, UnsupportedValueKindError

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

# The only text that coerces to True for a bool binding (case-insensitive)
TRUE_LITERAL = "true"

# Optional sign followed by ASCII digits, nothing else
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Decimal digits with optional fraction and exponent, or NaN/Infinity
FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|NaN|Infinity)"
)


# =============================================================================
# VALUE KINDS
# =============================================================================

class ValueKind(Enum):
    """The value kinds a binding can coerce parameter strings to."""
    FLOAT = "float"
    INT = "int"
    BOOL = "bool"
    STR = "str"


TYPE_KINDS = {
    float: ValueKind.FLOAT,
    int: ValueKind.INT,
    bool: ValueKind.BOOL,
    str: ValueKind.STR,
}


def kind_of(declared: Any) -> Any:
    """
    Normalize a declared kind.

    Accepts a ValueKind, its string value ("float", "int", ...) or one of
    the Python types float/int/bool/str. Anything else is returned as-is
    so that the failure surfaces when the binding is applied.
    """
    if isinstance(declared, ValueKind):
        return declared
    if isinstance(declared, str):
        try:
            return ValueKind(declared)
        except ValueError:
            return declared
    if isinstance(declared, type):
        return TYPE_KINDS.get(declared, declared)
    return declared


def parse_bool(value: Optional[str]) -> bool:
    """Parse a boolean the lenient way: only "true" (any case) is True."""
    return value is not None and value.lower() == TRUE_LITERAL


def coerce_value(name: str, kind: Any, value: Optional[str]) -> Any:
    """
    Coerce a parameter string to the given kind.

    Raises:
        CoercionError: If a numeric value cannot be parsed
        UnsupportedValueKindError: If kind is not a ValueKind
    """
    if kind is ValueKind.FLOAT:
        if value is None or not FLOAT_PATTERN.fullmatch(value.strip()):
            raise CoercionError(name, kind.value, value)
        return float(value)

    if kind is ValueKind.INT:
        if value is None or not INTEGER_PATTERN.fullmatch(value):
            raise CoercionError(name, kind.value, value)
        return int(value)

    if kind is ValueKind.BOOL:
        return parse_bool(value)

    if kind is ValueKind.STR:
        return value

    raise UnsupportedValueKindError(name, kind)


# =============================================================================
# BINDINGS
# =============================================================================

@dataclass(frozen=True)
class Binding:
    """
    A coercion target: a one-argument setter plus the kind it expects.

    The setter is called with the already coerced value. What it does
    with it is up to the owner.
    """
    setter: Callable[[Any], Any]
    kind: Any

    def apply(self, name: str, value: Optional[str]) -> Any:
        """Coerce value and hand it to the setter. Returns the coerced value."""
        coerced = coerce_value(name, self.kind, value)
        self.setter(coerced)
        logger.debug("Applied parameter %s=%r", name, coerced)
        return coerced

    @classmethod
    def of_float(cls, setter: Callable[[float], Any]) -> Binding:
        return cls(setter, ValueKind.FLOAT)

    @classmethod
    def of_int(cls, setter: Callable[[int], Any]) -> Binding:
        return cls(setter, ValueKind.INT)

    @classmethod
    def of_bool(cls, setter: Callable[[bool], Any]) -> Binding:
        return cls(setter, ValueKind.BOOL)

    @classmethod
    def of_str(cls, setter: Callable[[str], Any]) -> Binding:
        return cls(setter, ValueKind.STR)


# =============================================================================
# SETTER RESOLUTION
# =============================================================================

def _first_parameter(
    owner_type: str,
    target: Any,
    setter: Callable[..., Any],
) -> Optional[inspect.Parameter]:
    """
    Return the parameter a one-argument call would bind to.

    Raises:
        BindingNotFoundError: If setter cannot be called with one argument
    """
    try:
        signature = inspect.signature(setter)
    except (TypeError, ValueError):
        # Some builtins expose no signature; take them on trust
        return None

    try:
        signature.bind(None)
    except TypeError:
        raise BindingNotFoundError(
            owner_type, target, "setter must accept exactly one argument"
        )

    parameters = list(signature.parameters.values())
    return parameters[0] if parameters else None


def _declared_kind(setter: Callable[..., Any], parameter: inspect.Parameter) -> Any:
    """Read the annotation of the setter argument, resolving string annotations."""
    try:
        hints = typing.get_type_hints(setter)
    except (AttributeError, NameError, TypeError):
        hints = {}
    return hints.get(parameter.name, parameter.annotation)


def resolve_binding(owner: Any, target: Any, kind: Any = None) -> Binding:
    """
    Resolve a registration target into a Binding.

    target may be:
        - a Binding (kind, when given, overrides the binding's own)
        - a callable taking one argument
        - the name of a one-argument method on owner

    When kind is omitted it is read from the annotation of the setter's
    argument.

    Raises:
        BindingNotFoundError: If target is not a usable setter, or its kind
            cannot be determined
    """
    owner_type = type(owner).__name__

    if isinstance(target, Binding):
        if kind is None:
            return target
        return Binding(target.setter, kind_of(kind))

    if isinstance(target, str):
        setter = getattr(owner, target, None)
        if setter is None or not callable(setter):
            raise BindingNotFoundError(owner_type, target, "no such method")
    elif callable(target):
        setter = target
    else:
        raise BindingNotFoundError(owner_type, target, "target is not callable")

    parameter = _first_parameter(owner_type, target, setter)

    if kind is not None:
        return Binding(setter, kind_of(kind))

    if parameter is None or parameter.annotation is inspect.Parameter.empty:
        raise BindingNotFoundError(
            owner_type,
            target,
            "cannot determine value kind; annotate the argument or pass kind",
        )

    return Binding(setter, kind_of(_declared_kind(setter, parameter)))


def attribute_binding(owner: Any, attribute: str, kind: Any = None) -> Binding:
    """
    Build a Binding that assigns to an attribute of owner.

    When kind is omitted it is taken from the type of the attribute's
    current value.

    Raises:
        BindingNotFoundError: If kind is omitted and owner has no such
            attribute
    """
    if kind is None:
        if not hasattr(owner, attribute):
            raise BindingNotFoundError(
                type(owner).__name__, attribute, "no such attribute to infer kind from"
            )
        kind = type(getattr(owner, attribute))
    return Binding(partial(setattr, owner, attribute), kind_of(kind))
