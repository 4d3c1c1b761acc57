"""
Configurable owners.

A Configurable is an object whose settings arrive as named strings. It
keeps a raw parameter store (name → string) and a ParameterDispatcher
bound to itself. Components added to it get their dispatchers attached
as children, so one configure() call reaches the whole tree.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .coercion import ValueKind, coerce_value
from .dispatcher import ParameterDispatcher, as_dispatcher


class Configurable:
    """Base class for owners configured through a ParameterDispatcher."""

    def __init__(self, name: Optional[str] = None):
        self.name = name or type(self).__name__
        self._parameters: dict[str, str] = {}
        self.parameter_dispatcher = ParameterDispatcher(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    # -------------------------------------------------------------------------
    # Raw parameter store
    # -------------------------------------------------------------------------

    @property
    def parameters(self) -> dict[str, str]:
        return dict(self._parameters)

    def set_parameter(self, key: str, value: str) -> None:
        self._parameters[key] = value

    def set_parameters(self, parameters: Mapping[str, str]) -> None:
        """Replace the whole store."""
        self._parameters = dict(parameters)

    def get_parameter(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._parameters.get(key, default)

    def get_int_parameter(self, key: str, default: int) -> int:
        """
        Read a stored parameter as an integer.

        Raises:
            CoercionError: If the stored text is not an integer
        """
        value = self._parameters.get(key)
        if value is None:
            return default
        return coerce_value(key, ValueKind.INT, value)

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def add_component(self, component: Any) -> None:
        """Attach a component's dispatcher below this one (replays past submissions)."""
        self.parameter_dispatcher.attach_child(as_dispatcher(component))

    def configure(
        self,
        values: Optional[Mapping[str, str]] = None,
        strict: bool = False,
    ) -> frozenset[str]:
        """
        Submit the stored parameters, overridden by values, to the tree.

        Returns:
            The names still unresolved at this owner
        """
        merged = {**self._parameters, **(values or {})}
        self.parameter_dispatcher.submit(merged, strict=strict)
        return self.parameter_dispatcher.query_unresolved()
