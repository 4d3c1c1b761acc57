"""
Constant remapping between an internal and an external naming domain.

A host often names things differently from the components it configures
("Kitchen" outside, "kitchen_1" inside). ConstantMap translates in both
directions:

    - unmapped constants pass through unchanged
    - constants mapped to the empty string are "mapped to nothing" and
      translate to None
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, Optional, Sequence


class ConstantMap:
    """Bidirectional mapping from internal constants to external ones."""

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._from_internal: dict[str, str] = {}
        self._to_internal: dict[str, str] = {}
        if mapping is not None:
            self.set_mapping(mapping)

    def __len__(self) -> int:
        return len(self._from_internal)

    def set_mapping(self, mapping: Mapping[str, str]) -> None:
        """Replace the mapping (internal → external) and rebuild its inverse."""
        self._from_internal = dict(mapping)
        self._to_internal = {
            external: internal for internal, external in self._from_internal.items()
        }

    @staticmethod
    def _lookup(table: dict[str, str], constant: str) -> Optional[str]:
        mapped = table.get(constant)
        if mapped is None:
            return constant
        if mapped == "":
            return None
        return mapped

    def map_from_internal(self, constant: str) -> Optional[str]:
        return self._lookup(self._from_internal, constant)

    def map_to_internal(self, constant: str) -> Optional[str]:
        return self._lookup(self._to_internal, constant)

    def map_atoms_to_internal(
        self,
        atoms: Iterable[Sequence[str]],
    ) -> Iterator[tuple[str, ...]]:
        """
        Translate the arguments of (predicate, arg1, arg2, ...) tuples.

        The predicate name is kept as-is. Atoms with any argument mapped to
        nothing are dropped.
        """
        for atom in atoms:
            predicate, *arguments = atom
            mapped = [self.map_to_internal(argument) for argument in arguments]
            if any(argument is None for argument in mapped):
                continue
            yield (predicate, *mapped)
