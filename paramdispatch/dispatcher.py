"""
Parameter Dispatcher: routes named string parameters through a tree of owners.

Each owner gets one ParameterDispatcher. A dispatcher holds bindings for
the parameters its owner understands and may have child dispatchers
attached at any time. A submission is offered to every node of the
subtree; a name may be consumed by several bindings at once.

Bookkeeping rules:
    - A name no binding in the subtree applied is recorded as unresolved
    - A name applied anywhere below a node is cleared from that node and,
      through parent links, from every ancestor
    - The last submission is kept so that children attached later receive
      it (replay), which may clear names that were unresolved so far

Nodes live in a DispatcherArena and refer to each other by index.
ParameterDispatcher is a handle onto one node of an arena.

The graph is expected to be acyclic. This is not checked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from .coercion import Binding, attribute_binding, resolve_binding
from .errors import UnresolvedParametersError

logger = logging.getLogger(__name__)


# =============================================================================
# ARENA
# =============================================================================

@dataclass
class DispatcherNode:
    """State of one dispatcher. Links are indices into the owning arena."""
    owner: Any
    bindings: dict[str, Binding] = field(default_factory=dict)
    children: list[int] = field(default_factory=list)
    parents: list[int] = field(default_factory=list)
    snapshot: Optional[dict[str, str]] = None
    unresolved: set[str] = field(default_factory=set)


class DispatcherArena:
    """
    Storage for dispatcher nodes of one connected graph.

    Node indices are stable for the lifetime of the arena. When a child
    from another arena is attached, that arena is absorbed: its nodes are
    appended here, their indices shifted, and its handles repointed. The
    absorbed arena is left empty.
    """

    def __init__(self):
        self._nodes: list[DispatcherNode] = []
        self._handles: list[ParameterDispatcher] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> DispatcherNode:
        return self._nodes[index]

    def handle(self, index: int) -> ParameterDispatcher:
        return self._handles[index]

    def add(self, owner: Any, handle: ParameterDispatcher) -> int:
        """Create a node for owner and return its index."""
        self._nodes.append(DispatcherNode(owner=owner))
        self._handles.append(handle)
        return len(self._nodes) - 1

    def absorb(self, other: DispatcherArena) -> None:
        """Move every node of other into this arena."""
        if other is self:
            return

        offset = len(self._nodes)
        for node in other._nodes:
            node.children = [index + offset for index in node.children]
            node.parents = [index + offset for index in node.parents]
            self._nodes.append(node)
        for handle in other._handles:
            handle._arena = self
            handle._index += offset
            self._handles.append(handle)

        logger.debug("Absorbed %d dispatcher nodes at offset %d", len(other._nodes), offset)
        other._nodes = []
        other._handles = []

    # -------------------------------------------------------------------------
    # Traversals
    # -------------------------------------------------------------------------

    def dispatch(self, index: int, name: str, value: Optional[str]) -> bool:
        """
        Offer one parameter to a node and its whole subtree.

        Every child is visited even when the node's own binding matched.
        Returns True if any binding in the subtree applied the value.
        """
        node = self._nodes[index]
        handled = False

        binding = node.bindings.get(name)
        if binding is not None:
            binding.apply(name, value)
            handled = True

        # Children attached by a setter during this call were already replayed
        for child in list(node.children):
            if self.dispatch(child, name, value):
                handled = True

        if handled:
            self.mark_handled(index, name)
        else:
            node.unresolved.add(name)
            logger.debug("Parameter %s unresolved at %r", name, node.owner)
        return handled

    def mark_handled(self, index: int, name: str) -> None:
        """Clear name from a node's unresolved set and from all its ancestors."""
        node = self._nodes[index]
        node.unresolved.discard(name)
        for parent in node.parents:
            self.mark_handled(parent, name)

    def collect_names(self, index: int, names: list[str]) -> None:
        """Append handled names of a node, then of each child, depth-first."""
        node = self._nodes[index]
        names.extend(node.bindings)
        for child in node.children:
            self.collect_names(child, names)


# =============================================================================
# DISPATCHER HANDLE
# =============================================================================

def as_dispatcher(target: Any) -> ParameterDispatcher:
    """Accept a dispatcher or an owner exposing `parameter_dispatcher`."""
    if isinstance(target, ParameterDispatcher):
        return target
    dispatcher = getattr(target, "parameter_dispatcher", None)
    if isinstance(dispatcher, ParameterDispatcher):
        return dispatcher
    raise TypeError(
        f"Expected a ParameterDispatcher or an object with a parameter_dispatcher, "
        f"got {type(target).__name__}"
    )


class ParameterDispatcher:
    """
    Distributes named string parameters to typed setters of one owner
    and of any dispatchers attached below it.

    Example:
        root = ParameterDispatcher(sampler)
        root.register("maxSteps", sampler.set_max_steps)
        root.attach_child(proposal.parameter_dispatcher)
        root.submit({"maxSteps": "500", "stepSize": "0.1"}, strict=True)
    """

    def __init__(self, owner: Any, arena: Optional[DispatcherArena] = None):
        self._arena = arena if arena is not None else DispatcherArena()
        self._index = self._arena.add(owner, self)

    def __repr__(self) -> str:
        return f"ParameterDispatcher(owner={type(self.owner).__name__}, index={self._index})"

    @property
    def _node(self) -> DispatcherNode:
        return self._arena.node(self._index)

    @property
    def arena(self) -> DispatcherArena:
        return self._arena

    @property
    def index(self) -> int:
        return self._index

    @property
    def owner(self) -> Any:
        return self._node.owner

    @property
    def children(self) -> list[ParameterDispatcher]:
        return [self._arena.handle(index) for index in self._node.children]

    @property
    def parents(self) -> list[ParameterDispatcher]:
        return [self._arena.handle(index) for index in self._node.parents]

    @property
    def snapshot(self) -> Optional[dict[str, str]]:
        """The most recent submission, or None if nothing was submitted yet."""
        snapshot = self._node.snapshot
        return dict(snapshot) if snapshot is not None else None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, name: str, target: Any, kind: Any = None) -> None:
        """
        Bind a parameter name to a setter on this node only.

        An existing binding for the same name is replaced.

        Raises:
            ValueError: If name is empty
            BindingNotFoundError: If target is not a usable one-argument setter
        """
        if not name:
            raise ValueError("Parameter name must be non-empty")
        self._node.bindings[name] = resolve_binding(self.owner, target, kind)

    def register_attribute(
        self,
        name: str,
        attribute: Optional[str] = None,
        kind: Any = None,
    ) -> None:
        """Bind a parameter name to an attribute of the owner (defaults to name)."""
        if not name:
            raise ValueError("Parameter name must be non-empty")
        self._node.bindings[name] = attribute_binding(self.owner, attribute or name, kind)

    def attach_child(self, child: Any) -> None:
        """
        Attach a child dispatcher below this one.

        If parameters were submitted here before, they are replayed against
        the child. Names the child can handle are then cleared from this
        node's and its ancestors' unresolved sets. Replay never raises for
        names that stay unresolved.
        """
        child = as_dispatcher(child)
        if child._arena is not self._arena:
            self._arena.absorb(child._arena)

        self._node.children.append(child._index)
        child._node.parents.append(self._index)

        snapshot = self._node.snapshot
        if snapshot is not None:
            logger.debug("Replaying %d parameters against %r", len(snapshot), child)
            child.submit(snapshot, strict=False)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(
        self,
        values: Mapping[str, str],
        names: Optional[Iterable[str]] = None,
        strict: bool = False,
    ) -> None:
        """
        Distribute parameters to this node and its subtree.

        Args:
            values: Mapping from parameter name to string value; kept as the
                snapshot replayed to children attached later
            names: Names to process now (default: all names in values). A
                single name may be given as a plain string. Names absent
                from values are dispatched with no value
            strict: Raise if any name is left unresolved at this node

        Raises:
            CoercionError: If a value cannot be parsed for its binding.
                Parameters applied before the failure stay applied.
            UnsupportedValueKindError: If a binding declares an unsupported kind
            UnresolvedParametersError: If strict and names remain unresolved
        """
        values = dict(values)
        if names is None:
            names = list(values)
        elif isinstance(names, str):
            names = [names]
        else:
            names = list(names)

        node = self._node
        node.snapshot = values

        for name in names:
            self._arena.dispatch(self._index, name, values.get(name))

        if strict and node.unresolved:
            handled_names = self.list_handled_names()
            logger.warning(
                "Unresolved parameters at %r: %s",
                self,
                ", ".join(sorted(node.unresolved)),
            )
            raise UnresolvedParametersError(node.unresolved, handled_names)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_handled_names(self) -> list[str]:
        """
        Names this node and its subtree can bind, in traversal order.

        Own bindings come first, then each child's names depth-first.
        Names bound at several nodes appear several times.
        """
        names: list[str] = []
        self._arena.collect_names(self._index, names)
        return names

    def query_unresolved(self) -> frozenset[str]:
        """This node's own unresolved names (descendants are not included)."""
        return frozenset(self._node.unresolved)
