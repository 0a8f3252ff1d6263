"""Resistive DC network topology (immutable/functional style).

A panel build looks up the same node names many times (every wire end,
every contact side), so the network keeps a name -> index table next to
the ordered node tuple.
"""

from __future__ import annotations
from typing import Mapping, NamedTuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .solver import Solver

DEFAULT_GROUND = "gnd"


class Node(NamedTuple):
    """An electrical node; index 0 is the reference."""
    name: str
    index: int  # row/column in the MNA matrix, offset by one


class ComponentRef(NamedTuple):
    """Handle used to read a source or probe current back from a solution."""
    name: str
    kind: str  # "R" or "VSource"


class ComponentSpec(NamedTuple):
    """One stamped element: its terminals, MNA footprint and default value."""
    name: str
    kind: str
    nodes: tuple[int, ...]  # node indices
    extra_vars: int  # 1 for a source (branch current), 0 for a resistor
    defaults: tuple[tuple[str, float], ...] = ()  # ((param_name, default_value), ...)


class Network(NamedTuple):
    """
    Immutable resistive network.

    Build using functional style:
        net = Network.with_ground("Power_Negative")
        net, vcc = net.node("Power_Positive")
        net, r1 = R(net, vcc, net.gnd, name="R1", value=100.0)

    Wiring that names the reference node lands on index 0, so a panel can
    call its negative rail by its own name.
    """
    nodes: tuple[Node, ...] = (Node(DEFAULT_GROUND, 0),)
    components: tuple[ComponentSpec, ...] = ()
    lookup: Mapping[str, int] = {DEFAULT_GROUND: 0}  # never mutated, copied on growth

    @classmethod
    def with_ground(cls, name: str) -> Network:
        """Create an empty network whose reference node is called ``name``."""
        return cls(nodes=(Node(name, 0),), lookup={name: 0})

    @property
    def gnd(self) -> Node:
        return self.nodes[0]

    @property
    def num_nodes(self) -> int:
        """Number of unknown node voltages (reference excluded)."""
        return len(self.nodes) - 1

    def find(self, name: str) -> Node | None:
        """Look up an existing node by name."""
        i = self.lookup.get(name)
        return None if i is None else self.nodes[i]

    def node(self, name: str) -> tuple[Network, Node]:
        """
        Return the node called ``name``, adding it if it does not exist yet.

        Returns (network, node); the network is unchanged for a known name.
        """
        existing = self.find(name)
        if existing is not None:
            return self, existing

        new_node = Node(name, len(self.nodes))
        return self._replace(
            nodes=self.nodes + (new_node,),
            lookup={**self.lookup, name: new_node.index},
        ), new_node

    def add_component(self, spec: ComponentSpec) -> tuple[Network, ComponentRef]:
        """Append a stamped element. Returns (new_network, component_ref)."""
        return (
            self._replace(components=self.components + (spec,)),
            ComponentRef(spec.name, spec.kind),
        )

    def compile(self) -> Solver:
        """
        Create a DC solver for this network.

        Raises:
            SolverFailure: if the topology cannot be solved
        """
        from .solver import compile_network
        return compile_network(self)
