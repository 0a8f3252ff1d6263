"""DC component factory functions (functional style)."""

from __future__ import annotations

from .network import Network, Node, ComponentSpec, ComponentRef


def R(
    net: Network,
    node_a: Node,
    node_b: Node,
    *,
    name: str,
    value: float | None = None,
) -> tuple[Network, ComponentRef]:
    """
    Create a resistor.

    Args:
        net: Network to add to
        node_a: First terminal
        node_b: Second terminal
        name: Component name (required, used as key in params)
        value: Resistance in Ohms (optional default, can be overridden at solve time)

    Returns:
        (new_network, component_ref)

    Example:
        net, lamp = R(net, n1, n2, name="LIGHT1", value=100.0)
    """
    defaults = ((name, value),) if value is not None else ()
    spec = ComponentSpec(
        name=name,
        kind="R",
        nodes=(node_a.index, node_b.index),
        extra_vars=0,
        defaults=defaults,
    )
    return net.add_component(spec)


def VSource(
    net: Network,
    node_p: Node,
    node_n: Node,
    *,
    name: str,
    value: float | None = None,
) -> tuple[Network, ComponentRef]:
    """
    Create an ideal voltage source.

    The source adds one MNA branch variable, so its current can be read
    back from the solution.

    Args:
        net: Network to add to
        node_p: Positive terminal
        node_n: Negative terminal
        name: Component name (required, used as key in params)
        value: Voltage in Volts (optional default, can be overridden at solve time)

    Returns:
        (new_network, component_ref)

    Example:
        net, vs = VSource(net, vcc, net.gnd, name="V_POWER", value=12.0)
    """
    defaults = ((name, value),) if value is not None else ()
    spec = ComponentSpec(
        name=name,
        kind="VSource",
        nodes=(node_p.index, node_n.index),
        extra_vars=1,  # source current
        defaults=defaults,
    )
    return net.add_component(spec)


def Probe(
    net: Network,
    node_a: Node,
    node_b: Node,
    *,
    name: str,
) -> tuple[Network, ComponentRef]:
    """
    Create a current probe (zero-volt source, i.e. an ideal ammeter).

    Insert it in series with the branch to be measured. The reading is
    positive when current flows from node_a to node_b.
    """
    return VSource(net, node_a, node_b, name=name, value=0.0)
