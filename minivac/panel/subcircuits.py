"""Panel building blocks: lamp, relay, changeover contact and motor (functional style)."""

from __future__ import annotations
from typing import NamedTuple

from ..dc import Network, Node, ComponentRef, R, Probe


class LampRefs(NamedTuple):
    """References to a lamp branch."""
    probe: ComponentRef
    lamp: ComponentRef


def Lamp(
    net: Network,
    node_a: Node,
    node_b: Node,
    *,
    name: str,
    resistance: float,
) -> tuple[Network, LampRefs]:
    """
    Create a lamp with a current probe on its input side.

    Topology:
        node_a ──(probe)── {name}_Probe ──[lamp]── node_b

    Args:
        net: Network to add to
        node_a: Lamp input terminal
        node_b: Lamp output terminal
        name: Node/component name stem, e.g. "Light3"
        resistance: Filament resistance in Ohms

    Returns:
        (new_network, LampRefs)
    """
    net, probe_node = net.node(f"{name}_Probe")
    net, probe = Probe(net, node_a, probe_node, name=f"{name.upper()}_PROBE")
    net, lamp = R(net, probe_node, node_b, name=name.upper(), value=resistance)
    return net, LampRefs(probe, lamp)


class RelayRefs(NamedTuple):
    """References to a relay's indicator lamp and coil."""
    lamp_probe: ComponentRef
    lamp: ComponentRef
    coil_probe: ComponentRef
    coil: ComponentRef


def RelayCoil(
    net: Network,
    lamp_input: Node,
    coil_input: Node,
    coil_output: Node,
    *,
    prefix: str,
    lamp_resistance: float,
    coil_resistance: float,
) -> tuple[Network, RelayRefs]:
    """
    Create a relay coil with its indicator lamp in series.

    Topology:
        C ──(probe)──[lamp]── E ──(probe)──[coil]── F

    The coil input E is also a panel terminal, so the lamp can be bypassed
    by wiring straight to E.

    Component names: {PREFIX}_INDICATOR_LAMP_PROBE, {PREFIX}_INDICATOR_LAMP,
    {PREFIX}_COIL_PROBE, {PREFIX}_COIL.
    """
    tag = prefix.upper()
    net, lamp_probe_node = net.node(f"{prefix}_LampProbe")
    net, coil_probe_node = net.node(f"{prefix}_CoilProbe")

    net, lamp_probe = Probe(net, lamp_input, lamp_probe_node, name=f"{tag}_INDICATOR_LAMP_PROBE")
    net, lamp = R(net, lamp_probe_node, coil_input, name=f"{tag}_INDICATOR_LAMP", value=lamp_resistance)
    net, coil_probe = Probe(net, coil_input, coil_probe_node, name=f"{tag}_COIL_PROBE")
    net, coil = R(net, coil_probe_node, coil_output, name=f"{tag}_COIL", value=coil_resistance)

    return net, RelayRefs(lamp_probe, lamp, coil_probe, coil)


def Changeover(
    net: Network,
    common: Node,
    normally_open: Node,
    normally_closed: Node,
    *,
    actuated: bool,
    name: str,
    resistance: float,
    labels: tuple[str, str] = ("NO_CLOSED", "NC_CLOSED"),
) -> tuple[Network, ComponentRef]:
    """
    Create a double-throw contact in its current position.

    Only the closed side is stamped into the network; the open side is
    simply absent. Used for relay contacts, pushbuttons and slide switches.

    Args:
        actuated: True connects common to normally_open, False to normally_closed
        name: Name stem; the matching label is appended, e.g. "RELAY2_CONTACT1_NO_CLOSED"
        resistance: Contact resistance in Ohms
        labels: Suffixes for the actuated and resting sides
    """
    if actuated:
        return R(net, common, normally_open, name=f"{name}_{labels[0]}", value=resistance)
    return R(net, common, normally_closed, name=f"{name}_{labels[1]}", value=resistance)


class MotorRefs(NamedTuple):
    """References to the motor drive circuit."""
    r1: ComponentRef
    r2: ComponentRef
    probe: ComponentRef
    winding: ComponentRef


def Motor(
    net: Network,
    d17: Node,
    d18: Node,
    d19: Node,
    *,
    divider_resistance: float,
    winding_resistance: float,
    wire_resistance: float,
) -> tuple[Network, MotorRefs]:
    """
    Create the motor drive: a centre-tapped divider with the winding across one half.

    Topology:
        D17 ──[R1]──┬──[R2]────────────── D18
                    ├──(probe)──[motor]── D18
                    └── D19

    The probe reads positive (clockwise) when current flows from the
    junction towards D18.
    """
    net, junction = net.node("Motor_Junction")
    net, probe_node = net.node("Motor_Probe")

    net, r1 = R(net, d17, junction, name="MOTOR_R1", value=divider_resistance)
    net, _ = R(net, junction, d19, name="MOTOR_JUNCTION_TO_D19", value=wire_resistance)
    net, r2 = R(net, junction, d18, name="MOTOR_R2", value=divider_resistance)
    net, probe = Probe(net, junction, probe_node, name="MOTOR_PROBE")
    net, winding = R(net, probe_node, d18, name="MOTOR", value=winding_resistance)

    return net, MotorRefs(r1, r2, probe, winding)
