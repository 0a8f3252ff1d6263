"""
Circuit topology builder.

Assembles the complete resistive network of the panel for one solve:
supply, lamps, relays, buttons, slides, motor, selector arm, then the
user wires. The fixed wiring is always present; which side of every
double-throw contact is closed follows the discrete component state, so
the network has to be rebuilt whenever that state changes.
"""

from __future__ import annotations
from typing import NamedTuple, Sequence

from ..dc import Network, ComponentRef, R, VSource
from .config import GROUND, SUPPLY, NUM_SECTIONS, PanelConfig, DEFAULT_CONFIG
from .subcircuits import Lamp, RelayCoil, Changeover, Motor

SUPPLY_SOURCE = "V_POWER"
SELECTOR_ARM = "Motor_D16"


class PanelState(NamedTuple):
    """Discrete state that decides the network topology."""
    relays: tuple[bool, ...] = (False,) * NUM_SECTIONS
    buttons: tuple[bool, ...] = (False,) * NUM_SECTIONS  # True while held
    slides: tuple[bool, ...] = (False,) * NUM_SECTIONS  # True = right
    motor_position: int = 0  # contact D0..D15 under the selector arm
    motor_contact: bool = True  # False inside a break-before-make gap


class PanelNetwork(NamedTuple):
    """A built network plus the probes needed to read it back."""
    network: Network
    power: ComponentRef
    light_probes: tuple[ComponentRef, ...]
    lamp_probes: tuple[ComponentRef, ...]  # relay indicator lamps
    coil_probes: tuple[ComponentRef, ...]
    motor_probe: ComponentRef


def build_panel_network(
    wires: Sequence[tuple[str, str]],
    state: PanelState,
    config: PanelConfig = DEFAULT_CONFIG,
) -> PanelNetwork:
    """
    Build the panel network for the given component state.

    Identical inputs always produce an identical network, component order
    included.

    Args:
        wires: User wires as internal node-name pairs
        state: Relay, button, slide and selector state
        config: Component values

    Returns:
        PanelNetwork
    """
    net = Network.with_ground(GROUND)
    wire_r = config.wire_resistance

    net, vcc = net.node(SUPPLY)
    net, power = VSource(net, vcc, net.gnd, name=SUPPLY_SOURCE, value=config.supply_voltage)

    light_probes = []
    for i in range(1, NUM_SECTIONS + 1):
        net, a = net.node(f"Light{i}_A")
        net, b = net.node(f"Light{i}_B")
        net, lamp = Lamp(net, a, b, name=f"Light{i}", resistance=config.lamp_resistance)
        light_probes.append(lamp.probe)

    lamp_probes, coil_probes = [], []
    for i in range(1, NUM_SECTIONS + 1):
        prefix = f"Relay{i}"
        net, lamp_in = net.node(f"{prefix}_IndicatorLamp_Input")
        net, coil_in = net.node(f"{prefix}_Coil_Input")
        net, coil_out = net.node(f"{prefix}_Coil_Output")
        net, relay = RelayCoil(
            net, lamp_in, coil_in, coil_out,
            prefix=prefix,
            lamp_resistance=config.lamp_resistance,
            coil_resistance=config.relay_coil_resistance,
        )
        lamp_probes.append(relay.lamp_probe)
        coil_probes.append(relay.coil_probe)

        for contact in (1, 2):
            net, common = net.node(f"{prefix}_Contact{contact}_Common")
            net, no = net.node(f"{prefix}_Contact{contact}_NO")
            net, nc = net.node(f"{prefix}_Contact{contact}_NC")
            net, _ = Changeover(
                net, common, no, nc,
                actuated=state.relays[i - 1],
                name=f"RELAY{i}_CONTACT{contact}",
                resistance=wire_r,
            )

    for i in range(1, NUM_SECTIONS + 1):
        net, common = net.node(f"Button{i}_Common")
        net, no = net.node(f"Button{i}_NormallyOpen")
        net, nc = net.node(f"Button{i}_NormallyClosed")
        net, _ = Changeover(
            net, common, no, nc,
            actuated=state.buttons[i - 1],
            name=f"BUTTON{i}",
            resistance=wire_r,
        )

    # Both sets of a slide move together
    for i in range(1, NUM_SECTIONS + 1):
        for pole in (1, 2):
            net, common = net.node(f"Slide{i}_Common{pole}")
            net, left = net.node(f"Slide{i}_Left{pole}")
            net, right = net.node(f"Slide{i}_Right{pole}")
            net, _ = Changeover(
                net, common, right, left,
                actuated=state.slides[i - 1],
                name=f"SLIDE{i}_SET{pole}",
                resistance=wire_r,
                labels=("RIGHT", "LEFT"),
            )

    net, d17 = net.node("Motor_D17")
    net, d18 = net.node("Motor_D18")
    net, d19 = net.node("Motor_D19")
    net, motor = Motor(
        net, d17, d18, d19,
        divider_resistance=config.motor_divider_resistance,
        winding_resistance=config.motor_resistance,
        wire_resistance=wire_r,
    )

    # Break-before-make: the arm touches nothing inside a gap
    if state.motor_contact:
        net, arm = net.node(SELECTOR_ARM)
        net, target = net.node(f"Motor_D{state.motor_position}")
        net, _ = R(net, arm, target, name="MOTOR_SELECTOR_ARM", value=wire_r)

    for k, (first, second) in enumerate(wires, start=1):
        net, a = net.node(first)
        net, b = net.node(second)
        net, _ = R(net, a, b, name=f"USER_WIRE_{k}", value=wire_r)

    return PanelNetwork(
        network=net,
        power=power,
        light_probes=tuple(light_probes),
        lamp_probes=tuple(lamp_probes),
        coil_probes=tuple(coil_probes),
        motor_probe=motor.probe,
    )
