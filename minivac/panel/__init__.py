"""Minivac Panel Module.

This module models the trainer panel on top of the DC solver:
six relays, six lights, six pushbuttons, six slide switches, the
selector motor and the patch matrix, wired by user notation.

Pieces:
    - notation: terminal and wire parsing, circuit loading
    - topology: network builder for one discrete panel state
    - resolution: fixed-point relay iteration
    - motor: selector kinematics and break-before-make
    - simulator: MinivacSimulator facade and state snapshots
"""

from .config import PanelConfig, DEFAULT_CONFIG, NUM_SECTIONS, GROUND, SUPPLY
from .notation import (
    parse_terminal,
    parse_wire,
    parse_notation,
    parse_terminal_pairs,
    split_circuit,
    load_circuit,
)
from .subcircuits import Lamp, LampRefs, RelayCoil, RelayRefs, Changeover, Motor, MotorRefs
from .topology import PanelState, PanelNetwork, build_panel_network, SUPPLY_SOURCE
from .resolution import Resolution, resolve_relays, effective_relays, SHORT_CIRCUIT_ALERT
from .motor import MotorState, position_for_angle, contact_made
from .simulator import MinivacSimulator, StateSnapshot, MotorSnapshot

__all__ = [
    # Configuration
    "PanelConfig",
    "DEFAULT_CONFIG",
    "NUM_SECTIONS",
    "GROUND",
    "SUPPLY",
    # Notation
    "parse_terminal",
    "parse_wire",
    "parse_notation",
    "parse_terminal_pairs",
    "split_circuit",
    "load_circuit",
    # Subcircuits
    "Lamp",
    "LampRefs",
    "RelayCoil",
    "RelayRefs",
    "Changeover",
    "Motor",
    "MotorRefs",
    # Topology and resolution
    "PanelState",
    "PanelNetwork",
    "build_panel_network",
    "SUPPLY_SOURCE",
    "Resolution",
    "resolve_relays",
    "effective_relays",
    "SHORT_CIRCUIT_ALERT",
    # Motor
    "MotorState",
    "position_for_angle",
    "contact_made",
    # Facade
    "MinivacSimulator",
    "StateSnapshot",
    "MotorSnapshot",
]
