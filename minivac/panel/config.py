"""Electrical and mechanical constants of the trainer panel."""

from __future__ import annotations
from typing import NamedTuple

NUM_SECTIONS = 6  # relays, lights, buttons and slides are numbered 1..6
GROUND = "Power_Negative"
SUPPLY = "Power_Positive"


class PanelConfig(NamedTuple):
    """
    Component values and thresholds used to build and read the network.

    Defaults mirror the physical kit. Override individual fields with
    ``DEFAULT_CONFIG._replace(...)``.
    """
    supply_voltage: float = 12.0  # Volts
    lamp_resistance: float = 100.0  # Ohms
    lamp_on_current: float = 0.010  # Amps
    relay_coil_resistance: float = 400.0  # Ohms
    relay_pickup_current: float = 0.020  # Amps, with indicator lamp in series
    wire_resistance: float = 0.1  # Ohms
    motor_resistance: float = 200.0  # Ohms, drive winding
    motor_divider_resistance: float = 100.0  # Ohms, each half of D17/D18 divider
    motor_run_current: float = 0.010  # Amps
    motor_step_ms: float = 187.5  # milliseconds per selector position
    short_circuit_current: float = 1.0  # Amps drawn from the supply
    max_iterations: int = 10  # relay resolution cap


DEFAULT_CONFIG = PanelConfig()
