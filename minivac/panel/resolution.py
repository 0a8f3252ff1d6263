"""
Fixed-point relay resolution.

Relay contacts shape the network that decides the relay coil currents, so
the relay vector is iterated: build, solve, read the coils, and repeat with
the new vector until it reproduces itself or the iteration cap is reached.
"""

from __future__ import annotations

import logging
from typing import NamedTuple, Mapping, Sequence

from .config import NUM_SECTIONS, PanelConfig, DEFAULT_CONFIG
from .topology import PanelState, build_panel_network

logger = logging.getLogger(__name__)

SHORT_CIRCUIT_ALERT = "SHORT CIRCUIT DETECTED!"


class Resolution(NamedTuple):
    """Outcome of one resolution cycle."""
    relays: tuple[bool, ...]  # simulated, overrides not applied
    lights: tuple[bool, ...]
    indicator_lights: tuple[bool, ...]
    motor_current: float  # signed, Amps; positive turns clockwise
    supply_current: float  # magnitude, Amps
    alerts: tuple[str, ...]
    iterations: int
    converged: bool


def effective_relays(
    relays: Sequence[bool],
    overrides: Mapping[int, bool] | None = None,
) -> tuple[bool, ...]:
    """
    Apply manual overrides to a relay vector.

    Args:
        relays: Simulated relay states, relay 1 first
        overrides: {relay_number: forced_state}, numbers 1..6
    """
    if not overrides:
        return tuple(relays)
    return tuple(overrides.get(n, state) for n, state in enumerate(relays, start=1))


def _on_off(state: bool) -> str:
    return "ON" if state else "OFF"


def resolve_relays(
    wires: Sequence[tuple[str, str]],
    state: PanelState,
    overrides: Mapping[int, bool] | None = None,
    config: PanelConfig = DEFAULT_CONFIG,
) -> Resolution:
    """
    Iterate the relay vector to a fixed point.

    The network of every iteration is built from the effective relays
    (overrides applied); the coil readings update the simulated relays,
    including overridden ones.

    Args:
        wires: User wires as internal node-name pairs
        state: Discrete panel state; ``state.relays`` seeds the iteration
        overrides: {relay_number: forced_state}
        config: Component values and thresholds

    Returns:
        Resolution. Lamps, motor current and supply current come from the
        last network solved.

    Raises:
        SolverFailure: if a network cannot be compiled or solved
    """
    if config.max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {config.max_iterations}")

    relays = tuple(state.relays)
    alerts: list[str] = []

    iteration = 0
    converged = False
    while iteration < config.max_iterations:
        iteration += 1
        panel = build_panel_network(
            wires, state._replace(relays=effective_relays(relays, overrides)), config
        )
        results = panel.network.compile().dc()

        supply = abs(results[f"I({panel.power.name})"])
        if supply > config.short_circuit_current:
            if SHORT_CIRCUIT_ALERT not in alerts:
                alerts.append(SHORT_CIRCUIT_ALERT)
            logger.warning("%s Power supply current: %.2fA", SHORT_CIRCUIT_ALERT, supply)

        coil = [abs(results[f"I({probe.name})"]) for probe in panel.coil_probes]
        updated = tuple(amps >= config.relay_pickup_current for amps in coil)

        for n in range(NUM_SECTIONS):
            if updated[n] != relays[n]:
                logger.debug(
                    "Relay %d: %s -> %s (%.3f mA)",
                    n + 1, _on_off(relays[n]), _on_off(updated[n]), coil[n] * 1000.0,
                )

        changed = updated != relays
        relays = updated
        if not changed:
            converged = True
            break

    if not converged:
        logger.warning("Relay states did not stabilise after %d iterations", iteration)

    lights = tuple(
        abs(results[f"I({probe.name})"]) >= config.lamp_on_current for probe in panel.light_probes
    )
    indicator_lights = tuple(
        abs(results[f"I({probe.name})"]) >= config.lamp_on_current for probe in panel.lamp_probes
    )
    motor_current = results[f"I({panel.motor_probe.name})"]

    return Resolution(
        relays=relays,
        lights=lights,
        indicator_lights=indicator_lights,
        motor_current=motor_current,
        supply_current=supply,
        alerts=tuple(alerts),
        iterations=iteration,
        converged=converged,
    )
