"""
Test: Fixed-point relay resolution.
"""
import logging

import pytest

from minivac.panel import (
    PanelState,
    resolve_relays,
    effective_relays,
    load_circuit,
    DEFAULT_CONFIG,
    SHORT_CIRCUIT_ALERT,
)
from minivac.exceptions import SolverFailure

OFF = (False,) * 6


def test_empty_panel_is_dark():
    result = resolve_relays([], PanelState())

    assert result.relays == OFF
    assert result.lights == OFF
    assert result.indicator_lights == OFF
    assert result.alerts == ()
    assert result.converged
    assert result.iterations == 1
    assert abs(result.motor_current) < 1e-6
    assert result.supply_current < 1e-6


def test_light_on():
    result = resolve_relays(load_circuit("6+/6A 6B/6-"), PanelState())
    assert result.lights == (False, False, False, False, False, True)
    assert result.supply_current == pytest.approx(12.0 / 100.2, rel=1e-6)


def test_relay_picks_up_and_settles():
    """Relay 1 powered through C..F: one pass to pick up, one to confirm."""
    result = resolve_relays(load_circuit("+/1C -/1F"), PanelState())

    assert result.relays == (True, False, False, False, False, False)
    assert result.indicator_lights[0]
    assert result.iterations == 2
    assert result.converged


def test_coil_without_indicator_lamp_picks_up():
    """Feeding E directly bypasses the lamp: 30mA through the coil alone."""
    result = resolve_relays(load_circuit("+/2E -/2F"), PanelState())
    assert result.relays[1]
    assert not result.indicator_lights[1]


def test_below_pickup_current_stays_off():
    """Two coils with lamps in series draw 12mA, short of the 20mA pickup."""
    result = resolve_relays(load_circuit("+/1C 1F/2C 2F/-"), PanelState())
    assert result.relays == OFF
    assert result.indicator_lights[:2] == (True, True)


def test_relay_drives_light_through_contact():
    wires = load_circuit("+/1C -/1F +/1H 1G/3A 3B/-")
    result = resolve_relays(wires, PanelState())

    assert result.relays[0]
    assert result.lights[2]


def test_self_latching_relay_holds():
    """Relay 1 holds itself in through its own NO contact once energised."""
    wires = load_circuit("+/1H 1G/1C -/1F")

    dropped = resolve_relays(wires, PanelState())
    assert dropped.relays == OFF

    held = resolve_relays(wires, PanelState(relays=(True,) + OFF[1:]))
    assert held.relays[0]
    assert held.iterations == 1


def test_buzzer_does_not_converge(caplog):
    """A relay fed through its own NC contact never settles."""
    wires = load_circuit("+/1H 1J/1C -/1F")

    with caplog.at_level(logging.WARNING, logger="minivac.panel.resolution"):
        result = resolve_relays(wires, PanelState())

    assert not result.converged
    assert result.iterations == DEFAULT_CONFIG.max_iterations
    assert result.alerts == ()
    assert "did not stabilise" in caplog.text


def test_iteration_cap_is_configurable():
    wires = load_circuit("+/1H 1J/1C -/1F")
    result = resolve_relays(wires, PanelState(), config=DEFAULT_CONFIG._replace(max_iterations=3))

    assert result.iterations == 3
    assert not result.converged
    # Started OFF and flipped three times
    assert result.relays[0]


def test_short_circuit_alert(caplog):
    with caplog.at_level(logging.WARNING, logger="minivac.panel.resolution"):
        result = resolve_relays(load_circuit(["+/-"]), PanelState())

    assert result.alerts == (SHORT_CIRCUIT_ALERT,)
    assert result.supply_current > 1.0
    assert result.converged
    assert SHORT_CIRCUIT_ALERT in caplog.text


def test_short_circuit_alert_not_duplicated():
    """Several iterations with a short still report a single alert."""
    wires = load_circuit("+/- +/1C -/1F")
    result = resolve_relays(wires, PanelState())

    assert result.iterations == 2
    assert result.alerts == (SHORT_CIRCUIT_ALERT,)


def test_motor_current_sign():
    forward = resolve_relays(load_circuit("+/D17 -/D18"), PanelState())
    reverse = resolve_relays(load_circuit("+/D18 -/D17"), PanelState())

    assert forward.motor_current >= DEFAULT_CONFIG.motor_run_current
    assert reverse.motor_current <= -DEFAULT_CONFIG.motor_run_current


def test_override_routes_contacts():
    """An overridden relay switches its contacts; its simulated value is kept."""
    wires = load_circuit("+/1H 1G/2C 2F/-")
    result = resolve_relays(wires, PanelState(), overrides={1: True})

    assert result.relays == (False, True, False, False, False, False)


def test_override_does_not_stop_simulation():
    """A relay forced off still reports its coil as energised underneath."""
    wires = load_circuit("+/1C -/1F +/1H 1G/2C 2F/-")
    result = resolve_relays(wires, PanelState(), overrides={1: False})

    assert result.relays[0], "simulated value follows the coil"
    assert not result.relays[1], "relay 2 is fed through relay 1's NO contact"


def test_effective_relays():
    relays = (True, False, True, False, False, False)
    assert effective_relays(relays) == relays
    assert effective_relays(relays, {}) == relays
    assert effective_relays(relays, {1: False, 2: True}) == (False, True, True, False, False, False)


def test_solver_failure_propagates():
    bad = DEFAULT_CONFIG._replace(wire_resistance=0.0)
    with pytest.raises(SolverFailure):
        resolve_relays(load_circuit("6+/6A 6B/6-"), PanelState(), config=bad)


def test_zero_iteration_cap_rejected():
    with pytest.raises(ValueError, match="max_iterations"):
        resolve_relays([], PanelState(), config=DEFAULT_CONFIG._replace(max_iterations=0))


def test_resolution_is_pure():
    """Same inputs, same outcome; nothing is carried between calls."""
    wires = load_circuit("+/- +/1C -/1F")
    first = resolve_relays(wires, PanelState())
    second = resolve_relays(wires, PanelState())

    assert first == second
    assert resolve_relays([], PanelState()).alerts == ()
