"""
Stateful panel simulator.

MinivacSimulator owns the discrete state of every component, reruns relay
resolution after each command and hands out immutable snapshots. Motor
time is read from an injectable clock, so hosts and tests decide how fast
time passes; the simulator itself never sleeps.

Example:
    sim = MinivacSimulator("6+/6A 6B/6-")
    sim.initialize()
    sim.get_state().lights  # (False, False, False, False, False, True)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, NamedTuple, Sequence

from ..exceptions import SolverFailure
from . import motor as kinematics
from .config import NUM_SECTIONS, PanelConfig, DEFAULT_CONFIG
from .notation import load_circuit
from .resolution import effective_relays, resolve_relays
from .topology import PanelState

logger = logging.getLogger(__name__)

SLIDE_POSITIONS = ("left", "right")


class MotorSnapshot(NamedTuple):
    position: int
    angle: float
    running: bool
    direction: str  # "CW" or "CCW"


class StateSnapshot(NamedTuple):
    """Immutable copy of the panel state, as returned by get_state()."""
    relays: tuple[bool, ...]  # overrides applied
    buttons: tuple[bool, ...]
    lights: tuple[bool, ...]
    relay_indicator_lights: tuple[bool, ...]
    slides: tuple[str, ...]  # "left" / "right"
    motor: MotorSnapshot
    alerts: tuple[str, ...]
    supply_current: float  # Amps drawn from the supply in the last good cycle


def _off() -> list[bool]:
    return [False] * NUM_SECTIONS


def _check_number(kind: str, n: int) -> None:
    if not 1 <= n <= NUM_SECTIONS:
        raise ValueError(f"Invalid {kind} number: {n}")


class MinivacSimulator:
    """
    Panel simulator for one circuit.

    Args:
        circuit: Wire tokens, either one whitespace-separated string or an
            iterable of "<terminal>/<terminal>" strings
        seed: Snapshot of a previous simulator whose relays, slides and
            motor angle are carried over (e.g. after the wiring was edited).
            Its relays are the ones the old panel showed, so a relay that
            was overridden starts at its forced value; overrides themselves
            are not carried over.
        config: Component values and thresholds
        clock: Returns the current time in seconds

    Raises:
        InvalidTerminal, InvalidWireFormat, SelfConnection: for a bad circuit
    """

    def __init__(
        self,
        circuit: str | Iterable[str],
        *,
        seed: StateSnapshot | None = None,
        config: PanelConfig = DEFAULT_CONFIG,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.wires = tuple(load_circuit(circuit))
        self.config = config
        self._clock = clock
        self._reset_components()

        if seed is not None:
            self.set_relay_states(seed.relays)
            self._slides = [position == "right" for position in seed.slides]
            self.update_motor_angle(seed.motor.angle)

        logger.debug("Minivac initialized with %d wires", len(self.wires))

    def _reset_components(self) -> None:
        self._buttons = _off()
        self._relays = _off()  # simulated values
        self._overrides: dict[int, bool] = {}
        self._held_from: dict[int, bool] = {}  # simulated value when each override was set
        self._lights = _off()
        self._indicator_lights = _off()
        self._slides = _off()
        self._motor = kinematics.MotorState()
        self._alerts: tuple[str, ...] = ()
        self._supply_current = 0.0

    # --- resolution -------------------------------------------------------

    def _simulate(self) -> bool:
        """
        Run one resolution cycle and adopt its results.

        Returns False if the cycle failed or did not converge. On solver
        failure every derived field keeps its previous value and the error
        message becomes the alert list.
        """
        state = PanelState(
            relays=tuple(self._relays),
            buttons=tuple(self._buttons),
            slides=tuple(self._slides),
            motor_position=self._motor.position,
            motor_contact=self._motor.contact,
        )
        try:
            result = resolve_relays(self.wires, state, self._overrides, self.config)
        except SolverFailure as exc:
            logger.error("Resolution cycle aborted: %s", exc)
            self._alerts = (str(exc),)
            return False

        self._relays = list(result.relays)
        self._lights = list(result.lights)
        self._indicator_lights = list(result.indicator_lights)
        self._alerts = result.alerts
        self._supply_current = result.supply_current

        was_running = self._motor.running
        self._motor = kinematics.drive(self._motor, result.motor_current, self._clock(), self.config)
        if self._motor.running and not was_running:
            logger.debug(
                "Motor: RUNNING %s (%.3f mA)",
                self._direction_label(), abs(result.motor_current) * 1000.0,
            )
        elif was_running and not self._motor.running:
            logger.debug("Motor: STOPPED (%.3f mA)", abs(result.motor_current) * 1000.0)

        return result.converged

    def _command(self, message: str, *args) -> None:
        logger.debug(message, *args)
        self._simulate()
        self._log_state()

    def _log_state(self) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        relays = effective_relays(self._relays, self._overrides)
        logger.debug(
            "State: relays=%s lights=%s buttons=%s slides=%s motor=D%d %s",
            "".join("1" if r else "0" for r in relays),
            "".join("1" if l else "0" for l in self._lights),
            "".join("1" if b else "0" for b in self._buttons),
            "".join("R" if s else "L" for s in self._slides),
            self._motor.position,
            f"RUNNING {self._direction_label()}" if self._motor.running else "STOPPED",
        )

    def _direction_label(self) -> str:
        return "CW" if self._motor.direction > 0 else "CCW"

    # --- commands ---------------------------------------------------------

    def initialize(self) -> None:
        """Run one resolution cycle from the current (default or seeded) state."""
        self._command("Initializing circuit")

    def resimulate(self) -> None:
        """Run one resolution cycle without advancing motor time."""
        self._simulate()

    def press_button(self, n: int) -> None:
        _check_number("button", n)
        self._buttons[n - 1] = True
        self._command("Press button %d", n)

    def release_button(self, n: int) -> None:
        _check_number("button", n)
        self._buttons[n - 1] = False
        self._command("Release button %d", n)

    def set_slide(self, n: int, position: str) -> None:
        """Move slide ``n`` to "left" or "right"; resolves only on a change."""
        _check_number("slide", n)
        if position not in SLIDE_POSITIONS:
            raise ValueError(f"Invalid slide position: {position!r}")
        right = position == "right"
        if self._slides[n - 1] != right:
            self._slides[n - 1] = right
            self._command("Slide switch %d moved to %s", n, position.upper())

    def set_relay_override(self, n: int, state: bool) -> None:
        """
        Force relay ``n`` as if its armature were held by hand.

        Contacts follow the forced value; the simulated value keeps being
        computed underneath. The simulated value from before the first
        override is remembered for clear_relay_override().
        """
        _check_number("relay", n)
        self._held_from.setdefault(n, self._relays[n - 1])
        self._overrides[n] = bool(state)
        self._command("Override relay %d %s", n, "ON" if state else "OFF")

    def clear_relay_override(self, n: int) -> None:
        """
        Release a forced relay and resolve.

        The relay restarts from the value it had before it was forced, so a
        relay that latched through its own held contacts drops out again.
        """
        _check_number("relay", n)
        if self._overrides.pop(n, None) is not None:
            self._relays[n - 1] = self._held_from.pop(n)
            self._command("Clear override on relay %d", n)

    def reset(self) -> None:
        """
        Return every component to its default state, keeping the wiring.

        No resolution cycle is run; call initialize() to power the circuit
        again.
        """
        self._reset_components()
        logger.debug("Reset all components")

    def update_motor_angle(self, angle: float) -> None:
        """Place the selector arm at ``angle`` degrees without resolving."""
        self._motor = kinematics.at_angle(self._motor, float(angle))

    def set_relay_states(self, relays: Sequence[bool]) -> None:
        """Seed the simulated relay vector without resolving."""
        if len(relays) != NUM_SECTIONS:
            raise ValueError(f"Expected {NUM_SECTIONS} relay states, got {len(relays)}")
        self._relays = [bool(r) for r in relays]

    def pause(self) -> None:
        """Stop motor timing, e.g. while the panel is powered off."""
        self._motor = kinematics.pause(self._motor)

    def resume(self) -> None:
        """Restart motor timing from now, without catching up."""
        self._motor = kinematics.resume(self._motor, self._clock())

    # --- queries ----------------------------------------------------------

    @property
    def overrides(self) -> dict[int, bool]:
        """Active relay overrides, {relay_number: forced_state}."""
        return dict(self._overrides)

    def get_state(self) -> StateSnapshot:
        """
        Advance the motor to now, resolve if the arm changed contact, and
        return a snapshot.
        """
        if self._motor.running and self._motor.reference is not None:
            self._motor, changed = kinematics.advance(self._motor, self._clock(), self.config)
            if changed:
                self._simulate()

        return StateSnapshot(
            relays=effective_relays(self._relays, self._overrides),
            buttons=tuple(self._buttons),
            lights=tuple(self._lights),
            relay_indicator_lights=tuple(self._indicator_lights),
            slides=tuple(SLIDE_POSITIONS[int(s)] for s in self._slides),
            motor=MotorSnapshot(
                position=self._motor.position,
                angle=self._motor.angle,
                running=self._motor.running,
                direction=self._direction_label(),
            ),
            alerts=self._alerts,
            supply_current=self._supply_current,
        )
