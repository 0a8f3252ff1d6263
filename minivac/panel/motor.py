"""
Selector motor kinematics (immutable/functional style).

The motor turns the selector arm continuously. Sixteen contacts sit every
22.5 degrees, contact 0 at 0 degrees (north). Each sector makes contact over
its central 20 degrees and is dead for 1.25 degrees at either edge, so the
arm breaks one contact before it makes the next.

All functions return a new MotorState; nothing here reads the clock.
Callers pass the current clock reading in seconds.
"""

from __future__ import annotations
from typing import NamedTuple

from .config import PanelConfig, DEFAULT_CONFIG

NUM_POSITIONS = 16
SECTOR = 360.0 / NUM_POSITIONS  # 22.5 degrees
HALF_SECTOR = SECTOR / 2.0
DEAD_ZONE = 1.25  # degrees at each edge of a sector

CW = 1
CCW = -1


class MotorState(NamedTuple):
    """Continuous and quantized state of the selector motor."""
    angle: float = 0.0  # degrees, unbounded
    position: int = 0  # contact under the arm, 0..15
    contact: bool = True  # False inside a dead zone
    running: bool = False
    direction: int = CW
    reference: float | None = None  # clock reading of the last advance


def _sector_offset(angle: float) -> float:
    # Shift by half a sector so that sector boundaries fall on multiples of 22.5
    return (angle % 360.0 + HALF_SECTOR) % 360.0


def position_for_angle(angle: float) -> int:
    """Quantize an angle to the contact index 0..15."""
    return int(_sector_offset(angle) // SECTOR) % NUM_POSITIONS


def contact_made(angle: float) -> bool:
    """True when the arm rests on a contact rather than in a dead zone."""
    within = _sector_offset(angle) % SECTOR
    return DEAD_ZONE <= within <= SECTOR - DEAD_ZONE


def degrees_per_ms(config: PanelConfig = DEFAULT_CONFIG) -> float:
    """Angular speed: one sector per motor step (0.12 deg/ms by default)."""
    return SECTOR / config.motor_step_ms


def at_angle(motor: MotorState, angle: float) -> MotorState:
    """Move the arm to ``angle`` and recompute position and contact."""
    return motor._replace(
        angle=angle,
        position=position_for_angle(angle),
        contact=contact_made(angle),
    )


def topology_changed(before: MotorState, after: MotorState) -> bool:
    """True if the arm moved onto another contact or made/broke contact."""
    return before.position != after.position or before.contact != after.contact


def advance(
    motor: MotorState,
    now: float,
    config: PanelConfig = DEFAULT_CONFIG,
) -> tuple[MotorState, bool]:
    """
    Integrate rotation since the last reference point.

    Args:
        motor: Current motor state
        now: Clock reading in seconds
        config: Supplies the motor step time

    Returns:
        (new_motor, changed) where changed means the network topology is
        different and the panel must be resolved again
    """
    if not motor.running or motor.reference is None:
        return motor, False

    elapsed_ms = (now - motor.reference) * 1000.0
    delta = elapsed_ms * degrees_per_ms(config) * motor.direction
    moved = at_angle(motor, motor.angle + delta)._replace(reference=now)
    return moved, topology_changed(motor, moved)


def drive(
    motor: MotorState,
    current: float,
    now: float,
    config: PanelConfig = DEFAULT_CONFIG,
) -> MotorState:
    """
    Update run state from the signed drive-winding current.

    The motor runs while |current| reaches the run threshold; positive
    current turns it clockwise. Starting sets the time reference, stopping
    clears it. Direction is kept while stopped.
    """
    if abs(current) >= config.motor_run_current:
        direction = CW if current > 0 else CCW
        # Already running (or paused while running): keep the reference
        reference = motor.reference if motor.running else now
        return motor._replace(running=True, direction=direction, reference=reference)
    return motor._replace(running=False, reference=None)


def pause(motor: MotorState) -> MotorState:
    """Forget the time reference so no elapsed time accrues."""
    return motor._replace(reference=None)


def resume(motor: MotorState, now: float) -> MotorState:
    """Restart timing from ``now`` if the motor is running."""
    if motor.running:
        return motor._replace(reference=now)
    return motor
