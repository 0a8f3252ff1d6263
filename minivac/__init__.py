"""Minivac - stateful simulator for a six-section relay computer trainer.

The package is split into two layers:
    - dc: MNA resistive-network DC solver (JAX)
    - panel: the trainer panel itself (notation parser, topology builder,
      relay resolution loop, motor model and the simulator facade)

Usage:
    from minivac.panel import MinivacSimulator
    sim = MinivacSimulator(["6+/6A", "6B/6-"])
    sim.initialize()
    sim.get_state().lights
"""

from .exceptions import (
    MinivacError,
    InvalidTerminal,
    InvalidWireFormat,
    SelfConnection,
    SolverFailure,
)

from . import dc, panel
from .panel import MinivacSimulator, StateSnapshot

__version__ = "0.1.0"
__all__ = [
    "dc",
    "panel",
    "MinivacSimulator",
    "StateSnapshot",
    "MinivacError",
    "InvalidTerminal",
    "InvalidWireFormat",
    "SelfConnection",
    "SolverFailure",
    "__version__",
]
