"""Minivac DC Solver Module.

This module provides a JAX-based DC operating-point solver for resistive
networks using Modified Nodal Analysis (MNA).

Components:
    - R: Resistor
    - VSource: Ideal voltage source
    - Probe: Zero-volt source used to read a branch current
"""

from .network import Network, Node, ComponentRef, ComponentSpec
from .components import R, VSource, Probe
from .solver import Solver, Solution, compile_network, GMIN, SOURCE_LOOP_MESSAGE

__all__ = [
    # Network building
    "Network",
    "Node",
    "ComponentRef",
    "ComponentSpec",
    # Components
    "R",
    "VSource",
    "Probe",
    # Solver
    "Solver",
    "Solution",
    "compile_network",
    "GMIN",
    "SOURCE_LOOP_MESSAGE",
]
