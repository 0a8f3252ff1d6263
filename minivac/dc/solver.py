"""DC operating-point solver using MNA (Modified Nodal Analysis).

For a purely resistive network with ideal voltage sources we solve:
    G * x = b
where:
    G is the MNA matrix (conductances plus source coupling rows)
    x holds the node voltages followed by one branch current per source
    b holds the source voltages

Stamp patterns are computed once per network; each solve scatters the
values into G in a single vectorized update. Every node also gets a tiny
conductance (gmin) to the reference node, so that nodes left floating by
the wiring do not make G singular.
"""

from __future__ import annotations
from typing import NamedTuple, Callable

import jax
import jax.numpy as jnp
from jax import Array

from ..exceptions import SolverFailure
from .network import Network, Node, ComponentRef

# Pickup thresholds sit a few mA from typical operating points and wires are
# 0.1 Ohm next to 1e-9 S leakage: single precision cannot resolve that range.
jax.config.update("jax_enable_x64", True)

GMIN = 1e-9  # Siemens, leakage from every node to reference
SOURCE_LOOP_MESSAGE = "Circuit has a voltage source loop or shorted source."


class Solution(NamedTuple):
    """Result of one DC solve."""
    voltages: Array  # node voltages (excluding reference)
    currents: Array  # branch currents, one per voltage source


class Solver(NamedTuple):
    """
    Compiled DC solver for a network.

    Contains functions to solve the operating point and read it back.
    """
    network: Network
    solve: Callable  # (params) -> Solution
    v: Callable  # (solution, node) -> voltage
    i: Callable  # (solution, component_ref) -> source branch current
    dc: Callable  # (params) -> {"I(name)": amps, node_name: volts}
    source_current_indices: dict  # {source_name: MNA index}
    defaults: dict  # {param_name: default_value}


def _check_source_loops(net: Network) -> None:
    """
    Reject loops made only of voltage sources.

    Such a loop either fixes contradictory voltages or leaves the loop
    current undetermined; in both cases G is singular.
    """
    parent: dict[int, int] = {}

    def find(n: int) -> int:
        while parent.get(n, n) != n:
            n = parent[n]
        return n

    for comp in net.components:
        if comp.kind != "VSource":
            continue
        root_a, root_b = find(comp.nodes[0]), find(comp.nodes[1])
        if root_a == root_b:
            raise SolverFailure(f"{SOURCE_LOOP_MESSAGE} ({comp.name})")
        parent[root_a] = root_b


def compile_network(net: Network, *, gmin: float = GMIN) -> Solver:
    """
    Compile a Network into DC solver functions.

    Args:
        net: Network with components
        gmin: Leakage conductance from every node to reference

    Returns:
        Solver with solve, v, i and dc functions

    Raises:
        SolverFailure: if the network has no nodes, repeats a component
            name, or contains a voltage-source loop
    """
    n_nodes = net.num_nodes  # excludes reference
    if n_nodes == 0:
        raise SolverFailure("Network has no nodes to solve for")

    seen = set()
    for comp in net.components:
        if comp.name in seen:
            raise SolverFailure(f"Duplicate component name: {comp.name}")
        seen.add(comp.name)

    _check_source_loops(net)

    # Assign branch-current variables to sources
    extra_var_offset = n_nodes
    source_current_indices = {}
    for comp in net.components:
        if comp.extra_vars > 0:
            source_current_indices[comp.name] = extra_var_offset
            extra_var_offset += comp.extra_vars

    n_total = extra_var_offset

    defaults = {}
    for comp in net.components:
        for param_name, default_value in comp.defaults:
            defaults[param_name] = default_value

    # Resistor stamps: per entry (row, col, sign, resistor index)
    r_names = []
    r_rows, r_cols, r_signs, r_owner = [], [], [], []

    # Fixed stamps: source coupling (+/-1) and gmin diagonal
    f_rows, f_cols, f_vals = [], [], []

    vs_names = []
    vs_rows = []

    for comp in net.components:
        if comp.kind == "R":
            owner = len(r_names)
            r_names.append(comp.name)
            ia, ib = comp.nodes
            # Diagonal entries
            for n in (ia, ib):
                if n > 0:
                    r_rows.append(n - 1)
                    r_cols.append(n - 1)
                    r_signs.append(1.0)
                    r_owner.append(owner)
            # Off-diagonal entries
            if ia > 0 and ib > 0:
                for row, col in ((ia, ib), (ib, ia)):
                    r_rows.append(row - 1)
                    r_cols.append(col - 1)
                    r_signs.append(-1.0)
                    r_owner.append(owner)

        elif comp.kind == "VSource":
            # Row for voltage equation: V_p - V_n = value
            # Branch current flows from p to n through the source
            idx = source_current_indices[comp.name]
            ip, in_ = comp.nodes
            for n, sign in ((ip, 1.0), (in_, -1.0)):
                if n > 0:
                    f_rows.extend((n - 1, idx))
                    f_cols.extend((idx, n - 1))
                    f_vals.extend((sign, sign))
            vs_names.append(comp.name)
            vs_rows.append(idx)

        else:
            raise SolverFailure(f"Unsupported component kind for DC analysis: {comp.kind}")

    for n in range(n_nodes):
        f_rows.append(n)
        f_cols.append(n)
        f_vals.append(gmin)

    rows = jnp.array(r_rows + f_rows, dtype=jnp.int32)
    cols = jnp.array(r_cols + f_cols, dtype=jnp.int32)
    r_signs_arr = jnp.array(r_signs, dtype=jnp.float64)
    r_owner_arr = jnp.array(r_owner, dtype=jnp.int32)
    f_vals_arr = jnp.array(f_vals, dtype=jnp.float64)
    vs_rows_arr = jnp.array(vs_rows, dtype=jnp.int32)

    def _lookup(merged: dict, name: str) -> float:
        if name not in merged:
            raise ValueError(f"No value given for component {name}")
        return float(merged[name])

    def solve(params: dict | None = None) -> Solution:
        """
        Solve the DC operating point.

        Args:
            params: Component values (merged with defaults)

        Returns:
            Solution with node voltages and source currents

        Raises:
            SolverFailure: if a resistance is not positive or the solve
                does not produce finite values
        """
        if params is None:
            params = {}

        # Merge with defaults
        merged = {**defaults, **params}

        resistances = [_lookup(merged, name) for name in r_names]
        for name, value in zip(r_names, resistances):
            if value <= 0.0:
                raise SolverFailure(f"Resistor {name} has non-positive resistance {value}")
        sources = [_lookup(merged, name) for name in vs_names]

        conductances = 1.0 / jnp.array(resistances, dtype=jnp.float64)
        values = jnp.concatenate([conductances[r_owner_arr] * r_signs_arr, f_vals_arr])

        G = jnp.zeros((n_total, n_total), dtype=jnp.float64).at[rows, cols].add(values)
        b = jnp.zeros(n_total, dtype=jnp.float64).at[vs_rows_arr].set(
            jnp.array(sources, dtype=jnp.float64)
        )

        x = jnp.linalg.solve(G, b)
        if not bool(jnp.all(jnp.isfinite(x))):
            raise SolverFailure("DC analysis failed: matrix is singular")

        return Solution(voltages=x[:n_nodes], currents=x[n_nodes:])

    def v(solution: Solution, node: Node) -> Array:
        """Get voltage at a node."""
        if node.index == 0:  # reference
            return jnp.array(0.0)
        return solution.voltages[node.index - 1]

    def i(solution: Solution, component_ref: ComponentRef) -> Array:
        """Get branch current through a voltage source or probe."""
        if component_ref.kind == "R":
            raise NotImplementedError(
                "R current probing is not supported. "
                "Put a Probe in series with the resistor instead."
            )
        if component_ref.name not in source_current_indices:
            raise ValueError(f"Component {component_ref.name} has no branch current")
        return solution.currents[source_current_indices[component_ref.name] - n_nodes]

    def dc(params: dict | None = None) -> dict[str, float]:
        """
        Solve and return plain floats keyed by name.

        Source currents are keyed "I(<name>)", node voltages by node name.
        """
        solution = solve(params)
        volts = solution.voltages.tolist()
        amps = solution.currents.tolist()

        results = {net.gnd.name: 0.0}
        for node in net.nodes[1:]:
            results[node.name] = volts[node.index - 1]
        for name in vs_names:
            results[f"I({name})"] = amps[source_current_indices[name] - n_nodes]
        return results

    return Solver(
        network=net,
        solve=solve,
        v=v,
        i=i,
        dc=dc,
        source_current_indices=source_current_indices,
        defaults=defaults,
    )
