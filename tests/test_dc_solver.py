"""
Test: MNA DC solver (resistors, sources, current probes).
"""
import pytest


def test_voltage_divider():
    """Two equal resistors split the source voltage in half."""
    from minivac.dc import Network, R, VSource

    net = Network()
    net, vin = net.node("vin")
    net, mid = net.node("mid")

    net, vs = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, r1 = R(net, vin, mid, name="R1", value=100.0)
    net, r2 = R(net, mid, net.gnd, name="R2", value=100.0)

    solver = net.compile()
    sol = solver.solve()

    v_mid = float(solver.v(sol, mid))
    assert abs(v_mid - 6.0) < 1e-6, f"Expected 6V at divider midpoint, got {v_mid:.6f}V"
    assert float(solver.v(sol, net.gnd)) == 0.0


def test_params_override_defaults():
    from minivac.dc import Network, R, VSource

    net = Network()
    net, vin = net.node("vin")
    net, mid = net.node("mid")
    net, _ = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, _ = R(net, vin, mid, name="R1", value=100.0)
    net, _ = R(net, mid, net.gnd, name="R2", value=100.0)

    solver = net.compile()
    v_mid = float(solver.v(solver.solve({"R2": 300.0}), mid))
    assert abs(v_mid - 9.0) < 1e-6, f"Expected 9V with R2=300, got {v_mid:.6f}V"


def test_probe_reads_branch_current():
    """A probe reads positive when current flows from its first to its second node."""
    from minivac.dc import Network, R, VSource, Probe

    net = Network()
    net, vin = net.node("vin")
    net, p = net.node("p")

    net, vs = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, probe = Probe(net, vin, p, name="PROBE")
    net, _ = R(net, p, net.gnd, name="LOAD", value=200.0)

    solver = net.compile()
    sol = solver.solve()

    i_probe = float(solver.i(sol, probe))
    assert abs(i_probe - 0.06) < 1e-6, f"Expected 60mA through probe, got {i_probe * 1000:.3f}mA"

    # A supplying source carries current from - to + internally
    i_source = float(solver.i(sol, vs))
    assert abs(i_source + 0.06) < 1e-6, f"Expected -60mA source current, got {i_source * 1000:.3f}mA"


def test_reversed_probe_reads_negative():
    from minivac.dc import Network, R, VSource, Probe

    net = Network()
    net, vin = net.node("vin")
    net, p = net.node("p")
    net, _ = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, probe = Probe(net, p, vin, name="PROBE")
    net, _ = R(net, p, net.gnd, name="LOAD", value=200.0)

    solver = net.compile()
    assert float(solver.i(solver.solve(), probe)) < 0


def test_dc_returns_named_floats():
    """dc() keys source currents as I(name) and node voltages by node name."""
    from minivac.dc import Network, R, VSource, Probe

    net = Network.with_ground("Power_Negative")
    net, vcc = net.node("Power_Positive")
    net, p = net.node("Lamp_Probe")
    net, _ = VSource(net, vcc, net.gnd, name="V_POWER", value=12.0)
    net, _ = Probe(net, vcc, p, name="LAMP_PROBE")
    net, _ = R(net, p, net.gnd, name="LAMP", value=100.0)

    results = net.compile().dc()

    assert set(results) == {
        "Power_Negative", "Power_Positive", "Lamp_Probe", "I(V_POWER)", "I(LAMP_PROBE)",
    }
    assert results["Power_Negative"] == 0.0
    assert results["Power_Positive"] == pytest.approx(12.0, abs=1e-6)
    assert results["I(LAMP_PROBE)"] == pytest.approx(0.12, abs=1e-6)
    assert isinstance(results["I(V_POWER)"], float)


def test_floating_node_does_not_break_solve():
    """gmin keeps unconnected nodes solvable; they settle at 0V."""
    from minivac.dc import Network, R, VSource

    net = Network()
    net, vin = net.node("vin")
    net, a = net.node("a")
    net, b = net.node("b")
    net, _ = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, _ = R(net, vin, net.gnd, name="R1", value=100.0)
    net, _ = R(net, a, b, name="R_FLOAT", value=100.0)  # island

    solver = net.compile()
    sol = solver.solve()
    assert abs(float(solver.v(sol, a))) < 1e-9
    assert abs(float(solver.v(sol, b))) < 1e-9


def test_dangling_branch_carries_no_current():
    """A probe into a dead end reads (almost) nothing."""
    from minivac.dc import Network, R, VSource, Probe

    net = Network()
    net, vin = net.node("vin")
    net, p = net.node("p")
    net, end = net.node("end")
    net, _ = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, probe = Probe(net, vin, p, name="PROBE")
    net, _ = R(net, p, end, name="COIL", value=400.0)

    solver = net.compile()
    assert abs(float(solver.i(solver.solve(), probe))) < 1e-6


def test_node_reuses_existing_name():
    from minivac.dc import Network

    net = Network()
    net, a = net.node("a")
    net2, a_again = net.node("a")

    assert a_again == a
    assert net2 is net
    assert net.num_nodes == 1


def test_named_ground_is_reference():
    from minivac.dc import Network

    net = Network.with_ground("Power_Negative")
    net, gnd = net.node("Power_Negative")

    assert gnd.index == 0
    assert net.gnd.name == "Power_Negative"
    assert net.num_nodes == 0


def test_source_loop_rejected():
    """Two sources in parallel form a loop of sources only."""
    from minivac.dc import Network, VSource, R, SOURCE_LOOP_MESSAGE
    from minivac.exceptions import SolverFailure

    net = Network()
    net, vin = net.node("vin")
    net, _ = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, _ = VSource(net, vin, net.gnd, name="V2", value=5.0)
    net, _ = R(net, vin, net.gnd, name="R1", value=100.0)

    with pytest.raises(SolverFailure, match=SOURCE_LOOP_MESSAGE.split(" or")[0]):
        net.compile()


def test_shorted_source_rejected():
    from minivac.dc import Network, VSource, R
    from minivac.exceptions import SolverFailure

    net = Network()
    net, a = net.node("a")
    net, _ = R(net, a, net.gnd, name="R1", value=100.0)
    net, _ = VSource(net, a, a, name="V1", value=12.0)

    with pytest.raises(SolverFailure):
        net.compile()


def test_duplicate_component_name_rejected():
    from minivac.dc import Network, R
    from minivac.exceptions import SolverFailure

    net = Network()
    net, a = net.node("a")
    net, _ = R(net, a, net.gnd, name="R1", value=100.0)
    net, _ = R(net, a, net.gnd, name="R1", value=200.0)

    with pytest.raises(SolverFailure, match="Duplicate"):
        net.compile()


def test_empty_network_rejected():
    from minivac.dc import Network
    from minivac.exceptions import SolverFailure

    with pytest.raises(SolverFailure):
        Network().compile()


def test_non_positive_resistance_rejected():
    from minivac.dc import Network, R, VSource
    from minivac.exceptions import SolverFailure

    net = Network()
    net, a = net.node("a")
    net, _ = VSource(net, a, net.gnd, name="V1", value=12.0)
    net, _ = R(net, a, net.gnd, name="R1", value=0.0)

    with pytest.raises(SolverFailure, match="non-positive"):
        net.compile().solve()


def test_missing_value_rejected():
    from minivac.dc import Network, R, VSource

    net = Network()
    net, a = net.node("a")
    net, _ = VSource(net, a, net.gnd, name="V1", value=12.0)
    net, _ = R(net, a, net.gnd, name="R1")

    solver = net.compile()
    with pytest.raises(ValueError, match="R1"):
        solver.solve()
    assert float(solver.v(solver.solve({"R1": 10.0}), a)) == pytest.approx(12.0, abs=1e-6)


def test_resistor_current_probing_not_supported():
    from minivac.dc import Network, R, VSource

    net = Network()
    net, a = net.node("a")
    net, _ = VSource(net, a, net.gnd, name="V1", value=12.0)
    net, r1 = R(net, a, net.gnd, name="R1", value=100.0)

    solver = net.compile()
    with pytest.raises(NotImplementedError):
        solver.i(solver.solve(), r1)


def test_wire_against_leakage_precision():
    """A 0.1 Ohm wire next to kilo-ohm loads still resolves to the microvolt."""
    from minivac.dc import Network, R, VSource

    net = Network()
    net, vin = net.node("vin")
    net, a = net.node("a")
    net, _ = VSource(net, vin, net.gnd, name="V1", value=12.0)
    net, _ = R(net, vin, a, name="WIRE", value=0.1)
    net, _ = R(net, a, net.gnd, name="LOAD", value=400.0)

    solver = net.compile()
    expected = 12.0 * 400.0 / 400.1
    assert float(solver.v(solver.solve(), a)) == pytest.approx(expected, abs=1e-6)


def test_node_index_tracks_names():
    """find() answers from the name table; adding a node leaves the old network untouched."""
    from minivac.dc import Network

    base = Network.with_ground("Power_Negative")
    net, a = base.node("a")
    net, b = net.node("b")

    assert net.lookup == {"Power_Negative": 0, "a": 1, "b": 2}
    assert base.lookup == {"Power_Negative": 0}
    assert net.find("b") == b
    assert net.find("missing") is None
    assert base.find("a") is None
    assert [n.index for n in net.nodes] == [0, 1, 2]
