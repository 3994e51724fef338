import random

import pytest

from bellman_trace.engine import detect_any_improving_cycle, maximize, minimize, relax, relax_with_trace
from bellman_trace.errors import InvalidSource
from bellman_trace.graph import UNREACHED, Graph, Mode
from bellman_trace.samples import get_sample


def _fixed_point(graph, source, mode):
    """Naive repeated relaxation until nothing changes (float infinities as sentinels)."""
    start = float("inf") if mode is Mode.MINIMIZE else float("-inf")
    better = (lambda a, b: a < b) if mode is Mode.MINIMIZE else (lambda a, b: a > b)
    dist = {n: start for n in graph.nodes}
    dist[source] = 0.0
    changed = True
    while changed:
        changed = False
        for e in graph.edges:
            if dist[e.source] != start and better(dist[e.source] + e.weight, dist[e.target]):
                dist[e.target] = dist[e.source] + e.weight
                changed = True
    return {n: (UNREACHED if v == start else v) for n, v in dist.items()}


def _random_graph(rng, weights):
    n = rng.randint(2, 8)
    nodes = [f"n{i}" for i in range(n)]
    g = Graph(nodes)
    for _ in range(rng.randint(0, 3 * n)):
        g.add_edge(rng.choice(nodes), rng.choice(nodes), rng.choice(weights))
    return g


def test_basic_scenario_minimize():
    s = get_sample("basic")
    res, trace = relax_with_trace(s.graph, "x1", Mode.MINIMIZE)
    assert res.values == {"x1": 0, "x2": 4, "x3": 3, "x4": 6, "x5": 10, "x6": 10}
    assert not res.has_cycle
    assert not res.has_negative_cycle
    assert res.predecessors["x6"] == "x4"
    assert res.predecessors["x1"] is None
    assert [r.iteration for r in trace] == [1, 2, 3]
    assert res.iterations == 3
    assert len(trace[0].updates) == 6
    assert [(u.source, u.target) for u in trace[1].updates] == [("x2", "x4"), ("x4", "x6")]
    assert trace[2].updates == ()


def test_trace_update_entries_record_old_and_new_values():
    s = get_sample("basic")
    _, trace = relax_with_trace(s.graph, "x1")
    first = trace[0].updates
    assert first[0].source == "x1" and first[0].target == "x2"
    assert first[0].old_value is UNREACHED and first[0].new_value == 5
    # x3 -> x2 improves the value set earlier in the same pass
    x2_updates = [u for u in first if u.target == "x2"]
    assert [(u.old_value, u.new_value) for u in x2_updates] == [(UNREACHED, 5), (5, 4)]
    assert trace[0].values["x2"] == 4
    assert trace[0].values["x6"] == 11


def test_basic_scenario_maximize():
    s = get_sample("basic")
    res = maximize(s.graph, "x1")
    assert res.values == {"x1": 0, "x2": 5, "x3": 3, "x4": 9, "x5": 10, "x6": 13}
    assert res.predecessors["x4"] == "x3"
    assert not res.has_positive_cycle


def test_negative_cycle_detected():
    g = Graph.from_edges(["a", "b", "c"], [("a", "b", 1), ("b", "c", 1), ("c", "b", -3)])
    res = minimize(g, "a")
    assert res.has_cycle
    assert res.has_negative_cycle
    assert not res.has_positive_cycle
    assert all(v == [] for v in res.optimal_predecessors.values())


def test_positive_cycle_detected_under_maximize():
    g = Graph.from_edges(["a", "b", "c"], [("a", "b", 1), ("b", "c", 1), ("c", "b", 1)])
    res = relax(g, "a", Mode.MAXIMIZE)
    assert res.has_cycle and res.has_positive_cycle
    # the same graph is harmless under minimization
    assert not relax(g, "a", Mode.MINIMIZE).has_cycle


def test_early_exit_when_first_pass_changes_nothing():
    g = Graph.from_edges(["a", "b", "c", "d"], [("b", "c", 1), ("c", "d", 1)])
    res, trace = relax_with_trace(g, "a")
    assert len(trace) == 1
    assert trace[0].updates == ()
    assert res.values["d"] is UNREACHED


def test_early_exit_after_one_settling_pass():
    g = Graph.from_edges([f"v{i}" for i in range(6)], [(f"v{i}", f"v{i+1}", 1) for i in range(5)])
    _, trace = relax_with_trace(g, "v0")
    # pass 1 settles everything, pass 2 confirms; far fewer than |V|-1 = 5
    assert len(trace) == 2
    assert len(trace[0].updates) == 5
    assert not trace[1].changed


def test_on_step_sink_receives_records_in_pass_order():
    seen = []
    res = relax(get_sample("stepwise").graph, "x1", on_step=seen.append)
    assert [r.iteration for r in seen] == list(range(1, res.iterations + 1))
    assert res.values == {"x1": 0, "x2": 1, "x3": 4, "x4": 3, "x5": 6}


def test_invalid_source():
    g = Graph(["a", "b"])
    with pytest.raises(InvalidSource) as exc:
        relax(g, "z")
    assert exc.value.source == "z"
    with pytest.raises(ValueError):
        relax(Graph(), "a")


def test_single_node_graph_runs_no_passes():
    res, trace = relax_with_trace(Graph(["solo"]), "solo")
    assert trace == []
    assert res.values == {"solo": 0}
    assert not res.has_cycle


def test_ties_keep_first_predecessor():
    g = Graph.from_edges(["s", "a", "b", "t"], [("s", "a", 1), ("s", "b", 2), ("a", "t", 2), ("b", "t", 1)])
    res = minimize(g, "s")
    assert res.values["t"] == 3
    assert res.predecessors["t"] == "a"
    assert res.optimal_predecessors["t"] == ["a", "b"]
    assert res.optimal_predecessors["s"] == []


def test_self_loop_is_inert():
    g = Graph.from_edges(["a", "b"], [("a", "a", 0), ("a", "b", 2), ("b", "b", 3)])
    res = minimize(g, "a")
    assert res.values == {"a": 0, "b": 2}
    assert res.predecessors == {"a": None, "b": "a"}
    assert not res.has_cycle


def test_parallel_edges_relax_independently():
    g = Graph.from_edges(["a", "b"], [("a", "b", 5), ("a", "b", 2), ("a", "b", 2)])
    res, trace = relax_with_trace(g, "a")
    assert res.values["b"] == 2
    assert [(u.old_value, u.new_value) for u in trace[0].updates] == [(UNREACHED, 5), (5, 2)]
    assert res.optimal_predecessors["b"] == ["a"]


def test_matches_fixed_point_for_non_negative_minimize():
    rng = random.Random(7)
    for _ in range(50):
        g = _random_graph(rng, [0, 1, 2, 3, 5, 8])
        res = minimize(g, g.nodes[0])
        assert not res.has_cycle
        assert res.values == _fixed_point(g, g.nodes[0], Mode.MINIMIZE)


def test_matches_fixed_point_for_non_positive_maximize():
    rng = random.Random(11)
    for _ in range(50):
        g = _random_graph(rng, [0, -1, -2, -4, -7])
        res = maximize(g, g.nodes[0])
        assert not res.has_cycle
        assert res.values == _fixed_point(g, g.nodes[0], Mode.MAXIMIZE)


def test_runs_are_deterministic():
    g = get_sample("large").graph
    first = relax_with_trace(g, "x1")
    second = relax_with_trace(g, "x1")
    assert first == second


def test_detect_any_improving_cycle_sees_unreachable_cycles():
    g = Graph.from_edges(["s", "u", "v"], [("u", "v", -1), ("v", "u", -1)])
    assert not minimize(g, "s").has_cycle
    assert detect_any_improving_cycle(g, Mode.MINIMIZE)
    assert not detect_any_improving_cycle(g, Mode.MAXIMIZE)
    assert not detect_any_improving_cycle(get_sample("basic").graph)
    assert not detect_any_improving_cycle(Graph())


@pytest.mark.parametrize("weight", [float("inf"), float("-inf"), float("nan"), "inf"])
def test_non_finite_weights_are_rejected(weight):
    g = Graph(["a", "b"])
    with pytest.raises(ValueError):
        g.add_edge("a", "b", weight)
    assert g.edges == ()
