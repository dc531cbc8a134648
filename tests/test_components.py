import random

import pytest

from featgroup.components import component_map


def _undirected(count, edges):
    adjacency = [[] for _ in range(count)]
    for a, b in edges:
        adjacency[a].append(b)
        adjacency[b].append(a)
    return adjacency


def test_empty_graph():
    assert component_map([], []) == ([], 0)


def test_inactive_vertices_get_out_of_range_label():
    adjacency = _undirected(3, [(0, 1), (1, 2)])
    labels, num = component_map(adjacency, [False, False, False])
    assert num == 0
    assert labels == [3, 3, 3]


def test_connected_active_vertices_share_label():
    adjacency = _undirected(4, [(0, 1), (1, 2), (2, 3)])
    labels, num = component_map(adjacency, [True] * 4)
    assert num == 1
    assert labels == [0, 0, 0, 0]


def test_separate_active_vertices_get_own_labels_in_order():
    adjacency = _undirected(3, [])
    labels, num = component_map(adjacency, [True, True, True])
    assert num == 3
    assert labels == [0, 1, 2]


def test_inactive_vertex_breaks_component():
    adjacency = _undirected(3, [(0, 1), (1, 2)])
    labels, num = component_map(adjacency, [True, False, True])
    assert num == 2
    assert labels[1] == 3
    assert labels[0] != labels[2]
    assert sorted([labels[0], labels[2]]) == [0, 1]


def test_mismatched_lengths_raise():
    with pytest.raises(ValueError):
        component_map([[], []], [True])


def test_bad_neighbour_raises():
    with pytest.raises(IndexError):
        component_map([[5]], [True])


def test_random_graph_invariants():
    rng = random.Random(42)
    for _ in range(50):
        count = rng.randint(1, 12)
        edges = [
            (rng.randrange(count), rng.randrange(count))
            for _ in range(rng.randint(0, 20))
        ]
        activated = [rng.random() < 0.6 for _ in range(count)]
        labels, num = component_map(_undirected(count, edges), activated)

        assert len(labels) == count
        for label, active in zip(labels, activated):
            if active:
                assert 0 <= label < num
            else:
                assert label == count
        assert sorted({label for label in labels if label < count}) == list(range(num))


def test_fully_active_graph_matches_reachability():
    rng = random.Random(3)
    for _ in range(30):
        count = rng.randint(1, 10)
        edges = [
            (rng.randrange(count), rng.randrange(count))
            for _ in range(rng.randint(0, 12))
        ]
        adjacency = _undirected(count, edges)
        labels, _ = component_map(adjacency, [True] * count)
        for a, b in edges:
            assert labels[a] == labels[b]