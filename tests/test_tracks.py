from collections import deque

import pytest

from featgroup.tracks import LinkInformation, TrackGraph, TrackInformation


def _graph(n, activated=None):
    graph = TrackGraph()
    for i in range(n):
        graph.add_track(
            TrackInformation(
                id=10 + i,
                pos=(float(i), float(i)),
                activated=bool(activated[i]) if activated else False,
            )
        )
    return graph


def test_add_track_returns_consecutive_indices():
    graph = TrackGraph()
    assert graph.add_track(TrackInformation(id=5)) == 0
    assert graph.add_track(TrackInformation(id=6)) == 1
    assert graph.num_tracks() == 2
    assert graph[1].id == 6


def test_track_defaults():
    track = TrackInformation()
    assert track.component_id == -1
    assert track.activated is False
    assert list(track.previous_displacements) == []


def test_add_and_query_link_is_symmetric():
    graph = _graph(3)
    stored = graph.add_link(0, 2, LinkInformation(min_distance=1.5, max_distance=2.5))
    assert graph.link(0, 2) is stored
    assert graph.link(2, 0) is stored
    assert graph.link(0, 1) is None
    assert graph.num_connections() == 1


def test_add_link_without_information_uses_defaults():
    graph = _graph(2)
    link = graph.add_link(0, 1)
    assert link == LinkInformation()


def test_duplicate_and_self_links_rejected():
    graph = _graph(2)
    graph.add_link(0, 1)
    with pytest.raises(ValueError):
        graph.add_link(1, 0)
    with pytest.raises(ValueError):
        graph.add_link(0, 0)


def test_link_with_bad_index_raises():
    graph = _graph(2)
    with pytest.raises(IndexError):
        graph.link(0, 5)


def test_remove_link():
    graph = _graph(2)
    graph.add_link(0, 1)
    graph.remove_link(1, 0)
    assert graph.link(0, 1) is None
    assert graph.num_connections() == 0
    with pytest.raises(KeyError):
        graph.remove_link(0, 1)


def test_neighbours_in_link_order():
    graph = _graph(4)
    graph.add_link(1, 3)
    graph.add_link(1, 0)
    graph.add_link(2, 1)
    assert [index for index, _ in graph.neighbours(1)] == [3, 0, 2]


def test_links_in_insertion_order_and_live():
    graph = _graph(3)
    graph.add_link(2, 0)
    graph.add_link(0, 1)
    listed = graph.links()
    assert [(a, b) for a, b, _ in listed] == [(2, 0), (0, 1)]
    listed[0][2].active = True
    assert graph.link(0, 2).active is True


def test_delete_track_shifts_indices_and_links():
    graph = _graph(4)
    graph.add_link(0, 1)
    graph.add_link(2, 3)
    graph.add_link(1, 3)
    assert graph.delete_track(11) is True
    assert graph.num_tracks() == 3
    assert graph.positions_and_ids()[1] == [10, 12, 13]
    assert graph.num_connections() == 1
    assert graph.link(1, 2) is not None
    assert graph.link(0, 1) is None


def test_delete_unknown_track_returns_false():
    graph = _graph(2)
    assert graph.delete_track(99) is False
    assert graph.num_tracks() == 2


def test_indices_of():
    graph = _graph(3)
    assert graph.indices_of([12, 10]) == [2, 0]
    with pytest.raises(KeyError):
        graph.indices_of([42])


def test_tracks_returns_copies():
    graph = _graph(2)
    graph[0].previous_displacements.append(1.0)
    copies = graph.tracks()
    assert sorted(copies) == [0, 1]
    copies[0].previous_displacements.append(2.0)
    copies[0].activated = True
    assert list(graph[0].previous_displacements) == [1.0]
    assert graph[0].activated is False


def test_positions_and_ids():
    graph = _graph(2)
    positions, ids = graph.positions_and_ids()
    assert positions == [(0.0, 0.0), (1.0, 1.0)]
    assert ids == [10, 11]


def test_components_map_skips_inactive():
    graph = _graph(4, activated=[1, 1, 0, 1])
    graph.add_link(0, 1)
    graph.add_link(1, 2)
    labels, count = graph.connected_components_map()
    assert count == 2
    assert labels[0] == labels[1]
    assert labels[2] == graph.num_tracks()
    assert labels[3] != labels[0]


def test_connected_components_groups_tracks():
    graph = _graph(5, activated=[1, 0, 1, 1, 1])
    graph.add_link(0, 2)
    graph.add_link(3, 4)
    components = graph.connected_components()
    groups = sorted(sorted(t.id for t in component) for component in components)
    assert groups == [[10, 12], [13, 14]]


def test_no_components_when_nothing_active():
    graph = _graph(3)
    graph.add_link(0, 1)
    assert graph.connected_components() == []


def test_copy_is_independent():
    graph = _graph(3)
    graph[0].previous_displacements.extend([1.0, 2.0])
    graph.add_link(0, 2, LinkInformation(min_distance=1.0, max_distance=3.0))
    graph.add_link(0, 1)
    clone = graph.copy()
    assert clone.tracks() == graph.tracks()
    assert [(a, b, l) for a, b, l in clone.links()] == [
        (a, b, l) for a, b, l in graph.links()
    ]
    assert [i for i, _ in clone.neighbours(0)] == [2, 1]
    clone.link(0, 2).max_distance = 9.0
    clone[0].previous_displacements.append(3.0)
    clone.delete_track(11)
    assert graph.link(0, 2).max_distance == 3.0
    assert graph[0].previous_displacements == deque([1.0, 2.0])
    assert graph.num_tracks() == 3


def test_len_and_iter():
    graph = _graph(3)
    assert len(graph) == 3
    assert [t.id for t in graph] == [10, 11, 12]