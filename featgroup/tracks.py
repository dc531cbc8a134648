"""Undirected graph of feature tracks joined by distance links."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator

from featgroup.components import component_map


@dataclass
class LinkInformation:
    """Distance history between two tracks."""

    id: int = 0
    min_distance: float = 0.0
    max_distance: float = 0.0
    active: bool = False


@dataclass
class TrackInformation:
    """State of one feature track."""

    id: int = 0
    pos: tuple[float, float] = (0.0, 0.0)
    component_id: int = -1
    previous_displacements: deque[float] = field(default_factory=deque)
    number_of_times_tracked: int = 0
    last_time_tracked: int = 0
    activated: bool = False


def _copy_track(track: TrackInformation) -> TrackInformation:
    return replace(track, previous_displacements=deque(track.previous_displacements))


class _Edge:
    __slots__ = ("ends", "link")

    def __init__(self, index1: int, index2: int, link: LinkInformation) -> None:
        self.ends = [index1, index2]
        self.link = link

    def other(self, index: int) -> int:
        return self.ends[1] if self.ends[0] == index else self.ends[0]


class TrackGraph:
    """Tracks held at contiguous indices, joined by undirected links.

    Removing a track shifts the indices of every later track down by one.
    Neighbours of a track are listed in the order their links were added.
    """

    def __init__(self) -> None:
        self._tracks: list[TrackInformation] = []
        self._adjacency: list[list[_Edge]] = []
        self._edges: list[_Edge] = []

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> TrackInformation:
        """Return the live track stored at ``index``."""
        return self._tracks[index]

    def __iter__(self) -> Iterator[TrackInformation]:
        return iter(self._tracks)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._tracks):
            raise IndexError(f"no track at index {index}")

    def _find_edge(self, index1: int, index2: int) -> _Edge | None:
        self._check_index(index1)
        self._check_index(index2)
        for edge in self._adjacency[index1]:
            if edge.other(index1) == index2:
                return edge
        return None

    def add_track(self, track: TrackInformation) -> int:
        """Store a track and return its index."""
        self._tracks.append(track)
        self._adjacency.append([])
        return len(self._tracks) - 1

    def add_link(
        self, index1: int, index2: int, link: LinkInformation | None = None
    ) -> LinkInformation:
        """Join two tracks and return the stored link information."""
        if index1 == index2:
            raise ValueError("a track cannot be linked to itself")
        if self._find_edge(index1, index2) is not None:
            raise ValueError(f"tracks {index1} and {index2} are already linked")
        edge = _Edge(index1, index2, link if link is not None else LinkInformation())
        self._adjacency[index1].append(edge)
        self._adjacency[index2].append(edge)
        self._edges.append(edge)
        return edge.link

    def _drop_edge(self, edge: _Edge) -> None:
        for end in edge.ends:
            self._adjacency[end].remove(edge)
        self._edges.remove(edge)

    def remove_link(self, index1: int, index2: int) -> None:
        """Cut the link between two tracks; KeyError if there is none."""
        edge = self._find_edge(index1, index2)
        if edge is None:
            raise KeyError((index1, index2))
        self._drop_edge(edge)

    def link(self, index1: int, index2: int) -> LinkInformation | None:
        """Return the live link between two tracks, or None."""
        edge = self._find_edge(index1, index2)
        return None if edge is None else edge.link

    def neighbours(self, index: int) -> list[tuple[int, LinkInformation]]:
        """Return (neighbour index, live link) pairs in link order."""
        self._check_index(index)
        return [(edge.other(index), edge.link) for edge in self._adjacency[index]]

    def links(self) -> list[tuple[int, int, LinkInformation]]:
        """Return every link as (index1, index2, live link) in insertion order."""
        return [(edge.ends[0], edge.ends[1], edge.link) for edge in self._edges]

    def delete_track(self, track_id: int) -> bool:
        """Remove the first track with ``track_id`` and its links.

        Returns whether such a track was found.
        """
        for index, track in enumerate(self._tracks):
            if track.id == track_id:
                break
        else:
            return False

        for edge in list(self._adjacency[index]):
            self._drop_edge(edge)
        del self._tracks[index]
        del self._adjacency[index]
        for edge in self._edges:
            edge.ends = [end - 1 if end > index else end for end in edge.ends]
        return True

    def indices_of(self, track_ids: Iterable[int]) -> list[int]:
        """Return the index of each track id; KeyError for unknown ids."""
        by_id = {track.id: index for index, track in enumerate(self._tracks)}
        indices = []
        for track_id in track_ids:
            if track_id not in by_id:
                raise KeyError(f"no track with id {track_id}")
            indices.append(by_id[track_id])
        return indices

    def num_tracks(self) -> int:
        """Number of tracks."""
        return len(self._tracks)

    def num_connections(self) -> int:
        """Number of links, active or not."""
        return len(self._edges)

    def tracks(self) -> dict[int, TrackInformation]:
        """Return copies of all tracks keyed by index."""
        return {index: _copy_track(track) for index, track in enumerate(self._tracks)}

    def positions_and_ids(self) -> tuple[list[tuple[float, float]], list[int]]:
        """Return the positions and ids of all tracks in index order."""
        return [track.pos for track in self._tracks], [track.id for track in self._tracks]

    def connected_components_map(self) -> tuple[list[int], int]:
        """Label activated tracks with component ids.

        Inactive tracks get ``num_tracks()``. Returns labels and the number
        of components.
        """
        adjacency = [
            [edge.other(index) for edge in edges]
            for index, edges in enumerate(self._adjacency)
        ]
        return component_map(adjacency, [track.activated for track in self._tracks])

    def connected_components(self) -> list[list[TrackInformation]]:
        """Group copies of activated tracks by component."""
        labels, count = self.connected_components_map()
        components: list[list[TrackInformation]] = [[] for _ in range(count)]
        for track, label in zip(self._tracks, labels):
            if label < len(labels):
                components[label].append(_copy_track(track))
        return components

    def copy(self) -> TrackGraph:
        """Return an independent deep copy."""
        other = TrackGraph()
        for track in self._tracks:
            other.add_track(_copy_track(track))
        for edge in self._edges:
            other.add_link(edge.ends[0], edge.ends[1], replace(edge.link))
        return other