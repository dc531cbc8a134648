"""Grouping of feature tracks into moving objects by how they move together."""

from __future__ import annotations

import math
from typing import IO, Iterable, Sequence

from featgroup.tracks import LinkInformation, TrackGraph, TrackInformation

LOG_FILENAME = "TrackManager.log"

Point = tuple[float, float]


def _as_point(point: Sequence[float]) -> Point:
    x, y = point
    return float(x), float(y)


def _distance(p1: Point, p2: Point) -> float:
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


class TrackManager:
    """Groups features into objects from how their tracks move together.

    New points become tracks and are linked to every existing track within
    ``maximum_distance_threshold``. Each link remembers the smallest and
    largest distance ever seen between its two tracks; a link whose range
    exceeds ``feature_segmentation_threshold`` is cut. Tracks tracked for
    ``min_num_frame_tracked`` frames are activated, and connected groups of
    activated tracks form the objects. Tracks that stop moving are removed.
    """

    def __init__(
        self,
        min_num_frame_tracked: int = 4,
        min_distance_moved_required: float = 3,
        maximum_distance_threshold: float = 20,
        feature_segmentation_threshold: float = 50,
        min_distance_between_tracks: float = 20,
        log_track_to_file: bool = False,
    ) -> None:
        self.min_num_frame_tracked = min_num_frame_tracked
        self.min_distance_moved_required = min_distance_moved_required
        self.maximum_distance_threshold = maximum_distance_threshold
        self.feature_segmentation_threshold = feature_segmentation_threshold
        self.min_distance_between_tracks = min_distance_between_tracks
        self.maximum_previous_points_remembered = min_num_frame_tracked
        self.max_num_frames_not_tracked_allowed = min_num_frame_tracked

        self._graph = TrackGraph()
        self._current_time_stamp_id = 0
        self._next_track_id = 0
        self._next_component_id = 0
        self._log_file: IO[str] | None = None
        if log_track_to_file:
            self._log_file = open(LOG_FILENAME, "w", encoding="utf-8")

    # -- context management -------------------------------------------------

    def __enter__(self) -> TrackManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the track log, if one is open."""
        if self._log_file is not None:
            self._log_file.close()
            self._log_file = None

    @property
    def logging(self) -> bool:
        """Whether track positions are written to the log file."""
        return self._log_file is not None

    @property
    def graph(self) -> TrackGraph:
        """The live track graph."""
        return self._graph

    @property
    def current_time_stamp(self) -> int:
        """The index of the current frame."""
        return self._current_time_stamp_id

    # -- adding points ------------------------------------------------------

    def add_points(
        self,
        new_points: Sequence[Sequence[float]],
        assigned_ids: Sequence[int] | None = None,
    ) -> list[int]:
        """Add points as new tracks without checking for duplicates.

        ``assigned_ids`` may give an id per point; points whose entry is
        non-negative are skipped. Returns the ids of all points, new ones
        filled in.
        """
        points = [_as_point(p) for p in new_points]
        ids = list(assigned_ids) if assigned_ids else [-1] * len(points)
        if len(ids) != len(points):
            raise ValueError("assigned_ids must have one entry per point")

        for i, position in enumerate(points):
            if ids[i] >= 0:
                continue
            existing = self._graph.num_tracks()
            track = TrackInformation(
                id=self._next_track_id,
                pos=position,
                activated=False,
                number_of_times_tracked=1,
                last_time_tracked=self._current_time_stamp_id,
            )
            self._next_track_id += 1
            index = self._graph.add_track(track)
            ids[i] = track.id

            for other in range(existing):
                distance = _distance(position, self._graph[other].pos)
                if distance <= self.maximum_distance_threshold:
                    self._graph.add_link(
                        index,
                        other,
                        LinkInformation(
                            min_distance=distance, max_distance=distance, active=False
                        ),
                    )
        return ids

    def find_duplicate_point_ids(
        self, new_points: Sequence[Sequence[float]]
    ) -> list[int]:
        """Return, per point, the id of a track it duplicates or -1.

        A point duplicates the first track for which the absolute value of
        the summed coordinate differences is below
        ``min_distance_between_tracks``.
        """
        result = []
        for point in new_points:
            x, y = _as_point(point)
            found = -1
            for track in self._graph:
                tx, ty = track.pos
                if abs(tx - x + ty - y) < self.min_distance_between_tracks:
                    found = track.id
                    break
            result.append(found)
        return result

    def add_possibly_duplicate_points(
        self, new_points: Sequence[Sequence[float]]
    ) -> list[int]:
        """Add points that do not duplicate a track; return every point's id."""
        return self.add_points(new_points, self.find_duplicate_point_ids(new_points))

    def remove_duplicate_points(
        self, input_points: Sequence[Sequence[float]]
    ) -> list[Point]:
        """Return the points that do not duplicate an existing track."""
        found = self.find_duplicate_point_ids(input_points)
        return [
            _as_point(point)
            for point, track_id in zip(input_points, found)
            if track_id < 0
        ]

    # -- updating -----------------------------------------------------------

    def update_points(
        self,
        new_points: Sequence[Sequence[float]],
        old_points_ids: Sequence[int],
    ) -> None:
        """Move tracks to new positions and refresh grouping.

        ``old_points_ids`` holds the track id of each new position.
        Unknown ids raise KeyError.
        """
        if len(new_points) != len(old_points_ids):
            raise ValueError("new_points and old_points_ids differ in length")
        indices = self._graph.indices_of(old_points_ids)

        for point, index in zip(new_points, indices):
            self._update_point(_as_point(point), index)
        for index in indices:
            self._update_min_max_link_distance(index)

        to_remove = self._find_tracks_not_tracked_for(
            self.max_num_frames_not_tracked_allowed
        )
        self._activate_tracks_tracked_long_enough(indices)
        to_remove |= self._find_tracks_not_moving_enough(
            self.min_distance_moved_required,
            self.maximum_previous_points_remembered - 2,
            indices,
        )
        self.segment_far_away_tracks()

        for track_id in sorted(to_remove):
            self.delete_track(track_id)

        if self._log_file is not None:
            self._log_current_track_info()

    def _update_point(self, new_position: Point, index: int) -> None:
        track = self._graph[index]
        track.previous_displacements.append(_distance(track.pos, new_position))
        if len(track.previous_displacements) > self.maximum_previous_points_remembered:
            track.previous_displacements.popleft()
        track.pos = new_position
        track.number_of_times_tracked += 1
        track.last_time_tracked = self._current_time_stamp_id

    def _update_min_max_link_distance(self, index: int) -> None:
        position = self._graph[index].pos
        for other, link in self._graph.neighbours(index):
            distance = _distance(position, self._graph[other].pos)
            link.min_distance = min(link.min_distance, distance)
            link.max_distance = max(link.max_distance, distance)

    def _find_tracks_not_tracked_for(self, number_of_frames: int) -> set[int]:
        return {
            track.id
            for track in self._graph
            if track.last_time_tracked - self._current_time_stamp_id > number_of_frames
        }

    def _activate_tracks_tracked_long_enough(self, indices: Iterable[int]) -> None:
        for index in indices:
            track = self._graph[index]
            if (
                not track.activated
                and track.number_of_times_tracked >= self.min_num_frame_tracked
            ):
                self._activate_track(index)

    def _activate_track(self, index: int) -> None:
        track = self._graph[index]
        track.activated = True
        track.component_id = -1
        for other, link in self._graph.neighbours(index):
            neighbour = self._graph[other]
            if not neighbour.activated:
                continue
            link.active = True
            # An already-labelled track keeps its component id; component
            # membership itself is derived from the active graph.
            if track.component_id < 0:
                track.component_id = neighbour.component_id
        if track.component_id < 0:
            track.component_id = self._next_component_id
            self._next_component_id += 1

    def _find_tracks_not_moving_enough(
        self,
        min_distance_moved_required: float,
        num_previous_points_to_check: int,
        indices: Iterable[int],
    ) -> set[int]:
        found = set()
        for index in indices:
            track = self._graph[index]
            displacements = list(track.previous_displacements)
            if len(displacements) < num_previous_points_to_check:
                continue
            recent = displacements[len(displacements) - max(num_previous_points_to_check, 0):]
            if num_previous_points_to_check > 0 and any(
                d < min_distance_moved_required for d in recent
            ):
                found.add(track.id)
        return found

    def _log_current_track_info(self) -> None:
        assert self._log_file is not None
        for index, track in enumerate(self._graph):
            x, y = track.pos
            fields = [
                str(self._current_time_stamp_id),
                str(track.id),
                f"{x:g}",
                f"{y:g}",
                "1" if track.activated else "0",
            ]
            fields += [str(self._graph[other].id) for other, _ in self._graph.neighbours(index)]
            self._log_file.write("".join(f"{field} " for field in fields) + "\n")

    # -- graph operations ---------------------------------------------------

    def delete_track(self, track_id: int) -> None:
        """Remove the track with ``track_id``; unknown ids are ignored."""
        self._graph.delete_track(track_id)

    def segment_far_away_tracks(self) -> None:
        """Cut links whose distance range exceeds the segmentation threshold."""
        for index1, index2, link in self._graph.links():
            if link.max_distance - link.min_distance > self.feature_segmentation_threshold:
                self._graph.remove_link(index1, index2)

    def connected_components(self) -> list[list[TrackInformation]]:
        """Group copies of activated tracks into connected components."""
        return self._graph.connected_components()

    def connected_components_map(self) -> tuple[list[int], int]:
        """Return each track's component label and the number of components."""
        return self._graph.connected_components_map()

    def num_tracks(self) -> int:
        """Number of tracks."""
        return self._graph.num_tracks()

    def num_connections(self) -> int:
        """Number of links between tracks, active or not."""
        return self._graph.num_connections()

    def all_tracks_position_and_id(self) -> tuple[list[Point], list[int]]:
        """Return the positions and ids of all tracks."""
        return self._graph.positions_and_ids()

    def advance_to_next_frame(self) -> None:
        """Move on to the next frame."""
        self._current_time_stamp_id += 1

    def tracks(self) -> dict[int, TrackInformation]:
        """Return copies of all tracks keyed by graph index."""
        return self._graph.tracks()

    def edge_information(
        self, vertex_index_1: int, vertex_index_2: int
    ) -> LinkInformation | None:
        """Return a copy of the link between two track indices, or None."""
        link = self._graph.link(vertex_index_1, vertex_index_2)
        if link is None:
            return None
        return LinkInformation(
            id=link.id,
            min_distance=link.min_distance,
            max_distance=link.max_distance,
            active=link.active,
        )

    def copy(self) -> TrackManager:
        """Return an independent copy; the copy never logs."""
        other = TrackManager(
            self.min_num_frame_tracked,
            self.min_distance_moved_required,
            self.maximum_distance_threshold,
            self.feature_segmentation_threshold,
            self.min_distance_between_tracks,
            False,
        )
        other.maximum_previous_points_remembered = self.maximum_previous_points_remembered
        other.max_num_frames_not_tracked_allowed = self.max_num_frames_not_tracked_allowed
        other._graph = self._graph.copy()
        other._current_time_stamp_id = self._current_time_stamp_id
        other._next_track_id = self._next_track_id
        other._next_component_id = self._next_component_id
        return other