"""Text matrix I/O, small container helpers and homography coordinate conversion."""

from __future__ import annotations

import os
from typing import Hashable, Iterable, Mapping, Sequence, TypeVar

import numpy as np

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
T = TypeVar("T")

_COLUMN_SEPARATORS = " \t"
_FLOAT_EPSILON = float(np.finfo(np.float32).eps)


def loadtxt(filename: str | os.PathLike[str]) -> np.ndarray:
    """Read a space/tab separated file of floats into a float32 matrix.

    The number of columns is one more than the number of spaces and tabs on
    the first line, so trailing whitespace on that line counts as extra
    columns. Raises ValueError when the values do not fill whole rows or a
    value is not a number.
    """
    with open(filename, encoding="utf-8") as handle:
        text = handle.read()

    first_line = text.split("\n", 1)[0]
    number_of_columns = 1 + sum(ch in _COLUMN_SEPARATORS for ch in first_line)

    try:
        data = [float(token) for token in text.split()]
    except ValueError as exc:
        raise ValueError(f"{filename}: non-numeric value: {exc}") from exc

    if len(data) % number_of_columns != 0:
        raise ValueError(
            f"{filename}: {len(data)} values do not fill rows of "
            f"{number_of_columns} columns"
        )

    number_of_rows = len(data) // number_of_columns
    return np.array(data, dtype=np.float32).reshape(number_of_rows, number_of_columns)


def write_txt(filename: str | os.PathLike[str], mat: np.ndarray) -> None:
    """Write a single-channel float32 matrix as tab separated text.

    Every value is followed by a tab and every row by a newline. Values are
    written with six significant digits.
    """
    array = np.asarray(mat)
    if array.dtype != np.float32 or array.ndim != 2:
        raise TypeError("write_txt needs a two-dimensional float32 matrix")

    with open(filename, "w", encoding="utf-8") as handle:
        for row in array:
            handle.write("".join(f"{float(value):.6g}\t" for value in row))
            handle.write("\n")


def indexing(values: Sequence[T], indices: Iterable[int]) -> list[T]:
    """Return the elements of ``values`` picked in the order given by ``indices``.

    ``indexing([4, 1, 2, 5, 3], [2, 3, 4, 1, 0])`` gives ``[2, 5, 3, 1, 4]``.
    """
    picked = [values[i] for i in indices]
    if len(picked) > len(values):
        raise ValueError("more indices than values")
    return picked


def lists_to_map(keys: Sequence[K], values: Sequence[V]) -> dict[K, V]:
    """Pair corresponding keys and values into a dict ordered by key.

    A key that appears more than once keeps the value paired with its last
    occurrence. Extra values beyond the number of keys are ignored.
    """
    if len(values) < len(keys):
        raise ValueError("fewer values than keys")
    mapping: dict[K, V] = {}
    for key, value in zip(keys, values):
        mapping[key] = value
    return dict(sorted(mapping.items(), key=lambda item: item[0]))


def _homography(matrix: np.ndarray) -> np.ndarray:
    homography = np.asarray(matrix, dtype=np.float64)
    if homography.shape != (3, 3):
        raise ValueError("homography matrix must be 3x3")
    return homography


def _as_points(points: Iterable[Sequence[float]] | np.ndarray) -> np.ndarray:
    array = np.asarray(points, dtype=np.float64)
    if array.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError("points must be a sequence of (x, y) pairs")
    return array


def _perspective_transform(points: np.ndarray, homography: np.ndarray) -> np.ndarray:
    homogeneous = np.hstack([points, np.ones((len(points), 1))]) @ homography.T
    w = homogeneous[:, 2]
    scale = np.zeros_like(w)
    valid = np.abs(w) > _FLOAT_EPSILON
    scale[valid] = 1.0 / w[valid]
    return (homogeneous[:, :2] * scale[:, None]).astype(np.float32)


def _inverse(homography: np.ndarray) -> np.ndarray:
    try:
        return np.linalg.inv(homography)
    except np.linalg.LinAlgError:
        return np.zeros((3, 3), dtype=np.float64)


def convert_to_world_coordinate(
    points_in_image_coordinate: Iterable[Sequence[float]] | np.ndarray,
    homography_matrix: np.ndarray,
) -> np.ndarray:
    """Map image points to world points with an image-to-world homography.

    Returns an (N, 2) float32 array. A point whose projective scale is zero
    maps to (0, 0).
    """
    return _perspective_transform(
        _as_points(points_in_image_coordinate), _homography(homography_matrix)
    )


def convert_to_image_coordinate(
    points_in_world_coordinate: Iterable[Sequence[float]] | np.ndarray,
    homography_matrix: np.ndarray,
) -> np.ndarray:
    """Map world points back to image points.

    ``homography_matrix`` maps image to world coordinates and is inverted
    before use; a singular matrix inverts to zeros.
    """
    return _perspective_transform(
        _as_points(points_in_world_coordinate),
        _inverse(_homography(homography_matrix)),
    )


def convert_point_to_image_coordinate(
    point_in_world_coordinate: Sequence[float],
    homography_matrix: np.ndarray,
) -> tuple[float, float]:
    """Map a single world point to image coordinates."""
    result = convert_to_image_coordinate([point_in_world_coordinate], homography_matrix)
    return float(result[0, 0]), float(result[0, 1])