"""Splitting a matrix into horizontal parts."""

from __future__ import annotations

from enum import Enum

import numpy as np


class SplitMode(Enum):
    """How a matrix is split."""

    NONE = "none"
    UL = "upper_lower"
    ULF = "upper_lower_foot"


def split_mat(mat, mode: SplitMode | str) -> list[np.ndarray]:
    """Split ``mat`` by rows according to ``mode``.

    NONE returns the matrix whole. UL returns the top and bottom halves,
    the top one taking the extra row when the count is odd. The returned
    parts are views of the input.
    """
    mode = SplitMode(mode)
    array = np.asarray(mat)
    if mode is SplitMode.NONE:
        return [array]
    if mode is SplitMode.UL:
        split_index = int(np.floor(array.shape[0] / 2.0 + 0.5))
        return [array[:split_index], array[split_index:]]
    raise ValueError("top/bottom/foot splitting is not supported")