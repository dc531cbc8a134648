"""Distances between 1xN descriptors."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class Distance(ABC):
    """A callable that measures how far apart two descriptors are."""

    @abstractmethod
    def __call__(self, descriptor1, descriptor2) -> float:
        """Return the distance between two descriptors."""


def _difference(descriptor1, descriptor2) -> np.ndarray:
    first = np.asarray(descriptor1, dtype=np.float64)
    second = np.asarray(descriptor2, dtype=np.float64)
    if first.shape != second.shape:
        raise ValueError(
            f"descriptor shapes differ: {first.shape} and {second.shape}"
        )
    return first - second


class L1Distance(Distance):
    """Sum of absolute differences."""

    def __call__(self, descriptor1, descriptor2) -> float:
        return float(np.abs(_difference(descriptor1, descriptor2)).sum())


class L2Distance(Distance):
    """Euclidean distance."""

    def __call__(self, descriptor1, descriptor2) -> float:
        return float(np.sqrt(np.square(_difference(descriptor1, descriptor2)).sum()))


def _first_row(descriptor) -> np.ndarray:
    array = np.asarray(descriptor)
    if array.dtype != np.float32:
        raise TypeError("descriptor must be a float32 array")
    return np.atleast_2d(array)[0].astype(np.float64)


class PearsonCoefficientDistance(Distance):
    """One minus the absolute Pearson correlation of the first rows.

    Both descriptors must be float32 with the same number of columns.
    Constant descriptors have no defined correlation and give nan or inf.
    """

    def __call__(self, descriptor1, descriptor2) -> float:
        x = _first_row(descriptor1)
        y = _first_row(descriptor2)
        if len(x) != len(y):
            raise ValueError(
                f"descriptors have {len(x)} and {len(y)} columns"
            )
        if len(x) == 0:
            raise ValueError("descriptors are empty")

        n = np.float64(len(x))
        sum_x = x.sum()
        sum_y = y.sum()
        with np.errstate(divide="ignore", invalid="ignore"):
            numerator = (x * y).sum() - sum_x * sum_y / n
            denominator = np.sqrt(
                ((x * x).sum() - sum_x**2 / n) * ((y * y).sum() - sum_y**2 / n)
            )
            correlation = numerator / denominator
        return float(1.0 - abs(correlation))