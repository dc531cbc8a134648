"""Normalised colour histogram descriptor."""

from __future__ import annotations

from typing import Iterable

import numpy as np


class NCHDescriptorExtractor:
    """Builds a brightness-normalised 3-D colour histogram of an image.

    Each channel of a pixel is divided by the sum of its channels and then
    quantised into ``bins`` levels. Pixels holding -1 in any channel are
    skipped. The histogram is normalised to sum to one.
    """

    def __init__(self, bins: int = 8) -> None:
        if bins < 1:
            raise ValueError("bins must be at least 1")
        self._bins = bins

    @property
    def bins(self) -> int:
        """Number of bins per channel."""
        return self._bins

    def compute_dense(self, image) -> np.ndarray:
        """Return the (bins, bins, bins) float32 histogram of a 3-channel image."""
        array = np.asarray(image)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError("image must have exactly three channels")

        pixels = array.reshape(-1, 3).astype(np.float32)
        pixels = pixels[~np.any(pixels == -1, axis=1)]
        if len(pixels) == 0:
            raise ValueError("image has no valid pixels")

        sums = pixels.sum(axis=1, dtype=np.float32)
        nonzero = sums != 0
        pixels[nonzero] /= sums[nonzero, None]

        bin_max = self._bins - 1
        indices = np.floor(
            pixels * np.float32(bin_max) + np.float32(0.5)
        ).astype(np.int64)
        if (indices < 0).any() or (indices > bin_max).any():
            raise ValueError("pixel values fall outside the histogram range")

        histogram = np.zeros((self._bins,) * 3, dtype=np.float32)
        np.add.at(histogram, (indices[:, 0], indices[:, 1], indices[:, 2]), 1.0)
        return histogram / np.float32(len(pixels))

    def compute_dense_many(self, images: Iterable) -> list[np.ndarray]:
        """Return the histogram of each image, in order."""
        return [self.compute_dense(image) for image in images]