"""Feature track grouping, descriptor distances, colour histograms and coordinate helpers."""

__version__ = "0.1.0"