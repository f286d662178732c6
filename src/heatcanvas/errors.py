"""Exceptions raised while validating or composing a heatmap."""

from __future__ import annotations


class HeatcanvasError(ValueError):
    """Base class for every error raised by heatcanvas."""


class ConfigurationError(HeatcanvasError):
    """The configuration is inconsistent with itself or with the matrix.

    Raised for non-bijective permutations, series whose length does not
    match their axis, text matrices of the wrong shape, two panels on the
    same side, and sizes or margins that are negative or do not fit.
    """


class DataError(HeatcanvasError):
    """The matrix cannot satisfy a requested computation.

    Raised when an aggregate ordering must include missing values and a
    whole row or column is missing.
    """
