"""
SurfLab - Krümmungs-Farbskala
=============================

Bildet die mittlere Krümmung auf einen Farbton ab:
    negativ:  grün (120°) -> blau (240°)
    positiv:  grün (120°) -> rot (0°)
normiert gegen (mean_min, mean_max), Betrag auf 1 begrenzt.
"""

import colorsys
from typing import Tuple

import numpy as np

from config.defaults import Defaults


def _hsv(hue_degrees: float) -> Tuple[float, float, float]:
    return colorsys.hsv_to_rgb(hue_degrees / 360.0, 1.0, 1.0)


def mean_map_color(value: float, mean_min: float, mean_max: float) -> Tuple[float, float, float]:
    """
    RGB-Farbe (Komponenten in [0, 1]) für einen Krümmungswert.

    Reine Funktion. Ist die zuständige Grenze 0, wird die volle Endfarbe
    verwendet.
    """
    green = Defaults.HUE_GREEN
    if value < 0:
        alpha = min(value / mean_min, 1.0) if mean_min else 1.0
        return _hsv(green * (1.0 - alpha) + Defaults.HUE_BLUE * alpha)
    alpha = min(value / mean_max, 1.0) if mean_max else 1.0
    return _hsv(green * (1.0 - alpha) + Defaults.HUE_RED * alpha)


def mean_map_colors(values, mean_min: float, mean_max: float) -> np.ndarray:
    """(N, 3) Farben für alle Werte."""
    values = np.asarray(values, dtype=np.float64).ravel()
    colors = np.empty((len(values), 3), dtype=np.float64)
    for i, value in enumerate(values):
        colors[i] = mean_map_color(float(value), mean_min, mean_max)
    return colors
