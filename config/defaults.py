"""
SurfLab - Standardwerte
=======================

Voreinstellungen für Tessellierung, Krümmungs-Farbskala und Fairing.

Verwendung:
    from config.defaults import Defaults

    resolution = Defaults.TESSELLATION_RESOLUTION
"""


class Defaults:
    """Zentrale Standardwerte für SurfLab."""

    # =========================================================================
    # Bézier-Flächen
    # =========================================================================

    # Abtastgitter pro Richtung (resolution x resolution Vertices)
    TESSELLATION_RESOLUTION = 50

    # Höchste Ableitungsordnung in der trigonometrischen Basistabelle
    TRIGO_DERIVATIVES = 2

    # =========================================================================
    # Krümmungs-Farbskala
    # =========================================================================

    # Anteil der Werte, der an jedem Ende der sortierten Verteilung
    # abgeschnitten wird (5%)
    CUTOFF_RATIO = 0.05

    # Farbtöne (HSV, Grad)
    HUE_RED = 0.0
    HUE_GREEN = 120.0
    HUE_BLUE = 240.0

    # =========================================================================
    # Fairing
    # =========================================================================

    FAIRING_BATCHES = 10
    FAIRING_ITERATIONS_PER_BATCH = 10
    FAIRING_RELAXATION = 0.1
