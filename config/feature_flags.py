"""
SurfLab - Feature Flags
=======================

Feature Flags ermöglichen alternative Algorithmen ohne Code-Änderung.
Neue Varianten werden mit Flag=False eingeführt und nach Validierung aktiviert.
"""

from typing import Dict

# Feature Flag Registry
# =====================
# HINWEIS: better_mean_curvature schaltet auf den Rusinkiewicz-Schätzer
# (Least-Squares Fit der zweiten Fundamentalform pro Face). Der einfache
# Dihedralwinkel-Schätzer bleibt Standard.

FEATURE_FLAGS: Dict[str, bool] = {
    # Algorithmen
    "better_mean_curvature": False,  # Rusinkiewicz 2004 statt Dihedralwinkel-Summe

    # Debug-Modi
    "curvature_debug_logging": False,  # Krümmungs-Statistik pro Recompute loggen (verbose)
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()
