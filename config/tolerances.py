"""
SurfLab - Zentralisierte Toleranz-Konfiguration
===============================================

Alle numerischen Toleranzen an einem Ort.

Toleranz-Philosophie:
- Degenerierte Geometrie wird NIE als Fehler behandelt, sondern mit
  neutralen Ersatzwerten (Nenner 1, Normalisierung überspringen) abgefangen.
- Vergleichs-Toleranzen gelten für Tests und Validierung, nicht für die
  Algorithmen selbst.

Verwendung:
    from config.tolerances import Tolerances

    eps = Tolerances.EPSILON_MATH
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für SurfLab.

    Kategorien:
    - EPSILON_*: Numerische Stabilität
    - COMPARE_*: Vergleiche in Tests und Validierung
    """

    # =========================================================================
    # Mathematische Epsilon-Werte (Numerische Stabilität)
    # =========================================================================

    # Vermeidet Division durch Null
    EPSILON_MATH = 1e-12

    # Normal-Vektor Validierung (Länge gilt als 0)
    EPSILON_NORMAL = 1e-12

    # Winkel: sin(alpha) unterhalb gilt das Dreieck als degeneriert
    EPSILON_ANGLE = 1e-12

    # =========================================================================
    # Vergleichs-Toleranzen
    # =========================================================================

    # Partition of Unity der Basisfunktionen
    COMPARE_BASIS_SUM = 1e-12

    # Flächen vor/nach Graderhöhung
    COMPARE_ELEVATION = 1e-9


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    if not (0.0 < Tolerances.EPSILON_MATH <= 1e-6):
        issues.append(f"EPSILON_MATH außerhalb sinnvoller Grenzen: {Tolerances.EPSILON_MATH}")

    if not (0.0 < Tolerances.EPSILON_NORMAL <= 1e-6):
        issues.append(f"EPSILON_NORMAL außerhalb sinnvoller Grenzen: {Tolerances.EPSILON_NORMAL}")

    if Tolerances.COMPARE_ELEVATION < Tolerances.EPSILON_MATH:
        issues.append(
            f"COMPARE_ELEVATION ({Tolerances.COMPARE_ELEVATION}) strenger als "
            f"EPSILON_MATH ({Tolerances.EPSILON_MATH})"
        )

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
