"""
SurfLab - Bézier-Kontrollnetz Dateiformat
=========================================

Einfaches Textformat:

    n m                 Grade in u und v
    x y z               (n+1)*(m+1) Zeilen, zeilenweise (i außen, j innen)

Lesen ist atomar: bei jedem Fehler (ungültiges Token, vorzeitiges Dateiende)
wird BezierFormatError geworfen und keine Fläche erzeugt.
Schreiben nutzt repr() für Floats, damit Speichern/Laden exakt ist.
"""

from pathlib import Path
from typing import List, Optional, Union

import numpy as np
from loguru import logger

from modeling.bezier_surface import BasisType, BezierSurface
from modeling.errors import BezierFormatError
from modeling.trigo_basis import TrigonometricBasisTable


def parse_bezier(
    text: str,
    path: Optional[str] = None,
    basis: BasisType = BasisType.BERNSTEIN,
    trigo_table: Optional[TrigonometricBasisTable] = None,
) -> BezierSurface:
    """Parst den Inhalt einer Kontrollnetz-Datei."""
    tokens = text.split()
    if len(tokens) < 2:
        raise BezierFormatError("Kopfzeile 'n m' fehlt", path)

    try:
        n, m = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise BezierFormatError(f"ungültige Grade: {tokens[0]!r} {tokens[1]!r}", path) from None
    if n < 0 or m < 0:
        raise BezierFormatError(f"negative Grade ({n}, {m})", path)

    expected = 3 * (n + 1) * (m + 1)
    coords = tokens[2:2 + expected]
    if len(coords) < expected:
        raise BezierFormatError(
            f"vorzeitiges Dateiende: {expected // 3} Kontrollpunkte erwartet, "
            f"{len(coords) // 3} gefunden",
            path,
        )

    values: List[float] = []
    for position, token in enumerate(coords):
        try:
            values.append(float(token))
        except ValueError:
            raise BezierFormatError(
                f"Kontrollpunkt {position // 3}: ungültige Koordinate {token!r}", path
            ) from None

    return BezierSurface((n, m), np.array(values).reshape(n + 1, m + 1, 3), basis, trigo_table)


def read_bezier(
    path: Union[str, Path],
    basis: BasisType = BasisType.BERNSTEIN,
    trigo_table: Optional[TrigonometricBasisTable] = None,
) -> BezierSurface:
    """
    Liest eine Bézier-Fläche aus einer Datei.

    Raises:
        BezierFormatError: Datei nicht lesbar oder fehlerhaft
    """
    path = str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise BezierFormatError(f"Datei nicht lesbar: {e}", path) from e

    surface = parse_bezier(text, path, basis, trigo_table)
    logger.info(f"Bézier-Fläche geladen: Grad {surface.degrees} aus {path}")
    return surface


def format_bezier(surface: BezierSurface) -> str:
    n, m = surface.degrees
    lines = [f"{n} {m}"]
    for p in surface.control_points.reshape(-1, 3):
        lines.append(" ".join(repr(float(x)) for x in p))
    return "\n".join(lines) + "\n"


def write_bezier(path: Union[str, Path], surface: BezierSurface) -> None:
    """Schreibt das Kontrollnetz im selben Format, das read_bezier liest."""
    Path(path).write_text(format_bezier(surface), encoding="utf-8")
    logger.info(f"Bézier-Fläche gespeichert: Grad {surface.degrees} nach {path}")
