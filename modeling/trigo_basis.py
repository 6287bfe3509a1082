"""
SurfLab - Trigonometrische Basis
================================

Alternative Basis für Bézier-Flächen mit ungeraden Graden, aus einer
Koeffiziententabelle geladen.

Jedes Basis-Polynom ist eine Summe von Termen coeff * a^ea * b^eb * c^ec mit
    S = sin(pi*u/2), C = cos(pi*u/2)
    a = 1 - S, b = S + C - 1, c = 1 - C

Die Ordnungen 1 und 2 sind Ableitungen nach theta = pi*u/2 (nicht nach u).

Dateiformat (Whitespace-getrennte Integer):
    R                       Anzahl Zeilen (Zeile r = Grad r+2)
    pro Zeile:   P          Anzahl Polynome
    pro Polynom, pro Ableitungsordnung 0..2:
                 T          Anzahl Terme, danach T Quadrupel (ea, eb, ec, coeff)

Die Tabelle ist nach dem Laden unveränderlich. Es gibt keinen globalen
Zustand: wer die Basis braucht, bekommt die Tabelle übergeben.

Verwendung:
    table = TrigonometricBasisTable.load("trigo-table.txt")
    coeffs = table.evaluate(3, 0.25, 2)   # [werte, 1. abl., 2. abl.]
"""

import math
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np
from loguru import logger

from config.defaults import Defaults
from modeling.errors import CapabilityExceededError, TrigoTableFormatError

Term = Tuple[int, int, int, int]
Poly = Tuple[Term, ...]
Row = Tuple[Poly, ...]


class _TokenStream:
    """Liefert Integer-Tokens und meldet Formatfehler mit Position."""

    def __init__(self, text: str, path: Optional[str] = None):
        self._tokens: Iterator[str] = iter(text.split())
        self._path = path
        self._index = 0

    def next_int(self, what: str) -> int:
        try:
            token = next(self._tokens)
        except StopIteration:
            raise TrigoTableFormatError(
                f"unerwartetes Dateiende bei Token {self._index} ({what})", self._path
            ) from None
        self._index += 1
        try:
            return int(token)
        except ValueError:
            raise TrigoTableFormatError(
                f"Token {self._index} ({what}) ist keine Ganzzahl: {token!r}", self._path
            ) from None

    def next_count(self, what: str) -> int:
        value = self.next_int(what)
        if value < 0:
            raise TrigoTableFormatError(f"negative Anzahl {value} für {what}", self._path)
        return value


def _eval_poly(poly: Poly, a: float, b: float, c: float) -> float:
    result = 0.0
    for ea, eb, ec, coeff in poly:
        result += coeff * a ** ea * b ** eb * c ** ec
    return result


class TrigonometricBasisTable:
    """
    Unveränderliche Koeffiziententabelle der trigonometrischen Basis.

    Attributes:
        rows: Anzahl Tabellenzeilen (Grade 2 .. rows+1)
    """

    DERIVATIVES = Defaults.TRIGO_DERIVATIVES

    def __init__(self, triangles: Tuple[Tuple[Row, ...], ...]):
        # triangles[d][r][p] = Polynom p der Zeile r für Ableitungsordnung d
        if len(triangles) != self.DERIVATIVES + 1:
            raise ValueError(
                f"Tabelle braucht {self.DERIVATIVES + 1} Ableitungsordnungen, hat {len(triangles)}"
            )
        self._triangles = triangles

    # --- Laden ---

    @classmethod
    def load(cls, path: Union[str, Path]) -> "TrigonometricBasisTable":
        """
        Lädt die Tabelle aus einer Datei.

        Raises:
            TrigoTableFormatError: Datei nicht lesbar oder Token-Folge ungültig
        """
        path = str(path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TrigoTableFormatError(f"Datei nicht lesbar: {e}", path) from e
        table = cls.parse(text, path=path)
        logger.info(f"Trigonometrische Basis geladen: {table.rows} Zeilen aus {path}")
        return table

    @classmethod
    def parse(cls, text: str, path: Optional[str] = None) -> "TrigonometricBasisTable":
        """Parst den Tabelleninhalt. Bei Fehlern wird kein Objekt erzeugt."""
        stream = _TokenStream(text, path)
        n_rows = stream.next_count("Zeilenanzahl")
        per_order: List[List[Row]] = [[] for _ in range(cls.DERIVATIVES + 1)]

        for r in range(n_rows):
            n_polys = stream.next_count(f"Polynomanzahl in Zeile {r}")
            row: List[List[Poly]] = [[] for _ in range(cls.DERIVATIVES + 1)]
            for p in range(n_polys):
                for d in range(cls.DERIVATIVES + 1):
                    n_terms = stream.next_count(f"Termanzahl (Zeile {r}, Polynom {p}, Ordnung {d})")
                    terms = []
                    for _ in range(n_terms):
                        terms.append((
                            stream.next_int("Exponent a"),
                            stream.next_int("Exponent b"),
                            stream.next_int("Exponent c"),
                            stream.next_int("Koeffizient"),
                        ))
                    row[d].append(tuple(terms))
            for d in range(cls.DERIVATIVES + 1):
                per_order[d].append(tuple(row[d]))

        return cls(tuple(tuple(rows) for rows in per_order))

    # --- Abfragen ---

    @property
    def rows(self) -> int:
        return len(self._triangles[0])

    @property
    def max_degree(self) -> int:
        return self.rows + 1

    def supports_degree(self, n: int) -> bool:
        return 2 <= n <= self.rows + 1

    def evaluate(self, n: int, u: float, derivatives: int = 0) -> List[np.ndarray]:
        """
        Wertet alle Basis-Polynome für Grad n an der Stelle u aus.

        Args:
            n: Flächengrad (Tabellenzeile n-2)
            u: Parameter in [0, 1]
            derivatives: höchste Ableitungsordnung (<= 2)

        Returns:
            Liste mit derivatives+1 Arrays, eines pro Ableitungsordnung

        Raises:
            CapabilityExceededError: Ordnung > 2 oder Grad außerhalb [2, rows+1]
        """
        if derivatives > self.DERIVATIVES:
            logger.error(f"Trigonometrische Basis: Ableitung {derivatives} > {self.DERIVATIVES}")
            raise CapabilityExceededError(
                "Trigonometric basis derivative order", derivatives, self.DERIVATIVES
            )
        if not self.supports_degree(n):
            logger.error(f"Trigonometrische Basis: Grad {n} nicht in Tabelle (2..{self.rows + 1})")
            raise CapabilityExceededError(
                "Trigonometric basis degree", n, f"2..{self.rows + 1}"
            )

        s = math.sin(math.pi * u / 2)
        c_ = math.cos(math.pi * u / 2)
        a, b, c = 1.0 - s, s + c_ - 1.0, 1.0 - c_

        return [
            np.array([_eval_poly(poly, a, b, c) for poly in self._triangles[d][n - 2]],
                     dtype=np.float64)
            for d in range(derivatives + 1)
        ]

    def __repr__(self) -> str:
        return f"TrigonometricBasisTable(rows={self.rows})"
