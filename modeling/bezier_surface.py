"""
SurfLab - Bézier-Flächen
========================

Tensorprodukt-Bézier-Flächen mit Auswertung, Ableitungen, Tessellierung und
Graderhöhung.

Mathematisch:
    S(u, v) = Σ_k Σ_l P_kl * U_k(u) * V_l(v)

    ∂^(i+j) S / ∂u^i ∂v^j = Σ_k Σ_l P_kl * U_i(u)[k] * V_j(v)[l]

U und V sind Bernstein-Polynome oder, wenn gewählt und beide Grade ungerade
sind, die trigonometrische Basis aus einer geladenen Tabelle. Deren Ableitungen
sind nach theta = pi*u/2 tabelliert und werden hier in u-Ableitungen
umgerechnet.

Verwendung:
    surface = BezierSurface((3, 3), control_points)
    position, der = surface.evaluate(0.5, 0.5, derivatives=2)
    s_u, s_v = der[1, 0], der[0, 1]

    mesh = surface.tessellate(50)
    surface.elevate_degree_u()
"""

from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from config.defaults import Defaults
from modeling.bernstein import bernstein_derivatives
from modeling.errors import CapabilityExceededError
from modeling.halfedge_mesh import HalfEdgeMesh
from modeling.trigo_basis import TrigonometricBasisTable


class BasisType(Enum):
    """Basisfunktionen für die Flächenauswertung."""
    BERNSTEIN = "bernstein"
    TRIGONOMETRIC = "trigonometric"


class BezierSurface:
    """
    Bézier-Fläche vom Grad (n, m) mit (n+1) x (m+1) Kontrollpunkten.

    Attributes:
        degrees: (n, m)
        control_points: (n+1, m+1, 3) Kontrollnetz, Zeile i = u-Index
        basis: gewählte Basis
        trigo_table: geladene trigonometrische Tabelle (optional)
    """

    def __init__(
        self,
        degrees: Tuple[int, int],
        control_points,
        basis: BasisType = BasisType.BERNSTEIN,
        trigo_table: Optional[TrigonometricBasisTable] = None,
    ):
        n, m = int(degrees[0]), int(degrees[1])
        if n < 0 or m < 0:
            raise ValueError(f"Grade müssen >= 0 sein, sind ({n}, {m})")

        cp = np.array(control_points, dtype=np.float64)
        if cp.size != (n + 1) * (m + 1) * 3:
            raise ValueError(
                f"Grad ({n}, {m}) braucht {(n + 1) * (m + 1)} Kontrollpunkte, "
                f"erhalten {cp.size // 3}"
            )
        self.control_points = cp.reshape(n + 1, m + 1, 3)
        self.basis = basis
        self.trigo_table = trigo_table

    # =========================================================================
    # Eigenschaften
    # =========================================================================

    @property
    def degrees(self) -> Tuple[int, int]:
        return self.control_points.shape[0] - 1, self.control_points.shape[1] - 1

    @property
    def n_control_points(self) -> int:
        return self.control_points.shape[0] * self.control_points.shape[1]

    def uses_trigonometric_basis(self) -> bool:
        """Trigonometrische Basis nur bei ungeraden Graden in beiden Richtungen."""
        n, m = self.degrees
        return self.basis is BasisType.TRIGONOMETRIC and n % 2 == 1 and m % 2 == 1

    def control_point(self, index: int) -> np.ndarray:
        """Kontrollpunkt über flachen, zeilenweisen Index."""
        i, j = divmod(index, self.control_points.shape[1])
        return self.control_points[i, j].copy()

    def move_control_point(self, index: int, position: Sequence[float]) -> None:
        """Setzt einen Kontrollpunkt (flacher, zeilenweiser Index)."""
        if not 0 <= index < self.n_control_points:
            raise IndexError(
                f"Kontrollpunkt {index} existiert nicht ({self.n_control_points} Punkte)"
            )
        i, j = divmod(index, self.control_points.shape[1])
        self.control_points[i, j] = np.asarray(position, dtype=np.float64)

    def copy(self) -> "BezierSurface":
        return BezierSurface(self.degrees, self.control_points.copy(), self.basis, self.trigo_table)

    # =========================================================================
    # Auswertung
    # =========================================================================

    def _basis(self, degree: int, t: float, derivatives: int) -> np.ndarray:
        if self.uses_trigonometric_basis():
            if self.trigo_table is None:
                logger.error("Trigonometrische Basis gewählt, aber keine Tabelle geladen")
                raise CapabilityExceededError("Trigonometric basis table rows", degree, 0)
            coeff = np.array(self.trigo_table.evaluate(degree, t, derivatives))
            if coeff.shape[1] != degree + 1:
                raise CapabilityExceededError(
                    f"Trigonometric basis functions for degree {degree}", degree + 1, coeff.shape[1]
                )
            # Tabelle liefert Ableitungen nach theta = pi*u/2
            return coeff * (np.pi / 2) ** np.arange(derivatives + 1)[:, None]

        # Gerade Grade: Bernstein auch bei gewählter trigonometrischer Basis
        supported = min(derivatives, degree)
        coeff = bernstein_derivatives(degree, t, supported)
        if supported < derivatives:
            # Ableitungen oberhalb des Polynomgrads verschwinden identisch
            coeff = np.vstack([coeff, np.zeros((derivatives - supported, degree + 1))])
        return coeff

    def check_basis(self, derivatives: int = 2) -> None:
        """
        Prüft, ob die gewählte Basis bis zur Ordnung `derivatives` auswertbar ist.

        Raises:
            CapabilityExceededError: Tabelle fehlt oder deckt Grad/Ordnung nicht ab
        """
        n, m = self.degrees
        self._basis(n, 0.0, derivatives)
        self._basis(m, 0.0, derivatives)

    def evaluate(self, u: float, v: float, derivatives: int = 0) -> Tuple[np.ndarray, np.ndarray]:
        """
        Wertet die Fläche und ihre partiellen Ableitungen aus.

        Args:
            u, v: Parameter in [0, 1]
            derivatives: höchste Ableitungsordnung d pro Richtung

        Returns:
            (position, der) mit der[i, j] = ∂^(i+j)S / ∂u^i ∂v^j,
            der hat Form (d+1, d+1, 3)
        """
        n, m = self.degrees
        coeff_u = self._basis(n, u, derivatives)
        coeff_v = self._basis(m, v, derivatives)
        der = np.einsum("ik,klc,jl->ijc", coeff_u, self.control_points, coeff_v)
        return der[0, 0].copy(), der

    def point(self, u: float, v: float) -> np.ndarray:
        return self.evaluate(u, v, 0)[0]

    def tessellate(self, resolution: int = Defaults.TESSELLATION_RESOLUTION) -> HalfEdgeMesh:
        """
        Tastet die Fläche auf einem regelmäßigen resolution x resolution Gitter ab.

        Jede Gitterzelle wird in zwei Dreiecke mit fester Diagonale zerlegt.
        Die Parameterkoordinaten werden pro Vertex gespeichert.
        """
        if resolution < 2:
            raise ValueError(f"Auflösung muss >= 2 sein, ist {resolution}")

        n, m = self.degrees
        params = np.linspace(0.0, 1.0, resolution)
        basis_u = np.array([self._basis(n, t, 0)[0] for t in params])
        basis_v = np.array([self._basis(m, t, 0)[0] for t in params])
        grid = np.einsum("ik,klc,jl->ijc", basis_u, self.control_points, basis_v)

        points = grid.reshape(-1, 3)
        uu, vv = np.meshgrid(params, params, indexing="ij")
        uv = np.column_stack([uu.ravel(), vv.ravel()])

        idx = np.arange(resolution * resolution).reshape(resolution, resolution)
        a = idx[:-1, :-1].ravel()
        b = idx[:-1, 1:].ravel()
        c = idx[1:, :-1].ravel()
        d = idx[1:, 1:].ravel()
        faces = np.empty((2 * len(a), 3), dtype=np.int64)
        faces[0::2] = np.column_stack([a, b, c])
        faces[1::2] = np.column_stack([c, b, d])

        logger.debug(f"Tessellierung: {len(points)} Vertices, {len(faces)} Faces")
        return HalfEdgeMesh(points, faces, uv=uv)

    # =========================================================================
    # Graderhöhung
    # =========================================================================

    @staticmethod
    def _elevate_rows(cp: np.ndarray) -> np.ndarray:
        # Graderhöhung entlang Achse 0: Q_i = i/(n+1) P_{i-1} + (1 - i/(n+1)) P_i
        n = cp.shape[0] - 1
        elevated = np.empty((n + 2,) + cp.shape[1:], dtype=np.float64)
        elevated[0] = cp[0]
        elevated[n + 1] = cp[n]
        for i in range(1, n + 1):
            ratio = i / (n + 1)
            elevated[i] = cp[i - 1] * ratio + cp[i] * (1.0 - ratio)
        return elevated

    def elevate_degree_u(self) -> None:
        """Erhöht den u-Grad um 1. Die Form der Fläche bleibt exakt erhalten."""
        self.control_points = self._elevate_rows(self.control_points)
        logger.info(f"Grad in u erhöht: {self.degrees}")

    def elevate_degree_v(self) -> None:
        """Erhöht den v-Grad um 1. Die Form der Fläche bleibt exakt erhalten."""
        swapped = self._elevate_rows(self.control_points.transpose(1, 0, 2))
        self.control_points = np.ascontiguousarray(swapped.transpose(1, 0, 2))
        logger.info(f"Grad in v erhöht: {self.degrees}")

    def __repr__(self) -> str:
        return f"BezierSurface(degrees={self.degrees}, basis={self.basis.value})"
