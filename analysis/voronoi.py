"""
SurfLab - Voronoi-Gewichte
==========================

Flächenanteil eines Dreiecks, der dem Ziel-Vertex einer Half-Edge zugeordnet
wird (Meyer et al. 2003, "mixed" Voronoi-Fläche).

Für die eingehende Half-Edge h (P -> V) mit next(h) (V -> Q) und prev(h) (Q -> P):
    c² = |PV|², b² = |VQ|², a² = |QP|²  (a liegt gegenüber von V)
    alpha = Winkel bei V, beta = Winkel bei P, gamma = Winkel bei Q

- Stumpfer Winkel bei Q oder P: Mittelpunkt-Aufteilung über tan(alpha)
- Stumpfer Winkel bei V: Dreiecksfläche minus die Anteile von P und Q
- Sonst: echte Voronoi-Fläche über den Umkreisradius r² = a² / (4 sin² alpha)

Rand-Half-Edges (ohne Face) haben Gewicht 0.
"""

import math

import numpy as np

from config.tolerances import Tolerances
from modeling.halfedge_mesh import HalfEdgeMesh


def _voronoi_part(r2: float, x2: float) -> float:
    return 0.125 * math.sqrt(x2) * math.sqrt(max(4.0 * r2 - x2, 0.0))


def voronoi_weight(mesh: HalfEdgeMesh, halfedge: int) -> float:
    """
    Voronoi-Flächenanteil am Ziel-Vertex von `halfedge`.

    Returns:
        Nicht-negativer Flächenanteil, 0 für Rand-Half-Edges
    """
    if mesh.is_boundary(halfedge):
        return 0.0

    nxt = mesh.next_halfedge(halfedge)
    prv = mesh.prev_halfedge(halfedge)
    c2 = float(np.dot(mesh.edge_vector(halfedge), mesh.edge_vector(halfedge)))
    b2 = float(np.dot(mesh.edge_vector(nxt), mesh.edge_vector(nxt)))
    a2 = float(np.dot(mesh.edge_vector(prv), mesh.edge_vector(prv)))
    alpha = mesh.sector_angle(halfedge)

    if a2 + b2 < c2:                # stumpf bei gamma
        weight = 0.125 * b2 * math.tan(alpha)
    elif a2 + c2 < b2:              # stumpf bei beta
        weight = 0.125 * c2 * math.tan(alpha)
    elif b2 + c2 < a2:              # stumpf bei alpha
        b, c = math.sqrt(b2), math.sqrt(c2)
        total_area = 0.5 * b * c * math.sin(alpha)
        beta = mesh.sector_angle(prv)
        gamma = mesh.sector_angle(nxt)
        weight = total_area - 0.125 * (b2 * math.tan(gamma) + c2 * math.tan(beta))
    else:
        sin_alpha = math.sin(alpha)
        if sin_alpha < Tolerances.EPSILON_ANGLE:
            return 0.0
        r2 = 0.25 * a2 / sin_alpha ** 2  # quadrierter Umkreisradius
        weight = _voronoi_part(r2, b2) + _voronoi_part(r2, c2)

    return max(weight, 0.0)


def voronoi_weights(mesh: HalfEdgeMesh) -> np.ndarray:
    """(H,) Voronoi-Gewichte aller Half-Edges."""
    return np.array([voronoi_weight(mesh, h) for h in range(mesh.n_halfedges)], dtype=np.float64)


def voronoi_vertex_areas(mesh: HalfEdgeMesh) -> np.ndarray:
    """(N,) Summe der Voronoi-Gewichte über die eingehenden Half-Edges jedes Vertex."""
    areas = np.zeros(mesh.n_vertices, dtype=np.float64)
    np.add.at(areas, mesh.he_to, voronoi_weights(mesh))
    return areas
