"""
SurfLab - Vertex-Normalen
=========================

Zwei Varianten, je nach Modelltyp:

- Mesh: Gewichte nach N. Max, "Weights for computing vertex normals from
  facet normals", Journal of Graphics Tools 4(2), 1999.
      n_v = Σ (e_in × e_out) / (|e_in|² |e_out|²)
  über alle eingehenden, nicht-Rand Half-Edges.
- Bézier: analytisch, n = (S_u × S_v) / |S_u × S_v|

Degenerierte Fälle: Nenner 0 wird durch 1 ersetzt, Normalen der Länge 0
werden nicht normalisiert.
"""

import numpy as np

from modeling.bezier_surface import BezierSurface
from modeling.halfedge_mesh import INVALID, HalfEdgeMesh


def normalize_rows(vectors: np.ndarray) -> np.ndarray:
    """Normalisiert zeilenweise; Nullvektoren bleiben unverändert."""
    lengths = np.linalg.norm(vectors, axis=1)
    safe = np.where(lengths == 0.0, 1.0, lengths)
    return vectors / safe[:, None]


def mesh_vertex_normals(mesh: HalfEdgeMesh) -> np.ndarray:
    """
    Berechnet die Vertex-Normalen mit Max' Gewichten.

    Returns:
        (N, 3) Einheitsnormalen (0 für isolierte oder degenerierte Vertices)
    """
    edges = mesh.edge_vectors()
    inner = np.nonzero(mesh.he_face != INVALID)[0]

    in_vec = edges[inner]
    out_vec = edges[mesh.he_next[inner]]
    weight = np.einsum("ij,ij->i", in_vec, in_vec) * np.einsum("ij,ij->i", out_vec, out_vec)
    weight = np.where(weight == 0.0, 1.0, weight)

    normals = np.zeros((mesh.n_vertices, 3), dtype=np.float64)
    np.add.at(normals, mesh.he_to[inner], np.cross(in_vec, out_vec) / weight[:, None])
    return normalize_rows(normals)


def bezier_vertex_normals(surface: BezierSurface, mesh: HalfEdgeMesh) -> np.ndarray:
    """
    Analytische Normalen an den gespeicherten (u, v) jedes Vertex.

    Raises:
        ValueError: Mesh hat keine Parameterkoordinaten
    """
    if mesh.uv is None:
        raise ValueError("Mesh hat keine (u, v) Koordinaten - nicht aus einer Bézier-Fläche tesselliert")

    normals = np.zeros((mesh.n_vertices, 3), dtype=np.float64)
    for v, (pu, pv) in enumerate(mesh.uv):
        _, der = surface.evaluate(pu, pv, 1)
        normals[v] = np.cross(der[1, 0], der[0, 1])
    return normalize_rows(normals)


def update_vertex_normals(mesh: HalfEdgeMesh, surface: BezierSurface = None) -> np.ndarray:
    """Setzt mesh.normals - analytisch wenn eine Fläche übergeben wird, sonst Max."""
    if surface is not None:
        mesh.normals = bezier_vertex_normals(surface, mesh)
    else:
        mesh.normals = mesh_vertex_normals(mesh)
    return mesh.normals
