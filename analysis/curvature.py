"""
SurfLab - Mittlere Krümmung
===========================

Mathematische Grundlage:
- Kugel mit Radius R: H = 1/R (positiv bei nach außen zeigenden Normalen)
- Ebene: H = 0

Schätzer:
1. Dihedralwinkel (Standard, Mesh):
       H_v = 0.25 / A_v * Σ theta_e * |e|
   über alle eingehenden Half-Edges, A_v = 1/3 der anliegenden Face-Flächen.
2. Rusinkiewicz (Feature-Flag `better_mean_curvature`, Mesh):
   S. Rusinkiewicz, "Estimating curvatures and their derivatives on triangle
   meshes", 3DPVT 2004. Least-Squares Fit der zweiten Fundamentalform pro
   Face, Voronoi-gewichtet auf die Vertices verteilt, Eigenwerte pro Vertex.
3. Analytisch (Bézier): aus erster und zweiter Fundamentalform
       H = (N E - 2 M F + L G) / (2 (E G - F²))

Die Farbskala nutzt (mean_min, mean_max) aus curvature_range(): sortierte
Werte, an beiden Enden um cutoff_ratio gekürzt, mean_min <= 0 <= mean_max.
"""

import math
from typing import Tuple

import numpy as np
from loguru import logger

from config.defaults import Defaults
from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from modeling.bezier_surface import BezierSurface
from modeling.halfedge_mesh import INVALID, HalfEdgeMesh
from analysis.voronoi import voronoi_weight


# =============================================================================
# Dihedralwinkel
# =============================================================================

def _dihedral(mesh: HalfEdgeMesh, halfedges: np.ndarray) -> np.ndarray:
    edges = mesh.edge_vectors()
    opp = mesh.he_opposite[halfedges]
    result = np.zeros(len(halfedges), dtype=np.float64)

    interior = (mesh.he_face[halfedges] != INVALID) & (opp != INVALID)
    interior[interior] &= mesh.he_face[opp[interior]] != INVALID
    h = halfedges[interior]
    o = opp[interior]
    if len(h) == 0:
        return result

    # Sektor-Normalen beider Faces (nach außen bei konsistenter Orientierung)
    n0 = np.cross(edges[mesh.he_next[h]], edges[o])
    n1 = np.cross(edges[mesh.he_next[o]], edges[h])
    denom = np.linalg.norm(n0, axis=1) * np.linalg.norm(n1, axis=1)
    valid = denom > 0.0

    cos_a = np.zeros(len(h))
    cos_a[valid] = np.einsum("ij,ij->i", n0[valid], n1[valid]) / denom[valid]
    angle = np.arccos(np.clip(cos_a, -1.0, 1.0))
    sin_sign = np.einsum("ij,ij->i", np.cross(n0, n1), edges[h])
    angle = np.where(sin_sign >= 0.0, angle, -angle)

    result[np.nonzero(interior)[0]] = np.where(valid, angle, 0.0)
    return result


def dihedral_angle(mesh: HalfEdgeMesh, halfedge: int) -> float:
    """
    Vorzeichenbehafteter Dihedralwinkel an der Kante von `halfedge`.

    Positiv für konvexe Kanten, exakt 0 an Randkanten.
    """
    return float(_dihedral(mesh, np.array([halfedge], dtype=np.int64))[0])


def dihedral_angles(mesh: HalfEdgeMesh) -> np.ndarray:
    """(H,) Dihedralwinkel aller Half-Edges."""
    return _dihedral(mesh, np.arange(mesh.n_halfedges, dtype=np.int64))


def vertex_areas(mesh: HalfEdgeMesh) -> np.ndarray:
    """(N,) ein Drittel der Summe der anliegenden Face-Flächen."""
    areas = np.zeros(mesh.n_vertices, dtype=np.float64)
    np.add.at(areas, mesh.faces.ravel(), np.repeat(mesh.face_areas(), 3))
    return areas / 3.0


def mesh_mean_curvature(mesh: HalfEdgeMesh) -> np.ndarray:
    """Mittlere Krümmung über gewichtete Dihedralwinkel. Fläche 0 ergibt 0."""
    edges = mesh.edge_vectors()
    lengths = np.linalg.norm(edges, axis=1)

    mean = np.zeros(mesh.n_vertices, dtype=np.float64)
    np.add.at(mean, mesh.he_to, dihedral_angles(mesh) * lengths)

    areas = vertex_areas(mesh)
    safe = np.where(areas > 0.0, areas, 1.0)
    return np.where(areas > 0.0, 0.25 * mean / safe, 0.0)


# =============================================================================
# Rusinkiewicz
# =============================================================================

def local_frame(normal: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Orthogonales (u, v) System in der Ebene senkrecht zu `normal`.

    u liegt in der Ebene der zwei betragsgrößten Normalkomponenten,
    v = normal × u. Für Nullnormalen werden Nullvektoren geliefert.
    """
    absn = np.abs(normal)
    maxi, nexti = 0, 1
    if absn[0] < absn[1]:
        maxi, nexti = 1, 0
    if absn[2] > absn[maxi]:
        nexti, maxi = maxi, 2
    elif absn[2] > absn[nexti]:
        nexti = 2

    u = np.zeros(3, dtype=np.float64)
    u[nexti] = -normal[maxi]
    u[maxi] = normal[nexti]
    length = np.linalg.norm(u)
    if length < Tolerances.EPSILON_NORMAL:
        return np.zeros(3), np.zeros(3)
    u /= length
    return u, np.cross(normal, u)


def _rotate(vector: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    # Rodrigues-Formel, axis normiert
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    return (vector * cos_a
            + np.cross(axis, vector) * sin_a
            + axis * np.dot(axis, vector) * (1.0 - cos_a))


def rusinkiewicz_mean_curvature(mesh: HalfEdgeMesh) -> np.ndarray:
    """
    Mittlere Krümmung nach Rusinkiewicz. Benötigt aktuelle mesh.normals.

    Vertices ohne akkumuliertes Gewicht erhalten 0.
    """
    normals = mesh.normals
    face_normals = mesh.face_normals()
    edges = mesh.edge_vectors()

    efg_sum = np.zeros((mesh.n_vertices, 3), dtype=np.float64)
    weight_sum = np.zeros(mesh.n_vertices, dtype=np.float64)

    for f in range(mesh.n_faces):
        h0, h1, h2 = mesh.face_halfedges(f)
        e0, e1, e2 = edges[h0], edges[h1], edges[h2]
        n0 = normals[mesh.he_to[h1]]
        n1 = normals[mesh.he_to[h2]]
        n2 = normals[mesh.he_to[h0]]

        n = face_normals[f]
        u, v = local_frame(n)

        # Least-Squares für (e, f, g) der Face
        A = np.array([
            [e0 @ u, e0 @ v, 0.0],
            [0.0, e0 @ u, e0 @ v],
            [e1 @ u, e1 @ v, 0.0],
            [0.0, e1 @ u, e1 @ v],
            [e2 @ u, e2 @ v, 0.0],
            [0.0, e2 @ u, e2 @ v],
        ])
        b = np.array([
            (n2 - n1) @ u, (n2 - n1) @ v,
            (n0 - n2) @ u, (n0 - n2) @ v,
            (n1 - n0) @ u, (n1 - n0) @ v,
        ])
        x = np.linalg.lstsq(A, b, rcond=None)[0]
        fundamental = np.array([[x[0], x[1]],
                                [x[1], x[2]]])

        for h in (h0, h1, h2):
            p = mesh.he_to[h]

            # (up, vp) des Vertex in die Ebene der Face drehen
            np_ = normals[p]
            up, vp = local_frame(np_)
            axis = np.cross(np_, n)
            axis_length = np.linalg.norm(axis)
            if axis_length > Tolerances.EPSILON_NORMAL:
                axis /= axis_length
                angle = math.acos(min(max(float(n @ np_), -1.0), 1.0))
                up = _rotate(up, axis, angle)
                vp = _rotate(vp, axis, angle)

            upf = np.array([up @ u, up @ v])
            vpf = np.array([vp @ u, vp @ v])
            local = np.array([
                upf @ fundamental @ upf,
                upf @ fundamental @ vpf,
                vpf @ fundamental @ vpf,
            ])

            w = voronoi_weight(mesh, h)
            efg_sum[p] += local * w
            weight_sum[p] += w

    mean = np.zeros(mesh.n_vertices, dtype=np.float64)
    for p in range(mesh.n_vertices):
        if weight_sum[p] <= 0.0:
            continue
        e, f, g = efg_sum[p] / weight_sum[p]
        k = np.linalg.eigvalsh(np.array([[e, f], [f, g]]))
        mean[p] = 0.5 * (k[0] + k[1])
    return mean


# =============================================================================
# Bézier (analytisch)
# =============================================================================

def bezier_mean_curvature(surface: BezierSurface, mesh: HalfEdgeMesh) -> np.ndarray:
    """
    Mittlere Krümmung aus den Fundamentalformen an den (u, v) jedes Vertex.

    Degenerierte Metrik (E G - F² = 0) ergibt 0.
    """
    if mesh.uv is None:
        raise ValueError("Mesh hat keine (u, v) Koordinaten - nicht aus einer Bézier-Fläche tesselliert")

    mean = np.zeros(mesh.n_vertices, dtype=np.float64)
    for v, (pu, pv) in enumerate(mesh.uv):
        _, der = surface.evaluate(pu, pv, 2)
        s_u, s_v = der[1, 0], der[0, 1]
        E = s_u @ s_u
        F = s_u @ s_v
        G = s_v @ s_v
        normal = np.cross(s_u, s_v)
        length = np.linalg.norm(normal)
        denom = 2.0 * (E * G - F * F)
        if length < Tolerances.EPSILON_NORMAL or abs(denom) < Tolerances.EPSILON_MATH:
            continue
        normal /= length
        L = normal @ der[2, 0]
        M = normal @ der[1, 1]
        N = normal @ der[0, 2]
        mean[v] = (N * E - 2.0 * M * F + L * G) / denom
    return mean


# =============================================================================
# Dispatch & Wertebereich
# =============================================================================

def compute_mean_curvature(mesh: HalfEdgeMesh, surface: BezierSurface = None) -> np.ndarray:
    """
    Setzt mesh.mean.

    Mit Fläche: analytisch. Sonst Dihedralwinkel oder - bei aktivem Flag
    `better_mean_curvature` - Rusinkiewicz.
    """
    if surface is not None:
        mesh.mean = bezier_mean_curvature(surface, mesh)
    elif is_enabled("better_mean_curvature"):
        mesh.mean = rusinkiewicz_mean_curvature(mesh)
    else:
        mesh.mean = mesh_mean_curvature(mesh)

    if is_enabled("curvature_debug_logging") and mesh.n_vertices:
        logger.debug(
            f"Krümmung: min={mesh.mean.min():.4g}, max={mesh.mean.max():.4g}, "
            f"Mittel={mesh.mean.mean():.4g}"
        )
    return mesh.mean


def curvature_range(values, cutoff_ratio: float = Defaults.CUTOFF_RATIO) -> Tuple[float, float]:
    """
    Robuster Wertebereich für die Farbskala.

    Sortiert die Werte und schneidet an beiden Enden den Anteil cutoff_ratio
    ab. mean_min wird auf <= 0, mean_max auf >= 0 begrenzt.

    Returns:
        (mean_min, mean_max), (0, 0) für leere Eingaben
    """
    if not 0.0 <= cutoff_ratio < 0.5:
        raise ValueError(f"cutoff_ratio muss in [0, 0.5) liegen, ist {cutoff_ratio}")

    values = np.sort(np.asarray(values, dtype=np.float64).ravel())
    n = len(values)
    if n == 0:
        return 0.0, 0.0

    k = int(n * cutoff_ratio)
    mean_min = min(float(values[k - 1 if k else 0]), 0.0)
    mean_max = max(float(values[min(n - k, n - 1)]), 0.0)
    return mean_min, mean_max
