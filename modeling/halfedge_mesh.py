"""
SurfLab - Half-Edge Mesh
========================

Index-basierte Half-Edge Datenstruktur für Dreiecksnetze.

Alle Adjazenzen liegen in gepackten numpy-Arrays und werden über Integer-
Handles adressiert (keine Objekt-Rückverweise):

- Half-Edge h = 3*f + k läuft in Face f von Ecke k nach Ecke (k+1) % 3
- Rand-Half-Edges (ohne Face, face == -1) werden explizit angelegt,
  damit jede innere Half-Edge einen Opposite hat
- next/prev der Rand-Half-Edges verketten die Randschleifen

Pro Vertex: Position, Normale, mittlere Krümmung `mean` und (nur für
tessellierte Bézier-Flächen) Parameterkoordinaten (u, v).

Verwendung:
    mesh = HalfEdgeMesh(points, faces)
    for h in mesh.incoming_halfedges(v):
        if mesh.is_boundary(h):
            continue
        ...
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np
from loguru import logger

from modeling.errors import MeshTopologyError

INVALID = -1


class HalfEdgeMesh:
    """
    Dreiecksnetz mit Half-Edge Adjazenz.

    Attributes:
        points: (N, 3) Vertex-Positionen
        faces: (F, 3) Vertex-Indizes pro Dreieck
        normals: (N, 3) Vertex-Normalen (initial 0)
        mean: (N,) mittlere Krümmung (initial 0)
        uv: (N, 2) Parameterkoordinaten oder None
    """

    def __init__(self, points, faces, uv=None):
        self.points = np.array(points, dtype=np.float64).reshape(-1, 3)
        faces = np.asarray(faces)
        if faces.size == 0:
            faces = np.zeros((0, 3), dtype=np.int64)
        if faces.ndim != 2 or faces.shape[1] != 3:
            raise MeshTopologyError(f"Nur Dreiecke erlaubt, Faces haben Form {faces.shape}")
        self.faces = faces.astype(np.int64)

        n_vertices = len(self.points)
        if len(self.faces) and (self.faces.min() < 0 or self.faces.max() >= n_vertices):
            raise MeshTopologyError("Face referenziert nicht existierenden Vertex")

        self.normals = np.zeros_like(self.points)
        self.mean = np.zeros(n_vertices, dtype=np.float64)
        self.uv = None
        if uv is not None:
            self.uv = np.array(uv, dtype=np.float64).reshape(-1, 2)
            if len(self.uv) != n_vertices:
                raise MeshTopologyError(
                    f"uv hat {len(self.uv)} Einträge, Mesh hat {n_vertices} Vertices"
                )

        self._build_adjacency()

    # =========================================================================
    # Aufbau
    # =========================================================================

    def _build_adjacency(self) -> None:
        n_faces = len(self.faces)
        n_inner = 3 * n_faces

        to_vertex: List[int] = []
        from_vertex: List[int] = []
        face: List[int] = []
        nxt: List[int] = []
        prv: List[int] = []

        for f, tri in enumerate(self.faces):
            for k in range(3):
                from_vertex.append(int(tri[k]))
                to_vertex.append(int(tri[(k + 1) % 3]))
                face.append(f)
                nxt.append(3 * f + (k + 1) % 3)
                prv.append(3 * f + (k + 2) % 3)

        directed: Dict[Tuple[int, int], int] = {}
        non_manifold = 0
        for h in range(n_inner):
            key = (from_vertex[h], to_vertex[h])
            if key in directed:
                non_manifold += 1
                continue
            directed[key] = h

        opposite = [INVALID] * n_inner
        for h in range(n_inner):
            twin = directed.get((to_vertex[h], from_vertex[h]))
            if twin is not None:
                opposite[h] = twin

        # Rand-Half-Edges für alle inneren Half-Edges ohne Partner
        boundary_out: Dict[int, int] = {}
        for h in range(n_inner):
            if opposite[h] != INVALID:
                continue
            b = len(to_vertex)
            from_vertex.append(to_vertex[h])
            to_vertex.append(from_vertex[h])
            face.append(INVALID)
            nxt.append(INVALID)
            prv.append(INVALID)
            opposite.append(h)
            opposite[h] = b
            boundary_out.setdefault(from_vertex[b], b)

        for b in range(n_inner, len(to_vertex)):
            successor = boundary_out.get(to_vertex[b], INVALID)
            nxt[b] = successor
            if successor != INVALID:
                prv[successor] = b

        self.he_to = np.array(to_vertex, dtype=np.int64)
        self.he_from = np.array(from_vertex, dtype=np.int64)
        self.he_face = np.array(face, dtype=np.int64)
        self.he_next = np.array(nxt, dtype=np.int64)
        self.he_prev = np.array(prv, dtype=np.int64)
        self.he_opposite = np.array(opposite, dtype=np.int64)

        n_vertices = len(self.points)
        self._incoming: List[List[int]] = [[] for _ in range(n_vertices)]
        self._outgoing: List[List[int]] = [[] for _ in range(n_vertices)]
        self._vertex_faces: List[List[int]] = [[] for _ in range(n_vertices)]
        for h in range(len(self.he_to)):
            self._incoming[self.he_to[h]].append(h)
            self._outgoing[self.he_from[h]].append(h)
        for f, tri in enumerate(self.faces):
            for v in tri:
                self._vertex_faces[v].append(f)

        if non_manifold:
            logger.warning(f"Mesh: {non_manifold} doppelte Half-Edges (nicht-manifold) ignoriert")
        logger.debug(
            f"Half-Edge Mesh: {n_vertices} Vertices, {n_faces} Faces, "
            f"{len(self.he_to) - n_inner} Rand-Half-Edges"
        )

    # =========================================================================
    # Größen
    # =========================================================================

    @property
    def n_vertices(self) -> int:
        return len(self.points)

    @property
    def n_faces(self) -> int:
        return len(self.faces)

    @property
    def n_halfedges(self) -> int:
        return len(self.he_to)

    # =========================================================================
    # Half-Edge Navigation
    # =========================================================================

    def next_halfedge(self, h: int) -> int:
        return int(self.he_next[h])

    def prev_halfedge(self, h: int) -> int:
        return int(self.he_prev[h])

    def opposite_halfedge(self, h: int) -> int:
        return int(self.he_opposite[h])

    def to_vertex(self, h: int) -> int:
        return int(self.he_to[h])

    def from_vertex(self, h: int) -> int:
        return int(self.he_from[h])

    def face_of(self, h: int) -> int:
        return int(self.he_face[h])

    def is_boundary(self, h: int) -> bool:
        """True für Half-Edges ohne Face."""
        return self.face_of(h) == INVALID

    def is_boundary_edge(self, h: int) -> bool:
        """True wenn eine der beiden Seiten der Kante kein Face hat."""
        return self.is_boundary(h) or self.is_boundary(self.he_opposite[h])

    def is_boundary_vertex(self, v: int) -> bool:
        return any(self.is_boundary(h) for h in self._outgoing[v])

    def face_halfedges(self, f: int) -> Tuple[int, int, int]:
        return 3 * f, 3 * f + 1, 3 * f + 2

    def edge_vector(self, h: int) -> np.ndarray:
        """Vektor von from_vertex nach to_vertex."""
        return self.points[self.he_to[h]] - self.points[self.he_from[h]]

    def edge_vectors(self) -> np.ndarray:
        """(H, 3) Kantenvektoren aller Half-Edges."""
        return self.points[self.he_to] - self.points[self.he_from]

    def sector_angle(self, h: int) -> float:
        """Winkel am Ziel-Vertex von h zwischen h und next(h)."""
        v0 = -self.edge_vector(h)
        v1 = self.edge_vector(self.he_next[h])
        denom = np.linalg.norm(v0) * np.linalg.norm(v1)
        if denom == 0.0:
            return 0.0
        cos_a = np.clip(np.dot(v0, v1) / denom, -1.0, 1.0)
        return float(np.arccos(cos_a))

    # =========================================================================
    # Vertex-Umgebung
    # =========================================================================

    def incoming_halfedges(self, v: int) -> List[int]:
        return self._incoming[v]

    def outgoing_halfedges(self, v: int) -> List[int]:
        return self._outgoing[v]

    def vertex_faces(self, v: int) -> List[int]:
        return self._vertex_faces[v]

    # =========================================================================
    # Face-Geometrie
    # =========================================================================

    def face_normals(self, normalized: bool = True) -> np.ndarray:
        """(F, 3) Face-Normalen (Kreuzprodukt, Länge = doppelte Fläche)."""
        p0 = self.points[self.faces[:, 0]]
        p1 = self.points[self.faces[:, 1]]
        p2 = self.points[self.faces[:, 2]]
        normals = np.cross(p1 - p0, p2 - p1)
        if not normalized:
            return normals
        lengths = np.linalg.norm(normals, axis=1)
        safe = np.where(lengths == 0.0, 1.0, lengths)
        return normals / safe[:, None]

    def face_areas(self) -> np.ndarray:
        return 0.5 * np.linalg.norm(self.face_normals(normalized=False), axis=1)

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        if self.n_vertices == 0:
            return np.zeros(3), np.zeros(3)
        return self.points.min(axis=0), self.points.max(axis=0)

    # =========================================================================
    # Editieren
    # =========================================================================

    def set_point(self, v: int, position: Sequence[float]) -> None:
        """Verschiebt einen Vertex. Topologie bleibt unverändert."""
        if not 0 <= v < self.n_vertices:
            raise IndexError(f"Vertex {v} existiert nicht ({self.n_vertices} Vertices)")
        self.points[v] = np.asarray(position, dtype=np.float64)

    def copy(self) -> "HalfEdgeMesh":
        clone = HalfEdgeMesh(self.points.copy(), self.faces.copy(),
                             None if self.uv is None else self.uv.copy())
        clone.normals = self.normals.copy()
        clone.mean = self.mean.copy()
        return clone

    def __repr__(self) -> str:
        return f"HalfEdgeMesh(vertices={self.n_vertices}, faces={self.n_faces})"
