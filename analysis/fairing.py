"""
SurfLab - Mesh Fairing
======================

Globale Laplace-Glättung in festen Batches mit Fortschrittsmeldungen.

Die eigentliche Glättung übernimmt PyVista (`PolyData.smooth`); pro Batch
wird die Verschiebung jedes Vertex auf seine Normale projiziert, damit das
Netz nicht tangential verrutscht. Randvertices bleiben fest.

Verwendung:
    reporter = LoggingProgressReporter()
    fair_mesh(mesh, reporter)
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

import numpy as np
from loguru import logger

from config.defaults import Defaults
from modeling.halfedge_mesh import HalfEdgeMesh
from analysis.normals import mesh_vertex_normals

# (points, faces, iterations) -> geglättete points
Smoother = Callable[[np.ndarray, np.ndarray, int], np.ndarray]


class ProgressReporter(ABC):
    """Empfänger der Fortschrittsmeldungen einer langen Berechnung."""

    @abstractmethod
    def start(self, message: str) -> None:
        pass

    @abstractmethod
    def progress(self, percent: int) -> None:
        pass

    @abstractmethod
    def end(self) -> None:
        pass


class NullProgressReporter(ProgressReporter):
    """Verwirft alle Meldungen."""

    def start(self, message: str) -> None:
        pass

    def progress(self, percent: int) -> None:
        pass

    def end(self) -> None:
        pass


class RecordingProgressReporter(ProgressReporter):
    """Sammelt Meldungen als (Art, Wert) Tupel."""

    def __init__(self):
        self.events: List[Tuple[str, object]] = []

    def start(self, message: str) -> None:
        self.events.append(("start", message))

    def progress(self, percent: int) -> None:
        self.events.append(("progress", percent))

    def end(self) -> None:
        self.events.append(("end", None))

    @property
    def percentages(self) -> List[int]:
        return [value for kind, value in self.events if kind == "progress"]


class LoggingProgressReporter(ProgressReporter):
    """Schreibt Meldungen ins Log."""

    def __init__(self):
        self._message = ""

    def start(self, message: str) -> None:
        self._message = message
        logger.info(message)

    def progress(self, percent: int) -> None:
        logger.info(f"{self._message} {percent}%")

    def end(self) -> None:
        logger.success(f"{self._message} fertig")


def pyvista_smoother(points: np.ndarray, faces: np.ndarray, iterations: int) -> np.ndarray:
    """Laplace-Glättung über PyVista, Rand fixiert."""
    import pyvista as pv

    cells = np.hstack([np.full((len(faces), 1), 3, dtype=np.int64), faces]).ravel()
    poly = pv.PolyData(points.copy(), cells)
    smoothed = poly.smooth(
        n_iter=iterations,
        relaxation_factor=Defaults.FAIRING_RELAXATION,
        boundary_smoothing=False,
    )
    return np.asarray(smoothed.points, dtype=np.float64)


def fair_mesh(
    mesh: HalfEdgeMesh,
    reporter: Optional[ProgressReporter] = None,
    batches: int = Defaults.FAIRING_BATCHES,
    iterations: int = Defaults.FAIRING_ITERATIONS_PER_BATCH,
    smoother: Optional[Smoother] = None,
) -> HalfEdgeMesh:
    """
    Glättet das Mesh in-place in `batches` Batches zu je `iterations` Schritten.

    Meldet start, nach jedem Batch 100*i/batches Prozent und end. Läuft immer
    vollständig durch. Normalen und Krümmung werden hier nicht aktualisiert.
    """
    if batches < 1 or iterations < 1:
        raise ValueError(f"batches und iterations müssen >= 1 sein ({batches}, {iterations})")

    reporter = reporter or NullProgressReporter()
    smoother = smoother or pyvista_smoother

    reporter.start("Fairing mesh...")
    for i in range(1, batches + 1):
        normals = mesh_vertex_normals(mesh)
        smoothed = np.asarray(smoother(mesh.points, mesh.faces, iterations), dtype=np.float64)
        displacement = smoothed - mesh.points
        along_normal = np.einsum("ij,ij->i", displacement, normals)
        mesh.points = mesh.points + normals * along_normal[:, None]
        reporter.progress(i * 100 // batches)
    reporter.end()

    logger.debug(f"Fairing: {batches} x {iterations} Iterationen auf {mesh.n_vertices} Vertices")
    return mesh
