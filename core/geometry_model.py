"""
SurfLab - Geometriemodell
=========================

Zentrale Fassade über das aktuelle Modell: entweder ein Dreiecksnetz oder
eine Bézier-Fläche (nie beides). Jede Änderung läuft durch dieselbe
Pipeline:

    (Bézier: tessellieren) -> Normalen -> mittlere Krümmung [-> Wertebereich]

Fehlgeschlagene Ladevorgänge und abgelehnte Änderungen lassen das Modell
unverändert.

Verwendung:
    model = GeometryModel()
    model.open_bezier("patch.bzr")
    model.elevate_u()
    rgb = model.color_of(model.mesh.mean[0])
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from loguru import logger

from config.defaults import Defaults
from modeling.bezier_io import read_bezier, write_bezier
from modeling.bezier_surface import BasisType, BezierSurface
from modeling.errors import SurfLabError
from modeling.halfedge_mesh import HalfEdgeMesh
from modeling.trigo_basis import TrigonometricBasisTable
from analysis.color_map import mean_map_color, mean_map_colors
from analysis.curvature import compute_mean_curvature, curvature_range
from analysis.fairing import ProgressReporter, fair_mesh
from analysis.normals import update_vertex_normals

PathLike = Union[str, Path]


class ModelType(Enum):
    """Art des aktuellen Modells."""
    NONE = "none"
    MESH = "mesh"
    BEZIER_SURFACE = "bezier_surface"


class GeometryModel:
    """
    Aktuelles Modell samt abgeleiteter Größen.

    Attributes:
        model_type: NONE, MESH oder BEZIER_SURFACE
        mesh: aktuelles Dreiecksnetz (bei Bézier: die Tessellierung)
        surface: aktuelle Bézier-Fläche oder None
        trigo_table: geladene trigonometrische Basistabelle oder None
        resolution: Tessellierungsauflösung pro Richtung
        mean_min, mean_max: Wertebereich der Farbskala
        last_filename: zuletzt erfolgreich geladene Datei
    """

    def __init__(
        self,
        resolution: int = Defaults.TESSELLATION_RESOLUTION,
        cutoff_ratio: float = Defaults.CUTOFF_RATIO,
    ):
        self.model_type = ModelType.NONE
        self.mesh: Optional[HalfEdgeMesh] = None
        self.surface: Optional[BezierSurface] = None
        self.trigo_table: Optional[TrigonometricBasisTable] = None
        self._basis = BasisType.BERNSTEIN
        self.resolution = resolution
        self._cutoff_ratio = Defaults.CUTOFF_RATIO
        self.cutoff_ratio = cutoff_ratio
        self.mean_min = 0.0
        self.mean_max = 0.0
        self.last_filename = ""

    # =========================================================================
    # Einstellungen
    # =========================================================================

    @property
    def cutoff_ratio(self) -> float:
        return self._cutoff_ratio

    @cutoff_ratio.setter
    def cutoff_ratio(self, value: float) -> None:
        if not 0.0 <= value < 0.5:
            raise ValueError(f"cutoff_ratio muss in [0, 0.5) liegen, ist {value}")
        self._cutoff_ratio = float(value)

    @property
    def basis(self) -> BasisType:
        return self._basis

    def set_basis(self, basis: BasisType) -> None:
        """
        Wählt die Basis und berechnet eine geladene Bézier-Fläche neu.

        Raises:
            CapabilityExceededError: Fläche wäre mit dieser Basis nicht
                auswertbar (Basis bleibt dann unverändert)
        """
        if self.surface is not None:
            candidate = self.surface.copy()
            candidate.basis = basis
            candidate.check_basis(2)
            self.surface = candidate
        self._basis = basis
        logger.info(f"Basis: {basis.value}")
        if self.model_type is ModelType.BEZIER_SURFACE:
            self.update_mesh()

    def load_trigonometric_table(self, path: PathLike) -> TrigonometricBasisTable:
        """
        Lädt die trigonometrische Basistabelle.

        Raises:
            TrigoTableFormatError: die bisherige Tabelle bleibt erhalten
            CapabilityExceededError: Tabelle deckt die aktuelle Fläche nicht ab
        """
        table = TrigonometricBasisTable.load(path)
        if self.surface is not None:
            candidate = self.surface.copy()
            candidate.trigo_table = table
            candidate.check_basis(2)
            self.surface = candidate

        if self.trigo_table is not None:
            logger.warning("Trigonometrische Basistabelle wird ersetzt")
        self.trigo_table = table
        if self.model_type is ModelType.BEZIER_SURFACE and self.surface.uses_trigonometric_basis():
            self.update_mesh()
        return table

    # =========================================================================
    # Laden / Speichern
    # =========================================================================

    def set_mesh(self, mesh: HalfEdgeMesh, update_mean_range: bool = True) -> None:
        """Übernimmt ein vorhandenes Dreiecksnetz als Modell."""
        if mesh.n_vertices == 0:
            raise ValueError("Mesh enthält keine Vertices")
        self.mesh = mesh
        self.surface = None
        self.model_type = ModelType.MESH
        self.update_mesh(update_mean_range)

    def set_surface(self, surface: BezierSurface, update_mean_range: bool = True) -> None:
        """
        Übernimmt eine Bézier-Fläche mit der aktuellen Basis als Modell.

        Raises:
            CapabilityExceededError: Fläche mit der gewählten Basis nicht auswertbar
        """
        candidate = surface.copy()
        candidate.basis = self._basis
        candidate.trigo_table = self.trigo_table
        candidate.check_basis(2)
        self.surface = candidate
        self.model_type = ModelType.BEZIER_SURFACE
        self.update_mesh(update_mean_range)

    def open_mesh(self, path: PathLike, update_mean_range: bool = True) -> None:
        """
        Lädt ein Dreiecksnetz (Format über PyVista).

        Raises:
            MeshIOError: Datei nicht lesbar oder leer
        """
        from modeling.mesh_io import read_mesh

        mesh = read_mesh(path)
        self.set_mesh(mesh, update_mean_range)
        self.last_filename = str(path)

    def open_bezier(self, path: PathLike, update_mean_range: bool = True) -> None:
        """
        Lädt eine Bézier-Kontrollnetz-Datei.

        Raises:
            BezierFormatError: Datei fehlerhaft, Modell bleibt unverändert
            CapabilityExceededError: Fläche mit der gewählten Basis nicht auswertbar
        """
        surface = read_bezier(path, self._basis, self.trigo_table)
        self.set_surface(surface, update_mean_range)
        self.last_filename = str(path)

    def reload(self) -> None:
        """Lädt die zuletzt geöffnete Datei neu, ohne den Farbbereich zu ändern."""
        if not self.last_filename:
            logger.warning("Nichts zum Neuladen")
            return
        if self.model_type is ModelType.MESH:
            self.open_mesh(self.last_filename, update_mean_range=False)
        elif self.model_type is ModelType.BEZIER_SURFACE:
            self.open_bezier(self.last_filename, update_mean_range=False)

    def save_bezier(self, path: PathLike) -> bool:
        """
        Speichert das Kontrollnetz.

        Returns:
            False wenn kein Bézier-Modell aktiv ist oder das Schreiben scheitert
        """
        if self.model_type is not ModelType.BEZIER_SURFACE:
            logger.warning("Speichern abgelehnt: kein Bézier-Modell aktiv")
            return False
        try:
            write_bezier(path, self.surface)
        except OSError as e:
            logger.error(f"Bézier-Datei nicht schreibbar: {e}")
            return False
        return True

    def save_mesh(self, path: PathLike) -> None:
        """
        Speichert das aktuelle Dreiecksnetz (bei Bézier: die Tessellierung).

        Raises:
            MeshIOError: Schreiben fehlgeschlagen
        """
        from modeling.mesh_io import write_mesh

        write_mesh(path, self._require_mesh())

    # =========================================================================
    # Neuberechnung
    # =========================================================================

    def update_mesh(self, update_mean_range: bool = True) -> None:
        """Tesselliert (Bézier), berechnet Normalen, Krümmung und optional den Farbbereich."""
        if self.model_type is ModelType.NONE:
            return

        surface = None
        if self.model_type is ModelType.BEZIER_SURFACE:
            surface = self.surface
            self.mesh = surface.tessellate(self.resolution)

        update_vertex_normals(self.mesh, surface)
        compute_mean_curvature(self.mesh, surface)
        if update_mean_range:
            self.update_mean_range()

    def update_mean_range(self) -> Tuple[float, float]:
        if self.mesh is not None and self.mesh.n_vertices:
            self.mean_min, self.mean_max = curvature_range(self.mesh.mean, self._cutoff_ratio)
            logger.debug(f"Farbbereich: [{self.mean_min:.4g}, {self.mean_max:.4g}]")
        return self.mean_min, self.mean_max

    @property
    def mean_range(self) -> Tuple[float, float]:
        return self.mean_min, self.mean_max

    # =========================================================================
    # Bézier-Operationen
    # =========================================================================

    def evaluate(self, u: float, v: float, derivatives: int = 0) -> Tuple[np.ndarray, np.ndarray]:
        return self._require_surface().evaluate(u, v, derivatives)

    def tessellate(self, resolution: int) -> HalfEdgeMesh:
        """Setzt die Auflösung und tesselliert neu."""
        self._require_surface()
        if resolution < 2:
            raise ValueError(f"Auflösung muss >= 2 sein, ist {resolution}")
        self.resolution = resolution
        self.update_mesh()
        return self.mesh

    def elevate_u(self) -> None:
        self._elevate(BezierSurface.elevate_degree_u)

    def elevate_v(self) -> None:
        self._elevate(BezierSurface.elevate_degree_v)

    def _elevate(self, operation) -> None:
        # Erst auf einer Kopie prüfen, dann übernehmen
        candidate = self._require_surface().copy()
        operation(candidate)
        candidate.check_basis(2)
        self.surface = candidate
        self.update_mesh()

    # =========================================================================
    # Editieren
    # =========================================================================

    def move_vertex(self, index: int, position: Sequence[float]) -> None:
        if self.model_type is not ModelType.MESH:
            raise SurfLabError("Vertices können nur im Mesh-Modus verschoben werden")
        self.mesh.set_point(index, position)
        self.update_mesh()

    def move_control_point(self, index: int, position: Sequence[float]) -> None:
        self._require_surface().move_control_point(index, position)
        self.update_mesh()

    def fair_mesh(self, reporter: Optional[ProgressReporter] = None, smoother=None) -> None:
        """Glättet das Mesh (nur Mesh-Modus). Der Farbbereich bleibt erhalten."""
        if self.model_type is not ModelType.MESH:
            logger.warning("Fairing nur im Mesh-Modus möglich")
            return
        fair_mesh(self.mesh, reporter, smoother=smoother)
        self.update_mesh(update_mean_range=False)

    # =========================================================================
    # Abfragen
    # =========================================================================

    def color_of(self, value: float) -> Tuple[float, float, float]:
        return mean_map_color(value, self.mean_min, self.mean_max)

    def vertex_colors(self) -> np.ndarray:
        """(N, 3) Farben der mittleren Krümmung aller Vertices."""
        return mean_map_colors(self._require_mesh().mean, self.mean_min, self.mean_max)

    def bounding_box(self) -> Tuple[np.ndarray, np.ndarray]:
        """Achsenparalleler Quader um Mesh bzw. Kontrollnetz."""
        if self.model_type is ModelType.BEZIER_SURFACE:
            cp = self.surface.control_points.reshape(-1, 3)
            return cp.min(axis=0), cp.max(axis=0)
        return self._require_mesh().bounding_box()

    def _require_mesh(self) -> HalfEdgeMesh:
        if self.mesh is None:
            raise SurfLabError("Kein Modell geladen")
        return self.mesh

    def _require_surface(self) -> BezierSurface:
        if self.model_type is not ModelType.BEZIER_SURFACE:
            raise SurfLabError("Keine Bézier-Fläche geladen")
        return self.surface

    def __repr__(self) -> str:
        return f"GeometryModel(type={self.model_type.value}, basis={self._basis.value})"
