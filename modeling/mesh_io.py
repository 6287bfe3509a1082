"""
SurfLab - Mesh Import/Export
============================

Delegiert das Dateiformat vollständig an PyVista (OBJ, STL, PLY, VTK, ...).
Der Kern braucht nur Vertex-Positionen und Dreiecks-Faces.

Verwendung:
    mesh = read_mesh("bunny.obj")
    write_mesh("bunny_faired.ply", mesh)
"""

from pathlib import Path
from typing import Union

import numpy as np
import pyvista as pv
from loguru import logger

from modeling.errors import MeshIOError
from modeling.halfedge_mesh import HalfEdgeMesh


def polydata_to_mesh(poly: "pv.PolyData") -> HalfEdgeMesh:
    """Konvertiert PyVista PolyData (beliebige Polygone) in ein HalfEdgeMesh."""
    if not poly.is_all_triangles:
        poly = poly.triangulate()
    faces = np.asarray(poly.faces).reshape(-1, 4)[:, 1:4]
    return HalfEdgeMesh(np.asarray(poly.points, dtype=np.float64), faces)


def mesh_to_polydata(mesh: HalfEdgeMesh) -> "pv.PolyData":
    """Konvertiert ein HalfEdgeMesh in PyVista PolyData inkl. Normalen und Krümmung."""
    cells = np.hstack([np.full((mesh.n_faces, 1), 3, dtype=np.int64), mesh.faces]).ravel()
    poly = pv.PolyData(mesh.points.copy(), cells)
    poly.point_data["Normals"] = mesh.normals
    poly.point_data["Mean_Curvature"] = mesh.mean
    return poly


def read_mesh(path: Union[str, Path]) -> HalfEdgeMesh:
    """
    Liest ein Dreiecksnetz über PyVista.

    Raises:
        MeshIOError: Datei nicht lesbar, kein Oberflächennetz oder leer
    """
    path = str(path)
    try:
        data = pv.read(path)
    except Exception as e:
        raise MeshIOError(f"{path}: Mesh nicht lesbar: {e}") from e

    if not isinstance(data, pv.PolyData):
        try:
            data = data.extract_surface()
        except AttributeError:
            raise MeshIOError(f"{path}: kein Oberflächennetz ({type(data).__name__})") from None

    if data.n_points == 0:
        raise MeshIOError(f"{path}: Mesh enthält keine Vertices")

    mesh = polydata_to_mesh(data)
    logger.info(f"Mesh geladen: {mesh.n_vertices} Vertices, {mesh.n_faces} Faces aus {path}")
    return mesh


def write_mesh(path: Union[str, Path], mesh: HalfEdgeMesh) -> None:
    """Schreibt das Mesh über PyVista; das Format folgt der Dateiendung."""
    path = str(path)
    try:
        mesh_to_polydata(mesh).save(path)
    except Exception as e:
        raise MeshIOError(f"{path}: Mesh nicht schreibbar: {e}") from e
    logger.info(f"Mesh gespeichert: {mesh.n_vertices} Vertices nach {path}")
