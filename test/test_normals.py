"""
Vertex-Normalen Tests

Max-Gewichte für Meshes, analytische Normalen für Bézier-Flächen.
"""

import numpy as np
import pytest

from analysis.normals import (
    bezier_vertex_normals,
    mesh_vertex_normals,
    normalize_rows,
    update_vertex_normals,
)
from modeling.halfedge_mesh import HalfEdgeMesh


class TestMeshNormals:
    """Max' Gewichtung."""

    def test_sphere_normals_radial(self, icosphere):
        normals = mesh_vertex_normals(icosphere)
        np.testing.assert_allclose(normals, icosphere.points, atol=1e-10)

    def test_unit_length(self, icosphere):
        lengths = np.linalg.norm(mesh_vertex_normals(icosphere), axis=1)
        np.testing.assert_allclose(lengths, 1.0)

    def test_plane_normals(self, grid_mesh):
        normals = mesh_vertex_normals(grid_mesh)
        np.testing.assert_allclose(normals, np.tile([0.0, 0.0, 1.0], (grid_mesh.n_vertices, 1)))

    def test_isolated_vertex_zero(self):
        mesh = HalfEdgeMesh([(0, 0, 0), (1, 0, 0), (0, 1, 0), (2, 2, 2)], [(0, 1, 2)])
        normals = mesh_vertex_normals(mesh)
        np.testing.assert_array_equal(normals[3], 0.0)

    def test_degenerate_face_no_nan(self):
        mesh = HalfEdgeMesh([(0, 0, 0), (0, 0, 0), (0, 0, 0)], [(0, 1, 2)])
        assert np.all(np.isfinite(mesh_vertex_normals(mesh)))

    def test_update_sets_mesh_normals(self, grid_mesh):
        result = update_vertex_normals(grid_mesh)
        assert grid_mesh.normals is result

    def test_normalize_rows_keeps_zero(self):
        rows = normalize_rows(np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 0.0]]))
        np.testing.assert_allclose(rows, [[0.6, 0.8, 0.0], [0.0, 0.0, 0.0]])


class TestBezierNormals:
    """Analytische Normalen unit(S_u × S_v)."""

    def test_plane_normal(self, plane_surface):
        mesh = plane_surface.tessellate(4)
        normals = bezier_vertex_normals(plane_surface, mesh)
        np.testing.assert_allclose(normals, np.tile([0.0, 0.0, 1.0], (16, 1)), atol=1e-12)

    def test_paraboloid_normal(self, paraboloid_surface):
        mesh = paraboloid_surface.tessellate(5)
        normals = bezier_vertex_normals(paraboloid_surface, mesh)
        np.testing.assert_allclose(normals[12], [0, 0, 1], atol=1e-12)
        # Vertex 0: (x, y) = (-1, -1), Gradient von z = x² + y² ist (-2, -2)
        expected = np.array([2.0, 2.0, 1.0]) / 3.0
        np.testing.assert_allclose(normals[0], expected, atol=1e-12)

    def test_update_with_surface(self, plane_surface):
        mesh = plane_surface.tessellate(3)
        update_vertex_normals(mesh, plane_surface)
        np.testing.assert_allclose(mesh.normals[:, 2], 1.0)

    def test_requires_uv(self, plane_surface, grid_mesh):
        with pytest.raises(ValueError):
            bezier_vertex_normals(plane_surface, grid_mesh)
