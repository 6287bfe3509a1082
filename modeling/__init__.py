"""
SurfLab - Modeling
Bézier-Flächen (Bernstein & trigonometrische Basis) und Half-Edge Dreiecksnetze.
"""

from modeling.errors import (
    SurfLabError,
    GeometryFormatError,
    BezierFormatError,
    TrigoTableFormatError,
    CapabilityExceededError,
    MeshIOError,
    MeshTopologyError,
)
from modeling.bernstein import bernstein, bernstein_derivatives
from modeling.trigo_basis import TrigonometricBasisTable
from modeling.halfedge_mesh import HalfEdgeMesh
from modeling.bezier_surface import BasisType, BezierSurface
from modeling.bezier_io import parse_bezier, read_bezier, format_bezier, write_bezier
