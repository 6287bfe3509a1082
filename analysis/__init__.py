"""
SurfLab - Analysis
Vertex-Normalen, mittlere Krümmung, Voronoi-Gewichte, Farbskala und Fairing.
"""

from analysis.voronoi import voronoi_weight, voronoi_weights, voronoi_vertex_areas
from analysis.normals import mesh_vertex_normals, bezier_vertex_normals, update_vertex_normals
from analysis.curvature import (
    dihedral_angle,
    dihedral_angles,
    mesh_mean_curvature,
    rusinkiewicz_mean_curvature,
    bezier_mean_curvature,
    compute_mean_curvature,
    curvature_range,
)
from analysis.color_map import mean_map_color, mean_map_colors
from analysis.fairing import (
    ProgressReporter,
    NullProgressReporter,
    RecordingProgressReporter,
    LoggingProgressReporter,
    fair_mesh,
)
