"""
SurfLab - Core
Modell-Fassade über Mesh und Bézier-Fläche.
"""

from core.geometry_model import GeometryModel, ModelType
