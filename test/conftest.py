import numpy as np
import pytest

from config.feature_flags import set_flag
from modeling.bezier_surface import BezierSurface
from modeling.halfedge_mesh import HalfEdgeMesh
from modeling.trigo_basis import TrigonometricBasisTable


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    # Algorithmen
    "better_mean_curvature": False,

    # Debug-Modi
    "curvature_debug_logging": False,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet (z.B. better_mean_curvature=False).
    """
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


# =============================================================================
# Mesh-Builder
# =============================================================================

def make_icosphere(subdivisions: int = 2, radius: float = 1.0) -> HalfEdgeMesh:
    """Unterteiltes Ikosaeder auf der Kugel, Faces nach außen orientiert."""
    t = (1.0 + 5.0 ** 0.5) / 2.0
    points = [
        (-1, t, 0), (1, t, 0), (-1, -t, 0), (1, -t, 0),
        (0, -1, t), (0, 1, t), (0, -1, -t), (0, 1, -t),
        (t, 0, -1), (t, 0, 1), (-t, 0, -1), (-t, 0, 1),
    ]
    points = [np.array(p, dtype=np.float64) / np.linalg.norm(p) for p in points]
    faces = [
        (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
        (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
        (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
        (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
    ]

    for _ in range(subdivisions):
        cache = {}

        def midpoint(i, j):
            key = (min(i, j), max(i, j))
            if key not in cache:
                m = points[i] + points[j]
                points.append(m / np.linalg.norm(m))
                cache[key] = len(points) - 1
            return cache[key]

        refined = []
        for a, b, c in faces:
            ab, bc, ca = midpoint(a, b), midpoint(b, c), midpoint(c, a)
            refined += [(a, ab, ca), (b, bc, ab), (c, ca, bc), (ab, bc, ca)]
        faces = refined

    return HalfEdgeMesh(np.array(points) * radius, np.array(faces))


def make_grid(n: int = 4, size: float = 1.0) -> HalfEdgeMesh:
    """Offenes, ebenes n x n Vertex-Gitter in der xy-Ebene."""
    xs = np.linspace(0.0, size, n)
    xx, yy = np.meshgrid(xs, xs, indexing="ij")
    points = np.column_stack([xx.ravel(), yy.ravel(), np.zeros(n * n)])
    faces = []
    for i in range(n - 1):
        for j in range(n - 1):
            a, b = i * n + j, i * n + j + 1
            c, d = (i + 1) * n + j, (i + 1) * n + j + 1
            faces += [(a, c, b), (b, c, d)]
    return HalfEdgeMesh(points, np.array(faces))


# =============================================================================
# Bézier-Flächen
# =============================================================================

def make_plane_surface(n: int = 3, m: int = 3) -> BezierSurface:
    cp = np.array([[(i / n, j / m, 0.0) for j in range(m + 1)] for i in range(n + 1)])
    return BezierSurface((n, m), cp)


def make_paraboloid_surface() -> BezierSurface:
    """S(u, v) = (2u-1, 2v-1, (2u-1)² + (2v-1)²) als Grad (2, 2)."""
    a = [1.0, -1.0, 1.0]
    cp = np.array([[(-1.0 + i, -1.0 + j, a[i] + a[j]) for j in range(3)] for i in range(3)])
    return BezierSurface((2, 2), cp)


# Zeile 0 (Grad 2): a, b, c
# Zeile 1 (Grad 3): a², 2ab + b² + ac, ac + 2bc, c²
# Beide Zeilen summieren sich wegen a + b + c = 1 zu 1.
# Ableitungen nach theta = pi*u/2, ausgedrückt in a, b, c:
#   a' = -a - b,  b' = a - c,  c' = b + c
# Pro Polynom: Ordnung 0, 1, 2 jeweils als "Anzahl Terme, Terme...".
TRIGO_TABLE_TEXT = """
2
3
1 1 0 0 1   2 1 0 0 -1 0 1 0 -1   2 0 1 0 1 0 0 1 1
1 0 1 0 1   2 1 0 0 1 0 0 1 -1    3 1 0 0 -1 0 1 0 -2 0 0 1 -1
1 0 0 1 1   2 0 1 0 1 0 0 1 1     2 1 0 0 1 0 1 0 1
4
1 2 0 0 1
  2 2 0 0 -2 1 1 0 -2
  4 2 0 0 2 1 1 0 6 0 2 0 2 1 0 1 2
3 1 1 0 2 0 2 0 1 1 0 1 1
  5 2 0 0 2 1 1 0 1 0 2 0 -2 1 0 1 -2 0 1 1 -3
  6 2 0 0 -3 1 1 0 -11 0 2 0 -4 1 0 1 -4 0 1 1 3 0 0 2 3
2 1 0 1 1 0 1 1 2
  5 1 1 0 1 1 0 1 2 0 1 1 1 0 2 0 2 0 0 2 -2
  4 2 0 0 1 1 1 0 5 0 1 1 -9 0 0 2 -5
1 0 0 2 1
  2 0 1 1 2 0 0 2 2
  4 0 2 0 2 0 1 1 6 0 0 2 2 1 0 1 2
"""


@pytest.fixture
def icosphere():
    return make_icosphere(2)


@pytest.fixture
def grid_mesh():
    return make_grid(4)


@pytest.fixture
def plane_surface():
    return make_plane_surface()


@pytest.fixture
def paraboloid_surface():
    return make_paraboloid_surface()


@pytest.fixture
def random_surface():
    rng = np.random.default_rng(42)
    return BezierSurface((3, 2), rng.uniform(-1.0, 1.0, size=(4, 3, 3)))


@pytest.fixture
def trigo_table():
    return TrigonometricBasisTable.parse(TRIGO_TABLE_TEXT)


@pytest.fixture
def trigo_table_file(tmp_path):
    path = tmp_path / "trigo.txt"
    path.write_text(TRIGO_TABLE_TEXT, encoding="utf-8")
    return path
