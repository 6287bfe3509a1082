"""
Bézier-Dateiformat Tests

Kopfzeile 'n m' mit den Graden, danach (n+1)(m+1) Kontrollpunkte.
"""

import numpy as np
import pytest

from modeling.bezier_io import format_bezier, parse_bezier, read_bezier, write_bezier
from modeling.bezier_surface import BasisType, BezierSurface
from modeling.errors import BezierFormatError


class TestBezierRoundTrip:
    """Speichern und Laden reproduziert Grade und Kontrollnetz exakt."""

    def test_round_trip_exact(self, tmp_path, random_surface):
        path = tmp_path / "patch.bzr"
        write_bezier(path, random_surface)
        loaded = read_bezier(path)
        assert loaded.degrees == random_surface.degrees
        np.testing.assert_array_equal(loaded.control_points, random_surface.control_points)

    def test_round_trip_awkward_floats(self, tmp_path):
        cp = np.array([[(0.1, 1 / 3, -2.5e-17), (1e300, -0.0, 7.0)]])
        surface = BezierSurface((0, 1), cp)
        path = tmp_path / "awkward.bzr"
        write_bezier(path, surface)
        np.testing.assert_array_equal(read_bezier(path).control_points, surface.control_points)

    def test_format_layout(self):
        cp = np.array([[(0, 0, 0), (0, 1, 0)], [(1, 0, 0), (1, 1, 1)]], dtype=float)
        lines = format_bezier(BezierSurface((1, 1), cp)).splitlines()
        assert lines[0] == "1 1"
        assert len(lines) == 5
        assert lines[2] == "0.0 1.0 0.0"


class TestBezierParsing:
    """Tests für das Parsen."""

    def test_bilinear_file(self):
        """'1 1' gefolgt von 4 Punkten ergibt Grad (1, 1)."""
        text = "1 1\n0 0 0\n0 1 0\n1 0 0\n1 1 1\n"
        surface = parse_bezier(text)
        assert surface.degrees == (1, 1)
        assert surface.n_control_points == 4
        np.testing.assert_allclose(surface.point(1.0, 1.0), [1, 1, 1])

    def test_row_major_order(self):
        """i außen, j innen."""
        text = "1 2\n" + "\n".join(f"{k} 0 0" for k in range(6))
        surface = parse_bezier(text)
        np.testing.assert_allclose(surface.control_points[1, 0], [3, 0, 0])
        np.testing.assert_allclose(surface.control_points[0, 2], [2, 0, 0])

    def test_basis_is_passed_through(self, trigo_table):
        text = "1 1\n0 0 0\n0 1 0\n1 0 0\n1 1 1\n"
        surface = parse_bezier(text, basis=BasisType.TRIGONOMETRIC, trigo_table=trigo_table)
        assert surface.basis is BasisType.TRIGONOMETRIC
        assert surface.trigo_table is trigo_table

    def test_premature_eof(self):
        with pytest.raises(BezierFormatError, match="Dateiende"):
            parse_bezier("1 1\n0 0 0\n0 1 0\n1 0 0\n")

    def test_missing_header(self):
        with pytest.raises(BezierFormatError):
            parse_bezier("")

    def test_bad_degree_token(self):
        with pytest.raises(BezierFormatError):
            parse_bezier("a 1\n")

    def test_negative_degree(self):
        with pytest.raises(BezierFormatError):
            parse_bezier("-1 1\n")

    def test_bad_coordinate(self):
        with pytest.raises(BezierFormatError, match="Kontrollpunkt 1"):
            parse_bezier("0 1\n0 0 0\n1 x 0\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(BezierFormatError) as exc_info:
            read_bezier(tmp_path / "fehlt.bzr")
        assert exc_info.value.path.endswith("fehlt.bzr")
