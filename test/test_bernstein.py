"""
Bernstein-Basis Tests

Partition of Unity, Ableitungen gegen Finite Differenzen, Grenzen der
Ableitungsordnung.
"""

import numpy as np
import pytest

from config.tolerances import Tolerances
from modeling.bernstein import bernstein, bernstein_derivatives
from modeling.errors import CapabilityExceededError


class TestBernsteinValues:
    """Tests für die Basiswerte."""

    @pytest.mark.parametrize("n", [0, 1, 2, 3, 5, 8])
    @pytest.mark.parametrize("u", [0.0, 0.13, 0.5, 0.77, 1.0])
    def test_partition_of_unity(self, n, u):
        """Summe aller Basisfunktionen ist 1."""
        assert bernstein(n, u).sum() == pytest.approx(1.0, abs=Tolerances.COMPARE_BASIS_SUM)

    def test_endpoints_interpolate(self):
        """B_0(0) = 1 und B_n(1) = 1."""
        np.testing.assert_allclose(bernstein(3, 0.0), [1.0, 0.0, 0.0, 0.0])
        np.testing.assert_allclose(bernstein(3, 1.0), [0.0, 0.0, 0.0, 1.0])

    def test_cubic_closed_form(self):
        """Grad 3 stimmt mit den expliziten Polynomen überein."""
        u = 0.3
        expected = [(1 - u) ** 3, 3 * u * (1 - u) ** 2, 3 * u ** 2 * (1 - u), u ** 3]
        np.testing.assert_allclose(bernstein(3, u), expected)

    def test_negative_degree_raises(self):
        with pytest.raises(ValueError):
            bernstein(-1, 0.5)


class TestBernsteinDerivatives:
    """Tests für die Ableitungsrekursion."""

    def test_shape(self):
        assert bernstein_derivatives(4, 0.2, 2).shape == (3, 5)

    def test_row_zero_matches_values(self):
        np.testing.assert_allclose(bernstein_derivatives(4, 0.6, 3)[0], bernstein(4, 0.6))

    @pytest.mark.parametrize("u", [0.1, 0.45, 0.9])
    def test_first_derivative_finite_difference(self, u):
        """Erste Ableitung gegen zentrale Differenz."""
        h = 1e-6
        fd = (bernstein(4, u + h) - bernstein(4, u - h)) / (2 * h)
        np.testing.assert_allclose(bernstein_derivatives(4, u, 1)[1], fd, atol=1e-6)

    @pytest.mark.parametrize("u", [0.1, 0.45, 0.9])
    def test_second_derivative_finite_difference(self, u):
        """Zweite Ableitung gegen zentrale Differenz."""
        h = 1e-4
        fd = (bernstein(4, u + h) - 2 * bernstein(4, u) + bernstein(4, u - h)) / h ** 2
        np.testing.assert_allclose(bernstein_derivatives(4, u, 2)[2], fd, atol=1e-4)

    def test_derivatives_sum_to_zero(self):
        """Ableitungen der Partition of Unity verschwinden."""
        table = bernstein_derivatives(5, 0.37, 3)
        np.testing.assert_allclose(table[1:].sum(axis=1), 0.0, atol=1e-10)

    def test_derivative_order_equal_to_degree(self):
        """d = n ist erlaubt, die n-te Ableitung ist konstant."""
        a = bernstein_derivatives(2, 0.1, 2)[2]
        b = bernstein_derivatives(2, 0.8, 2)[2]
        np.testing.assert_allclose(a, [2.0, -4.0, 2.0])
        np.testing.assert_allclose(a, b)

    def test_derivative_order_above_degree_raises(self):
        with pytest.raises(CapabilityExceededError) as exc_info:
            bernstein_derivatives(2, 0.5, 3)
        assert exc_info.value.requested == 3
        assert exc_info.value.supported == 2

    def test_negative_order_raises(self):
        with pytest.raises(ValueError):
            bernstein_derivatives(2, 0.5, -1)
