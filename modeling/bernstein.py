"""
SurfLab - Bernstein Basis
=========================

Bernstein-Polynome B_k^n(u) und ihre Ableitungen.

- bernstein(n, u): de Casteljau-artige Dreiecks-Aktualisierung, O(n²)
- bernstein_derivatives(n, u, d): Ableitungen über die Differenzenformel
  d/du B_k^n = n * (B_{k-1}^{n-1} - B_k^{n-1}), rekursiv über niedrigere Grade

Verwendung:
    from modeling.bernstein import bernstein, bernstein_derivatives

    values = bernstein(3, 0.5)                # shape (4,)
    table = bernstein_derivatives(3, 0.5, 2)  # shape (3, 4)
"""

import numpy as np
from loguru import logger

from modeling.errors import CapabilityExceededError


def bernstein(n: int, u: float) -> np.ndarray:
    """
    Berechnet alle n+1 Bernstein-Polynome vom Grad n an der Stelle u.

    Args:
        n: Polynomgrad (>= 0)
        u: Parameter in [0, 1]

    Returns:
        Array der Länge n+1
    """
    if n < 0:
        raise ValueError(f"Grad muss >= 0 sein, ist {n}")

    coeff = np.empty(n + 1, dtype=np.float64)
    coeff[0] = 1.0
    u1 = 1.0 - u
    for j in range(1, n + 1):
        saved = 0.0
        for k in range(j):
            tmp = coeff[k]
            coeff[k] = saved + tmp * u1
            saved = tmp * u
        coeff[j] = saved
    return coeff


def bernstein_derivatives(n: int, u: float, derivatives: int) -> np.ndarray:
    """
    Berechnet Bernstein-Werte und Ableitungen bis Ordnung `derivatives`.

    Zeile i enthält die i-te Ableitung aller n+1 Basisfunktionen. Die
    Ableitungen kommen aus der Basis vom Grad n-1 (rekursiv), mit den
    Randtermen B_{-1} = B_n = 0.

    Raises:
        CapabilityExceededError: derivatives > n
    """
    if derivatives < 0:
        raise ValueError(f"Ableitungsordnung muss >= 0 sein, ist {derivatives}")
    if derivatives > n:
        logger.error(f"Bernstein: {derivatives}. Ableitung für Grad {n} angefordert")
        raise CapabilityExceededError("Bernstein derivative order", derivatives, n)

    result = np.zeros((derivatives + 1, n + 1), dtype=np.float64)
    result[0] = bernstein(n, u)
    if derivatives == 0:
        return result

    rec = bernstein_derivatives(n - 1, u, derivatives - 1)
    for i in range(1, derivatives + 1):
        last = rec[i - 1]
        result[i, 0] = -n * last[0]
        result[i, 1:n] = n * (last[:-1] - last[1:])
        result[i, n] = n * last[n - 1]
    return result
