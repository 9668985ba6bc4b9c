"""
Numerical helpers for measuring rule accuracy.
"""
from __future__ import annotations

from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from .functions import polynomial
from .rules import QuadratureRule, newton_cotes_weights


@dataclass
class OrderResult:
    order: float
    n_used: int
    valid: bool


def fit_convergence_order(n_values: NDArray[np.float64],
                          errors: NDArray[np.float64],
                          floor: float = 1e-13,
                          min_points: int = 3) -> OrderResult:
    """Fit the empirical convergence order p from error ~ C n^(-p).

    Points with non-finite errors, or errors at or below ``floor``
    (round-off level), are discarded before the log-log fit.
    """

    n_values = np.asarray(n_values, dtype=float)
    errors = np.asarray(errors, dtype=float)

    mask = np.isfinite(n_values) & np.isfinite(errors) & (n_values > 0) & (errors > floor)
    n_valid = n_values[mask]
    e_valid = errors[mask]

    if n_valid.size < min_points:
        return OrderResult(order=float("nan"), n_used=int(n_valid.size), valid=False)

    x = np.log10(n_valid)
    y = np.log10(e_valid)

    b, a = np.polyfit(x, y, 1)
    return OrderResult(order=float(-b), n_used=int(n_valid.size), valid=True)


def degree_of_exactness(rule: QuadratureRule,
                        max_degree: int = 15,
                        rtol: float = 1e-9) -> int:
    """Highest d such that the rule integrates x^0..x^d exactly on [0, 1].

    Returns -1 if the rule already fails on constants.
    """

    degree = -1
    for d in range(max_degree + 1):
        coeffs = [0.0] * d + [1.0]
        estimate = rule(polynomial(coeffs), 0.0, 1.0)
        exact = 1.0 / (d + 1)
        if abs(estimate - exact) > rtol * exact:
            break
        degree = d
    return degree


def weights_match(rule: QuadratureRule, rtol: float = 1e-9) -> bool:
    """Check the rule's normalized weights against derived Newton-Cotes weights."""

    derived = newton_cotes_weights(rule.n_points, open=rule.open)
    return bool(np.allclose(rule.weights, derived, rtol=rtol, atol=rtol))
