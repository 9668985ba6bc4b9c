"""
Composite Numerical Integration

This module applies a QuadratureRule piecewise over an evenly
partitioned interval:

∫_a^b f(x) dx ≈ Σ_{i=0}^{n-1} rule(f, x_i, x_{i+1}),   x_i = a + i*(b-a)/n

Key features:
- Deterministic breakpoints (a function of a, b, n, i only)
- Left-to-right accumulation
- Explicit rejection of n < 1
- NaN/Infinity from f propagate to the result untouched
"""

from dataclasses import dataclass
from numbers import Integral
from typing import Optional, Sequence
import numpy as np
from numpy.typing import NDArray

from .rules import Integrand, QuadratureRule


@dataclass
class IntegrationResult:
    """Result of a composite integration.

    Attributes:
        estimate: The integral estimate over [a, b]
        a: Lower bound
        b: Upper bound
        n: Number of sub-intervals
        rule_name: Name of the rule applied on each sub-interval
        partition: The n+1 breakpoints
        panel_values: Contribution of each sub-interval
        n_evaluations: Number of calls made to f
        finite: Whether the estimate is finite
    """
    estimate: float
    a: float
    b: float
    n: int
    rule_name: str
    partition: NDArray[np.float64]
    panel_values: NDArray[np.float64]
    n_evaluations: int
    finite: bool


def _check_panel_count(n) -> int:
    if isinstance(n, bool) or not isinstance(n, Integral):
        raise ValueError(f"n must be an integer >= 1, got {n!r}")
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return int(n)


def make_partition(a: float, b: float, n: int) -> NDArray[np.float64]:
    """Create n+1 equally spaced breakpoints from a to b.

    Args:
        a: Lower bound
        b: Upper bound (b < a gives a decreasing partition)
        n: Number of sub-intervals (>= 1)

    Returns:
        Array of breakpoints a + i*(b-a)/n, with the last one equal to b

    Raises:
        ValueError: If n is not an integer >= 1
    """
    n = _check_panel_count(n)
    a = float(a)
    b = float(b)
    x = a + np.arange(n + 1, dtype=float) * (b - a) / n
    x[-1] = b
    return x


def composite_integrate(f: Integrand, a: float, b: float, n: int,
                        rule: QuadratureRule) -> float:
    """Composite integration of f over [a, b] with n sub-intervals.

    Args:
        f: Function to integrate
        a: Lower bound
        b: Upper bound
        n: Number of sub-intervals (>= 1)
        rule: Rule applied on each sub-interval

    Returns:
        Approximate integral. 0.0 when a == b.

    Raises:
        ValueError: If n is not an integer >= 1
    """
    x = make_partition(a, b, n)
    if a == b:
        return 0.0

    total = 0.0
    for i in range(len(x) - 1):
        total += rule(f, float(x[i]), float(x[i + 1]))
    return total


def integrate(f: Integrand, a: float, b: float, n: int,
              rule: QuadratureRule) -> IntegrationResult:
    """Composite integration returning per-panel diagnostics.

    The estimate is accumulated exactly as in composite_integrate.
    """
    x = make_partition(a, b, n)
    panel_values = np.zeros(len(x) - 1)
    n_evaluations = 0

    total = 0.0
    if a != b:
        for i in range(len(x) - 1):
            panel_values[i] = rule(f, float(x[i]), float(x[i + 1]))
            total += panel_values[i]
        n_evaluations = (len(x) - 1) * rule.n_points

    return IntegrationResult(
        estimate=float(total),
        a=float(a),
        b=float(b),
        n=len(x) - 1,
        rule_name=rule.name,
        partition=x,
        panel_values=panel_values,
        n_evaluations=n_evaluations,
        finite=bool(np.isfinite(total)),
    )


def convergence_study(f: Integrand, a: float, b: float,
                      rule: QuadratureRule,
                      n_values: Optional[Sequence[int]] = None,
                      exact: Optional[float] = None) -> tuple[NDArray[np.int64],
                                                              NDArray[np.float64],
                                                              NDArray[np.float64]]:
    """Study convergence of the composite estimate with increasing n.

    Args:
        f: Function to integrate
        a: Lower bound
        b: Upper bound
        rule: Rule applied on each sub-interval
        n_values: Sub-interval counts to test (default: 1, 2, 4, ..., 256)
        exact: Exact integral, if known

    Returns:
        Tuple of (n_array, estimate_array, error_array). Errors are NaN
        when exact is None.
    """
    if n_values is None:
        n_values = [2 ** k for k in range(9)]

    n_arr = np.array([_check_panel_count(n) for n in n_values], dtype=np.int64)
    estimates = np.zeros(len(n_arr))

    for i, n in enumerate(n_arr):
        estimates[i] = composite_integrate(f, a, b, int(n), rule)

    if exact is None:
        errors = np.full(len(n_arr), np.nan)
    else:
        errors = np.abs(estimates - exact)

    return n_arr, estimates, errors


def find_n_for_tolerance(f: Integrand, a: float, b: float,
                         rule: QuadratureRule, exact: float, tol: float,
                         n_max: int = 1000) -> Optional[int]:
    """Find the smallest n whose absolute error is within tol.

    Args:
        f: Function to integrate
        a: Lower bound
        b: Upper bound
        rule: Rule applied on each sub-interval
        exact: Exact integral
        tol: Absolute error tolerance (> 0)
        n_max: Largest n to try

    Returns:
        Smallest n in 1..n_max meeting the tolerance, or None
    """
    if tol <= 0:
        raise ValueError(f"tol must be > 0, got {tol}")
    n_max = _check_panel_count(n_max)

    for n in range(1, n_max + 1):
        if abs(composite_integrate(f, a, b, n, rule) - exact) <= tol:
            return n
    return None
