"""
Test integrand definitions with known integrals.

Each function is a scalar callable f(x) -> float. Where a closed form
exists, exact_integral returns the true value so estimates can be
scored. inverse_square_sine (sin(1/x^2)) has no elementary antiderivative
and returns NaN at x = 0 instead of raising, so a singular endpoint shows
up as a non-finite estimate.
"""
from __future__ import annotations

from typing import Dict, List, Sequence
import math
import numpy as np

from .rules import Integrand

FUNCTION_NAMES = [
    "sin",
    "cos",
    "exp",
    "polynomial",
    "gaussian",
    "runge",
    "sqrt",
    "inverse_square_sine",
]


def get_function_names() -> List[str]:
    """Return the list of supported function names."""

    return FUNCTION_NAMES.copy()


def default_function_params(name: str) -> Dict:
    """Return default parameters for a function."""

    if name == "sin":
        return {"A": 1.0, "omega": 1.0}
    if name == "cos":
        return {"A": 1.0, "omega": 1.0}
    if name == "exp":
        return {"A": 1.0, "k": 1.0}
    if name == "polynomial":
        return {"coefficients": [0.0, 0.0, 1.0]}
    if name == "gaussian":
        return {"sigma": 1.0}
    if name == "runge":
        return {"c": 25.0}
    if name == "sqrt":
        return {"A": 1.0}
    if name == "inverse_square_sine":
        return {}
    raise ValueError(f"Unknown function: {name}")


def _get_params(name: str, params: Dict | None) -> Dict:
    base = default_function_params(name)
    if params:
        base.update(params)
    return base


def polynomial(coefficients: Sequence[float]) -> Integrand:
    """Return p(x) = Σ c_k x^k (coefficients in increasing degree)."""

    coeffs = [float(c) for c in coefficients]

    def p(x: float) -> float:
        # Horner
        acc = 0.0
        for c in reversed(coeffs):
            acc = acc * x + c
        return acc

    return p


def polynomial_integral(coefficients: Sequence[float], a: float, b: float) -> float:
    """Exact ∫_a^b Σ c_k x^k dx."""

    antiderivative = [0.0] + [float(c) / (k + 1) for k, c in enumerate(coefficients)]
    P = polynomial(antiderivative)
    return P(b) - P(a)


def _inverse_square_sine(x: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.sin(1.0 / np.square(np.float64(x))))


def make_function(name: str, params: Dict | None = None) -> Integrand:
    """Build a test integrand.

    Args:
        name: Name of the function
        params: Optional parameter overrides

    Returns:
        Scalar callable f(x)
    """

    if name not in FUNCTION_NAMES:
        raise ValueError(f"Unknown function: {name}")

    p = _get_params(name, params)

    if name == "sin":
        A, omega = p["A"], p["omega"]
        return lambda x: A * math.sin(omega * x)

    if name == "cos":
        A, omega = p["A"], p["omega"]
        return lambda x: A * math.cos(omega * x)

    if name == "exp":
        A, k = p["A"], p["k"]
        return lambda x: A * math.exp(k * x)

    if name == "polynomial":
        return polynomial(p["coefficients"])

    if name == "gaussian":
        sigma = p["sigma"]
        return lambda x: math.exp(-0.5 * (x / sigma) ** 2)

    if name == "runge":
        c = p["c"]
        return lambda x: 1.0 / (1.0 + c * x * x)

    if name == "sqrt":
        A = p["A"]
        return lambda x: A * math.sqrt(x)

    return _inverse_square_sine


def exact_integral(name: str, a: float, b: float, params: Dict | None = None) -> float | None:
    """Closed-form ∫_a^b f(x) dx, or None when there is none."""

    if name not in FUNCTION_NAMES:
        raise ValueError(f"Unknown function: {name}")

    p = _get_params(name, params)

    if name == "sin":
        A, omega = p["A"], p["omega"]
        return A * (math.cos(omega * a) - math.cos(omega * b)) / omega

    if name == "cos":
        A, omega = p["A"], p["omega"]
        return A * (math.sin(omega * b) - math.sin(omega * a)) / omega

    if name == "exp":
        A, k = p["A"], p["k"]
        return A * (math.exp(k * b) - math.exp(k * a)) / k

    if name == "polynomial":
        return polynomial_integral(p["coefficients"], a, b)

    if name == "gaussian":
        sigma = p["sigma"]
        scale = sigma * math.sqrt(2.0)
        return sigma * math.sqrt(math.pi / 2.0) * (math.erf(b / scale) - math.erf(a / scale))

    if name == "runge":
        root = math.sqrt(p["c"])
        return (math.atan(root * b) - math.atan(root * a)) / root

    if name == "sqrt":
        return p["A"] * 2.0 / 3.0 * (b ** 1.5 - a ** 1.5)

    return None
