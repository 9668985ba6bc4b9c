"""
Quadrature Rule Definitions

This module provides the building blocks for composite Newton-Cotes
integration:

- QuadratureRule: an immutable (coefficients, open) pair that approximates
  ∫f over a single interval [a, b]
- make_rule: the rule generator, building a QuadratureRule from a
  coefficient vector
- RULES: the built-in catalog (trapezoid, midpoint, Simpson, Boole, ...)
- newton_cotes_weights: weights derived from the moment equations, used
  to check catalog entries against an independent derivation

Point layout (k coefficients):
- closed rule: order = k - 1, points a + i*(b-a)/order for i = 0..k-1
- open rule:   order = k + 1, points a + i*(b-a)/order for i = 1..k

A rule returns (b-a) / sum(c) * Σ c_i f(x_i).
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence
import numpy as np
from numpy.typing import NDArray

# A function to integrate: one real argument, one real result.
Integrand = Callable[[float], float]


@dataclass(frozen=True)
class QuadratureRule:
    """A Newton-Cotes rule over a single interval.

    Attributes:
        coefficients: Relative weights of the evaluation points
        open: If True, the interval endpoints are not evaluated
        name: Label used in reports and error messages
    """
    coefficients: tuple[float, ...]
    open: bool = False
    name: str = "custom"

    def __post_init__(self) -> None:
        """Validate and freeze the coefficient vector."""
        coeffs = tuple(float(c) for c in self.coefficients)
        if len(coeffs) == 0:
            raise ValueError("coefficients must be non-empty")
        if not np.all(np.isfinite(coeffs)):
            raise ValueError(f"coefficients must be finite, got {coeffs}")
        if sum(coeffs) == 0.0:
            raise ValueError(f"coefficients must have a non-zero sum, got {coeffs}")
        if not self.open and len(coeffs) < 2:
            raise ValueError(
                f"a closed rule needs at least 2 coefficients, got {len(coeffs)}"
            )
        object.__setattr__(self, "coefficients", coeffs)
        object.__setattr__(self, "open", bool(self.open))

    @property
    def n_points(self) -> int:
        """Number of function evaluations per interval."""
        return len(self.coefficients)

    @property
    def order(self) -> int:
        """Number of equal steps the interval is divided into to place points."""
        if self.open:
            return self.n_points + 1
        return self.n_points - 1

    @property
    def coefficient_sum(self) -> float:
        return sum(self.coefficients)

    @property
    def weights(self) -> NDArray[np.float64]:
        """Coefficients normalized to sum to 1."""
        return np.asarray(self.coefficients, dtype=float) / self.coefficient_sum

    def points(self, a: float, b: float) -> list[float]:
        """Evaluation points of the rule on [a, b].

        Args:
            a: Left end of the interval
            b: Right end of the interval (b < a is allowed)

        Returns:
            List of n_points abscissae, ordered from a towards b
        """
        step_count = self.order
        start = 1 if self.open else 0
        xs = [a + i * (b - a) / step_count for i in range(start, start + self.n_points)]
        if not self.open:
            # closed rules end exactly on b
            xs[-1] = b
        return xs

    def apply(self, f: Integrand, a: float, b: float) -> float:
        """Approximate ∫f over [a, b] with a single application of the rule.

        A zero-width interval gives exactly 0.0 without evaluating f.
        Non-finite values returned by f are not intercepted.
        """
        if a == b:
            return 0.0
        total = 0.0
        for c, x in zip(self.coefficients, self.points(a, b)):
            total += c * f(x)
        return float((b - a) / self.coefficient_sum * total)

    def __call__(self, f: Integrand, a: float, b: float) -> float:
        return self.apply(f, a, b)


def make_rule(coefficients: Sequence[float],
              open: bool = False,
              name: Optional[str] = None) -> QuadratureRule:
    """Build a quadrature rule from a coefficient vector.

    Args:
        coefficients: Relative weights, one per evaluation point
        open: Exclude the interval endpoints from the evaluation points
        name: Optional label (default "custom")

    Returns:
        QuadratureRule

    Raises:
        ValueError: If coefficients are empty, non-finite, sum to zero, or
            a closed rule is requested with a single coefficient
    """
    return QuadratureRule(tuple(coefficients), open=open, name=name or "custom")


# Built-in catalog. "degree" is the published degree of exactness.
RULES: dict[str, dict] = {
    "trapezoid": {
        "coefficients": (1, 1),
        "open": False,
        "degree": 1,
    },
    "midpoint": {
        "coefficients": (1,),
        "open": True,
        "degree": 1,
    },
    "simpson": {
        "coefficients": (1, 4, 1),
        "open": False,
        "degree": 3,
    },
    "simpson38": {
        "coefficients": (1, 3, 3, 1),
        "open": False,
        "degree": 3,
    },
    "boole": {
        "coefficients": (7, 32, 12, 32, 7),
        "open": False,
        "degree": 5,
    },
    "milne": {
        "coefficients": (2, -1, 2),
        "open": True,
        "degree": 3,
    },
}


def get_rule_names() -> list[str]:
    """Return the names of the built-in rules."""
    return list(RULES.keys())


def get_rule(rule_name: str) -> QuadratureRule:
    """Get a built-in rule by name.

    Raises:
        ValueError: If rule_name is not in RULES
    """
    if rule_name not in RULES:
        valid = ", ".join(RULES.keys())
        raise ValueError(f"Unknown rule '{rule_name}'. Valid: {valid}")

    entry = RULES[rule_name]
    return make_rule(entry["coefficients"], open=entry["open"], name=rule_name)


def newton_cotes_weights(n_points: int, open: bool = False) -> NDArray[np.float64]:
    """Derive Newton-Cotes weights for the generator's point layout.

    Solves the moment equations on [0, 1]:

        Σ_j w_j x_j^d = 1 / (d + 1),   d = 0..n_points-1

    so the resulting rule is exact for polynomials of degree n_points-1
    (one degree more when n_points is odd, by symmetry).

    Args:
        n_points: Number of evaluation points
        open: Use the open layout (endpoints excluded)

    Returns:
        Weights normalized to sum to 1

    Raises:
        ValueError: If n_points < 1, or n_points < 2 for a closed rule
    """
    if n_points < 1:
        raise ValueError(f"n_points must be >= 1, got {n_points}")
    if not open and n_points < 2:
        raise ValueError(f"a closed rule needs n_points >= 2, got {n_points}")

    unit = QuadratureRule((1.0,) * n_points, open=open)
    x = np.asarray(unit.points(0.0, 1.0), dtype=float)

    # A[d, j] = x_j ** d
    A = np.vander(x, n_points, increasing=True).T
    moments = 1.0 / np.arange(1, n_points + 1, dtype=float)
    w = np.linalg.solve(A, moments)
    return w / np.sum(w)


def newton_cotes_rule(n_points: int, open: bool = False) -> QuadratureRule:
    """Build the n_points Newton-Cotes rule from derived weights."""
    kind = "open" if open else "closed"
    return make_rule(newton_cotes_weights(n_points, open), open=open,
                     name=f"newton_cotes_{kind}_{n_points}")


trapezoid = get_rule("trapezoid")
midpoint = get_rule("midpoint")
simpson = get_rule("simpson")
simpson38 = get_rule("simpson38")
boole = get_rule("boole")
milne = get_rule("milne")
