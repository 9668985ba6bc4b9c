"""
Quadrature Experiments

This module provides the accuracy harness for the built-in rule catalog.

Experiments include:
- Convergence of the composite estimate with n for every rule
- Degree of exactness (published vs measured) and weight verification
- Smallest n reaching a given error tolerance
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence
import numpy as np
from numpy.typing import NDArray

from .rules import RULES, get_rule
from .functions import FUNCTION_NAMES, make_function, exact_integral
from .integrate import convergence_study, find_n_for_tolerance
from .analysis import OrderResult, fit_convergence_order, degree_of_exactness, weights_match


@dataclass
class StudyParameters:
    """Parameters for an accuracy study.

    Attributes:
        function: Name of the test integrand
        function_params: Overrides for the integrand's default parameters
        a: Lower bound
        b: Upper bound
        n_max: Largest number of sub-intervals tried
        tol: Absolute error tolerance for the tolerance study
    """
    function: str = "sin"
    function_params: dict = field(default_factory=dict)
    a: float = 0.0
    b: float = np.pi
    n_max: int = 100
    tol: float = 1e-6

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.function not in FUNCTION_NAMES:
            valid = ", ".join(FUNCTION_NAMES)
            raise ValueError(f"Unknown function '{self.function}'. Valid: {valid}")
        if not (np.isfinite(self.a) and np.isfinite(self.b)):
            raise ValueError(f"a and b must be finite, got a={self.a}, b={self.b}")
        if self.n_max < 1:
            raise ValueError(f"n_max must be >= 1, got {self.n_max}")
        if self.tol <= 0:
            raise ValueError(f"tol must be > 0, got {self.tol}")
        if self.exact is None:
            raise ValueError(f"Function '{self.function}' has no closed-form integral")

    @property
    def exact(self) -> Optional[float]:
        return exact_integral(self.function, self.a, self.b, self.function_params)

    def integrand(self):
        return make_function(self.function, self.function_params)


@dataclass
class ConvergenceResult:
    """Result of an n-convergence experiment for one rule."""
    rule_name: str
    function_name: str
    n_values: NDArray[np.int64]
    estimates: NDArray[np.float64]
    errors: NDArray[np.float64]
    order: OrderResult
    final_error: float
    monotone: bool


@dataclass
class ExactnessResult:
    """Published vs measured accuracy of a catalog rule."""
    rule_name: str
    coefficients: tuple[float, ...]
    open: bool
    published_degree: int
    measured_degree: int
    weights_match: bool


@dataclass
class ToleranceResult:
    """Smallest n reaching the tolerance for one rule."""
    rule_name: str
    tol: float
    n_required: Optional[int]
    n_evaluations: Optional[int]


def run_rule_convergence(rule_name: str,
                         params: Optional[StudyParameters] = None,
                         n_values: Optional[Sequence[int]] = None) -> ConvergenceResult:
    """Run n-convergence study for a catalog rule.

    Args:
        rule_name: Name of the rule to test
        params: Study parameters (default: sin on [0, π])
        n_values: Sub-interval counts (default: 1..params.n_max)

    Returns:
        ConvergenceResult with data
    """
    if params is None:
        params = StudyParameters()
    if n_values is None:
        n_values = list(range(1, params.n_max + 1))

    rule = get_rule(rule_name)
    n_arr, estimates, errors = convergence_study(
        params.integrand(), params.a, params.b, rule, n_values, params.exact
    )

    # Monotone: every step strictly reduces the error
    monotone = bool(len(errors) >= 2 and np.all(np.diff(errors) < 0))

    return ConvergenceResult(
        rule_name=rule_name,
        function_name=params.function,
        n_values=n_arr,
        estimates=estimates,
        errors=errors,
        order=fit_convergence_order(n_arr, errors),
        final_error=float(errors[-1]),
        monotone=monotone,
    )


def run_all_convergence(params: Optional[StudyParameters] = None,
                        n_values: Optional[Sequence[int]] = None) -> dict[str, ConvergenceResult]:
    """Run n-convergence for all catalog rules.

    Returns:
        Dictionary mapping rule name to result
    """
    results = {}
    for rule_name in RULES:
        results[rule_name] = run_rule_convergence(rule_name, params, n_values)
    return results


def run_exactness_table(max_degree: int = 15) -> dict[str, ExactnessResult]:
    """Measure degree of exactness and verify weights for every catalog rule."""
    results = {}
    for rule_name, entry in RULES.items():
        rule = get_rule(rule_name)
        results[rule_name] = ExactnessResult(
            rule_name=rule_name,
            coefficients=rule.coefficients,
            open=rule.open,
            published_degree=entry["degree"],
            measured_degree=degree_of_exactness(rule, max_degree=max_degree),
            weights_match=weights_match(rule),
        )
    return results


def run_tolerance_study(params: Optional[StudyParameters] = None) -> dict[str, ToleranceResult]:
    """Find the smallest n reaching params.tol for every catalog rule."""
    if params is None:
        params = StudyParameters()

    f = params.integrand()
    exact = params.exact

    results = {}
    for rule_name in RULES:
        rule = get_rule(rule_name)
        n_required = find_n_for_tolerance(
            f, params.a, params.b, rule, exact, params.tol, n_max=params.n_max
        )
        results[rule_name] = ToleranceResult(
            rule_name=rule_name,
            tol=params.tol,
            n_required=n_required,
            n_evaluations=None if n_required is None else n_required * rule.n_points,
        )
    return results


def summarize_results(convergence_results: dict[str, ConvergenceResult],
                      exactness_results: Optional[dict[str, ExactnessResult]] = None,
                      tolerance_results: Optional[dict[str, ToleranceResult]] = None) -> dict:
    """Create a summary of all experimental results.

    Returns:
        Summary dictionary
    """
    summary = {
        "rules": {},
    }

    for name, result in convergence_results.items():
        summary["rules"][name] = {
            "final_error": result.final_error,
            "order": result.order.order if result.order.valid else None,
            "monotone": result.monotone,
        }
        if exactness_results and name in exactness_results:
            ex = exactness_results[name]
            summary["rules"][name]["published_degree"] = ex.published_degree
            summary["rules"][name]["measured_degree"] = ex.measured_degree
            summary["rules"][name]["weights_match"] = ex.weights_match
        if tolerance_results and name in tolerance_results:
            summary["rules"][name]["n_required"] = tolerance_results[name].n_required

    return summary
