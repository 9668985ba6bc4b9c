"""
ncquad - Composite Newton-Cotes Quadrature

A small framework for approximating definite integrals of one-dimensional
functions with composite rules from the Newton-Cotes family.

Usage:
    python -m ncquad --help
    python -m ncquad --rule simpson --n 10
    python -m ncquad --coefficients 1,4,1 --n 10
    python -m ncquad --sweep --outdir outputs

Main components:
    - rules: QuadratureRule, the rule generator and the built-in catalog
    - integrate: Composite integration driver
    - functions: Test integrands with closed-form integrals
    - analysis: Convergence order, degree of exactness, weight checks
    - experiments: Accuracy studies over the rule catalog
    - plot: Visualization utilities
    - report: Report generation
"""

__version__ = "0.1.0"

from .rules import (
    Integrand,
    QuadratureRule,
    RULES,
    make_rule,
    get_rule,
    get_rule_names,
    newton_cotes_weights,
    newton_cotes_rule,
    trapezoid,
    midpoint,
    simpson,
    simpson38,
    boole,
    milne,
)

from .integrate import (
    IntegrationResult,
    make_partition,
    composite_integrate,
    integrate,
    convergence_study,
    find_n_for_tolerance,
)

__all__ = [
    "Integrand",
    "QuadratureRule",
    "RULES",
    "make_rule",
    "get_rule",
    "get_rule_names",
    "newton_cotes_weights",
    "newton_cotes_rule",
    "trapezoid",
    "midpoint",
    "simpson",
    "simpson38",
    "boole",
    "milne",
    "IntegrationResult",
    "make_partition",
    "composite_integrate",
    "integrate",
    "convergence_study",
    "find_n_for_tolerance",
]
