"""
Quadrature Report Generation

This module generates markdown and JSON reports summarizing rule accuracy.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import json

from .experiments import (
    ConvergenceResult,
    ExactnessResult,
    StudyParameters,
    ToleranceResult,
)


def _format_coefficients(coefficients: tuple[float, ...]) -> str:
    return "[" + ", ".join(f"{c:g}" for c in coefficients) + "]"


def generate_report(convergence_results: dict[str, ConvergenceResult],
                    exactness_results: Optional[dict[str, ExactnessResult]],
                    tolerance_results: Optional[dict[str, ToleranceResult]],
                    params: StudyParameters,
                    outdir: Path,
                    report_n_values: tuple[int, ...] = (1, 2, 4, 8, 16, 32, 64)) -> str:
    """Generate the full markdown report.

    Args:
        convergence_results: n-convergence results by rule
        exactness_results: Degree-of-exactness results by rule
        tolerance_results: Tolerance study results by rule
        params: Study parameters used
        outdir: Output directory for report
        report_n_values: Columns of the convergence table

    Returns:
        Report content as string
    """
    report = []

    # Header
    report.append("# Composite Newton-Cotes Quadrature Report")
    report.append("")
    report.append(f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}*")
    report.append("")

    # Method
    report.append("## Method")
    report.append("")
    report.append("A rule with coefficients $c_0, \\dots, c_{k-1}$ approximates a single interval as")
    report.append("")
    report.append("$$\\int_a^b f(x)\\,dx \\approx \\frac{b-a}{\\sum_i c_i} \\sum_i c_i f(x_i), \\qquad x_i = a + i\\frac{b-a}{m}$$")
    report.append("")
    report.append("with $m = k-1$, $i = 0..k-1$ for closed rules and $m = k+1$, $i = 1..k$ for open rules.")
    report.append("The composite estimate sums the rule over $n$ equal sub-intervals of $[a, b]$.")
    report.append("")

    # Parameters
    report.append("## Parameters Used")
    report.append("")
    report.append("| Parameter | Value |")
    report.append("|-----------|-------|")
    report.append(f"| function | `{params.function}` |")
    report.append(f"| function params | {json.dumps(params.function_params) if params.function_params else 'defaults'} |")
    report.append(f"| $a$ | {params.a:.6g} |")
    report.append(f"| $b$ | {params.b:.6g} |")
    report.append(f"| exact integral | {params.exact:.12g} |")
    report.append(f"| $n_{{max}}$ | {params.n_max} |")
    report.append(f"| tolerance | {params.tol:.0e} |")
    report.append("")

    # Rule catalog
    if exactness_results:
        report.append("## Rule Catalog")
        report.append("")
        report.append("| Rule | Coefficients | Open | Published degree | Measured degree | Weights match Newton-Cotes |")
        report.append("|------|--------------|------|------------------|-----------------|----------------------------|")
        for name, ex in exactness_results.items():
            report.append(
                f"| {name} | {_format_coefficients(ex.coefficients)} | {ex.open} | "
                f"{ex.published_degree} | {ex.measured_degree} | {ex.weights_match} |"
            )
        report.append("")

        mismatched = [name for name, ex in exactness_results.items()
                      if ex.published_degree != ex.measured_degree or not ex.weights_match]
        if mismatched:
            report.append(f"**Catalog entries disagreeing with derivation**: {', '.join(mismatched)}")
        else:
            report.append("All catalog entries agree with the derived Newton-Cotes weights.")
        report.append("")

    # Convergence table
    report.append("## Convergence with $n$")
    report.append("")
    report.append("Absolute error of the composite estimate:")
    report.append("")

    header = "| Rule | " + " | ".join([f"n={n}" for n in report_n_values]) + " | Order $p$ | Monotone |"
    separator = "|" + "|".join(["----------"] * (len(report_n_values) + 3)) + "|"
    report.append(header)
    report.append(separator)

    for name, result in convergence_results.items():
        cells = []
        for n in report_n_values:
            idx = [i for i, v in enumerate(result.n_values) if v == n]
            cells.append(f"{result.errors[idx[0]]:.2e}" if idx else "-")
        order = f"{result.order.order:.2f}" if result.order.valid else "-"
        report.append(f"| {name} | " + " | ".join(cells) + f" | {order} | {result.monotone} |")
    report.append("")

    # Tolerance study
    if tolerance_results:
        report.append(f"## Sub-intervals Needed for Error $\\le$ {params.tol:.0e}")
        report.append("")
        report.append("| Rule | $n$ | Function evaluations |")
        report.append("|------|-----|----------------------|")
        for name, tr in tolerance_results.items():
            n_str = str(tr.n_required) if tr.n_required is not None else f"> {params.n_max}"
            evals = str(tr.n_evaluations) if tr.n_evaluations is not None else "-"
            report.append(f"| {name} | {n_str} | {evals} |")
        report.append("")

    # Numerical notes
    report.append("## Numerical Notes")
    report.append("")
    report.append("1. **Accumulation**: plain left-to-right sum over sub-intervals")
    report.append("2. **Breakpoints**: $a + i(b-a)/n$, last breakpoint pinned to $b$")
    report.append("3. **Non-finite values**: propagated, never replaced")
    report.append("4. **Order fit**: least squares on $\\log_{10}$ error vs $\\log_{10} n$, errors below $10^{-13}$ excluded")
    report.append("")

    # Figure list
    report.append("## Figures")
    report.append("")
    report.append("| Filename | Description |")
    report.append("|----------|-------------|")
    report.append("| `error_vs_n_all_rules.png` | Absolute error vs $n$ for every rule |")
    report.append("| `estimate_vs_n_all_rules.png` | Estimates vs $n$ against the exact value |")
    for name in convergence_results:
        report.append(f"| `rule_points_{name}.png` | Evaluation points and weights of {name} |")
    report.append("")

    # Write to file
    report_content = "\n".join(report)
    report_path = outdir / "report.md"
    report_path.write_text(report_content)

    return report_content


def save_results_json(convergence_results: dict[str, ConvergenceResult],
                      exactness_results: Optional[dict[str, ExactnessResult]],
                      tolerance_results: Optional[dict[str, ToleranceResult]],
                      params: StudyParameters,
                      outdir: Path) -> dict:
    """Save all numerical results to JSON.

    Returns:
        Results dictionary
    """
    results = {
        "parameters": {
            "function": params.function,
            "function_params": params.function_params,
            "a": params.a,
            "b": params.b,
            "exact": params.exact,
            "n_max": params.n_max,
            "tol": params.tol,
        },
        "rules": {},
        "timestamp": datetime.now().isoformat(),
    }

    for name, result in convergence_results.items():
        results["rules"][name] = {
            "n_values": result.n_values.tolist(),
            "estimates": result.estimates.tolist(),
            "errors": result.errors.tolist(),
            "order": result.order.order if result.order.valid else None,
            "final_error": result.final_error,
            "monotone": result.monotone,
        }

        if exactness_results and name in exactness_results:
            ex = exactness_results[name]
            results["rules"][name].update({
                "coefficients": list(ex.coefficients),
                "open": ex.open,
                "published_degree": ex.published_degree,
                "measured_degree": ex.measured_degree,
                "weights_match": ex.weights_match,
            })

        if tolerance_results and name in tolerance_results:
            results["rules"][name]["n_required"] = tolerance_results[name].n_required

    # Write to file
    json_path = outdir / "results.json"
    with open(json_path, 'w') as f:
        json.dump(results, f, indent=2)

    return results
