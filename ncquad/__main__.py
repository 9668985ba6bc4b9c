"""
ncquad CLI Entry Point

Run with: python -m ncquad [options]
"""

import argparse
import json
import sys
from pathlib import Path
import time

from .rules import get_rule, get_rule_names, make_rule
from .functions import get_function_names, make_function, exact_integral
from .integrate import integrate
from .experiments import (
    StudyParameters,
    run_all_convergence,
    run_exactness_table,
    run_tolerance_study,
)
from .plot import plot_error_convergence, plot_estimates, plot_rule_points
from .report import generate_report, save_results_json


def parse_coefficients(text: str) -> list[float]:
    """Parse a comma-separated coefficient list such as "1,4,1"."""
    parts = [p.strip() for p in text.split(",") if p.strip()]
    if not parts:
        raise ValueError(f"No coefficients in {text!r}")
    return [float(p) for p in parts]


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ncquad",
        description="Composite Newton-Cotes quadrature",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Integration problem
    parser.add_argument("--function", type=str, default="sin",
                        choices=get_function_names(),
                        help="Test integrand")
    parser.add_argument("--function_params", type=str, default=None,
                        help="JSON string of parameter overrides for the integrand")
    parser.add_argument("--a", type=float, default=0.0,
                        help="Lower integration bound")
    parser.add_argument("--b", type=float, default=3.141592653589793,
                        help="Upper integration bound")
    parser.add_argument("--n", type=int, default=10,
                        help="Number of sub-intervals")

    # Rule selection
    parser.add_argument("--rule", type=str, default="simpson",
                        choices=get_rule_names(),
                        help="Built-in rule")
    parser.add_argument("--coefficients", type=str, default=None,
                        help="Custom rule coefficients, e.g. '1,4,1' (overrides --rule)")
    parser.add_argument("--open", action="store_true",
                        help="Custom rule excludes the interval endpoints")

    # Experiment modes
    parser.add_argument("--sweep", action="store_true",
                        help="Run the accuracy study over all built-in rules")
    parser.add_argument("--nmax", type=int, default=100,
                        help="Largest n in the convergence and tolerance studies")
    parser.add_argument("--tol", type=float, default=1e-6,
                        help="Absolute error tolerance for the tolerance study")
    parser.add_argument("--no-plots", action="store_true",
                        help="Skip figure generation in sweep mode")

    # Output
    parser.add_argument("--outdir", type=str, default="outputs",
                        help="Output directory for plots and results")
    parser.add_argument("--show", action="store_true",
                        help="Display plots interactively")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress progress output")

    return parser.parse_args(argv)


def _function_params(args: argparse.Namespace) -> dict:
    if args.function_params:
        return json.loads(args.function_params)
    return {}


def run_single(args: argparse.Namespace) -> float:
    """Run a single composite integration."""
    if args.coefficients:
        rule = make_rule(parse_coefficients(args.coefficients), open=args.open)
    else:
        rule = get_rule(args.rule)

    params = _function_params(args)
    f = make_function(args.function, params)
    exact = exact_integral(args.function, args.a, args.b, params)

    if not args.quiet:
        kind = "open" if rule.open else "closed"
        print(f"Integrating {args.function} over [{args.a:g}, {args.b:g}]")
        print(f"  rule={rule.name} ({kind}, coefficients={list(rule.coefficients)}), n={args.n}")

    result = integrate(f, args.a, args.b, args.n, rule)

    print(f"\nResult:")
    print(f"  Estimate = {result.estimate:.12g}")
    if exact is not None:
        print(f"  Exact    = {exact:.12g}")
        print(f"  Error    = {abs(result.estimate - exact):.3e}")
    print(f"  Function evaluations = {result.n_evaluations}")
    if not result.finite:
        print("  Warning: non-finite estimate (f is non-finite somewhere on the partition)")

    return result.estimate


def run_sweep(args: argparse.Namespace) -> None:
    """Run the full accuracy study."""
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    params = StudyParameters(
        function=args.function,
        function_params=_function_params(args),
        a=args.a,
        b=args.b,
        n_max=args.nmax,
        tol=args.tol,
    )

    start_time = time.time()

    # 1. Catalog verification
    if not args.quiet:
        print("=" * 60)
        print("Verifying rule catalog...")
        print("=" * 60)

    exactness_results = run_exactness_table()
    for name, ex in exactness_results.items():
        flag = "ok" if ex.published_degree == ex.measured_degree and ex.weights_match else "MISMATCH"
        print(f"  {name:12s}: degree published={ex.published_degree} "
              f"measured={ex.measured_degree} weights_match={ex.weights_match} [{flag}]")

    # 2. Convergence with n
    if not args.quiet:
        print("\n" + "=" * 60)
        print(f"Running n-convergence studies (n = 1..{params.n_max})...")
        print("=" * 60)

    convergence_results = run_all_convergence(params)

    print("\nRule Results:")
    print("-" * 50)
    for name, result in convergence_results.items():
        order = f"{result.order.order:.2f}" if result.order.valid else "n/a"
        print(f"  {name:12s}: error(n={result.n_values[-1]}) = {result.final_error:.3e}  order ~ {order}")

    # 3. Tolerance study
    if not args.quiet:
        print("\n" + "=" * 60)
        print(f"Finding n for error <= {params.tol:.0e}...")
        print("=" * 60)

    tolerance_results = run_tolerance_study(params)
    for name, tr in tolerance_results.items():
        n_str = str(tr.n_required) if tr.n_required is not None else f"> {params.n_max}"
        print(f"  {name:12s}: n = {n_str}")

    # 4. Figures
    if not args.no_plots:
        plot_error_convergence(convergence_results, outdir=outdir, show=False)
        plot_estimates(convergence_results, params.exact, outdir=outdir, show=False)
        for name in convergence_results:
            plot_rule_points(get_rule(name), outdir=outdir, show=False)

    # 5. Report and results
    generate_report(convergence_results, exactness_results, tolerance_results, params, outdir)
    save_results_json(convergence_results, exactness_results, tolerance_results, params, outdir)

    elapsed = time.time() - start_time

    print(f"\nCompleted in {elapsed:.1f} seconds")
    print(f"Results saved to: {outdir.absolute()}")
    print(f"  - report.md")
    print(f"  - results.json")
    if not args.no_plots:
        print(f"  - *.png plots")

    if args.show and not args.no_plots:
        import matplotlib.pyplot as plt
        plt.show()


def main(argv=None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    try:
        if args.sweep:
            run_sweep(args)
        else:
            run_single(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
