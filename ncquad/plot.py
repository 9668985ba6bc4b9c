"""
Quadrature Plotting Utilities

This module provides plotting functions for visualizing rule accuracy.
Uses matplotlib only.
"""

from pathlib import Path
from typing import Optional
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from .experiments import ConvergenceResult
from .rules import QuadratureRule

COLORS = ['#2E86AB', '#A23B72', '#F18F01', '#C73E1D', '#3B8E3B', '#6C4F9E']
MARKERS = ['o', 's', '^', 'D', 'v', 'P']


def setup_style() -> None:
    """Set up matplotlib style for publication-quality plots."""
    plt.rcParams.update({
        'font.size': 10,
        'axes.labelsize': 11,
        'axes.titlesize': 12,
        'xtick.labelsize': 9,
        'ytick.labelsize': 9,
        'legend.fontsize': 9,
        'figure.figsize': (8, 6),
        'figure.dpi': 150,
        'savefig.dpi': 150,
        'axes.grid': True,
        'grid.alpha': 0.3,
    })


def plot_error_convergence(results: dict[str, ConvergenceResult],
                           outdir: Optional[Path] = None,
                           show: bool = False) -> Figure:
    """Plot absolute error vs n for all rules on log-log axes.

    Args:
        results: Dictionary of rule name -> ConvergenceResult
        outdir: Directory to save plot (if provided)
        show: Whether to display the plot

    Returns:
        matplotlib Figure object
    """
    setup_style()

    fig, ax = plt.subplots(figsize=(10, 7))

    for i, (name, result) in enumerate(results.items()):
        # Exact zeros cannot be drawn on a log axis
        mask = result.errors > 0
        label = name.replace('_', ' ').title()
        if result.order.valid:
            label += f" (p ≈ {result.order.order:.2f})"
        ax.loglog(result.n_values[mask], result.errors[mask],
                  f'{MARKERS[i % len(MARKERS)]}-',
                  linewidth=1.5, markersize=4,
                  color=COLORS[i % len(COLORS)],
                  label=label)

    function_name = next(iter(results.values())).function_name if results else ""
    ax.set_xlabel(r'Sub-intervals $n$')
    ax.set_ylabel(r'Absolute error')
    ax.set_title(f'Composite Rule Convergence: {function_name}')
    ax.legend(loc='best')
    ax.grid(True, which='both', alpha=0.3)

    plt.tight_layout()

    if outdir is not None:
        fig.savefig(outdir / "error_vs_n_all_rules.png", bbox_inches='tight')

    if show:
        plt.show()

    return fig


def plot_estimates(results: dict[str, ConvergenceResult],
                   exact: float,
                   outdir: Optional[Path] = None,
                   show: bool = False) -> Figure:
    """Plot composite estimates vs n against the exact value.

    Args:
        results: Dictionary of rule name -> ConvergenceResult
        exact: Exact integral
        outdir: Directory to save plot
        show: Whether to display

    Returns:
        matplotlib Figure
    """
    setup_style()

    fig, ax = plt.subplots(figsize=(10, 7))

    for i, (name, result) in enumerate(results.items()):
        ax.semilogx(result.n_values, result.estimates,
                    f'{MARKERS[i % len(MARKERS)]}-',
                    linewidth=1.5, markersize=4,
                    color=COLORS[i % len(COLORS)],
                    label=name.replace('_', ' ').title())

    ax.axhline(exact, color='black', linestyle='--', linewidth=1, label=f'Exact = {exact:.6g}')
    ax.set_xlabel(r'Sub-intervals $n$')
    ax.set_ylabel(r'Estimate')
    ax.set_title('Composite Estimates vs Exact Value')
    ax.legend(loc='best')

    plt.tight_layout()

    if outdir is not None:
        fig.savefig(outdir / "estimate_vs_n_all_rules.png", bbox_inches='tight')

    if show:
        plt.show()

    return fig


def plot_rule_points(rule: QuadratureRule,
                     a: float = 0.0,
                     b: float = 1.0,
                     outdir: Optional[Path] = None,
                     show: bool = False) -> Figure:
    """Plot the evaluation points of a rule on [a, b] with their weights."""
    setup_style()

    fig, ax = plt.subplots(figsize=(8, 4))
    xs = np.asarray(rule.points(a, b))
    ax.axvspan(min(a, b), max(a, b), color='#DDDDDD', alpha=0.5)
    ax.stem(xs, rule.weights, basefmt=' ')
    for x, w in zip(xs, rule.weights):
        ax.annotate(f"{w:.3f}", (x, w), xytext=(0, 5), textcoords='offset points',
                    ha='center', fontsize=8)

    kind = "open" if rule.open else "closed"
    ax.set_xlabel("x")
    ax.set_ylabel("normalized weight")
    ax.set_title(f"Evaluation points: {rule.name} ({kind}, {rule.n_points} points)")

    plt.tight_layout()

    if outdir is not None:
        fig.savefig(outdir / f"rule_points_{rule.name}.png", bbox_inches='tight')

    if show:
        plt.show()

    return fig
