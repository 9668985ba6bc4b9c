import json
import math

import numpy as np
import pytest

from ncquad.analysis import degree_of_exactness, fit_convergence_order, weights_match
from ncquad.experiments import (
    StudyParameters,
    run_all_convergence,
    run_exactness_table,
    run_rule_convergence,
    run_tolerance_study,
    summarize_results,
)
from ncquad.functions import (
    exact_integral,
    get_function_names,
    make_function,
    polynomial_integral,
)
from ncquad.integrate import composite_integrate, convergence_study
from ncquad.rules import RULES, get_rule, make_rule, newton_cotes_rule, midpoint, simpson, trapezoid, boole


def test_midpoint_and_trapezoid_are_second_order():
    n_values = [4, 8, 16, 32, 64]
    for rule in (midpoint, trapezoid):
        n_arr, _, errors = convergence_study(math.sin, 0.0, math.pi, rule, n_values, exact=2.0)
        order = fit_convergence_order(n_arr, errors)
        assert order.valid
        assert order.n_used == 5
        assert abs(order.order - 2.0) < 0.05


def test_simpson_is_fourth_order():
    n_arr, _, errors = convergence_study(math.sin, 0.0, math.pi, simpson, [4, 8, 16, 32], exact=2.0)
    order = fit_convergence_order(n_arr, errors)
    assert order.valid
    assert abs(order.order - 4.0) < 0.1


def test_boole_is_sixth_order():
    n_arr, _, errors = convergence_study(math.sin, 0.0, math.pi, boole, [4, 8, 16], exact=2.0)
    order = fit_convergence_order(n_arr, errors)
    assert order.valid
    assert abs(order.order - 6.0) < 0.5


def test_order_fit_discards_roundoff_and_nan():
    n_values = np.array([1, 2, 4, 8, 16])
    errors = np.array([1e-2, np.nan, 1e-15, 0.0, 1e-4])
    order = fit_convergence_order(n_values, errors)
    assert not order.valid
    assert order.n_used == 2
    assert math.isnan(order.order)


def test_degree_of_exactness_matches_published():
    for name, entry in RULES.items():
        assert degree_of_exactness(get_rule(name)) == entry["degree"], name


def test_degree_of_exactness_of_generated_family():
    # odd point counts gain one degree by symmetry
    assert degree_of_exactness(newton_cotes_rule(6)) == 5
    assert degree_of_exactness(newton_cotes_rule(7)) == 7
    assert degree_of_exactness(newton_cotes_rule(2, open=True)) == 1


def test_degree_of_exactness_of_bad_rule():
    # non-symmetric weights on the Simpson layout lose exactness beyond constants
    assert degree_of_exactness(make_rule([1, 2, 3])) == 0


def test_weights_match():
    assert weights_match(get_rule("boole"))
    assert weights_match(get_rule("milne"))
    assert not weights_match(make_rule([1, 2, 1]))


def test_function_catalog_exact_values():
    assert exact_integral("sin", 0.0, math.pi) == pytest.approx(2.0, rel=1e-14)
    assert exact_integral("cos", 0.0, math.pi / 2) == pytest.approx(1.0, rel=1e-14)
    assert exact_integral("exp", 0.0, 1.0) == pytest.approx(math.e - 1.0, rel=1e-14)
    assert exact_integral("polynomial", 0.0, 3.0) == pytest.approx(9.0, rel=1e-14)
    assert exact_integral("sqrt", 0.0, 4.0) == pytest.approx(16.0 / 3.0, rel=1e-14)
    assert exact_integral("runge", -1.0, 1.0) == pytest.approx(2.0 * math.atan(5.0) / 5.0, rel=1e-14)
    assert exact_integral("inverse_square_sine", 0.5, 1.0) is None


@pytest.mark.parametrize("name", ["sin", "cos", "exp", "polynomial", "gaussian", "runge", "sqrt"])
def test_function_catalog_against_fine_simpson(name):
    f = make_function(name)
    estimate = composite_integrate(f, 0.25, 2.0, 400, simpson)
    assert estimate == pytest.approx(exact_integral(name, 0.25, 2.0), rel=1e-9)


def test_function_params_override():
    f = make_function("sin", {"A": 3.0, "omega": 2.0})
    assert f(math.pi / 4) == pytest.approx(3.0)
    assert exact_integral("sin", 0.0, math.pi / 2, {"A": 3.0, "omega": 2.0}) == pytest.approx(3.0)


def test_polynomial_integral():
    # ∫_0^2 (1 + 2x + 3x^2) dx = 2 + 4 + 8
    assert polynomial_integral([1.0, 2.0, 3.0], 0.0, 2.0) == pytest.approx(14.0)


def test_unknown_function():
    assert "sin" in get_function_names()
    with pytest.raises(ValueError, match="Unknown function"):
        make_function("tan")
    with pytest.raises(ValueError, match="Unknown function"):
        exact_integral("tan", 0.0, 1.0)


def test_singular_integrand_gives_nan_not_exception():
    f = make_function("inverse_square_sine")
    assert math.isnan(f(0.0))
    assert math.isnan(composite_integrate(f, 0.0, 1.0, 10, trapezoid))
    assert math.isfinite(composite_integrate(f, 0.0, 1.0, 10, midpoint))


def test_study_parameters_validation():
    params = StudyParameters()
    assert params.exact == pytest.approx(2.0)
    with pytest.raises(ValueError, match="n_max must be >= 1"):
        StudyParameters(n_max=0)
    with pytest.raises(ValueError, match="tol must be > 0"):
        StudyParameters(tol=0.0)
    with pytest.raises(ValueError, match="Unknown function"):
        StudyParameters(function="tan")
    with pytest.raises(ValueError, match="no closed-form"):
        StudyParameters(function="inverse_square_sine", a=0.5, b=1.0)
    with pytest.raises(ValueError, match="finite"):
        StudyParameters(b=math.inf)


def test_rule_convergence_midpoint_monotone():
    result = run_rule_convergence("midpoint", StudyParameters(n_max=100))
    assert result.rule_name == "midpoint"
    assert result.function_name == "sin"
    assert len(result.n_values) == 100
    assert result.monotone
    assert result.final_error < 1e-3
    assert result.order.valid
    assert abs(result.order.order - 2.0) < 0.1


def test_all_convergence_covers_catalog():
    results = run_all_convergence(StudyParameters(n_max=8))
    assert list(results.keys()) == list(RULES.keys())
    for result in results.values():
        assert len(result.estimates) == 8


def test_exactness_table_agrees_with_catalog():
    table = run_exactness_table()
    for name, ex in table.items():
        assert ex.published_degree == ex.measured_degree, name
        assert ex.weights_match, name


def test_tolerance_study_orders_rules():
    results = run_tolerance_study(StudyParameters(tol=1e-4, n_max=500))
    assert results["simpson"].n_required < results["midpoint"].n_required
    assert results["boole"].n_required < results["trapezoid"].n_required
    assert results["simpson"].n_evaluations == results["simpson"].n_required * 3


def test_summarize_results():
    params = StudyParameters(n_max=16, tol=1e-3)
    summary = summarize_results(
        run_all_convergence(params), run_exactness_table(), run_tolerance_study(params)
    )
    assert set(summary["rules"]) == set(RULES)
    assert summary["rules"]["simpson"]["measured_degree"] == 3
    assert summary["rules"]["simpson"]["n_required"] is not None


def test_cli_single(capsys):
    from ncquad.__main__ import main

    main(["--rule", "midpoint", "--n", "10", "--quiet"])
    out = capsys.readouterr().out
    assert "Estimate = 2.0082" in out
    assert "Exact    = 2" in out


def test_cli_custom_coefficients(capsys):
    from ncquad.__main__ import main

    main(["--coefficients", "1,4,1", "--n", "1", "--quiet"])
    out = capsys.readouterr().out
    assert "Estimate = 2.0943951" in out


def test_cli_rejects_bad_n():
    from ncquad.__main__ import main

    with pytest.raises(ValueError, match="n must be >= 1"):
        main(["--n", "0", "--quiet"])


def test_cli_sweep_writes_outputs(tmp_path):
    from ncquad.__main__ import main

    main(["--sweep", "--nmax", "20", "--tol", "1e-3", "--no-plots", "--quiet",
          "--outdir", str(tmp_path)])
    report = (tmp_path / "report.md").read_text()
    assert "Rule Catalog" in report
    assert "boole" in report
    results = json.loads((tmp_path / "results.json").read_text())
    assert results["parameters"]["function"] == "sin"
    assert results["rules"]["simpson"]["measured_degree"] == 3
    assert len(results["rules"]["midpoint"]["errors"]) == 20


def test_error_plot_written(tmp_path):
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from ncquad.plot import plot_error_convergence, plot_rule_points

    results = run_all_convergence(StudyParameters(n_max=10))
    plot_error_convergence(results, outdir=tmp_path)
    plot_rule_points(get_rule("milne"), outdir=tmp_path)
    plt.close("all")
    assert (tmp_path / "error_vs_n_all_rules.png").exists()
    assert (tmp_path / "rule_points_milne.png").exists()
