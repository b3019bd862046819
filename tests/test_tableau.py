import numpy as np
import pytest

from simplex_optimizer.lp.tableau import (
    ExecutionResult,
    Tableau,
    create_initial_tableau,
    find_pivot_column,
    find_pivot_row,
    iterate,
    run_simplex,
    swap_basis,
    to_maximization_row,
)
from simplex_optimizer.schemas import Coefficient, Constraint, Objective, Problem, SimplexError


def make_problem(sense, objective, constraints) -> Problem:
    variables = ["x1", "x2"]
    return Problem(
        name="tableau",
        objective=Objective(
            type=sense,
            coefficients=[Coefficient(variable=v, value=c) for v, c in zip(variables, objective)],
        ),
        constraints=[
            Constraint(
                coefficients=[Coefficient(variable=v, value=c) for v, c in zip(variables, coefs)],
                operator=op,
                right_side=rhs,
            )
            for coefs, op, rhs in constraints
        ],
        variables=variables,
    )


def make_scenario_a() -> Problem:
    return make_problem("max", [5, 4], [([6, 4], "<=", 24), ([1, 2], "<=", 6)])


def test_initial_tableau_layout():
    tableau = create_initial_tableau(make_scenario_a())

    assert tableau.matrix.shape == (3, 5)
    np.testing.assert_allclose(tableau.matrix[0], [6, 4, 1, 0, 24])
    np.testing.assert_allclose(tableau.matrix[1], [1, 2, 0, 1, 6])
    np.testing.assert_allclose(tableau.matrix[2], [-5, -4, 0, 0, 0])
    np.testing.assert_allclose(tableau.objective_row, tableau.matrix[2])
    assert tableau.basis == [2, 3]
    assert tableau.non_basis == [0, 1]
    assert tableau.labels == ["x1", "x2", "s1", "s2"]


def test_minimisation_row_and_surplus_column():
    tableau = create_initial_tableau(make_problem("min", [2, 3], [([1, 1], ">=", 4)]))

    np.testing.assert_allclose(tableau.matrix[0], [1, 1, -1, 4])
    np.testing.assert_allclose(tableau.matrix[1], [2, 3, 0, 0])
    assert tableau.labels == ["x1", "x2", "e1"]


def test_to_maximization_row_negates_in_place():
    tableau = create_initial_tableau(make_scenario_a())
    to_maximization_row(tableau)

    np.testing.assert_allclose(tableau.matrix[-1], [5, 4, 0, 0, 0])
    np.testing.assert_allclose(tableau.objective_row, [5, 4, 0, 0, 0])


def test_pivot_column_selection():
    tableau = create_initial_tableau(make_scenario_a())
    assert find_pivot_column(tableau) == 0

    tied = create_initial_tableau(make_problem("max", [3, 3], [([1, 1], "<=", 4)]))
    assert find_pivot_column(tied) == 0

    optimal = create_initial_tableau(make_problem("min", [1, 1], [([1, 1], "<=", 4)]))
    assert find_pivot_column(optimal) == -1


def test_pivot_column_skips_blocked_columns():
    tableau = create_initial_tableau(make_scenario_a())
    tableau.blocked = [0]
    assert find_pivot_column(tableau) == 1


def test_pivot_row_minimum_ratio():
    tableau = create_initial_tableau(make_scenario_a())
    assert find_pivot_row(tableau, 0) == 0
    assert find_pivot_row(tableau, 1) == 1

    tied = create_initial_tableau(make_problem("max", [1, 1], [([2, 1], "<=", 8), ([1, 1], "<=", 4)]))
    assert find_pivot_row(tied, 0) == 0


def test_pivot_row_none_when_column_is_non_positive():
    tableau = create_initial_tableau(make_problem("max", [1, 1], [([-1, 0], "<=", 0), ([0, -1], "<=", 0)]))
    assert find_pivot_row(tableau, 0) == -1


def test_iterate_gauss_jordan_step():
    tableau = create_initial_tableau(make_scenario_a())
    swap_basis(tableau, 0, 0)
    iterate(tableau, 0, 0)

    assert tableau.basis == [0, 3]
    assert tableau.non_basis == [2, 1]
    np.testing.assert_allclose(tableau.matrix[0], [1, 2 / 3, 1 / 6, 0, 4])
    np.testing.assert_allclose(tableau.matrix[1], [0, 4 / 3, -1 / 6, 1, 2])
    np.testing.assert_allclose(tableau.matrix[2], [0, -2 / 3, 5 / 6, 0, 20])
    np.testing.assert_allclose(tableau.objective_row, tableau.matrix[2])


def test_run_simplex_reaches_optimum_with_history():
    tableau = create_initial_tableau(make_scenario_a())
    initial = tableau.matrix.copy()

    result = run_simplex(tableau, num_decision=2)

    assert isinstance(result, ExecutionResult)
    assert result.tableau is tableau
    assert sorted(result.tableau.basis) == [0, 1]
    assert result.tableau.objective_value == pytest.approx(21.0)
    assert len(result.iterations) == 3
    np.testing.assert_allclose(result.iterations[0].matrix, initial)
    np.testing.assert_allclose(result.iterations[-1].matrix, tableau.matrix)
    assert result.iterations[-1].matrix is not tableau.matrix
    assert result.iterations[-1].basis is not tableau.basis


def test_run_simplex_iteration_cap():
    tableau = create_initial_tableau(make_scenario_a())
    result = run_simplex(tableau, num_decision=2, max_iterations=1)

    assert isinstance(result, SimplexError)
    assert result.type == "ENTRADA_INVALIDA"


def test_run_simplex_detects_unbounded_decision_column():
    tableau = create_initial_tableau(make_problem("max", [1, 1], [([-1, 0], "<=", 0), ([0, -1], "<=", 0)]))
    result = run_simplex(tableau, num_decision=2)

    assert isinstance(result, SimplexError)
    assert result.type == "NO_ACOTADA"


def test_run_simplex_without_unbounded_check_stops():
    tableau = create_initial_tableau(make_problem("max", [1, 1], [([-1, 0], "<=", 0), ([0, -1], "<=", 0)]))
    result = run_simplex(tableau, num_decision=2, check_unbounded=False)

    assert isinstance(result, ExecutionResult)
    assert len(result.iterations) == 1


def test_run_simplex_stops_when_only_a_slack_column_lacks_a_ratio():
    # x1 basic; the s1 column improves but has no positive entry
    tableau = Tableau(
        matrix=[[1.0, 1.0, -1.0, 3.0], [0.0, 1.0, -2.0, 6.0]],
        basis=[0],
        non_basis=[1, 2],
        labels=["x1", "x2", "s1"],
    )
    result = run_simplex(tableau, num_decision=2)

    assert isinstance(result, ExecutionResult)
    assert result.tableau.basis == [0]
    assert result.tableau.objective_value == pytest.approx(6.0)


def test_snapshot_is_independent():
    tableau = create_initial_tableau(make_scenario_a())
    snap = tableau.snapshot()
    iterate(tableau, 0, 0)

    np.testing.assert_allclose(snap.matrix[0], [6, 4, 1, 0, 24])
    assert snap.label(1) == "x2"
    assert snap.label(42) == "x42"
