from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np

from ..constants import EPS, MIN_EPS
from ..schemas import Coefficient, Constraint, Problem, SimplexError, SolveOptions
from .preprocess import coefficient_vector
from .tableau import ExecutionResult, Tableau, iterate, run_simplex, swap_basis, to_maximization_row

logger = logging.getLogger(__name__)

_FLIPPED = {"<=": ">=", ">=": "<=", "=": "="}


@dataclass
class PhaseI:
    tableau: Tableau
    artificial_columns: List[int]


def _with_nonnegative_rhs(problem: Problem) -> Problem:
    constraints: List[Constraint] = []
    for cons in problem.constraints:
        if cons.right_side < 0:
            constraints.append(
                Constraint(
                    coefficients=[
                        Coefficient(variable=coef.variable, value=-coef.value)
                        for coef in cons.coefficients
                    ],
                    operator=_FLIPPED[cons.operator],
                    right_side=-cons.right_side,
                )
            )
        else:
            constraints.append(cons)
    return problem.model_copy(update={"constraints": constraints})


def build_phase_i_tableau(problem: Problem) -> Optional[PhaseI]:
    """
    Auxiliary tableau maximising -(sum of artificials). Rows are first scaled so
    every RHS is non-negative. Returns None when no artificial column is needed.
    """

    problem = _with_nonnegative_rhs(problem)
    n = len(problem.variables)
    m = len(problem.constraints)
    labels = list(problem.variables)

    row_slack: List[Optional[int]] = [None] * m
    row_surplus: List[Optional[int]] = [None] * m
    row_artificial: List[Optional[int]] = [None] * m
    col = n
    for i, cons in enumerate(problem.constraints):
        if cons.operator == "<=":
            row_slack[i] = col
            labels.append(f"s{i + 1}")
            col += 1
            continue
        if cons.operator == ">=":
            row_surplus[i] = col
            labels.append(f"e{i + 1}")
            col += 1
        row_artificial[i] = col
        labels.append(f"a{i + 1}")
        col += 1

    artificial_columns = [idx for idx in row_artificial if idx is not None]
    if not artificial_columns:
        return None

    matrix = np.zeros((m + 1, col + 1), dtype=float)
    for i, cons in enumerate(problem.constraints):
        matrix[i, :n] = coefficient_vector(problem.variables, cons.coefficients)
        if row_slack[i] is not None:
            matrix[i, row_slack[i]] = 1.0
        if row_surplus[i] is not None:
            matrix[i, row_surplus[i]] = -1.0
        if row_artificial[i] is not None:
            matrix[i, row_artificial[i]] = 1.0
        matrix[i, -1] = cons.right_side

    matrix[m, artificial_columns] = -1.0
    for i in range(m):
        if row_artificial[i] is not None:
            matrix[m] += matrix[i]

    basis = [
        row_slack[i] if row_slack[i] is not None else row_artificial[i]
        for i in range(m)
    ]
    non_basis = [j for j in range(col) if j not in basis]
    tableau = Tableau(matrix=matrix, basis=basis, non_basis=non_basis, labels=labels)
    # -w bookkeeping: the RHS starts at -(sum of artificial values)
    to_maximization_row(tableau)
    return PhaseI(tableau=tableau, artificial_columns=artificial_columns)


def is_phase_i_feasible(tableau: Tableau, tol: float = EPS) -> bool:
    return tableau.objective_value >= -tol


def pivot_out_artificial(tableau: Tableau, artificial_columns: Sequence[int], tol: float = EPS) -> None:
    """Drive artificials left basic at zero out of the basis where a row allows it."""

    artificial = set(artificial_columns)
    for i in range(len(tableau.basis)):
        leaving = tableau.basis[i]
        if leaving not in artificial:
            continue
        for j in range(tableau.rhs_column):
            if j not in artificial and abs(tableau.matrix[i, j]) > tol:
                logger.debug("Pivoting artificial %s out for %s", tableau.label(leaving), tableau.label(j))
                swap_basis(tableau, i, j)
                iterate(tableau, i, j)
                break


def reduced_objective_row(problem: Problem, tableau: Tableau, cleanup_tol: float = MIN_EPS) -> np.ndarray:
    """
    Original objective in maximisation form over the tableau's columns, with
    every basic column eliminated against its constraint row.
    """

    row = np.zeros(tableau.matrix.shape[1], dtype=float)
    n = len(problem.variables)
    sign = -1.0 if problem.objective.type == "max" else 1.0
    row[:n] = sign * np.array(
        coefficient_vector(problem.variables, problem.objective.coefficients), dtype=float
    )
    for i, basic in enumerate(tableau.basis):
        factor = row[basic]
        if abs(factor) > cleanup_tol:
            row -= factor * tableau.matrix[i]
    row[np.abs(row) < cleanup_tol] = 0.0
    return row


def build_phase_ii_tableau(
    problem: Problem,
    phase_i_tableau: Tableau,
    artificial_columns: Sequence[int] = (),
    cleanup_tol: float = MIN_EPS,
) -> Tableau:
    tableau = phase_i_tableau.snapshot()
    tableau.matrix[-1] = reduced_objective_row(problem, tableau, cleanup_tol)
    tableau.blocked = sorted(set(artificial_columns))
    tableau.refresh_objective_row()
    return tableau


def run_phase_i(problem: Problem, opts: SolveOptions) -> Optional[Union[ExecutionResult, SimplexError]]:
    """
    Solve the auxiliary problem and bridge into Phase II. The result's tableau
    is ready for Phase II; its iterations are the Phase I history. None means
    no artificial variables were needed.
    """

    phase_i = build_phase_i_tableau(problem)
    if phase_i is None:
        return None

    result = run_simplex(
        phase_i.tableau,
        len(problem.variables),
        max_iterations=opts.phase1_max_iters,
        tol=opts.tol,
        check_unbounded=False,
    )
    if isinstance(result, SimplexError):
        return result

    if not is_phase_i_feasible(result.tableau, opts.tol):
        logger.debug("Phase I optimum %.6g is below zero", result.tableau.objective_value)
        return SimplexError(type="SIN_SOLUCION", message="El problema no tiene solución posible (Fase I)")

    pivot_out_artificial(result.tableau, phase_i.artificial_columns, opts.tol)
    tableau = build_phase_ii_tableau(problem, result.tableau, phase_i.artificial_columns, opts.cleanup_tol)
    logger.debug("Phase I finished after %d pivots", len(result.iterations) - 1)
    return ExecutionResult(tableau=tableau, iterations=result.iterations)
