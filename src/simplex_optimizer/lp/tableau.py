from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import List, Union

import numpy as np

from ..constants import DEFAULT_MAX_ITERATIONS, EPS, MIN_EPS
from ..schemas import Problem, SimplexError
from .preprocess import coefficient_vector

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Tableau:
    """Dense simplex tableau; the last row is the objective, the last column the RHS."""

    matrix: np.ndarray
    basis: List[int]
    non_basis: List[int]
    labels: List[str] = field(default_factory=list)
    blocked: List[int] = field(default_factory=list)
    objective_row: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.matrix = np.array(self.matrix, dtype=float)
        self.refresh_objective_row()

    @property
    def num_constraints(self) -> int:
        return self.matrix.shape[0] - 1

    @property
    def rhs_column(self) -> int:
        return self.matrix.shape[1] - 1

    @property
    def objective_value(self) -> float:
        return float(self.matrix[-1, -1])

    def refresh_objective_row(self) -> None:
        self.objective_row = self.matrix[-1].copy()

    def label(self, column: int) -> str:
        if 0 <= column < len(self.labels):
            return self.labels[column]
        return f"x{column}"

    def snapshot(self) -> "Tableau":
        return copy.deepcopy(self)


@dataclass
class ExecutionResult:
    tableau: Tableau
    iterations: List[Tableau]


def create_initial_tableau(problem: Problem) -> Tableau:
    """
    Standard-form tableau with one slack (+1 for "<=", -1 otherwise) per row.
    The objective row holds the maximisation form of the objective: -c for
    "max", +c for "min".
    """

    n = len(problem.variables)
    m = len(problem.constraints)
    matrix = np.zeros((m + 1, n + m + 1), dtype=float)
    labels = list(problem.variables)

    for i, cons in enumerate(problem.constraints):
        matrix[i, :n] = coefficient_vector(problem.variables, cons.coefficients)
        if cons.operator == "<=":
            matrix[i, n + i] = 1.0
            labels.append(f"s{i + 1}")
        else:
            matrix[i, n + i] = -1.0
            labels.append(f"e{i + 1}")
        matrix[i, -1] = cons.right_side

    sign = -1.0 if problem.objective.type == "max" else 1.0
    matrix[m, :n] = sign * np.array(
        coefficient_vector(problem.variables, problem.objective.coefficients), dtype=float
    )

    basis = [n + i for i in range(m)]
    non_basis = list(range(n))
    return Tableau(matrix=matrix, basis=basis, non_basis=non_basis, labels=labels)


def to_maximization_row(tableau: Tableau) -> None:
    tableau.matrix[-1] = -tableau.matrix[-1]
    tableau.refresh_objective_row()


def find_pivot_column(tableau: Tableau, tol: float = EPS) -> int:
    """Most negative objective-row entry (lowest index on ties), or -1 when optimal."""

    row = tableau.matrix[-1]
    blocked = set(tableau.blocked)
    best_value = -tol
    best_index = -1
    for j in range(tableau.rhs_column):
        if j in blocked:
            continue
        if row[j] < best_value:
            best_value = row[j]
            best_index = j
    return best_index


def find_pivot_row(tableau: Tableau, pivot_column: int, tol: float = EPS) -> int:
    """Minimum-ratio test over rows with a positive pivot-column entry, or -1."""

    rhs = tableau.rhs_column
    best_ratio = np.inf
    best_index = -1
    for i in range(tableau.num_constraints):
        value = tableau.matrix[i, pivot_column]
        if value <= tol:
            continue
        ratio = tableau.matrix[i, rhs] / value
        if ratio < -tol:
            continue
        if ratio < best_ratio:
            best_ratio = ratio
            best_index = i
    return best_index


def swap_basis(tableau: Tableau, pivot_row: int, pivot_column: int) -> None:
    leaving = tableau.basis[pivot_row]
    tableau.basis[pivot_row] = pivot_column
    if pivot_column in tableau.non_basis:
        tableau.non_basis[tableau.non_basis.index(pivot_column)] = leaving
    else:
        tableau.non_basis.append(leaving)


def iterate(tableau: Tableau, pivot_row: int, pivot_column: int) -> Tableau:
    """Gauss-Jordan pivot on (pivot_row, pivot_column), in place."""

    matrix = tableau.matrix
    matrix[pivot_row] = matrix[pivot_row] / matrix[pivot_row, pivot_column]
    for i in range(matrix.shape[0]):
        if i == pivot_row:
            continue
        factor = matrix[i, pivot_column]
        if factor != 0.0:
            matrix[i] -= factor * matrix[pivot_row]
    matrix[:, pivot_column] = 0.0
    matrix[pivot_row, pivot_column] = 1.0

    objective = matrix[-1]
    objective[np.abs(objective) < MIN_EPS] = 0.0
    tableau.refresh_objective_row()
    return tableau


def run_simplex(
    tableau: Tableau,
    num_decision: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tol: float = EPS,
    check_unbounded: bool = True,
) -> Union[ExecutionResult, SimplexError]:
    """
    Pivot until no objective-row entry is negative. The tableau is mutated in
    place; the returned history starts with the tableau as given and holds one
    snapshot per pivot.
    """

    history = [tableau.snapshot()]
    pivots = 0

    while True:
        pivot_column = find_pivot_column(tableau, tol)
        if pivot_column == -1:
            break
        if pivots >= max_iterations:
            logger.warning("Simplex did not converge within %d iterations", max_iterations)
            return SimplexError(type="ENTRADA_INVALIDA", message="El algoritmo no convergió")

        pivot_row = find_pivot_row(tableau, pivot_column, tol)
        if pivot_row == -1:
            if check_unbounded and _is_unbounded(tableau, num_decision, tol):
                logger.debug("Column %s has no ratio row; problem unbounded", tableau.label(pivot_column))
                return SimplexError(type="NO_ACOTADA", message="El problema no tiene solución acotada")
            break

        logger.debug(
            "Pivot %d: %s enters, %s leaves",
            pivots + 1,
            tableau.label(pivot_column),
            tableau.label(tableau.basis[pivot_row]),
        )
        swap_basis(tableau, pivot_row, pivot_column)
        iterate(tableau, pivot_row, pivot_column)
        history.append(tableau.snapshot())
        pivots += 1

    return ExecutionResult(tableau=tableau, iterations=history)


def _is_unbounded(tableau: Tableau, num_decision: int, tol: float) -> bool:
    return bool(np.any(tableau.matrix[-1, :num_decision] < -tol))
