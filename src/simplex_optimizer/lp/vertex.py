from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from ..constants import DEFAULT_DECIMALS, EPS, EQUALITY_EPS
from ..schemas import Problem, SimplexError, SimplexSolution
from .preprocess import coefficient_vector
from .utils import round_solution

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def _system(problem: Problem) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Constraint rows as (A, b, operators); A is m x 2."""
    A = np.array(
        [coefficient_vector(problem.variables, cons.coefficients) for cons in problem.constraints],
        dtype=float,
    ).reshape(-1, 2)
    b = np.array([cons.right_side for cons in problem.constraints], dtype=float)
    operators = np.array([cons.operator for cons in problem.constraints], dtype=object)
    return A, b, operators


def _intersect(first: np.ndarray, second: np.ndarray, tol: float) -> Optional[Point]:
    # each line is [a, b, c] for a*x + b*y = c
    M = np.vstack([first[:2], second[:2]])
    if abs(np.linalg.det(M)) < tol:
        return None
    try:
        point = np.linalg.solve(M, np.array([first[2], second[2]]))
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(point)):
        return None
    return float(point[0]), float(point[1])


def _is_feasible(
    A: np.ndarray,
    b: np.ndarray,
    operators: np.ndarray,
    point: Point,
    tol: float,
    equality_tol: float,
) -> bool:
    p = np.asarray(point, dtype=float)
    if np.any(p < -tol):
        return False
    diff = A @ p - b
    if np.any(diff[operators == "<="] > tol):
        return False
    if np.any(-diff[operators == ">="] > tol):
        return False
    if np.any(np.abs(diff[operators == "="]) > equality_tol):
        return False
    return True


def candidate_points(problem: Problem, tol: float = EPS) -> List[Point]:
    """Pairwise intersections of the constraint boundaries and both axes."""

    A, b, _ = _system(problem)
    lines = np.vstack([np.column_stack([A, b]), np.eye(2, 3)])

    candidates: Dict[Point, Point] = {}

    def add(x: float, y: float) -> None:
        x = 0.0 if abs(x) < tol else x
        y = 0.0 if abs(y) < tol else y
        point = (round(x, 10) + 0.0, round(y, 10) + 0.0)
        candidates.setdefault(point, point)

    for i in range(len(lines)):
        for j in range(i + 1, len(lines)):
            point = _intersect(lines[i], lines[j], tol)
            if point is not None:
                add(*point)
    add(0.0, 0.0)
    return list(candidates.values())


def has_improving_ray(problem: Problem, tol: float = EPS, equality_tol: float = EQUALITY_EPS) -> bool:
    """
    True when the recession cone of the feasible region holds a direction along
    which the objective keeps improving. Extreme rays of a pointed cone in the
    plane lie on an axis or on a constraint line through the origin.
    """

    A, _, operators = _system(problem)
    norms = np.linalg.norm(A, axis=1)
    along = A[norms > tol][:, ::-1] * np.array([1.0, -1.0]) / norms[norms > tol][:, None]
    directions = np.vstack([np.eye(2), along, -along])

    c = np.array(coefficient_vector(problem.variables, problem.objective.coefficients), dtype=float)
    sign = 1.0 if problem.objective.type == "max" else -1.0
    cone_rhs = np.zeros(len(operators))
    for direction in directions:
        if not _is_feasible(A, cone_rhs, operators, tuple(direction), tol, equality_tol):
            continue
        if sign * float(c @ direction) > tol:
            return True
    return False


def solve_by_vertex_enumeration(
    problem: Problem,
    tol: float = EPS,
    equality_tol: float = EQUALITY_EPS,
    decimals: int = DEFAULT_DECIMALS,
) -> Optional[Union[SimplexSolution, SimplexError]]:
    """Exact geometric solve for two-variable problems; None for any other size."""

    if len(problem.variables) != 2:
        return None

    v1, v2 = problem.variables
    A, b, operators = _system(problem)
    c = np.array(coefficient_vector(problem.variables, problem.objective.coefficients), dtype=float)
    maximize = problem.objective.type == "max"

    best: Optional[Point] = None
    best_value = -np.inf if maximize else np.inf
    for point in candidate_points(problem, tol):
        if not _is_feasible(A, b, operators, point, tol, equality_tol):
            continue
        value = float(c @ np.asarray(point))
        improves = value > best_value + tol if maximize else value < best_value - tol
        if improves:
            best_value = value
            best = point

    if best is None:
        return SimplexError(type="SIN_SOLUCION", message="El problema no tiene solución posible (2D)")
    if has_improving_ray(problem, tol, equality_tol):
        return SimplexError(type="NO_ACOTADA", message="El problema no tiene solución acotada")

    logger.debug("Vertex enumeration optimum %.6g at %s", best_value, best)
    solution = SimplexSolution(
        optimal=True,
        bounded=True,
        variables={v1: best[0], v2: best[1]},
        objective_value=float(best_value),
        iterations=[],
    )
    return round_solution(solution, decimals)
