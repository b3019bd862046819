from __future__ import annotations

import logging
from typing import List, Optional, Union

from ..schemas import Problem, SimplexError, SimplexSolution, SolveOptions
from .phases import run_phase_i
from .preprocess import can_use_standard_form, normalize_to_le_and_max, validate_problem
from .tableau import ExecutionResult, Tableau, create_initial_tableau, run_simplex
from .utils import extract_solution, round_solution
from .vertex import solve_by_vertex_enumeration

logger = logging.getLogger(__name__)

Result = Union[SimplexSolution, SimplexError]


def simplex_solve(problem: Problem, opts: Optional[SolveOptions] = None) -> Result:
    """
    Two-phase tableau simplex. Two-variable problems are cross-checked by vertex
    enumeration, which also backs up an unbounded verdict from the tableau.
    Expected failures come back as SimplexError values.
    """

    opts = opts or SolveOptions()

    verdict = validate_problem(problem)
    if verdict == "ENTRADA_INVALIDA":
        return SimplexError(type="ENTRADA_INVALIDA", message="Problema no válido para el método simplex")
    if verdict == "SIN_SOLUCION":
        return SimplexError(
            type="SIN_SOLUCION",
            message="El problema no tiene solución posible (restricciones incompatibles)",
        )

    prepared = _prepare_tableau(problem, opts)
    if isinstance(prepared, SimplexError):
        logger.info("Problem %r: %s during Phase I", problem.name, prepared.type)
        return prepared

    result = run_simplex(
        prepared.tableau,
        len(problem.variables),
        max_iterations=opts.phase2_max_iters,
        tol=opts.tol,
    )
    if isinstance(result, SimplexError):
        if result.type == "NO_ACOTADA" and opts.cross_check:
            fallback = solve_by_vertex_enumeration(problem, opts.tol, opts.equality_tol, opts.decimals)
            if isinstance(fallback, SimplexSolution):
                logger.info(
                    "Problem %r: tableau reported unbounded, vertex enumeration found %s",
                    problem.name,
                    fallback.objective_value,
                )
                return fallback
        logger.info("Problem %r: %s", problem.name, result.type)
        return result

    history: List[Tableau] = prepared.iterations + result.iterations
    solution = extract_solution(result.tableau, problem, history, opts.decimals)

    if opts.cross_check:
        checked = _cross_check(problem, solution, opts)
        if isinstance(checked, SimplexError):
            logger.info("Problem %r: %s", problem.name, checked.type)
            return checked
        solution = checked

    logger.info("Problem %r: optimum %s after %d tableaux", problem.name, solution.objective_value, len(history))
    return solution


def _prepare_tableau(problem: Problem, opts: SolveOptions) -> Union[ExecutionResult, SimplexError]:
    normalized = normalize_to_le_and_max(problem)
    if can_use_standard_form(normalized):
        logger.debug("Standard form applies; skipping Phase I")
        return ExecutionResult(tableau=create_initial_tableau(normalized), iterations=[])

    phase_i = run_phase_i(problem, opts)
    if phase_i is None:
        # a row outside standard form always carries an artificial column
        raise ValueError(f"Phase I built no artificial columns for problem {problem.name!r}")
    return phase_i


def _cross_check(problem: Problem, solution: SimplexSolution, opts: SolveOptions) -> Result:
    enumerated = solve_by_vertex_enumeration(problem, opts.tol, opts.equality_tol, opts.decimals)
    if isinstance(enumerated, SimplexError):
        # An improving ray beats any finite optimum the tableau stopped at
        if enumerated.type == "NO_ACOTADA":
            logger.debug("Vertex enumeration found an improving ray; overriding %s", solution.objective_value)
            return enumerated
        return solution
    if enumerated is None:
        return solution

    if problem.objective.type == "max":
        better = enumerated.objective_value > solution.objective_value + opts.tol
    else:
        better = enumerated.objective_value < solution.objective_value - opts.tol
    if not better:
        return solution

    logger.debug(
        "Vertex enumeration improves %s to %s", solution.objective_value, enumerated.objective_value
    )
    improved = enumerated.model_copy(update={"iterations": solution.iterations})
    return round_solution(improved, opts.decimals)
