from __future__ import annotations

from typing import Dict, List, Union

from ..constants import DEFAULT_DECIMALS
from ..schemas import Problem, SimplexError, SimplexSolution
from .tableau import Tableau


def round_value(value: float, decimals: int = DEFAULT_DECIMALS) -> float:
    rounded = round(float(value), decimals)
    return 0.0 if rounded == 0 else rounded


def round_solution(
    result: Union[SimplexSolution, SimplexError], decimals: int = DEFAULT_DECIMALS
) -> Union[SimplexSolution, SimplexError]:
    if isinstance(result, SimplexError):
        return result
    return result.model_copy(
        update={
            "variables": {name: round_value(value, decimals) for name, value in result.variables.items()},
            "objective_value": round_value(result.objective_value, decimals),
        }
    )


def extract_variables(tableau: Tableau, problem: Problem) -> Dict[str, float]:
    values = {name: 0.0 for name in problem.variables}
    n = len(problem.variables)
    for row, column in enumerate(tableau.basis):
        if column < n:
            values[problem.variables[column]] = float(tableau.matrix[row, -1])
    return values


def objective_value(problem: Problem, values: Dict[str, float]) -> float:
    # Recomputed from the original coefficients; the tableau cell carries
    # phase-dependent sign conventions.
    return float(sum(coef.value * values.get(coef.variable, 0.0) for coef in problem.objective.coefficients))


def extract_solution(
    tableau: Tableau,
    problem: Problem,
    iterations: List[Tableau],
    decimals: int = DEFAULT_DECIMALS,
) -> SimplexSolution:
    values = extract_variables(tableau, problem)
    solution = SimplexSolution(
        optimal=True,
        bounded=True,
        variables=values,
        objective_value=objective_value(problem, values),
        iterations=iterations,
    )
    return round_solution(solution, decimals)
