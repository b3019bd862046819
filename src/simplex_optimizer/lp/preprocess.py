from __future__ import annotations

import math
from typing import Dict, List, Literal, Sequence, Tuple, Union

from ..schemas import Coefficient, Constraint, Problem

ValidationResult = Union[Literal[True], Literal["SIN_SOLUCION", "ENTRADA_INVALIDA"]]

REQUIRED_VARIABLES = 2


def validate_problem(problem: Problem) -> ValidationResult:
    """
    Return True for a solvable-looking problem, "ENTRADA_INVALIDA" for format
    errors and "SIN_SOLUCION" when infeasibility is obvious before pivoting.
    """

    if problem.objective is None or not problem.objective.coefficients:
        return "ENTRADA_INVALIDA"
    if not problem.constraints:
        return "ENTRADA_INVALIDA"
    if len(problem.variables) != REQUIRED_VARIABLES:
        return "ENTRADA_INVALIDA"
    if len(set(problem.variables)) != len(problem.variables):
        return "ENTRADA_INVALIDA"
    if _references_unknown_variable(problem):
        return "ENTRADA_INVALIDA"

    if _has_obvious_infeasibility(problem):
        return "SIN_SOLUCION"
    if has_direct_contradictions(problem):
        return "SIN_SOLUCION"
    return True


def _references_unknown_variable(problem: Problem) -> bool:
    declared = set(problem.variables)
    terms = list(problem.objective.coefficients) if problem.objective else []
    for cons in problem.constraints:
        terms.extend(cons.coefficients)
    return any(term.variable not in declared for term in terms)


def _has_obvious_infeasibility(problem: Problem) -> bool:
    # x >= 0 makes a non-negative combination unable to reach a negative RHS
    for cons in problem.constraints:
        if cons.right_side < 0 and all(coef.value >= 0 for coef in cons.coefficients):
            return True
    return False


def has_direct_contradictions(problem: Problem) -> bool:
    """Detect constraints sharing a coefficient vector whose RHS ranges do not overlap."""

    groups: Dict[Tuple[float, ...], Dict[str, List[float]]] = {}
    for cons in problem.constraints:
        vector = coefficient_vector(problem.variables, cons.coefficients)
        key = tuple(round(value, 8) + 0.0 for value in vector)
        bucket = groups.setdefault(key, {"<=": [], ">=": [], "=": []})
        bucket[cons.operator].append(cons.right_side)

    for bucket in groups.values():
        min_leq = min(bucket["<="]) if bucket["<="] else math.inf
        max_geq = max(bucket[">="]) if bucket[">="] else -math.inf
        for rhs in bucket["="]:
            if rhs > min_leq or rhs < max_geq:
                return True
        if max_geq > min_leq:
            return True
    return False


def coefficient_vector(variables: Sequence[str], coefficients: Sequence[Coefficient]) -> List[float]:
    index = {name: idx for idx, name in enumerate(variables)}
    vector = [0.0] * len(variables)
    for coef in coefficients:
        idx = index.get(coef.variable)
        if idx is not None:
            vector[idx] += coef.value
    return vector


def normalize_to_le_and_max(problem: Problem) -> Problem:
    """Rewrite every ">=" row as "<=" by negating both sides; returns a copy."""

    constraints: List[Constraint] = []
    for cons in problem.constraints:
        if cons.operator == ">=":
            constraints.append(
                Constraint(
                    coefficients=[
                        Coefficient(variable=coef.variable, value=-coef.value)
                        for coef in cons.coefficients
                    ],
                    operator="<=",
                    right_side=-cons.right_side,
                )
            )
        else:
            constraints.append(cons.model_copy(deep=True))
    return problem.model_copy(update={"constraints": constraints}, deep=True)


def can_use_standard_form(problem: Problem) -> bool:
    return all(cons.operator == "<=" and cons.right_side >= 0 for cons in problem.constraints)
