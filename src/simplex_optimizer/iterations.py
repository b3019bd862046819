from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .lp.tableau import Tableau
from .schemas import IterationRecord, SimplexError, SimplexSolution


def basic_variables(tableau: Tableau) -> Dict[str, float]:
    values: Dict[str, float] = {}
    for row, column in enumerate(tableau.basis[: tableau.num_constraints]):
        values[tableau.label(column)] = float(tableau.matrix[row, -1])
    return values


def entering_and_leaving(current: Tableau, previous: Tableau) -> Tuple[Optional[str], Optional[str]]:
    for before, after in zip(previous.basis, current.basis):
        if before != after:
            return current.label(after), previous.label(before)
    return None, None


def build_iteration_records(history: Sequence[Tableau]) -> List[IterationRecord]:
    """Persistable view of a solve trace; only the last record is flagged optimal."""

    records: List[IterationRecord] = []
    for idx, tableau in enumerate(history):
        entering, leaving = None, None
        if idx > 0:
            entering, leaving = entering_and_leaving(tableau, history[idx - 1])
        records.append(
            IterationRecord(
                iteration_number=idx + 1,
                tableau=tableau.matrix.tolist(),
                basic_variables=basic_variables(tableau),
                objective_value=tableau.objective_value,
                entering_var=entering,
                leaving_var=leaving,
                is_optimal=idx == len(history) - 1,
            )
        )
    return records


def to_payload(result: Union[SimplexSolution, SimplexError], include_iterations: bool = True) -> Dict[str, Any]:
    if isinstance(result, SimplexError):
        return result.model_dump()

    payload: Dict[str, Any] = {
        "optimal": result.optimal,
        "bounded": result.bounded,
        "variables": dict(result.variables),
        "objectiveValue": result.objective_value,
    }
    if include_iterations:
        payload["iterations"] = [
            record.model_dump(by_alias=True) for record in build_iteration_records(result.iterations)
        ]
    return payload
