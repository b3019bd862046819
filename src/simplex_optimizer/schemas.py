from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_DECIMALS,
    DEFAULT_MAX_ITERATIONS,
    EPS,
    EQUALITY_EPS,
    MIN_EPS,
    PHASE1_MAX_ITERATIONS,
)

Sense = Literal["min", "max"]
Operator = Literal["<=", ">=", "="]
ErrorType = Literal["ENTRADA_INVALIDA", "SIN_SOLUCION", "NO_ACOTADA"]


class Coefficient(BaseModel):
    variable: str
    value: float


class Objective(BaseModel):
    type: Sense
    coefficients: List[Coefficient] = Field(default_factory=list)


class Constraint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    coefficients: List[Coefficient] = Field(default_factory=list)
    operator: Operator
    right_side: float = Field(alias="rightSide")


class Problem(BaseModel):
    name: str = "problem"
    objective: Optional[Objective] = None
    constraints: List[Constraint] = Field(default_factory=list)
    variables: List[str] = Field(default_factory=list)

    def variable_index(self) -> Dict[str, int]:
        return {name: idx for idx, name in enumerate(self.variables)}


class SolveOptions(BaseModel):
    phase1_max_iters: int = PHASE1_MAX_ITERATIONS
    phase2_max_iters: int = DEFAULT_MAX_ITERATIONS
    tol: float = EPS
    cleanup_tol: float = MIN_EPS
    equality_tol: float = EQUALITY_EPS
    decimals: int = DEFAULT_DECIMALS
    cross_check: bool = True


class SimplexSolution(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    optimal: bool = True
    bounded: bool = True
    variables: Dict[str, float]
    objective_value: float
    # Tableau snapshots; rendered through iterations.build_iteration_records
    iterations: List[Any] = Field(default_factory=list, exclude=True)


class SimplexError(BaseModel):
    type: ErrorType
    message: str = ""


class IterationRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    iteration_number: int = Field(alias="iterationNumber")
    tableau: List[List[float]]
    basic_variables: Dict[str, float] = Field(alias="basicVariables")
    objective_value: float = Field(alias="objectiveValue")
    entering_var: Optional[str] = Field(default=None, alias="enteringVar")
    leaving_var: Optional[str] = Field(default=None, alias="leavingVar")
    is_optimal: bool = Field(default=False, alias="isOptimal")
