"""Simplex Optimizer: two-phase simplex with a traceable iteration history."""

from .lp import simplex_solve, solve_by_vertex_enumeration
from .schemas import Problem, SimplexError, SimplexSolution, SolveOptions

__all__ = [
    "simplex_solve",
    "solve_by_vertex_enumeration",
    "Problem",
    "SimplexError",
    "SimplexSolution",
    "SolveOptions",
]
