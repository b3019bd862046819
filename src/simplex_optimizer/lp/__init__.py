"""Two-phase tableau simplex for Simplex Optimizer."""

from .simplex import simplex_solve
from .vertex import solve_by_vertex_enumeration

__all__ = ["simplex_solve", "solve_by_vertex_enumeration"]
