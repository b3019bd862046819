#!/usr/bin/env python3
import json
import time
from pathlib import Path

from simplex_optimizer.lp.simplex import simplex_solve
from simplex_optimizer.lp.vertex import solve_by_vertex_enumeration
from simplex_optimizer.schemas import Problem, SimplexError, SolveOptions
from scripts.generate_instances import generate_random_problem


def load_example(name: str) -> Problem:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return Problem.model_validate(json.loads(path.read_text()))


def main() -> None:
    # cross_check off so the tableau result is measured on its own
    opts = SolveOptions(cross_check=False)
    cases = [("examples/scenario_a.json", load_example("scenario_a.json"))]
    for seed in range(10):
        cases.append((f"random-{seed}", generate_random_problem(3, seed)))

    print("name,status,objective,vertex_objective,tableaux,time_ms")
    for name, problem in cases:
        start = time.perf_counter()
        result = simplex_solve(problem, opts)
        elapsed_ms = (time.perf_counter() - start) * 1000
        reference = solve_by_vertex_enumeration(problem)
        if isinstance(result, SimplexError):
            status, objective, tableaux = result.type, None, 0
        else:
            status, objective, tableaux = "OPTIMAL", result.objective_value, len(result.iterations)
        vertex_objective = None if isinstance(reference, SimplexError) else reference.objective_value
        print(f"{name},{status},{objective},{vertex_objective},{tableaux},{elapsed_ms:.2f}")


if __name__ == "__main__":
    main()
