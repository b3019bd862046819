from __future__ import annotations

import os

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from .iterations import to_payload
from .lp.preprocess import validate_problem
from .lp.simplex import simplex_solve
from .schemas import Problem, SimplexError, SolveOptions

app = FastMCP("Simplex Optimizer")


def _invalid(exc: ValidationError) -> dict:
    return SimplexError(type="ENTRADA_INVALIDA", message=str(exc)).model_dump()


@app.tool()
def solve_problem(problem: dict, options: SolveOptions | None = None) -> dict:
    """Solve a two-variable linear program and return the optimum or an error."""
    try:
        model = Problem.model_validate(problem)
    except ValidationError as exc:
        return _invalid(exc)
    opts = options or SolveOptions()
    return to_payload(simplex_solve(model, opts), include_iterations=False)


@app.tool()
def solve_problem_with_iterations(problem: dict, options: SolveOptions | None = None) -> dict:
    """Solve a linear program and include every tableau visited, ready to persist."""
    try:
        model = Problem.model_validate(problem)
    except ValidationError as exc:
        return _invalid(exc)
    opts = options or SolveOptions()
    return to_payload(simplex_solve(model, opts), include_iterations=True)


@app.tool()
def check_problem(problem: dict) -> dict:
    """Run the pre-solve checks only: format errors and obvious infeasibility."""
    try:
        model = Problem.model_validate(problem)
    except ValidationError as exc:
        return {"valid": False, **_invalid(exc)}
    verdict = validate_problem(model)
    if verdict is True:
        return {"valid": True}
    return {"valid": False, "type": verdict}


if __name__ == "__main__":
    import sys

    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        app.settings.host = os.environ.get("HOST", "127.0.0.1")
        app.settings.port = int(os.environ.get("PORT", "8081"))
        app.settings.streamable_http_path = "/mcp"
        app.run(transport="streamable-http")
