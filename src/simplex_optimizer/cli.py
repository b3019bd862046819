from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .iterations import to_payload
from .lp.simplex import simplex_solve
from .schemas import Problem, SimplexError, SolveOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplex-optimizer", description="Solve a two-variable LP with the two-phase simplex method."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Solve a problem read from a JSON file ('-' for stdin)")
    solve.add_argument("problem", help="Path to the problem JSON")
    solve.add_argument("--iterations", action="store_true", help="Include the tableau trace")
    solve.add_argument("--max-iters", type=int, default=None, help="Phase II iteration cap")
    solve.add_argument("--no-cross-check", action="store_true", help="Skip the vertex enumeration check")
    solve.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def _read(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        problem = Problem.model_validate(json.loads(_read(args.problem)))
    except (ValidationError, json.JSONDecodeError) as exc:
        print(json.dumps(SimplexError(type="ENTRADA_INVALIDA", message=str(exc)).model_dump(), indent=2))
        return 2

    opts = SolveOptions(cross_check=not args.no_cross_check)
    if args.max_iters is not None:
        opts = opts.model_copy(update={"phase2_max_iters": args.max_iters})

    result = simplex_solve(problem, opts)
    print(json.dumps(to_payload(result, include_iterations=args.iterations), indent=2))
    return 1 if isinstance(result, SimplexError) else 0


if __name__ == "__main__":
    sys.exit(main())
