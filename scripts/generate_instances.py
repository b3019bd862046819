#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional, Sequence

from simplex_optimizer.schemas import Coefficient, Constraint, Objective, Problem

OPERATORS = ("<=", "<=", ">=", "=")


def generate_random_problem(
    num_constraints: int,
    seed: Optional[int] = None,
    operators: Sequence[str] = OPERATORS,
    allow_negative: bool = False,
) -> Problem:
    """Random two-variable problem; ``operators`` is sampled with repetition, so duplicates weight the mix."""
    rng = random.Random(seed)
    variables = ["x1", "x2"]
    low = -6.0 if allow_negative else 0.5

    constraints: List[Constraint] = []
    for _ in range(num_constraints):
        coefficients = [Coefficient(variable=name, value=round(rng.uniform(low, 6.0), 2)) for name in variables]
        constraints.append(
            Constraint(
                coefficients=coefficients,
                operator=rng.choice(list(operators)),
                right_side=round(rng.uniform(2.0, 30.0), 2),
            )
        )
    objective = Objective(
        type=rng.choice(("max", "min")),
        coefficients=[Coefficient(variable=name, value=round(rng.uniform(1.0, 8.0), 2)) for name in variables],
    )
    return Problem(name=f"random-{seed}", objective=objective, constraints=constraints, variables=variables)


def _operator_mix(text: str) -> List[str]:
    operators = [op.strip() for op in text.split(",") if op.strip()]
    unknown = sorted(set(operators) - {"<=", ">=", "="})
    if not operators or unknown:
        raise argparse.ArgumentTypeError(f"operators must be a comma list of <=, >=, = (got {text!r})")
    return operators


def main() -> None:
    parser = argparse.ArgumentParser(description="Write random two-variable problems in the solver's JSON format.")
    parser.add_argument("--constraints", type=int, default=3)
    parser.add_argument("--count", type=int, default=1)
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first instance; later ones count up")
    parser.add_argument(
        "--operators",
        type=_operator_mix,
        default=list(OPERATORS),
        help="Comma-separated operator pool, e.g. '<=,<=,>=' (repeats weight the draw)",
    )
    parser.add_argument(
        "--negative-coefficients",
        action="store_true",
        help="Draw constraint coefficients from [-6, 6] so unbounded and infeasible cases show up",
    )
    parser.add_argument("--out-dir", type=Path, default=None, help="One file per instance instead of stdout")
    args = parser.parse_args()

    problems = [
        generate_random_problem(args.constraints, args.seed + idx, args.operators, args.negative_coefficients)
        for idx in range(args.count)
    ]

    if args.out_dir is None:
        print(json.dumps([problem.model_dump(by_alias=True) for problem in problems], indent=2))
        return
    args.out_dir.mkdir(parents=True, exist_ok=True)
    for problem in problems:
        path = args.out_dir / f"{problem.name}.json"
        path.write_text(json.dumps(problem.model_dump(by_alias=True), indent=2))


if __name__ == "__main__":
    main()
