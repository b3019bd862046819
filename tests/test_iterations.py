import json
from pathlib import Path

import pytest

from simplex_optimizer.iterations import build_iteration_records, entering_and_leaving, to_payload
from simplex_optimizer.lp.simplex import simplex_solve
from simplex_optimizer.lp.tableau import Tableau
from simplex_optimizer.schemas import Problem, SimplexError


def load_example(name: str) -> Problem:
    data = json.loads(Path(__file__).parent.parent.joinpath("examples", name).read_text())
    return Problem.model_validate(data)


def test_records_describe_each_pivot():
    solution = simplex_solve(load_example("scenario_a.json"))
    records = build_iteration_records(solution.iterations)

    assert [record.iteration_number for record in records] == [1, 2, 3]
    assert records[0].entering_var is None and records[0].leaving_var is None
    assert (records[1].entering_var, records[1].leaving_var) == ("x1", "s1")
    assert (records[2].entering_var, records[2].leaving_var) == ("x2", "s2")
    assert [record.is_optimal for record in records] == [False, False, True]
    assert records[0].basic_variables == {"s1": 24.0, "s2": 6.0}
    assert records[-1].basic_variables == {"x1": pytest.approx(3.0), "x2": pytest.approx(1.5)}
    assert records[-1].objective_value == pytest.approx(21.0)
    assert records[0].tableau[2] == [-5.0, -4.0, 0.0, 0.0, 0.0]


def test_records_span_both_phases():
    solution = simplex_solve(load_example("scenario_d.json"))
    records = build_iteration_records(solution.iterations)

    assert (records[1].entering_var, records[1].leaving_var) == ("x1", "a1")
    assert records[1].objective_value == pytest.approx(0.0)
    assert records[2].objective_value == pytest.approx(-8.0)


def test_unlabelled_columns_fall_back_to_index_names():
    before = Tableau(matrix=[[1.0, 0.0, 1.0], [0.0, 0.0, 0.0]], basis=[1], non_basis=[0])
    after = Tableau(matrix=[[1.0, 0.0, 1.0], [0.0, 0.0, 0.0]], basis=[0], non_basis=[1])

    assert entering_and_leaving(after, before) == ("x0", "x1")
    assert entering_and_leaving(after, after) == (None, None)


def test_payload_uses_camel_case_keys():
    payload = to_payload(simplex_solve(load_example("scenario_a.json")))

    assert payload["optimal"] is True
    assert payload["bounded"] is True
    assert payload["objectiveValue"] == pytest.approx(21.0)
    assert list(payload["variables"]) == ["x1", "x2"]
    first = payload["iterations"][0]
    assert set(first) == {
        "iterationNumber",
        "tableau",
        "basicVariables",
        "objectiveValue",
        "enteringVar",
        "leavingVar",
        "isOptimal",
    }
    json.dumps(payload)


def test_payload_for_errors():
    payload = to_payload(SimplexError(type="NO_ACOTADA", message="El problema no tiene solución acotada"))
    assert payload == {"type": "NO_ACOTADA", "message": "El problema no tiene solución acotada"}

    without = to_payload(simplex_solve(load_example("scenario_a.json")), include_iterations=False)
    assert "iterations" not in without
