from __future__ import annotations

import re

import pytest

from oecd_bridge.api import schemas
from oecd_bridge.api.validators import (
    EnumField,
    InputSchema,
    NumberField,
    StringField,
    validate_input,
)
from oecd_bridge.oecd.catalog import CATEGORY_CODES
from oecd_bridge.utils.errors import ToolInputError


def _error(schema: InputSchema, arguments: object, tool: str = "tool") -> ToolInputError:
    with pytest.raises(ToolInputError) as excinfo:
        validate_input(schema, arguments, tool)
    return excinfo.value


@pytest.mark.parametrize("limit", [1, 20, 100])
def test_search_limit_bounds_are_inclusive(limit: int) -> None:
    validated = validate_input(
        schemas.SEARCH_DATAFLOWS, {"query": "gdp", "limit": limit}, "search_dataflows"
    )
    assert validated == {"query": "gdp", "limit": limit}


@pytest.mark.parametrize(
    ("limit", "reason"),
    [(0, "Limit must be at least 1"), (101, "Limit cannot exceed 100")],
)
def test_search_limit_out_of_bounds(limit: int, reason: str) -> None:
    error = _error(schemas.SEARCH_DATAFLOWS, {"query": "gdp", "limit": limit}, "search_dataflows")
    assert str(error) == f'Invalid input for tool "search_dataflows": limit: {reason}'
    assert error.issues == (("limit", reason),)


def test_limit_defaults_per_tool() -> None:
    assert validate_input(schemas.SEARCH_DATAFLOWS, {"query": "gdp"}, "s")["limit"] == 20
    assert validate_input(schemas.LIST_DATAFLOWS, {}, "l") == {"category": None, "limit": 50}


def test_limit_must_be_integer() -> None:
    error = _error(schemas.LIST_DATAFLOWS, {"limit": 20.5})
    assert error.issues == (("limit", "Limit must be an integer"),)

    validated = validate_input(schemas.LIST_DATAFLOWS, {"limit": 20.0}, "l")
    assert validated["limit"] == 20
    assert isinstance(validated["limit"], int)


def test_wrong_type_reports_only_the_type() -> None:
    error = _error(schemas.SEARCH_DATAFLOWS, {"query": 5, "limit": True})
    assert error.issues == (
        ("query", "Expected string, received number"),
        ("limit", "Expected number, received boolean"),
    )


def test_empty_query_message() -> None:
    error = _error(schemas.SEARCH_DATAFLOWS, {"query": ""}, "search_dataflows")
    assert str(error) == (
        'Invalid input for tool "search_dataflows": query: Search query must not be empty'
    )


def test_query_length_ceiling() -> None:
    validate_input(schemas.SEARCH_DATAFLOWS, {"query": "x" * 100}, "s")
    error = _error(schemas.SEARCH_DATAFLOWS, {"query": "x" * 101})
    assert error.issues == (("query", "Search query must not exceed 100 characters"),)


def test_missing_required_field() -> None:
    error = _error(schemas.GET_DATA_STRUCTURE, {}, "get_data_structure")
    assert str(error) == 'Invalid input for tool "get_data_structure": dataflow_id: Required'


@pytest.mark.parametrize("dataflow_id", ["QNA", "HEALTH_STAT", "PDB_LV123", "X" * 50])
def test_dataflow_id_accepted(dataflow_id: str) -> None:
    validated = validate_input(schemas.GET_DATA_STRUCTURE, {"dataflow_id": dataflow_id}, "g")
    assert validated == {"dataflow_id": dataflow_id}


@pytest.mark.parametrize("dataflow_id", ["qna", "QNA-TEST", "", "QNA\n", "X" * 51])
def test_dataflow_id_rejected(dataflow_id: str) -> None:
    error = _error(schemas.GET_DATA_STRUCTURE, {"dataflow_id": dataflow_id})
    assert error.issues
    assert all(path == "dataflow_id" for path, _ in error.issues)


def test_dataflow_id_pattern_message() -> None:
    error = _error(schemas.GET_DATA_STRUCTURE, {"dataflow_id": "qna"})
    assert error.issues == (
        (
            "dataflow_id",
            "Dataflow ID must contain only uppercase letters, numbers, and underscores",
        ),
    )


def test_empty_dataflow_id_reports_length_before_pattern() -> None:
    error = _error(schemas.GET_DATA_STRUCTURE, {"dataflow_id": ""})
    reasons = [reason for _, reason in error.issues]
    assert reasons[0] == "Dataflow ID must not be empty"


@pytest.mark.parametrize("period", ["2020", "2020-Q1", "2020-Q4", "2020-01", "2020-12"])
def test_period_accepted(period: str) -> None:
    validated = validate_input(
        schemas.QUERY_DATA, {"dataflow_id": "QNA", "start_period": period}, "query_data"
    )
    assert validated["start_period"] == period


@pytest.mark.parametrize("period", ["20-Q1", "2020-Q5", "2020-13", "2020-00", "2020-Q0", "2020Q1"])
def test_period_rejected(period: str) -> None:
    error = _error(schemas.QUERY_DATA, {"dataflow_id": "QNA", "end_period": period})
    assert error.issues == (
        ("end_period", "Invalid period format. Use YYYY, YYYY-QN, or YYYY-MM"),
    )


def test_last_n_observations_ceiling() -> None:
    validated = validate_input(
        schemas.QUERY_DATA, {"dataflow_id": "QNA", "last_n_observations": 1000}, "query_data"
    )
    assert validated["last_n_observations"] == 1000

    error = _error(
        schemas.QUERY_DATA, {"dataflow_id": "QNA", "last_n_observations": 1001}, "query_data"
    )
    assert "cannot exceed 1000" in str(error)


def test_last_n_observations_absent_stays_undefined() -> None:
    validated = validate_input(schemas.QUERY_DATA, {"dataflow_id": "QNA"}, "query_data")
    assert validated == {
        "dataflow_id": "QNA",
        "filter": None,
        "start_period": None,
        "end_period": None,
        "last_n_observations": None,
    }


def test_filter_length_ceiling() -> None:
    validate_input(schemas.QUERY_DATA, {"dataflow_id": "QNA", "filter": "." * 200}, "q")
    error = _error(schemas.QUERY_DATA, {"dataflow_id": "QNA", "filter": "." * 201})
    assert error.issues == (("filter", "Filter must not exceed 200 characters"),)


def test_all_violations_are_aggregated_in_field_order() -> None:
    error = _error(
        schemas.QUERY_DATA,
        {"last_n_observations": 0, "start_period": "2020-Q5", "dataflow_id": "qna"},
        "query_data",
    )
    assert [path for path, _ in error.issues] == [
        "dataflow_id",
        "start_period",
        "last_n_observations",
    ]
    assert str(error).startswith('Invalid input for tool "query_data": dataflow_id: ')
    assert "; start_period: Invalid period format" in str(error)


def test_valid_sibling_contributes_nothing() -> None:
    error = _error(schemas.QUERY_DATA, {"dataflow_id": "QNA", "end_period": "2020-13"})
    assert "dataflow_id" not in str(error)


def test_category_enum() -> None:
    assert len(CATEGORY_CODES) == 17
    for code in CATEGORY_CODES:
        assert validate_input(schemas.LIST_DATAFLOWS, {"category": code}, "l")["category"] == code

    error = _error(schemas.LIST_DATAFLOWS, {"category": "eco"})
    path, reason = error.issues[0]
    assert path == "category"
    assert reason.startswith("Invalid enum value. Expected 'ECO' | 'HEA'")


def test_undeclared_keys_are_ignored() -> None:
    validated = validate_input(
        schemas.SEARCH_DATAFLOWS, {"query": "gdp", "verbose": True}, "search_dataflows"
    )
    assert validated == {"query": "gdp", "limit": 20}


def test_closed_schema_rejects_undeclared_keys() -> None:
    schema = InputSchema((StringField("name", required=True),), closed=True)
    error = _error(schema, {"name": "x", "extra": 1, "other": 2})
    assert error.issues == (("(root)", "Unrecognized key(s) in object: 'extra', 'other'"),)


def test_null_values_count_as_absent() -> None:
    validated = validate_input(
        schemas.SEARCH_DATAFLOWS, {"query": "gdp", "limit": None}, "search_dataflows"
    )
    assert validated["limit"] == 20

    error = _error(schemas.GET_DATA_STRUCTURE, {"dataflow_id": None})
    assert error.issues == (("dataflow_id", "Required"),)


def test_missing_arguments_mean_empty_object() -> None:
    assert validate_input(schemas.NO_ARGUMENTS, None, "get_categories") == {}


def test_non_object_arguments_rejected() -> None:
    error = _error(schemas.SEARCH_DATAFLOWS, ["gdp"], "search_dataflows")
    assert error.issues == (("(root)", "Expected object, received array"),)


def test_generic_field_messages() -> None:
    schema = InputSchema(
        (
            StringField("name", min_length=2),
            NumberField("count", maximum=5),
            EnumField("mode", ("a", "b")),
        )
    )
    error = _error(schema, {"name": "x", "count": 6, "mode": "c"})
    assert error.issues == (
        ("name", "String must contain at least 2 character(s)"),
        ("count", "Number must be less than or equal to 5"),
        ("mode", "Invalid enum value. Expected 'a' | 'b'"),
    )


def test_checker_faults_propagate_unchanged() -> None:
    schema = InputSchema((StringField("name", pattern="("),))
    with pytest.raises(re.error):
        validate_input(schema, {"name": "x"}, "tool")


def test_advertised_schema_shape() -> None:
    schema = schemas.QUERY_DATA.json_schema()
    assert schema["type"] == "object"
    assert schema["required"] == ["dataflow_id"]
    observations = schema["properties"]["last_n_observations"]
    assert observations["minimum"] == 1
    assert observations["maximum"] == 1000
    assert "additionalProperties" not in schema
    assert schemas.NO_ARGUMENTS.json_schema() == {"type": "object", "properties": {}}
