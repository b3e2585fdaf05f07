"""Input schemas for the OECD tool catalog."""
from __future__ import annotations

from ..oecd.catalog import CATEGORY_CODES
from ..utils.config import MAX_OBSERVATIONS
from .validators import EnumField, InputSchema, NumberField, StringField

PERIOD_PATTERN = r"^[0-9]{4}(-Q[1-4]|-(0[1-9]|1[0-2]))?$"
DATAFLOW_ID_PATTERN = r"^[A-Z0-9_]+$"


def _limit(default: int, description: str) -> NumberField:
    return NumberField(
        "limit",
        description=description,
        default=default,
        minimum=1,
        minimum_message="Limit must be at least 1",
        maximum=100,
        maximum_message="Limit cannot exceed 100",
        integer=True,
        integer_message="Limit must be an integer",
    )


def _dataflow_id(description: str) -> StringField:
    return StringField(
        "dataflow_id",
        description=description,
        required=True,
        min_length=1,
        min_length_message="Dataflow ID must not be empty",
        max_length=50,
        max_length_message="Dataflow ID must not exceed 50 characters",
        pattern=DATAFLOW_ID_PATTERN,
        pattern_message=(
            "Dataflow ID must contain only uppercase letters, numbers, and underscores"
        ),
    )


def _filter(description: str) -> StringField:
    return StringField(
        "filter",
        description=description,
        max_length=200,
        max_length_message="Filter must not exceed 200 characters",
    )


def _period(name: str, description: str) -> StringField:
    return StringField(
        name,
        description=description,
        pattern=PERIOD_PATTERN,
        pattern_message="Invalid period format. Use YYYY, YYYY-QN, or YYYY-MM",
    )


def _category(description: str) -> EnumField:
    return EnumField("category", CATEGORY_CODES, description=description)


SEARCH_DATAFLOWS = InputSchema(
    (
        StringField(
            "query",
            description="Search query to find relevant datasets",
            required=True,
            min_length=1,
            min_length_message="Search query must not be empty",
            max_length=100,
            max_length_message="Search query must not exceed 100 characters",
        ),
        _limit(20, "Maximum number of results to return (default: 20)"),
    )
)

LIST_DATAFLOWS = InputSchema(
    (
        _category(
            "Optional category filter: " + ", ".join(CATEGORY_CODES),
        ),
        _limit(50, "Maximum number of results (default: 50)"),
    )
)

GET_DATA_STRUCTURE = InputSchema(
    (_dataflow_id('Dataflow ID (e.g., "QNA", "MEI", "HEALTH_STAT")'),)
)

QUERY_DATA = InputSchema(
    (
        _dataflow_id("Dataflow ID to query"),
        _filter(
            'Dimension filter (e.g., "USA.GDP.." for US GDP). Use "*" or "all" for all '
            "values. Get structure first to see valid dimensions."
        ),
        _period("start_period", 'Start period (e.g., "2020-Q1", "2020-01")'),
        _period("end_period", 'End period (e.g., "2023-Q4", "2023-12")'),
        NumberField(
            "last_n_observations",
            description=(
                "Get only the last N observations (default: 100, max: 1000 to protect "
                "against context overflow)"
            ),
            minimum=1,
            minimum_message="Observations limit must be at least 1",
            maximum=MAX_OBSERVATIONS,
            maximum_message=(
                f"Observations limit cannot exceed {MAX_OBSERVATIONS} (context protection)"
            ),
            integer=True,
            integer_message="Observations limit must be an integer",
        ),
    )
)

SEARCH_INDICATORS = InputSchema(
    (
        StringField(
            "indicator",
            description="Indicator to search for",
            required=True,
            min_length=1,
            min_length_message="Indicator search term must not be empty",
            max_length=100,
            max_length_message="Indicator search term must not exceed 100 characters",
        ),
        _category("Optional category filter"),
    )
)

GET_DATAFLOW_URL = InputSchema(
    (
        _dataflow_id("Dataflow ID"),
        _filter("Optional dimension filter"),
    )
)

NO_ARGUMENTS = InputSchema()
