"""Lightweight type hints for OECD SDMX payloads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, TypedDict, NotRequired


class DataflowSummary(TypedDict):
    id: str
    version: str
    name: str
    description: NotRequired[str]
    agencyID: str


class CategoryInfo(TypedDict):
    id: str
    name: str
    description: str
    exampleDatasets: List[str]


class PopularDatasetInfo(TypedDict):
    id: str
    name: str
    description: str
    category: str


class DimensionValue(TypedDict):
    id: str
    name: str


class Dimension(TypedDict):
    id: str
    name: str
    values: List[DimensionValue]


class Attribute(TypedDict):
    id: str
    name: str


class DataStructure(TypedDict):
    dataflowId: str
    dimensions: List[Dimension]
    attributes: List[Attribute]


class Observation(TypedDict):
    dimensions: Dict[str, str]
    value: object


class CategoryDetail(TypedDict):
    category: CategoryInfo
    exampleDataflows: List[DataflowSummary]


@dataclass(frozen=True, slots=True)
class DataQuery:
    """Parameters forwarded to the SDMX data endpoint."""

    dataflow_id: str
    filter: Optional[str] = None
    start_period: Optional[str] = None
    end_period: Optional[str] = None
    last_n_observations: Optional[int] = None
