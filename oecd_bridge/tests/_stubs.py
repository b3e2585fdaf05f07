"""Deterministic stand-in for :class:`oecd_bridge.oecd.client.OECDClient`."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from oecd_bridge.oecd.catalog import CATEGORIES, KNOWN_DATAFLOWS, POPULAR_DATASETS
from oecd_bridge.oecd.models import DataQuery, Observation


def make_observations(count: int) -> List[Observation]:
    return [
        {"dimensions": {"DIM_0": "0", "TIME_PERIOD": str(index)}, "value": float(index)}
        for index in range(count)
    ]


class StubOECDClient:
    """Records every call and returns canned data.

    Set ``fail_with`` to make the network-backed operations raise it.
    """

    def __init__(
        self,
        *,
        observation_count: int = 3,
        fail_with: Optional[BaseException] = None,
    ) -> None:
        self.observation_count = observation_count
        self.fail_with = fail_with
        self.calls: List[Tuple[str, Dict[str, object]]] = []

    def _record(self, name: str, **params: object) -> None:
        self.calls.append((name, params))
        if self.fail_with is not None:
            raise self.fail_with

    def get_categories(self) -> List[Dict[str, object]]:
        self.calls.append(("get_categories", {}))
        return [category.as_dict() for category in CATEGORIES]

    def get_popular_datasets(self) -> List[Dict[str, object]]:
        self.calls.append(("get_popular_datasets", {}))
        return [dataset.as_dict() for dataset in POPULAR_DATASETS]

    async def list_dataflows(
        self, *, category: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Dict[str, object]]:
        self._record("list_dataflows", category=category, limit=limit)
        return [df.summary() for df in KNOWN_DATAFLOWS][: limit or None]

    async def search_dataflows(self, query: str, limit: int = 20) -> List[Dict[str, object]]:
        self._record("search_dataflows", query=query, limit=limit)
        return [df.summary() for df in KNOWN_DATAFLOWS if df.matches(query)][:limit]

    async def get_data_structure(self, dataflow_id: str) -> Dict[str, object]:
        self._record("get_data_structure", dataflow_id=dataflow_id)
        return {"dataflowId": dataflow_id, "dimensions": [], "attributes": []}

    async def query_data(self, query: DataQuery) -> List[Observation]:
        self._record("query_data", query=query)
        return make_observations(self.observation_count)

    async def search_indicators(
        self, *, indicator: str, category: Optional[str] = None
    ) -> List[Dict[str, object]]:
        self._record("search_indicators", indicator=indicator, category=category)
        return []

    def get_data_explorer_url(self, dataflow_id: str, filter: Optional[str] = None) -> str:
        self._record("get_data_explorer_url", dataflow_id=dataflow_id, filter=filter)
        suffix = f"&dq={filter}" if filter else ""
        return f"https://explorer.test/vis?df={dataflow_id}{suffix}"

    async def get_categories_detailed(self) -> List[Dict[str, object]]:
        self._record("get_categories_detailed")
        return [
            {"category": category.as_dict(), "exampleDataflows": []} for category in CATEGORIES
        ]

    def get_api_info(self) -> Dict[str, object]:
        return {"baseUrl": "https://sdmx.test/rest/"}


__all__ = ["StubOECDClient", "make_observations"]
