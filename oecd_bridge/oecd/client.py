"""HTTP client wrapper around the OECD SDMX REST API."""
from __future__ import annotations

import json
import logging
from time import perf_counter
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlencode

import httpx

from ..utils import config
from ..utils.errors import UpstreamError
from ..utils.logging import bump_counter, current_call, scoped_timer
from .catalog import (
    CATEGORIES,
    KNOWN_DATAFLOWS,
    POPULAR_DATASETS,
    KnownDataflow,
    get_category,
    get_dataflow,
    search_known_dataflows,
)
from .models import (
    CategoryDetail,
    CategoryInfo,
    DataQuery,
    DataStructure,
    DataflowSummary,
    Observation,
    PopularDatasetInfo,
)

logger = logging.getLogger("oecd_bridge.client")


def _require_dataflow(dataflow_id: str) -> KnownDataflow:
    known = get_dataflow(dataflow_id)
    if known is None:
        raise UpstreamError(
            f"Unknown dataflow: {dataflow_id}. Use list_dataflows to see available dataflows."
        )
    return known


def parse_series_key(key: str) -> Dict[str, str]:
    """Expand an SDMX-JSON series key such as ``0:1:2`` into positional dimensions."""

    return {f"DIM_{index}": part for index, part in enumerate(key.split(":"))}


def parse_observations(payload: Any) -> List[Observation]:
    """Flatten SDMX-JSON ``dataSets[].series[].observations`` into rows.

    Each observation value is either a scalar or an array whose first element
    is the value and whose remaining elements are attribute indices.
    """

    observations: List[Observation] = []
    try:
        datasets = ((payload or {}).get("data") or {}).get("dataSets") or []
        for dataset in datasets:
            series = dataset.get("series") or {}
            for series_key, series_data in series.items():
                dimensions = parse_series_key(series_key)
                for period, raw in (series_data.get("observations") or {}).items():
                    value = raw[0] if isinstance(raw, list) and raw else raw
                    observations.append(
                        {
                            "dimensions": {**dimensions, "TIME_PERIOD": period},
                            "value": value,
                        }
                    )
    except (AttributeError, TypeError) as exc:
        logger.warning("sdmx.parse_failed", extra={"error": str(exc)})
        return []
    return observations


class OECDSDMXClient:
    """Thin async client for the SDMX ``/data`` endpoint.

    The OECD endpoint does not publish usable structure definitions for most
    dataflows, so listing and structure lookups are served from the curated
    catalog and only observation queries go over the wire.
    """

    def __init__(
        self,
        base_url: str = config.SDMX_BASE_URL,
        *,
        explorer_url: str = config.EXPLORER_BASE_URL,
        timeout: float = config.HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.explorer_url = explorer_url
        self.timeout = timeout
        self._session = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def list_dataflows(self) -> List[DataflowSummary]:
        return [df.summary() for df in KNOWN_DATAFLOWS]

    async def search_dataflows(self, query: str) -> List[DataflowSummary]:
        return [df.summary() for df in search_known_dataflows(query)]

    async def get_data_structure(self, dataflow_id: str) -> DataStructure:
        _require_dataflow(dataflow_id)
        return {
            "dataflowId": dataflow_id,
            "dimensions": [
                {
                    "id": "REF_AREA",
                    "name": "Reference Area",
                    "values": [
                        {"id": "all", "name": "Use query_data to get actual dimension values"}
                    ],
                },
                {
                    "id": "TIME_PERIOD",
                    "name": "Time Period",
                    "values": [{"id": "all", "name": "Time dimension"}],
                },
                {
                    "id": "MEASURE",
                    "name": "Measure",
                    "values": [{"id": "all", "name": "Measured indicator"}],
                },
            ],
            "attributes": [
                {"id": "UNIT_MEASURE", "name": "Unit of Measure"},
                {"id": "OBS_STATUS", "name": "Observation Status"},
            ],
        }

    def data_path(self, known: KnownDataflow, filter: str) -> str:
        # The data endpoint rejects explicit versions for most OECD dataflows.
        return f"data/{known.agency},{known.full_id}/{filter}"

    async def query_data(
        self,
        dataflow_id: str,
        filter: str = "all",
        *,
        start_period: Optional[str] = None,
        end_period: Optional[str] = None,
        last_n_observations: Optional[int] = None,
    ) -> List[Observation]:
        known = _require_dataflow(dataflow_id)
        params: Dict[str, str] = {"format": "jsondata"}
        if start_period:
            params["startPeriod"] = start_period
        if end_period:
            params["endPeriod"] = end_period
        if last_n_observations:
            params["lastNObservations"] = str(last_n_observations)

        payload = await self._request_json(self.data_path(known, filter), params=params)
        observations = parse_observations(payload)
        bump_counter("observations", len(observations))
        return observations

    def get_data_explorer_url(self, dataflow_id: str, filter: Optional[str] = None) -> str:
        query = {"df": dataflow_id}
        if filter:
            query["dq"] = filter
        return f"{self.explorer_url}?{urlencode(query, safe='.*+@,')}"

    async def _request_json(self, path: str, *, params: Mapping[str, str]) -> Any:
        url = f"{self.base_url}/{path}"
        context = current_call()
        if context is not None:
            timer_extra = context.fields(event="timer", operation="sdmx.get", path=path)
        else:
            timer_extra = {"event": "timer", "operation": "sdmx.get", "path": path}
        with scoped_timer(logger, "sdmx.get", extra=timer_extra):
            start = perf_counter()
            try:
                response = await self._session.get(
                    url, params=dict(params), headers={"Accept": "application/json"}
                )
            except httpx.HTTPError as exc:
                duration_ms = (perf_counter() - start) * 1000.0
                logger.warning(
                    "sdmx.request",
                    extra={"path": path, "duration_ms": duration_ms, "error": str(exc)},
                )
                raise UpstreamError(f"SDMX API request failed: {exc}") from exc
        duration_ms = (perf_counter() - start) * 1000.0
        logger.info(
            "sdmx.request",
            extra={
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        if response.is_error:
            raise UpstreamError(
                f"SDMX API error: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
            )
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            logger.warning(
                "sdmx.invalid_json",
                extra={"path": path, "error": str(exc), "preview": response.text[:256]},
            )
            raise UpstreamError("SDMX API returned invalid JSON") from exc

    async def aclose(self) -> None:
        await self._session.aclose()


class OECDClient:
    """High-level facade used by the tool handlers.

    Every call goes straight to the SDMX service or the static catalog; nothing
    is cached.
    """

    def __init__(self, sdmx: Optional[OECDSDMXClient] = None) -> None:
        self.sdmx = sdmx or OECDSDMXClient()

    def get_categories(self) -> List[CategoryInfo]:
        return [category.as_dict() for category in CATEGORIES]

    def get_popular_datasets(self) -> List[PopularDatasetInfo]:
        return [dataset.as_dict() for dataset in POPULAR_DATASETS]

    async def list_dataflows(
        self, *, category: Optional[str] = None, limit: Optional[int] = None
    ) -> List[DataflowSummary]:
        dataflows = _filter_by_category(await self.sdmx.list_dataflows(), category)
        if limit:
            dataflows = dataflows[:limit]
        return dataflows

    async def search_dataflows(self, query: str, limit: int = 20) -> List[DataflowSummary]:
        results = await self.sdmx.search_dataflows(query)
        return results[:limit]

    async def get_data_structure(self, dataflow_id: str) -> DataStructure:
        return await self.sdmx.get_data_structure(dataflow_id)

    async def query_data(self, query: DataQuery) -> List[Observation]:
        return await self.sdmx.query_data(
            query.dataflow_id,
            query.filter or "all",
            start_period=query.start_period,
            end_period=query.end_period,
            last_n_observations=query.last_n_observations,
        )

    async def search_indicators(
        self, *, indicator: str, category: Optional[str] = None
    ) -> List[DataflowSummary]:
        needle = indicator.lower()
        matches = [
            df
            for df in await self.sdmx.list_dataflows()
            if needle in df["name"].lower()
            or needle in df["id"].lower()
            or needle in df.get("description", "").lower()
        ]
        return _filter_by_category(matches, category)

    def get_data_explorer_url(self, dataflow_id: str, filter: Optional[str] = None) -> str:
        return self.sdmx.get_data_explorer_url(dataflow_id, filter)

    async def get_categories_detailed(self) -> List[CategoryDetail]:
        by_id = {df["id"]: df for df in await self.sdmx.list_dataflows()}
        return [
            {
                "category": category.as_dict(),
                "exampleDataflows": [
                    by_id[dataset_id]
                    for dataset_id in category.example_datasets
                    if dataset_id in by_id
                ],
            }
            for category in CATEGORIES
        ]

    def get_api_info(self) -> Dict[str, object]:
        return {
            "baseUrl": f"{self.sdmx.base_url}/",
            "format": "SDMX-JSON (Statistical Data and Metadata eXchange)",
            "authentication": "None required (public API)",
            "documentation": "https://data.oecd.org/",
            "dataExplorer": "https://data-explorer.oecd.org/",
            "endpoints": {
                "listDataflows": "/dataflow/OECD",
                "getStructure": "/dataflow/OECD/{dataflowID}/{version}?references=descendants",
                "queryData": "/data/{agency},{DSD_ID}@{DF_ID}/{filter}?format=jsondata",
            },
        }

    async def aclose(self) -> None:
        await self.sdmx.aclose()


def _filter_by_category(
    dataflows: List[DataflowSummary], category: Optional[str]
) -> List[DataflowSummary]:
    if not category:
        return dataflows
    known = get_category(category)
    if known is None:
        return dataflows
    wanted = set(known.example_datasets)
    return [df for df in dataflows if df["id"] in wanted]


__all__ = [
    "OECDClient",
    "OECDSDMXClient",
    "parse_observations",
    "parse_series_key",
]
