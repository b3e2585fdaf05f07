"""Observation limits that keep query results inside a model's context budget."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ..oecd.client import OECDClient
from ..oecd.models import DataQuery, Observation
from ..utils.config import DEFAULT_OBSERVATIONS, MAX_OBSERVATIONS, WARN_RATIO
from ..utils.logging import bump_counter, current_call

logger = logging.getLogger("oecd_bridge.features.observations")

ShapedResult = Union[List[Observation], Dict[str, object]]


@dataclass(frozen=True, slots=True)
class ObservationLimit:
    """Cap applied to one query; ``wanted`` is the cap before clamping."""

    wanted: int
    effective: int
    clamped: bool


def resolve_limit(
    requested: Optional[int],
    *,
    default: int = DEFAULT_OBSERVATIONS,
    ceiling: int = MAX_OBSERVATIONS,
) -> ObservationLimit:
    """Pick the observation cap for a query.

    Validation already rejects requests above the ceiling; the clamp still
    guards against a default that exceeds it.
    """

    wanted = requested if requested is not None else default
    if wanted > ceiling:
        return ObservationLimit(wanted=wanted, effective=ceiling, clamped=True)
    return ObservationLimit(wanted=wanted, effective=wanted, clamped=False)


def limit_warning(
    count: int, limit: ObservationLimit, *, ceiling: int = MAX_OBSERVATIONS
) -> Optional[str]:
    if limit.clamped:
        return (
            f"⚠️ Requested {limit.wanted} observations but limited to {ceiling} "
            "to protect context window."
        )
    if count >= ceiling * WARN_RATIO:
        return (
            f"⚠️ Returning {count} observations (near max limit of {ceiling}). "
            "Consider using filters or time periods to reduce data size."
        )
    return None


def shape_observations(
    observations: List[Observation],
    limit: ObservationLimit,
    *,
    ceiling: int = MAX_OBSERVATIONS,
) -> ShapedResult:
    """Return ``observations`` bare, or wrapped with a warning near the ceiling."""

    warning = limit_warning(len(observations), limit, ceiling=ceiling)
    if warning is None:
        return observations
    bump_counter("limit.clamped" if limit.clamped else "limit.near_ceiling")
    context = current_call()
    extra = {"observations": len(observations), "limit": limit.effective}
    if context is not None:
        extra = context.fields(**extra)
    logger.info("observations.limit_warning", extra=extra)
    return {
        "warning": warning,
        "total_observations": len(observations),
        "data": observations,
    }


async def query_observations(
    client: OECDClient,
    *,
    dataflow_id: str,
    filter: Optional[str] = None,
    start_period: Optional[str] = None,
    end_period: Optional[str] = None,
    last_n_observations: Optional[int] = None,
    default: int = DEFAULT_OBSERVATIONS,
) -> ShapedResult:
    limit = resolve_limit(last_n_observations, default=default)
    observations = await client.query_data(
        DataQuery(
            dataflow_id=dataflow_id,
            filter=filter,
            start_period=start_period,
            end_period=end_period,
            last_n_observations=limit.effective,
        )
    )
    return shape_observations(observations, limit)


__all__ = [
    "ObservationLimit",
    "limit_warning",
    "query_observations",
    "resolve_limit",
    "shape_observations",
]
