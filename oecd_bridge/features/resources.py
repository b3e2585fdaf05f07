"""Read-only MCP resources backed by the static catalog."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from ..oecd.client import OECDClient


@dataclass(frozen=True)
class ResourceSpec:
    uri: str
    name: str
    description: str
    read: Callable[[OECDClient], object]
    mime_type: str = "application/json"

    def definition(self) -> Dict[str, str]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


RESOURCE_SPECS: Tuple[ResourceSpec, ...] = (
    ResourceSpec(
        "oecd://categories",
        "OECD Data Categories",
        "List of all 17 OECD data categories with descriptions",
        lambda client: client.get_categories(),
    ),
    ResourceSpec(
        "oecd://dataflows/popular",
        "Popular OECD Datasets",
        "Curated list of commonly used OECD datasets",
        lambda client: client.get_popular_datasets(),
    ),
    ResourceSpec(
        "oecd://api/info",
        "OECD API Information",
        "Information about the OECD SDMX API endpoints and usage",
        lambda client: client.get_api_info(),
    ),
)


def list_resources() -> List[Dict[str, str]]:
    return [spec.definition() for spec in RESOURCE_SPECS]


def read_resource(client: OECDClient, uri: str) -> str:
    """Return the JSON text of resource ``uri``.

    Raises ``ValueError`` for unknown URIs.
    """

    for spec in RESOURCE_SPECS:
        if spec.uri == uri:
            return json.dumps(spec.read(client), indent=2, ensure_ascii=False)
    raise ValueError(f"Unknown resource: {uri}")


__all__ = ["RESOURCE_SPECS", "ResourceSpec", "list_resources", "read_resource"]
