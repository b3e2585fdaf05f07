from __future__ import annotations

import json

import pytest

from oecd_bridge.features.prompts import list_prompts, render_prompt
from oecd_bridge.features.resources import list_resources, read_resource
from oecd_bridge.tests._stubs import StubOECDClient


def test_prompt_definitions() -> None:
    prompts = {prompt["name"]: prompt for prompt in list_prompts()}
    assert set(prompts) == {"analyze_economic_trend", "compare_countries", "get_latest_statistics"}
    required = [arg["name"] for arg in prompts["compare_countries"]["arguments"] if arg["required"]]
    assert required == ["indicator", "countries"]


def test_render_prompt_with_optional_argument() -> None:
    result = render_prompt(
        "compare_countries", {"indicator": "GDP", "countries": "USA,DEU", "year": "2022"}
    )
    (message,) = result["messages"]
    assert message["role"] == "user"
    assert message["content"]["text"].startswith("Compare GDP across USA,DEU for the year 2022.\n")


def test_render_prompt_without_optional_argument() -> None:
    result = render_prompt("get_latest_statistics", {"topic": "unemployment"})
    text = result["messages"][0]["content"]["text"]
    assert text.startswith("Get the latest unemployment statistics for all OECD countries.")
    assert result["description"] == "Get the most recent statistics for a specific topic"


def test_render_prompt_errors() -> None:
    with pytest.raises(ValueError, match="Unknown prompt: nope"):
        render_prompt("nope")
    with pytest.raises(ValueError, match="Missing required arguments"):
        render_prompt("analyze_economic_trend", {"indicator": "GDP"})


def test_resources_are_listed() -> None:
    uris = [resource["uri"] for resource in list_resources()]
    assert uris == ["oecd://categories", "oecd://dataflows/popular", "oecd://api/info"]


def test_read_resource_returns_json() -> None:
    client = StubOECDClient()
    categories = json.loads(read_resource(client, "oecd://categories"))
    assert len(categories) == 17
    assert categories[0]["id"] == "ECO"
    info = json.loads(read_resource(client, "oecd://api/info"))
    assert info["baseUrl"] == "https://sdmx.test/rest/"


def test_read_unknown_resource() -> None:
    with pytest.raises(ValueError, match="Unknown resource: oecd://nope"):
        read_resource(StubOECDClient(), "oecd://nope")
