"""Prompt templates that walk an agent through common OECD analyses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple


def analyze_economic_trend(
    indicator: str, countries: str, time_period: Optional[str] = None
) -> str:
    during = f" during {time_period}" if time_period else ""
    return (
        f"Analyze the {indicator} trend for {countries}{during}.\n"
        "\n"
        "Steps:\n"
        f"1. Search for relevant OECD datasets containing {indicator} data\n"
        "2. Get the data structure to understand available dimensions\n"
        "3. Query the data for the specified countries and time period\n"
        "4. Analyze trends, compare countries, and highlight key insights\n"
        "5. Provide a summary with visualizable data if possible"
    )


def compare_countries(indicator: str, countries: str, year: Optional[str] = None) -> str:
    for_year = f" for the year {year}" if year else ""
    return (
        f"Compare {indicator} across {countries}{for_year}.\n"
        "\n"
        "Steps:\n"
        f"1. Search for OECD datasets containing {indicator}\n"
        "2. Query data for all specified countries\n"
        "3. Compare values and rankings\n"
        "4. Highlight differences and similarities\n"
        "5. Provide context about what the differences might indicate"
    )


def get_latest_statistics(topic: str, country: Optional[str] = None) -> str:
    scope = f" for {country}" if country else " for all OECD countries"
    return (
        f"Get the latest {topic} statistics{scope}.\n"
        "\n"
        "Steps:\n"
        f"1. Search for datasets related to {topic}\n"
        "2. Identify the most relevant and recent dataset\n"
        "3. Query the latest available data\n"
        "4. Present key statistics and recent trends\n"
        "5. Highlight any notable changes or patterns"
    )


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class PromptSpec:
    name: str
    description: str
    arguments: Tuple[PromptArgument, ...]
    render: Callable[..., str]

    def definition(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [
                {
                    "name": argument.name,
                    "description": argument.description,
                    "required": argument.required,
                }
                for argument in self.arguments
            ],
        }


PROMPT_SPECS: Tuple[PromptSpec, ...] = (
    PromptSpec(
        "analyze_economic_trend",
        "Analyze economic indicators over time for specified countries",
        (
            PromptArgument(
                "indicator",
                'Economic indicator to analyze (e.g., "GDP", "inflation", "unemployment")',
                required=True,
            ),
            PromptArgument(
                "countries",
                'Comma-separated list of country codes (e.g., "USA,GBR,DEU")',
                required=True,
            ),
            PromptArgument("time_period", 'Time period for analysis (e.g., "2020-2023")'),
        ),
        analyze_economic_trend,
    ),
    PromptSpec(
        "compare_countries",
        "Compare data across multiple countries for a specific indicator",
        (
            PromptArgument(
                "indicator",
                'Indicator to compare (e.g., "GDP per capita", "life expectancy")',
                required=True,
            ),
            PromptArgument(
                "countries", "Comma-separated list of countries to compare", required=True
            ),
            PromptArgument("year", "Year for comparison (optional)"),
        ),
        compare_countries,
    ),
    PromptSpec(
        "get_latest_statistics",
        "Get the most recent statistics for a specific topic",
        (
            PromptArgument(
                "topic",
                'Topic to get statistics for (e.g., "unemployment", "inflation", "GDP growth")',
                required=True,
            ),
            PromptArgument(
                "country",
                "Country code (optional, returns data for all countries if not specified)",
            ),
        ),
        get_latest_statistics,
    ),
)


def list_prompts() -> List[Dict[str, object]]:
    return [spec.definition() for spec in PROMPT_SPECS]


def render_prompt(name: str, arguments: Optional[Mapping[str, object]] = None) -> Dict[str, object]:
    """Render prompt ``name`` as an MCP ``prompts/get`` result.

    Raises ``ValueError`` for unknown prompts or missing required arguments.
    """

    spec = next((candidate for candidate in PROMPT_SPECS if candidate.name == name), None)
    if spec is None:
        raise ValueError(f"Unknown prompt: {name}")
    supplied = dict(arguments or {})
    missing = [arg.name for arg in spec.arguments if arg.required and not supplied.get(arg.name)]
    if missing:
        raise ValueError(f"Missing required arguments for prompt {name}: {', '.join(missing)}")
    values = {
        arg.name: str(supplied[arg.name]) if supplied.get(arg.name) is not None else None
        for arg in spec.arguments
    }
    text = spec.render(**values)
    return {
        "description": spec.description,
        "messages": [{"role": "user", "content": {"type": "text", "text": text}}],
    }


__all__ = [
    "PROMPT_SPECS",
    "PromptArgument",
    "PromptSpec",
    "analyze_economic_trend",
    "compare_countries",
    "get_latest_statistics",
    "list_prompts",
    "render_prompt",
]
