"""Static catalog of OECD categories and curated SDMX dataflows."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional, Tuple

from .models import CategoryInfo, DataflowSummary, PopularDatasetInfo


@dataclass(frozen=True)
class Category:
    """Topic area used to group dataflows."""

    id: str
    name: str
    description: str
    example_datasets: Tuple[str, ...]

    def as_dict(self) -> CategoryInfo:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "exampleDatasets": list(self.example_datasets),
        }


@dataclass(frozen=True)
class PopularDataset:
    id: str
    name: str
    description: str
    category: str

    def as_dict(self) -> PopularDatasetInfo:
        return asdict(self)  # type: ignore[return-value]


@dataclass(frozen=True)
class KnownDataflow:
    """A dataflow verified against the SDMX data endpoint.

    ``full_id`` uses the ``DSD_ID@DF_ID`` form the data endpoint expects and
    ``agency`` is the owning OECD directorate, e.g. ``OECD.SDD.NAD``.
    """

    id: str
    full_id: str
    agency: str
    version: str
    name: str
    description: str
    category: str

    def summary(self) -> DataflowSummary:
        return {
            "id": self.id,
            "version": self.version,
            "name": self.name,
            "description": self.description,
            "agencyID": self.agency,
        }

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on id, name and description."""

        needle = term.lower()
        return (
            needle in self.id.lower()
            or needle in self.name.lower()
            or needle in self.description.lower()
        )


CATEGORIES: Tuple[Category, ...] = (
    Category(
        "ECO",
        "Economy",
        "GDP, growth, inflation, interest rates, economic forecasts",
        ("QNA", "MEI"),
    ),
    Category(
        "HEA",
        "Health",
        "Healthcare spending, life expectancy, health outcomes",
        ("HEALTH_STAT",),
    ),
    Category(
        "EDU",
        "Education",
        "PISA results, education spending, educational attainment",
        ("EAG_FIN",),
    ),
    Category(
        "ENV",
        "Environment",
        "Climate, emissions, pollution, green growth, biodiversity",
        (
            "DF_LAND_TEMP",
            "DF_HEAT_STRESS",
            "DF_COASTAL_FLOOD",
            "DF_RIVER_FLOOD",
            "DF_DROUGHT",
            "DF_FIRES",
            "DF_PRECIP",
            "DF_CLIM_PROJ",
            "GREEN_GROWTH",
        ),
    ),
    Category(
        "TRD",
        "Trade",
        "International trade, imports, exports, trade agreements",
        ("TIS",),
    ),
    Category(
        "JOB",
        "Employment",
        "Labour market, unemployment, wages, working conditions",
        ("AVD_DUR",),
    ),
    Category(
        "NRG",
        "Energy",
        "Energy production, consumption, renewables, energy prices",
        ("IEA_ENERGY", "IEA_REN", "IEA_PRICES"),
    ),
    Category(
        "AGR",
        "Agriculture and Fisheries",
        "Agricultural production, food security, fisheries",
        ("FISH_AQUA", "FISH_FLEET", "PSE"),
    ),
    Category(
        "GOV",
        "Government",
        "Public sector, governance, trust in government, e-government",
        ("GOV_2023", "SNA_TABLE11", "GGDP"),
    ),
    Category(
        "SOC",
        "Social Protection and Well-being",
        "Social spending, inequality, quality of life",
        ("SOCX_AGG", "IDD", "BLI"),
    ),
    Category(
        "DEV",
        "Development",
        "Development aid, ODA, international cooperation",
        ("TABLE1", "TABLE2A", "CRS"),
    ),
    Category(
        "STI",
        "Innovation and Technology",
        "R&D spending, patents, digital economy, artificial intelligence",
        ("MSTI_PUB", "PATS_IPC", "ICT_ACCESS"),
    ),
    Category(
        "TAX",
        "Taxation",
        "Tax revenues, tax rates, tax policy",
        ("REV", "CTS_CIT", "CTS_PIT"),
    ),
    Category(
        "FIN",
        "Finance",
        "Financial markets, banking, insurance, pensions",
        ("FDI",),
    ),
    Category(
        "TRA",
        "Transport",
        "Infrastructure, mobility, freight, passenger transport",
        ("ITF_GOODS", "ITF_PASSENGER", "ITF_INV"),
    ),
    Category(
        "IND",
        "Industry and Services",
        "Industrial production, services sector, productivity",
        ("PDB_LV", "SNA_TABLE6A", "STAN08BIS"),
    ),
    Category(
        "REG",
        "Regional Statistics",
        "Sub-national data, cities, regions, territorial indicators",
        ("REGION_DEMOGR", "REGION_ECONOM", "REGION_INNOV"),
    ),
)

CATEGORY_CODES: Tuple[str, ...] = tuple(category.id for category in CATEGORIES)

POPULAR_DATASETS: Tuple[PopularDataset, ...] = (
    PopularDataset(
        "QNA",
        "Quarterly National Accounts",
        "✅ AVAILABLE - GDP and main aggregates, quarterly frequency",
        "ECO",
    ),
    PopularDataset(
        "MEI",
        "Main Economic Indicators",
        "✅ AVAILABLE - Composite Leading Indicators (CLI), monthly frequency",
        "ECO",
    ),
    PopularDataset(
        "HEALTH_STAT",
        "Health Statistics",
        "✅ AVAILABLE - Perceived health status by age and gender",
        "HEA",
    ),
    PopularDataset(
        "EO",
        "Economic Outlook",
        "⏳ NOT YET IMPLEMENTED - Economic projections and forecasts",
        "ECO",
    ),
    PopularDataset(
        "PISA",
        "PISA Results",
        "❌ NOT AVAILABLE via SDMX - Available as downloadable files only from OECD website",
        "EDU",
    ),
    PopularDataset(
        "AVD_DUR",
        "Unemployment by Duration",
        "✅ AVAILABLE - Average duration of unemployment in months",
        "JOB",
    ),
    PopularDataset(
        "EAG_FIN",
        "Education Finance",
        "✅ AVAILABLE - Education spending per student by education level",
        "EDU",
    ),
    PopularDataset(
        "TIS",
        "Trade in Services",
        "✅ AVAILABLE - International trade in services by country",
        "TRD",
    ),
    PopularDataset(
        "GREEN_GROWTH",
        "Green Growth Indicators",
        "✅ AVAILABLE - Environmental and economic indicators for green growth monitoring",
        "ENV",
    ),
    PopularDataset(
        "FDI",
        "Foreign Direct Investment",
        "✅ AVAILABLE - FDI flows and stocks by country and industry",
        "FIN",
    ),
    PopularDataset(
        "REV",
        "Revenue Statistics",
        "⏳ NOT YET IMPLEMENTED - Tax revenues by type and government level",
        "TAX",
    ),
)

_CLIMATE_AGENCY = "OECD.CFE.EDS"

KNOWN_DATAFLOWS: Tuple[KnownDataflow, ...] = (
    KnownDataflow(
        id="QNA",
        full_id="DSD_NAMAIN1@DF_QNA",
        agency="OECD.SDD.NAD",
        version="1.0",
        name="Quarterly National Accounts",
        description=(
            "GDP and main aggregates - quarterly frequency. Includes GDP, consumption, "
            "investment, government spending by country and quarter."
        ),
        category="ECO",
    ),
    KnownDataflow(
        id="MEI",
        full_id="DSD_STES@DF_CLI",
        agency="OECD.SDD.STES",
        version="1.0",
        name="Main Economic Indicators - Composite Leading Indicators",
        description=(
            "Composite Leading Indicators (CLI) designed to provide early signals of "
            "turning points in business cycles. Monthly frequency."
        ),
        category="ECO",
    ),
    KnownDataflow(
        id="HEALTH_STAT",
        full_id="DSD_HEALTH_STAT@DF_PHS",
        agency="OECD.ELS.HD",
        version="1.0",
        name="Health Statistics - Perceived Health Status",
        description=(
            "Percentage of population aged 15+ reporting good/very good health status, "
            "by age and gender."
        ),
        category="HEA",
    ),
    KnownDataflow(
        id="DF_LAND_TEMP",
        full_id="DSD_FUA_CLIM@DF_LAND_TEMP",
        agency=_CLIMATE_AGENCY,
        version="1.2",
        name="Land surface temperature - Cities and FUAs",
        description="Land surface temperature indicators in functional urban areas and cities",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_CLIM_PROJ",
        full_id="DSD_FUA_CLIM@DF_CLIM_PROJ",
        agency=_CLIMATE_AGENCY,
        version="1.4",
        name="Climate projections by scenario, 2030–2060 – Cities and FUAs",
        description="Climate projections for cities based on different scenarios (SSP)",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_COASTAL_FLOOD",
        full_id="DSD_FUA_CLIM@DF_COASTAL_FLOOD",
        agency=_CLIMATE_AGENCY,
        version="1.1",
        name="Coastal flooding - Cities and FUAs",
        description="Population and built-up exposure to coastal floods",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_DROUGHT",
        full_id="DSD_FUA_CLIM@DF_DROUGHT",
        agency=_CLIMATE_AGENCY,
        version="1.2",
        name="Drought - Cities and FUAs",
        description="Soil moisture anomaly estimates in functional urban areas",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_FIRES",
        full_id="DSD_FUA_CLIM@DF_FIRES",
        agency=_CLIMATE_AGENCY,
        version="1.1",
        name="Wildfires - Cities and FUAs",
        description="Population and land exposure to wildfires",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_HEAT_STRESS",
        full_id="DSD_FUA_CLIM@DF_HEAT_STRESS",
        agency=_CLIMATE_AGENCY,
        version="1.1",
        name="Heat stress - Cities and FUAs",
        description="Population exposure to heat stress (UTCI index)",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_PRECIP",
        full_id="DSD_FUA_CLIM@DF_PRECIP",
        agency=_CLIMATE_AGENCY,
        version="1.1",
        name="Precipitation - FUAs",
        description="Total precipitation and extreme precipitation days",
        category="ENV",
    ),
    KnownDataflow(
        id="DF_RIVER_FLOOD",
        full_id="DSD_FUA_CLIM@DF_RIVER_FLOOD",
        agency=_CLIMATE_AGENCY,
        version="1.1",
        name="River flooding - Cities and FUAs",
        description="Population and built-up exposure to river floods",
        category="ENV",
    ),
)

_DATAFLOWS_BY_ID: Dict[str, KnownDataflow] = {df.id: df for df in KNOWN_DATAFLOWS}
_CATEGORIES_BY_ID: Dict[str, Category] = {cat.id: cat for cat in CATEGORIES}


def get_dataflow(dataflow_id: str) -> Optional[KnownDataflow]:
    return _DATAFLOWS_BY_ID.get(dataflow_id)


def get_category(category_id: str) -> Optional[Category]:
    return _CATEGORIES_BY_ID.get(category_id)


def search_known_dataflows(term: str) -> Tuple[KnownDataflow, ...]:
    return tuple(df for df in KNOWN_DATAFLOWS if df.matches(term))


__all__ = [
    "CATEGORIES",
    "CATEGORY_CODES",
    "Category",
    "KNOWN_DATAFLOWS",
    "KnownDataflow",
    "POPULAR_DATASETS",
    "PopularDataset",
    "get_category",
    "get_dataflow",
    "search_known_dataflows",
]
