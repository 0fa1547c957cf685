"""Summary tables built from the LCIA service response.

The response groups impact flows by category (totals, operational energy,
per year, per life-cycle stage). Each section is flattened into a
``pandas.DataFrame`` whose flow columns carry the impact category and its unit.
"""

import logging
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

FLOW_COLUMNS = [
    "globalWarmingPotential",
    "acidificationPotential",
    "respiratoryEffects",
    "eutrophicationPotential",
    "ozoneDepletionPotential",
    "smogPotential",
    "totalPrimaryEnergy",
    "nonRenewableEnergy",
    "renewableEnergy",
    "fossilFuelEnergy",
]

FLOW_NAMES = {
    "globalWarmingPotential": "Global Warming",
    "acidificationPotential": "Acidification",
    "respiratoryEffects": "Respiratory Effects",
    "eutrophicationPotential": "Eutrophication",
    "ozoneDepletionPotential": "Ozone Depletion",
    "smogPotential": "Smog",
    "totalPrimaryEnergy": "Primary Energy",
    "nonRenewableEnergy": "Non-Renewable Energy",
    "renewableEnergy": "Renewable Energy",
    "fossilFuelEnergy": "Fossil Fuel Energy",
}

FLOW_UNITS = {
    "globalWarmingPotential": "kg CO2 eq",
    "acidificationPotential": "kg SO2 eq",
    "respiratoryEffects": "kg PM2.5 eq",
    "eutrophicationPotential": "kg N eq",
    "ozoneDepletionPotential": "kg CFC-11 eq",
    "smogPotential": "kg O3 eq",
    "totalPrimaryEnergy": "MJ",
    "nonRenewableEnergy": "MJ",
    "renewableEnergy": "MJ",
    "fossilFuelEnergy": "MJ",
}

CATEGORY_NAMES = {
    "buildingComponentFlowsTotal": "Total Building Component Flows",
    "buildingComponentFlowsTotalByYear": "Total Building Component Flows by Year",
    "energyUseFlows": "Operational Energy Flows",
    "energyUseFlowsByYear": "Operational Energy Flows by Year",
    "buildingComponentFlows": "Building Component Flows by Life Cycle Stage",
    "buildingComponentFlowsByYear": "Building Component Flows by Year by Life Cycle Stage",
}

SUBCATEGORY_NAMES = {
    "totalBuildingComponentFlows": "Total Building Component Flows",
    "totalStructureFlows": "Total Structure Flows",
    "exteriorWallsFlows": "Exterior Walls Flows",
    "interiorWallsFlows": "Interior Walls Flows",
    "fenestrationFlows": "Fenestration Flows",
    "roofsatticsFlows": "Roofs and Attics Flows",
    "foundationsFlows": "Foundations Flows",
    "interiorFinishesFlows": "Interior Finishes Flows",
    "columnsAndBeamsFlows": "Columns and Beams Flows",
    "floorsFlows": "Floors Flows",
    "extraMaterialsFlows": "Extra Materials Flows",
    "totalSystemsFlows": "Total Systems Flows",
    "hvacSystemsFlows": "HVAC Systems Flows",
    "lightingSystems": "Lighting Systems Flows",
    "dhwSystemsFlows": "DHW Systems Flows",
    "solarPvSystemsFlows": "Solar PV Systems Flows",
    "solarThermalSystemsFlows": "Solar Thermal Systems Flows",
    "appliancesFlows": "Appliances Flows",
    "totalEnergy": "Total Energy Flows",
    "electricity": "Electricity Flows",
    "naturalGas": "Natural Gas Flows",
    "propane": "Propane Flows",
    "fuelOil": "Fuel Oil Flows",
}

# Life-cycle stages in report order.
LC_STAGES = {
    "A1": "A1",
    "A2": "A2",
    "A3": "A3",
    "A123": "A1-A3",
    "A4": "A4",
    "A5": "A5",
    "B1": "B1",
    "B2": "B2",
    "B3": "B3",
    "B123": "B1-3",
    "B4": "B4",
    "B5": "B5",
    "B6": "B6",
    "B7": "B7",
    "C1": "C1",
    "C2": "C2",
    "C3": "C3",
    "C4": "C4",
    "C1234": "C1-4",
    "D": "D",
}

WHOLE_BUILDING = "Whole Building Total"
NO_WARNINGS = "You have no warnings."

GWP_LABEL = "Global Warming (kg CO2 eq)"
ENERGY_LABEL = "Primary Energy (MJ)"


def flow_header(column: str) -> str:
    """Display header of a flow column, e.g. ``Global Warming (kg CO2 eq)``."""
    return f"{FLOW_NAMES[column]} ({FLOW_UNITS[column]})"


FLOW_HEADERS = [flow_header(c) for c in FLOW_COLUMNS]


@dataclass
class ReportTables:
    """Every table and chart series derived from one LCIA response."""

    totals: pd.DataFrame
    by_year: pd.DataFrame
    sections: Dict[str, pd.DataFrame] = field(default_factory=dict)
    gwp_share: List[Tuple[str, float]] = field(default_factory=list)
    energy_share: List[Tuple[str, float]] = field(default_factory=list)
    yearly: pd.DataFrame = field(default_factory=pd.DataFrame)

    def all_tables(self) -> List[Tuple[str, pd.DataFrame]]:
        """``(title, table)`` pairs in report order."""
        tables = [
            ("Total Flows over the Study Period", self.totals),
            ("Total Flows by Year", self.by_year),
        ]
        tables.extend((CATEGORY_NAMES[name], frame) for name, frame in self.sections.items())
        return tables


def lcia_results(response: Mapping[str, Any]) -> Mapping[str, Any]:
    return response.get("lciaResults") or {}


def warning_rows(response: Mapping[str, Any]) -> pd.DataFrame:
    warnings = lcia_results(response).get("warnings") or []
    rows = [[w.get("system"), w.get("warning")] for w in warnings]
    if not rows:
        rows = [["", NO_WARNINGS]]
    return pd.DataFrame(rows, columns=["System", "Warning"])


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        return None
    return float(value)


def _flow_values(flows: Mapping[str, Any], stage: Optional[str] = None) -> List[Optional[float]]:
    values = []
    for column in FLOW_COLUMNS:
        value = flows.get(column)
        if stage is not None:
            value = value.get(stage) if isinstance(value, Mapping) else None
        number = _number(value)
        if number is None and value is not None:
            logger.debug("Dropping non-numeric %s value %r", column, value)
        values.append(number)
    return values


def _frame(rows: List[List[Any]], keys: List[str]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=keys + FLOW_HEADERS)


def _keep(values: List[Optional[float]]) -> bool:
    return any(v is not None for v in values)


def _component_flows(record: Mapping[str, Any]):
    """Yield ``(subcategory display name, flows)`` for the recognised entries of a record."""
    for name, flows in record.items():
        nice = SUBCATEGORY_NAMES.get(name)
        if nice is None:
            if name != "year":
                logger.debug("Skipping unrecognised subcategory %s", name)
            continue
        if flows is None:
            continue
        yield nice, flows


def totals_table(results: Mapping[str, Any]) -> Tuple[pd.DataFrame, List[Tuple[str, float]], List[Tuple[str, float]]]:
    components = results["buildingComponentFlowsTotal"]["totalBuildingComponentFlows"]
    energy = results["energyUseFlows"]["totalEnergy"]

    component_row = [round(components[c], 10) for c in FLOW_COLUMNS]
    energy_row = [round(energy[c], 10) for c in FLOW_COLUMNS]
    whole_row = [a + b for a, b in zip(component_row, energy_row)]
    frame = _frame(
        [
            [SUBCATEGORY_NAMES["totalBuildingComponentFlows"]] + component_row,
            [SUBCATEGORY_NAMES["totalEnergy"]] + energy_row,
            [WHOLE_BUILDING] + whole_row,
        ],
        ["Category"],
    )
    gwp = [
        (SUBCATEGORY_NAMES["totalBuildingComponentFlows"], components["globalWarmingPotential"]),
        (SUBCATEGORY_NAMES["totalEnergy"], energy["globalWarmingPotential"]),
    ]
    primary = [
        (SUBCATEGORY_NAMES["totalBuildingComponentFlows"], components["totalPrimaryEnergy"]),
        (SUBCATEGORY_NAMES["totalEnergy"], energy["totalPrimaryEnergy"]),
    ]
    return frame, gwp, primary


def by_year_table(results: Mapping[str, Any]) -> Tuple[pd.DataFrame, pd.DataFrame]:
    rows: List[List[Any]] = []
    series: List[Dict[str, Any]] = []
    component_name = SUBCATEGORY_NAMES["totalBuildingComponentFlows"]
    energy_name = SUBCATEGORY_NAMES["totalEnergy"]

    for components, energy in zip(results.get("buildingComponentFlowsTotalByYear") or [],
                                  results.get("energyUseFlowsByYear") or []):
        component_flows = components.get("totalBuildingComponentFlows")
        if component_flows is None:
            continue
        energy_flows = energy.get("totalEnergy") or {}
        year = components.get("year")
        rows.append([component_name, year] + _flow_values(component_flows))
        rows.append([energy_name, year] + _flow_values(energy_flows))
        for name, flows in ((component_name, component_flows), (energy_name, energy_flows)):
            series.append(
                {
                    "Year": year,
                    "Flows": name,
                    GWP_LABEL: flows.get("globalWarmingPotential"),
                    ENERGY_LABEL: flows.get("totalPrimaryEnergy"),
                }
            )
    return _frame(rows, ["Category", "Year"]), pd.DataFrame(series, columns=["Year", "Flows", GWP_LABEL, ENERGY_LABEL])


def category_table(results: Mapping[str, Any], category: str) -> pd.DataFrame:
    """Section A: one row per subcategory."""
    nice = CATEGORY_NAMES[category]
    rows = []
    for sub_name, flows in _component_flows(results.get(category) or {}):
        values = _flow_values(flows)
        if _keep(values):
            rows.append([nice, sub_name] + values)
    return _frame(rows, ["Category", "Subcategory"])


def category_by_year_table(results: Mapping[str, Any], category: str) -> pd.DataFrame:
    """Section B: one row per year and subcategory."""
    nice = CATEGORY_NAMES[category]
    rows = []
    for record in results.get(category) or []:
        year = record.get("year")
        for sub_name, flows in _component_flows(record):
            values = _flow_values(flows)
            if _keep(values):
                rows.append([nice, sub_name, year] + values)
    return _frame(rows, ["Category", "Subcategory", "Year"])


def stage_table(results: Mapping[str, Any], category: str) -> pd.DataFrame:
    """Section C: one row per subcategory and life-cycle stage."""
    nice = CATEGORY_NAMES[category]
    rows = []
    for sub_name, flows in _component_flows(results.get(category) or {}):
        for stage, stage_name in LC_STAGES.items():
            values = _flow_values(flows, stage)
            if _keep(values):
                rows.append([nice, sub_name, stage_name] + values)
    return _frame(rows, ["Category", "Subcategory", "Stage"])


def stage_by_year_table(results: Mapping[str, Any], category: str) -> pd.DataFrame:
    """Section D: one row per year, subcategory and life-cycle stage."""
    nice = CATEGORY_NAMES[category]
    rows = []
    for record in results.get(category) or []:
        year = record.get("year")
        for sub_name, flows in _component_flows(record):
            for stage, stage_name in LC_STAGES.items():
                values = _flow_values(flows, stage)
                if _keep(values):
                    rows.append([nice, sub_name, year, stage_name] + values)
    return _frame(rows, ["Category", "Subcategory", "Year", "Stage"])


def summary_tables(response: Mapping[str, Any]) -> ReportTables:
    results = lcia_results(response)
    totals, gwp, primary = totals_table(results)
    by_year, yearly = by_year_table(results)
    sections = {
        "buildingComponentFlowsTotal": category_table(results, "buildingComponentFlowsTotal"),
        "energyUseFlows": category_table(results, "energyUseFlows"),
        "buildingComponentFlowsTotalByYear": category_by_year_table(results, "buildingComponentFlowsTotalByYear"),
        "energyUseFlowsByYear": category_by_year_table(results, "energyUseFlowsByYear"),
        "buildingComponentFlows": stage_table(results, "buildingComponentFlows"),
        "buildingComponentFlowsByYear": stage_by_year_table(results, "buildingComponentFlowsByYear"),
    }
    logger.info("Built %d report tables", 2 + len(sections))
    return ReportTables(
        totals=totals,
        by_year=by_year,
        sections=sections,
        gwp_share=gwp,
        energy_share=primary,
        yearly=yearly,
    )
