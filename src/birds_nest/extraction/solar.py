"""Photovoltaic and solar thermal systems."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from birds_nest.extraction.model import GJ_TO_KWH, M2_TO_FT2, M3_TO_GAL, BuildingModel, as_float
from birds_nest.extraction.results import SimulationResults
from birds_nest.models.arguments import MeasureArguments

logger = logging.getLogger(__name__)

PVWATTS_MODULE_EFFICIENCY = {"Standard": 0.15, "Premium": 0.19, "ThinFilm": 0.10}

_INVERTER_EFFICIENCY_FIELDS = {
    "ElectricLoadCenter:Inverter:Simple": "inverter_efficiency",
    "ElectricLoadCenter:Inverter:PVWatts": "inverter_efficiency",
    "ElectricLoadCenter:Inverter:FunctionOfPower": "maximum_efficiency",
    "ElectricLoadCenter:Inverter:LookUpTable": "efficiency_at_100_power_and_nominal_voltage",
}

SYSTEM_TYPES = {
    "Hot Water": "HOT_WATER",
    "Space Heating": "SPACE_HEATING",
    "Hot Water and Space Heating": "HOT_WATER_AND_SPACE_HEATING",
    "Hybrid": "HYBRID_SYSTEM",
}


def _enum(choice: str) -> str:
    return choice.upper().replace(" ", "_")


def _generator_rating(model: BuildingModel, gen_type: str, gen_name: str) -> Optional[Tuple[float, float, float]]:
    """``(rated watts, collector area m2, area-weighted efficiency numerator)`` of one generator."""
    gen = model.object(gen_type, gen_name)
    if gen is None:
        logger.warning("Generator %s (%s) not found", gen_name, gen_type)
        return None

    if gen_type == "Generator:Photovoltaic":
        perf_type = gen.get("photovoltaic_performance_object_type", "")
        perf = model.object(perf_type, gen.get("module_performance_name", "")) or {}
        if perf_type == "PhotovoltaicPerformance:Simple":
            area = model.any_surface_area(gen.get("surface_name", ""))
            if area is None:
                return None
            efficiency = as_float(perf.get("value_for_cell_efficiency_if_fixed"), 0.0)
            return area * efficiency * 1000, area, area * efficiency
        if perf_type == "PhotovoltaicPerformance:Sandia":
            area = as_float(perf.get("active_area"), 0.0)
            power = as_float(perf.get("current_at_maximum_power_point"), 0.0) * as_float(
                perf.get("voltage_at_maximum_power_point"), 0.0
            )
            efficiency = power / (area * 1000) if area else 0.0
            return area * 1000, area, area * efficiency
        if perf_type == "PhotovoltaicPerformance:EquivalentOne-Diode":
            area = as_float(perf.get("active_area"), 0.0)
            insolation = as_float(perf.get("reference_insolation"), 1000.0)
            power = as_float(perf.get("module_current_at_maximum_power"), 0.0) * as_float(
                perf.get("module_voltage_at_maximum_power"), 0.0
            )
            efficiency = power / (area * insolation) if area and insolation else 0.0
            return area * insolation, area, area * efficiency
        logger.warning("Unsupported photovoltaic performance %s for %s", perf_type, gen_name)
        return None

    if gen_type == "Generator:PVWatts":
        area = model.any_surface_area(gen.get("surface_name", ""))
        if area is None:
            return None
        efficiency = PVWATTS_MODULE_EFFICIENCY.get(gen.get("module_type", "Standard"), 0.15)
        return as_float(gen.get("dc_system_capacity"), 0.0), area, area * efficiency

    return None


def inverter_efficiency(model: BuildingModel, name: Optional[str]) -> Optional[float]:
    if not name:
        return None
    found = model.find_object(_INVERTER_EFFICIENCY_FIELDS, name)
    if found is None:
        return None
    type_name, fields = found
    return as_float(fields.get(_INVERTER_EFFICIENCY_FIELDS[type_name]))


def get_photovoltaics(model: BuildingModel, results: SimulationResults, args: MeasureArguments) -> List[Dict[str, Any]]:
    systems: List[Dict[str, Any]] = []
    country = "CHINA" if args.panel_country == "Other" else args.panel_country.upper()

    for dist_name, dist in model.objects("ElectricLoadCenter:Distribution").items():
        gen_list = model.object("ElectricLoadCenter:Generators", dist.get("generator_list_name", ""))
        if gen_list is None:
            continue
        watts = area = numerator = 0.0
        for gen in gen_list.get("generators", []):
            rating = _generator_rating(model, gen.get("generator_object_type", ""), gen.get("generator_name", ""))
            if rating is None:
                continue
            watts += rating[0]
            area += rating[1]
            numerator += rating[2]

        if args.panel_type == "None":
            logger.info("Load center %s has generators but no panel type was chosen", dist_name)
            continue
        systems.append(
            {
                "panelType": args.panel_type,
                "maxPowerOutput": round(watts),
                "collectorArea": round(area, 2),
                "inverterType": args.inverter_type.upper(),
                "inverterEfficiency": inverter_efficiency(model, dist.get("inverter_name")),
                "annualOutput": 0,
                "calculatedEfficiency": round(numerator / area if area > 0 else 0.0, 3),
                "panelSourceCountry": country,
            }
        )

    total_power = sum(s["maxPowerOutput"] for s in systems)
    if systems and total_power:
        produced_kwh = ((results.total_site_energy() or 0.0) - (results.net_site_energy() or 0.0)) * GJ_TO_KWH
        for system in systems:
            system["annualOutput"] = round(produced_kwh * system["maxPowerOutput"] / total_power)
    return systems


def _loop_collectors(model: BuildingModel, components: List[Tuple[str, str]]) -> Tuple[float, float]:
    area = volume = 0.0
    for comp_type, comp_name in components:
        fields = model.object(comp_type, comp_name) or {}
        if comp_type in ("SolarCollector:FlatPlate:Water", "SolarCollector:FlatPlate:PhotovoltaicThermal"):
            area += model.any_surface_area(fields.get("surface_name", "")) or 0.0
        elif comp_type == "SolarCollector:IntegralCollectorStorage":
            perf = model.object(
                "SolarCollectorPerformance:IntegralCollectorStorage",
                fields.get("integral_collector_storage_parameters_name", ""),
            ) or {}
            area += as_float(perf.get("gross_area"), 0.0)
            volume += as_float(perf.get("collector_water_volume"), 0.0)
    return area, volume


def get_solar_thermals(model: BuildingModel, args: MeasureArguments) -> List[Dict[str, Any]]:
    systems: List[Dict[str, Any]] = []
    for loop_name in model.objects("PlantLoop"):
        components = model.plant_loop_components(loop_name)
        area, volume = _loop_collectors(model, components["supply"])
        for comp_type, comp_name in components["demand"]:
            if comp_type == "WaterHeater:Mixed":
                tank = model.object(comp_type, comp_name) or {}
                volume += as_float(tank.get("tank_volume"), 0.0)
        if not (area > 0 and volume > 0):
            continue
        if "None" in (args.solar_thermal_sys_type, args.solar_thermal_collector_type, args.solar_thermal_loop_type):
            logger.info("Plant loop %s has solar collectors but the solar thermal choices are incomplete", loop_name)
            continue
        systems.append(
            {
                "systemType": SYSTEM_TYPES[args.solar_thermal_sys_type],
                "collectorType": _enum(args.solar_thermal_collector_type),
                "collectorLoopType": _enum(args.solar_thermal_loop_type),
                "storageVolume": round(volume * M3_TO_GAL),
                "collectorArea": round(area * M2_TO_FT2, 2),
            }
        )
    return systems
