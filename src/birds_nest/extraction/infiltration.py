"""Air leakage at 50 Pa from the model's infiltration objects."""

import logging
from typing import Any, Dict

from birds_nest.extraction.model import BuildingModel, Zone, as_float, first_of

logger = logging.getLogger(__name__)

TERRAIN_FACTOR = 0.22
WIND_SPEED = 4.47  # m/s
AIR_DENSITY = 1.18  # kg/m3
PRESSURE_COEFFICIENT = 0.1617
FLOW_EXPONENT = 0.65
TEST_PRESSURE = 50.0  # Pa
# m3/s at 50 Pa per cm2 of effective leakage area
ELA_TO_FLOW50 = 0.001316735

_ZONE_FIELDS = ("zone_or_zonelist_or_space_or_spacelist_name", "zone_or_zonelist_name", "zone_or_space_name", "zone_name")


def adjust_to_50_pa(flow_m3_s: float) -> float:
    typical_pressure = 0.5 * PRESSURE_COEFFICIENT * AIR_DENSITY * WIND_SPEED ** 2
    return flow_m3_s / (typical_pressure / TEST_PRESSURE) ** FLOW_EXPONENT / (1.0 + TERRAIN_FACTOR)


def leakiness(ach50: float) -> str:
    if ach50 > 10.0:
        return "VERY_LEAKY"
    if ach50 > 7.0:
        return "LEAKY"
    if ach50 > 3.0:
        return "AVERAGE"
    if ach50 > 1.0:
        return "TIGHT"
    return "VERY_TIGHT"


def _design_flow(fields: Dict[str, Any], zone: Zone) -> float:
    method = fields.get("design_flow_rate_calculation_method", "Flow/Zone")
    if method == "Flow/Zone":
        return as_float(fields.get("design_flow_rate"), 0.0)
    if method == "Flow/Area":
        rate = as_float(first_of(fields, "flow_rate_per_floor_area", "flow_per_zone_floor_area"), 0.0)
        return rate * zone.floor_area
    if method == "Flow/ExteriorArea":
        rate = as_float(first_of(fields, "flow_rate_per_exterior_surface_area", "flow_per_exterior_surface_area"), 0.0)
        exterior = sum(s.gross_area for s in zone.surfaces if s.is_exterior)
        return rate * exterior
    if method == "Flow/ExteriorWallArea":
        rate = as_float(first_of(fields, "flow_rate_per_exterior_surface_area", "flow_per_exterior_surface_area"), 0.0)
        return rate * zone.exterior_wall_area
    if method == "AirChanges/Hour":
        return as_float(fields.get("air_changes_per_hour"), 0.0) * zone.volume / 3600.0
    logger.warning("Unsupported infiltration method %s; flow ignored", method)
    return 0.0


def get_air_infiltration(model: BuildingModel) -> Dict[str, Any]:
    total_volume = sum(z.volume * z.multiplier for z in model.zones.values())

    design_flow = 0.0
    for name, fields in model.objects("ZoneInfiltration:DesignFlowRate").items():
        for zone_name in model.expand_zone_list(first_of(fields, *_ZONE_FIELDS)):
            zone = model.zone(zone_name)
            if zone is None:
                logger.warning("Infiltration %s references unknown zone %s", name, zone_name)
                continue
            design_flow += _design_flow(fields, zone) * zone.multiplier

    ela_cm2 = 0.0
    for fields in model.objects("ZoneInfiltration:EffectiveLeakageArea").values():
        ela_cm2 += as_float(fields.get("effective_air_leakage_area"), 0.0)

    if design_flow:
        flow50 = adjust_to_50_pa(design_flow)
    else:
        flow50 = ela_cm2 * ELA_TO_FLOW50

    ach50 = flow50 / total_volume * 3600 if total_volume else 0.0
    logger.debug("Infiltration: %.4f m3/s at 50 Pa over %.1f m3 (ACH50 %.3f)", flow50, total_volume, ach50)

    return {
        "componentsAirSealed": [{}],
        "airLeakageUnit": "ACH",
        "fanPressure": 50,
        "airLeakageValue": round(ach50, 3),
        "leakinessDescription": leakiness(ach50),
        "effectiveLeakageArea": round(ela_cm2, 2),
    }
