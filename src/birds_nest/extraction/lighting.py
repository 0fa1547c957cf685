"""Installed lighting power and the user's lamp-type split."""

import logging
from typing import Any, Dict

from birds_nest.extraction.model import BuildingModel, Zone, as_float, first_of
from birds_nest.models.arguments import MeasureArguments

logger = logging.getLogger(__name__)

_ZONE_FIELDS = ("zone_or_zonelist_or_space_or_spacelist_name", "zone_or_zonelist_name", "zone_or_space_name", "zone_name")


def zone_occupants(model: BuildingModel, zone: Zone) -> float:
    people = 0.0
    for fields in model.objects("People").values():
        if zone.name.lower() not in (z.lower() for z in model.expand_zone_list(first_of(fields, *_ZONE_FIELDS))):
            continue
        method = fields.get("number_of_people_calculation_method", "People")
        if method == "People":
            people += as_float(fields.get("number_of_people"), 0.0)
        elif method == "People/Area":
            density = as_float(first_of(fields, "people_per_floor_area", "people_per_zone_floor_area"), 0.0)
            people += density * zone.floor_area
        elif method == "Area/Person":
            per_person = as_float(first_of(fields, "floor_area_per_person", "zone_floor_area_per_person"), 0.0)
            if per_person:
                people += zone.floor_area / per_person
    return people


def _lights_watts(model: BuildingModel, name: str, fields: Dict[str, Any], zone: Zone) -> float:
    method = fields.get("design_level_calculation_method", "LightingLevel")
    if method == "LightingLevel":
        return as_float(fields.get("lighting_level"), 0.0)
    if method == "Watts/Area":
        density = as_float(first_of(fields, "watts_per_floor_area", "watts_per_zone_floor_area"), 0.0)
        return density * zone.floor_area
    if method == "Watts/Person":
        return as_float(fields.get("watts_per_person"), 0.0) * zone_occupants(model, zone)
    logger.warning("Lights %s use an unsupported design level method %s", name, method)
    return 0.0


def total_lighting_watts(model: BuildingModel) -> float:
    total = 0.0
    for name, fields in model.objects("Lights").items():
        for zone_name in model.expand_zone_list(first_of(fields, *_ZONE_FIELDS)):
            zone = model.zone(zone_name)
            if zone is None:
                logger.warning("Lights %s reference unknown zone %s", name, zone_name)
                continue
            total += _lights_watts(model, name, fields, zone) * zone.multiplier
    return total


def get_lighting(model: BuildingModel, args: MeasureArguments) -> Dict[str, Any]:
    return {
        "lightingGroups": [],
        "lightingFractions": {
            "fracIncandescent": args.pct_inc_lts / 100,
            "fracMetalHalide": args.pct_mh_lts / 100,
            "fracCflLf": args.pcf_cfl_lf_lts / 100,
            "fracLed": args.pct_led_lts / 100,
        },
        "totalWattage": round(total_lighting_watts(model), 1),
        "ceilingFans": [{"thirdPartyCertification": "NULL"}],
    }
