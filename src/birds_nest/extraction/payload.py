"""Assemble the LCIA request body from a building model and its simulation results."""

import logging
from typing import Any, Dict

from birds_nest.extraction.appliances import get_appliances
from birds_nest.extraction.energy_use import get_annual_energy_use, get_annual_water_use
from birds_nest.extraction.envelope import (
    get_attics_and_roofs,
    get_foundation_walls,
    get_foundations,
    get_frame_floors,
    get_walls,
)
from birds_nest.extraction.hvac import (
    get_hot_water_distributions,
    get_hvac_distributions,
    get_hvac_heat_cool,
    get_mechanical_ventilations,
    get_moisture_controls,
    get_water_heaters,
)
from birds_nest.extraction.infiltration import get_air_infiltration
from birds_nest.extraction.lighting import get_lighting
from birds_nest.extraction.model import BuildingModel
from birds_nest.extraction.results import SimulationResults
from birds_nest.extraction.solar import get_photovoltaics, get_solar_thermals
from birds_nest.extraction.summary import get_summary_characteristics
from birds_nest.models.arguments import MeasureArguments
from birds_nest.scripts.serializer import to_jsonable

logger = logging.getLogger(__name__)


def build_payload(model: BuildingModel, results: SimulationResults, arguments: MeasureArguments) -> Dict[str, Any]:
    """
    Build the JSON body sent to the LCIA service.

    Keys are emitted in the order the service documents them. Every
    section is computed even when empty so the request shape never varies.
    """
    summary = get_summary_characteristics(model, arguments)
    stories = summary["numberOfStoriesAboveGrade"]
    floor_area = summary["conditionedFloorArea"]
    logger.info("Building payload: %d stories, %s ft2 conditioned", stories, floor_area)

    payload = {
        "summaryCharacteristics": summary,
        "airInfiltration": get_air_infiltration(model),
        "lighting": get_lighting(model, arguments),
        "photovoltaics": get_photovoltaics(model, results, arguments),
        "solarThermals": get_solar_thermals(model, arguments),
        "hvacHeatCools": get_hvac_heat_cool(model, results, arguments),
        "hvacDistributions": get_hvac_distributions(model, arguments, stories, floor_area),
        "mechanicalVentilations": get_mechanical_ventilations(model),
        "moistureControls": get_moisture_controls(model),
        "waterHeatingSystems": get_water_heaters(model, results),
        "hotWaterDistributions": get_hot_water_distributions(floor_area, arguments.num_bathrooms),
        "appliances": get_appliances(arguments),
        "annualEnergyUses": get_annual_energy_use(results, arguments),
        "annualWaterUses": get_annual_water_use(results),
        "userAssumptions": {"electricityFuelMixProjection": arguments.oper_energy_lcia},
        "walls": get_walls(model, results, arguments),
        "atticAndRoofs": get_attics_and_roofs(model, results, arguments),
        "foundations": get_foundations(model, arguments),
        "foundationWalls": get_foundation_walls(model, results, arguments),
        "frameFloors": get_frame_floors(model),
    }
    return to_jsonable(payload)
