"""Annual energy and water use taken from the simulation results."""

import logging
from typing import Any, Dict, List

from birds_nest.extraction.model import GJ_TO_KWH, M3_TO_GAL
from birds_nest.extraction.results import SimulationResults
from birds_nest.models.arguments import MeasureArguments

logger = logging.getLogger(__name__)


def other_fuel_type(pri_hvac: str) -> str:
    """Fuel of the heating system named by the last part of the HVAC choice."""
    parts = pri_hvac.split("_")
    fuel = parts[3] if len(parts) > 3 else ""
    if fuel == "Oil":
        return "FUEL_OIL"
    if fuel == "Propane":
        return "PROPANE"
    return "NULL"


def get_annual_energy_use(results: SimulationResults, args: MeasureArguments) -> List[Dict[str, Any]]:
    totals = results.end_use_totals()
    uses = [
        {
            "fuelType": "ELECTRICITY",
            "consumption": round(totals.electricity_gj * GJ_TO_KWH),
            "unitOfMeasure": "KWH",
        },
        {
            "fuelType": "NATURAL_GAS",
            "consumption": round(totals.natural_gas_gj, 6),
            "unitOfMeasure": "GJ",
        },
    ]
    if totals.other_fuel_gj > 0:
        uses.append(
            {
                "fuelType": other_fuel_type(args.pri_hvac),
                "consumption": totals.other_fuel_gj,
                "unitOfMeasure": "GJ",
            }
        )
    return uses


def get_annual_water_use(results: SimulationResults) -> List[Dict[str, Any]]:
    water = results.end_use_totals().water_m3
    return [
        {
            "waterType": "INDOOR_AND_OUTDOOR_WATER",
            "consumption": round(water * M3_TO_GAL),
            "unitOfMeasure": "GAL",
        }
    ]
