"""Turn an EnergyPlus model and its SQL results into an LCIA request body."""

from birds_nest.extraction.model import BuildingModel
from birds_nest.extraction.payload import build_payload
from birds_nest.extraction.results import SimulationResults

__all__ = ["BuildingModel", "SimulationResults", "build_payload"]
