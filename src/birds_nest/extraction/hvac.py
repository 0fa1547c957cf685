"""HVAC and domestic hot water systems.

Heating and cooling equipment is read from the air loops and zone equipment
of the model and cross-checked against the primary HVAC type the user picked.
Distribution ducts, ventilation, dehumidifiers, water heaters and hot water
piping follow the reference rules of the LCIA service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from birds_nest.extraction.model import M3_TO_GAL, M_TO_FT, BuildingModel, as_float, first_of
from birds_nest.extraction.results import SimulationResults
from birds_nest.models.arguments import MeasureArguments

logger = logging.getLogger(__name__)

FUEL_TYPES = {
    "Electricity": "ELECTRICITY",
    "Electric": "ELECTRICITY",
    "NaturalGas": "NATURAL_GAS",
    "Gas": "NATURAL_GAS",
    "Propane": "PROPANE",
    "FuelOilNo1": "FUEL_OIL",
    "FuelOilNo2": "FUEL_OIL",
    "Oil": "FUEL_OIL",
}

_UNITARY_TYPES = (
    "AirLoopHVAC:UnitaryHeatPump:AirToAir",
    "AirLoopHVAC:UnitaryHeatPump:AirToAir:MultiSpeed",
    "AirLoopHVAC:UnitaryHeatPump:WaterToAir",
    "AirLoopHVAC:UnitarySystem",
    "AirLoopHVAC:UnitaryHeatCool",
    "AirLoopHVAC:Unitary:Furnace:HeatCool",
    "AirLoopHVAC:Unitary:Furnace:HeatOnly",
    "AirLoopHVAC:UnitaryHeatOnly",
)

_HEAT_PUMP_TYPES = {
    "Std": "AIR_TO_AIR_STD",
    "SDHV": "AIR_TO_AIR_SDHV",
    "MiniSplitDucted": "MINI_SPLIT_DUCTED",
    "MiniSplitNonDucted": "MINI_SPLIT_NONDUCTED",
}
_GEOTHERMAL_LOOPS = {"Horizontal": "HORIZONTAL", "Vertical": "VERTICAL", "Slinky": "SLINKY"}

HOT_WATER_PIPE_R = 2.0
HOT_WATER_FRACTION_INSULATED = 0.5
INSTANTANEOUS_MAX_GAL = 10


@dataclass(frozen=True)
class UserHvac:
    """Equipment enums implied by the ``pri_hvac`` choice."""

    heat_pump_type: str = "NULL_HPT"
    heat_pump_fuel: str = "NULL_HPF"
    geothermal_loop_type: str = "NULL_GLT"
    backup_type: str = "NULL_BT"
    backup_fuel: str = "NULL"
    cooling_type: str = "NULL_CST"
    cooling_fuel: str = "NULL"
    heating_type: str = "NULL_HST"
    heating_fuel: str = "NULL"


def parse_primary_hvac(pri_hvac: str) -> UserHvac:
    parts = pri_hvac.split("_")
    parts += [""] * (4 - len(parts))
    _, system, subtype, detail = parts[:4]

    values: Dict[str, str] = {}
    if system == "HeatPump" and subtype == "AirtoAir" and detail in _HEAT_PUMP_TYPES:
        values.update(heat_pump_type=_HEAT_PUMP_TYPES[detail], heat_pump_fuel="ELECTRICITY_HPF",
                      backup_type="INTEGRATED", backup_fuel="ELECTRICITY")
    elif system == "HeatPump" and subtype == "Geothermal" and detail in _GEOTHERMAL_LOOPS:
        values.update(heat_pump_type="WATER_TO_AIR", heat_pump_fuel="ELECTRICITY_HPF",
                      geothermal_loop_type=_GEOTHERMAL_LOOPS[detail],
                      backup_type="INTEGRATED", backup_fuel="ELECTRICITY")

    if system == "CentralAC":
        values.update(cooling_type="CENTRAL_AIR_CONDITIONING", cooling_fuel="ELECTRICITY")
    elif system == "RoomAC":
        values.update(cooling_type="ROOM_AIR_CONDITIONER", cooling_fuel="ELECTRICITY")

    if subtype in ("Furnace", "Boiler"):
        values.update(heating_type=subtype.upper(), heating_fuel=FUEL_TYPES.get(detail, "NULL"))
    elif subtype == "Baseboard":
        values.update(heating_type="ELECTRIC_BASEBOARD", heating_fuel="ELECTRICITY")
    return UserHvac(**values)


@dataclass(frozen=True)
class CoilInfo:
    kind: str
    capacity: Optional[float] = None
    efficiency: Optional[float] = None
    efficiency_unit: Optional[str] = None
    fuel: Optional[str] = None


class _EquipmentReader:
    """Reads coil and plant equipment ratings, falling back to sizing results."""

    def __init__(self, model: BuildingModel, results: SimulationResults) -> None:
        self.model = model
        self.results = results

    def capacity(self, name: str, fields: Dict[str, Any], *field_names: str, sizing: str = "capacity") -> Optional[float]:
        value = as_float(first_of(fields, *field_names))
        if value is None:
            value = self.results.component_size(name, sizing)
        return round(value) if value is not None else None

    def plant_loop_of(self, component_name: str) -> Optional[str]:
        lowered = component_name.lower()
        for loop_name in self.model.objects("PlantLoop"):
            demand = self.model.plant_loop_components(loop_name)["demand"]
            if any(name.lower() == lowered for _, name in demand):
                return loop_name
        return None

    def boiler(self, loop_name: Optional[str]) -> Optional[CoilInfo]:
        if not loop_name:
            return None
        for comp_type, comp_name in self.model.plant_loop_components(loop_name)["supply"]:
            if comp_type != "Boiler:HotWater":
                continue
            fields = self.model.object(comp_type, comp_name) or {}
            return CoilInfo(
                kind="Water",
                capacity=self.capacity(comp_name, fields, "nominal_capacity"),
                efficiency=as_float(fields.get("nominal_thermal_efficiency")),
                efficiency_unit="PERCENT",
                fuel=FUEL_TYPES.get(fields.get("fuel_type", ""), "NULL"),
            )
        return None

    def geothermal_length(self, loop_name: Optional[str]) -> Optional[float]:
        if not loop_name:
            return None
        for comp_type, comp_name in self.model.plant_loop_components(loop_name)["supply"]:
            fields = self.model.object(comp_type, comp_name) or {}
            if comp_type == "GroundHeatExchanger:HorizontalTrench":
                return as_float(fields.get("trench_length_in_pipe_axial_direction"), 0.0) * as_float(
                    fields.get("number_of_trenches"), 1.0
                )
            if comp_type == "GroundHeatExchanger:System":
                array = self.model.object("GroundHeatExchanger:Vertical:Array", fields.get("ghe_vertical_array_object_name", ""))
                if array is not None:
                    count = as_float(array.get("number_of_boreholes_in_x_direction"), 1.0) * as_float(
                        array.get("number_of_boreholes_in_y_direction"), 1.0
                    )
                    return count * as_float(array.get("borehole_length"), 0.0)
        return None

    def cooling_coil(self, coil_type: str, name: str) -> Optional[CoilInfo]:
        fields = self.model.object(coil_type, name)
        if fields is None:
            return None
        if coil_type == "CoilSystem:Cooling:DX":
            return self.cooling_coil(fields.get("cooling_coil_object_type", ""), fields.get("cooling_coil_name", ""))
        if coil_type == "CoilSystem:Cooling:DX:HeatExchangerAssisted":
            return self.cooling_coil(fields.get("cooling_coil_object_type", ""), fields.get("cooling_coil_name", ""))
        if coil_type == "Coil:Cooling:DX:SingleSpeed":
            return CoilInfo("DX", self.capacity(name, fields, "gross_rated_total_cooling_capacity"),
                            as_float(fields.get("gross_rated_cooling_cop")), "COP", "ELECTRICITY")
        if coil_type == "Coil:Cooling:DX:TwoSpeed":
            return CoilInfo("DX", self.capacity(name, fields, "high_speed_gross_rated_total_cooling_capacity"),
                            as_float(fields.get("high_speed_gross_rated_cooling_cop")), "COP", "ELECTRICITY")
        if coil_type.startswith("Coil:Cooling:DX"):
            return CoilInfo("DX", self.capacity(name, fields, "gross_rated_total_cooling_capacity"), 0, "NULL", "ELECTRICITY")
        if coil_type.startswith("Coil:Cooling:WaterToAirHeatPump"):
            return CoilInfo("WaterToAir", self.capacity(name, fields, "gross_rated_total_cooling_capacity", "rated_total_cooling_capacity"),
                            as_float(first_of(fields, "gross_rated_cooling_cop", "rated_cooling_coefficient_of_performance")),
                            "COP", "ELECTRICITY")
        if coil_type.startswith("Coil:Cooling:Water"):
            return CoilInfo("Water", self.results.component_size(name, "capacity"), None, "COP", "ELECTRICITY")
        logger.warning("Cooling coil %s of type %s is not recognised", name, coil_type)
        return None

    def heating_coil(self, coil_type: str, name: str) -> Optional[CoilInfo]:
        fields = self.model.object(coil_type, name)
        if fields is None:
            return None
        if coil_type == "Coil:Heating:DX:SingleSpeed":
            return CoilInfo("DX", self.capacity(name, fields, "gross_rated_heating_capacity"),
                            as_float(fields.get("gross_rated_heating_cop")), "COP", "ELECTRICITY")
        if coil_type.startswith("Coil:Heating:DX"):
            return CoilInfo("DX", self.capacity(name, fields, "gross_rated_heating_capacity"), 0, "NULL", "ELECTRICITY")
        if coil_type in ("Coil:Heating:Fuel", "Coil:Heating:Gas"):
            fuel = FUEL_TYPES.get(fields.get("fuel_type", "NaturalGas"), "NULL")
            return CoilInfo("Furnace", self.capacity(name, fields, "nominal_capacity"),
                            as_float(first_of(fields, "burner_efficiency", "gas_burner_efficiency")), "PERCENT", fuel)
        if coil_type == "Coil:Heating:Electric":
            return CoilInfo("Furnace", self.capacity(name, fields, "nominal_capacity"),
                            as_float(fields.get("efficiency")), "PERCENT", "ELECTRICITY")
        if coil_type == "Coil:Heating:Water":
            loop = self.plant_loop_of(name)
            boiler = self.boiler(loop)
            if boiler is not None:
                return boiler
            return CoilInfo("Water", self.capacity(name, fields, "rated_capacity"), None, "COP", "ELECTRICITY")
        if coil_type.startswith("Coil:Heating:WaterToAirHeatPump"):
            return CoilInfo("WaterToAir", self.capacity(name, fields, "gross_rated_heating_capacity", "rated_heating_capacity"),
                            as_float(first_of(fields, "gross_rated_heating_cop", "rated_heating_coefficient_of_performance")),
                            "COP", "ELECTRICITY")
        logger.warning("Heating coil %s of type %s is not recognised", name, coil_type)
        return None


@dataclass
class _LoopCoils:
    cooling: Optional[CoilInfo] = None
    heating: Optional[CoilInfo] = None
    backup: Optional[CoilInfo] = None
    water_coil: Optional[str] = None


def _air_loop_coils(reader: _EquipmentReader, loop_name: str) -> _LoopCoils:
    coils = _LoopCoils()
    heating: List[CoilInfo] = []
    for comp_type, comp_name in reader.model.air_loop_components(loop_name):
        if comp_type in _UNITARY_TYPES:
            fields = reader.model.object(comp_type, comp_name) or {}
            if fields.get("cooling_coil_name"):
                coils.cooling = reader.cooling_coil(fields.get("cooling_coil_object_type", ""), fields["cooling_coil_name"])
            if fields.get("heating_coil_name"):
                coils.heating = reader.heating_coil(fields.get("heating_coil_object_type", ""), fields["heating_coil_name"])
                if fields.get("heating_coil_object_type", "").startswith(("Coil:Heating:Water", "Coil:Heating:WaterToAir")):
                    coils.water_coil = fields["heating_coil_name"]
            if fields.get("supplemental_heating_coil_name"):
                coils.backup = reader.heating_coil(
                    fields.get("supplemental_heating_coil_object_type", ""), fields["supplemental_heating_coil_name"]
                )
            return coils
        if comp_type.startswith(("Coil:Cooling", "CoilSystem:Cooling")):
            coils.cooling = reader.cooling_coil(comp_type, comp_name)
        elif comp_type.startswith("Coil:Heating"):
            info = reader.heating_coil(comp_type, comp_name)
            if info is not None:
                heating.append(info)
                if comp_type.startswith("Coil:Heating:Water"):
                    coils.water_coil = comp_name

    if len(heating) == 1:
        coils.heating = heating[0]
    elif len(heating) > 1:
        # the DX or hydronic coil is primary, the other one is backup
        ranked = sorted(heating, key=_primary_rank)
        coils.heating, coils.backup = ranked[0], ranked[1]
    return coils


def _primary_rank(coil: CoilInfo) -> Tuple[int, float]:
    order = {"DX": 0, "WaterToAir": 0, "Water": 1}
    rank = order.get(coil.kind, 3 if coil.fuel != "NATURAL_GAS" else 2)
    return rank, -(coil.capacity or 0)


def _efficiency(coil: Optional[CoilInfo], unit: Optional[str] = None) -> Dict[str, Any]:
    if coil is None:
        return {"value": None, "unit": unit}
    return {"value": coil.efficiency, "unit": unit or coil.efficiency_unit}


def _heat_pump(kind: str, coils: _LoopCoils, loop_type: str, loop_length: Optional[float], backup_fuel: str) -> Dict[str, Any]:
    return {
        "heatPumpType": kind,
        "heatPumpFuel": "ELECTRICITY_HPF",
        "heatingCapacity": coils.heating.capacity if coils.heating else None,
        "coolingCapacity": coils.cooling.capacity if coils.cooling else None,
        "annualCoolingEfficiency": _efficiency(coils.cooling),
        "annualHeatingEfficiency": _efficiency(coils.heating),
        "geothermalLoopType": loop_type,
        "geothermalLoopLength": loop_length,
        "backupType": "INTEGRATED" if coils.backup is not None or kind == "WATER_TO_AIR" else "NULL_BT",
        "backUpSystemFuel": backup_fuel,
        "backUpAfue": coils.backup.efficiency if coils.backup else None,
        "backUpHeatingCapacity": coils.backup.capacity if coils.backup else None,
    }


def _cooling_system(kind: str, coil: CoilInfo) -> Dict[str, Any]:
    return {
        "coolingSystemType": kind,
        "coolingSystemFuel": "ELECTRICITY",
        "coolingCapacity": coil.capacity,
        "annualCoolingEfficiency": _efficiency(coil),
    }


def _heating_system(kind: str, fuel: str, capacity: Optional[float], efficiency: Optional[float]) -> Dict[str, Any]:
    return {
        "heatingSystemType": kind,
        "heatingSystemFuel": fuel,
        "heatingCapacity": capacity,
        "annualHeatingEfficiency": {"value": efficiency, "unit": "PERCENT"},
    }


def _warn_mismatch(loop_name: str, label: str, user_value: str, model_value: str) -> None:
    if user_value != model_value:
        logger.warning(
            "User %s does not match model for %s. User: %s, Model: %s", label, loop_name, user_value, model_value
        )


def _classify_loop(
    loop_name: str, coils: _LoopCoils, user: UserHvac, args: MeasureArguments, reader: _EquipmentReader
) -> Optional[Dict[str, Any]]:
    cool_kind = coils.cooling.kind if coils.cooling else None
    heat_kind = coils.heating.kind if coils.heating else None
    detail = (args.pri_hvac.split("_") + [""] * 4)[3]

    if cool_kind is None and heat_kind is None:
        logger.warning("No heating and cooling coils found in air loop %s", loop_name)
        return None

    if cool_kind == "DX" and heat_kind == "DX":
        kind = {"Std": "AIR_TO_AIR_STD", "SDHV": "AIR_TO_AIR_SDHV"}.get(detail, "AIR_TO_AIR_OTHER")
        backup_fuel = coils.backup.fuel if coils.backup and coils.backup.fuel else "ELECTRICITY"
        _warn_mismatch(loop_name, "heat pump type", user.heat_pump_type, kind)
        return {"heatPumps": [_heat_pump(kind, coils, "NULL_GLT", None, backup_fuel)], "coolingSystems": [], "heatingSystems": []}

    if (cool_kind, heat_kind) in (("WaterToAir", "WaterToAir"), ("Water", "Water")) and (
        heat_kind == "WaterToAir" or coils.heating.fuel == "ELECTRICITY"
    ):
        loop_type = _GEOTHERMAL_LOOPS.get(detail, "NULL_GLT")
        length = reader.geothermal_length(reader.plant_loop_of(coils.water_coil)) if coils.water_coil else None
        _warn_mismatch(loop_name, "heat pump type", user.heat_pump_type, "WATER_TO_AIR")
        return {
            "heatPumps": [_heat_pump("WATER_TO_AIR", coils, loop_type, length, "ELECTRICITY")],
            "coolingSystems": [],
            "heatingSystems": [],
        }

    cooling_systems: List[Dict[str, Any]] = []
    heating_systems: List[Dict[str, Any]] = []
    cooling_type = "CENTRAL_AIR_CONDITIONING" if cool_kind == "DX" else "NULL_CST"
    if cool_kind == "DX" and coils.cooling.capacity is not None:
        cooling_systems.append(_cooling_system(cooling_type, coils.cooling))

    if heat_kind == "Furnace":
        heating_type, heating_fuel = "FURNACE", coils.heating.fuel or "NULL"
    elif heat_kind == "Water":
        heating_type, heating_fuel = "BOILER", coils.heating.fuel or "NULL"
    elif heat_kind is None and user.heating_type == "ELECTRIC_BASEBOARD":
        heating_type, heating_fuel = "ELECTRIC_BASEBOARD", "ELECTRICITY"
    else:
        heating_type, heating_fuel = "NULL_HST", "NULL"
    if heating_type not in ("NULL_HST", "ELECTRIC_BASEBOARD") and coils.heating.capacity is not None:
        heating_systems.append(
            _heating_system(heating_type, heating_fuel, coils.heating.capacity, coils.heating.efficiency)
        )

    _warn_mismatch(loop_name, "cooling system type", user.cooling_type, cooling_type)
    _warn_mismatch(loop_name, "heating system type", user.heating_type, heating_type)
    _warn_mismatch(loop_name, "heating system fuel", user.heating_fuel, heating_fuel)
    return {"heatPumps": [], "coolingSystems": cooling_systems, "heatingSystems": heating_systems}


def _zone_units(reader: _EquipmentReader, user: UserHvac, args: MeasureArguments) -> Optional[Dict[str, Any]]:
    model = reader.model
    heat_pumps: List[Dict[str, Any]] = []
    cooling: List[Dict[str, Any]] = []
    heating: List[Dict[str, Any]] = []

    for name, fields in model.objects("ZoneHVAC:PackagedTerminalHeatPump").items():
        coils = _LoopCoils(
            cooling=reader.cooling_coil(fields.get("cooling_coil_object_type", ""), fields.get("cooling_coil_name", "")),
            heating=reader.heating_coil(fields.get("heating_coil_object_type", ""), fields.get("heating_coil_name", "")),
        )
        kind = "MINI_SPLIT_NONDUCTED" if args.ductwork == "None" else "MINI_SPLIT_DUCTED"
        unit = _heat_pump(kind, coils, "NULL_GLT", None, "ELECTRICITY")
        unit["backupType"] = "NULL_BT"
        unit["backUpAfue"] = None
        unit["backUpHeatingCapacity"] = None
        heat_pumps.append(unit)

    for name, fields in model.objects("ZoneHVAC:PackagedTerminalAirConditioner").items():
        coil = reader.cooling_coil(fields.get("cooling_coil_object_type", ""), fields.get("cooling_coil_name", ""))
        if coil is not None:
            cooling.append(_cooling_system("ROOM_AIR_CONDITIONER", coil))
        heat = reader.heating_coil(fields.get("heating_coil_object_type", ""), fields.get("heating_coil_name", ""))
        if heat is None or heat.kind != "Furnace":
            logger.warning("Packaged terminal air conditioner %s has an unrecognised heating coil", name)
            continue
        _warn_mismatch(name, "heating system type", user.heating_type, "FURNACE")
        heating.append(_heating_system("FURNACE", heat.fuel or "NULL", heat.capacity, heat.efficiency))

    for name, fields in model.objects("ZoneHVAC:WindowAirConditioner").items():
        coil = reader.cooling_coil(fields.get("cooling_coil_object_type", ""), fields.get("dx_cooling_coil_name", fields.get("cooling_coil_name", "")))
        if coil is not None:
            cooling.append(_cooling_system("ROOM_AIR_CONDITIONER", coil))

    for type_name in ("ZoneHVAC:Baseboard:Convective:Electric", "ZoneHVAC:Baseboard:RadiantConvective:Electric"):
        for name, fields in model.objects(type_name).items():
            capacity = reader.capacity(name, fields, "heating_design_capacity", "nominal_capacity")
            _warn_mismatch(name, "heating system type", user.heating_type, "ELECTRIC_BASEBOARD")
            heating.append(
                _heating_system("ELECTRIC_BASEBOARD", "ELECTRICITY", capacity, as_float(fields.get("efficiency"), 1.0))
            )

    for type_name in ("ZoneHVAC:Baseboard:Convective:Water", "ZoneHVAC:Baseboard:RadiantConvective:Water"):
        for name, fields in model.objects(type_name).items():
            boiler = reader.boiler(reader.plant_loop_of(name))
            if boiler is None:
                logger.warning("Hot water baseboard %s has no boiler on its plant loop", name)
                continue
            _warn_mismatch(name, "heating system type", user.heating_type, "BOILER")
            heating.append(_heating_system("BOILER", boiler.fuel or "NULL", boiler.capacity, boiler.efficiency))

    if not (heat_pumps or cooling or heating):
        return None
    return {"heatPumps": heat_pumps, "coolingSystems": cooling, "heatingSystems": heating}


def get_hvac_heat_cool(model: BuildingModel, results: SimulationResults, args: MeasureArguments) -> List[Dict[str, Any]]:
    user = parse_primary_hvac(args.pri_hvac)
    reader = _EquipmentReader(model, results)
    systems: List[Dict[str, Any]] = []
    for loop_name in model.objects("AirLoopHVAC"):
        entry = _classify_loop(loop_name, _air_loop_coils(reader, loop_name), user, args, reader)
        if entry is not None:
            systems.append(entry)
    zone_units = _zone_units(reader, user, args)
    if zone_units is not None:
        systems.append(zone_units)
    return systems


def _ground_footprint_ft(model: BuildingModel) -> Tuple[float, float]:
    xs: List[float] = []
    ys: List[float] = []
    for surf in model.surfaces:
        if surf.surface_type == "Floor" and surf.is_ground:
            xs.extend(v[0] for v in surf.vertices)
            ys.extend(v[1] for v in surf.vertices)
    if not xs:
        return 0.0, 0.0
    return (max(xs) - min(xs)) * M_TO_FT, (max(ys) - min(ys)) * M_TO_FT


def _duct(duct_type: str, material: str, insulated: bool, area: float) -> Dict[str, Any]:
    return {
        "ductType": duct_type,
        "ductMaterial": material,
        "ductInsulationThickness": 1.5 if insulated else 0,
        "ductInsulationRValue": 8 if insulated else 0,
        "ductSurfaceArea": round(area, 1),
    }


def get_hvac_distributions(
    model: BuildingModel, args: MeasureArguments, stories: int, conditioned_floor_area: float
) -> List[Dict[str, Any]]:
    frac_insulated = 1 - args.pct_ductwork_inside / 100
    frac_uninsulated = args.pct_ductwork_inside / 100
    ducts: List[Dict[str, Any]] = []
    hydronic: Dict[str, Any] = {}
    air_type = "NULL"

    if args.ductwork == "Small Duct High Velocity Ductwork":
        air_type = "HIGH_VELOCITY"
        length, width = _ground_footprint_ft(model)
        main = length * 0.8 * 2 + width * 0.8 * 2
        branch = length * 0.2 * 2 + width * 0.2 * 2
        floors = 2 if stories >= 2 else 1
        main_length = main * floors + 10 * floors
        branch_length = branch * floors
        ducts.append(_duct("MAIN", "FLEXIBLE", True, main_length * (3.14159 / 6)))
        ducts.append(_duct("BRANCH", "FLEXIBLE", True, branch_length * (3.14159 * 7 / 12)))
    elif args.ductwork == "Standard Ductwork":
        air_type = "REGULAR_VELOCITY"
        if stories >= 2:
            supply = 0.2 * conditioned_floor_area
            ret = 0.04 * (1 + 2) * conditioned_floor_area
        elif stories == 1:
            supply = 0.27 * conditioned_floor_area
            ret = 0.05 * (1 + 1) * conditioned_floor_area
        else:
            supply = ret = 0.0
        ducts.extend(
            [
                _duct("SUPPLY", "SHEET_METAL", True, supply * frac_insulated),
                _duct("SUPPLY", "SHEET_METAL", False, supply * frac_uninsulated),
                _duct("RETURN", "SHEET_METAL", True, ret * frac_insulated),
                _duct("RETURN", "SHEET_METAL", False, ret * frac_uninsulated),
            ]
        )
    elif args.ductwork == "Hydronic Distribution":
        hydronic = {"hydronicDistributionType": "BASEBOARD", "pipeRValue": 0, "lengthOfPipe": 0}

    return [
        {
            "hydronicDistribution": hydronic,
            "airDistribution": {
                "airDistributionType": air_type,
                "ducts": ducts,
                "ductLeakage": {"ductLeakageUnits": "CFM50", "ductLeakageValue": 0},
            },
        }
    ]


def get_mechanical_ventilations(model: BuildingModel) -> List[Dict[str, Any]]:
    systems = []
    for fields in model.objects("HeatExchanger:AirToAir:SensibleAndLatent").values():
        sensible_cool = as_float(fields.get("sensible_effectiveness_at_100_cooling_air_flow"), 0.0)
        sensible_heat = as_float(fields.get("sensible_effectiveness_at_100_heating_air_flow"), 0.0)
        latent_cool = as_float(fields.get("latent_effectiveness_at_100_cooling_air_flow"), 0.0)
        latent_heat = as_float(fields.get("latent_effectiveness_at_100_heating_air_flow"), 0.0)
        fan_type = "ENERGY_RECOVERY_VENTILATOR" if latent_cool > 0 or latent_heat > 0 else "HEAT_RECOVERY_VENTILATOR"
        systems.append(
            {
                "fanType": fan_type,
                "thirdPartyCertification": "OTHER",
                "usedForWholeBuildingVentilation": False,
                "sensibleRecoveryEfficiency": (sensible_cool + sensible_heat) / 2,
                "totalRecoveryEfficiency": ((sensible_cool + latent_cool) + (sensible_heat + latent_heat)) / 2,
            }
        )
    return systems


def get_moisture_controls(model: BuildingModel) -> List[Dict[str, Any]]:
    return [
        {"dehumidifierType": "STANDALONE", "efficiency": as_float(fields.get("rated_energy_factor"))}
        for fields in model.objects("ZoneHVAC:Dehumidifier:DX").values()
    ]


def _tank_volume_gal(reader: _EquipmentReader, name: str, fields: Dict[str, Any]) -> Optional[float]:
    volume = as_float(fields.get("tank_volume"))
    if volume is None:
        volume = reader.results.component_size(name, "tank volume")
    return volume * M3_TO_GAL if volume is not None else None


def _heater_capacity(reader: _EquipmentReader, tank_type: str, name: str, fields: Dict[str, Any]) -> Optional[float]:
    if tank_type == "WaterHeater:Stratified":
        return as_float(fields.get("heater_1_capacity"), 0.0) + as_float(fields.get("heater_2_capacity"), 0.0)
    capacity = as_float(fields.get("heater_maximum_capacity"))
    if capacity is None:
        capacity = reader.results.component_size(name, "heater maximum capacity")
    return capacity


def _round(value: Optional[float], digits: int) -> Optional[float]:
    return round(value, digits) if value is not None else None


def get_water_heaters(model: BuildingModel, results: SimulationResults) -> List[Dict[str, Any]]:
    reader = _EquipmentReader(model, results)
    heaters: List[Dict[str, Any]] = []
    claimed = set()

    for hp_type in ("WaterHeater:HeatPump:PumpedCondenser", "WaterHeater:HeatPump:WrappedCondenser"):
        for name, fields in model.objects(hp_type).items():
            coil = model.object(fields.get("dx_coil_object_type", ""), fields.get("dx_coil_name", "")) or {}
            cop = as_float(first_of(coil, "rated_cop", "rated_water_heating_cop"))
            tank_type, tank_name = fields.get("tank_object_type", ""), fields.get("tank_name", "")
            tank = model.object(tank_type, tank_name) or {}
            claimed.add(tank_name.lower())
            heaters.append(
                {
                    "waterHeaterType": "HEAT_PUMP_WATER_HEATER",
                    "fuelType": "ELECTRICITY",
                    "tankVolume": _round(_tank_volume_gal(reader, tank_name, tank), 1),
                    "heatingCapacity": _round(_heater_capacity(reader, tank_type, tank_name, tank), 1),
                    "energyFactor": 0,
                    "uniformEnergyFactor": _round(cop, 2),
                    "thermalEfficiency": None,
                    "waterHeaterInsulationJacketRValue": None,
                }
            )

    # tanks on the demand side of a plant loop store solar heat
    for loop_name in model.objects("PlantLoop"):
        for comp_type, comp_name in model.plant_loop_components(loop_name)["demand"]:
            if comp_type in ("WaterHeater:Mixed", "WaterHeater:Stratified"):
                claimed.add(comp_name.lower())

    for tank_type in ("WaterHeater:Mixed", "WaterHeater:Stratified"):
        mixed = tank_type == "WaterHeater:Mixed"
        for name, fields in model.objects(tank_type).items():
            if name.lower() in claimed:
                continue
            volume = _tank_volume_gal(reader, name, fields)
            heaters.append(
                {
                    "waterHeaterType": "INSTANTANEOUS_WATER_HEATER"
                    if volume is not None and volume < INSTANTANEOUS_MAX_GAL
                    else "STORAGE_WATER_HEATER",
                    "fuelType": FUEL_TYPES.get(fields.get("heater_fuel_type", ""), "NULL"),
                    "tankVolume": _round(volume, 1),
                    "heatingCapacity": _heater_capacity(reader, tank_type, name, fields),
                    "energyFactor": 0 if mixed else None,
                    "uniformEnergyFactor": 0 if mixed else None,
                    "thermalEfficiency": as_float(fields.get("heater_thermal_efficiency")),
                    "waterHeaterInsulationJacketRValue": 0 if mixed else None,
                }
            )
    return heaters


def get_hot_water_distributions(conditioned_floor_area: float, num_bathrooms: int) -> List[Dict[str, Any]]:
    pipe_length = 366 + 0.1322 * (conditioned_floor_area - 2432) + 86 * (num_bathrooms - 2.85)
    return [
        {
            "hwdPipeRValue": HOT_WATER_PIPE_R,
            "hwdPipeLengthInsulated": round(pipe_length * HOT_WATER_FRACTION_INSULATED, 1),
            "hwdFractionPipeInsulated": HOT_WATER_FRACTION_INSULATED,
            "pipingLength": round(pipe_length, 1),
            "pipeMaterial": "COPPER",
        }
    ]
