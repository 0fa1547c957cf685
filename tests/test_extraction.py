"""Tests for building model extraction and payload assembly."""

import json
import logging

import pytest

from birds_nest.errors import ModelInputError
from birds_nest.extraction.energy_use import get_annual_energy_use, get_annual_water_use
from birds_nest.extraction.envelope import (
    get_attics_and_roofs,
    get_foundation_walls,
    get_foundations,
    get_frame_floors,
    get_walls,
    parse_foundation_choice,
)
from birds_nest.extraction.hvac import (
    get_hot_water_distributions,
    get_hvac_distributions,
    get_hvac_heat_cool,
    get_mechanical_ventilations,
    get_water_heaters,
    parse_primary_hvac,
)
from birds_nest.extraction.infiltration import get_air_infiltration, leakiness
from birds_nest.extraction.lighting import get_lighting
from birds_nest.extraction.model import BuildingModel
from birds_nest.extraction.payload import build_payload
from birds_nest.extraction.results import SimulationResults
from birds_nest.extraction.summary import get_summary_characteristics
from birds_nest.models.arguments import MeasureArguments

PAYLOAD_KEYS = [
    "summaryCharacteristics",
    "airInfiltration",
    "lighting",
    "photovoltaics",
    "solarThermals",
    "hvacHeatCools",
    "hvacDistributions",
    "mechanicalVentilations",
    "moistureControls",
    "waterHeatingSystems",
    "hotWaterDistributions",
    "appliances",
    "annualEnergyUses",
    "annualWaterUses",
    "userAssumptions",
    "walls",
    "atticAndRoofs",
    "foundations",
    "foundationWalls",
    "frameFloors",
]


# --------------------------------------------------------------------------- #
# Model and results loading
# --------------------------------------------------------------------------- #


def test_from_epjson_reads_file_and_weather_country(tmp_path, house_document):
    model_path = tmp_path / "in.epJSON"
    model_path.write_text(json.dumps(house_document))
    weather_path = tmp_path / "in.epw"
    weather_path.write_text("LOCATION,Toronto,ON,CAN,CWEC,716240,43.67,-79.63,-5.0,173.0\n")

    model = BuildingModel.from_epjson(model_path, weather_path)

    assert model.weather_country == "CAN"
    assert model.zone("living").conditioned
    assert model.zone("Living").floor_area == pytest.approx(80.0)
    assert model.zone("Living").volume == pytest.approx(240.0)


def test_from_epjson_missing_file(tmp_path):
    with pytest.raises(ModelInputError, match="not found"):
        BuildingModel.from_epjson(tmp_path / "missing.epJSON")


def test_from_epjson_invalid_json(tmp_path):
    path = tmp_path / "broken.epJSON"
    path.write_text("{not json")
    with pytest.raises(ModelInputError, match="not valid epJSON"):
        BuildingModel.from_epjson(path)


def test_results_missing_database(tmp_path):
    with pytest.raises(ModelInputError, match="Simulation results not found"):
        SimulationResults(tmp_path / "eplusout.sql")


def test_component_size_prefers_design_size(results):
    assert results.component_size("Gas Coil", "capacity") == pytest.approx(12000.4)
    assert results.component_size("Unknown Coil", "capacity") is None


# --------------------------------------------------------------------------- #
# Summary, infiltration, lighting, energy use
# --------------------------------------------------------------------------- #


def test_summary_characteristics(house_model):
    args = MeasureArguments(city="Gaithersburg", state="MD", zip=20899, lc_stage="A-C")
    summary = get_summary_characteristics(house_model, args)

    assert summary["apiVersion"] == "Version 2.0 Draft"
    assert summary["systemBoundary"] == "A_C"
    assert summary["location"]["climateZone"] == "_4A"
    assert summary["location"]["zipCode"] == "20899"
    assert summary["numberOfStoriesAboveGrade"] == 1
    assert summary["basement"] is False
    assert summary["buildingHeight"] == 10
    assert summary["conditionedFloorArea"] == 861
    assert summary["exteriorWallAreas"] == [{"area": 1163}]


def test_summary_without_stories_fails():
    with pytest.raises(ModelInputError, match="no stories"):
        get_summary_characteristics(BuildingModel({}), MeasureArguments())


def test_air_infiltration_from_air_changes(house_document):
    house_document["ZoneInfiltration:DesignFlowRate"] = {
        "Living Infiltration": {
            "zone_or_zonelist_or_space_or_spacelist_name": "Living",
            "design_flow_rate_calculation_method": "AirChanges/Hour",
            "air_changes_per_hour": 0.5,
        }
    }
    infiltration = get_air_infiltration(BuildingModel(house_document))

    assert infiltration["airLeakageUnit"] == "ACH"
    assert infiltration["fanPressure"] == 50
    assert infiltration["airLeakageValue"] == pytest.approx(3.43, abs=0.02)
    assert infiltration["leakinessDescription"] == "AVERAGE"


@pytest.mark.parametrize(
    "ach50, expected",
    [(12, "VERY_LEAKY"), (8, "LEAKY"), (5, "AVERAGE"), (2, "TIGHT"), (0.5, "VERY_TIGHT")],
)
def test_leakiness_bands(ach50, expected):
    assert leakiness(ach50) == expected


def test_lighting_wattage_and_fractions(house_model):
    lighting = get_lighting(house_model, MeasureArguments(pcf_cfl_lf_lts=60, pct_led_lts=40))

    assert lighting["totalWattage"] == pytest.approx(400.0)
    assert lighting["lightingFractions"]["fracLed"] == pytest.approx(0.4)


def test_annual_energy_and_water_use(results):
    args = MeasureArguments(pri_hvac="Resid_CentralAC_Boiler_Propane")
    uses = get_annual_energy_use(results, args)

    assert uses[0] == {"fuelType": "ELECTRICITY", "consumption": 2778, "unitOfMeasure": "KWH"}
    assert uses[1]["consumption"] == pytest.approx(5.5)
    assert uses[2] == {"fuelType": "PROPANE", "consumption": 2.0, "unitOfMeasure": "GJ"}
    assert get_annual_water_use(results)[0]["consumption"] == 26417


# --------------------------------------------------------------------------- #
# HVAC and hot water
# --------------------------------------------------------------------------- #


def test_parse_primary_hvac_geothermal():
    user = parse_primary_hvac("Resid_HeatPump_Geothermal_Vertical")

    assert user.heat_pump_type == "WATER_TO_AIR"
    assert user.geothermal_loop_type == "VERTICAL"
    assert user.cooling_type == "NULL_CST"


def test_parse_primary_hvac_furnace():
    user = parse_primary_hvac("Resid_CentralAC_Furnace_Gas")

    assert user.cooling_type == "CENTRAL_AIR_CONDITIONING"
    assert user.heating_type == "FURNACE"
    assert user.heating_fuel == "NATURAL_GAS"
    assert user.heat_pump_type == "NULL_HPT"


def test_heat_cool_air_loop_with_furnace(house_model, results, caplog):
    args = MeasureArguments(pri_hvac="Resid_CentralAC_Furnace_Gas")
    with caplog.at_level(logging.WARNING):
        systems = get_hvac_heat_cool(house_model, results, args)

    assert len(systems) == 1
    assert systems[0]["heatPumps"] == []
    assert systems[0]["coolingSystems"] == [
        {
            "coolingSystemType": "CENTRAL_AIR_CONDITIONING",
            "coolingSystemFuel": "ELECTRICITY",
            "coolingCapacity": 7000,
            "annualCoolingEfficiency": {"value": 3.5, "unit": "COP"},
        }
    ]
    heating = systems[0]["heatingSystems"][0]
    assert heating["heatingSystemType"] == "FURNACE"
    assert heating["heatingSystemFuel"] == "NATURAL_GAS"
    assert heating["heatingCapacity"] == 12000
    assert heating["annualHeatingEfficiency"] == {"value": 0.8, "unit": "PERCENT"}
    assert "does not match" not in caplog.text


def test_heat_cool_warns_on_user_mismatch(house_model, results, caplog):
    with caplog.at_level(logging.WARNING):
        get_hvac_heat_cool(house_model, results, MeasureArguments(pri_hvac="Resid_NoAC_Boiler_Oil"))

    assert "User cooling system type does not match model" in caplog.text
    assert "User heating system type does not match model" in caplog.text


def test_heat_cool_dx_heat_pump(house_document, results):
    house_document["Branch"]["Main Branch"]["components"] = [
        {"component_object_type": "Coil:Cooling:DX:SingleSpeed", "component_name": "DX Coil"},
        {"component_object_type": "Coil:Heating:DX:SingleSpeed", "component_name": "HP Coil"},
        {"component_object_type": "Coil:Heating:Electric", "component_name": "Backup Coil"},
    ]
    house_document["Coil:Heating:DX:SingleSpeed"] = {
        "HP Coil": {"gross_rated_heating_capacity": 8000, "gross_rated_heating_cop": 3.2}
    }
    house_document["Coil:Heating:Electric"] = {"Backup Coil": {"nominal_capacity": 5000, "efficiency": 1.0}}

    systems = get_hvac_heat_cool(BuildingModel(house_document), results, MeasureArguments())
    heat_pump = systems[0]["heatPumps"][0]

    assert heat_pump["heatPumpType"] == "AIR_TO_AIR_STD"
    assert heat_pump["heatPumpFuel"] == "ELECTRICITY_HPF"
    assert heat_pump["heatingCapacity"] == 8000
    assert heat_pump["coolingCapacity"] == 7000
    assert heat_pump["backupType"] == "INTEGRATED"
    assert heat_pump["backUpSystemFuel"] == "ELECTRICITY"
    assert heat_pump["backUpHeatingCapacity"] == 5000


def test_heat_cool_zone_baseboards(house_document, results):
    del house_document["AirLoopHVAC"]
    house_document["ZoneHVAC:Baseboard:Convective:Electric"] = {
        "Living Baseboard": {"heating_design_capacity": 1500.4, "efficiency": 0.98}
    }
    systems = get_hvac_heat_cool(
        BuildingModel(house_document), results, MeasureArguments(pri_hvac="Resid_NoAC_Baseboard_Electric")
    )

    assert systems == [
        {
            "heatPumps": [],
            "coolingSystems": [],
            "heatingSystems": [
                {
                    "heatingSystemType": "ELECTRIC_BASEBOARD",
                    "heatingSystemFuel": "ELECTRICITY",
                    "heatingCapacity": 1500,
                    "annualHeatingEfficiency": {"value": 0.98, "unit": "PERCENT"},
                }
            ],
        }
    ]


def test_standard_ductwork_one_story(house_model):
    args = MeasureArguments(ductwork="Standard Ductwork", pct_ductwork_inside=25)
    distribution = get_hvac_distributions(house_model, args, stories=1, conditioned_floor_area=1000)[0]
    ducts = distribution["airDistribution"]["ducts"]

    assert distribution["hydronicDistribution"] == {}
    assert distribution["airDistribution"]["airDistributionType"] == "REGULAR_VELOCITY"
    assert [d["ductSurfaceArea"] for d in ducts] == [202.5, 67.5, 75.0, 25.0]
    assert ducts[0]["ductInsulationRValue"] == 8
    assert ducts[1]["ductInsulationRValue"] == 0


def test_hydronic_distribution(house_model):
    args = MeasureArguments(ductwork="Hydronic Distribution")
    distribution = get_hvac_distributions(house_model, args, stories=2, conditioned_floor_area=2000)[0]

    assert distribution["hydronicDistribution"]["hydronicDistributionType"] == "BASEBOARD"
    assert distribution["airDistribution"]["airDistributionType"] == "NULL"
    assert distribution["airDistribution"]["ducts"] == []


def test_energy_recovery_ventilator(house_document):
    house_document["HeatExchanger:AirToAir:SensibleAndLatent"] = {
        "ERV": {
            "sensible_effectiveness_at_100_heating_air_flow": 0.76,
            "latent_effectiveness_at_100_heating_air_flow": 0.68,
            "sensible_effectiveness_at_100_cooling_air_flow": 0.74,
            "latent_effectiveness_at_100_cooling_air_flow": 0.66,
        }
    }
    ventilation = get_mechanical_ventilations(BuildingModel(house_document))[0]

    assert ventilation["fanType"] == "ENERGY_RECOVERY_VENTILATOR"
    assert ventilation["sensibleRecoveryEfficiency"] == pytest.approx(0.75)
    assert ventilation["totalRecoveryEfficiency"] == pytest.approx(1.42)


def test_storage_water_heater(house_model, results):
    heater = get_water_heaters(house_model, results)[0]

    assert heater["waterHeaterType"] == "STORAGE_WATER_HEATER"
    assert heater["fuelType"] == "NATURAL_GAS"
    assert heater["tankVolume"] == pytest.approx(50.2)
    assert heater["thermalEfficiency"] == pytest.approx(0.8)


def test_heat_pump_water_heater_claims_its_tank(house_document, results):
    house_document["WaterHeater:HeatPump:PumpedCondenser"] = {
        "HPWH": {
            "tank_object_type": "WaterHeater:Mixed",
            "tank_name": "Gas Tank",
            "dx_coil_object_type": "Coil:WaterHeating:AirToWaterHeatPump:Pumped",
            "dx_coil_name": "HPWH Coil",
        }
    }
    house_document["Coil:WaterHeating:AirToWaterHeatPump:Pumped"] = {"HPWH Coil": {"rated_cop": 3.456}}

    heaters = get_water_heaters(BuildingModel(house_document), results)

    assert len(heaters) == 1
    assert heaters[0]["waterHeaterType"] == "HEAT_PUMP_WATER_HEATER"
    assert heaters[0]["uniformEnergyFactor"] == pytest.approx(3.46)


def test_hot_water_distribution_pipe_length():
    pipes = get_hot_water_distributions(2432, 3)[0]

    assert pipes["pipingLength"] == pytest.approx(378.9)
    assert pipes["hwdPipeLengthInsulated"] == pytest.approx(189.45, abs=0.06)
    assert pipes["pipeMaterial"] == "COPPER"


# --------------------------------------------------------------------------- #
# Envelope
# --------------------------------------------------------------------------- #


def test_walls_with_window_and_door(house_model, results):
    walls = {w["wallName"]: w for w in get_walls(house_model, results, MeasureArguments(door_mat="Solid Wood"))}
    south = walls["South Wall"]

    assert len(walls) == 4
    assert south["wallType"] == "WOOD_STUD"
    assert south["exteriorAdjacentTo"] == "AMBIENT"
    assert south["wallSiding"] == "WOOD_SIDING"
    assert south["wallInteriorFinish"] == "GYPSUM_REGULAR_1_2"
    assert south["studsSize"] == "_2X4"
    assert south["studsSpacing"] == 16.0
    assert south["wallArea"] == pytest.approx(279.86)
    assert south["insulations"][0]["insulationInstallationType"] == "CAVITY"
    assert south["insulations"][0]["insulationNominalRValue"] == 13.0

    window = south["windows"][0]
    assert window["uFactor"] == pytest.approx(0.3522)
    assert window["shgc"] == pytest.approx(0.4)
    assert window["visualTransmittance"] == pytest.approx(0.6)

    door = south["doors"][0]
    assert door["material"] == "SOLID_WOOD"
    assert door["height"] == pytest.approx(6.56)


def test_interzone_walls_reported_once(house_document, results):
    house_document["Zone"]["Garage"] = {}
    surfaces = house_document["BuildingSurface:Detailed"]
    surfaces["North Wall"]["outside_boundary_condition"] = "Surface"
    surfaces["North Wall"]["outside_boundary_condition_object"] = "Garage Wall"
    surfaces["Garage Wall"] = dict(
        surfaces["North Wall"],
        zone_name="Garage",
        outside_boundary_condition_object="North Wall",
    )

    walls = get_walls(BuildingModel(house_document), results, MeasureArguments())
    adjacent = [w for w in walls if w["exteriorAdjacentTo"] == "LIVING_SPACE"]

    assert len(adjacent) == 1
    assert adjacent[0]["wallSiding"] == "OTHER_SIDING"


def test_attic_and_roof(house_model, results):
    roof = get_attics_and_roofs(house_model, results, MeasureArguments(attic_type="FLAT_ROOF"))[0]

    assert roof["atticAndRoofName"] == "Living"
    assert roof["atticType"] == "FLAT_ROOF"
    assert roof["roofType"] == "ASPHALT_OR_FIBERGLASS_SHINGLES"
    assert roof["deckType"] == "OSB"
    assert roof["raftersSize"] == "_2X8"
    assert roof["raftersMaterials"] == "WOOD_RAFTER"
    assert roof["pitch"] == 0.0
    assert roof["roofArea"] == pytest.approx(861.11)
    assert roof["skyLights"] == []


@pytest.mark.parametrize(
    "choice, expected",
    [
        ("Slab On/In Grade, R-10 2 ft", ("SLAB_ON_GRADE", 10.0, 2.0, 0.0)),
        ("Basement, Slab R-10, Wall R-22", ("BASEMENT_CONDITIONED", 10.0, 0.0, 22.0)),
        ("Crawlspace, R-19", ("CRAWLSPACE_VENTED", 0.0, 0.0, 19.0)),
    ],
)
def test_parse_foundation_choice(choice, expected):
    parsed = parse_foundation_choice(choice)
    assert (parsed.foundation_type, parsed.slab_r, parsed.slab_depth_ft, parsed.wall_r) == expected


def test_basement_slab(house_model):
    foundation = get_foundations(house_model, MeasureArguments())[0]
    slab = foundation["slab"]

    assert foundation["foundationType"] == "BASEMENT_CONDITIONED"
    assert slab["slabArea"] == pytest.approx(861.1)
    assert slab["slabPerimeter"] == pytest.approx(118.1)
    assert slab["slabThickness"] == pytest.approx(4.0)
    assert slab["slabPerimeterInsulations"] == []
    assert slab["slabUnderSlabInsulations"][-1]["insulationNominalRValue"] == 10.0
    assert slab["concreteValue"]["compressiveStrength"] == "_3000_PSI"
    assert slab["concreteValue"]["reinforcement"] == "WELDED_WIRE_MESH"


def test_slab_on_grade_perimeter_insulation(house_model):
    args = MeasureArguments(found_chars="Slab On/In Grade, R-10 4 ft")
    slab = get_foundations(house_model, args)[0]["slab"]

    assert slab["slabPerimeterInsulationDepth"] == 4.0
    assert slab["slabPerimeterInsulations"][0]["insulationMaterial"] == "RIGID_EPS"
    assert slab["slabPerimeterInsulations"][0]["insulationThickness"] == 2.0


def test_foundation_walls_take_user_insulation(house_document, results):
    house_document["BuildingSurface:Detailed"]["West Wall"]["outside_boundary_condition"] = "Ground"
    walls = get_foundation_walls(BuildingModel(house_document), results, MeasureArguments())

    assert [w["foundationWallName"] for w in walls] == ["West Wall"]
    assert walls[0]["foundationWallInsulations"][-1]["insulationNominalRValue"] == 22.0
    assert walls[0]["foundationWallInsulations"][-1]["insulationLocation"] == "INTERIOR"


def test_frame_floor_over_outdoors(house_document):
    house_document["BuildingSurface:Detailed"]["Slab"]["outside_boundary_condition"] = "Outdoors"
    floors = get_frame_floors(BuildingModel(house_document))
    assert floors == []

    del house_document["BuildingSurface:Detailed"]["Roof"]
    floors = get_frame_floors(BuildingModel(house_document))
    assert floors[0]["frameFloorName"] == "Slab"
    assert floors[0]["frameFloorArea"] == pytest.approx(861.1)
    assert floors[0]["floorTruss"] is None


# --------------------------------------------------------------------------- #
# Payload
# --------------------------------------------------------------------------- #


def test_payload_key_order_and_assumptions(house_model, results):
    args = MeasureArguments(oper_energy_lcia="PROJECTION_REFERENCE")
    payload = build_payload(house_model, results, args)

    assert list(payload) == PAYLOAD_KEYS
    assert payload["userAssumptions"] == {"electricityFuelMixProjection": "PROJECTION_REFERENCE"}
    assert payload["photovoltaics"] == []
    assert payload["appliances"]["freezers"] == []
    json.dumps(payload, allow_nan=False)
