"""Shared fixtures for the birds_nest test suite."""

import sqlite3

import pytest

from birds_nest.client.session import SessionState
from birds_nest.extraction.model import BuildingModel
from birds_nest.extraction.results import SimulationResults
from fakes import RecordingSleep


@pytest.fixture
def session_state() -> SessionState:
    return SessionState(
        submit_url="https://birdsnest.example.org/api/lcia/",
        refresh_url="https://birdsnest.example.org/api/token/refresh/",
        bearer_key="old-token",
        refresh_key="refresh-123",
        request_body='{"summaryCharacteristics": {}}',
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


def _rect(x0, y0, x1, y1, z):
    return [
        {"vertex_x_coordinate": x, "vertex_y_coordinate": y, "vertex_z_coordinate": z}
        for x, y in ((x0, y0), (x1, y0), (x1, y1), (x0, y1))
    ]


def _wall(xa, ya, xb, yb, height):
    return [
        {"vertex_x_coordinate": x, "vertex_y_coordinate": y, "vertex_z_coordinate": z}
        for x, y, z in ((xa, ya, height), (xa, ya, 0.0), (xb, yb, 0.0), (xb, yb, height))
    ]


def _surface(surface_type, boundary, construction, vertices):
    return {
        "surface_type": surface_type,
        "construction_name": construction,
        "zone_name": "Living",
        "outside_boundary_condition": boundary,
        "vertices": vertices,
    }


@pytest.fixture
def house_document():
    """A single-zone 10 m x 8 m x 3 m house on a slab with a gas furnace and central AC."""
    return {
        "Zone": {"Living": {}},
        "ZoneHVAC:EquipmentConnections": {"Living Connections": {"zone_name": "Living"}},
        "BuildingSurface:Detailed": {
            "South Wall": _surface("Wall", "Outdoors", "Exterior Wall", _wall(0, 0, 10, 0, 3)),
            "East Wall": _surface("Wall", "Outdoors", "Exterior Wall", _wall(10, 0, 10, 8, 3)),
            "North Wall": _surface("Wall", "Outdoors", "Exterior Wall", _wall(10, 8, 0, 8, 3)),
            "West Wall": _surface("Wall", "Outdoors", "Exterior Wall", _wall(0, 8, 0, 0, 3)),
            "Slab": _surface("Floor", "Ground", "Slab Floor", list(reversed(_rect(0, 0, 10, 8, 0.0)))),
            "Roof": _surface("Roof", "Outdoors", "Shingle Roof", _rect(0, 0, 10, 8, 3.0)),
        },
        "FenestrationSurface:Detailed": {
            "South Window": {
                "surface_type": "Window",
                "construction_name": "Simple Window",
                "building_surface_name": "South Wall",
                "vertex_1_x_coordinate": 2, "vertex_1_y_coordinate": 0, "vertex_1_z_coordinate": 2,
                "vertex_2_x_coordinate": 2, "vertex_2_y_coordinate": 0, "vertex_2_z_coordinate": 1,
                "vertex_3_x_coordinate": 4, "vertex_3_y_coordinate": 0, "vertex_3_z_coordinate": 1,
                "vertex_4_x_coordinate": 4, "vertex_4_y_coordinate": 0, "vertex_4_z_coordinate": 2,
            },
            "Front Door": {
                "surface_type": "Door",
                "construction_name": "Wood Door",
                "building_surface_name": "South Wall",
                "vertex_1_x_coordinate": 6, "vertex_1_y_coordinate": 0, "vertex_1_z_coordinate": 2,
                "vertex_2_x_coordinate": 6, "vertex_2_y_coordinate": 0, "vertex_2_z_coordinate": 0,
                "vertex_3_x_coordinate": 7, "vertex_3_y_coordinate": 0, "vertex_3_z_coordinate": 0,
                "vertex_4_x_coordinate": 7, "vertex_4_y_coordinate": 0, "vertex_4_z_coordinate": 2,
            },
        },
        "Construction": {
            "Exterior Wall": {
                "outside_layer": "Wood Siding",
                "layer_2": "2x4 Wood Stud 16 in. o.c. R-13",
                "layer_3": "1/2 in. Gypsum Board",
            },
            "Slab Floor": {"outside_layer": "4 in. Concrete Slab 3000 psi"},
            "Shingle Roof": {
                "outside_layer": "Asphalt Shingles",
                "layer_2": "OSB Sheathing",
                "layer_3": "2x8 Wood Rafter",
            },
            "Simple Window": {"outside_layer": "Simple Glazing"},
            "Wood Door": {"outside_layer": "Solid Wood Panel"},
        },
        "Material": {
            "Wood Siding": {"thickness": 0.012, "conductivity": 0.09},
            "2x4 Wood Stud 16 in. o.c. R-13": {"thickness": 0.089, "conductivity": 0.05},
            "1/2 in. Gypsum Board": {"thickness": 0.0127, "conductivity": 0.16},
            "4 in. Concrete Slab 3000 psi": {"thickness": 0.1016, "conductivity": 1.31},
            "Asphalt Shingles": {"thickness": 0.006, "conductivity": 0.08},
            "OSB Sheathing": {"thickness": 0.012, "conductivity": 0.13},
            "2x8 Wood Rafter": {"thickness": 0.184, "conductivity": 0.12},
            "Solid Wood Panel": {"thickness": 0.044, "conductivity": 0.15},
        },
        "WindowMaterial:SimpleGlazingSystem": {
            "Simple Glazing": {"u_factor": 2.0, "solar_heat_gain_coefficient": 0.4, "visible_transmittance": 0.6}
        },
        "AirLoopHVAC": {"Main Loop": {"branch_list_name": "Main Branches"}},
        "BranchList": {"Main Branches": {"branches": [{"branch_name": "Main Branch"}]}},
        "Branch": {
            "Main Branch": {
                "components": [
                    {"component_object_type": "Coil:Cooling:DX:SingleSpeed", "component_name": "DX Coil"},
                    {"component_object_type": "Coil:Heating:Fuel", "component_name": "Gas Coil"},
                ]
            }
        },
        "Coil:Cooling:DX:SingleSpeed": {
            "DX Coil": {"gross_rated_total_cooling_capacity": 7000, "gross_rated_cooling_cop": 3.5}
        },
        "Coil:Heating:Fuel": {
            "Gas Coil": {"fuel_type": "NaturalGas", "burner_efficiency": 0.8, "nominal_capacity": "Autosize"}
        },
        "WaterHeater:Mixed": {
            "Gas Tank": {"tank_volume": 0.19, "heater_maximum_capacity": 11000, "heater_fuel_type": "NaturalGas",
                         "heater_thermal_efficiency": 0.8}
        },
        "Lights": {
            "Living Lights": {
                "zone_or_zonelist_or_space_or_spacelist_name": "Living",
                "design_level_calculation_method": "Watts/Area",
                "watts_per_floor_area": 5.0,
            }
        },
    }


@pytest.fixture
def house_model(house_document):
    return BuildingModel(house_document)


TABULAR_ROWS = [
    ("AnnualBuildingUtilityPerformanceSummary", "Entire Facility", "End Uses", "Total End Uses", "Electricity", "GJ", "10.00"),
    ("AnnualBuildingUtilityPerformanceSummary", "Entire Facility", "End Uses", "Total End Uses", "Natural Gas", "GJ", "5.50"),
    ("AnnualBuildingUtilityPerformanceSummary", "Entire Facility", "End Uses", "Total End Uses", "Propane", "GJ", "2.00"),
    ("AnnualBuildingUtilityPerformanceSummary", "Entire Facility", "End Uses", "Total End Uses", "Water", "m3", "100.00"),
    ("AnnualBuildingUtilityPerformanceSummary", "Entire Facility", "Site and Source Energy", "Total Site Energy", "Total Energy", "GJ", "17.50"),
    ("AnnualBuildingUtilityPerformanceSummary", "Entire Facility", "Site and Source Energy", "Net Site Energy", "Total Energy", "GJ", "17.50"),
    ("ComponentSizingSummary", "Entire Facility", "Coil:Heating:Fuel", "GAS COIL", "User-Specified Nominal Capacity", "W", "9000.00"),
    ("ComponentSizingSummary", "Entire Facility", "Coil:Heating:Fuel", "GAS COIL", "Design Size Nominal Capacity", "W", "12000.40"),
]


@pytest.fixture
def results_path(tmp_path):
    """An eplusout.sql lookalike holding only the tabular reports the extractors read."""
    path = tmp_path / "eplusout.sql"
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE TabularDataWithStrings (ReportName TEXT, ReportForString TEXT, TableName TEXT, "
        "RowName TEXT, ColumnName TEXT, Units TEXT, Value TEXT)"
    )
    conn.executemany("INSERT INTO TabularDataWithStrings VALUES (?, ?, ?, ?, ?, ?, ?)", TABULAR_ROWS)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def results(results_path):
    with SimulationResults(results_path) as opened:
        yield opened


def _flows(scale, **overrides):
    flows = {
        "globalWarmingPotential": 100.0 * scale,
        "acidificationPotential": 1.0 * scale,
        "respiratoryEffects": 0.1 * scale,
        "eutrophicationPotential": 0.01 * scale,
        "ozoneDepletionPotential": 0.0,
        "smogPotential": 5.0 * scale,
        "totalPrimaryEnergy": 2000.0 * scale,
        "nonRenewableEnergy": 1500.0 * scale,
        "renewableEnergy": 500.0 * scale,
        "fossilFuelEnergy": 1400.0 * scale,
    }
    flows.update(overrides)
    return flows


def _staged(scale):
    return {column: {"A1": value, "B6": None, "C1234": value / 2} for column, value in _flows(scale).items()}


@pytest.fixture
def lcia_response():
    """A trimmed LCIA service response covering every table section."""
    return {
        "lciaResults": {
            "warnings": [{"system": "HVAC", "warning": "Duct leakage assumed."}],
            "buildingComponentFlowsTotal": {
                "totalBuildingComponentFlows": _flows(10),
                "exteriorWallsFlows": _flows(2),
                "fenestrationFlows": _flows(1, smogPotential="n/a"),
                "mysteryFlows": _flows(1),
            },
            "energyUseFlows": {
                "totalEnergy": _flows(20),
                "electricity": _flows(15),
                "naturalGas": None,
            },
            "buildingComponentFlowsTotalByYear": [
                {"year": 2025, "totalBuildingComponentFlows": _flows(8)},
                {"year": 2026, "totalBuildingComponentFlows": _flows(2)},
            ],
            "energyUseFlowsByYear": [
                {"year": 2025, "totalEnergy": _flows(10)},
                {"year": 2026, "totalEnergy": _flows(10)},
            ],
            "buildingComponentFlows": {"totalBuildingComponentFlows": _staged(10)},
            "buildingComponentFlowsByYear": [
                {"year": 2025, "totalBuildingComponentFlows": _staged(8)},
            ],
        }
    }
