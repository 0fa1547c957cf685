from typing import Any, Dict, List, Literal, Optional, Tuple, get_args, get_origin

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from birds_nest.client.session import normalize_api_key
from birds_nest.config.settings import DEFAULT_API_URL, DEFAULT_REFRESH_URL
from birds_nest.errors import ArgumentError

ClimateZone = Literal[
    "1A", "1B", "1C", "2A", "2B", "2C", "3A", "3B", "3C",
    "4A", "4B", "4C", "5A", "5B", "5C", "6A", "6B", "6C", "7", "8",
]

DoorMaterial = Literal[
    "Uninsulated Fiberglass",
    "Insulated Fiberglass",
    "Uninsulated Metal (Aluminum)",
    "Insulated Metal (Aluminum)",
    "Uninsualted Metal (Steel)",
    "Insulated Metal (Steel)",
    "Solid Wood",
    "Hollow Wood",
    "Glass",
    "Other",
]

AtticType = Literal[
    "VENTED_ATTIC",
    "VENTING_UNKNOWN_ATTIC",
    "CATHEDRAL_CEILING",
    "CAPE_COD",
    "OTHER_ATTIC_TYPE",
    "FLAT_ROOF",
]

FoundationChoice = Literal[
    "Basement, Slab R-0, Wall R-0",
    "Basement, Slab R-0, Wall R-5",
    "Basement, Slab R-0, Wall R-8",
    "Basement, Slab R-0, Wall R-10",
    "Basement, Slab R-0, Wall R-15",
    "Basement, Slab R-0, Wall R-20",
    "Basement, Slab R-0, Wall R-22",
    "Basement, Slab R-0, Wall R-25",
    "Basement, Slab R-10, Wall R-0",
    "Basement, Slab R-10, Wall R-5",
    "Basement, Slab R-10, Wall R-8",
    "Basement, Slab R-10, Wall R-10",
    "Basement, Slab R-10, Wall R-15",
    "Basement, Slab R-10, Wall R-20",
    "Basement, Slab R-10, Wall R-22",
    "Basement, Slab R-10, Wall R-25",
    "Crawlspace, R-13",
    "Crawlspace, R-19",
    "Crawlspace, R-30",
    "Crawlspace, R-38",
    "Slab On/In Grade, R-0 0 ft",
    "Slab On/In Grade, R-5 2 ft",
    "Slab On/In Grade, R-10 2 ft",
    "Slab On/In Grade, R-10 4 ft",
]

# Choice value -> label shown in reports.
PRIMARY_HVAC: Dict[str, str] = {
    "Resid_CentralAC_Furnace_Gas": "Central AC, Gas Furnace",
    "Resid_CentralAC_Furnace_Electric": "Central AC, Electric Furnace",
    "Resid_CentralAC_Baseboard_Electric": "Central AC, Electric Baseboard",
    "Resid_CentralAC_Boiler_Electric": "Central AC, Electric Boiler",
    "Resid_CentralAC_Boiler_Gas": "Central AC, Gas Boiler",
    "Resid_CentralAC_Boiler_Oil": "Central AC, Oil Boiler",
    "Resid_CentralAC_Boiler_Propane": "Central AC, Propane Boiler",
    "Resid_CentralAC_NoHeat_NoFuel": "Central AC, No Heat",
    "Resid_NoAC_Furnace_Gas": "No AC, Gas Furnace",
    "Resid_NoAC_Furnace_Electric": "No AC, Electric Furnace",
    "Resid_NoAC_Boiler_Electric": "No AC, Electric Boiler",
    "Resid_NoAC_Boiler_Gas": "No AC, Gas Boiler",
    "Resid_NoAC_Boiler_Oil": "No AC, Oil Boiler",
    "Resid_NoAC_Boiler_Propane": "No AC, Propane Boiler",
    "Resid_NoAC_Baseboard_Electric": "No AC, Electric Baseboard",
    "Resid_HeatPump_AirtoAir_Std": "Heat Pump, Air-to-Air Std",
    "Resid_HeatPump_AirtoAir_SDHV": "Heat Pump, Air-to-Air SDHV",
    "Resid_HeatPump_AirtoAir_MiniSplitDucted": "Heat Pump, Ducted Air-to-Air Mini Split",
    "Resid_HeatPump_AirtoAir_MiniSplitNonDucted": "Heat Pump, Non-Ducted Air-to-Air Mini Split",
    "Resid_HeatPump_Geothermal_Vertical": "Heat Pump, Vertical Geothermal",
    "Resid_RoomAC_Furnace_Gas": "Room AC, Gas Furnace",
    "Resid_RoomAC_Furnace_Electric": "Room AC, Electric Furnace",
    "Resid_RoomAC_Baseboard_Electric": "Room AC, Electric Baseboard",
}

PrimaryHvac = Literal[
    "Resid_CentralAC_Furnace_Gas",
    "Resid_CentralAC_Furnace_Electric",
    "Resid_CentralAC_Baseboard_Electric",
    "Resid_CentralAC_Boiler_Electric",
    "Resid_CentralAC_Boiler_Gas",
    "Resid_CentralAC_Boiler_Oil",
    "Resid_CentralAC_Boiler_Propane",
    "Resid_CentralAC_NoHeat_NoFuel",
    "Resid_NoAC_Furnace_Gas",
    "Resid_NoAC_Furnace_Electric",
    "Resid_NoAC_Boiler_Electric",
    "Resid_NoAC_Boiler_Gas",
    "Resid_NoAC_Boiler_Oil",
    "Resid_NoAC_Boiler_Propane",
    "Resid_NoAC_Baseboard_Electric",
    "Resid_HeatPump_AirtoAir_Std",
    "Resid_HeatPump_AirtoAir_SDHV",
    "Resid_HeatPump_AirtoAir_MiniSplitDucted",
    "Resid_HeatPump_AirtoAir_MiniSplitNonDucted",
    "Resid_HeatPump_Geothermal_Vertical",
    "Resid_RoomAC_Furnace_Gas",
    "Resid_RoomAC_Furnace_Electric",
    "Resid_RoomAC_Baseboard_Electric",
]

Refrigerator = Literal[
    "None",
    "BottomFreezer_EF_10.2_Cap_24_EnergyStar",
    "BottomFreezer_EF_13.6_Cap_24_EnergyStar",
    "BottomFreezer_EF_15.9_Cap_24_EnergyStar",
    "BottomFreezer_EF_19.8_Cap_24_EnergyStar",
    "BottomFreezer_EF_20.1_Cap_24_EnergyStar",
    "BottomFreezer_EF_21.3_Cap_24_EnergyStar",
    "BottomFreezer_EF_4.5_Cap_24_EnergyStar",
    "BottomFreezer_EF_6.7_Cap_24_EnergyStar",
    "SideFreezer_EF_10.8_Cap_24_EnergyStar",
    "SideFreezer_EF_13.8_Cap_24_EnergyStar",
    "SideFreezer_EF_15.7_Cap_24_EnergyStar",
    "SideFreezer_EF_19.6_Cap_24_EnergyStar",
    "SideFreezer_EF_19.8_Cap_24_EnergyStar",
    "SideFreezer_EF_20.6_Cap_24_EnergyStar",
    "SideFreezer_EF_6.5_Cap_24_EnergyStar",
    "SideFreezer_EF_4.4_Cap_24_EnergyStar",
    "TopFreezer_EF_10.5_Cap_24_EnergyStar",
    "TopFreezer_EF_14.1_Cap_24_EnergyStar",
    "TopFreezer_EF_15.9_Cap_24_EnergyStar",
    "TopFreezer_EF_17.6_Cap_24_EnergyStar",
    "TopFreezer_EF_19.9_Cap_24_EnergyStar",
    "TopFreezer_EF_20.4_Cap_24_EnergyStar",
    "TopFreezer_EF_21.9_Cap_24_EnergyStar",
    "TopFreezer_EF_4.4_Cap_24_EnergyStar",
    "TopFreezer_EF_6.9_Cap_24_EnergyStar",
]

Freezer = Literal[
    "No_Freezer",
    "Chest_EF_10",
    "Chest_EF_13",
    "Chest_EF_18",
    "Chest_EF_24",
    "Chest_EF_27",
    "Chest_EF_29",
    "Upright_EF_12",
    "Upright_EF_16",
    "Upright_EF_18",
    "Upright_EF_20",
    "Upright_EF_6",
    "Upright_EF_9",
]

MIN_STUDY_PERIOD = 60


class MeasureArguments(BaseModel):
    """User inputs of the BIRDS NEST reporting measure.

    Field titles are the display names shown to users; choice fields are
    closed ``Literal`` sets whose values travel unchanged into the payload
    builders.
    """

    # API access
    birds_api_key: str = Field(default="", title="BIRDS NEST API Access Token")
    api_url: str = Field(default=DEFAULT_API_URL, title="BIRDS API URL")
    birds_api_refresh_token: str = Field(default="", title="BIRDS NEST API Refresh Token")
    api_refresh_url: str = Field(default=DEFAULT_REFRESH_URL, title="BIRDS API Token Refresh URL")

    # Building
    com_res: Literal["LowRiseResidential"] = Field(
        default="LowRiseResidential", title="Commercial or Residential Building"
    )
    bldg_type: Literal["SingleFamilyDetached"] = Field(default="SingleFamilyDetached", title="Building Type")
    const_qual: Literal["Average", "Custom", "Luxury"] = Field(default="Average", title="Construction Quality")
    state: str = Field(default="", title="State")
    city: str = Field(default="", title="City")
    zip: int = Field(default=0, ge=0, title="ZIP Code")
    climate_zone: ClimateZone = Field(default="4A", title="ASHRAE Climate Zone")
    num_bedrooms: int = Field(default=3, ge=0, title="Number of Bedrooms")
    num_bathrooms: int = Field(default=2, ge=0, title="Number of Bathrooms")

    # Envelope
    door_mat: DoorMaterial = Field(default="Uninsulated Fiberglass", title="Exterior Door Material")
    attic_type: AtticType = Field(default="VENTED_ATTIC", title="Attic Type")
    found_chars: FoundationChoice = Field(
        default="Basement, Slab R-10, Wall R-22", title="Foundation Characteristics"
    )

    # Lighting
    pct_inc_lts: float = Field(default=0.0, ge=0, le=100, title="Percent Incandescent Lighting (Whole %)")
    pct_mh_lts: float = Field(default=0.0, ge=0, le=100, title="Percent Metal Halide Lighting (Whole %)")
    pcf_cfl_lf_lts: float = Field(
        default=100.0, ge=0, le=100, title="Percent CFL or Linear Fluorescent Lighting (Whole %)"
    )
    pct_led_lts: float = Field(default=0.0, ge=0, le=100, title="Percent LED Lighting (Whole %)")

    # HVAC
    pri_hvac: PrimaryHvac = Field(default="Resid_HeatPump_AirtoAir_Std", title="Primary HVAC Type")
    ductwork: Literal[
        "None", "Standard Ductwork", "Small Duct High Velocity Ductwork", "Hydronic Distribution"
    ] = Field(default="None", title="HVAC Distribution Type (Air or Hydronic)")
    pct_ductwork_inside: float = Field(
        default=100.0, ge=0, le=100, title="Percent Ductwork Inside Conditioned Space"
    )

    # Solar
    panel_type: Literal["None", "POLYCRYSTALLINE", "MONOCRYSTALLINE", "THIN_FILM"] = Field(
        default="None", title="Solar PV - Panel Type"
    )
    inverter_type: Literal["None", "String", "Optimizer", "Micro"] = Field(
        default="None", title="Solar PV - Inverter Type"
    )
    panel_country: Literal["None", "USA", "China", "Other"] = Field(
        default="None", title="Solar PV - Panel Source Country"
    )
    solar_thermal_sys_type: Literal[
        "None", "Hot Water", "Space Heating", "Hot Water and Space Heating", "Hybrid"
    ] = Field(default="None", title="Solar Thermal System Type")
    solar_thermal_collector_type: Literal[
        "None",
        "Integrated Collector Storage",
        "Evacuated Tube",
        "Double Glazing Selective",
        "Double Glazing Black",
        "Single Glazing Selective",
        "Single Glazing Black",
    ] = Field(default="None", title="Solar Thermal Collector Type")
    solar_thermal_loop_type: Literal[
        "None", "Passive Thermosyphon", "Liquid Indirect", "Liquid Direct", "Air Indirect", "Air Direct"
    ] = Field(default="None", title="Solar Thermal Collector Loop Type")

    # Appliances
    appliance_clothes_washer: Literal["No Clothes Washer", "Standard", "EnergyStar"] = Field(
        default="Standard", title="Clothes Washer - Efficiency"
    )
    appliance_clothes_dryer: Literal[
        "No Clothes Dryer", "Electric", "Electric Heat Pump", "Electric Premium", "Gas", "Gas Premium", "Propane"
    ] = Field(default="Electric", title="Clothes dryer - Efficiency")
    appliance_cooking_range: Literal["No Cooking Range", "Electric", "Electric Induction", "Gas", "Propane"] = Field(
        default="Electric", title="Cooking range"
    )
    appliance_dishwasher: Literal["No Dishwasher", "290 rated kWh", "318 rated kWh"] = Field(
        default="290 rated kWh", title="Dishwasher"
    )
    appliance_frig: Refrigerator = Field(
        default="TopFreezer_EF_10.5_Cap_24_EnergyStar", title="Refrigerator Size and Efficiency"
    )
    appliance_freezer: Freezer = Field(default="No_Freezer", title="Freezer")

    # Life-cycle assessment
    oper_energy_lcia: Literal["ATTRIBUTIONAL", "PROJECTION_REFERENCE", "PROJECTION_LOW_RENEWABLE_COST"] = Field(
        default="ATTRIBUTIONAL", title="Operational Energy LCIA Data"
    )
    lc_stage: Literal["A-C", "A-D"] = Field(default="A-C", title="LCA System Boundary")
    study_period: int = Field(default=MIN_STUDY_PERIOD, title="Study Period")

    @field_validator("study_period")
    @classmethod
    def _study_period_floor(cls, value: int) -> int:
        if value < MIN_STUDY_PERIOD:
            raise ValueError(f"study_period must be >= {MIN_STUDY_PERIOD}, got {value}")
        return value

    @model_validator(mode="after")
    def _lighting_fractions_add_up(self) -> "MeasureArguments":
        total = self.pct_inc_lts + self.pct_mh_lts + self.pcf_cfl_lf_lts + self.pct_led_lts
        if abs(total - 100.0) > 1e-6:
            raise ValueError("The lighting type percentages must add up to 100.")
        return self

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> "MeasureArguments":
        """Validate ``data``, raising :class:`ArgumentError` with one message per problem."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            messages = []
            for error in exc.errors():
                location = ".".join(str(part) for part in error["loc"])
                messages.append(f"{location}: {error['msg']}" if location else error["msg"])
            raise ArgumentError(messages) from exc

    @property
    def effective_api_key(self) -> str:
        return normalize_api_key(self.birds_api_key)

    @property
    def hvac_label(self) -> str:
        return PRIMARY_HVAC[self.pri_hvac]

    def user_inputs_table(self) -> List[Tuple[str, Any]]:
        """Rows of the "user inputs" table shown at the top of the report."""
        return [
            ("Building Parameter", "Value (user input)"),
            ("Building Category", self.com_res),
            ("Building Type", self.bldg_type),
            ("State", self.state),
            ("City", self.city),
            ("ZIP Code", self.zip),
            ("Climate Zone", self.climate_zone),
            ("Bedrooms", self.num_bedrooms),
            ("Bathrooms", self.num_bathrooms),
            ("Door Material", self.door_mat),
            ("Incandescent Lights (%)", self.pct_inc_lts),
            ("Metal Halide Lights (%)", self.pct_mh_lts),
            ("Compact Fluorescent Lights (%)", self.pcf_cfl_lf_lts),
            ("LED Lights", self.pct_led_lts),
            ("Foundation Characteristics", self.found_chars),
            ("HVAC System", self.hvac_label),
            ("Photovoltaics - Panels", self.panel_type),
            ("Photovoltaics - Inverters", self.inverter_type),
            ("Photovoltaics - Source Country", self.panel_country),
            ("Solar Thermal - Type", self.solar_thermal_sys_type),
            ("Solar Thermal - Collector Type", self.solar_thermal_collector_type),
            ("Solar Thermal - Loop Type", self.solar_thermal_loop_type),
            ("HVAC Ductwork - Fraction Inside", self.pct_ductwork_inside),
            ("HVAC Ductwork - Type", self.ductwork),
            ("Clothes Washer", self.appliance_clothes_washer),
            ("Clothes Dryer", self.appliance_clothes_dryer),
            ("Cooking Range", self.appliance_cooking_range),
            ("Dishwasher", self.appliance_dishwasher),
            ("Refrigerator", self.appliance_frig),
            ("Freezer", self.appliance_freezer),
            ("Operational Energy LCIA Data", self.oper_energy_lcia),
            ("Study Period", self.study_period),
        ]


def _argument_type(annotation: Any) -> Tuple[str, Optional[List[Any]]]:
    if get_origin(annotation) is Literal:
        return "Choice", list(get_args(annotation))
    if annotation is int:
        return "Integer", None
    if annotation is float:
        return "Double", None
    return "String", None


def describe_arguments() -> List[Dict[str, Any]]:
    """Name, display name, type, default and choices of every measure argument."""
    described = []
    for name, field in MeasureArguments.model_fields.items():
        kind, choices = _argument_type(field.annotation)
        described.append(
            {
                "name": name,
                "display_name": field.title or name,
                "type": kind,
                "default": field.default,
                "choices": choices,
            }
        )
    return described
