"""Appliance inventory built from the user's appliance choices."""

from typing import Any, Dict, List

from birds_nest.models.arguments import MeasureArguments

_DRYER_FUEL = {
    "Electric": "ELECTRICITY",
    "Electric Heat Pump": "ELECTRICITY",
    "Electric Premium": "ELECTRICITY",
    "Gas": "NATURAL_GAS",
    "Gas Premium": "NATURAL_GAS",
    "Propane": "PROPANE",
}

_RANGE_FUEL = {
    "Electric": "ELECTRICITY",
    "Electric Induction": "ELECTRICITY",
    "Gas": "NATURAL_GAS",
    "Propane": "PROPANE",
}

_FRIDGE_TYPE = {
    "BottomFreezer": "BOTTOM_FREEZER",
    "SideFreezer": "SIDE_BY_SIDE",
    "TopFreezer": "TOP_FREEZER",
}

_FREEZER_CONFIGURATION = {"Chest": "CASE", "Upright": "UNCATEGORIZED"}


def clothes_washer(choice: str) -> Dict[str, Any]:
    if choice == "No Clothes Washer":
        return {}
    return {
        "type": "FRONT_LOADER",
        "thirdPartyCertification": "ENERGY_STAR" if choice == "EnergyStar" else "NULL",
        "modifiedEnergyFactor": 0,
        "waterFactor": 0,
        "capacity": 0,
        "numberOfUnits": 1,
    }


def clothes_dryer(choice: str) -> Dict[str, Any]:
    if choice == "No Clothes Dryer":
        return {}
    return {
        "efficiencyFactor": 0,
        "numberOfUnits": 1,
        "type": "DRYER",
        "fuelType": _DRYER_FUEL.get(choice, ""),
        "thirdPartyCertification": "NULL",
    }


def cooking_range(choice: str) -> Dict[str, Any]:
    if choice == "No Cooking Range":
        return {}
    return {
        "isInduction": choice == "Electric Induction",
        "numberOfUnits": 1,
        "fuelType": _RANGE_FUEL.get(choice, "NULL"),
        "thirdPartyCertification": "NULL",
    }


def refrigerator(choice: str) -> Dict[str, Any]:
    """Refrigerator entry from a ``<Type>_EF_<ef>_Cap_<volume>_<certification>`` choice."""
    if choice == "None":
        return {}
    fridge_type, _, efficiency, _, volume, certification = choice.split("_")
    return {
        "type": _FRIDGE_TYPE.get(fridge_type, ""),
        "thirdPartyCertification": "ENERGY_STAR" if certification == "EnergyStar" else "",
        "volume": float(volume),
        "numberOfUnits": 1,
        "ef": float(efficiency),
    }


def dishwasher(choice: str) -> Dict[str, Any]:
    if choice == "No Dishwasher":
        return {}
    return {
        "energyFactor": 0,
        "ratedWaterPerCycle": 0,
        "placeSettingCapacity": 0,
        "numberOfUnits": 1,
        "type": "BUILT_IN_UNDER_COUNTER",
        "fuelType": "ELECTRICITY",
        "thirdPartyCertification": "NULL",
    }


def freezers(choice: str) -> List[Dict[str, Any]]:
    """Freezer list; unlike the other appliances an absent freezer is an empty list."""
    if choice == "No_Freezer":
        return []
    freezer_type, _, efficiency = choice.split("_")
    return [
        {
            "volume": 0,
            "ef": float(efficiency),
            "numberOfUnits": 1,
            "configuration": _FREEZER_CONFIGURATION.get(freezer_type, ""),
            "thirdPartyCertification": "NULL",
        }
    ]


def get_appliances(args: MeasureArguments) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "clothesWashers": [clothes_washer(args.appliance_clothes_washer)],
        "clothesDryers": [clothes_dryer(args.appliance_clothes_dryer)],
        "cookingRanges": [cooking_range(args.appliance_cooking_range)],
        "refrigerators": [refrigerator(args.appliance_frig)],
        "dishWashers": [dishwasher(args.appliance_dishwasher)],
        "freezers": freezers(args.appliance_freezer),
    }
