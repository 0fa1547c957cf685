"""Summary characteristics: location, building category and story geometry."""

import logging
from typing import Any, Dict, List

from birds_nest.errors import ModelInputError
from birds_nest.extraction.model import M2_TO_FT2, M_TO_FT, BuildingModel, Story
from birds_nest.models.arguments import MeasureArguments

logger = logging.getLogger(__name__)

API_VERSION = "Version 2.0 Draft"
MAX_STORIES = 2
BASEMENT_MIN_HEIGHT_FT = 6

_SYSTEM_BOUNDARY = {"A-C": "A_C", "A-D": "A_D"}
_CATEGORY = {
    "Commercial": "COMMERCIAL",
    "LowRiseResidential": "LOW_RISE_RESIDENTIAL",
    "NonLowRiseResidential": "NON_LOW_RISE_RESIDENTIAL",
}
_FACILITY_TYPE = {"SingleFamilyDetached": "SINGLE_FAMILY_DETACHED"}
_QUALITY = {"Average": "AVERAGE", "Luxury": "LUXURY", "Custom": "CUSTOM"}


def is_basement(story: Story) -> bool:
    walls = story.ground_walls
    if not walls:
        return False
    height_m = max(w.z_max for w in walls) - min(w.z_min for w in walls)
    return height_m * M_TO_FT > BASEMENT_MIN_HEIGHT_FT


def counted_stories(model: BuildingModel) -> List[Story]:
    """Conditioned, above-grade stories, at most two."""
    stories = model.stories()
    if not stories:
        raise ModelInputError(
            "This building has no stories. Assign each surface to a zone so the LCA calculations can work."
        )
    counted: List[Story] = []
    for story in stories:
        if story.ground_walls:
            logger.info("%s is below grade and is not counted as a story", story.name)
            continue
        if not story.conditioned:
            logger.info("%s is unconditioned and is not counted as a story", story.name)
            continue
        if len(counted) == MAX_STORIES:
            logger.warning(
                "BIRDS only accepts 1 and 2-story homes. %s, conditioned = %s will not be included.",
                story.name,
                story.conditioned,
            )
            continue
        counted.append(story)
    return counted


def building_height_ft(model: BuildingModel) -> float:
    zs = [
        v[2]
        for surf in model.surfaces
        if not surf.is_ground
        for v in surf.vertices
    ]
    if not zs:
        return 0
    return round((max(zs) - min(zs)) * M_TO_FT)


def conditioned_story_areas(stories: List[Story]) -> List[Dict[str, float]]:
    """Per-story conditioned floor area and exterior wall area, in rounded ft2."""
    areas = []
    for story in stories:
        floor_m2 = sum(z.floor_area * z.multiplier for z in story.zones if z.conditioned)
        wall_m2 = sum(z.exterior_wall_area * z.multiplier for z in story.zones if z.conditioned)
        areas.append({"floor": round(floor_m2 * M2_TO_FT2), "wall": round(wall_m2 * M2_TO_FT2)})
    return areas


def conditioned_floor_area_ft2(model: BuildingModel) -> float:
    return sum(a["floor"] for a in conditioned_story_areas(counted_stories(model)))


def get_summary_characteristics(model: BuildingModel, args: MeasureArguments) -> Dict[str, Any]:
    stories = counted_stories(model)
    areas = conditioned_story_areas(stories)
    basement = any(is_basement(story) for story in model.stories())

    return {
        "apiVersion": API_VERSION,
        "referenceStudyPeriod": int(args.study_period),
        "systemBoundary": _SYSTEM_BOUNDARY.get(args.lc_stage, "UNSPECIFIED"),
        "location": {
            "country": model.weather_country,
            "climateZone": "_" + args.climate_zone,
            "cityMunicipality": str(args.city),
            "stateCode": str(args.state),
            "zipCode": str(args.zip),
        },
        "building": {
            "category": _CATEGORY.get(args.com_res, ""),
            "residentialFacilityType": _FACILITY_TYPE.get(args.bldg_type, ""),
            "constructionQuality": _QUALITY.get(args.const_qual, ""),
            "occupancyType": "OWNER_OCCUPIED",
        },
        "numberOfStoriesAboveGrade": len(stories),
        "basement": basement,
        "buildingHeight": building_height_ft(model),
        "conditionedFloorArea": sum(a["floor"] for a in areas),
        "exteriorWallAreas": [{"area": a["wall"]} for a in areas],
        "numberOfBedrooms": args.num_bedrooms,
        "numberOfBathrooms": args.num_bathrooms,
    }
