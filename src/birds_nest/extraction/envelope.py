"""Envelope inventory: walls, roofs and attics, foundations and frame floors."""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from birds_nest.extraction.construction import (
    RSI_TO_R,
    ConstructionInfo,
    air_barrier,
    deck_type,
    floor_covering,
    framing_material,
    framing_size,
    framing_spacing,
    insulations,
    interior_finish,
    load_construction,
    roof_type,
    siding,
    vapor_barrier,
    wall_type,
)
from birds_nest.extraction.model import M2_TO_FT2, M_TO_FT, BuildingModel, SubSurface, Surface, as_float
from birds_nest.extraction.results import SimulationResults
from birds_nest.models.arguments import MeasureArguments

logger = logging.getLogger(__name__)

DOOR_MATERIALS = {
    "Uninsulated Fiberglass": "UNINSULATED_FIBERGLASS",
    "Insulated Fiberglass": "INSULATED_FIBERGLASS",
    "Uninsulated Metal (Aluminum)": "UNINSULATED_METAL_ALUMINUM",
    "Insulated Metal (Aluminum)": "INSULATED_METAL_ALUMINUM",
    "Uninsualted Metal (Steel)": "UNINSULATED_METAL_STEEL",
    "Insulated Metal (Steel)": "INSULATED_METAL_STEEL",
    "Solid Wood": "SOLID_WOOD",
    "Hollow Wood": "HOLLOW_WOOD",
    "Glass": "GLASS",
    "Other": "NONE",
}

FOUNDATION_TYPES = {
    "Slab On/In Grade": "SLAB_ON_GRADE",
    "Basement": "BASEMENT_CONDITIONED",
    "Crawlspace": "CRAWLSPACE_VENTED",
}

# R-value per inch of the rigid EPS board assumed for user-specified foundation insulation
FOUNDATION_R_PER_IN = 5

_PSI = re.compile(r"(\d{4})\s*psi", re.IGNORECASE)
_SLAB_R = re.compile(r"Slab R-(\d+)")
_WALL_R = re.compile(r"Wall R-(\d+)")
_GRADE_SLAB = re.compile(r"R-(\d+) (\d+) ft")
_CRAWL_R = re.compile(r"Crawlspace, R-(\d+)")

_SKIPPED_BOUNDARIES = ("adiabatic",)


@dataclass(frozen=True)
class FoundationChoice:
    """Parsed ``found_chars`` value."""

    foundation_type: str
    slab_r: float = 0.0
    slab_depth_ft: float = 0.0
    wall_r: float = 0.0


def parse_foundation_choice(found_chars: str) -> FoundationChoice:
    kind = found_chars.split(",")[0].strip()
    foundation_type = FOUNDATION_TYPES.get(kind, "OTHER_FOUNDATION_TYPE")
    if kind == "Slab On/In Grade":
        match = _GRADE_SLAB.search(found_chars)
        if match:
            return FoundationChoice(foundation_type, slab_r=float(match.group(1)), slab_depth_ft=float(match.group(2)))
        return FoundationChoice(foundation_type)
    if kind == "Crawlspace":
        match = _CRAWL_R.search(found_chars)
        return FoundationChoice(foundation_type, wall_r=float(match.group(1)) if match else 0.0)
    slab = _SLAB_R.search(found_chars)
    wall = _WALL_R.search(found_chars)
    return FoundationChoice(
        foundation_type,
        slab_r=float(slab.group(1)) if slab else 0.0,
        wall_r=float(wall.group(1)) if wall else 0.0,
    )


def _user_insulation(r_value: float, location: str) -> Dict[str, Any]:
    return {
        "insulationMaterial": "RIGID_EPS",
        "insulationThickness": round(r_value / FOUNDATION_R_PER_IN, 1),
        "insulationNominalRValue": round(r_value, 1),
        "insulationInstallationType": "CONTINUOUS",
        "insulationLocation": location,
    }


def compressive_strength(info: ConstructionInfo) -> str:
    layer = info.structural_layer
    match = _PSI.search(layer.name) if layer is not None else None
    if not match:
        return "UNSPECIFIED_CONCRETE_COMPRESSIVE_STRENGTH"
    psi = int(match.group(1))
    for limit, label in ((2750, "_2500_PSI"), (3500, "_3000_PSI"), (4500, "_4000_PSI"), (5500, "_5000_PSI"), (7000, "_6000_PSI")):
        if psi < limit:
            return label
    return "_8000_PSI"


def concrete_value(info: ConstructionInfo, reinforcement: str) -> Dict[str, Any]:
    if wall_type(info) not in ("SOLID_CONCRETE", "CONCRETE_MASONRY_UNIT", "INSULATED_CONCRETE_FORMS"):
        return {}
    return {
        "concreteName": info.structural_layer.name,
        "compressiveStrength": compressive_strength(info),
        "reinforcement": reinforcement,
    }


def exterior_adjacent_to(surface: Surface) -> str:
    condition = surface.outside_boundary_condition.lower()
    if condition == "outdoors":
        return "AMBIENT"
    if surface.is_ground:
        return "GROUND"
    if condition in ("surface", "zone"):
        return "LIVING_SPACE"
    return "OTHER_EXTERIOR_ADJACENT_TO"


def _adjacent_zone(model: BuildingModel, surface: Surface) -> Optional[str]:
    condition = surface.outside_boundary_condition.lower()
    if condition == "zone":
        return surface.outside_boundary_condition_object
    if condition == "surface":
        other = model.surface(surface.outside_boundary_condition_object)
        return other.zone if other is not None else None
    return None


def _is_envelope(model: BuildingModel, surface: Surface, seen: Set[str]) -> bool:
    """Outdoor surfaces plus interzone surfaces that separate conditioned from unconditioned space."""
    condition = surface.outside_boundary_condition.lower()
    if surface.is_ground or condition in _SKIPPED_BOUNDARIES:
        return False
    if condition in ("surface", "zone"):
        if surface.outside_boundary_condition_object.lower() in seen:
            return False
        other_zone = model.zone(_adjacent_zone(model, surface) or "")
        this_zone = model.zone(surface.zone)
        if other_zone is None or this_zone is None or other_zone.conditioned == this_zone.conditioned:
            return False
    seen.add(surface.name.lower())
    return True


def _glazing(model: BuildingModel, results: SimulationResults, sub: SubSurface) -> Dict[str, float]:
    values = {
        "u": results.fenestration_value(sub.name, "Glass U-Factor"),
        "shgc": results.fenestration_value(sub.name, "Glass SHGC"),
        "vt": results.fenestration_value(sub.name, "Glass Visible Transmittance"),
    }
    if any(v is None for v in values.values()):
        construction = model.object("Construction", sub.construction) or {}
        simple = model.object("WindowMaterial:SimpleGlazingSystem", construction.get("outside_layer", "")) or {}
        fallback = {
            "u": as_float(simple.get("u_factor")),
            "shgc": as_float(simple.get("solar_heat_gain_coefficient")),
            "vt": as_float(simple.get("visible_transmittance")),
        }
        values = {key: value if value is not None else fallback[key] for key, value in values.items()}
    return {key: value if value is not None else 0.0 for key, value in values.items()}


def window_entry(model: BuildingModel, results: SimulationResults, sub: SubSurface) -> Dict[str, Any]:
    glazing = _glazing(model, results, sub)
    return {
        "name": sub.name,
        "operable": "operable" in sub.name.lower(),
        "area": round(sub.area * M2_TO_FT2, 4),
        "height": round(sub.height * M_TO_FT, 4),
        "quantity": 1,
        "frameType": "NONE_FRAME_TYPE",
        "glassLayer": "NONE_GLASS_LAYERS",
        "glassType": "NONE_GLASS_TYPE",
        "gasFill": "NONE_GAS_FILL",
        "shgc": round(glazing["shgc"], 4),
        "visualTransmittance": round(glazing["vt"], 4),
        "uFactor": round(glazing["u"] / RSI_TO_R, 4),
    }


def door_entry(sub: SubSurface, args: MeasureArguments) -> Dict[str, Any]:
    material = DOOR_MATERIALS.get(args.door_mat, "NONE")
    return {
        "name": sub.name,
        "type": "EXTERIOR",
        "material": material,
        "percentGlazing": 0.99 if material == "GLASS" else 0,
        "area": round(sub.area * M2_TO_FT2, 2),
        "height": round(sub.height * M_TO_FT, 2),
        "quantity": 1,
    }


def _openings(model: BuildingModel, results: SimulationResults, surface: Surface, args: MeasureArguments):
    windows: List[Dict[str, Any]] = []
    doors: List[Dict[str, Any]] = []
    for sub in surface.sub_surfaces:
        kind = sub.surface_type.lower()
        if kind in ("window", "glassdoor"):
            windows.append(window_entry(model, results, sub))
        elif kind == "door":
            doors.append(door_entry(sub, args))
    return windows, doors


def get_walls(model: BuildingModel, results: SimulationResults, args: MeasureArguments) -> List[Dict[str, Any]]:
    walls: List[Dict[str, Any]] = []
    seen: Set[str] = set()
    for surface in model.surfaces:
        if surface.surface_type != "Wall" or not _is_envelope(model, surface, seen):
            continue
        info = load_construction(model, surface.construction)
        adjacent = exterior_adjacent_to(surface)
        windows, doors = _openings(model, results, surface, args)
        walls.append(
            {
                "wallName": surface.name,
                "wallType": wall_type(info),
                "wallThickness": round(info.thickness_in, 2),
                "exteriorAdjacentTo": adjacent,
                "wallSiding": "OTHER_SIDING" if adjacent == "LIVING_SPACE" else siding(info),
                "wallInteriorFinish": interior_finish(info),
                "studsSpacing": framing_spacing(info),
                "studsFramingFactor": None,
                "studsSize": framing_size(info),
                "wallArea": round(surface.area * M2_TO_FT2, 2),
                "wallHeight": round(surface.height * M_TO_FT, 2),
                "cltValues": {},
                "concreteValue": concrete_value(info, "REBAR_NO_5"),
                "vaporBarrier": vapor_barrier(info),
                "airBarrier": air_barrier(info),
                "insulations": insulations(info),
                "windows": windows,
                "doors": doors,
            }
        )
    return walls


def roof_pitch(surface: Surface) -> float:
    """Rise over a 12 unit run."""
    tilt = min(surface.tilt, 89.0)
    return math.tan(math.radians(tilt)) * 12


def get_attics_and_roofs(model: BuildingModel, results: SimulationResults, args: MeasureArguments) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    for zone in model.zones.values():
        roofs = [s for s in zone.surfaces if s.surface_type == "Roof" and s.is_exterior]
        if not roofs:
            continue
        floors = [s for s in zone.surfaces if s.surface_type == "Floor" and not s.is_ground]
        main = max(roofs, key=lambda s: s.gross_area)
        info = load_construction(model, main.construction)
        barrier = air_barrier(info) or vapor_barrier(info) != "NO_BARRIER"
        floor_insulations: List[Dict[str, Any]] = []
        for floor in floors:
            floor_insulations.extend(insulations(load_construction(model, floor.construction)))
        skylights = []
        for roof in roofs:
            for sub in roof.sub_surfaces:
                if sub.surface_type.lower() in ("window", "skylight", "tubulardaylightdome"):
                    skylight = window_entry(model, results, sub)
                    skylight.pop("quantity")
                    skylights.append(skylight)

        entries.append(
            {
                "atticAndRoofName": zone.name,
                "deckType": deck_type(info),
                "roofType": roof_type(info),
                "radiantBarrier": barrier,
                "roofArea": round(sum(r.area for r in roofs) * M2_TO_FT2, 2),
                "raftersSize": framing_size(info),
                "raftersMaterials": "METAL_RAFTER" if framing_material(info) == "METAL" else "WOOD_RAFTER",
                "pitch": round(max(roof_pitch(r) for r in roofs), 1),
                "roofSpan": round(max(r.horizontal_span() for r in roofs) * M_TO_FT, 2),
                "atticType": args.attic_type,
                "atticArea": round(zone.floor_area * M2_TO_FT2, 2),
                "atticLength": round(max((f.horizontal_span() for f in floors), default=0.0) * M_TO_FT, 2),
                "atticFloorInsulations": floor_insulations,
                "atticRoofInsulations": insulations(info),
                "atticCeilingInsulations": [],
                "skyLights": skylights,
            }
        )
    return entries


def _perimeter(surface: Surface) -> float:
    vertices = surface.vertices
    total = 0.0
    for i, (x1, y1, z1) in enumerate(vertices):
        x2, y2, z2 = vertices[(i + 1) % len(vertices)]
        total += math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2 + (z2 - z1) ** 2)
    return total


def get_foundations(model: BuildingModel, args: MeasureArguments) -> List[Dict[str, Any]]:
    choice = parse_foundation_choice(args.found_chars)
    grade_slab = choice.foundation_type == "SLAB_ON_GRADE"
    foundations: List[Dict[str, Any]] = []
    for surface in model.surfaces:
        if surface.surface_type != "Floor" or not surface.is_ground:
            continue
        info = load_construction(model, surface.construction)
        under_slab = insulations(info)
        perimeter: List[Dict[str, Any]] = []
        if choice.slab_r > 0 and grade_slab:
            perimeter.append(_user_insulation(choice.slab_r, "EXTERIOR"))
        elif choice.slab_r > 0:
            under_slab.append(_user_insulation(choice.slab_r, "EXTERIOR"))
        structure = info.structural_layer
        foundations.append(
            {
                "foundationType": choice.foundation_type,
                "slab": {
                    "slabPerimeterInsulations": perimeter,
                    "slabUnderSlabPerimeterInsulations": [],
                    "slabName": surface.name,
                    "slabArea": round(surface.area * M2_TO_FT2, 1),
                    "slabThickness": round(structure.thickness_in, 1) if structure is not None else 0,
                    "slabPerimeter": round(_perimeter(surface) * M_TO_FT, 1),
                    "slabPerimeterInsulationDepth": choice.slab_depth_ft,
                    "slabUnderSlabInsulationWidth": 0,
                    "slabFloorCovering": floor_covering(info, "NONE"),
                    "slabUnderSlabInsulations": under_slab,
                    "concreteValue": concrete_value(info, "WELDED_WIRE_MESH")
                    or {
                        "concreteName": structure.name if structure is not None else "",
                        "compressiveStrength": "UNSPECIFIED_CONCRETE_COMPRESSIVE_STRENGTH",
                        "reinforcement": "WELDED_WIRE_MESH",
                    },
                },
                "foundationName": surface.zone,
            }
        )
    return foundations


def get_foundation_walls(model: BuildingModel, results: SimulationResults, args: MeasureArguments) -> List[Dict[str, Any]]:
    choice = parse_foundation_choice(args.found_chars)
    walls: List[Dict[str, Any]] = []
    for surface in model.surfaces:
        if surface.surface_type != "Wall" or not surface.is_ground:
            continue
        info = load_construction(model, surface.construction)
        wall_insulations = insulations(info)
        if choice.wall_r > 0:
            wall_insulations.append(_user_insulation(choice.wall_r, "INTERIOR"))
        windows, doors = _openings(model, results, surface, args)
        walls.append(
            {
                "foundationWallName": surface.name,
                "foundationWallType": wall_type(info),
                "foundationWallArea": round(surface.area * M2_TO_FT2, 2),
                "foundationWallHeight": round(surface.height * M_TO_FT, 2),
                "foundationWallThickness": round(info.thickness_in, 2),
                "foundationWallInsulations": wall_insulations,
                "foundationWallInteriorStud": {},
                "concreteValue": concrete_value(info, "REBAR_NO_5"),
                "windows": windows,
                "doors": doors,
            }
        )
    return walls


def get_frame_floors(model: BuildingModel) -> List[Dict[str, Any]]:
    attic_zones = {
        z.name.lower() for z in model.zones.values() if any(s.surface_type == "Roof" and s.is_exterior for s in z.surfaces)
    }
    floors: List[Dict[str, Any]] = []
    seen: Set[str] = set()
    for surface in model.surfaces:
        if surface.surface_type != "Floor" or surface.zone.lower() in attic_zones:
            continue
        if not _is_envelope(model, surface, seen):
            continue
        info = load_construction(model, surface.construction)
        framing = {
            "Spacing": framing_spacing(info),
            "FramingFactor": None,
            "Size": framing_size(info),
            "Material": framing_material(info),
        }
        structure = info.structural_layer
        truss = structure is not None and "truss" in structure.lowered
        floors.append(
            {
                "floorJoist": None if truss else {f"floorJoist{k}": v for k, v in framing.items()},
                "floorTruss": {f"floorTruss{k}": v for k, v in framing.items()} if truss else None,
                "frameFloorInsulations": insulations(info),
                "frameFloorName": surface.name,
                "frameFloorArea": round(surface.area * M2_TO_FT2, 1),
                "frameFloorSpan": round(surface.horizontal_span() * M_TO_FT, 1),
                "frameFloorDeckingType": deck_type(info),
                "frameFloorFloorCovering": floor_covering(info),
            }
        )
    return floors
