"""Classify opaque constructions into the envelope vocabulary of the LCIA service.

epJSON constructions carry no standards tags, so the layer roles (structure,
insulation, cladding, finish) are recognised from material names and thermal
properties. Layers are listed from the outside in.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from birds_nest.extraction.model import BuildingModel, as_float

logger = logging.getLogger(__name__)

M_TO_IN = 39.3701
# m2.K/W to ft2.F.h/Btu
RSI_TO_R = 5.678263

_INSULATION_CONDUCTIVITY = 0.06

_INSULATION_WORDS = ("insul", "batt", "foam", "xps", "eps", "polyiso", "cellulose", "fiberglass",
                     "fibreglass", "mineral wool", "rockwool", "rock wool")
_STRUCTURE_WORDS = ("stud", "frame", "framing", "joist", "rafter", "truss", "concrete", "cmu", "block",
                    "masonry", "sip", "icf", "clt", "laminated", "steel", "metal frame")

_STUD_SIZE = re.compile(r"2\s*x\s*(\d+)", re.IGNORECASE)
_ON_CENTER = re.compile(r"(\d+(?:\.\d+)?)\s*(?:in\.?|\")?\s*o\.?c", re.IGNORECASE)
_R_VALUE = re.compile(r"\bR-?\s*(\d+(?:\.\d+)?)", re.IGNORECASE)


@dataclass(frozen=True)
class Layer:
    name: str
    thickness_m: float = 0.0
    r_si: float = 0.0
    conductivity: Optional[float] = None

    @property
    def lowered(self) -> str:
        return self.name.lower()

    @property
    def thickness_in(self) -> float:
        return self.thickness_m * M_TO_IN

    @property
    def r_ip(self) -> float:
        """Nominal R-value in IP units; an ``R-13`` style name wins over the properties."""
        match = _R_VALUE.search(self.name)
        if match:
            return float(match.group(1))
        return self.r_si * RSI_TO_R

    @property
    def is_insulation(self) -> bool:
        if any(word in self.lowered for word in _INSULATION_WORDS):
            return True
        return self.conductivity is not None and self.conductivity <= _INSULATION_CONDUCTIVITY

    @property
    def is_structure(self) -> bool:
        return any(word in self.lowered for word in _STRUCTURE_WORDS)


@dataclass
class ConstructionInfo:
    name: str
    layers: List[Layer] = field(default_factory=list)
    structural_index: Optional[int] = None

    @property
    def thickness_in(self) -> float:
        return sum(layer.thickness_in for layer in self.layers)

    @property
    def structural_layer(self) -> Optional[Layer]:
        if self.structural_index is None:
            return None
        return self.layers[self.structural_index]

    @property
    def exterior_layer(self) -> Optional[Layer]:
        if not self.layers or self.structural_index == 0:
            return None
        return self.layers[0]

    @property
    def interior_layer(self) -> Optional[Layer]:
        if len(self.layers) < 2 or self.structural_index == len(self.layers) - 1:
            return None
        return self.layers[-1]

    @property
    def r_value(self) -> float:
        return sum(layer.r_ip for layer in self.layers)


def load_construction(model: BuildingModel, name: str) -> ConstructionInfo:
    fields = model.object("Construction", name)
    if fields is None:
        logger.warning("Construction %s not found; treating it as empty", name)
        return ConstructionInfo(name=name)
    layer_names = [fields.get("outside_layer")] + [fields.get(f"layer_{i}") for i in range(2, 11)]
    layers = [_load_layer(model, layer_name) for layer_name in layer_names if layer_name]
    info = ConstructionInfo(name=name, layers=layers)
    info.structural_index = _structural_index(layers)
    return info


def _load_layer(model: BuildingModel, name: str) -> Layer:
    found = model.find_object(("Material", "Material:NoMass", "Material:AirGap", "Material:InfraredTransparent"), name)
    if found is None:
        return Layer(name=name)
    type_name, fields = found
    if type_name == "Material":
        thickness = as_float(fields.get("thickness"), 0.0) or 0.0
        conductivity = as_float(fields.get("conductivity"))
        r_si = thickness / conductivity if conductivity else 0.0
        return Layer(name=name, thickness_m=thickness, r_si=r_si, conductivity=conductivity)
    return Layer(name=name, r_si=as_float(fields.get("thermal_resistance"), 0.0) or 0.0)


def _structural_index(layers: List[Layer]) -> Optional[int]:
    for i, layer in enumerate(layers):
        if layer.is_structure:
            return i
    # thickest massive layer
    massive = [(layer.thickness_m, i) for i, layer in enumerate(layers) if not layer.is_insulation and layer.thickness_m > 0]
    if massive:
        return max(massive)[1]
    return None


def wall_type(info: ConstructionInfo) -> str:
    layer = info.structural_layer
    if layer is None:
        return "OTHER_WALL_TYPE"
    name = layer.lowered
    if "cross laminated" in name or "clt" in name:
        return "CROSS_LAMINATED_TIMBER"
    if "sip" in name.split() or "structurally insulated" in name:
        return "STRUCTURALLY_INSULATED_PANEL"
    if "icf" in name or "insulated concrete form" in name:
        return "INSULATED_CONCRETE_FORMS"
    if "cmu" in name or "masonry" in name or "block" in name:
        return "CONCRETE_MASONRY_UNIT"
    if "concrete" in name:
        return "SOLID_CONCRETE"
    if "steel" in name or "metal" in name:
        return "STEEL_FRAME"
    if "wood" in name or "stud" in name or "frame" in name or "framing" in name:
        return "WOOD_STUD"
    return "OTHER_WALL_TYPE"


def is_framed(info: ConstructionInfo) -> bool:
    return wall_type(info) in ("WOOD_STUD", "STEEL_FRAME")


def framing_size(info: ConstructionInfo) -> Optional[str]:
    layer = info.structural_layer
    if layer is None or not is_framed(info):
        return None
    match = _STUD_SIZE.search(layer.name)
    if not match:
        return "OTHER_SIZE"
    size = int(match.group(1))
    if size in (2, 3, 4, 6, 8, 10, 12, 14, 16):
        return f"_2X{size}"
    return "OTHER_SIZE"


def framing_spacing(info: ConstructionInfo) -> Optional[float]:
    layer = info.structural_layer
    if layer is None or not is_framed(info):
        return None
    match = _ON_CENTER.search(layer.name)
    return float(match.group(1)) if match else None


def framing_material(info: ConstructionInfo) -> str:
    return "METAL" if wall_type(info) == "STEEL_FRAME" else "WOOD"


def cavity_insulation_material(name: str, r_per_in: float) -> str:
    name = name.lower()
    if "cellulose" in name:
        return "LOOSE_FILL_CELLULOSE"
    if "glass" in name:
        return "BATT_FIBERGLASS"
    if "mineral" in name or "wool" in name or "rock" in name:
        return "BATT_ROCKWOOL"
    if "cell" in name or "spray" in name or "foam" in name:
        if r_per_in > 5:
            return "SPRAY_FOAM_CLOSED_CELL"
        if r_per_in < 5:
            return "SPRAY_FOAM_OPEN_CELL"
        return "SPRAY_FOAM_UNKNOWN"
    return "BATT_FIBERGLASS"


def rigid_insulation_material(name: str, r_per_in: float) -> str:
    name = name.lower()
    if "xps" in name or "extruded" in name:
        return "RIGID_XPS"
    if "eps" in name or "expanded" in name:
        return "RIGID_EPS"
    if "polyiso" in name:
        return "RIGID_POLYISOCYANURATE"
    if r_per_in < 0.1:
        return "NONE"
    if r_per_in < 4.5:
        return "RIGID_EPS"
    if r_per_in < 5.25:
        return "RIGID_XPS"
    if r_per_in < 7:
        return "RIGID_POLYISOCYANURATE"
    return "RIGID_UNKNOWN"


def _insulation(material: str, thickness: float, r_value: float, installation: str, location: str) -> Dict[str, Any]:
    return {
        "insulationMaterial": material,
        "insulationThickness": round(thickness, 1),
        "insulationNominalRValue": round(r_value, 1),
        "insulationInstallationType": installation,
        "insulationLocation": location,
    }


def insulations(info: ConstructionInfo) -> List[Dict[str, Any]]:
    """Cavity insulation inside framing plus continuous layers on either side."""
    result: List[Dict[str, Any]] = []
    structural = info.structural_index
    for i, layer in enumerate(info.layers):
        r_value = layer.r_ip
        if r_value <= 0:
            continue
        thickness = layer.thickness_in
        r_per_in = r_value / thickness if thickness > 0 else 0.0
        if i == structural:
            if is_framed(info) and (layer.is_insulation or _R_VALUE.search(layer.name)):
                result.append(_insulation(cavity_insulation_material(layer.name, r_per_in), thickness, r_value, "CAVITY", "INTERIOR"))
            continue
        if not layer.is_insulation:
            continue
        location = "EXTERIOR" if structural is None or i < structural else "INTERIOR"
        result.append(_insulation(rigid_insulation_material(layer.name, r_per_in), thickness, r_value, "CONTINUOUS", location))
    return result


def siding(info: ConstructionInfo) -> str:
    layer = info.exterior_layer
    if layer is None:
        return "NONE"
    name = layer.lowered
    if "fiber cement" in name or "fibre cement" in name or "fiberboard" in name:
        return "FIBER_CEMENT_SIDING"
    if "metal" in name or "steel" in name or "aluminum" in name:
        return "STEEL_SIDING"
    if "shingle" in name:
        return "SHINGLES"
    if "asphalt" in name:
        return "OTHER_SIDING"
    if "wood" in name and "siding" in name:
        return "WOOD_SIDING"
    if "synthetic stucco" in name:
        return "SYNTHETIC_STUCCO"
    if "stucco" in name:
        return "STUCCO"
    if "hardboard" in name or "masonite" in name:
        return "MASONITE_SIDING"
    if "vinyl" in name:
        return "VINYL_SIDING"
    if "brick" in name:
        return "BRICK_VENEER"
    if "asbestos" in name:
        return "ASBESTOS_SIDING"
    return "OTHER_SIDING"


def interior_finish(info: ConstructionInfo) -> str:
    layer = info.interior_layer
    if layer is None:
        return "NONE"
    if "gypsum" in layer.lowered or "drywall" in layer.lowered:
        if "5/8" in layer.name or "3/4" in layer.name:
            return "GYPSUM_REGULAR_5_8"
        if "1/2" in layer.name or "3/8" in layer.name or layer.thickness_in < 0.56:
            return "GYPSUM_REGULAR_1_2"
        return "GYPSUM_REGULAR_5_8"
    return "OTHER_FINISH"


def vapor_barrier(info: ConstructionInfo) -> str:
    for layer in info.layers:
        if "vapor" not in layer.lowered:
            continue
        if "6 mil" in layer.lowered or "6mil" in layer.lowered:
            return "POLYETHELYNE_6_MIL"
        if "3 mil" in layer.lowered or "3mil" in layer.lowered:
            return "POLYETHELYNE_3_MIL"
        return "PSK"
    return "NO_BARRIER"


def air_barrier(info: ConstructionInfo) -> bool:
    return any(
        ("membrane" in layer.lowered or "air barrier" in layer.lowered or "wrap" in layer.lowered)
        and "vapor" not in layer.lowered
        for layer in info.layers
    )


def roof_type(info: ConstructionInfo) -> str:
    if not info.layers:
        return "SHINGLES"
    name = info.layers[0].lowered
    if "metal" in name:
        return "METAL_SURFACING"
    if "asphalt" in name and "shingle" in name:
        return "ASPHALT_OR_FIBERGLASS_SHINGLES"
    if "wood shingle" in name or "shake" in name:
        return "WOOD_SHINGLES_OR_SHAKES"
    if "shingle" in name:
        return "SHINGLES"
    if "concrete" in name:
        return "CONCRETE_ROOF"
    if "tile" in name or "slate" in name:
        return "SLATE_OR_TILE_SHINGLES"
    return "OTHER_ROOF_TYPE"


def deck_type(info: ConstructionInfo) -> str:
    for layer in info.layers:
        if "osb" in layer.lowered or "oriented strand" in layer.lowered:
            return "OSB"
        if "plywood" in layer.lowered:
            return "PLYWOOD"
    return "NONE"


def floor_covering(info: ConstructionInfo, none_value: str = "NONE_FRAME_FLOOR_COVERING") -> str:
    if not info.layers:
        return none_value
    name = info.layers[-1].lowered
    if "carpet" in name:
        return "CARPET"
    if "linoleum" in name or "vinyl" in name or "cork" in name:
        return "VINYL"
    if "tile" in name:
        return "TILE"
    if "wood" in name or "plywood" in name:
        return "HARDWOOD"
    return none_value
