"""Read-only view of an EnergyPlus epJSON building model.

The payload builders only need a handful of things from the model: object
lookup by type and name, surface geometry, zones with their conditioning state
and a story breakdown. ``BuildingModel`` provides exactly that on top of the
plain epJSON dictionary, keeping field access tolerant of the small naming
differences between EnergyPlus versions.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from birds_nest.errors import ModelInputError

logger = logging.getLogger(__name__)

Vertex = Tuple[float, float, float]

M_TO_FT = 3.28084
M2_TO_FT2 = 10.7639
M3_TO_GAL = 264.1721
GJ_TO_KWH = 277.778

# Geometry objects that carry an explicit vertex list. The simplified
# ``*:Detailed`` objects imply the surface type through their class.
_SURFACE_TYPES = {
    "BuildingSurface:Detailed": None,
    "Wall:Detailed": "Wall",
    "RoofCeiling:Detailed": "Roof",
    "Floor:Detailed": "Floor",
}

_STORY_TOLERANCE_M = 0.1


def first_of(fields: Dict[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first present field among ``names``."""
    for name in names:
        if name in fields and fields[name] not in (None, ""):
            return fields[name]
    return default


def as_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """Convert an epJSON numeric field, treating Autosize/Autocalculate as missing."""
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def newell_normal(vertices: Sequence[Vertex]) -> Tuple[float, float, float]:
    nx = ny = nz = 0.0
    count = len(vertices)
    for i in range(count):
        x1, y1, z1 = vertices[i]
        x2, y2, z2 = vertices[(i + 1) % count]
        nx += (y1 - y2) * (z1 + z2)
        ny += (z1 - z2) * (x1 + x2)
        nz += (x1 - x2) * (y1 + y2)
    return nx, ny, nz


def polygon_area(vertices: Sequence[Vertex]) -> float:
    if len(vertices) < 3:
        return 0.0
    nx, ny, nz = newell_normal(vertices)
    return 0.5 * math.sqrt(nx * nx + ny * ny + nz * nz)


@dataclass(frozen=True)
class _Polygon:
    name: str
    vertices: Tuple[Vertex, ...]

    @property
    def gross_area(self) -> float:
        return polygon_area(self.vertices)

    @property
    def z_min(self) -> float:
        return min(v[2] for v in self.vertices) if self.vertices else 0.0

    @property
    def z_max(self) -> float:
        return max(v[2] for v in self.vertices) if self.vertices else 0.0

    @property
    def height(self) -> float:
        return self.z_max - self.z_min

    @property
    def tilt(self) -> float:
        """Angle between the outward normal and the zenith, in degrees."""
        nx, ny, nz = newell_normal(self.vertices)
        length = math.sqrt(nx * nx + ny * ny + nz * nz)
        if length == 0:
            return 0.0
        return math.degrees(math.acos(max(-1.0, min(1.0, nz / length))))

    def horizontal_span(self) -> float:
        """Longest side of the polygon's bounding box in plan, in metres."""
        if not self.vertices:
            return 0.0
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        return max(max(xs) - min(xs), max(ys) - min(ys))


@dataclass(frozen=True)
class SubSurface(_Polygon):
    surface_type: str = "Window"
    building_surface: str = ""
    construction: str = ""
    multiplier: float = 1.0

    @property
    def area(self) -> float:
        return self.gross_area * self.multiplier


@dataclass(frozen=True)
class Surface(_Polygon):
    surface_type: str = "Wall"
    zone: str = ""
    outside_boundary_condition: str = "Outdoors"
    outside_boundary_condition_object: str = ""
    construction: str = ""
    sub_surfaces: Tuple[SubSurface, ...] = ()

    @property
    def area(self) -> float:
        """Net area, without the windows and doors cut into the surface."""
        return max(0.0, self.gross_area - sum(s.area for s in self.sub_surfaces))

    @property
    def is_ground(self) -> bool:
        return self.outside_boundary_condition.lower().startswith(("ground", "foundation"))

    @property
    def is_exterior(self) -> bool:
        return self.outside_boundary_condition.lower() == "outdoors"


@dataclass
class Zone:
    name: str
    multiplier: float = 1.0
    floor_area: float = 0.0
    volume: float = 0.0
    conditioned: bool = False
    surfaces: List[Surface] = field(default_factory=list)

    @property
    def exterior_wall_area(self) -> float:
        return sum(s.gross_area for s in self.surfaces if s.surface_type == "Wall" and s.is_exterior)

    @property
    def floor_elevation(self) -> float:
        floors = [s.z_min for s in self.surfaces if s.surface_type == "Floor"]
        if floors:
            return min(floors)
        return min((s.z_min for s in self.surfaces), default=0.0)


@dataclass
class Story:
    elevation: float
    zones: List[Zone] = field(default_factory=list)

    @property
    def name(self) -> str:
        return f"Story at {self.elevation:.1f} m"

    @property
    def conditioned(self) -> bool:
        return any(z.conditioned for z in self.zones)

    @property
    def ground_walls(self) -> List[Surface]:
        return [
            s
            for z in self.zones
            for s in z.surfaces
            if s.surface_type == "Wall" and s.is_ground
        ]


class BuildingModel:
    """Typed access to the objects of an epJSON document."""

    def __init__(self, document: Dict[str, Any], weather_country: str = "USA") -> None:
        self.document = document
        self.weather_country = weather_country
        self._surfaces: Optional[List[Surface]] = None
        self._zones: Optional[Dict[str, Zone]] = None

    @classmethod
    def from_epjson(
        cls, path: Union[str, Path], weather_path: Optional[Union[str, Path]] = None
    ) -> "BuildingModel":
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
        except FileNotFoundError as exc:
            raise ModelInputError("Building model not found", str(path)) from exc
        except json.JSONDecodeError as exc:
            raise ModelInputError(f"Building model is not valid epJSON ({exc.msg})", str(path)) from exc
        if not isinstance(document, dict):
            raise ModelInputError("Building model is not an epJSON object", str(path))

        country = "USA"
        if weather_path is not None:
            country = read_weather_country(weather_path)
        logger.info("Loaded building model %s (%d object types)", path, len(document))
        return cls(document, weather_country=country)

    # ------------------------------------------------------------------ #
    # Generic object access
    # ------------------------------------------------------------------ #

    def objects(self, type_name: str) -> Dict[str, Dict[str, Any]]:
        return self.document.get(type_name) or {}

    def object(self, type_name: str, name: str) -> Optional[Dict[str, Any]]:
        objs = self.objects(type_name)
        if name in objs:
            return objs[name]
        lowered = name.lower()
        for key, fields in objs.items():
            if key.lower() == lowered:
                return fields
        return None

    def find_object(self, type_names: Iterable[str], name: str) -> Optional[Tuple[str, Dict[str, Any]]]:
        """Look ``name`` up across several object types, returning ``(type, fields)``."""
        for type_name in type_names:
            fields = self.object(type_name, name)
            if fields is not None:
                return type_name, fields
        return None

    # ------------------------------------------------------------------ #
    # Geometry
    # ------------------------------------------------------------------ #

    @property
    def surfaces(self) -> List[Surface]:
        if self._surfaces is None:
            self._surfaces = self._load_surfaces()
        return self._surfaces

    @property
    def sub_surfaces(self) -> List[SubSurface]:
        return [sub for surf in self.surfaces for sub in surf.sub_surfaces]

    def surface(self, name: str) -> Optional[Surface]:
        lowered = name.lower()
        for surf in self.surfaces:
            if surf.name.lower() == lowered:
                return surf
        return None

    def any_surface_area(self, name: str) -> Optional[float]:
        """Gross area of a shading or building surface, used by collectors and panels."""
        for type_name in ("Shading:Building:Detailed", "Shading:Site:Detailed", "Shading:Zone:Detailed"):
            fields = self.object(type_name, name)
            if fields is not None:
                return polygon_area(_listed_vertices(fields))
        surf = self.surface(name)
        return surf.gross_area if surf is not None else None

    def _load_sub_surfaces(self) -> Dict[str, List[SubSurface]]:
        by_parent: Dict[str, List[SubSurface]] = {}
        for name, fields in self.objects("FenestrationSurface:Detailed").items():
            vertices = _numbered_vertices(fields)
            sub = SubSurface(
                name=name,
                vertices=vertices,
                surface_type=fields.get("surface_type", "Window"),
                building_surface=fields.get("building_surface_name", ""),
                construction=fields.get("construction_name", ""),
                multiplier=as_float(fields.get("multiplier"), 1.0) or 1.0,
            )
            by_parent.setdefault(sub.building_surface.lower(), []).append(sub)
        return by_parent

    def _load_surfaces(self) -> List[Surface]:
        subs = self._load_sub_surfaces()
        surfaces: List[Surface] = []
        for type_name, implied_type in _SURFACE_TYPES.items():
            for name, fields in self.objects(type_name).items():
                surface_type = implied_type or fields.get("surface_type", "Wall")
                if implied_type == "Roof" and fields.get("outside_boundary_condition", "Outdoors") != "Outdoors":
                    surface_type = "Ceiling"
                surfaces.append(
                    Surface(
                        name=name,
                        vertices=_listed_vertices(fields),
                        surface_type=surface_type,
                        zone=first_of(fields, "zone_name", "zone_or_space_name", default=""),
                        outside_boundary_condition=fields.get("outside_boundary_condition", "Outdoors"),
                        outside_boundary_condition_object=fields.get("outside_boundary_condition_object", ""),
                        construction=fields.get("construction_name", ""),
                        sub_surfaces=tuple(subs.get(name.lower(), [])),
                    )
                )
        return surfaces

    # ------------------------------------------------------------------ #
    # Zones and stories
    # ------------------------------------------------------------------ #

    @property
    def zones(self) -> Dict[str, Zone]:
        if self._zones is None:
            self._zones = self._load_zones()
        return self._zones

    def conditioned_zone_names(self) -> set:
        names = set()
        for fields in self.objects("ZoneHVAC:EquipmentConnections").values():
            zone = fields.get("zone_name")
            if zone:
                names.add(zone.lower())
        for fields in self.objects("ZoneControl:Thermostat").values():
            target = first_of(fields, "zone_or_zonelist_name", "zone_or_zonelist_or_space_or_spacelist_name")
            for zone in self.expand_zone_list(target):
                names.add(zone.lower())
        return names

    def expand_zone_list(self, name: Optional[str]) -> List[str]:
        """Resolve a zone or ZoneList name into zone names."""
        if not name:
            return []
        zone_list = self.object("ZoneList", name)
        if zone_list is None:
            return [name]
        return [entry.get("zone_name") for entry in zone_list.get("zones", []) if entry.get("zone_name")]

    def _load_zones(self) -> Dict[str, Zone]:
        conditioned = self.conditioned_zone_names()
        zones: Dict[str, Zone] = {}
        for name, fields in self.objects("Zone").items():
            zones[name.lower()] = Zone(
                name=name,
                multiplier=as_float(fields.get("multiplier"), 1.0) or 1.0,
                conditioned=name.lower() in conditioned,
            )
        for surf in self.surfaces:
            zone = zones.get(surf.zone.lower())
            if zone is None:
                logger.warning("Surface %s references unknown zone %s", surf.name, surf.zone)
                continue
            zone.surfaces.append(surf)

        for name, fields in self.objects("Zone").items():
            zone = zones[name.lower()]
            floor_area = as_float(fields.get("floor_area"))
            if floor_area is None:
                floor_area = sum(s.gross_area for s in zone.surfaces if s.surface_type == "Floor")
            zone.floor_area = floor_area
            volume = as_float(fields.get("volume"))
            if volume is None:
                height = as_float(fields.get("ceiling_height"))
                if height is None and zone.surfaces:
                    height = max(s.z_max for s in zone.surfaces) - min(s.z_min for s in zone.surfaces)
                volume = floor_area * (height or 0.0)
            zone.volume = volume
        return zones

    def zone(self, name: str) -> Optional[Zone]:
        return self.zones.get(name.lower())

    def stories(self) -> List[Story]:
        """Zones grouped by floor elevation, lowest first."""
        stories: List[Story] = []
        for zone in sorted(self.zones.values(), key=lambda z: z.floor_elevation):
            elevation = round(zone.floor_elevation, 1)
            if stories and abs(stories[-1].elevation - elevation) <= _STORY_TOLERANCE_M:
                stories[-1].zones.append(zone)
            else:
                stories.append(Story(elevation=elevation, zones=[zone]))
        return stories

    def conditioned_floor_area(self) -> float:
        return sum(z.floor_area * z.multiplier for z in self.zones.values() if z.conditioned)

    # ------------------------------------------------------------------ #
    # Loops
    # ------------------------------------------------------------------ #

    def branch_components(self, branch_list_name: Optional[str]) -> List[Tuple[str, str]]:
        """``(object type, name)`` of every component on the branches of a BranchList."""
        if not branch_list_name:
            return []
        branch_list = self.object("BranchList", branch_list_name)
        if branch_list is None:
            return []
        components: List[Tuple[str, str]] = []
        for entry in branch_list.get("branches", []):
            branch = self.object("Branch", entry.get("branch_name", ""))
            if branch is None:
                continue
            for comp in branch.get("components", []):
                components.append((comp.get("component_object_type", ""), comp.get("component_name", "")))
        return components

    def plant_loop_components(self, loop_name: str) -> Dict[str, List[Tuple[str, str]]]:
        loop = self.object("PlantLoop", loop_name) or {}
        return {
            "supply": self.branch_components(loop.get("plant_side_branch_list_name")),
            "demand": self.branch_components(loop.get("demand_side_branch_list_name")),
        }

    def air_loop_components(self, loop_name: str) -> List[Tuple[str, str]]:
        loop = self.object("AirLoopHVAC", loop_name) or {}
        return self.branch_components(loop.get("branch_list_name"))


def _listed_vertices(fields: Dict[str, Any]) -> Tuple[Vertex, ...]:
    return tuple(
        (
            float(v.get("vertex_x_coordinate", 0.0)),
            float(v.get("vertex_y_coordinate", 0.0)),
            float(v.get("vertex_z_coordinate", 0.0)),
        )
        for v in fields.get("vertices", [])
    )


def _numbered_vertices(fields: Dict[str, Any]) -> Tuple[Vertex, ...]:
    vertices = []
    for i in range(1, 5):
        x = fields.get(f"vertex_{i}_x_coordinate")
        if x is None:
            continue
        vertices.append(
            (float(x), float(fields.get(f"vertex_{i}_y_coordinate", 0.0)), float(fields.get(f"vertex_{i}_z_coordinate", 0.0)))
        )
    return tuple(vertices)


def read_weather_country(path: Union[str, Path]) -> str:
    """Country field of an EPW ``LOCATION`` header, ``USA`` when unavailable."""
    try:
        with Path(path).open("r", encoding="utf-8", errors="replace") as handle:
            header = handle.readline()
    except OSError:
        logger.warning("Cannot read weather file %s; defaulting country to USA", path)
        return "USA"
    parts = [p.strip() for p in header.split(",")]
    if len(parts) > 3 and parts[0].upper() == "LOCATION" and parts[3]:
        return parts[3]
    return "USA"
