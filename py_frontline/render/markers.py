"""
Map markers and the visualization service they are published to.

The service itself is external; ``MapService`` and ``MapSurface`` describe the
part of it the renderer uses. ``InMemoryMapService`` keeps marker sets in
process for hosts that serve them some other way, and for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Color:
    """RGBA color, written as ``#RRGGBBAA``."""

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        digits = value.lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"Expected #RRGGBB or #RRGGBBAA, got {value!r}")
        try:
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color {value!r}") from None
        return cls(*channels)


class ShapeMarker(BaseModel):
    """Filled polygon with an outline, drawn flat at ``shape_y``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    label: str
    shape: List[Tuple[float, float]] = Field(description="Polygon vertices (x, z)")
    shape_y: float = Field(description="Altitude the polygon is drawn at")
    line_color: Color
    line_width: int = 3
    fill_color: Color
    depth_test_enabled: bool = False


class HtmlMarker(BaseModel):
    """Floating HTML label."""

    model_config = ConfigDict(frozen=True)

    label: str
    position: Tuple[float, float, float]
    html: str
    anchor: Tuple[int, int] = (0, 0)
    min_distance: float = 10
    max_distance: float = 10_000_000
    listed: bool = False


Marker = Union[ShapeMarker, HtmlMarker]


class MarkerSet(BaseModel):
    """A toggleable group of markers keyed by stable string ids."""

    label: str
    toggleable: bool = True
    default_hidden: bool = False
    markers: Dict[str, Marker] = Field(default_factory=dict)


class MapSurface(Protocol):
    id: str
    marker_sets: Dict[str, MarkerSet]


class MapService(Protocol):
    """External visualization service."""

    def is_available(self) -> bool:
        ...

    def get_maps(self) -> List[MapSurface]:
        ...


@dataclass
class InMemoryMap:
    id: str
    marker_sets: Dict[str, MarkerSet] = field(default_factory=dict)


class InMemoryMapService:
    """Visualization service that keeps its maps and markers in memory."""

    def __init__(self, map_ids: Optional[List[str]] = None, available: bool = True):
        self.available = available
        self.maps: List[InMemoryMap] = [InMemoryMap(map_id) for map_id in map_ids or []]

    def is_available(self) -> bool:
        return self.available

    def get_maps(self) -> List[InMemoryMap]:
        return list(self.maps)

    def get_map(self, map_id: str) -> Optional[InMemoryMap]:
        return next((m for m in self.maps if m.id == map_id), None)
