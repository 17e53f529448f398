"""
Map marker rendering for the region grid.
"""

from .markers import Color, HtmlMarker, InMemoryMapService, MarkerSet, ShapeMarker
from .region_renderer import RegionRenderer, RenderState
from .scheduler import ScheduledTask, TickScheduler

__all__ = [
    'Color', 'HtmlMarker', 'InMemoryMapService', 'MarkerSet', 'ShapeMarker',
    'RegionRenderer', 'RenderState', 'ScheduledTask', 'TickScheduler',
]
