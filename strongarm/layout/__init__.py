"""
Layout model - shapes, transforms, cells and ports in integer nm.
"""

from strongarm.layout.shape import Layer, Shape
from strongarm.layout.transform import Transform, Orientation
from strongarm.layout.pin import Pin
from strongarm.layout.route import Route, simplify
from strongarm.layout.cell import LayoutCell, ALIGN_MODES, rect_align_delta
from strongarm.layout.port import Port
from strongarm.layout.connectivity import check_shorts, Short, ShortCheckResult

__all__ = [
    'Layer',
    'Shape',
    'Transform',
    'Orientation',
    'Pin',
    'Route',
    'simplify',
    'LayoutCell',
    'ALIGN_MODES',
    'rect_align_delta',
    'Port',
    'check_shorts',
    'Short',
    'ShortCheckResult',
]
