"""
Layers and shapes.

Every drawn object is a rectangle on a layer, stored as a shapely box so
that transforms and overlap tests come from shapely. Coordinates are
integer nm; bounds are rounded back to integers after transforms.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import shapely
from shapely import box

Bounds = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Layer:
    """
    A mask layer, identified by name and purpose.

    ``connectivity`` marks conductors (diffusion, poly, local interconnect,
    metals and cuts). Only those take part in short checks.
    """
    name: str
    purpose: str = 'drawing'
    connectivity: bool = field(default=False, compare=False)

    def __str__(self):
        return f'{self.name}:{self.purpose}'


@dataclass
class Shape:
    """
    A rectangle on a layer, optionally labelled with the net it carries.

    ``source`` is filled in when a hierarchy is flattened and holds the
    instance path the shape came from.
    """
    geometry: shapely.Geometry
    layer: Layer
    net: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def rect(cls, layer: Layer, x0: int, y0: int, x1: int, y1: int, net: Optional[str] = None) -> 'Shape':
        return cls(box(x0, y0, x1, y1), layer, net)

    @property
    def bounds(self) -> Bounds:
        return tuple(round(v) for v in self.geometry.bounds)

    @property
    def width(self) -> int:
        x0, _, x1, _ = self.bounds
        return x1 - x0

    @property
    def height(self) -> int:
        _, y0, _, y1 = self.bounds
        return y1 - y0

    @property
    def center(self) -> Tuple[int, int]:
        x0, y0, x1, y1 = self.bounds
        return (x0 + x1) // 2, (y0 + y1) // 2

    def key(self) -> Tuple[Layer, Bounds]:
        """Two shapes with the same key are the same fragment."""
        return self.layer, self.bounds

    def transformed(self, transform) -> 'Shape':
        return replace(self, geometry=transform.apply(self.geometry))

    def with_net(self, net: Optional[str]) -> 'Shape':
        return replace(self, net=net)

    def __repr__(self):
        where = f' from {self.source}' if self.source else ''
        return f'Shape({self.layer}, {self.bounds}, net={self.net}{where})'
