"""Pins: the access shape of each tile port, recorded when a tile is finished."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from strongarm.layout.shape import Bounds, Layer, Shape

if TYPE_CHECKING:
    from strongarm.layout.cell import LayoutCell


@dataclass(frozen=True)
class Pin:
    name: str
    cell: 'LayoutCell'
    shape: Shape

    @property
    def layer(self) -> Layer:
        return self.shape.layer

    @property
    def bounds(self) -> Bounds:
        return self.shape.bounds

    def __repr__(self):
        return f'Pin({self.name}, {self.layer}, {self.bounds})'
