"""
Placement transforms on the integer nm grid.

A transform mirrors about the x axis, rotates about the origin in steps of
90 degrees, and then translates, in that order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple
import shapely
from shapely import affinity

_COS = {0: 1, 90: 0, 180: -1, 270: 0}
_SIN = {0: 0, 90: 1, 180: 0, 270: -1}


@dataclass(frozen=True)
class Transform:
    x: int = 0
    y: int = 0
    rotation: int = 0
    mirror_x: bool = False

    def __post_init__(self):
        if self.rotation % 90:
            raise ValueError(f'Rotation must be a multiple of 90 degrees, got {self.rotation}')
        object.__setattr__(self, 'rotation', self.rotation % 360)

    def _matrix(self) -> list:
        c, s = _COS[self.rotation], _SIN[self.rotation]
        m = -1 if self.mirror_x else 1
        return [c, -s * m, s, c * m, self.x, self.y]

    def apply(self, geom: shapely.Geometry) -> shapely.Geometry:
        return affinity.affine_transform(geom, self._matrix())

    def apply_point(self, px: int, py: int) -> Tuple[int, int]:
        a, b, d, e, xoff, yoff = self._matrix()
        return a * px + b * py + xoff, d * px + e * py + yoff

    def compose(self, outer: 'Transform') -> 'Transform':
        """The transform equal to applying ``self`` and then ``outer``."""
        # Mirroring reverses the sense of any rotation applied before it
        rotation = outer.rotation + (-self.rotation if outer.mirror_x else self.rotation)
        px, py = outer.apply_point(self.x, self.y)
        return Transform(px, py, rotation % 360, self.mirror_x != outer.mirror_x)

    def translated(self, dx: int, dy: int) -> 'Transform':
        return Transform(self.x + dx, self.y + dy, self.rotation, self.mirror_x)


class Orientation(Enum):
    """Named orientations, each a transform about the origin."""
    R0 = (0, False)
    R90 = (90, False)
    R180 = (180, False)
    R270 = (270, False)
    REFLECT_VERT = (0, True)     # (x, y) -> (x, -y)
    REFLECT_HORIZ = (180, True)  # (x, y) -> (-x, y)

    @property
    def transform(self) -> Transform:
        rotation, mirror = self.value
        return Transform(rotation=rotation, mirror_x=mirror)
