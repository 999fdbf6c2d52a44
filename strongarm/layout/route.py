"""
Manhattan wires.

A route is a polyline of horizontal and vertical segments on one layer.
Each segment is drawn as a rectangle that overshoots both of its end
points by half the wire width, so corners and via landings are covered.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from strongarm.layout.shape import Layer

if TYPE_CHECKING:
    from strongarm.layout.cell import LayoutCell


def simplify(points: Sequence[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Drop repeated points and the inner points of straight runs."""
    out: List[Tuple[int, int]] = []
    for p in points:
        p = tuple(p)
        if out and out[-1] == p:
            continue
        if len(out) >= 2:
            (ax, ay), (bx, by) = out[-2], out[-1]
            if (ax == bx == p[0]) or (ay == by == p[1]):
                out[-1] = p
                continue
        out.append(p)
    return out


class Route:
    """A wire on a single layer through a list of waypoints."""

    def __init__(self, points: Sequence[Tuple[int, int]], layer: Layer, width: int,
                 net: Optional[str] = None):
        if len(points) < 2:
            raise ValueError('A route needs at least two points')
        self.points = [tuple(p) for p in points]
        self.layer = layer
        self.width = width
        self.net = net

    def segments(self) -> List[Tuple[int, int, int, int]]:
        """Rectangle of every segment."""
        hw = self.width // 2
        rects = []
        for (x0, y0), (x1, y1) in zip(self.points, self.points[1:]):
            if x0 != x1 and y0 != y1:
                raise ValueError(f'Diagonal segment from ({x0}, {y0}) to ({x1}, {y1})')
            rects.append((min(x0, x1) - hw, min(y0, y1) - hw, max(x0, x1) + hw, max(y0, y1) + hw))
        return rects

    def draw(self, cell: 'LayoutCell') -> 'Route':
        for rect in self.segments():
            cell.add_rect(self.layer, *rect, net=self.net)
        return self

    @property
    def length(self) -> int:
        return sum(abs(x1 - x0) + abs(y1 - y0) for (x0, y0), (x1, y1) in zip(self.points, self.points[1:]))

    def __len__(self) -> int:
        return len(self.points) - 1

    def __repr__(self):
        return f'Route({self.net}, {self.layer}, {self.points})'
