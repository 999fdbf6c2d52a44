"""
Short checks on a flattened layout.

Nets are resolved through the schematic bindings of every level, so two
fragments of the same top-level net never count as a short even when
they were drawn in different tiles.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import List

import shapely

from strongarm.layout.cell import LayoutCell
from strongarm.layout.shape import Shape


@dataclass(frozen=True)
class Short:
    """Two touching shapes of different nets on one conducting layer."""
    layer: str
    a: Shape
    b: Shape

    @property
    def net_a(self) -> str:
        return self.a.net

    @property
    def net_b(self) -> str:
        return self.b.net

    def __str__(self):
        return (f"short on {self.layer}: '{self.a.net}' ({self.a.source or '?'}) "
                f"touches '{self.b.net}' ({self.b.source or '?'})")


@dataclass
class ShortCheckResult:
    shorts: List[Short] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.shorts

    def summary(self) -> str:
        if self.clean:
            return 'No shorts detected.'
        return '\n'.join([f'{len(self.shorts)} short(s) detected:'] + [f'  {s}' for s in self.shorts])

    def __str__(self):
        return self.summary()


def check_shorts(cell: LayoutCell) -> ShortCheckResult:
    """
    Report one short per (layer, net pair).

    Unlabelled shapes and shapes on non-conducting layers are ignored.
    Touching counts as overlapping.
    """
    by_layer = defaultdict(list)
    for shape in cell.get_all_shapes(resolve_nets=True):
        if shape.layer.connectivity and shape.net is not None:
            by_layer[shape.layer.name].append(shape)

    result = ShortCheckResult()
    reported = set()
    for layer, shapes in by_layer.items():
        tree = shapely.STRtree([shape.geometry for shape in shapes])
        hits = tree.query([shape.geometry for shape in shapes], predicate='intersects')
        for i, j in sorted(zip(*hits.tolist())):
            a, b = shapes[i], shapes[j]
            if i >= j or a.net == b.net:
                continue
            pair = (layer, frozenset((a.net, b.net)))
            if pair in reported:
                continue
            reported.add(pair)
            result.shorts.append(Short(layer, a, b))
    return result
