"""
Row placement.

Rows are stacked downward from a starting rectangle (the tap boundary).
Each row is a symmetry dummy followed by a device pair, left to right.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from strongarm.errors import ConstructionError
from strongarm.layout.cell import Rect
from strongarm.logging import logger
from strongarm.tile import Instance


@dataclass
class Row:
    """A dummy and the pair of devices to its right."""
    dummy: Instance
    pair: Sequence[Instance]

    def __post_init__(self):
        if len(self.pair) != 2:
            raise ConstructionError('row placement', f'a row holds exactly two paired devices, got {len(self.pair)}')

    @property
    def instances(self) -> list[Instance]:
        return [self.dummy, *self.pair]

    def bounds(self) -> Rect:
        rects = [inst.bounds() for inst in self.instances]
        return (min(r[0] for r in rects), min(r[1] for r in rects),
                max(r[2] for r in rects), max(r[3] for r in rects))


def place_rows(rows: Sequence[Row], origin: Optional[Rect]) -> Rect:
    """
    Place rows top to bottom starting from ``origin``.

    For each row the dummy is left aligned with and placed beneath the
    cursor, then the cursor moves to the dummy. The first device of the
    pair is bottom aligned and placed to the right of the dummy, the second
    to the right of the first.

    Returns:
        The cursor after the last row (the last dummy's bounds).
    """
    if origin is None:
        raise ConstructionError('row placement', 'row placed against an undefined cursor')
    cursor = tuple(origin)
    for i, row in enumerate(rows):
        row.dummy.align(cursor, 'left').align(cursor, 'beneath')
        cursor = row.dummy.bounds()
        left = row.dummy
        for inst in row.pair:
            inst.align(left, 'bottom').align(left, 'to_the_right')
            left = inst
        logger.debug(f'placed row {i} at {row.bounds()}')
    return cursor

