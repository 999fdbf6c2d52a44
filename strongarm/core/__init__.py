"""
Schematic model - cells, nets, terminals and signal bundles.
"""

from strongarm.core.terminal import Terminal
from strongarm.core.net import Net
from strongarm.core.parameter import Parameter
from strongarm.core.cell import Cell
from strongarm.core.signals import (
    Io, DiffPair, bus, ClockedDiffComparatorIo, StrongArmHalfIo, BufferIo, MosIo, TapIo,
)

__all__ = [
    'Terminal',
    'Net',
    'Parameter',
    'Cell',
    'Io',
    'DiffPair',
    'bus',
    'ClockedDiffComparatorIo',
    'StrongArmHalfIo',
    'BufferIo',
    'MosIo',
    'TapIo',
]
