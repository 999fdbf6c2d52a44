"""
Process capability contract.

The tile generators never look at process geometry. Everything process
specific (device primitives, taps, via stacks and layout hooks) comes from
a ProcessCapability subclass, one per fabrication process.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from strongarm.layout.shape import Layer, Shape
from strongarm.params import InverterParams, MosTileParams, TapTileParams

if TYPE_CHECKING:
    from strongarm.layout.cell import LayoutCell
    from strongarm.tile import Tile, TileBuilder


class ViaMaker(ABC):
    """Maps routing-layer indices to layers and draws via stacks."""

    @abstractmethod
    def routing_layers(self) -> List[Layer]:
        """Routing layers, bottom to top. Index 0 is the device contact layer."""

    @abstractmethod
    def wire_width(self, index: int) -> int:
        """Default wire width on routing layer ``index`` (nm)."""

    @abstractmethod
    def draw_via(self, cell: 'LayoutCell', bot_layer: Layer, top_layer: Layer,
                 x: int, y: int, net: Optional[str] = None) -> List[Shape]:
        """Draw the via stack between two routing layers centered at (x, y)."""

    @abstractmethod
    def spacing(self, index: int) -> int:
        """Minimum spacing between shapes of different nets on routing layer ``index`` (nm)."""

    def footprint(self, index: int) -> int:
        """Side of the square a wire node or via landing takes on routing layer ``index`` (nm)."""
        return self.wire_width(index)

    def layer(self, index: int) -> Layer:
        layers = self.routing_layers()
        if not 0 <= index < len(layers):
            raise IndexError(f'Routing layer index {index} outside the stack of {len(layers)} layers')
        return layers[index]

    def layer_index(self, layer: Layer) -> Optional[int]:
        """Index of ``layer`` in the routing stack, or None for non-routing layers."""
        for i, candidate in enumerate(self.routing_layers()):
            if candidate == layer:
                return i
        return None


class ProcessCapability(ABC):
    """
    The capability set a process provides to the StrongARM generators.

    Attributes:
        buffer_spacing: Gap between the latch and each output buffer (nm)
    """
    buffer_spacing: int = 0

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        return f'{type(self).__name__}()'

    @abstractmethod
    def mos(self, params: MosTileParams) -> 'Tile':
        """MOS primitive with ports sd (2 entries), g (1 entry) and b."""

    @abstractmethod
    def tap(self, params: TapTileParams) -> 'Tile':
        """Tap primitive with port x."""

    @abstractmethod
    def via_maker(self) -> ViaMaker:
        """Via maker used by routers of every tile built for this process."""

    def post_layout_hooks(self, cell: 'TileBuilder') -> None:
        """Runs after a latch tile has merged its ports."""

    def buffered_post_layout_hooks(self, cell: 'TileBuilder') -> None:
        """Runs last in the buffered latch tile."""

    def inverter(self, params: InverterParams) -> 'Tile':
        from strongarm.buffer import Inverter
        return Inverter(params, self)
