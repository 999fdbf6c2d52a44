"""SKY130 routing stack and single-cut via stacks."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from strongarm.layout.cell import LayoutCell
from strongarm.layout.shape import Layer, Shape
from strongarm.pdk.sky130.layers import LI, M1, M2, M3, M4, MCON, VIA1, VIA2, VIA3
from strongarm.pdk.sky130.rules import sky130_rules
from strongarm.process import ViaMaker

# Routing layers bottom to top, with their wire rules
LAYER_STACK = [LI, M1, M2, M3, M4]
_WIRE_RULES = [sky130_rules.LI, sky130_rules.M1, sky130_rules.M2, sky130_rules.M3, sky130_rules.M4]


@dataclass(frozen=True)
class ViaDefinition:
    """
    A cut between two adjacent routing layers and its landing pads.

    Enclosures are (x, y): the ``*_ADJ`` rule applies in x.
    """
    cut_layer: Layer
    bot_layer: Layer
    top_layer: Layer
    cut: Tuple[int, int]
    bot_enc: Tuple[int, int]
    top_enc: Tuple[int, int]

    @classmethod
    def from_rules(cls, cut_layer: Layer, bot_layer: Layer, top_layer: Layer, rules) -> 'ViaDefinition':
        return cls(cut_layer, bot_layer, top_layer,
                   cut=(rules.W, rules.get('H', rules.W)),
                   bot_enc=(rules.ENC_BOT_ADJ, rules.ENC_BOT),
                   top_enc=(rules.ENC_TOP_ADJ, rules.ENC_TOP))

    @property
    def bot_pad(self) -> Tuple[int, int]:
        return self.cut[0] + 2 * self.bot_enc[0], self.cut[1] + 2 * self.bot_enc[1]

    @property
    def top_pad(self) -> Tuple[int, int]:
        return self.cut[0] + 2 * self.top_enc[0], self.cut[1] + 2 * self.top_enc[1]

    @property
    def pad(self) -> Tuple[int, int]:
        """Size of the larger of the two landing pads."""
        return (self.cut[0] + 2 * max(self.bot_enc[0], self.top_enc[0]),
                self.cut[1] + 2 * max(self.bot_enc[1], self.top_enc[1]))

    def draw(self, cell: LayoutCell, x: int, y: int, net: Optional[str] = None) -> List[Shape]:
        hw, hh = self.cut[0] // 2, self.cut[1] // 2
        shapes = [cell.add_rect(self.cut_layer, x - hw, y - hh, x + hw, y + hh, net=net)]
        for layer, (ex, ey) in ((self.bot_layer, self.bot_enc), (self.top_layer, self.top_enc)):
            shapes.append(cell.add_rect(layer, x - hw - ex, y - hh - ey, x + hw + ex, y + hh + ey, net=net))
        return shapes


VIAS = [
    ViaDefinition.from_rules(cut, LAYER_STACK[i], LAYER_STACK[i + 1], rules)
    for i, (cut, rules) in enumerate([
        (MCON, sky130_rules.MCON),
        (VIA1, sky130_rules.VIA1),
        (VIA2, sky130_rules.VIA2),
        (VIA3, sky130_rules.VIA3),
    ])
]


def get_via_stack(a: Layer, b: Layer) -> List[ViaDefinition]:
    """Vias between two routing layers, bottom up, in either argument order."""
    lo, hi = sorted((LAYER_STACK.index(a), LAYER_STACK.index(b)))
    return VIAS[lo:hi]


class Sky130ViaMaker(ViaMaker):
    """Single-cut vias over LI and met1 to met4."""

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(type(self))

    def routing_layers(self) -> List[Layer]:
        return list(LAYER_STACK)

    def wire_width(self, index: int) -> int:
        # Wide enough to land the pads of the vias above and below
        pads = [via.pad[0] for via in VIAS[max(index - 1, 0):index + 1]]
        return max([_WIRE_RULES[index].MIN_W] + pads)

    def spacing(self, index: int) -> int:
        return _WIRE_RULES[index].MIN_S

    def footprint(self, index: int) -> int:
        if index == 0:
            # Nothing but contact landings is drawn on LI
            return max(VIAS[0].bot_pad)
        return self.wire_width(index)

    def draw_via(self, cell: LayoutCell, bot_layer: Layer, top_layer: Layer,
                 x: int, y: int, net: Optional[str] = None) -> List[Shape]:
        shapes: List[Shape] = []
        for via in get_via_stack(bot_layer, top_layer):
            shapes.extend(via.draw(cell, x, y, net))
        return shapes
