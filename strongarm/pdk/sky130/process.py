"""The SKY130 capability set for the StrongARM generators."""

from strongarm.layout.shape import Shape
from strongarm.params import MosTileParams, TapTileParams
from strongarm.pdk.sky130.layers import PR_BOUNDARY
from strongarm.pdk.sky130.primitives import Sky130MosTile, Sky130TapTile
from strongarm.pdk.sky130.rules import sky130_rules
from strongarm.pdk.sky130.vias import Sky130ViaMaker
from strongarm.process import ProcessCapability
from strongarm.tile import TileBuilder


class Sky130StrongArm(ProcessCapability):
    """SKY130 MOS and tap primitives, single-cut vias, 4-track buffer gap."""
    buffer_spacing = 4 * sky130_rules.GRID.TRACK

    def mos(self, params: MosTileParams) -> Sky130MosTile:
        return Sky130MosTile(params, self)

    def tap(self, params: TapTileParams) -> Sky130TapTile:
        return Sky130TapTile(params, self)

    def via_maker(self) -> Sky130ViaMaker:
        return Sky130ViaMaker()

    def post_layout_hooks(self, cell: TileBuilder) -> None:
        _draw_boundary(cell)

    def buffered_post_layout_hooks(self, cell: TileBuilder) -> None:
        _draw_boundary(cell)


def _draw_boundary(cell: TileBuilder) -> Shape:
    """Outline the cell on the place-and-route boundary layer."""
    x0, y0, x1, y1 = cell.bounds()
    return cell.layout.add_rect(PR_BOUNDARY, x0, y0, x1, y1)
