"""
SKY130 MOS and tap primitives.

Both primitives sit on the grid in ``sky130_rules.GRID``: every MOS row is
``MOS.ROW_TRACKS`` tracks tall and ``w + 1`` poly pitches wide, so rows of
devices abut without further spacing. Straps are inset from the cell
edges so abutting cells never touch on a conducting layer.
"""

from strongarm.core.signals import MosIo, TapIo
from strongarm.params import TileKind
from strongarm.pdk.sky130.layers import DIFF, LI, M1, NSDM, NWELL, POLY, PSDM, PWELL, TAP
from strongarm.pdk.sky130.rules import sky130_rules
from strongarm.pdk.sky130.vias import VIAS
from strongarm.tile import IoBuilder, Tile, TileBuilder

GRID = sky130_rules.GRID
MOS = sky130_rules.MOS


class Sky130MosTile(Tile):
    """
    A multi-finger transistor.

    ``w`` fingers share ``w + 1`` source/drain straps on LI. Even straps
    form ``sd[0]`` and odd straps ``sd[1]``, each set contacted up to a met1
    bar that is the access fragment of its port. A horizontal LI strap above
    the diffusion ties the fingers together as ``g[0]``. The well covers the
    whole cell and is the ``b`` fragment: bulks connect by abutment.
    """
    io_class = MosIo
    cell_name = 'sky130_mos'

    @property
    def size(self) -> tuple[int, int]:
        return (self.params.w + 1) * GRID.CPP, MOS.ROW_TRACKS * GRID.TRACK

    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        width, height = self.size
        cpp, hw = GRID.CPP, MOS.LI_W // 2
        nf = self.params.w
        is_p = self.params.tile_kind is TileKind.P

        well = cell.layout.add_rect(NWELL if is_p else PWELL, 0, 0, width, height, net='b')
        cell.layout.add_rect(PSDM if is_p else NSDM, 0, 0, width, height)
        cell.layout.add_rect(DIFF, cpp // 2 - hw, MOS.DIFF_INSET, width - cpp // 2 + hw, height - MOS.DIFF_INSET)

        gy = height - MOS.GATE_Y
        gate = cell.layout.add_rect(LI, cpp - hw, gy - hw, nf * cpp + hw, gy + hw, net='g_0')
        for i in range(1, nf + 1):
            cell.layout.add_rect(POLY, i * cpp - MOS.L // 2, MOS.POLY_EXT,
                                 i * cpp + MOS.L // 2, height - MOS.POLY_EXT, net='g_0')

        for j in range(nf + 1):
            xc = cpp // 2 + j * cpp
            strap = cell.layout.add_rect(LI, xc - hw, MOS.SD_BOT, xc + hw, height - MOS.SD_TOP_GAP,
                                         net=f'sd_{j % 2}')
            io.layout.sd[j % 2].merge(strap)

        mcon = VIAS[0]
        bx, by = mcon.top_pad[0] // 2, mcon.top_pad[1] // 2
        for k, y in enumerate(MOS.M1_BAR_Y):
            xs = [cpp // 2 + j * cpp for j in range(k, nf + 1, 2)]
            for x in xs:
                mcon.draw(cell.layout, x, y, net=f'sd_{k}')
            bar = cell.layout.add_rect(M1, xs[0] - bx, y - by, xs[-1] + bx, y + by, net=f'sd_{k}')
            io.layout.sd[k].set_primary(bar)

        io.layout.g[0].set_primary(gate)
        io.layout.b.merge(well)


class Sky130TapTile(Tile):
    """A substrate (P) or well (N) tap: one horizontal LI strap, port ``x``."""
    io_class = TapIo
    cell_name = 'sky130_tap'

    @property
    def size(self) -> tuple[int, int]:
        tap = sky130_rules.TAP
        return (self.params.w + 1) * GRID.CPP, tap.ROW_TRACKS * GRID.TRACK

    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        tap = sky130_rules.TAP
        width, height = self.size
        hw = tap.LI_W // 2
        is_n = self.params.kind is TileKind.N

        if is_n:
            cell.layout.add_rect(NWELL, 0, 0, width, height)
        cell.layout.add_rect(NSDM if is_n else PSDM, 0, 0, width, height)
        cell.layout.add_rect(TAP, tap.EDGE, tap.DIFF_INSET, width - tap.EDGE, height - tap.DIFF_INSET)
        yc = height // 2
        strap = cell.layout.add_rect(LI, tap.EDGE, yc - hw, width - tap.EDGE, yc + hw, net='x')
        io.layout.x.set_primary(strap)
