"""
Output buffer.
"""

from strongarm.core.signals import BufferIo, MosIo, TapIo
from strongarm.params import InverterParams, MosTileParams, TapTileParams, TileKind
from strongarm.router import GreedyRouter
from strongarm.tile import IoBuilder, Tile, TileBuilder


class Inverter(Tile):
    """
    A single-stage inverter: an N tap, the PMOS, the NMOS and a P tap,
    stacked top to bottom and left aligned.
    """
    io_class = BufferIo
    cell_name = 'inverter'
    top_layer = 3

    def tile(self, io: IoBuilder, cell: TileBuilder) -> None:
        p = self.params
        s = io.schematic
        tap_w = max(p.nmos_w, p.pmos_w)

        ntap = cell.generate_connected(self.process.tap(TapTileParams(TileKind.N, tap_w)),
                                       TapIo(x=s.vdd), 'ntap')
        pmos = cell.generate_connected(self.process.mos(MosTileParams(p.pmos_kind, TileKind.P, p.pmos_w)),
                                       MosIo(sd=[s.vdd, s.dout], g=[s.din], b=s.vdd), 'pmos')
        nmos = cell.generate_connected(self.process.mos(MosTileParams(p.nmos_kind, TileKind.N, p.nmos_w)),
                                       MosIo(sd=[s.vss, s.dout], g=[s.din], b=s.vss), 'nmos')
        ptap = cell.generate_connected(self.process.tap(TapTileParams(TileKind.P, tap_w)),
                                       TapIo(x=s.vss), 'ptap')

        prev = ntap
        for inst in (pmos, nmos, ptap):
            inst.align(prev, 'left').align(prev, 'beneath')
            prev = inst

        ntap, pmos, nmos, ptap = (cell.draw(inst) for inst in (ntap, pmos, nmos, ptap))

        cell.set_top_layer(self.top_layer)
        cell.set_router(GreedyRouter())
        cell.set_via_maker(self.process.via_maker())

        io.layout.vdd.set_primary(ntap.io.x)
        io.layout.vss.set_primary(ptap.io.x)
        io.layout.din.merge(pmos.io.g[0]).merge(nmos.io.g[0])
        io.layout.dout.merge(pmos.io.sd[1]).merge(nmos.io.sd[1])
