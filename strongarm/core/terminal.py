"""
Terminal - A port of a cell, bound to a net of the cell's parent.
"""

from typing import TYPE_CHECKING, Optional

from strongarm.logging import logger

if TYPE_CHECKING:
    from strongarm.core.cell import Cell
    from strongarm.core.net import Net


class Terminal:
    """
    One port of a cell.

    A terminal holds a single binding to a net of the parent cell. Binding
    it again to a different net replaces the earlier binding and logs a
    warning, so a redundant write is visible rather than silent.

    Attributes:
        name: Port name (e.g. 'sd_0', 'g_0', 'vdd')
        cell: Cell the terminal belongs to
        net: Bound net, or None
    """

    def __init__(self, name: str, cell: 'Cell') -> None:
        self.name = name
        self.cell = cell
        self.net: Optional['Net'] = None

    def __repr__(self) -> str:
        net = self.net.name if self.net is not None else None
        return f'Terminal({self.get_name_from_top()}, net={net})'

    def get_name_from_top(self) -> str:
        return f'{self.cell.get_name_from_top()}.{self.name}'

    def connect(self, net: 'Net') -> None:
        """Bind to a net of the parent cell."""
        from strongarm.core.net import Net

        if not isinstance(net, Net):
            raise ValueError(f'Cannot bind {self.get_name_from_top()} to {net!r}')

        if net is self.net:
            return
        if self.net is not None:
            logger.warning(f'Terminal {self.get_name_from_top()} rebound from net {self.net.name} '
                           f'to {net.name}; the earlier binding is discarded')
            self.net.disconnect(self)
        self.net = net
        net.connect([self])
