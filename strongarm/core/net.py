"""
Net - A named node inside one cell.
"""

from typing import TYPE_CHECKING, List

from strongarm.logging import logger

if TYPE_CHECKING:
    from strongarm.core.cell import Cell
    from strongarm.core.terminal import Terminal


class Net:
    """
    A node of a cell, joining the terminals of the cell's children.

    A net is identified by its name within the owning cell and registers
    itself with that cell on creation.

    Attributes:
        name: Net name, unique within the cell
        cell: Owning cell
        connections: Child terminals bound to this net, in binding order
    """

    def __init__(self, name: str, cell: 'Cell') -> None:
        self.name = name
        self.cell = cell
        self.connections: List['Terminal'] = []
        cell.add_net(self)

    def __repr__(self) -> str:
        return f'Net({self.name})'

    def __str__(self) -> str:
        bound = ', '.join(t.get_name_from_top() for t in self.connections) or 'nothing'
        return f'Net {self.get_name_from_top()} -> {bound}'

    def get_name_from_top(self) -> str:
        return f'{self.cell.get_name_from_top()}:{self.name}'

    def connect(self, terminals: List['Terminal']) -> None:
        """Record terminals as bound to this net. Already recorded ones are skipped."""
        from strongarm.core.terminal import Terminal

        for terminal in terminals:
            if not isinstance(terminal, Terminal):
                raise ValueError(f'{terminal!r} is not a Terminal')
            if terminal not in self.connections:
                self.connections.append(terminal)

    def disconnect(self, terminal: 'Terminal') -> None:
        if terminal not in self.connections:
            logger.warning(f'{terminal.get_name_from_top()} is not bound to {self.get_name_from_top()}')
            return
        self.connections.remove(terminal)
