"""
Cell - Schematic view of a generated tile.
"""

from typing import Any, Dict, Iterator, Optional

from strongarm.core.net import Net
from strongarm.core.parameter import Parameter
from strongarm.core.terminal import Terminal
from strongarm.logging import logger


class Cell:
    """
    The schematic of one tile: its ports, internal nets, children and the
    parameters it was generated from.

    A child cell is created detached and attached to its parent only when
    the child is drawn, so an abandoned child never appears in the
    hierarchy.

    Attributes:
        instance_name: Name within the parent (e.g. 'tail_0', 'left_half')
        cell_name: Generator name (e.g. 'strong_arm_half', 'sky130_mos')
        parent_cell: Parent cell, or None while detached or at the top
        terminals: {name: Terminal}, the ports of this cell
        nets: {name: Net}, nets owned by this cell
        subcells: {instance_name: Cell}
        parameters: {name: Parameter}
    """

    def __init__(self, instance_name: str, parent: Optional['Cell'] = None,
                 cell_name: Optional[str] = None) -> None:
        self.instance_name = instance_name
        self.cell_name = cell_name or type(self).__name__
        self.parent_cell: Optional[Cell] = None
        self.terminals: Dict[str, Terminal] = {}
        self.nets: Dict[str, Net] = {}
        self.subcells: Dict[str, Cell] = {}
        self.parameters: Dict[str, Parameter] = {}
        if parent is not None:
            self.attach(parent)

    def __repr__(self) -> str:
        return f'Cell({self.get_name_from_top()}, type={self.cell_name})'

    def __getattr__(self, name: str):
        """cell.tail_0 is the subcell, cell.tail_0.g_0 its terminal."""
        for table in ('subcells', 'terminals'):
            items = self.__dict__.get(table, {})
            if name in items:
                return items[name]
        raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    def attach(self, parent: 'Cell') -> None:
        if self.parent_cell is not None:
            raise ValueError(f'{self.get_name_from_top()} is already a subcell of {self.parent_cell}')
        if self.instance_name in parent.subcells:
            raise ValueError(f'{parent.get_name_from_top()} already has a subcell {self.instance_name}')
        parent.subcells[self.instance_name] = self
        self.parent_cell = parent

    # Ports and nets

    def add_terminal(self, name: str) -> Terminal:
        if name in self.terminals:
            logger.warning(f'Terminal {name} already exists in {self.get_name_from_top()}')
        else:
            self.terminals[name] = Terminal(name, self)
        return self.terminals[name]

    def get_terminal(self, name: str) -> Terminal:
        try:
            return self.terminals[name]
        except KeyError:
            raise ValueError(f'No terminal {name} in {self.get_name_from_top()}') from None

    def add_net(self, net: Net) -> Net:
        """Register a net created in this cell."""
        self.nets[net.name] = net
        return net

    def get_net(self, name: str) -> Optional[Net]:
        return self.nets.get(name)

    def has_net(self, name: str) -> bool:
        return name in self.nets

    # Parameters

    def set_parameter(self, name: str, value: Any, unit: Optional[str] = None) -> None:
        self.parameters[name] = Parameter(name, value, unit)

    def get_parameter(self, name: str) -> Any:
        if name not in self.parameters:
            raise ValueError(f'No parameter {name} on {self.get_name_from_top()}')
        return self.parameters[name].value

    # Hierarchy

    def get_name_from_top(self) -> str:
        """Dotted instance path, e.g. 'dut.left_half.tail_0'."""
        names = [self.instance_name]
        cell = self.parent_cell
        while cell is not None:
            names.append(cell.instance_name)
            cell = cell.parent_cell
        return '.'.join(reversed(names))

    def walk(self) -> Iterator['Cell']:
        """This cell and every cell below it, depth first."""
        yield self
        for sub in self.subcells.values():
            yield from sub.walk()
