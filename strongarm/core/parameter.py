"""
Parameter - A named value recorded on a schematic cell.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Parameter:
    """
    A generator parameter as recorded on the cell it produced.

    Attributes:
        name: Parameter name (e.g. 'w', 'input_kind')
        value: Plain value; enums are stored by value
        unit: Optional unit string
    """
    name: str
    value: Any
    unit: Optional[str] = None

    def __str__(self) -> str:
        unit = f' {self.unit}' if self.unit else ''
        return f'{self.name}={self.value}{unit}'
