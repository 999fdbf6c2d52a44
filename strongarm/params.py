"""
Parameter records for the StrongARM generators.

All records are frozen dataclasses: immutable, hashable and compared by
value, so a record can be used as part of a generator's identity.
Records serialize to plain dicts and YAML.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, get_type_hints

import yaml

from strongarm.errors import ConstructionError


class InputKind(Enum):
    """The device kind of the comparator input pair."""
    N = 'n'
    P = 'p'

    def is_n(self) -> bool:
        return self is InputKind.N

    def is_p(self) -> bool:
        return self is InputKind.P


class MosKind(Enum):
    """Process-agnostic MOS flavor selector."""
    LVT = 'lvt'
    SVT = 'svt'
    HVT = 'hvt'


class TileKind(Enum):
    """Polarity of a MOS or tap primitive."""
    N = 'n'
    P = 'p'


def _check_width(owner: str, name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConstructionError(
            f'{owner} parameters', f"invalid sizing {name}={value!r}, expected a positive integer")


class _Record:
    """Dict/YAML serialization shared by the parameter records."""

    def to_dict(self) -> dict[str, Any]:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = value.value if isinstance(value, Enum) else value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        hints = get_type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            hint = hints[f.name]
            if isinstance(hint, type) and issubclass(hint, Enum) and not isinstance(value, hint):
                value = hint(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    @classmethod
    def from_yaml(cls, text: str):
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ConstructionError(f'{cls.__name__} parameters', 'YAML document is not a mapping')
        return cls.from_dict(data)


@dataclass(frozen=True)
class MosTileParams(_Record):
    """
    Parameters of a process MOS primitive.

    Attributes:
        mos_kind: Device flavor
        tile_kind: Device polarity
        w: Device width in process width units
    """
    mos_kind: MosKind
    tile_kind: TileKind
    w: int

    def __post_init__(self):
        _check_width('MosTile', 'w', self.w)


@dataclass(frozen=True)
class TapTileParams(_Record):
    """
    Parameters of a process tap primitive.

    Attributes:
        kind: Tap polarity. An N tap sits in the N well and ties to VDD.
        w: Tap width in process width units
    """
    kind: TileKind
    w: int

    def __post_init__(self):
        _check_width('TapTile', 'w', self.w)


@dataclass(frozen=True)
class StrongArmParams(_Record):
    """
    The parameters of the StrongARM layout generators.

    Attributes:
        nmos_kind: The NMOS device flavor
        pmos_kind: The PMOS device flavor
        half_tail_w: The width of one half of the tail MOS device
        input_pair_w: The width of an input pair MOS device
        inv_input_w: The width of the inverter MOS devices connected to the input pair
        inv_precharge_w: The width of the inverter MOS devices connected to the precharge devices
        precharge_w: The width of the precharge MOS devices
        input_kind: The kind of the input pair MOS devices
    """
    nmos_kind: MosKind
    pmos_kind: MosKind
    half_tail_w: int
    input_pair_w: int
    inv_input_w: int
    inv_precharge_w: int
    precharge_w: int
    input_kind: InputKind

    def __post_init__(self):
        for name in ('half_tail_w', 'input_pair_w', 'inv_input_w', 'inv_precharge_w', 'precharge_w'):
            _check_width('StrongArm', name, getattr(self, name))


@dataclass(frozen=True)
class InverterParams(_Record):
    """Parameters of the output buffer inverter."""
    nmos_w: int
    pmos_w: int
    nmos_kind: MosKind = MosKind.SVT
    pmos_kind: MosKind = MosKind.SVT

    def __post_init__(self):
        _check_width('Inverter', 'nmos_w', self.nmos_w)
        _check_width('Inverter', 'pmos_w', self.pmos_w)
