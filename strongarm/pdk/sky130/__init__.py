"""
SKY130 process adapter.

Usage:
    from strongarm import StrongArm, StrongArmParams
    from strongarm.pdk.sky130 import Sky130StrongArm

    built = StrongArm(params, Sky130StrongArm()).build()
"""

from strongarm.pdk.sky130.process import Sky130StrongArm
from strongarm.pdk.sky130.primitives import Sky130MosTile, Sky130TapTile
from strongarm.pdk.sky130.vias import Sky130ViaMaker
from strongarm.pdk.sky130.rules import sky130_rules

__all__ = [
    'Sky130StrongArm',
    'Sky130MosTile',
    'Sky130TapTile',
    'Sky130ViaMaker',
    'sky130_rules',
]
