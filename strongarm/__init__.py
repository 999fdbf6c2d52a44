# Units
from pint import UnitRegistry
ureg = UnitRegistry(case_sensitive=True)
Q_ = ureg.Quantity

from strongarm.logging import logger, set_log_level
from strongarm.errors import StrongArmError, ConstructionError, RoutingError, ValidationError
from strongarm.params import (
    InputKind, MosKind, TileKind, MosTileParams, TapTileParams, StrongArmParams, InverterParams,
)
from strongarm.process import ProcessCapability, ViaMaker
from strongarm.router import Router, GreedyRouter
from strongarm.tile import Tile, TileBuilder, Instance, DrawnInstance, IoBuilder, BuiltTile
from strongarm.placement import Row, place_rows
from strongarm.buffer import Inverter
from strongarm.strongarm import StrongArmHalf, StrongArm, StrongArmWithOutputBuffers
from strongarm.tb import (
    Pvt, ComparatorDecision, Stimulus, StrongArmTranTb, Simulator,
    stimulus_sweep, expected_decision, check_decision, run_sweep,
)

__all__ = [
    'ureg', 'Q_', 'logger', 'set_log_level',
    'StrongArmError', 'ConstructionError', 'RoutingError', 'ValidationError',
    'InputKind', 'MosKind', 'TileKind', 'MosTileParams', 'TapTileParams', 'StrongArmParams', 'InverterParams',
    'ProcessCapability', 'ViaMaker', 'Router', 'GreedyRouter',
    'Tile', 'TileBuilder', 'Instance', 'DrawnInstance', 'IoBuilder', 'BuiltTile',
    'Row', 'place_rows',
    'Inverter', 'StrongArmHalf', 'StrongArm', 'StrongArmWithOutputBuffers',
    'Pvt', 'ComparatorDecision', 'Stimulus', 'StrongArmTranTb', 'Simulator',
    'stimulus_sweep', 'expected_decision', 'check_decision', 'run_sweep',
]
