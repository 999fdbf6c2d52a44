"""
Transient testbench contract for comparator validation.

The simulator itself is external. This module defines what a simulation
run receives (StrongArmTranTb) and returns (ComparatorDecision), the
stimulus sweep used to validate a latch, and the pass/fail policy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from strongarm import Q_
from strongarm.errors import ValidationError
from strongarm.logging import logger
from strongarm.params import InputKind

# Differential input offsets, in volts, besides +/- vdd
OFFSETS = (Decimal('0.5'), Decimal('0.1'), Decimal('0.05'))
# Highest input common mode each input pair kind is driven with
MAX_COMMON_MODE = {InputKind.N: Decimal('0.3'), InputKind.P: Decimal('0.55')}
STEPS = 10


def _volts(value) -> Decimal:
    if hasattr(value, 'to'):
        value = value.to('V').magnitude
    return Decimal(str(value))


@dataclass(frozen=True)
class Pvt:
    """
    Process corner, supply voltage and temperature.

    Plain numbers are taken as volts and degrees Celsius.
    """
    corner: str
    voltage: Any
    temp: Any

    def __post_init__(self):
        voltage = self.voltage if hasattr(self.voltage, 'to') else Q_(self.voltage, 'V')
        temp = self.temp if hasattr(self.temp, 'to') else Q_(self.temp, 'degC')
        if not voltage.check('[electric_potential]'):
            raise ValueError(f'Supply {voltage} is not a voltage')
        if not temp.check('[temperature]'):
            raise ValueError(f'Temperature {temp} is not a temperature')
        object.__setattr__(self, 'voltage', voltage)
        object.__setattr__(self, 'temp', temp)


class ComparatorDecision(Enum):
    """The rail the positive output settled to."""
    POS = 'pos'
    NEG = 'neg'


@dataclass(frozen=True)
class Stimulus:
    """A differential input pair, in volts."""
    vinp: Decimal
    vinn: Decimal

    @property
    def diff(self) -> Decimal:
        return self.vinp - self.vinn

    @property
    def common_mode(self) -> Decimal:
        return (self.vinp + self.vinn) / 2

    def quantities(self):
        return Q_(float(self.vinp), 'V'), Q_(float(self.vinn), 'V')

    def __str__(self):
        return f'vinp={self.vinp} V, vinn={self.vinn} V'


@dataclass(frozen=True)
class StrongArmTranTb:
    """
    One transient simulation of a comparator.

    Attributes:
        dut: The comparator tile under test
        vinp: Positive input voltage (V)
        vinn: Negative input voltage (V)
        pmos: Whether the input pair is PMOS
        pvt: Operating conditions
    """
    dut: Any
    vinp: Decimal
    vinn: Decimal
    pmos: bool
    pvt: Pvt

    @property
    def stimulus(self) -> Stimulus:
        return Stimulus(self.vinp, self.vinn)


class Simulator(ABC):
    """Runs a transient testbench and reports the comparator decision."""

    @abstractmethod
    def simulate(self, tb: StrongArmTranTb) -> Optional[ComparatorDecision]:
        """Return the decision, or None if the output never railed."""


def stimulus_sweep(input_kind: InputKind, vdd: Union[Decimal, Any]) -> list[Stimulus]:
    """
    Input pairs a comparator with the given input pair kind is validated with.

    vinn steps from 0 to vdd in tenths of vdd; vinp is vinn plus each of
    +/- vdd, +/- 0.5, +/- 0.1 and +/- 0.05 V. Pairs outside [0, vdd] and
    pairs with a common mode above what the input pair can sense are
    skipped.
    """
    vdd = _volts(vdd)
    offsets = sorted({-vdd, vdd, *OFFSETS, *(-o for o in OFFSETS)})
    limit = MAX_COMMON_MODE[input_kind]
    sweep = []
    for i in range(STEPS + 1):
        vinn = vdd * i / STEPS
        for offset in offsets:
            stim = Stimulus(vinn + offset, vinn)
            if not (0 <= stim.vinp <= vdd and 0 <= stim.vinn <= vdd):
                continue
            if stim.common_mode > limit:
                continue
            sweep.append(stim)
    return sweep


def expected_decision(stimulus: Stimulus) -> ComparatorDecision:
    return ComparatorDecision.POS if stimulus.diff > 0 else ComparatorDecision.NEG


def check_decision(tb: StrongArmTranTb, decision: Optional[ComparatorDecision]) -> None:
    """Raise ValidationError unless the comparator railed to the expected side."""
    stimulus = tb.stimulus
    if decision is None:
        raise ValidationError(f'comparator output did not rail for {stimulus}', stimulus)
    expected = expected_decision(stimulus)
    if decision is not expected:
        raise ValidationError(
            f'comparator decided {decision.value} for {stimulus}, expected {expected.value}', stimulus)


def run_sweep(simulator: Simulator, dut, input_kind: InputKind, pvt: Pvt) -> list[StrongArmTranTb]:
    """Simulate every stimulus of the sweep, stopping at the first failure."""
    done = []
    for stimulus in stimulus_sweep(input_kind, pvt.voltage):
        tb = StrongArmTranTb(dut, stimulus.vinp, stimulus.vinn, input_kind.is_p(), pvt)
        logger.debug(f'Simulating {dut!r} at {stimulus} ({pvt.corner})')
        check_decision(tb, simulator.simulate(tb))
        done.append(tb)
    logger.info(f'{len(done)} stimuli passed for {dut!r} at {pvt.corner}')
    return done
