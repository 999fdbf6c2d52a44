"""
Exceptions raised while generating tiles.

Every error is fail-fast: the tile being built is abandoned and nothing
is retried inside the generator.
"""


class StrongArmError(Exception):
    """Base class for all generator errors."""


class ConstructionError(StrongArmError):
    """A tile could not be constructed.

    Raised for invalid sizing, undeclared or unbound nets, unbound ports,
    rows placed against an undefined cursor, and misuse of the builder
    (drawing twice, configuring twice, ...).
    """

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(f'{step}: {message}')


class RoutingError(StrongArmError):
    """The router could not complete the interconnect of a finished placement."""


class ValidationError(StrongArmError):
    """A simulated comparator decision was missing or wrong.

    Attributes:
        stimulus: The stimulus that produced the failure
    """

    def __init__(self, message: str, stimulus=None) -> None:
        self.stimulus = stimulus
        super().__init__(message)
