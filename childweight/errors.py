"""Error types raised (or recorded) by the child weight core."""

from __future__ import annotations


class ChildWeightError(Exception):
    pass


class InvalidInputError(ChildWeightError, ValueError):
    """
    Raised before any integration when a population input fails a check.

    field: which input failed ('age', 'sex', 'ffm', 'fm', 'days', 'intake', 'population')
    index: offending individual (None for batch-level fields like 'days')
    """

    def __init__(self, field: str, message: str, index: int | None = None):
        self.field = field
        self.index = index
        where = f'{field}[{index}]' if index is not None else field
        super().__init__(f'{where}: {message}')


class InvalidScheduleError(ChildWeightError, ValueError):
    """Raised when an intake schedule has no values."""


class NumericalAnomaly(ChildWeightError, ArithmeticError):
    """
    Non-finite state or derivative for one individual mid-integration.

    Not raised by the runner: it is stored on that individual's Trajectory so the
    rest of the population keeps integrating.
    """

    def __init__(self, index: int, day: float, message: str = 'non-finite state'):
        self.index = index
        self.day = day
        self.message = message
        super().__init__(f'individual {index}, day {day:g}: {message}')

    def reindexed(self, index: int) -> NumericalAnomaly:
        return NumericalAnomaly(index, self.day, self.message)
