"""Exception types shared across the package."""


class SeqmcError(Exception):
    """Base class for errors raised by seqmc."""


class InvalidArgumentError(SeqmcError, ValueError):
    """A caller passed an argument outside its valid domain.

    Raised eagerly, before any sampling work starts.
    """


class UndefinedStatisticError(SeqmcError, ArithmeticError):
    """A statistic was requested with too few observations to define it."""
