"""Exception types raised by the AI Economy Lab simulator."""


class EconomyLabError(Exception):
    """Base class for all simulator errors."""


class ConfigError(EconomyLabError, ValueError):
    """Invalid occupation dataset, model parameters or slider mapping."""


class UnknownOccupationError(EconomyLabError, KeyError):
    """An occupation id has no record in the dataset."""


class DatasetMismatchError(EconomyLabError):
    """A simulation state and the dataset it is stepped with are out of lock-step."""
