class MiningError(Exception):
    """Base class for every failure that aborts a mining run."""

    exit_code = 1


class ConfigError(MiningError):
    exit_code = 1


class DataFileError(MiningError):
    exit_code = 2


class OutOfMemoryError(MiningError):
    exit_code = 3


class MiningCancelled(MiningError):
    exit_code = 130


class ResultWriteError(MiningError):
    exit_code = 4
