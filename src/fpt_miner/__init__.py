from .config import MiningConfig, load_config
from .errors import (
    ConfigError,
    DataFileError,
    MiningCancelled,
    MiningError,
    OutOfMemoryError,
    ResultWriteError,
)
from .mine import mine_itemsets, mine_transactions

__all__ = [
    "ConfigError",
    "DataFileError",
    "MiningCancelled",
    "MiningConfig",
    "MiningError",
    "OutOfMemoryError",
    "ResultWriteError",
    "load_config",
    "mine_itemsets",
    "mine_transactions",
]
