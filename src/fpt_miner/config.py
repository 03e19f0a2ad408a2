import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Order of the six whitespace-separated fields in a config file
CONFIG_FIELDS = (
    "max_itemset_size",
    "support_fraction",
    "num_items",
    "num_transactions",
    "data_file",
    "output_file",
)

CONFIG_HELP = """\
Content of config. file (six whitespace-separated fields):
  1: Upper limit of large itemset size to be mined (<= 0 means no limit)
  2: Support threshold, normalized to (0, 1]
  3: No. of different items in the DB
  4: No. of transactions in the DB
  5: File name of the DB
  6: Result file name to store the large itemsets
"""


@dataclass(frozen=True)
class MiningConfig:
    max_itemset_size: int
    support_fraction: float
    num_items: int
    num_transactions: int
    data_file: str = ""
    output_file: str = ""

    def __post_init__(self):
        if not 0.0 < self.support_fraction <= 1.0:
            raise ConfigError(f"support fraction must be in (0, 1], got {self.support_fraction}")
        if self.num_items <= 0:
            raise ConfigError(f"number of items must be positive, got {self.num_items}")
        if self.num_transactions <= 0:
            raise ConfigError(f"number of transactions must be positive, got {self.num_transactions}")

    @property
    def threshold(self):
        return compute_threshold(self.support_fraction, self.num_transactions)

    def with_overrides(self, **overrides):
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def compute_threshold(support_fraction, num_transactions):
    # absolute support never drops below one transaction
    return max(1, math.floor(support_fraction * num_transactions + 0.5))


def _convert(name, raw, kind):
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"config field '{name}' expects {kind.__name__}, got {raw!r}") from None


def load_config(path):
    path = Path(path)
    try:
        tokens = path.read_text().split()
    except OSError as e:
        raise ConfigError(f"Can't open config. file, {path}: {e.strerror or e}") from e

    if len(tokens) != len(CONFIG_FIELDS):
        raise ConfigError(
            f"config file {path} must hold {len(CONFIG_FIELDS)} fields, found {len(tokens)}"
        )

    raw = dict(zip(CONFIG_FIELDS, tokens))
    base = path.parent

    config = MiningConfig(
        max_itemset_size=_convert("max_itemset_size", raw["max_itemset_size"], int),
        support_fraction=_convert("support_fraction", raw["support_fraction"], float),
        num_items=_convert("num_items", raw["num_items"], int),
        num_transactions=_convert("num_transactions", raw["num_transactions"], int),
        data_file=str(base / raw["data_file"]),
        output_file=str(base / raw["output_file"]),
    )

    for name in CONFIG_FIELDS:
        logger.info("%s = %s", name, getattr(config, name))
    logger.info("threshold = %d", config.threshold)
    return config
