import logging
from dataclasses import dataclass

import numpy as np

from .config import compute_threshold
from .errors import ConfigError
from .transactions import check_cancel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemTable:
    """Outcome of the first scan: supports, ranking and the frequent prefix."""

    supports: np.ndarray      # supports[item] = raw support
    order: np.ndarray         # items by descending support, ties by item id
    frequent: tuple           # frequent items, rank order
    threshold: int
    real_k: int
    max_transaction_size: int
    num_transactions: int

    @property
    def num_frequent(self):
        return len(self.frequent)

    @property
    def ranks(self):
        return {item: rank for rank, item in enumerate(self.frequent)}

    def support(self, item):
        return int(self.supports[item])

    def is_frequent(self, item):
        return self.supports[item] >= self.threshold


def resolve_real_k(max_itemset_size, max_transaction_size):
    if max_itemset_size <= 0 or max_itemset_size > max_transaction_size:
        return max_transaction_size
    return max_itemset_size


def count_items(transactions, num_items, support_fraction=None, max_itemset_size=0,
                threshold=None, cancel=None):
    """Scan the transactions once and rank items by support.

    Either ``support_fraction`` or an absolute ``threshold`` must be given.
    Each transaction counts at most once towards an item's support.
    """
    if num_items <= 0:
        raise ConfigError(f"number of items must be positive, got {num_items}")

    supports = np.zeros(num_items, dtype=np.int64)
    max_size = 0
    seen = 0
    for trans in transactions:
        check_cancel(cancel)
        if len(trans) > max_size:
            max_size = len(trans)
        if trans:
            np.add.at(supports, np.unique(np.asarray(trans, dtype=np.int64)), 1)
        seen += 1

    if threshold is None:
        if support_fraction is None:
            raise ConfigError("either a support fraction or an absolute threshold is required")
        threshold = compute_threshold(support_fraction, seen)
    threshold = max(1, int(threshold))

    order = np.argsort(-supports, kind="stable")
    num_large = int(np.count_nonzero(supports >= threshold))
    frequent = tuple(int(i) for i in order[:num_large])
    real_k = resolve_real_k(max_itemset_size, max_size)

    logger.info("max transaction size = %d", max_size)
    logger.info("max itemset size (K_max) to be mined = %d", real_k)
    logger.info("no. of large 1-itemsets = %d (threshold %d)", num_large, threshold)

    return ItemTable(
        supports=supports,
        order=order,
        frequent=frequent,
        threshold=threshold,
        real_k=real_k,
        max_transaction_size=max_size,
        num_transactions=seen,
    )
