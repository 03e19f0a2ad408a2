import logging
import os
from ast import literal_eval
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from .errors import ResultWriteError

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["k", "support", "relative_support", "itemsets"]


@dataclass
class MiningResult:
    threshold: int
    real_k: int
    num_transactions: int
    levels: dict = field(default_factory=dict)   # k -> [(support, frozenset), ...]

    def __len__(self):
        return sum(len(v) for v in self.levels.values())

    def __iter__(self):
        for k in range(1, self.real_k + 1):
            yield from self.levels.get(k, [])

    def level(self, k):
        return self.levels.get(k, [])

    def as_dict(self):
        return {itemset: support for support, itemset in self}

    def to_frame(self):
        rows = [
            {
                "k": len(itemset),
                "support": support,
                "relative_support": support / self.num_transactions if self.num_transactions else 0.0,
                "itemsets": itemset,
            }
            for support, itemset in self
        ]
        return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def aggregate(mapping, threshold, real_k, num_transactions):
    """Group itemsets with support >= threshold by size, highest support first."""
    levels = {k: [] for k in range(1, real_k + 1)}
    # canonical keys give a deterministic order among equal supports
    for itemset in sorted(mapping):
        support = mapping[itemset]
        if support >= threshold and 1 <= len(itemset) <= real_k:
            levels[len(itemset)].append((support, frozenset(itemset)))
    for k in levels:
        levels[k].sort(key=lambda pair: -pair[0])
        logger.info("large %d-itemsets: %d", k, len(levels[k]))
    return MiningResult(threshold, real_k, num_transactions, levels)


def _write(result, path, suffix):
    if suffix == ".txt":
        with open(path, "w") as fp:
            for support, itemset in result:
                items = " ".join(str(i) for i in sorted(itemset))
                fp.write(f"{len(itemset)} {support} {items}\n")
        return

    df = result.to_frame()
    df["itemsets"] = df["itemsets"].apply(lambda s: tuple(sorted(s)))
    if suffix == ".parquet":
        df["itemsets"] = df["itemsets"].apply(list)
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)


def write_result(result, path):
    """Persist a result as CSV, parquet or the plain ``k support items`` text format.

    The file is written beside its destination and moved into place, so a
    failed write never leaves a partial result behind.
    """
    path = Path(path)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _write(result, tmp, path.suffix.lower())
        os.replace(tmp, path)
    except OSError as e:
        if tmp.exists():
            tmp.unlink()
        raise ResultWriteError(f"Can't write result file, {path}: {e.strerror or e}") from e
    return path


def read_result(path):
    """Load a CSV written by ``write_result`` back into a DataFrame of frozensets."""
    df = pd.read_csv(path, converters={"itemsets": literal_eval})
    df["itemsets"] = df["itemsets"].apply(frozenset)
    return df
