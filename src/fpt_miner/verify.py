# Cross-check the FP-tree miner against mlxtend's fpgrowth

import argparse
import logging

import pandas as pd
from mlxtend.frequent_patterns import fpgrowth
from mlxtend.preprocessing import TransactionEncoder

from .config import load_config
from .errors import MiningError
from .mine import run
from .transactions import TransactionFile

logger = logging.getLogger(__name__)


def reference_itemsets(transactions, threshold, max_len=None):
    """Frequent itemsets from mlxtend as {frozenset: absolute support}."""
    baskets = [sorted(set(t)) for t in transactions]
    n = len(baskets)
    if n == 0 or not any(baskets):
        return {}

    te = TransactionEncoder()
    X = pd.DataFrame(te.fit(baskets).transform(baskets), columns=te.columns_)
    freq = fpgrowth(X, min_support=threshold / n, use_colnames=True, max_len=max_len)
    return {
        frozenset(int(i) for i in row.itemsets): int(round(row.support * n))
        for row in freq.itertuples(index=False)
    }


def compare(result, reference):
    """Return (missing, extra, wrong) lists between a MiningResult and a reference dict."""
    mined = result.as_dict()
    missing = sorted((tuple(sorted(s)), c) for s, c in reference.items() if s not in mined)
    extra = sorted((tuple(sorted(s)), c) for s, c in mined.items() if s not in reference)
    wrong = sorted(
        (tuple(sorted(s)), c, reference[s])
        for s, c in mined.items()
        if s in reference and reference[s] != c
    )
    return missing, extra, wrong


def main(config_path):
    config = load_config(config_path)
    source = TransactionFile(config.data_file, config.num_items, config.num_transactions,
                             cache=True)
    result = run(source, config.num_items, support_fraction=config.support_fraction,
                 max_itemset_size=config.max_itemset_size).result
    reference = reference_itemsets(source, result.threshold, result.real_k)
    missing, extra, wrong = compare(result, reference)

    print(f"🔍 FP-tree itemsets: {len(result)} | mlxtend itemsets: {len(reference)}")
    for items, c in missing:
        print(f"  missing {items} support={c}")
    for items, c in extra:
        print(f"  extra   {items} support={c}")
    for items, got, want in wrong:
        print(f"  support {items} got={got} expected={want}")

    ok = not (missing or extra or wrong)
    print("✅ results match" if ok else "⚠️ results differ")
    return ok


def cli(argv=None):
    ap = argparse.ArgumentParser(prog="fpt-verify")
    ap.add_argument("config")
    ap.add_argument("--log_level", default="WARNING")
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    try:
        return 0 if main(args.config) else 1
    except MiningError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(cli())
