import argparse
import logging
import sys
import time
from dataclasses import dataclass
from typing import Optional

from .config import CONFIG_HELP, load_config
from .enumerator import SupportMapping, enumerate_itemsets
from .errors import MiningCancelled, MiningError
from .frequency import ItemTable, count_items
from .fptree import FPTree, build_fptree
from .results import MiningResult, aggregate, write_result
from .transactions import InMemoryTransactions, TransactionFile

logger = logging.getLogger(__name__)


@dataclass
class MiningContext:
    """Everything one run produces, phase by phase."""

    table: Optional[ItemTable] = None
    tree: Optional[FPTree] = None
    mapping: Optional[SupportMapping] = None
    result: Optional[MiningResult] = None


class _Timer:
    def __init__(self):
        self.start = self.last = time.perf_counter()

    def lap(self, phase):
        now = time.perf_counter()
        logger.info("%s took %.3f secs (total %.3f secs)", phase, now - self.last, now - self.start)
        self.last = now


def run(transactions, num_items, support_fraction=None, max_itemset_size=0,
        threshold=None, cancel=None):
    """Count, build, enumerate and aggregate; returns the filled MiningContext."""
    ctx = MiningContext()
    timer = _Timer()

    ctx.table = count_items(transactions, num_items, support_fraction=support_fraction,
                            max_itemset_size=max_itemset_size, threshold=threshold,
                            cancel=cancel)
    timer.lap("pass1")

    ctx.tree = build_fptree(transactions, ctx.table, cancel=cancel)
    timer.lap("buildTree")

    ctx.mapping = enumerate_itemsets(ctx.tree, ctx.table.real_k,
                                     is_frequent=ctx.table.is_frequent, cancel=cancel)
    timer.lap("passK")

    ctx.result = aggregate(ctx.mapping, ctx.table.threshold, ctx.table.real_k,
                           ctx.table.num_transactions)
    timer.lap("result")
    return ctx


def mine_transactions(transactions, support_fraction=None, max_itemset_size=0,
                      num_items=None, threshold=None, cancel=None):
    """Mine an in-memory list of transactions (lists of item ids)."""
    source = InMemoryTransactions(transactions, num_items)
    return run(source, source.num_items, support_fraction=support_fraction,
               max_itemset_size=max_itemset_size, threshold=threshold,
               cancel=cancel).result


def mine_itemsets(config, cache=False, cancel=None):
    """Mine the data file named by a MiningConfig."""
    source = TransactionFile(config.data_file, config.num_items, config.num_transactions,
                             cache=cache)
    return run(source, config.num_items, support_fraction=config.support_fraction,
               max_itemset_size=config.max_itemset_size, cancel=cancel)


def main(config_path, min_support=None, max_k=None, out=None, cache=False, show_tree=False):
    config = load_config(config_path).with_overrides(
        support_fraction=min_support, max_itemset_size=max_k, output_file=out
    )
    ctx = mine_itemsets(config, cache=cache)
    if show_tree:
        print(ctx.tree.render())

    write_result(ctx.result, config.output_file)
    print(f"✅ itemsets={len(ctx.result)} | threshold={ctx.result.threshold} "
          f"| K_max={ctx.result.real_k} → {config.output_file}")
    for k in range(1, ctx.result.real_k + 1):
        print(f"  {k}-itemsets: {len(ctx.result.level(k))}")
    return ctx.result


def build_parser():
    ap = argparse.ArgumentParser(
        prog="fpt-mine",
        description="FP-tree: Mining large itemsets using user support threshold",
        epilog=CONFIG_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("config", help="configuration file")
    ap.add_argument("--min_support", type=float, default=None, help="override the support fraction")
    ap.add_argument("--max_k", type=int, default=None, help="override the max itemset size")
    ap.add_argument("--out", default=None, help="override the result file (.csv, .parquet or .txt)")
    ap.add_argument("--cache", action="store_true", help="keep transactions in memory between scans")
    ap.add_argument("--show_tree", action="store_true", help="print the FP-tree after building it")
    ap.add_argument("--log_level", default="INFO")
    return ap


def cli(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        main(args.config, min_support=args.min_support, max_k=args.max_k, out=args.out,
             cache=args.cache, show_tree=args.show_tree)
    except KeyboardInterrupt:
        logger.error("interrupted, no results written")
        return MiningCancelled.exit_code
    except MiningError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return e.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(cli())
