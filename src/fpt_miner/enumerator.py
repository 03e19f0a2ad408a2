import logging
from itertools import combinations

from .errors import OutOfMemoryError
from .fptree import ROOT
from .transactions import check_cancel

logger = logging.getLogger(__name__)


class SupportMapping(dict):
    """Canonical itemset (sorted tuple of item ids) -> accumulated support."""

    def add(self, itemset, weight):
        self[itemset] = self.get(itemset, 0) + weight

    def support(self, items):
        return self.get(tuple(sorted(items)), 0)


def path_subsets(path, max_size):
    """Every non-empty subset of ``path`` with at most ``max_size`` items."""
    items = sorted(path)
    for size in range(1, min(max_size, len(items)) + 1):
        yield from combinations(items, size)


def enumerate_itemsets(tree, max_size, is_frequent=None, cancel=None):
    """Attribute tree weight to itemsets by peeling leaves toward the root.

    A node is popped once, either as an original leaf or when its last live
    child retires. Its residual weight (transactions ending exactly there)
    is added to every subset of its root path. Retiring a node removes its
    full count from the parent's residual, since the transactions below it
    were already attributed to subsets that include the parent's path.
    """
    residual = list(tree.count)
    live = [tree.num_children(n) for n in range(len(tree))]
    mapping = SupportMapping()
    pops = subsets = 0

    worklist = list(tree.leaves())
    worklist.reverse()
    try:
        while worklist:
            check_cancel(cancel)
            node = worklist.pop()
            weight = residual[node]
            pops += 1

            if weight > 0:
                path = tree.path(node)
                if is_frequent is not None:
                    path = [it for it in path if is_frequent(it)]
                for itemset in path_subsets(path, max_size):
                    mapping.add(itemset, weight)
                    subsets += 1
                residual[node] -= weight

            parent = tree.parent[node]
            if parent is None or parent == ROOT:
                continue
            residual[parent] -= tree.count[node]
            if live[parent] == 1:
                live[parent] = 0
                worklist.append(parent)
            else:
                live[parent] -= 1
    except MemoryError as e:
        raise OutOfMemoryError("out of memory while enumerating itemsets") from e

    logger.debug("leaf peeling: %d pops, %d subset updates, %d itemsets",
                 pops, subsets, len(mapping))
    return mapping
