import logging

from .errors import OutOfMemoryError
from .transactions import check_cancel

logger = logging.getLogger(__name__)

ROOT = 0


class FPTree:
    """FP-tree stored as an arena of parallel lists indexed by node id.

    Node 0 is the root and carries no item. ``children[n]`` maps item to
    child id in creation order; ``parent`` and ``next_same`` are plain ids
    (None when absent) and never imply ownership. The header table keeps,
    per item rank, the first and last node of that item's horizontal chain.
    """

    def __init__(self, frequent):
        self.frequent = tuple(frequent)
        self.rank = {item: r for r, item in enumerate(self.frequent)}

        self.item = [None]
        self.count = [0]
        self.parent = [None]
        self.children = [{}]
        self.num_path = [1]
        self.next_same = [None]

        self.head = [None] * len(self.frequent)
        self.tail = [None] * len(self.frequent)
        self.num_inserted = 0

    def __len__(self):
        return len(self.item)

    @property
    def num_nodes(self):
        return len(self.item) - 1

    def num_children(self, node):
        return len(self.children[node])

    def is_leaf(self, node):
        return not self.children[node]

    def project(self, transaction):
        """Keep frequent items only, ordered by ascending rank."""
        rank = self.rank
        return sorted({it for it in transaction if it in rank}, key=rank.__getitem__)

    def _new_node(self, item, weight, parent):
        node = len(self.item)
        self.item.append(item)
        self.count.append(weight)
        self.parent.append(parent)
        self.children.append({})
        self.num_path.append(1)
        self.next_same.append(None)
        self.children[parent][item] = node

        r = self.rank[item]
        if self.head[r] is None:
            self.head[r] = node
        else:
            self.next_same[self.tail[r]] = node
        self.tail[r] = node
        return node

    def insert(self, path, weight=1):
        """Merge an already projected and ordered path into the tree."""
        if not path:
            return
        cur = ROOT
        branched = False
        for item in path:
            child = self.children[cur].get(item)
            if child is not None:
                self.count[child] += weight
                cur = child
                continue
            if not branched:
                branched = True
                # a new child under a node that already had children adds a leaf
                if self.children[cur]:
                    up = cur
                    while up is not None:
                        self.num_path[up] += 1
                        up = self.parent[up]
            cur = self._new_node(item, weight, cur)
        self.num_inserted += 1

    def insert_transaction(self, transaction, weight=1):
        self.insert(self.project(transaction), weight)

    def chain(self, item):
        """Yield the nodes carrying ``item`` in creation order."""
        r = self.rank.get(item)
        node = None if r is None else self.head[r]
        while node is not None:
            yield node
            node = self.next_same[node]

    def chain_support(self, item):
        return sum(self.count[n] for n in self.chain(item))

    def path(self, node):
        """Items on the root-to-node path, root excluded."""
        items = []
        while node is not None and node != ROOT:
            items.append(self.item[node])
            node = self.parent[node]
        items.reverse()
        return items

    def nodes(self):
        """Depth-first pre-order over every non-root node."""
        stack = list(reversed(list(self.children[ROOT].values())))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(self.children[node].values())))

    def leaves(self):
        return (n for n in self.nodes() if self.is_leaf(n))

    def render(self):
        lines = []
        stack = [(n, 0) for n in reversed(list(self.children[ROOT].values()))]
        while stack:
            node, depth = stack.pop()
            lines.append(f"{'  ' * depth}{self.item[node]}:{self.count[node]}")
            stack.extend((c, depth + 1) for c in reversed(list(self.children[node].values())))
        return "\n".join(lines)


def build_fptree(transactions, table, cancel=None):
    """Second scan: insert every transaction's frequent projection."""
    tree = FPTree(table.frequent)
    try:
        for trans in transactions:
            check_cancel(cancel)
            tree.insert_transaction(trans)
    except MemoryError as e:
        raise OutOfMemoryError("out of memory while building the FP-tree") from e

    logger.info("FP-tree built: %d nodes, %d leaf paths, %d transactions inserted",
                tree.num_nodes, tree.num_path[ROOT], tree.num_inserted)
    return tree
