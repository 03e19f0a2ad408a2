import logging
from pathlib import Path

from .errors import DataFileError, MiningCancelled

logger = logging.getLogger(__name__)


def check_cancel(cancel):
    if cancel is not None and cancel.is_set():
        raise MiningCancelled("mining run cancelled")


def _tokens(fp):
    for line in fp:
        yield from line.split()


class TransactionFile:
    """Restartable reader over a data file of ``size item ... item`` records.

    Every iteration reopens the file and yields exactly ``num_transactions``
    transactions as lists of ints. With ``cache=True`` the first complete
    pass is kept in memory and later passes replay it.
    """

    def __init__(self, path, num_items, num_transactions, cache=False):
        self.path = Path(path)
        self.num_items = num_items
        self.num_transactions = num_transactions
        self.cache = cache
        self._cached = None

    def __len__(self):
        return self.num_transactions

    def __iter__(self):
        if self._cached is not None:
            return iter(self._cached)
        if self.cache:
            return self._fill_cache()
        return self._read()

    def _fill_cache(self):
        rows = []
        for trans in self._read():
            rows.append(trans)
            yield trans
        self._cached = rows

    def _int(self, token, index):
        try:
            return int(token)
        except ValueError:
            raise DataFileError(
                f"{self.path}: transaction {index} holds non-integer token {token!r}"
            ) from None

    def _read(self):
        try:
            fp = open(self.path, "r", encoding="ascii")
        except OSError as e:
            raise DataFileError(f"Can't open data file, {self.path}: {e.strerror or e}") from e

        with fp:
            try:
                yield from self._parse(_tokens(fp))
            except (UnicodeDecodeError, OSError) as e:
                raise DataFileError(f"Can't read data file, {self.path}: {e}") from e

    def _parse(self, tokens):
        for i in range(self.num_transactions):
            size_token = next(tokens, None)
            if size_token is None:
                raise DataFileError(
                    f"{self.path}: expected {self.num_transactions} transactions, found {i}"
                )
            size = self._int(size_token, i)
            if size < 0:
                raise DataFileError(f"{self.path}: transaction {i} has negative size {size}")

            trans = []
            for _ in range(size):
                token = next(tokens, None)
                if token is None:
                    raise DataFileError(
                        f"{self.path}: transaction {i} truncated, expected {size} items"
                    )
                item = self._int(token, i)
                if not 0 <= item < self.num_items:
                    raise DataFileError(
                        f"{self.path}: item {item} in transaction {i} outside [0, {self.num_items})"
                    )
                trans.append(item)
            yield trans

        if next(tokens, None) is not None:
            logger.warning("%s: trailing data after %d transactions ignored",
                           self.path, self.num_transactions)


class InMemoryTransactions:
    """Transactions already held in memory, validated against ``num_items``."""

    def __init__(self, transactions, num_items=None):
        rows = [list(t) for t in transactions]
        if num_items is None:
            num_items = 1 + max((max(t) for t in rows if t), default=-1)
        for i, t in enumerate(rows):
            for item in t:
                if not 0 <= item < num_items:
                    raise DataFileError(f"item {item} in transaction {i} outside [0, {num_items})")
        self.rows = rows
        self.num_items = max(num_items, 1)
        self.num_transactions = len(rows)

    def __len__(self):
        return self.num_transactions

    def __iter__(self):
        return iter(self.rows)


def write_transactions(path, transactions):
    """Write transactions in the ``size item ... item`` data file format."""
    with open(path, "w") as fp:
        for t in transactions:
            fp.write(" ".join(str(x) for x in [len(t), *t]) + "\n")
