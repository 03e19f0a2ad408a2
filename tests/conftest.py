import pytest

from fpt_miner.transactions import write_transactions

SCENARIO_A = [[0, 1, 2], [0, 1], [0, 2, 3], [1, 2, 4]]


@pytest.fixture
def scenario_a():
    return [list(t) for t in SCENARIO_A]


@pytest.fixture
def write_db(tmp_path):
    """Write a data file and a config file next to it; returns the config path."""

    def _write(transactions, support=0.5, max_k=0, num_items=None, num_transactions=None,
               out="results.csv"):
        if num_items is None:
            num_items = 1 + max((max(t) for t in transactions if t), default=0)
        if num_transactions is None:
            num_transactions = len(transactions)
        write_transactions(tmp_path / "data.dat", transactions)
        cfg = tmp_path / "fpt.cfg"
        cfg.write_text(f"{max_k}\n{support}\n{num_items}\n{num_transactions}\ndata.dat\n{out}\n")
        return cfg

    return _write
