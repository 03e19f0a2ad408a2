import pandas as pd
import pytest

from fpt_miner import (
    ConfigError,
    DataFileError,
    MiningConfig,
    ResultWriteError,
    load_config,
    mine_transactions,
)
from fpt_miner.results import read_result, write_result
from fpt_miner.transactions import InMemoryTransactions, TransactionFile


def test_load_config(tmp_path):
    cfg = tmp_path / "fpt.cfg"
    cfg.write_text("3\n0.25\n10 8\ndata.dat out.csv\n")
    config = load_config(cfg)
    assert config == MiningConfig(3, 0.25, 10, 8, str(tmp_path / "data.dat"), str(tmp_path / "out.csv"))
    assert config.threshold == 2


@pytest.mark.parametrize("text", [
    "3 0.5 10 8 data.dat",
    "3 0.5 10 8 data.dat out.csv extra",
    "x 0.5 10 8 data.dat out.csv",
    "3 half 10 8 data.dat out.csv",
    "3 0 10 8 data.dat out.csv",
    "3 1.5 10 8 data.dat out.csv",
    "3 0.5 0 8 data.dat out.csv",
    "3 0.5 10 0 data.dat out.csv",
])
def test_bad_config(tmp_path, text):
    cfg = tmp_path / "fpt.cfg"
    cfg.write_text(text)
    with pytest.raises(ConfigError):
        load_config(cfg)


def test_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.cfg")


def test_overrides_are_validated():
    config = MiningConfig(0, 0.5, 4, 4)
    assert config.with_overrides(support_fraction=None) is config
    assert config.with_overrides(max_itemset_size=2).max_itemset_size == 2
    with pytest.raises(ConfigError):
        config.with_overrides(support_fraction=2.0)


def test_transaction_file_is_restartable(tmp_path):
    path = tmp_path / "data.dat"
    path.write_text("3 0 1 2\n2 0\n1\n0\n1 4\n")
    source = TransactionFile(path, 5, 4)
    assert list(source) == [[0, 1, 2], [0, 1], [], [4]]
    assert list(source) == [[0, 1, 2], [0, 1], [], [4]]


def test_transaction_file_cache(tmp_path):
    path = tmp_path / "data.dat"
    path.write_text("1 0\n1 1\n")
    source = TransactionFile(path, 2, 2, cache=True)
    assert list(source) == [[0], [1]]
    path.unlink()
    assert list(source) == [[0], [1]]


@pytest.mark.parametrize("text,num_items,num_trans", [
    ("1 0\n", 2, 2),
    ("2 0\n", 2, 1),
    ("1 a\n", 2, 1),
    ("1 5\n", 2, 1),
    ("-1\n", 2, 1),
])
def test_bad_data_file(tmp_path, text, num_items, num_trans):
    path = tmp_path / "data.dat"
    path.write_text(text)
    with pytest.raises(DataFileError):
        list(TransactionFile(path, num_items, num_trans))


def test_undecodable_data_file(tmp_path):
    path = tmp_path / "data.dat"
    path.write_bytes(b"3 0 1 2\n2 0 1\n\xff\xfe 0\n")
    with pytest.raises(DataFileError):
        list(TransactionFile(path, 3, 3))


def test_missing_data_file(tmp_path):
    with pytest.raises(DataFileError):
        list(TransactionFile(tmp_path / "nope.dat", 2, 1))


def test_in_memory_range_check():
    with pytest.raises(DataFileError):
        InMemoryTransactions([[0, 3]], num_items=3)
    assert InMemoryTransactions([[0, 3]]).num_items == 4


@pytest.fixture
def result(scenario_a):
    return mine_transactions(scenario_a, support_fraction=0.5)


def test_write_csv(tmp_path, result):
    path = write_result(result, tmp_path / "out" / "result.csv")
    df = read_result(path)
    assert len(df) == 6
    assert set(df["itemsets"]) == set(result.as_dict())
    assert df["k"].tolist() == [1, 1, 1, 2, 2, 2]


def test_write_parquet(tmp_path, result):
    df = pd.read_parquet(write_result(result, tmp_path / "result.parquet"))
    assert len(df) == 6
    assert sorted(df["support"].tolist()) == [2, 2, 2, 3, 3, 3]


def test_write_text(tmp_path, result):
    path = write_result(result, tmp_path / "result.txt")
    lines = path.read_text().splitlines()
    assert lines[0] == "1 3 0"
    assert lines[-1] == "2 2 1 2"


def test_failed_write_leaves_no_file(tmp_path, result, monkeypatch):
    def broken(self, *args, **kwargs):
        with open(args[0], "w") as fp:
            fp.write("k,support\n")
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(pd.DataFrame, "to_csv", broken)
    with pytest.raises(ResultWriteError):
        write_result(result, tmp_path / "result.csv")
    assert list(tmp_path.iterdir()) == []


def test_unwritable_destination(tmp_path, result):
    (tmp_path / "blocker").write_text("")
    with pytest.raises(ResultWriteError):
        write_result(result, tmp_path / "blocker" / "result.csv")
