import numpy as np
import pytest

from fpt_miner.config import compute_threshold
from fpt_miner.errors import ConfigError
from fpt_miner.frequency import count_items, resolve_real_k


def test_supports_and_ranking(scenario_a):
    table = count_items(scenario_a, 5, support_fraction=0.5)
    assert table.supports.tolist() == [3, 3, 3, 1, 1]
    assert table.order.tolist() == [0, 1, 2, 3, 4]
    assert table.frequent == (0, 1, 2)
    assert table.threshold == 2
    assert table.real_k == 3
    assert table.num_transactions == 4


def test_ranking_is_descending_and_stable_on_ties():
    table = count_items([[3], [3], [1, 2], [2, 3]], 4, threshold=1)
    assert table.order.tolist() == [3, 2, 1, 0]
    assert table.frequent == (3, 2, 1)
    assert table.ranks == {3: 0, 2: 1, 1: 2}


def test_duplicate_items_count_once_per_transaction():
    table = count_items([[1, 1, 1], [1]], 2, threshold=1)
    assert table.support(1) == 2


@pytest.mark.parametrize("fraction,n,expected", [(0.5, 5, 3), (0.5, 7, 4), (0.5, 3, 2), (0.3, 10, 3)])
def test_threshold_rounds_half_up(fraction, n, expected):
    assert compute_threshold(fraction, n) == expected


def test_threshold_never_rounds_to_zero():
    assert compute_threshold(0.01, 10) == 1
    assert count_items([[0]] * 10, 1, support_fraction=0.01).threshold == 1


@pytest.mark.parametrize("user_k,expected", [(0, 3), (-2, 3), (7, 3), (3, 3), (2, 2), (1, 1)])
def test_real_k(user_k, expected):
    assert resolve_real_k(user_k, 3) == expected


def test_nothing_frequent():
    table = count_items([[0], [1], [2]], 3, threshold=2)
    assert table.frequent == ()
    assert isinstance(table.supports, np.ndarray)


def test_threshold_or_fraction_required():
    with pytest.raises(ConfigError):
        count_items([[0]], 1)


def test_large_item_space_counts_only_present_items():
    table = count_items([[199_999, 3], [3]], 200_000, threshold=2)
    assert table.supports.shape == (200_000,)
    assert table.support(3) == 2
    assert table.support(199_999) == 1
    assert int(table.supports.sum()) == 3
    assert table.frequent == (3,)
