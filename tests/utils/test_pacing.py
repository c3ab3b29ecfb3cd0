from unittest.mock import MagicMock
from utils.pacing import paced


def test_sleeps_between_items_only():
    sleep = MagicMock()
    items = list(paced(["a", "b", "c"], 0.5, sleep=sleep))
    assert items == [(0, "a"), (1, "b"), (2, "c")]
    assert sleep.call_count == 2
    sleep.assert_called_with(0.5)


def test_zero_interval_never_sleeps():
    sleep = MagicMock()
    list(paced([1, 2, 3], 0, sleep=sleep))
    sleep.assert_not_called()


def test_empty_and_single_item():
    sleep = MagicMock()
    assert list(paced([], 1.0, sleep=sleep)) == []
    assert list(paced(["only"], 1.0, sleep=sleep)) == [(0, "only")]
    sleep.assert_not_called()


def test_sleep_happens_when_next_item_is_requested():
    sleep = MagicMock()
    iterator = paced(["a", "b"], 0.25, sleep=sleep)
    next(iterator)
    sleep.assert_not_called()
    next(iterator)
    sleep.assert_called_once_with(0.25)
