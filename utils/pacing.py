"""
Fixed-delay pacing for sequential work against rate-limited APIs.
"""
import time
import logging
from typing import Callable, Iterator, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def paced(
    items: Sequence[T],
    interval: float,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[Tuple[int, T]]:
    """
    Yield (index, item) pairs, sleeping `interval` seconds between items.

    No delay is applied before the first item or after the last one. The
    sleep happens when the consumer asks for the next item, so the time the
    consumer spends on an item does not count against the interval.

    Args:
        items: Work items to iterate over in order.
        interval: Minimum delay between consecutive items, in seconds.
        sleep: Sleep function (injectable for tests).

    Yields:
        Tuple[int, T]: Zero-based index and item.
    """
    total = len(items)
    for index, item in enumerate(items):
        if index > 0 and interval > 0:
            logger.debug(f"Pacing {interval:.2f}s before item {index + 1}/{total}")
            sleep(interval)
        yield index, item
