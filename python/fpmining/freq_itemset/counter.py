"""
The first pass of FP-Growth:
    -> Count the occurrence of each item, once per bucket.
    -> Filter out infrequent items.
    -> Order the frequent items by descending support. Ties are broken by a fixed key over the items,
        so that the same input always produces the same tree.
"""
import logging
from collections import defaultdict
from typing import Iterable, List, Hashable, Dict, Tuple, Callable, Optional

from fpmining.exceptions import EmptyDatasetError
from fpmining.utils import resolve_support

__all__ = [
    "ItemFrequencyCounter", "order_items"
]

logger = logging.getLogger(__name__)


def order_items(support_of: Dict[Hashable, int],
                key: Optional[Callable]=None) -> List[Hashable]:
    """
    :return: items sorted by (descending support, ascending key(item))
    """
    if key is None:
        return sorted(support_of, key=lambda item: (-support_of[item], item))
    return sorted(support_of, key=lambda item: (-support_of[item], key(item)))


class ItemFrequencyCounter(object):
    def __init__(self, support, key: Optional[Callable]=None):
        """
        :param support: int/float
            The absolute support, or the fraction of buckets.
        :param key: Callable[[item], comparable]
            The tie-breaker between items with the same support. Defaults to the item itself.
        """
        self._support = support
        self._key = key
        self.min_support = None
        self.ordered_items = None
        self.support_of = None
        self._rank = None

    def count(self, data: Iterable[Iterable[Hashable]]) \
            -> Tuple[List[Hashable], Dict[Hashable, int]]:
        """
        :param data: List<bucket<item>>
            Must be non-empty.
        :return: (frequent items in order, dict<item, support>)
        """
        n_buckets = 0
        count_map = defaultdict(int)
        for bucket in data:
            n_buckets += 1
            for item in set(bucket):
                count_map[item] += 1
        if n_buckets == 0:
            raise EmptyDatasetError("Cannot count items of an empty dataset.")

        self.min_support = resolve_support(self._support, n_buckets)
        self._set_frequent_items(count_map)
        logger.debug("%d buckets, %d distinct items, %d frequent at support %d",
                     n_buckets, len(count_map), len(self.ordered_items), self.min_support)
        return self.ordered_items, self.support_of

    def count_weighted(self, pairs: Iterable[Tuple[Iterable[Hashable], int]],
                       min_support: int) -> Tuple[List[Hashable], Dict[Hashable, int]]:
        """
        Count items of weighted buckets, like a conditional pattern base.
        An empty input is legal here, and has no frequent items.
        :param pairs: List<(bucket<item>, count)>
        :param min_support: int, absolute support.
        :return: (frequent items in order, dict<item, support>)
        """
        count_map = defaultdict(int)
        for bucket, count in pairs:
            for item in set(bucket):
                count_map[item] += count
        self.min_support = min_support
        self._set_frequent_items(count_map)
        return self.ordered_items, self.support_of

    def _set_frequent_items(self, count_map):
        self.support_of = {
            key: val for key, val in count_map.items() if val >= self.min_support
        }
        self.ordered_items = order_items(self.support_of, self._key)
        self._rank = {item: idx for idx, item in enumerate(self.ordered_items)}

    def filter_transaction(self, bucket: Iterable[Hashable]) -> List[Hashable]:
        """
        Drop infrequent items and duplicates, then sort by the item order.
        """
        if self._rank is None:
            raise RuntimeError("count() must be called before filter_transaction().")
        rank = self._rank
        return sorted({item for item in bucket if item in rank}, key=rank.__getitem__)
