"""
FP-Growth:
    Find frequent item-sets without generating candidates.
    Pass1:
        -> Count each item, filter out infrequent items, and order the rest by descending support.
    Pass2:
        -> Insert each bucket, filtered and sorted, into an FP-Tree.
    Mining:
        -> For each item of a tree, from the least frequent one:
            -> Emit (suffix | {item}) with the support of the item in the tree.
            -> Collect the paths above the item (conditional pattern base), drop items infrequent among those paths,
                and build a conditional FP-Tree from them.
            -> Mine the conditional tree with the suffix (suffix | {item}).
        -> A tree with a single path emits every combination of its items at once.

    The mining is driven by an explicit stack of frames instead of recursive calls. Each frame owns its conditional
    tree, and drops it when all of its items are done.

>> from fpmining.freq_itemset import FPGrowth
>> fp_growth = FPGrowth(support=2)
>> frequent_itemsets = fp_growth.count(iterable<list<item>>)
"""
import logging
from collections import defaultdict, namedtuple
from itertools import combinations
from typing import Iterable, List, Hashable, Dict, FrozenSet, Callable, Optional, Iterator, Set

from fpmining.exceptions import MiningCancelled
from fpmining.freq_itemset.counter import ItemFrequencyCounter
from fpmining.freq_itemset.fptree import FPTree, extract_base

__all__ = [
    "FPGrowth", "FreqItemset", "mine", "mine_item", "mine_frequent_itemsets",
    "build_tree", "build_conditional_tree"
]

logger = logging.getLogger(__name__)

FreqItemset = namedtuple("FreqItemset", ["items", "freq"])

_EXHAUSTED = object()


def build_tree(data: Iterable[Iterable[Hashable]], counter: ItemFrequencyCounter) -> FPTree:
    """
    Build the global FP-Tree from buckets, after counter.count() has been called on the same buckets.
    """
    tree = FPTree(order=counter.ordered_items)
    for bucket in data:
        filtered = counter.filter_transaction(bucket)
        if filtered:
            tree.insert(filtered)
    logger.debug("Built %r", tree)
    return tree


def build_conditional_tree(tree: FPTree, item, min_support: int) -> FPTree:
    """
    Build the conditional FP-Tree of the item.
    Items whose support among the paths above the item is lower than min_support are left out.
    The remaining items keep their order in the given tree.
    """
    base = extract_base(tree, item)
    _, support_of = ItemFrequencyCounter(support=min_support).count_weighted(base, min_support)
    order = [
        path_item for path_item in tree.order if path_item in support_of
    ]

    conditional_tree = FPTree(order=order)
    rank = conditional_tree.rank
    for path, count in base:
        filtered = [path_item for path_item in path if path_item in rank]
        if filtered:
            conditional_tree.insert(filtered, weight=count)
    return conditional_tree


def _size_limit(max_set_size) -> float:
    return float("inf") if max_set_size is None else max_set_size


def _single_path_itemsets(tree: FPTree, min_support: int, suffix: FrozenSet,
                          limit: float) -> Iterator[FreqItemset]:
    # counts never grow downwards along a path
    chain = [(item, count) for item, count in tree.single_path() if count >= min_support]
    max_size = min(len(chain), limit - len(suffix))
    size = 1
    while size <= max_size:
        for combination in combinations(chain, size):
            yield FreqItemset(
                items=suffix | frozenset(item for item, _ in combination),
                freq=min(count for _, count in combination)
            )
        size += 1


def mine(tree: FPTree, min_support: int, suffix: Iterable[Hashable]=frozenset(),
         max_set_size: Optional[int]=None, cancel_event=None) -> Iterator[FreqItemset]:
    """
    Mine all frequent item-sets of the tree, each joined with the suffix.
    :param tree: FPTree
    :param min_support: int, absolute support.
    :param suffix: the items every emitted item-set contains.
    :param max_set_size: the maximum size of emitted item-sets. None for no limit.
    :param cancel_event: object with is_set(), like threading.Event.
        It is checked before building each conditional tree.
    :return: Iterator<FreqItemset>
    """
    limit = _size_limit(max_set_size)
    suffix = frozenset(suffix)
    if len(suffix) >= limit:
        return

    # frame: [tree, suffix, iterator of pending items]
    stack = [[tree, suffix, None]]
    while stack:
        frame = stack[-1]
        current_tree, current_suffix, pending = frame
        if pending is None:
            if current_tree.is_single_path():
                stack.pop()
                yield from _single_path_itemsets(current_tree, min_support, current_suffix, limit)
                continue
            pending = frame[2] = iter(current_tree.items())

        item = next(pending, _EXHAUSTED)
        if item is _EXHAUSTED:
            stack.pop()
            continue

        support = current_tree.support(item)
        if support < min_support:
            continue
        itemset = current_suffix | {item}
        yield FreqItemset(items=itemset, freq=support)
        if len(itemset) >= limit:
            continue

        if cancel_event is not None and cancel_event.is_set():
            raise MiningCancelled("Mining was cancelled at {0} frames deep.".format(len(stack)))
        conditional_tree = build_conditional_tree(current_tree, item, min_support)
        if not conditional_tree.is_empty():
            stack.append([conditional_tree, itemset, None])


def mine_item(tree: FPTree, item, min_support: int, suffix: Iterable[Hashable]=frozenset(),
              max_set_size: Optional[int]=None, cancel_event=None) -> Iterator[FreqItemset]:
    """
    Mine the item-sets of one branch: all item-sets containing the item and built from items before it in the
    order of the tree. Branches of different items share nothing, and can be mined apart.
    """
    limit = _size_limit(max_set_size)
    suffix = frozenset(suffix)
    support = tree.support(item)
    if support < min_support or len(suffix) >= limit:
        return
    itemset = suffix | {item}
    yield FreqItemset(items=itemset, freq=support)
    if len(itemset) >= limit:
        return
    if cancel_event is not None and cancel_event.is_set():
        raise MiningCancelled("Mining was cancelled before the branch of {0!r}.".format(item))
    yield from mine(build_conditional_tree(tree, item, min_support), min_support, itemset,
                    max_set_size=max_set_size, cancel_event=cancel_event)


def mine_frequent_itemsets(transactions: Iterable[Iterable[Hashable]], min_support,
                           key: Optional[Callable]=None, max_set_size: Optional[int]=None,
                           cancel_event=None) -> Set[FreqItemset]:
    """
    :param transactions: List<bucket<item>>
    :param min_support: int for an absolute count, float in (0, 1] for a fraction of buckets.
    :param key: the tie-breaker between items of the same support.
    :return: Set<FreqItemset>, empty if no item is frequent.
    """
    return set(
        FPGrowth(support=min_support, max_set_size=max_set_size, key=key)
        .iter_count(transactions, cancel_event=cancel_event)
    )


class FPGrowth(object):
    def __init__(self, support, max_set_size: int=float("inf"), key: Optional[Callable]=None):
        """
        :param support: The threshold of frequent itemset, absolute (int) or relative (float).
        :param max_set_size: Maximum size of Item-sets.
        :param key: The tie-breaker between items of the same support.
        """
        self._support = support
        self._max_set_size = max_set_size
        self._key = key
        self._freq_itemsets = None
        self.min_support = None
        self.tree = None

    def iter_count(self, iterable: Iterable[Iterable[Hashable]], cancel_event=None) -> Iterator[FreqItemset]:
        # two passes are needed
        data = list(iterable)
        counter = ItemFrequencyCounter(support=self._support, key=self._key)
        counter.count(data)
        self.min_support = counter.min_support
        self.tree = build_tree(data, counter)
        yield from mine(self.tree, self.min_support,
                        max_set_size=self._max_set_size, cancel_event=cancel_event)

    def predict(self, data: Iterable[Iterable[Hashable]], **kwargs):
        """
        :return: self, with frequent_itemsets() filled.
        """
        self._freq_itemsets = list(self.iter_count(data, **kwargs))
        logger.debug("Found %d frequent item-sets", len(self._freq_itemsets))
        return self

    def frequent_itemsets(self) -> List[FreqItemset]:
        return self._freq_itemsets

    def count(self, iterable) -> Dict[int, Dict[FrozenSet, int]]:
        """
        :return= dict<length of frequent set, dict<frequent set, frequency>>
        """
        dict_count = defaultdict(dict)
        for items, freq in self.iter_count(iterable):
            dict_count[len(items)][items] = freq
        return dict_count


if __name__ == '__main__':
    fp_growth = FPGrowth(2)
    for k, v in fp_growth.count([[1, 2, 3], [2, 3], [1, 4], [2, 4], [1, 2, 3, 4]]).items():
        print(k, v)
