"""
This module is to find frequent item-sets with given support value, with FP-Growth.
    -> The input is an iterable of buckets, like:
    [
        [itemA, itemB, ...],
        [itemA, itemC, ...],
        ...
    ]
    Each bucket is a transaction. Duplicated items in a bucket are counted once.

    -> The support is either an absolute number of buckets (int),
        or a fraction of buckets (float in (0, 1]).

    -> The output is a list of FreqItemset(items, freq), or a dict, which is like:
    {
        the length of item-set :
            {
                frequent item-set: count
            }
    }

    The item-set is presented in frozenset.
"""

from .counter import ItemFrequencyCounter
from .fptree import FPTree, FPNode, HeaderTable, extract_base
from .fpgrowth import (
    FPGrowth, FreqItemset, mine, mine_item, mine_frequent_itemsets,
    build_tree, build_conditional_tree
)
from .fpgrowth_spark import FPGrowthSparkModel

__all__ = [
    "ItemFrequencyCounter", "FPTree", "FPNode", "HeaderTable", "extract_base",
    "FPGrowth", "FreqItemset", "mine", "mine_item", "mine_frequent_itemsets",
    "build_tree", "build_conditional_tree", "FPGrowthSparkModel"
]