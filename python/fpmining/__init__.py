"""
Frequent item-set mining with FP-Tree and FP-Growth.
"""
import logging

from fpmining.exceptions import (
    FPGrowthError, EmptyDatasetError, InvalidSupportError,
    InvalidItemError, MiningCancelled, TreeInvariantError
)
from fpmining.freq_itemset import FPGrowth, FreqItemset, mine_frequent_itemsets

__all__ = [
    "FPGrowth", "FreqItemset", "mine_frequent_itemsets",
    "FPGrowthError", "EmptyDatasetError", "InvalidSupportError",
    "InvalidItemError", "MiningCancelled", "TreeInvariantError"
]

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
