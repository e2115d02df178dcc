"""
Errors raised by the frequent itemset miners.
"""

__all__ = [
    "FPGrowthError", "EmptyDatasetError", "InvalidSupportError",
    "InvalidItemError", "MiningCancelled", "TreeInvariantError"
]


class FPGrowthError(Exception):
    pass


class EmptyDatasetError(FPGrowthError, ValueError):
    pass


class InvalidSupportError(FPGrowthError, ValueError):
    pass


class InvalidItemError(FPGrowthError, KeyError):
    """
    An item was given to a tree whose item order does not contain it.
    """
    def __init__(self, item):
        super().__init__(item)
        self.item = item

    def __str__(self):
        return "Item {0!r} is not in the item order of the tree.".format(self.item)


class MiningCancelled(FPGrowthError):
    pass


class TreeInvariantError(AssertionError):
    """
    The FP-tree is structurally broken. This is a bug, never a data condition.
    """
    pass
