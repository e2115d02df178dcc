"""
Minimum support in absolute or relative form.
    -> int: the number of buckets, 1 <= support <= number of buckets.
    -> float: the fraction of buckets, 0 < support <= 1, rounded up.
"""
from math import ceil
from numbers import Integral, Real

from fpmining.exceptions import InvalidSupportError

__all__ = [
    "resolve_support"
]


def resolve_support(support, n_buckets: int) -> int:
    """
    Convert the given support to an absolute count of buckets.
    :param support: int/float
    :param n_buckets: int
        The number of buckets in the dataset.
    :return: int
    """
    if isinstance(support, bool):
        raise InvalidSupportError("Support must be a number, got bool.")
    if isinstance(support, Integral):
        support = int(support)
        if support <= 0 or support > n_buckets:
            raise InvalidSupportError(
                "Support {0} is out of range [1, {1}].".format(support, n_buckets))
        return support
    if isinstance(support, Real):
        if not 0 < support <= 1:
            raise InvalidSupportError(
                "Relative support {0} is out of range (0, 1].".format(support))
        # rounding keeps 0.3 * 10 at 3 instead of 4
        return max(1, int(ceil(round(support * n_buckets, 9))))
    raise InvalidSupportError(
        "The support type {0} doesn't match the required types.".format(type(support)))
