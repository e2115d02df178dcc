"""
Parallel FP-Growth with pyspark:
    Pass1:
        -> Count items with reduceByKey, keep the frequent ones and order them on the driver.
        -> Broadcast the rank of each frequent item.
    Pass2:
        -> Sort each bucket by rank, and cut it into conditional buckets: (item, items before the item).
        -> Sum identical conditional buckets with reduceByKey.
    Mining:
        -> Group the conditional buckets by item. Each group holds everything needed to mine the item-sets whose
            least frequent item is the item, so every group is mined on its own worker, in its own FP-Tree.
        -> Collect the item-sets to the driver.

This algorithm is implemented with pyspark.
"""
import logging
from collections import defaultdict
from operator import add
from typing import Iterable, List, Hashable, Dict, FrozenSet, Callable, Optional

from pyspark import SparkContext, RDD

from fpmining.exceptions import EmptyDatasetError
from fpmining.freq_itemset.counter import order_items
from fpmining.freq_itemset.fpgrowth import FreqItemset, mine_item
from fpmining.freq_itemset.fptree import FPTree
from fpmining.utils import resolve_support

__all__ = [
    "FPGrowthSparkModel"
]

logger = logging.getLogger(__name__)


class FPGrowthSparkModel(object):
    def __init__(self, support, num_partitions: Optional[int]=None,
                 max_set_size: Optional[int]=None, key: Optional[Callable]=None):
        """
        :param support: The threshold of frequent itemset, absolute (int) or relative (float).
        :param num_partitions: The number of partitions of buckets. Defaults to the one of the input.
        :param max_set_size: Maximum size of Item-sets.
        :param key: The tie-breaker between items of the same support.
        """
        self._support = support
        self._num_partitions = num_partitions
        self._max_set_size = max_set_size
        self._key = key
        self._freq_itemsets = None
        self.min_support = None

    def predict(self, data, spark_context: Optional[SparkContext]=None):
        """
        :param data: RDD<bucket<item>> or Iterable<bucket<item>>
        :return: self, with frequent_itemsets() filled.
        """
        sc = spark_context or SparkContext.getOrCreate()
        if isinstance(data, RDD):
            rdd = data if self._num_partitions is None else data.repartition(self._num_partitions)
        else:
            rdd = sc.parallelize(list(data), self._num_partitions)
        buckets = rdd.map(lambda bucket: tuple(set(bucket))).cache()

        n_buckets = buckets.count()
        if n_buckets == 0:
            buckets.unpersist()
            raise EmptyDatasetError("Cannot count items of an empty dataset.")
        min_support = self.min_support = resolve_support(self._support, n_buckets)

        support_of = dict(
            buckets.flatMap(lambda bucket: ((item, 1) for item in bucket))
            .reduceByKey(add)
            .filter(lambda item_count: item_count[1] >= min_support)
            .collect()
        )
        logger.debug("%d buckets, %d frequent items at support %d", n_buckets, len(support_of), min_support)
        if not support_of:
            buckets.unpersist()
            self._freq_itemsets = list()
            return self

        order = order_items(support_of, self._key)
        rank = sc.broadcast({item: idx for idx, item in enumerate(order)})
        max_set_size = self._max_set_size

        freq_itemsets = buckets.flatMap(lambda bucket: self._generate_conditional_buckets(bucket, rank.value))\
            .reduceByKey(add)\
            .map(lambda x: (x[0][0], (x[0][1], x[1])))\
            .groupByKey()\
            .flatMap(lambda x: self._mine_group(x[0], x[1], rank.value, min_support, max_set_size))\
            .collect()

        buckets.unpersist()
        rank.unpersist()
        self._freq_itemsets = [FreqItemset(items=items, freq=freq) for items, freq in freq_itemsets]
        logger.debug("Found %d frequent item-sets", len(self._freq_itemsets))
        return self

    def frequent_itemsets(self) -> List[FreqItemset]:
        return self._freq_itemsets

    def count(self, spark_context: SparkContext, data) -> Dict[int, Dict[FrozenSet, int]]:
        """
        :return= dict<length of frequent set, dict<frequent set, frequency>>
        """
        dict_count = defaultdict(dict)
        for items, freq in self.predict(data, spark_context=spark_context).frequent_itemsets():
            dict_count[len(items)][items] = freq
        return dict_count

    @staticmethod
    def _generate_conditional_buckets(bucket, rank: Dict[Hashable, int]):
        """
        bucket -> ((item, tuple<items before the item>), 1) for every frequent item of the bucket.
        """
        sorted_bucket = sorted(
            [item for item in bucket if item in rank], key=rank.__getitem__
        )
        for idx, item in enumerate(sorted_bucket):
            yield ((item, tuple(sorted_bucket[:idx])), 1)

    @staticmethod
    def _mine_group(item, conditional_buckets: Iterable, rank: Dict[Hashable, int],
                    min_support: int, max_set_size: Optional[int]):
        order = sorted(
            (other for other in rank if rank[other] <= rank[item]), key=rank.__getitem__
        )
        tree = FPTree(order=order)
        for prefix, count in conditional_buckets:
            tree.insert(prefix + (item,), weight=count)
        for items, freq in mine_item(tree, item, min_support, max_set_size=max_set_size):
            yield (items, freq)


if __name__ == '__main__':
    fp_growth_spark = FPGrowthSparkModel(2)
    for k, v in fp_growth_spark.count(SparkContext.getOrCreate(),
                                      [[1, 2, 3], [2, 3], [1, 4], [2, 4], [1, 2, 3, 4]]).items():
        print(k, v)
