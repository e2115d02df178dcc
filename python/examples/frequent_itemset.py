"""
Example of FP-Growth, sequential and on Spark.

    python frequent_itemset.py fpgrowth [buckets.txt]
    python frequent_itemset.py spark [buckets.txt]

Each line of the input file is a bucket of comma-separated integers.
Without an input file, random market baskets are generated.
"""
import logging
import os
import sys
import time

import numpy as np
from pyspark import SparkContext

from fpmining.freq_itemset import FPGrowth, FPGrowthSparkModel


class DataPrepare(object):
    def __init__(self, path=None, n_buckets=10000, n_items=200, seed=233):
        if path is not None and os.path.exists(path):
            self.iterable = self.read_data(path)
        else:
            self.iterable = self.generate_data(n_buckets, n_items, seed)

    @staticmethod
    def read_data(path):
        with open(path, "r") as file:
            iterable = [
                [int(item) for item in line.strip().split(",")]
                for line in file if line.strip()
            ]
        return iterable

    @staticmethod
    def generate_data(n_buckets, n_items, seed):
        # popular items are picked far more often than the tail
        random_state = np.random.RandomState(seed)
        popularity = 1 / np.arange(1, n_items + 1)
        popularity /= popularity.sum()
        return [
            sorted(set(random_state.choice(n_items, random_state.randint(1, 15), p=popularity).tolist()))
            for _ in range(n_buckets)
        ]

    def __iter__(self):
        yield from self.iterable


class Configuration(object):
    def __init__(self, input_path, output_path):
        self.input_path = input_path
        self.output_path = output_path

    def __call__(self, func):
        def run(*args, **kwargs):
            start = time.time()
            func(self.input_path, self.output_path, *args, **kwargs)
            end = time.time()
            print("Duration:", (end - start))
        return run


def write_result(output_path, name, frequent_itemsets):
    os.makedirs(output_path, exist_ok=True)
    with open(os.path.join(output_path, "%s.txt" % name), 'w') as file:
        for size in sorted(frequent_itemsets):
            itemsets = frequent_itemsets[size]
            print("Size {0}: {1} frequent item-sets".format(size, len(itemsets)))
            file.write(", ".join([
                "(%s):%d" % (",".join([str(i) for i in sorted(items)]), freq)
                for items, freq in itemsets.items()
            ]))
            file.write("\n")


def model(input_path, output_path, Model, **kwargs):
    data = DataPrepare(input_path)
    write_result(output_path, Model.__name__, Model(**kwargs).count(data))


def spark_model(input_path, output_path, SparkModel, **kwargs):
    sc = SparkContext(appName="FPGrowth")
    data = DataPrepare(input_path)
    try:
        write_result(output_path, SparkModel.__name__,
                     SparkModel(**kwargs).count(spark_context=sc, data=list(data)))
    finally:
        sc.stop()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG,
                        format='[%(levelname)s %(module)s line:%(lineno)d] %(message)s')
    case = str(sys.argv[1]).strip().lower() if len(sys.argv) > 1 else "fpgrowth"
    conf = Configuration(
        input_path=sys.argv[2] if len(sys.argv) > 2 else None,
        output_path="../../output"
    )
    if case == "spark":
        conf(spark_model)(SparkModel=FPGrowthSparkModel, support=0.01, num_partitions=8)
    else:
        conf(model)(Model=FPGrowth, support=0.01)
