"""
FP-Tree:
    A prefix tree of buckets, where the items in each bucket are sorted by descending support.
    Buckets sharing a prefix share the nodes of that prefix, and each node counts the buckets passing through it.

    -> The nodes live in an arena owned by the tree. A node is an index into parallel lists:
        item, count, parent, children(dict<item, index>) and next_node (the node-link).
    -> Node 0 is the root, whose item is None and whose count is unused.
    -> The header table maps each item to the first and last node carrying it. Nodes of the same item are chained
        through next_node, in the order they were created.
    -> The tree is append-only: nodes are never removed or moved, only the counts along the path of an inserted
        bucket grow.

>> tree = FPTree(order=["a", "b", "c"])
>> tree.insert(["b", "a"])
>> extract_base(tree, "b")
[(("a",), 1)]
"""
from collections import namedtuple
from typing import Iterable, List, Hashable, Dict, Tuple, Optional, Iterator

from fpmining.exceptions import InvalidItemError, TreeInvariantError

__all__ = [
    "FPTree", "FPNode", "HeaderTable", "extract_base", "ROOT", "NULL"
]

ROOT = 0
NULL = -1

FPNode = namedtuple("FPNode", ["index", "item", "count", "parent", "next_node"])


class HeaderTable(object):
    """
    dict<item, (head, tail)> over the node-link chains of one tree.
    Items are kept in the order of their first occurrence in the tree.
    """
    def __init__(self):
        self._heads = dict()
        self._tails = dict()

    def append(self, item, node: int, links: List[int]):
        """
        Chain a new node at the tail of its item.
        :param links: the next_node store of the tree owning the node.
        """
        if item in self._tails:
            links[self._tails[item]] = node
        else:
            self._heads[item] = node
        self._tails[item] = node

    def head(self, item) -> int:
        return self._heads[item]

    def tail(self, item) -> int:
        return self._tails[item]

    def __contains__(self, item):
        return item in self._heads

    def __iter__(self):
        return iter(self._heads)

    def __len__(self):
        return len(self._heads)

    def __repr__(self):
        return "HeaderTable({0})".format(
            ", ".join("{0!r}: {1}".format(item, self._heads[item]) for item in self._heads))


class FPTree(object):
    def __init__(self, order: Iterable[Hashable]):
        """
        :param order: List<item>
            All the items this tree may hold, from the most frequent to the least frequent.
        """
        self.order = list(order)
        self.rank = {item: idx for idx, item in enumerate(self.order)}
        if len(self.rank) != len(self.order):
            raise ValueError("The item order contains duplicated items.")
        self.header = HeaderTable()

        self._items = [None]
        self._counts = [0]
        self._parents = [NULL]
        self._children = [dict()]
        self._links = [NULL]
        self._branching = False

    def insert(self, bucket: Iterable[Hashable], weight: int=1) -> int:
        """
        Insert one bucket with the given weight.
        Duplicated items are counted once. The items are sorted by the order of the tree.
        :param bucket: Iterable<item>
        :param weight: int, the number of times the bucket occurs.
        :return: int, the index of the last node on the path (ROOT for an empty bucket).
        """
        if weight <= 0:
            raise ValueError("The weight of a bucket should be positive, got {0}.".format(weight))
        rank = self.rank
        items = set(bucket)
        for item in items:
            if item not in rank:
                raise InvalidItemError(item)

        node = ROOT
        for item in sorted(items, key=rank.__getitem__):
            child = self._children[node].get(item)
            if child is None:
                child = self._new_node(item, weight, node)
            else:
                self._counts[child] += weight
            node = child
        return node

    def _new_node(self, item, count: int, parent: int) -> int:
        index = len(self._items)
        self._items.append(item)
        self._counts.append(count)
        self._parents.append(parent)
        self._children.append(dict())
        self._links.append(NULL)

        siblings = self._children[parent]
        if siblings:
            self._branching = True
        siblings[item] = index
        self.header.append(item, index, self._links)
        return index

    def find(self, path: Iterable[Hashable]) -> Optional[int]:
        """
        Walk the exact path of items from the root.
        The path is taken in the given order, it is not re-sorted.
        :return: the index of the node at the end of the path, or None if the path does not exist.
        """
        node = ROOT
        for item in path:
            node = self._children[node].get(item)
            if node is None:
                return None
        return node

    def prefix_count(self, path: Iterable[Hashable]) -> int:
        """
        The number of (weighted) buckets starting with the exact path.
        For the empty path it is the number of non-empty buckets, since empty buckets add no node.
        """
        node = self.find(path)
        if node is None:
            return 0
        if node == ROOT:
            return sum(self._counts[child] for child in self._children[ROOT].values())
        return self._counts[node]

    def node(self, index: int) -> FPNode:
        return FPNode(index=index,
                      item=self._items[index],
                      count=self._counts[index],
                      parent=self._parents[index],
                      next_node=self._links[index])

    def children(self, index: int) -> Dict[Hashable, int]:
        return dict(self._children[index])

    def nodes(self, item) -> Iterator[int]:
        """
        Follow the node-link chain of the item.
        """
        if item not in self.rank:
            raise InvalidItemError(item)
        if item not in self.header:
            return
        node = self.header.head(item)
        while node != NULL:
            yield node
            node = self._links[node]

    def support(self, item) -> int:
        return sum(self._counts[node] for node in self.nodes(item))

    def path(self, index: int) -> Tuple[Hashable, ...]:
        """
        The items from the first level below the root down to the parent of the node.
        """
        prefix = []
        node = self._parents[index]
        while node > ROOT:
            prefix.append(self._items[node])
            node = self._parents[node]
        prefix.reverse()
        return tuple(prefix)

    def items(self) -> List[Hashable]:
        """
        Items present in the tree, from the least frequent to the most frequent.
        """
        return [item for item in reversed(self.order) if item in self.header]

    def is_single_path(self) -> bool:
        return not self._branching

    def single_path(self) -> List[Tuple[Hashable, int]]:
        """
        :return: List<(item, count)> from the root down to the only leaf.
        """
        if self._branching:
            raise ValueError("The tree has more than one branch.")
        chain = []
        children = self._children[ROOT]
        while children:
            (node,) = children.values()
            chain.append((self._items[node], self._counts[node]))
            children = self._children[node]
        return chain

    def is_empty(self) -> bool:
        return len(self._items) == 1

    def __len__(self):
        return len(self._items) - 1

    def __repr__(self):
        return "<FPTree: nodes={0}, items={1}, single_path={2}>".format(
            len(self), len(self.header), not self._branching)

    def check_invariants(self):
        """
        Verify the structure of the tree.
        :raise TreeInvariantError: when the tree is broken.
        """
        n_nodes = len(self._items)
        for store in (self._counts, self._parents, self._children, self._links):
            if len(store) != n_nodes:
                raise TreeInvariantError("The node stores have different lengths.")

        branching = False
        for parent in range(n_nodes):
            children = self._children[parent]
            if len(children) > 1:
                branching = True
            child_sum = 0
            for item, child in children.items():
                if self._items[child] != item or self._parents[child] != parent:
                    raise TreeInvariantError("Node {0} is misplaced under node {1}.".format(child, parent))
                if item not in self.rank:
                    raise TreeInvariantError("Node {0} holds {1!r} out of the order.".format(child, item))
                if parent != ROOT and self.rank[item] <= self.rank[self._items[parent]]:
                    raise TreeInvariantError("Node {0} breaks the item order.".format(child))
                child_sum += self._counts[child]
            if parent != ROOT and self._counts[parent] < max(1, child_sum):
                raise TreeInvariantError("Node {0} counts less than its children.".format(parent))
        if branching != self._branching:
            raise TreeInvariantError("The single path flag is stale.")

        visited = set()
        for item in self.header:
            for node in self.nodes(item):
                if node in visited or self._items[node] != item:
                    raise TreeInvariantError("The chain of {0!r} is broken at node {1}.".format(item, node))
                visited.add(node)
            if self.header.tail(item) != node:
                raise TreeInvariantError("The tail of {0!r} is stale.".format(item))
        if len(visited) != n_nodes - 1:
            raise TreeInvariantError("{0} nodes are not reachable from the header table.".format(
                n_nodes - 1 - len(visited)))


def extract_base(tree: FPTree, item) -> List[Tuple[Tuple[Hashable, ...], int]]:
    """
    The conditional pattern base of the item.
    Every node of the item contributes the path above it, with the count of the node.
    Nodes right below the root have no path, and are skipped.
    :return: List<(path<item>, count)>
    """
    base = []
    for node in tree.nodes(item):
        path = tree.path(node)
        if path:
            base.append((path, tree.node(node).count))
    return base
