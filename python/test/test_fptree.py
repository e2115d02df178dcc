import unittest

from fpmining.exceptions import InvalidItemError, TreeInvariantError
from fpmining.freq_itemset import FPTree, extract_base
from fpmining.freq_itemset.fptree import ROOT, NULL


def sample_tree():
    """
    Item supports: f:4, c:4, a:3, b:3, m:3, p:3
    root -> f:4 -> c:3 -> a:3 -> m:2 -> p:2
                               -> b:1 -> m:1
                       -> b:1
         -> c:1 -> b:1 -> p:1
    """
    tree = FPTree(order=["f", "c", "a", "b", "m", "p"])
    for bucket in [
        ["f", "a", "c", "m", "p"],
        ["a", "b", "c", "f", "m"],
        ["b", "f"],
        ["b", "c", "p"],
        ["a", "f", "c", "m", "p"],
    ]:
        tree.insert(bucket)
    return tree


class TestFPTreeMethod(unittest.TestCase):
    def test_new_tree(self):
        tree = FPTree(order=[1, 2])
        self.assertTrue(tree.is_empty())
        self.assertEqual(len(tree), 0)
        self.assertEqual(len(tree.header), 0)
        root = tree.node(ROOT)
        self.assertIsNone(root.item)
        self.assertEqual(root.count, 0)
        self.assertEqual(root.parent, NULL)
        tree.check_invariants()

    def test_duplicated_order(self):
        with self.assertRaises(ValueError):
            FPTree(order=[1, 2, 1])

    def test_insert_shares_prefix(self):
        tree = sample_tree()
        tree.check_invariants()
        self.assertEqual(len(tree), 11)
        f = tree.find(["f"])
        self.assertEqual(tree.node(f).count, 4)
        self.assertEqual(tree.prefix_count(["f", "c", "a"]), 3)
        self.assertEqual(tree.prefix_count(["f", "c", "a", "m", "p"]), 2)
        self.assertEqual(tree.prefix_count(["f", "c", "a", "b", "m"]), 1)
        self.assertEqual(tree.prefix_count(["c", "b", "p"]), 1)
        self.assertEqual(tree.prefix_count(["f", "b"]), 1)
        self.assertEqual(tree.prefix_count([]), 5)

    def test_find_missing(self):
        tree = sample_tree()
        self.assertIsNone(tree.find(["c", "f"]))
        self.assertIsNone(tree.find(["f", "c", "a", "m", "p", "b"]))
        self.assertIsNone(tree.find(["p"]))
        self.assertEqual(tree.prefix_count(["p"]), 0)
        self.assertEqual(tree.find([]), ROOT)

    def test_insert_returns_last_node(self):
        tree = FPTree(order=[1, 2, 3])
        node = tree.insert([3, 1])
        self.assertEqual(tree.node(node).item, 3)
        self.assertEqual(tree.path(node), (1,))
        self.assertEqual(tree.insert([]), ROOT)
        self.assertTrue(tree.is_single_path())

    def test_insert_with_weight(self):
        tree = FPTree(order=["x", "y"])
        tree.insert(["x", "y"], weight=3)
        tree.insert(["x"], weight=2)
        self.assertEqual(tree.prefix_count(["x"]), 5)
        self.assertEqual(tree.prefix_count(["x", "y"]), 3)
        with self.assertRaises(ValueError):
            tree.insert(["x"], weight=0)
        tree.check_invariants()

    def test_insert_duplicated_items(self):
        tree = FPTree(order=["x", "y"])
        tree.insert(["y", "x", "y", "x"])
        self.assertEqual(len(tree), 2)
        self.assertEqual(tree.prefix_count(["x", "y"]), 1)

    def test_insert_unknown_item(self):
        tree = FPTree(order=["x", "y"])
        with self.assertRaises(InvalidItemError) as context:
            tree.insert(["x", "z"])
        self.assertEqual(context.exception.item, "z")
        self.assertTrue(tree.is_empty())

    def test_append_only(self):
        tree = sample_tree()
        before = [tree.node(i) for i in range(len(tree) + 1)]
        tree.insert(["f", "c", "p"])
        tree.check_invariants()
        after = [tree.node(i) for i in range(len(before))]
        for old, new in zip(before, after):
            self.assertEqual((old.item, old.parent), (new.item, new.parent))
            self.assertGreaterEqual(new.count, old.count)
        changed = {old.item for old, new in zip(before, after) if new.count != old.count}
        self.assertEqual(changed, {"f", "c"})
        self.assertEqual(len(tree), len(before))

    def test_header_table(self):
        tree = sample_tree()
        self.assertEqual(list(tree.header), ["f", "c", "a", "m", "p", "b"])
        self.assertEqual(tree.items(), ["p", "m", "b", "a", "c", "f"])
        for item, support in [("f", 4), ("c", 4), ("a", 3), ("b", 3), ("m", 3), ("p", 3)]:
            self.assertEqual(tree.support(item), support)
        self.assertEqual([tree.node(node).count for node in tree.nodes("b")], [1, 1, 1])
        self.assertEqual(tree.node(tree.header.tail("p")).count, 1)
        self.assertNotIn("z", tree.header)
        with self.assertRaises(InvalidItemError):
            list(tree.nodes("z"))

    def test_every_node_in_one_chain(self):
        tree = sample_tree()
        chained = [node for item in tree.header for node in tree.nodes(item)]
        self.assertEqual(sorted(chained), list(range(1, len(tree) + 1)))

    def test_single_path(self):
        tree = FPTree(order=["x", "y", "z"])
        tree.insert(["x", "y", "z"])
        tree.insert(["x", "y", "z"])
        tree.insert(["x", "y"])
        self.assertTrue(tree.is_single_path())
        self.assertEqual(tree.single_path(), [("x", 3), ("y", 3), ("z", 2)])
        tree.insert(["y"])
        self.assertFalse(tree.is_single_path())
        with self.assertRaises(ValueError):
            tree.single_path()

    def test_broken_tree(self):
        tree = sample_tree()
        tree._counts[tree.find(["f", "c"])] = 10
        with self.assertRaises(TreeInvariantError):
            tree.check_invariants()

        tree = sample_tree()
        tree._links[tree.header.head("b")] = NULL
        with self.assertRaises(TreeInvariantError):
            tree.check_invariants()

    def test_item_out_of_order(self):
        tree = sample_tree()
        f = tree.find(["f"])
        c = tree._children[f].pop("c")
        tree._children[f]["z"] = c
        tree._items[c] = "z"
        with self.assertRaises(TreeInvariantError):
            tree.check_invariants()

    def test_prefix_count_of_empty_path(self):
        tree = sample_tree()
        tree.insert([])
        tree.insert([], weight=3)
        self.assertEqual(tree.prefix_count([]), 5)
        tree.insert(["p"], weight=2)
        self.assertEqual(tree.prefix_count([]), 7)


class TestExtractBaseMethod(unittest.TestCase):
    def test_simple_data(self):
        tree = sample_tree()
        self.assertEqual(extract_base(tree, "p"), [
            (("f", "c", "a", "m"), 2),
            (("c", "b"), 1),
        ])
        self.assertEqual(extract_base(tree, "m"), [
            (("f", "c", "a"), 2),
            (("f", "c", "a", "b"), 1),
        ])
        self.assertEqual(extract_base(tree, "b"), [
            (("f", "c", "a"), 1),
            (("f",), 1),
            (("c",), 1),
        ])

    def test_skip_empty_path(self):
        tree = sample_tree()
        self.assertEqual(extract_base(tree, "f"), [])
        self.assertEqual(extract_base(tree, "c"), [(("f",), 3)])

    def test_read_only(self):
        tree = sample_tree()
        before = [tree.node(i) for i in range(len(tree) + 1)]
        for item in tree.order:
            extract_base(tree, item)
        self.assertEqual(before, [tree.node(i) for i in range(len(tree) + 1)])

    def test_unknown_item(self):
        with self.assertRaises(InvalidItemError):
            extract_base(sample_tree(), "z")


if __name__ == '__main__':
    unittest.main()
