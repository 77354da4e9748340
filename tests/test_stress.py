import io
import unittest

from rbtoy import log
from rbtoy.exception import InvariantError
from rbtoy.stress import StressRun
from rbtoy.tree.rbtree import RBTree


class UnbalancedTree(RBTree):
    def _insert_fixup(self, node):
        pass


class TestStressRun(unittest.TestCase):
    def test_insert_only(self):
        stats = {}
        run = StressRun(500, seed=1, check_every=1, stats=stats)
        tree = run.run()
        self.assertIs(tree, run.tree)
        self.assertTrue(run.result.valid)
        self.assertIsNone(run.violation)
        self.assertEqual(len(tree), stats['inserted'])
        self.assertEqual(stats['inserted'] + stats['duplicates'], 500)
        self.assertEqual(stats['ops'], 500)
        self.assertEqual(stats['checks'], 501)
        self.assertEqual(stats['deleted'], 0)

    def test_alternate_delete_ascending(self):
        run = StressRun(100, key_type='int', order='ascending',
                        delete='alternate', check_every=1)
        tree = run.run()
        self.assertEqual(len(tree), 50)
        self.assertEqual(list(tree), list(range(1, 101, 2)))
        self.assertTrue(run.result.valid)
        self.assertEqual(run.stats['deleted'], 50)

    def test_delete_all(self):
        run = StressRun(300, key_type='int', seed=7, delete='all',
                        check_every=1)
        tree = run.run()
        self.assertEqual(len(tree), 0)
        self.assertIs(tree.root, tree.nil)
        self.assertEqual(tuple(run.result), (True, 0, 0, 0))
        self.assertEqual(run.stats['deleted'], run.stats['inserted'])

    def test_mixed(self):
        run = StressRun(1000, key_type='int', seed=3, delete='mixed',
                        check_every=10)
        tree = run.run()
        stats = run.stats
        self.assertGreater(stats['deleted'], 0)
        self.assertEqual(len(tree), stats['inserted'] - stats['deleted'])
        self.assertTrue(run.result.valid)

    def test_descending_floats(self):
        run = StressRun(5, order='descending')
        self.assertEqual(list(run.keygen()), [5.0, 4.0, 3.0, 2.0, 1.0])
        self.assertEqual(list(run.run()), [1.0, 2.0, 3.0, 4.0, 5.0])

    def test_seed_is_reproducible(self):
        a = list(StressRun(20, seed=42).keygen())
        b = list(StressRun(20, seed=42).keygen())
        self.assertEqual(a, b)
        self.assertTrue(all(0.0 <= k < 1.0 for k in a))
        ints = list(StressRun(20, key_type='int', seed=42).keygen())
        self.assertTrue(all(0 <= k < 2**64 for k in ints))

    def test_zero_keys(self):
        run = StressRun(0)
        self.assertEqual(len(run.run()), 0)
        self.assertTrue(run.result.valid)

    def test_duplicates_are_counted(self):
        run = StressRun(0)
        self.assertTrue(run._insert(5))
        self.assertFalse(run._insert(5))
        self.assertEqual(run.stats['duplicates'], 1)
        self.assertEqual(run.stats['inserted'], 1)
        self.assertEqual(run.stats['ops'], 2)

    def test_periodic_check_failure(self):
        run = StressRun(10, order='ascending', check_every=1)
        run.tree = UnbalancedTree()
        with self.assertRaises(InvariantError) as cm:
            run.run()
        self.assertIn("after operation 1: root 1.0 is not black",
                      str(cm.exception))

    def test_final_check_failure_is_reported(self):
        run = StressRun(10, order='ascending')
        run.tree = UnbalancedTree()
        run.run()
        self.assertFalse(run.result.valid)
        self.assertIsNotNone(run.violation)

    def test_periodic_checks_are_logged(self):
        saved = log.logger
        out = io.StringIO()
        log.logger = log.Logger(log.LOG_DEBUG1, out, colors='never')
        try:
            StressRun(3, key_type='int', order='ascending',
                      check_every=3).run()
        finally:
            log.logger = saved
        self.assertIn("invariants hold after 3 operations, black height 1\n",
                      out.getvalue())

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            StressRun(-1)
        with self.assertRaises(ValueError):
            StressRun(10, key_type='str')
        with self.assertRaises(ValueError):
            StressRun(10, order='sideways')
        with self.assertRaises(ValueError):
            StressRun(10, delete='some')
        with self.assertRaises(ValueError):
            StressRun(10, check_every=-5)


if __name__ == '__main__':
    unittest.main()
