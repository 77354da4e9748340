"""Independent checks of the red-black tree invariants.

Nothing in here modifies the tree; the mutating operations never call into
this module.
"""

import collections

from . import rbtree
from ..exception import InvariantError

CheckResult = collections.namedtuple('CheckResult',
        ['valid', 'black_height', 'min_depth', 'max_depth'])

INVALID = CheckResult(False, 0, 0, 0)


class TreeChecker(object):
    """Walks a tree once and records the first violated invariant.

    Depths count nodes, the root being at depth 1. A path ends at a node with
    an absent child; its black count includes every black node from the root
    down to and including that node."""

    def __init__(self, tree):
        self.tree = tree
        self.violation = None
        self.visited = 0
        self.black_height = None
        self.min_depth = 0
        self.max_depth = 0

    def run(self):
        tree = self.tree
        nil = tree.nil
        if nil.color != rbtree.BLACK:
            return self._fail("sentinel is not black")
        if tree.root is nil:
            if len(tree) != 0:
                return self._fail("empty tree reports ",
                                  len(tree), " nodes")
            return CheckResult(True, 0, 0, 0)
        if tree.root.parent is not nil:
            return self._fail("root ", repr(tree.root.key), " has a parent")
        if tree.root.color != rbtree.BLACK:
            return self._fail("root ", repr(tree.root.key), " is not black")

        if not self._walk():
            return INVALID
        if self.visited != len(tree):
            return self._fail("tree reports ", len(tree), " nodes, found ",
                              self.visited)
        return CheckResult(True, self.black_height,
                           self.min_depth, self.max_depth)

    def _fail(self, *msg):
        self.violation = ''.join(map(str, msg))
        return INVALID

    def _leaf(self, blacks, depth):
        if self.black_height is None:
            self.black_height = blacks
            self.min_depth = self.max_depth = depth
        elif blacks != self.black_height:
            self._fail("black height mismatch: ", blacks, " != ",
                       self.black_height)
            return False
        self.min_depth = min(self.min_depth, depth)
        self.max_depth = max(self.max_depth, depth)
        return True

    def _walk(self):
        """Visits the nodes in preorder, left subtree first.

        Returns False as soon as a violation is recorded."""
        nil = self.tree.nil
        stack = [(self.tree.root, nil, None, None, 0, 1)]
        while stack:
            node, parent, low, high, blacks, depth = stack.pop()
            if node is nil:
                if not self._leaf(blacks, depth - 1):
                    return False
                continue
            if node.parent is not parent:
                self._fail("node ", repr(node.key),
                           " does not link back to its parent ",
                           repr(parent.key))
                return False
            self.visited += 1
            if self.visited > len(self.tree):
                self._fail("more than ", len(self.tree),
                           " nodes reachable (cycle?)")
                return False

            k = node.key
            if (low is not None and not low < k) or \
                    (high is not None and not k < high):
                self._fail("key ", repr(k), " out of order")
                return False
            if node.color == rbtree.BLACK:
                blacks += 1
            elif node.color != rbtree.RED:
                self._fail("node ", repr(k), " has invalid color ",
                           repr(node.color))
                return False
            elif parent.color == rbtree.RED:
                self._fail("red node ", repr(k), " has a red parent")
                return False

            stack.append((node.right, node, k, high, blacks, depth + 1))
            stack.append((node.left, node, low, k, blacks, depth + 1))
        return True


def check(tree):
    """Check all red-black invariants of tree.

    Returns a CheckResult (valid, black_height, min_depth, max_depth);
    (False, 0, 0, 0) on the first violation found."""
    return TreeChecker(tree).run()

def validate(tree):
    """Like check(), but raises InvariantError describing the violation."""
    checker = TreeChecker(tree)
    result = checker.run()
    if not result.valid:
        raise InvariantError(checker.violation)
    return result
