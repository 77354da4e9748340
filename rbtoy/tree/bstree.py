LEFT = 0
RIGHT = 1

def opposite(side):
    return RIGHT if side == LEFT else LEFT


class BSTreeNode(object):
    """A key-holding node of a binary search tree.

    Absent children and the parent of the root are represented by the
    tree's sentinel node, which is passed in as nil."""

    def __init__(self, k, nil=None):
        self.key = k

        self.left = nil
        self.right = nil
        self.parent = nil

    def child(self, side):
        return self.left if side == LEFT else self.right

    def set_child(self, side, node):
        if side == LEFT:
            self.left = node
        else:
            self.right = node

    def side_of(self, node):
        """Returns the side on which node hangs below this node."""
        return LEFT if self.left is node else RIGHT

    def describe(self, nil):
        return "[{0!r}: (p{1},l{2},r{3})]".format(self.key,
                *(_link_str(n, nil) for n in
                    (self.parent, self.left, self.right)))

    def __repr__(self):
        return "<{0:s} {1!r}>".format(type(self).__name__, self.key)


def _link_str(node, nil):
    if node is nil or node is None:
        return '_'
    return repr(node.key)


class BSTree(object):
    """Abstract implementation of a binary search tree.

    Keeps the lookup and traversal logic; subclasses provide insertion and
    deletion."""

    node_type = BSTreeNode

    def __init__(self):
        self.nil = self.node_type(None)
        self.root = self.nil
        self.count = 0

    def __len__(self):
        return self.count

    def __contains__(self, k):
        return self.contains(k)

    def __iter__(self):
        x = self.minimum()
        while x is not None:
            yield x.key
            x = self.successor(x)

    def __repr__(self):
        return "<{0:s} with {1:d} nodes>".format(type(self).__name__,
                                                 self.count)

    def is_empty(self):
        return self.root is self.nil

    def keys(self):
        return list(self)

    def contains(self, k):
        return self.find(k) is not None

    def find(self, k):
        """Finds the node with key k. Returns None if k is not found.

        Time complexity: O(lg n) (balanced)"""
        x = self.root
        while x is not self.nil:
            if k < x.key:
                x = x.left
            elif k > x.key:
                x = x.right
            elif k == x.key:
                return x
            else:
                # unordered keys such as nan never match
                break
        return None

    def minimum(self, x=None):
        """Finds the node with the minimal key in the subtree rooted at x
        (default: the whole tree)

        Returns None if the tree is empty
        Time complexity: O(lg n) (balanced)"""
        if x is None:
            x = self.root
        if x is self.nil:
            return None

        while x.left is not self.nil:
            x = x.left
        return x

    def successor(self, x):
        """Finds the successor of node x in sorted order

        Time complexity: O(lg n) (balanced)"""
        if x.right is not self.nil:
            return self.minimum(x.right)
        y = x.parent
        while y is not self.nil and x is y.right:
            x = y
            y = y.parent
        return y if y is not self.nil else None

    def _transplant(self, old, new):
        """Put the subtree rooted at new into the place of node old.

        old keeps its own links; the sentinel's links are never touched.
        Time complexity: O(1)"""
        parent = old.parent
        if parent is self.nil:
            self.root = new
        else:
            parent.set_child(parent.side_of(old), new)
        if new is not self.nil:
            new.parent = parent

    def _preorder(self):
        stack = [self.root]
        while stack:
            x = stack.pop()
            if x is self.nil:
                continue
            yield x
            stack.append(x.right)
            stack.append(x.left)

    def dump(self):
        """Returns a human readable dump of every node and its links."""
        if self.root is self.nil:
            return "{0:d} nodes: None".format(self.count)
        lines = [x.describe(self.nil) for x in self._preorder()]
        lines.append("{0:d} nodes".format(self.count))
        return '\n'.join(lines)
