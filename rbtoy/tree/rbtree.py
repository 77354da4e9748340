from . import bstree
from . import invariants
from .bstree import LEFT, RIGHT, opposite
from ..exception import DuplicateKeyError, KeyNotFoundError, UnorderableKeyError

RED = 0
BLACK = 1

COLOR_NAMES = {RED: 'Red', BLACK: 'Black'}

class RBTreeNode(bstree.BSTreeNode):
    """A node of a Red-Black Tree"""

    def __init__(self, k, nil=None):
        super(RBTreeNode, self).__init__(k, nil)
        self.color = BLACK

    def describe(self, nil):
        return "[{0!r}({1:s}): (p{2},l{3},r{4})]".format(self.key,
                COLOR_NAMES.get(self.color, '?'),
                *(bstree._link_str(n, nil) for n in
                    (self.parent, self.left, self.right)))


class RBTree(bstree.BSTree):
    """A Red-Black Binary Search Tree holding distinct keys"""

    node_type = RBTreeNode

    def __init__(self):
        super(RBTree, self).__init__()
        self.nil.color = BLACK

    def _rotate(self, x, side):
        """Move node x one level down towards side.

        The child of x on the other side takes the place of x.
        Time complexity: O(1)"""
        other = opposite(side)
        y = x.child(other)
        inner = y.child(side)
        x.set_child(other, inner)
        if inner is not self.nil:
            inner.parent = x
        self._transplant(x, y)
        y.set_child(side, x)
        x.parent = y

    def _left_rotate(self, x):
        self._rotate(x, LEFT)

    def _right_rotate(self, x):
        self._rotate(x, RIGHT)

    def insert(self, k):
        """Insert a new node with key k, preserving all red-black properties.

        Raises DuplicateKeyError if k is already in the tree, in which case
        the tree is left untouched.
        Returns the newly inserted node
        Time complexity: O(lg n)"""
        if k != k:
            raise UnorderableKeyError(k)
        y = self.nil
        x = self.root
        while x is not self.nil:
            y = x
            if k < x.key:
                x = x.left
            elif k > x.key:
                x = x.right
            else:
                raise DuplicateKeyError(k)

        new = self.node_type(k, self.nil)
        new.parent = y
        new.color = RED
        if y is self.nil:
            self.root = new
        elif k < y.key:
            y.left = new
        else:
            y.right = new
        self.count += 1
        self._insert_fixup(new)
        return new

    def _insert_fixup(self, node):
        """Restore Red-Black properties of the tree after node insertion.

        node is red; the only possible violation is a red parent.
        Time complexity: O(lg n)"""
        while True:
            parent = node.parent
            if parent is self.nil:
                node.color = BLACK
                return
            if parent.color == BLACK:
                return
            # a red parent is never the root
            grandparent = parent.parent
            side = grandparent.side_of(parent)
            uncle = grandparent.child(opposite(side))
            if uncle.color == RED:
                parent.color = BLACK
                uncle.color = BLACK
                grandparent.color = RED
                node = grandparent
                continue

            if parent.child(opposite(side)) is node:
                # inner grandchild: turn it into the outer one
                self._rotate(parent, side)
                node, parent = parent, node
            parent.color = BLACK
            grandparent.color = RED
            self._rotate(grandparent, opposite(side))
            return

    def delete(self, k):
        """Delete the node with key k.

        Raises KeyNotFoundError if k is not in the tree.
        Time complexity: O(lg n)"""
        node = self.find(k)
        if node is None:
            raise KeyNotFoundError(k)
        self.delete_node(node)

    def delete_node(self, node):
        """Delete node from the tree, preserving all red-black properties.

        Returns the deleted node, unlinked from the tree.
        Time complexity: O(lg n)"""
        removed_color = node.color
        if node.left is self.nil:
            x, x_parent = node.right, node.parent
            self._transplant(node, node.right)
        elif node.right is self.nil:
            x, x_parent = node.left, node.parent
            self._transplant(node, node.left)
        else:
            y = self.minimum(node.right)
            removed_color = y.color
            x = y.right
            if y.parent is node:
                x_parent = y
            else:
                x_parent = y.parent
                self._transplant(y, y.right)
                y.right = node.right
                y.right.parent = y
            self._transplant(node, y)
            y.left = node.left
            y.left.parent = y
            y.color = node.color

        node.left = node.right = node.parent = self.nil
        self.count -= 1
        if removed_color == BLACK:
            self._delete_fixup(x, x_parent)
        return node

    def _delete_fixup(self, x, parent):
        """Restore Red-Black properties of the tree after node deletion.

        The subtree at x (possibly nil) below parent is one black node
        short of its sibling subtree.
        Time complexity: O(lg n)"""
        while parent is not self.nil and x.color == BLACK:
            # x and its sibling can't both be nil here
            side = LEFT if parent.left is x else RIGHT
            other = opposite(side)
            w = parent.child(other)
            if w.color == RED:
                w.color = BLACK
                parent.color = RED
                self._rotate(parent, side)
                w = parent.child(other)

            close, far = w.child(side), w.child(other)
            if close.color == BLACK and far.color == BLACK:
                w.color = RED
                x, parent = parent, parent.parent
                continue

            if far.color == BLACK:
                close.color = BLACK
                w.color = RED
                self._rotate(w, other)
                w = parent.child(other)
                far = w.child(other)
            w.color = parent.color
            parent.color = BLACK
            far.color = BLACK
            self._rotate(parent, side)
            x = self.root
            break
        if x is not self.nil:
            x.color = BLACK

    def check(self):
        """Returns (valid, black_height, min_depth, max_depth).

        See invariants.check()"""
        return invariants.check(self)

    def validate(self):
        return invariants.validate(self)
