from .rbtree import RBTree, RBTreeNode, RED, BLACK
from .invariants import CheckResult, check, validate
