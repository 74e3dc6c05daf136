import logging
from typing import Any, Iterable, List, Optional

import numpy as np

from LinkAVL.AVLErrors import InvalidArgument, NotFound
from LinkAVL.AVLNode import AVLNode, get_height

logger = logging.getLogger(__name__)



# ---------- Helpers ----------
def _require_key(
    key: Any,
    operation: str

) -> None:

    if key is None:
        raise InvalidArgument(
            f"The key passed to {operation} must not be None"
        )

def _as_key(value: Any) -> Any:
    # numpy scalars become plain Python scalars before they are stored
    if isinstance(value, np.generic):
        return value.item()
    return value



# ---------- AVLTree API ----------
class AVLTree:
    """
    Linked AVL Tree over arbitrary totally ordered keys.

    Every structural change descends recursively from the root and rebuilds
    each ancestor's child link on the way back up, rebalancing the ancestor
    before it is handed to its parent. Nodes own their children exclusively,
    so a subtree is replaced simply by assigning the returned root.

    Duplicate keys are never stored: inserting a key that compares equal to
    a stored one leaves the tree unchanged.
    """

    def __init__(self) -> None:
        self._root: Optional[AVLNode] = None
        self._size: int               = 0

    # ---------- Accessors ----------
    def size(self) -> int:
        """Number of distinct keys currently stored."""
        return self._size

    def root(self) -> Optional[AVLNode]:
        """
        Root node of the tree, or None if the tree is empty.

        The node is meant for structural inspection only (key, left, right,
        height, balance_factor). Mutating it bypasses the tree's bookkeeping.
        """
        return self._root

    @property
    def height(self) -> int:
        return get_height(self._root)

    # ---------- Insertion ----------
    def insert(
        self,
        key: Any

    ) -> None:

        """
        Insert ``key`` and rebalance every ancestor of the new leaf.

        :param key: The key to insert; must be orderable against stored keys
        :raises InvalidArgument: If ``key`` is None
        """

        _require_key(key, "insert")
        self._root = self._insert(self._root, key)

    def _insert(
        self,
        node: Optional[AVLNode],
        key: Any

    ) -> AVLNode:

        if node is None:
            self._size += 1
            return AVLNode(key)

        if key < node.key:
            node.left = self._insert(node.left, key)
        elif key > node.key:
            node.right = self._insert(node.right, key)
        else:
            logger.debug("Duplicate key %r ignored", key)
            return node

        return self.balance(node)

    # ---------- Removal ----------
    def remove(
        self,
        key: Any

    ) -> Any:

        """
        Remove the node whose key compares equal to ``key``.

        A node with two children keeps its place in the tree: the key of its
        in-order successor (leftmost node of the right subtree) is copied into
        it and the successor node is unlinked instead. The predecessor is
        never used.

        Args:
            key (Any): The key to remove.

        Returns:
            Any: The key that was stored in the matched node before removal.

        Raises:
            InvalidArgument: If ``key`` is None.
            NotFound: If no stored key compares equal to ``key``.
        """

        _require_key(key, "remove")

        removed    = []
        self._root = self._remove(self._root, key, removed)
        self._size -= 1

        logger.debug("Removed key %r, size is now %d", removed[0], self._size)
        return removed[0]

    def _remove(
        self,
        node: Optional[AVLNode],
        key: Any,
        removed: List[Any]

    ) -> Optional[AVLNode]:

        if node is None:
            raise NotFound(key)

        if key < node.key:
            node.left = self._remove(node.left, key, removed)
        elif key > node.key:
            node.right = self._remove(node.right, key, removed)
        else:
            removed.append(node.key)

            if node.left is None:
                return node.right
            if node.right is None:
                return node.left

            successor  = []
            node.right = self._remove_successor(node.right, successor)
            logger.debug("Key %r replaced by successor %r", node.key, successor[0])
            node.key   = successor[0]

        return self.balance(node)

    def _remove_successor(
        self,
        node: AVLNode,
        successor: List[Any]

    ) -> Optional[AVLNode]:

        # Leftmost node of this subtree is the successor; splice it out.
        if node.left is None:
            successor.append(node.key)
            return node.right

        node.left = self._remove_successor(node.left, successor)
        return self.balance(node)

    # ---------- Balancing ----------
    def update_height_and_bf(
        self,
        node: AVLNode

    ) -> None:

        """
        Recompute the height and balance factor of ``node`` in O(1).

        Both children must already carry current metadata; an absent child
        counts as height -1.
        """

        left_height  = get_height(node.left)
        right_height = get_height(node.right)

        node._set_metadata(
            max(left_height, right_height) + 1,
            left_height - right_height
        )

    def rotate_left(
        self,
        node: AVLNode

    ) -> AVLNode:

        """
        Perform a single left rotation around ``node``.

        The right child becomes the subtree root, its former left subtree
        becomes ``node``'s right subtree. Metadata is recomputed on ``node``
        first and then on the pivot, which reads it.

        :param node: Subtree root; its right child must be present
        :type node: AVLNode
        :return: The new subtree root (the former right child)
        :rtype: AVLNode
        """

        pivot      = node.right
        node.right = pivot.left
        pivot.left = node

        self.update_height_and_bf(node)
        self.update_height_and_bf(pivot)

        logger.debug("Rotated left at %r, new subtree root %r", node.key, pivot.key)
        return pivot

    def rotate_right(
        self,
        node: AVLNode

    ) -> AVLNode:

        """
        Perform a single right rotation around ``node``.

        Mirror image of ``rotate_left``; the left child must be present.
        """

        pivot       = node.left
        node.left   = pivot.right
        pivot.right = node

        self.update_height_and_bf(node)
        self.update_height_and_bf(pivot)

        logger.debug("Rotated right at %r, new subtree root %r", node.key, pivot.key)
        return pivot

    def balance(
        self,
        node: AVLNode

    ) -> AVLNode:

        """
        Restore the AVL property at ``node`` and return the subtree root.

        Covers the four classical cases with at most two rotations:
            RR / RL: balance factor < -1, right child rotated first if left-heavy
            LL / LR: balance factor >  1, left child rotated first if right-heavy
        """

        self.update_height_and_bf(node)

        if node.balance_factor < -1: # R
            if node.right.balance_factor > 0: # RL
                node.right = self.rotate_right(node.right)
            node = self.rotate_left(node)

        elif node.balance_factor > 1: # L
            if node.left.balance_factor < 0: # LR
                node.left = self.rotate_left(node.left)
            node = self.rotate_right(node)

        return node

    def __len__(self) -> int:
        return self._size

    def __str__(self) -> str:

        root_key = None
        if self._root is not None:
            root_key = self._root.key

        return "AVLTree(size=" + str(self._size) + ", root=" + repr(root_key) + ", height=" + str(self.height) + ")"



# --------- Utils ---------
def build_avl(
    data: Iterable[Any]

) -> AVLTree:

    """
    Build a new AVLTree by inserting every element of ``data`` in order.

    Args:
        data (Iterable[Any]): Keys to insert; numpy arrays are accepted.

    Returns:
        AVLTree: A balanced tree holding the distinct elements of data.
    """

    avl = AVLTree()
    fill_avl(avl, data)
    return avl

def fill_avl(
    avl: AVLTree,
    data: Iterable[Any]

) -> None:

    """
    Insert multiple keys into an existing AVLTree one at a time.
    """

    for value in data:
        avl.insert(_as_key(value))

def remove_avl(
    avl: AVLTree,
    values: Iterable[Any]

) -> List[Any]:

    """
    Remove multiple keys from the AVL tree, in the given order.

    Removals made before a missing key stay committed; the missing key
    propagates ``NotFound`` to the caller.

    Args:
        avl (AVLTree): The tree to shrink.
        values (Iterable[Any]): Keys to remove; numpy arrays are accepted.

    Returns:
        List[Any]: The removed keys, in removal order.
    """

    return [avl.remove(_as_key(value)) for value in values]
