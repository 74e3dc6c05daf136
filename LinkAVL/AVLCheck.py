import logging
from typing import Any, List, Optional, Tuple

import numpy as np
from numba import njit

from LinkAVL.AVLErrors import InvariantViolation
from LinkAVL.AVLNode import ABSENT_HEIGHT, AVLNode
from LinkAVL.AVLTreeLinked import AVLTree, build_avl

logger = logging.getLogger(__name__)



# Snapshot layout, one row per node in pre-order:
#     TABLE[n + 1, 4]: [left | right | height | balance_factor]
#     Row 0 is the absent sentinel; a child index of 0 means "no child".
LEFT_COL    = 0
RIGHT_COL   = 1
HEIGHT_COL  = 2
BF_COL      = 3

# Violation codes returned by _find_violation
OK           = 0
STALE_HEIGHT = 1
STALE_BF     = 2
UNBALANCED   = 3

HEIGHT_BOUND_FACTOR = 1.44



# ---------- Python-side traversal ----------
def inorder_keys(
    root: Optional[AVLNode]

) -> List[Any]:

    """
    Collect all keys under ``root`` in ascending order (LVR).
    Uses an explicit stack, so no recursion limit applies.
    """

    keys    = []
    stack   = []
    current = root

    while stack or current is not None:

        while current is not None:
            stack.append(current)
            current = current.left

        current = stack.pop()
        keys.append(current.key)
        current = current.right

    return keys

def snapshot(
    root: Optional[AVLNode]

) -> Tuple[List[Any], np.ndarray]:

    """
    Flatten the linked tree under ``root`` into a key list and an index table.

    Nodes are numbered from 1 in pre-order, so every child index is greater
    than its parent's. ``keys[i]`` is the key of node ``i``; ``keys[0]`` is
    None and stands for the absent sentinel row.

    :param root: Root of the subtree to flatten, or None
    :type root: Optional[AVLNode]
    :return: (keys, table) where table is an int64 array of shape (n + 1, 4)
    :rtype: Tuple[List[Any], np.ndarray]
    :raises InvariantViolation: If a node is reachable twice (shared or cyclic links)
    """

    keys  = [None]
    rows  = [[0, 0, ABSENT_HEIGHT, 0]]
    seen  = set()
    stack = [(root, 0, LEFT_COL)] if root is not None else []

    while stack:
        node, parent, side = stack.pop()

        if id(node) in seen:
            raise InvariantViolation(
                f"Node {node!r} is reachable more than once"
            )
        seen.add(id(node))

        index = len(rows)
        keys.append(node.key)
        rows.append([0, 0, node.height, node.balance_factor])

        if parent != 0:
            rows[parent][side] = index

        # right pushed first so the left subtree is numbered first
        if node.right is not None:
            stack.append((node.right, index, RIGHT_COL))
        if node.left is not None:
            stack.append((node.left, index, LEFT_COL))

    return keys, np.array(rows, dtype=np.int64)



# ---------- JIT-Compiled Structural Checks ----------
@njit
def _recompute_heights(
    table: np.ndarray

) -> np.ndarray:

    """
    Recompute the true height of every node of a pre-order snapshot.
    """

    heights    = np.empty(table.shape[0], dtype=np.int64)
    heights[0] = ABSENT_HEIGHT

    for i in range(table.shape[0] - 1, 0, -1):
        h_l = heights[table[i, LEFT_COL]]
        h_r = heights[table[i, RIGHT_COL]]
        heights[i] = max(h_l, h_r) + 1

    return heights

@njit
def _find_violation(
    table: np.ndarray

) -> Tuple[int, int]:

    """
    Scan a snapshot for the first node whose metadata is stale or unbalanced.

    Returns:
        Tuple[int, int]: (code, node_index); (OK, 0) when every node is valid.
    """

    heights = _recompute_heights(table)

    for i in range(1, table.shape[0]):
        if table[i, HEIGHT_COL] != heights[i]:
            return STALE_HEIGHT, i

        bf = heights[table[i, LEFT_COL]] - heights[table[i, RIGHT_COL]]
        if table[i, BF_COL] != bf:
            return STALE_BF, i

        if bf > 1 or bf < -1:
            return UNBALANCED, i

    return OK, 0



# --------- Utils ---------
def height_bound(
    size: int

) -> int:

    """
    Largest height an AVL tree holding ``size`` keys may reach:
    ceil(1.44 * log2(size + 2)) - 1.
    """

    return int(np.ceil(HEIGHT_BOUND_FACTOR * np.log2(size + 2))) - 1

def check_tree(
    tree: AVLTree

) -> None:

    """
    Verify every structural invariant of ``tree`` through its root handle.

    Checked, in order: size consistency, cached metadata, AVL balance,
    strictly increasing in-order keys and the AVL height bound.

    Args:
        tree (AVLTree): The tree to verify.

    Raises:
        InvariantViolation: Describing the first broken invariant found.
    """

    root        = tree.root()
    keys, table = snapshot(root)
    count       = len(keys) - 1

    if count != tree.size():
        raise InvariantViolation(
            f"size() reports {tree.size()} but {count} nodes are reachable"
        )

    code, index = _find_violation(table)
    if code == STALE_HEIGHT:
        raise InvariantViolation(
            f"Node {keys[index]!r} caches height {table[index, HEIGHT_COL]}, "
            f"actual height is {_recompute_heights(table)[index]}"
        )
    if code == STALE_BF:
        raise InvariantViolation(
            f"Node {keys[index]!r} caches a stale balance factor {table[index, BF_COL]}"
        )
    if code == UNBALANCED:
        raise InvariantViolation(
            f"Node {keys[index]!r} violates the AVL property (balance factor {table[index, BF_COL]})"
        )

    ordered = inorder_keys(root)
    for previous, current in zip(ordered, ordered[1:]):
        if not previous < current:
            raise InvariantViolation(
                f"In-order keys are not strictly increasing: {previous!r} before {current!r}"
            )

    bound = height_bound(count)
    if tree.height > bound:
        raise InvariantViolation(
            f"Height {tree.height} exceeds the AVL bound {bound} for {count} keys"
        )

def warmup() -> bool:
    """
    Minimally triggers JIT compilation of the structural checks.
    """

    avl = build_avl(np.array([30, 20, 10, 40, 50, 25], dtype=np.int64))
    avl.remove(10)
    check_tree(avl)

    logger.debug("Structural checks compiled on %s", avl)
    return True
