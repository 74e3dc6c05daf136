from typing import Any, Optional



# Absent child convention:
#     height(None) = -1, so a leaf has height 0 and balance factor 0.
ABSENT_HEIGHT = -1



# ---------- AVLNode ----------
class AVLNode:
    """
    A single vertex of a linked AVL tree.

    Holds a key, exclusive links to its left and right subtrees and the cached
    height / balance factor of the subtree rooted here. The node enforces no
    invariant of its own; ``AVLTree`` keeps the metadata current.

    Attributes:
        key (Any): The stored key, totally ordered with every other key.
        left (Optional[AVLNode]): Left subtree, or None.
        right (Optional[AVLNode]): Right subtree, or None.
        height (int): Read-only cached height (leaf = 0).
        balance_factor (int): Read-only cached height(left) - height(right).
    """

    __slots__ = ("key", "left", "right", "_height", "_balance_factor")

    def __init__(
        self,
        key: Any

    ) -> None:

        self.key             = key
        self.left            = None
        self.right           = None
        self._height         = 0
        self._balance_factor = 0

    @property
    def height(self) -> int:
        return self._height

    @property
    def balance_factor(self) -> int:
        return self._balance_factor

    def _set_metadata(
        self,
        height: int,
        balance_factor: int

    ) -> None:

        # Only AVLTree.update_height_and_bf writes here.
        self._height         = height
        self._balance_factor = balance_factor

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        return (
            "AVLNode(key=" + repr(self.key)
            + ", height=" + str(self._height)
            + ", bf=" + str(self._balance_factor) + ")"
        )


def get_height(
    node: Optional[AVLNode]

) -> int:

    """
    Return the cached height of ``node``, or -1 if the node is absent.
    """

    if node is None:
        return ABSENT_HEIGHT

    return node.height
