from typing import Any



# ---------- AVLTree Exceptions ----------
class AVLError(Exception):
    """Base class for every error raised by the AVL tree and its tooling."""


class InvalidArgument(AVLError, ValueError):
    """Raised when an absent (``None``) key is passed to insert or remove."""


class NotFound(AVLError, KeyError):
    """
    Raised by ``AVLTree.remove`` when no stored key compares equal to the query.

    The missing key is kept on ``.key`` so callers can report it.
    """

    def __init__(
        self,
        key: Any

    ) -> None:

        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Key {self.key!r} is not in the tree"


class InvariantViolation(AVLError, AssertionError):
    """Raised by ``AVLCheck.check_tree`` when a structural invariant is broken."""
