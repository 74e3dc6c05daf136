import numpy as np
import pytest

from LinkAVL.AVLCheck import (
    STALE_BF, STALE_HEIGHT, UNBALANCED, OK,
    _find_violation, _recompute_heights,
    check_tree, height_bound, inorder_keys, snapshot, warmup,
)
from LinkAVL.AVLErrors import InvariantViolation, NotFound
from LinkAVL.AVLNode import AVLNode
from LinkAVL.AVLTreeLinked import AVLTree, build_avl, fill_avl, remove_avl


def test_snapshot_numbers_nodes_in_preorder():
    avl = build_avl([2, 1, 3])

    keys, table = snapshot(avl.root())

    assert keys == [None, 2, 1, 3]
    np.testing.assert_array_equal(table, np.array([
        [0, 0, -1, 0],
        [2, 3,  1, 0],
        [0, 0,  0, 0],
        [0, 0,  0, 0],
    ], dtype=np.int64))


def test_snapshot_of_empty_tree_is_sentinel_only():
    keys, table = snapshot(None)

    assert keys == [None]
    assert table.shape == (1, 4)
    assert inorder_keys(None) == []


def test_recompute_heights_matches_cached_heights():
    avl = build_avl(range(50))
    _, table = snapshot(avl.root())

    np.testing.assert_array_equal(_recompute_heights(table), table[:, 2])
    assert _find_violation(table) == (OK, 0)


@pytest.mark.parametrize("size, bound", [(0, 1), (1, 2), (7, 4), (1000, 14)])
def test_height_bound(size, bound):
    assert height_bound(size) == bound


def test_check_tree_detects_stale_height():
    avl = build_avl([2, 1, 3])
    avl.root()._set_metadata(5, 0)

    _, table = snapshot(avl.root())
    assert _find_violation(table) == (STALE_HEIGHT, 1)
    with pytest.raises(InvariantViolation, match="caches height 5"):
        check_tree(avl)


def test_check_tree_detects_stale_balance_factor():
    avl = build_avl([2, 1, 3])
    avl.root()._set_metadata(1, 1)

    _, table = snapshot(avl.root())
    assert _find_violation(table) == (STALE_BF, 1)
    with pytest.raises(InvariantViolation, match="stale balance factor"):
        check_tree(avl)


def test_check_tree_detects_unbalanced_node():
    avl   = AVLTree()
    nodes = [AVLNode(k) for k in (1, 2, 3)]
    nodes[0].right, nodes[1].right = nodes[1], nodes[2]
    for node in reversed(nodes):
        avl.update_height_and_bf(node)
    avl._root, avl._size = nodes[0], 3

    _, table = snapshot(avl.root())
    assert _find_violation(table) == (UNBALANCED, 1)
    with pytest.raises(InvariantViolation, match="AVL property"):
        check_tree(avl)


def test_check_tree_detects_order_violation():
    avl = build_avl([2, 1, 3])
    avl.root().key = 0

    with pytest.raises(InvariantViolation, match="strictly increasing"):
        check_tree(avl)


def test_check_tree_detects_size_mismatch():
    avl = build_avl([2, 1, 3])
    avl._size += 1

    with pytest.raises(InvariantViolation, match="size"):
        check_tree(avl)


def test_snapshot_detects_shared_node():
    avl = build_avl([2, 1, 3])
    avl.root().right.left = avl.root()

    with pytest.raises(InvariantViolation, match="more than once"):
        check_tree(avl)


def test_warmup():
    assert warmup() is True


def test_build_avl_from_numpy_array_stores_python_scalars():
    avl = build_avl(np.arange(100, dtype=np.uint64))

    assert avl.size() == 100
    assert type(avl.root().key) is int
    check_tree(avl)


def test_fill_avl_skips_duplicates():
    avl = build_avl([5, 3])
    fill_avl(avl, np.array([3, 5, 8, 8]))

    assert avl.size() == 3
    assert inorder_keys(avl.root()) == [3, 5, 8]


def test_remove_avl_returns_removed_keys():
    avl = build_avl(np.arange(100))

    removed = remove_avl(avl, np.arange(0, 100, 2))

    assert removed == list(range(0, 100, 2))
    assert avl.size() == 50
    assert inorder_keys(avl.root()) == list(range(1, 100, 2))
    check_tree(avl)


def test_remove_avl_stops_at_missing_key():
    avl = build_avl([1, 2, 3])

    with pytest.raises(NotFound):
        remove_avl(avl, [1, 9, 2])

    assert avl.size() == 2
    assert inorder_keys(avl.root()) == [2, 3]
