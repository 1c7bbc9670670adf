"""Assignment Diff — verifies the pure add/remove computation.

Invariants:
    - to_remove = current − desired, to_add = desired − current
    - Identical sets (in any order) give an empty diff
    - Applying the diff always lands exactly on the desired set
"""

from uuid import uuid4

from househub.core.assignment_diff import AssignmentDiff, apply_diff, diff_assignments

A, B, C, D = (uuid4() for _ in range(4))


def test_swap_one_member():
    diff = diff_assignments([A, B, C], [B, C, D])
    assert diff.to_remove == (A,)
    assert diff.to_add == (D,)
    assert diff.operation_count == 2


def test_same_set_is_empty():
    diff = diff_assignments([A, B], [B, A])
    assert diff.is_empty
    assert diff.operation_count == 0


def test_empty_desired_removes_everything():
    diff = diff_assignments([A, B], [])
    assert diff.to_add == ()
    assert set(diff.to_remove) == {A, B}


def test_from_nothing_adds_everything_in_order():
    diff = diff_assignments([], [C, A, B])
    assert diff.to_add == (C, A, B)
    assert diff.to_remove == ()


def test_duplicates_in_desired_are_collapsed():
    diff = diff_assignments([A], [B, B, A, B])
    assert diff.to_add == (B,)
    assert diff.to_remove == ()


def test_add_and_remove_are_disjoint():
    diff = diff_assignments([A, B, C], [C, D, A])
    assert not set(diff.to_add) & set(diff.to_remove)


def test_apply_diff_reaches_desired():
    current, desired = [A, B, C], [B, C, D]
    assert apply_diff(current, diff_assignments(current, desired)) == set(desired)


def test_second_pass_is_noop():
    current, desired = [A, B], [B, C]
    after = apply_diff(current, diff_assignments(current, desired))
    assert diff_assignments(after, desired).is_empty


def test_default_diff_is_empty():
    assert AssignmentDiff().is_empty
