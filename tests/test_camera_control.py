import pytest

from meshray.camera_control import CameraParentList


def test_active_parent_starts_at_first():
    parents = CameraParentList(parents=["rz", "py", "pz", "rx", "base"])
    assert parents.active_parent() == "rz"


def test_cycle_advances_and_wraps():
    parents = CameraParentList(parents=["a", "b", "c"])
    seen = []
    for _ in range(4):
        parents.cycle()
        seen.append(parents.active_parent())
    assert seen == ["b", "c", "a", "b"]


def test_cycle_full_round_returns_to_start():
    parents = CameraParentList(parents=[1, 2, 3, 4, 5], active=2)
    for _ in range(5):
        parents.cycle()
    assert parents.active == 2
    assert parents.active_parent() == 3


def test_empty_list_has_no_parent():
    parents = CameraParentList()
    parents.cycle()
    assert parents.active == 0
    assert parents.active_parent() is None


def test_single_parent_stays_active():
    parents = CameraParentList(parents=["only"])
    parents.cycle()
    assert parents.active_parent() == "only"


def test_active_out_of_range_rejected():
    with pytest.raises(ValueError):
        CameraParentList(parents=["a", "b"], active=2)


def test_parents_are_copied():
    source = ["a", "b"]
    parents = CameraParentList(parents=source)
    source.append("c")
    assert parents.parents == ["a", "b"]