"""Tests for the union-find structure behind Kruskal."""

from algorithms import DisjointSet


def test_find_creates_sets_lazily():
    ds = DisjointSet()

    assert ds.find("a") == "a"
    assert len(ds) == 1
    assert ds.component_count == 1


def test_union_merges_once():
    ds = DisjointSet("abc")

    assert ds.union("a", "b") is True
    assert ds.union("b", "a") is False
    assert ds.connected("a", "b")
    assert not ds.connected("a", "c")
    assert ds.component_count == 2


def test_union_by_rank_keeps_taller_root():
    ds = DisjointSet("abcd")
    ds.union("a", "b")
    root = ds.find("a")

    ds.union("c", root)

    assert ds.find("c") == root
    assert ds.rank[root] == 1


def test_find_compresses_paths():
    ds = DisjointSet()
    ds.parent = {"a": "b", "b": "c", "c": "c"}
    ds.rank = {"a": 0, "b": 1, "c": 2}

    assert ds.find("a") == "c"
    assert ds.parent["a"] == "c"
    assert ds.parent["b"] == "c"


def test_components_does_not_compress():
    ds = DisjointSet()
    ds.parent = {"a": "b", "b": "c", "c": "c"}
    ds.rank = {"a": 0, "b": 1, "c": 2}

    assert ds.components() == {"a": "c", "b": "c", "c": "c"}
    assert ds.parent["a"] == "b"


def test_copy_is_independent():
    ds = DisjointSet("abc")
    ds.union("a", "b")

    clone = ds.copy()
    clone.union("b", "c")

    assert clone.component_count == 1
    assert ds.component_count == 2
    assert ds != clone


def test_equality_by_partition():
    left, right = DisjointSet("xyz"), DisjointSet("xyz")
    left.union("x", "y")
    right.union("x", "y")

    assert left == right
    assert left.component_of("y") == left.component_of("x")
