"""
Tests for lineage walking and family collection.

Tests cover:
- build_model_index lookup and duplicate handling
- find_root / collect_lineage with missing parents and cycles
- collect_family BFS order and dedup
- list_root_models and find_conceptual_root
"""

import pytest

from modelerstate import DataModel
from modelerstate.lineage import (
    build_model_index,
    collect_family,
    collect_lineage,
    find_conceptual_root,
    find_root,
    list_root_models,
)


class TestBuildModelIndex:
    """Test id -> model index."""

    def test_lookup(self, triple):
        index = build_model_index(triple)
        assert set(index) == {1, 2, 3}
        assert index[2] is triple[1]

    def test_duplicate_ids_last_write_wins(self):
        first = DataModel(id=7, layer="conceptual", name="first")
        second = DataModel(id=7, layer="logical", name="second")
        index = build_model_index([first, second])
        assert index[7] is second

    def test_empty(self):
        assert build_model_index([]) == {}

    def test_none_is_programmer_error(self):
        with pytest.raises(TypeError):
            build_model_index(None)


class TestFindRoot:
    """Test upward walk to the root ancestor."""

    def test_model_without_parent_is_its_own_root(self, triple):
        index = build_model_index(triple)
        assert find_root(triple[0], index) is triple[0]

    def test_physical_reaches_conceptual(self, triple):
        index = build_model_index(triple)
        assert find_root(triple[2], index).id == 1

    def test_missing_parent_stops_walk(self):
        orphan = DataModel(id=5, layer="logical", parent_model_id=99)
        index = build_model_index([orphan])
        assert find_root(orphan, index) is orphan

    def test_self_cycle_terminates(self):
        model = DataModel(id=1, layer="conceptual", parent_model_id=1)
        index = build_model_index([model])
        assert find_root(model, index) is model

    def test_mutual_cycle_comes_back_to_start(self):
        """Only parent ids are tracked, so the walk goes round the cycle once."""
        a = DataModel(id=1, layer="conceptual", parent_model_id=2)
        b = DataModel(id=2, layer="logical", parent_model_id=1)
        index = build_model_index([a, b])
        assert find_root(a, index) is a
        assert find_root(b, index) is b

    def test_three_cycle_comes_back_to_start(self):
        models = [
            DataModel(id=1, layer="conceptual", parent_model_id=2),
            DataModel(id=2, layer="logical", parent_model_id=3),
            DataModel(id=3, layer="physical", parent_model_id=1),
        ]
        index = build_model_index(models)
        assert find_root(models[0], index).id == 1
        assert find_root(models[2], index).id == 3

    def test_cycle_above_chain(self):
        """Entering a cycle from below stops where the first repeated parent is found.

        3 -> 2 -> 1 -> 2: parent 2 was already followed, so the walk ends at 1.
        """
        models = [
            DataModel(id=1, layer="conceptual", parent_model_id=2),
            DataModel(id=2, layer="conceptual", parent_model_id=1),
            DataModel(id=3, layer="logical", parent_model_id=2),
        ]
        index = build_model_index(models)
        assert find_root(models[2], index).id == 1


class TestCollectLineage:
    """Test lineage id sets."""

    def test_includes_self_and_ancestors(self, triple):
        index = build_model_index(triple)
        assert collect_lineage(triple[2], index) == {1, 2, 3}
        assert collect_lineage(triple[0], index) == {1}

    def test_none_gives_empty_set(self, triple):
        assert collect_lineage(None, build_model_index(triple)) == set()

    def test_cycle_visits_each_model_once(self):
        models = [
            DataModel(id=1, layer="conceptual", parent_model_id=3),
            DataModel(id=2, layer="logical", parent_model_id=1),
            DataModel(id=3, layer="physical", parent_model_id=2),
        ]
        index = build_model_index(models)
        assert collect_lineage(models[2], index) == {1, 2, 3}


class TestCollectFamily:
    """Test breadth-first family collection."""

    def test_none_root(self, triple):
        assert collect_family(None, triple) == []

    def test_chain(self, triple):
        assert [m.id for m in collect_family(triple[0], triple)] == [1, 2, 3]

    def test_bfs_order_follows_input_order(self, branched):
        family = collect_family(branched[0], branched)
        assert [m.id for m in family] == [1, 2, 3, 4, 5]

    def test_excludes_other_families(self, two_families):
        family = collect_family(two_families[0], two_families)
        assert {m.id for m in family} == {1, 2, 3}

    def test_cyclic_descendants_listed_once(self):
        models = [
            DataModel(id=1, layer="conceptual"),
            DataModel(id=2, layer="logical", parent_model_id=1),
            DataModel(id=3, layer="physical", parent_model_id=2),
            DataModel(id=2, layer="logical", parent_model_id=3),
        ]
        family = collect_family(models[0], models)
        ids = [m.id for m in family]
        assert len(ids) == len(set(ids))
        assert set(ids) == {1, 2, 3}

    def test_self_cycle_root_terminates(self):
        root = DataModel(id=1, layer="conceptual", parent_model_id=1)
        assert collect_family(root, [root]) == [root]

    def test_every_member_walks_back_to_root(self, branched):
        index = build_model_index(branched)
        root = branched[0]
        for member in collect_family(root, branched):
            assert find_root(member, index) is root

    def test_none_models_is_programmer_error(self, triple):
        with pytest.raises(TypeError):
            collect_family(triple[0], None)


class TestRootHelpers:
    """Test model picker helpers."""

    def test_list_root_models(self, two_families):
        assert [m.id for m in list_root_models(two_families)] == [1, 10]

    def test_list_root_models_skips_parented_conceptual(self):
        models = [
            DataModel(id=1, layer="conceptual"),
            DataModel(id=2, layer="conceptual", parent_model_id=1),
            DataModel(id=3, layer="logical"),
        ]
        assert [m.id for m in list_root_models(models)] == [1]

    def test_find_conceptual_root(self, triple):
        index = build_model_index(triple)
        assert find_conceptual_root(triple[2], index).id == 1

    def test_find_conceptual_root_absent(self):
        orphan = DataModel(id=4, layer="physical", parent_model_id=99)
        assert find_conceptual_root(orphan, build_model_index([orphan])) is None
