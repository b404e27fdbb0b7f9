"""Tests for per-layer model resolution."""
import pytest

from modelerstate import DataModel, Layer
from modelerstate.layer_resolver import resolve_layer_model, resolve_layer_models
from modelerstate.lineage import build_model_index, collect_family


def _family_of(models, root_index=0):
    return collect_family(models[root_index], models), build_model_index(models)


class TestResolveLayerModel:
    """Test resolve_layer_model()."""

    def test_missing_layer_resolves_to_none(self):
        models = [
            DataModel(id=1, layer="conceptual"),
            DataModel(id=2, layer="logical", parent_model_id=1),
        ]
        family, index = _family_of(models)
        assert resolve_layer_model(Layer.PHYSICAL, models[0], family, index) is None

    def test_no_current_model_picks_first_candidate(self, branched):
        family, index = _family_of(branched)
        assert resolve_layer_model("logical", None, family, index).id == 2

    def test_accepts_string_layer(self, triple):
        family, index = _family_of(triple)
        assert resolve_layer_model("physical", triple[0], family, index).id == 3

    def test_unknown_layer_string_raises(self, triple):
        family, index = _family_of(triple)
        with pytest.raises(ValueError):
            resolve_layer_model("semantic", triple[0], family, index)

    def test_none_family_is_programmer_error(self, triple):
        with pytest.raises(TypeError):
            resolve_layer_model("logical", triple[0], None, build_model_index(triple))

    def test_branch_matches_share_root_so_family_order_wins(self, branched):
        """Both physical models reach root 1, which is on the logical model's lineage."""
        family, index = _family_of(branched)
        second_logical = branched[2]
        assert resolve_layer_model("physical", second_logical, family, index).id == 4

    def test_branch_match_from_physical(self, branched):
        family, index = _family_of(branched)
        second_physical = branched[4]
        assert resolve_layer_model("logical", second_physical, family, index).id == 2

    def test_same_layer_picks_first_branch_match(self, branched):
        family, index = _family_of(branched)
        assert resolve_layer_model("physical", branched[4], family, index) is branched[3]

    def test_first_candidate_sharing_lineage_wins(self, two_families):
        """An earlier candidate with no shared ancestry is skipped."""
        index = build_model_index(two_families)
        mixed = [two_families[5], two_families[2]]
        assert resolve_layer_model("physical", two_families[1], mixed, index).id == 3

    def test_ties_broken_by_family_order(self, branched):
        """From the root every logical model is a branch match."""
        family, index = _family_of(branched)
        assert resolve_layer_model("logical", branched[0], family, index).id == 2

    def test_never_crosses_families(self, two_families):
        family_a, index = _family_of(two_families, root_index=0)
        logical_a = two_families[1]
        assert resolve_layer_model("physical", logical_a, family_a, index).id == 3

        family_b, _ = _family_of(two_families, root_index=3)
        logical_b = two_families[4]
        assert resolve_layer_model("physical", logical_b, family_b, index).id == 30

    def test_unrelated_hint_falls_back_to_first_candidate(self, two_families):
        family_a, index = _family_of(two_families, root_index=0)
        logical_b = two_families[4]
        assert resolve_layer_model("physical", logical_b, family_a, index).id == 3

    def test_physical_directly_under_conceptual(self):
        models = [
            DataModel(id=1, layer="conceptual"),
            DataModel(id=2, layer="physical", parent_model_id=1),
        ]
        family, index = _family_of(models)
        assert resolve_layer_model("physical", models[0], family, index).id == 2


class TestResolveLayerModels:
    """Test resolving all layers for navigation."""

    def test_all_layers_available(self, triple):
        family, index = _family_of(triple)
        resolved = resolve_layer_models(triple[1], family, index, root=triple[0])
        assert {layer: m.id for layer, m in resolved.items()} == {
            Layer.CONCEPTUAL: 1,
            Layer.LOGICAL: 2,
            Layer.PHYSICAL: 3,
        }

    def test_missing_layers_are_none(self):
        root = DataModel(id=1, layer="conceptual")
        family, index = _family_of([root])
        resolved = resolve_layer_models(root, family, index, root=root)
        assert resolved[Layer.CONCEPTUAL] is root
        assert resolved[Layer.LOGICAL] is None
        assert resolved[Layer.PHYSICAL] is None

    def test_conceptual_falls_back_to_root(self):
        """A family rooted at a logical model still fills the conceptual tab."""
        models = [
            DataModel(id=2, layer="logical"),
            DataModel(id=3, layer="physical", parent_model_id=2),
        ]
        family, index = _family_of(models)
        resolved = resolve_layer_models(models[1], family, index, root=models[0])
        assert resolved[Layer.CONCEPTUAL] is models[0]
        assert resolved[Layer.PHYSICAL] is models[1]
