"""Unit tests for the category tree."""

from storefront.domain.model.catalog import Category, build_category_tree


def _names(nodes):
    return [n.category.name for n in nodes]


class TestBuildCategoryTree:

    def test_nests_children_under_parents(self):
        tree = build_category_tree([
            Category(id="1", name="Jewellery"),
            Category(id="2", name="Rings", parent_id="1"),
            Category(id="3", name="Necklaces", parent_id="1"),
            Category(id="4", name="Clothing"),
        ])
        assert _names(tree) == ["Jewellery", "Clothing"]
        assert _names(tree[0].children) == ["Rings", "Necklaces"]
        assert tree[1].children == []

    def test_child_listed_before_parent(self):
        tree = build_category_tree([
            Category(id="2", name="Rings", parent_id="1"),
            Category(id="1", name="Jewellery"),
        ])
        assert _names(tree) == ["Jewellery"]
        assert _names(tree[0].children) == ["Rings"]

    def test_unknown_parent_becomes_root(self):
        tree = build_category_tree([Category(id="5", name="Orphan", parent_id="99")])
        assert _names(tree) == ["Orphan"]

    def test_self_parent_becomes_root(self):
        tree = build_category_tree([Category(id="5", name="Loop", parent_id="5")])
        assert _names(tree) == ["Loop"]
        assert tree[0].children == []

    def test_deep_nesting(self):
        tree = build_category_tree([
            Category(id="1", name="A"),
            Category(id="2", name="B", parent_id="1"),
            Category(id="3", name="C", parent_id="2"),
        ])
        assert _names(tree[0].children[0].children) == ["C"]

    def test_empty(self):
        assert build_category_tree([]) == []

    def test_two_category_cycle_keeps_both(self):
        tree = build_category_tree([
            Category(id="1", name="A", parent_id="2"),
            Category(id="2", name="B", parent_id="1"),
        ])
        assert _names(tree) == ["B"]
        assert _names(tree[0].children) == ["A"]

    def test_longer_cycle_promotes_closing_category(self):
        tree = build_category_tree([
            Category(id="1", name="A", parent_id="3"),
            Category(id="2", name="B", parent_id="1"),
            Category(id="3", name="C", parent_id="2"),
            Category(id="4", name="D"),
        ])
        assert _names(tree) == ["C", "D"]
        assert _names(tree[0].children) == ["A"]
        assert _names(tree[0].children[0].children) == ["B"]
