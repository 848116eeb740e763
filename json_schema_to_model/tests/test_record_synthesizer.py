from datetime import datetime, timezone

import pytest


@pytest.fixture
def tree_model(generated, test_data):
    """Namespace of the generated tree model."""
    _, namespace = generated(test_data("tree.schema.json"), test_data("tree.hints.json"))
    return namespace


@pytest.fixture
def tree_code(generated, test_data):
    code, _ = generated(test_data("tree.schema.json"), test_data("tree.hints.json"))
    return code


def sample_root(ns):
    Node, Root, Uri = ns["Node"], ns["Root"], ns["Uri"]
    leaf = Node(label="leaf", weight=1.5)
    other = Node(label="other", kind=ns["NodeKindValue"].Branch)
    top = Node(
        label="top",
        children=[leaf, None, other],
        grid=[[leaf, other], [], None],
        attributes={"a": leaf, "b": None},
        properties={"color": "red"},
    )
    return Root(
        name="tree",
        root=top,
        nodes=[top, leaf],
        location=Uri("https://example.com/tree"),
        created=datetime(2024, 5, 1, tzinfo=timezone.utc),
        properties={"owner": "me"},
    )


class TestClone:
    """Deep cloning through copy_of and deep_clone"""

    def test_clone_is_equal_with_same_hash(self, tree_model):
        root = sample_root(tree_model)
        clone = root.deep_clone()
        assert clone is not root
        assert clone == root
        assert clone.value_equals(root)
        assert hash(clone) == hash(root)
        assert clone.value_get_hash_code() == root.value_get_hash_code()

    def test_clone_is_deep(self, tree_model):
        root = sample_root(tree_model)
        clone = tree_model["Root"].copy_of(root)
        assert clone.root is not root.root
        assert clone.nodes is not root.nodes
        assert clone.nodes[0] is not root.nodes[0]
        assert clone.root.children[0] is not root.root.children[0]
        assert clone.root.children[1] is None
        assert clone.root.grid[0] is not root.root.grid[0]
        assert clone.root.grid[0][1] == root.root.grid[0][1]
        assert clone.root.grid[2] is None
        assert clone.root.attributes is not root.root.attributes
        assert clone.root.attributes["a"] is not root.root.attributes["a"]
        assert clone.root.attributes["b"] is None
        assert clone.root.properties == {"color": "red"}

        clone.root.children[0].label = "changed"
        assert root.root.children[0].label == "leaf"
        assert clone != root

    def test_constructor_copies_arguments(self, tree_model):
        Node = tree_model["Node"]
        children = [Node(label="a")]
        node = Node(children=children)
        assert node.children is not children
        assert node.children[0] is not children[0]
        assert node.children == children

    def test_copy_of_none(self, tree_model):
        with pytest.raises(ValueError, match="other must not be None"):
            tree_model["Node"].copy_of(None)

    def test_uri_clone_keeps_kind(self, tree_model):
        Root, Uri, UriKind = tree_model["Root"], tree_model["Uri"], tree_model["UriKind"]
        relative = Root(location=Uri("docs/readme.md", UriKind.RELATIVE))
        clone = relative.deep_clone()
        assert clone.location is not relative.location
        assert clone.location == relative.location
        assert not clone.location.is_absolute_uri

        absolute = Root(location=Uri("https://example.com/a"))
        assert absolute.deep_clone().location.is_absolute_uri

    def test_defaults(self, tree_model):
        root = tree_model["Root"]()
        assert root.version == 1
        assert root.name is None
        assert tree_model["Node"]().kind == tree_model["NodeKindValue"].Leaf


class TestEquality:
    """Value equality and hash codes"""

    def test_collection_equality_is_order_sensitive(self, tree_model):
        Node = tree_model["Node"]
        a, b = Node(label="a"), Node(label="b")
        assert Node(children=[a, b]) == Node(children=[a, b])
        assert Node(children=[a, b]) != Node(children=[b, a])
        assert Node(children=[a]) != Node(children=[a, a])
        assert Node(children=[a]) != Node(children=None)

    def test_nested_collection_equality(self, tree_model):
        Node = tree_model["Node"]
        a, b = Node(label="a"), Node(label="b")
        assert Node(grid=[[a], [b]]) == Node(grid=[[Node(label="a")], [Node(label="b")]])
        assert Node(grid=[[a], [b]]) != Node(grid=[[a], [a]])
        assert Node(grid=[[a], None]) != Node(grid=[[a], []])

    def test_dictionary_equality_is_order_independent(self, tree_model):
        Node = tree_model["Node"]
        a, b = Node(label="a"), Node(label="b")
        first = Node(attributes={"x": a, "y": b})
        second = Node(attributes={"y": Node(label="b"), "x": Node(label="a")})
        assert first == second
        assert hash(first) == hash(second)
        assert first != Node(attributes={"x": b, "y": a})
        assert first != Node(attributes={"x": a, "z": b})
        assert first != Node(attributes={"x": a})

    def test_equal_records_have_equal_hashes(self, tree_model):
        assert hash(sample_root(tree_model)) == hash(sample_root(tree_model))
        assert sample_root(tree_model) == sample_root(tree_model)

    def test_scalar_difference(self, tree_model):
        Root = tree_model["Root"]
        assert Root(name="a", version=1) != Root(name="a", version=2)
        assert Root(name="a") != Root(name="b")
        assert Root(created=datetime(2024, 1, 1)) != Root(created=datetime(2024, 1, 2))

    def test_foreign_types(self, tree_model):
        node = tree_model["Node"](label="a")
        assert node != "a"
        assert not node.value_equals(None)
        assert node is not None

    def test_records_are_usable_as_keys(self, tree_model):
        Node = tree_model["Node"]
        index = {Node(label="a"): 1}
        assert index[Node(label="a")] == 1


class TestComposition:
    """Lists of maps and maps of lists"""

    SCHEMA = {
        "type": "object",
        "properties": {
            "rows": {"type": "array", "items": {"type": "object", "additionalProperties": {"$ref": "#/definitions/cell"}}},
            "columns": {"type": "object", "additionalProperties": {"type": "array", "items": {"$ref": "#/definitions/cell"}}},
            "extra": {"type": "object"},
        },
        "definitions": {"cell": {"type": "object", "properties": {"value": {"type": "integer"}}}},
    }

    HINTS = {
        "Root.Rows[]": [{"kind": "DictionaryHint"}],
        "Root.Columns": [{"kind": "DictionaryHint"}],
    }

    def test_list_of_maps_and_map_of_lists(self, generated):
        code, ns = generated(self.SCHEMA, self.HINTS)
        Root, Cell = ns["Root"], ns["Cell"]
        assert "rows: list[dict[str, Cell]] | None" in code
        assert "columns: dict[str, list[Cell]] | None" in code

        root = Root(
            rows=[{"a": Cell(1), "b": Cell(2)}, {}],
            columns={"a": [Cell(1)], "b": [Cell(2), None]},
            extra={"free": [1, {"form": True}]},
        )
        clone = root.deep_clone()
        assert clone == root
        assert hash(clone) == hash(root)
        assert clone.rows[0]["a"] is not root.rows[0]["a"]
        assert clone.columns["b"] is not root.columns["b"]
        assert clone.columns["b"][1] is None

        reordered = Root(rows=[{"b": Cell(2), "a": Cell(1)}, {}], columns={"b": [Cell(2), None], "a": [Cell(1)]}, extra=root.extra)
        assert reordered == root
        assert hash(reordered) == hash(root)
        assert Root(columns={"a": [Cell(1)], "b": [None, Cell(2)]}) != Root(columns={"a": [Cell(1)], "b": [Cell(2), None]})


class TestGeneratedText:
    """Shape of the generated record classes"""

    def test_record_members(self, tree_code):
        assert "class Node:" in tree_code
        assert '    """A node of the tree."""' in tree_code
        assert "    name: str\n" in tree_code
        assert "    version: int | None\n" in tree_code
        assert "def copy_of(cls, other: Node) -> Node:" in tree_code
        assert "def _init(self, label, weight, children, grid, attributes, kind, properties) -> None:" in tree_code
        assert "kind: NodeKindValue | None=NodeKindValue.Leaf" in tree_code
        assert "result = (result * 31 + hash(self.label)) & 4294967295" in tree_code
        assert "@final" not in tree_code

    def test_sealed_classes(self, generated, test_data):
        code, ns = generated(test_data("tree.schema.json"), test_data("tree.hints.json"), seal_classes=True)
        assert "@final\nclass Node:" in code
        typing_imports = next(line for line in code.splitlines() if line.startswith("from typing import"))
        assert "final" in typing_imports
        assert ns["Node"]().deep_clone() == ns["Node"]()

    def test_attribute_hint(self, generated):
        code, _ = generated(
            {"type": "object", "properties": {"title": {"type": "string"}}},
            {"Root.Title": [{"kind": "AttributeHint", "arguments": {"typeName": "Field", "arguments": ["t"], "properties": {"order": 1}}}]},
        )
        assert "title: Annotated[str | None, Field('t', order=1)]" in code

    def test_untyped_values_hash_consistently(self, generated):
        _, ns = generated({"type": "object", "properties": {"blob": {"type": "object"}}})
        Root = ns["Root"]
        first = Root(blob={"a": [1, 2], "b": {"c": None}})
        second = Root(blob={"b": {"c": None}, "a": [1, 2]})
        assert first == second
        assert hash(first) == hash(second)


class TestMemberNames:
    """Properties named like generated record members"""

    def test_property_named_like_node_kind(self, generated):
        code, ns = generated({"type": "object", "properties": {"rootNodeKind": {"type": "string"}}})
        Root = ns["Root"]
        root = Root(root_node_kind_="x")
        assert root.root_node_kind_ == "x"
        assert root.root_node_kind == ns["RootNodeKind"].Root
        assert root.deep_clone() == root
        assert "    root_node_kind_: str | None\n" in code

    def test_node_kind_name_follows_schema_name(self, generated):
        _, ns = generated({"type": "object", "properties": {"rootNodeKind": {"type": "string"}}}, schema_name="Tree")
        root = ns["Root"](root_node_kind="x")
        assert root.root_node_kind == "x"
        assert root.tree_node_kind == ns["TreeNodeKind"].Root


class TestEqualityComparer:
    """Separate equality comparer classes"""

    def test_comparer(self, generated, test_data):
        code, ns = generated(test_data("tree.schema.json"), test_data("tree.hints.json"), generate_equality_comparers=True)
        comparer, Node = ns["NodeEqualityComparer"], ns["Node"]
        assert "class NodeEqualityComparer:" in code
        assert "return NodeEqualityComparer.equals(self, other)" in code

        a = Node(label="a", children=[Node(label="b")])
        assert comparer.equals(None, None)
        assert comparer.equals(a, a)
        assert not comparer.equals(a, None)
        assert not comparer.equals(None, a)
        assert comparer.equals(a, a.deep_clone())
        assert comparer.get_hash_code(None) == 0
        assert comparer.get_hash_code(a) == hash(a) == hash(a.deep_clone())

        root = sample_root(ns)
        assert root.deep_clone() == root
        assert hash(root.deep_clone()) == hash(root)


if __name__ == "__main__":
    pytest.main([__file__])
