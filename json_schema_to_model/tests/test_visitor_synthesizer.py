import pytest

from json_schema_to_model.pipeline.errors import NameCollisionError

SCHEMA = {
    "type": "object",
    "properties": {
        "top": {"$ref": "#/definitions/a"},
        "index": {"type": "object", "additionalProperties": {"$ref": "#/definitions/a"}},
    },
    "definitions": {
        "a": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "children": {"type": "array", "items": {"$ref": "#/definitions/a"}},
                "grid": {"type": "array", "items": {"type": "array", "items": {"$ref": "#/definitions/a"}}},
                "next": {"$ref": "#/definitions/a"},
                "tags": {"type": "array", "items": {"type": "string"}},
            },
        }
    },
}

HINTS = {"Root.Index": [{"kind": "DictionaryHint"}]}


@pytest.fixture
def model(generated):
    return generated(SCHEMA, HINTS)


def recording_visitor(ns, replacements=None, on_visit=None):
    """Visitor subclass recording the names of visited A nodes."""
    base = ns["RootRewritingVisitor"]

    class Recording(base):
        def __init__(self):
            self.seen = []

        def visit_a(self, node):
            self.seen.append(node.name)
            if on_visit is not None:
                on_visit(node)
            node = super().visit_a(node)
            if replacements and node.name in replacements:
                return replacements[node.name]
            return node

    return Recording()


class TestRewritingVisitor:
    """Dispatch and in-place rewriting"""

    def test_self_recursive_array_visits_each_element_once(self, model):
        _, ns = model
        A = ns["A"]
        tree = A(name="r", children=[A(name="c1"), A(name="c2", children=[A(name="g")]), None])
        visitor = recording_visitor(ns)
        assert visitor.visit(tree) is tree
        assert visitor.seen == ["r", "c1", "c2", "g"]
        assert tree.children[2] is None

    def test_replacement_neither_skips_nor_revisits(self, model):
        _, ns = model
        A = ns["A"]
        replacement = A(name="replacement", children=[A(name="unvisited")])
        tree = A(name="r", children=[A(name="c1"), A(name="c2"), A(name="c3")])
        visitor = recording_visitor(ns, replacements={"c2": replacement})
        visitor.visit(tree)
        assert visitor.seen == ["r", "c1", "c2", "c3"]
        assert [child.name for child in tree.children] == ["c1", "replacement", "c3"]
        assert tree.children[1] is replacement

    def test_loop_reads_live_length(self, model):
        _, ns = model
        A = ns["A"]
        tree = A(name="r", children=[A(name="c1"), A(name="c2")])

        def grow(node):
            if node.name == "c1":
                tree.children.append(A(name="late"))

        visitor = recording_visitor(ns, on_visit=grow)
        visitor.visit(tree)
        assert visitor.seen == ["r", "c1", "c2", "late"]

    def test_nested_lists_and_single_references(self, model):
        _, ns = model
        A, Root = ns["A"], ns["Root"]
        tree = A(name="r", grid=[[A(name="g00"), A(name="g01")], None, [A(name="g20")]], next=A(name="n"), tags=["x"])
        root = Root(top=tree, index={"k": A(name="in_map")})
        visitor = recording_visitor(ns, replacements={"g01": A(name="new")})
        assert visitor.visit(root) is root
        assert visitor.seen == ["r", "g00", "g01", "g20", "n"]
        assert tree.grid[0][1].name == "new"
        assert tree.tags == ["x"]

    def test_dispatch(self, model):
        _, ns = model
        visitor = ns["RootRewritingVisitor"]()
        kind = ns["RootNodeKind"]
        assert [member.name for member in kind] == ["None_", "A", "Root"]
        assert ns["A"]().root_node_kind == kind.A
        assert ns["Root"]().root_node_kind == kind.Root

        class Foreign:
            root_node_kind = kind.None_

        foreign = Foreign()
        assert visitor.visit(foreign) is foreign
        with pytest.raises(ValueError, match="node must not be None"):
            visitor.visit(None)

    def test_node_protocol(self, model):
        _, ns = model
        assert isinstance(ns["A"](), ns["IRootNode"])
        assert isinstance(ns["Root"](), ns["IRootNode"])
        assert not isinstance(object(), ns["IRootNode"])

    def test_generated_text(self, model):
        code, _ = model
        assert "class RootNodeKind(IntEnum):" in code
        assert "    None_ = 0\n    A = 1\n    Root = 2\n" in code
        assert "match node.root_node_kind:" in code
        assert "case RootNodeKind.A:" in code
        assert "case _:" in code
        assert "while index_0 < len(node.children):" in code
        assert "node.children[index_0] = self._visit_null_checked(node.children[index_0])" in code
        assert "value_1 = node.grid[index_1]" in code
        assert "while index_2 < len(value_1):" in code
        assert "node.tags" not in code.split("class RootRewritingVisitor")[1]
        assert "node.index" not in code.split("class RootRewritingVisitor")[1]


def test_schema_name(generated):
    code, ns = generated(SCHEMA, HINTS, schema_name="tree")
    assert "class TreeNodeKind(IntEnum):" in code
    assert "class ITreeNode(Protocol):" in code
    assert ns["A"]().tree_node_kind == ns["TreeNodeKind"].A
    assert "TreeRewritingVisitor" in ns


def test_record_named_like_dispatcher(generated):
    schema = {
        "type": "object",
        "properties": {"other": {"$ref": "#/definitions/other"}},
        "definitions": {
            "actual": {"type": "object", "properties": {"name": {"type": "string"}}},
            "other": {"type": "object", "properties": {"name": {"type": "string"}, "inner": {"$ref": "#/definitions/other"}}},
        },
    }
    with pytest.raises(NameCollisionError, match="visit_actual"):
        generated(schema)

    # Without the visitor the record name is free
    _, ns = generated(schema, generate_rewriting_visitor=False)
    assert ns["Actual"](name="a").deep_clone().name == "a"


def test_visitor_disabled(generated):
    code, ns = generated(SCHEMA, HINTS, generate_rewriting_visitor=False)
    assert "RewritingVisitor" not in code
    assert "NodeKind" not in code
    assert ns["A"](name="x").deep_clone().name == "x"


if __name__ == "__main__":
    pytest.main([__file__])
