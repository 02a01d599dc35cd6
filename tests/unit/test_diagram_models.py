"""
Unit Tests for Diagram Node Models
==================================
"""

import pytest
from pydantic import ValidationError

from railroad_dsl.models import diagram as rr


def sample_tree() -> rr.DiagramElement:
    return rr.Sequence(
        children=[
            rr.SimpleStart(),
            rr.Choice(
                children=[
                    rr.Terminal(text="a"),
                    rr.Optional(inner=rr.NonTerminal(text="b")),
                    rr.Repeat(body=rr.Comment(text="c"), separator=rr.Empty()),
                ]
            ),
            rr.LabeledBox(inner=rr.Stack(children=[rr.Terminal(text="d")]), label=rr.Comment(text="e")),
            rr.SimpleEnd(),
        ]
    )


@pytest.mark.unit
class TestDiagramNodes:
    """Test node construction and value semantics."""

    def test_value_equality(self):
        assert sample_tree() == sample_tree()
        assert rr.Terminal(text="a") != rr.NonTerminal(text="a")
        assert rr.Terminal(text="a") != rr.Terminal(text="b")

    def test_nodes_are_frozen(self):
        node = rr.Terminal(text="a")

        with pytest.raises(ValidationError):
            node.text = "b"

    def test_composites_require_children(self):
        with pytest.raises(ValidationError):
            rr.Sequence(children=[])

    def test_repeat_requires_separator(self):
        with pytest.raises(ValidationError):
            rr.Repeat(body=rr.Terminal(text="a"))

    def test_labeled_box_requires_label(self):
        with pytest.raises(ValidationError):
            rr.LabeledBox(inner=rr.Terminal(text="a"))

    def test_kind_tags(self):
        assert rr.Terminal(text="a").kind == "terminal"
        assert rr.NonTerminal(text="a").kind == "non_terminal"
        assert rr.VerticalGrid(children=[rr.Empty()]).kind == "vertical_grid"

    def test_json_round_trip(self):
        tree = sample_tree()

        restored = rr.DiagramNodeAdapter.validate_json(tree.model_dump_json())

        assert restored == tree

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            rr.DiagramNodeAdapter.validate_python({"kind": "railway"})


@pytest.mark.unit
class TestTraversal:
    """Test tree walking helpers."""

    def test_child_nodes(self):
        repeat = rr.Repeat(body=rr.Terminal(text="a"), separator=rr.Empty())

        assert rr.child_nodes(repeat) == [rr.Terminal(text="a"), rr.Empty()]
        assert rr.child_nodes(rr.Terminal(text="a")) == []

    def test_iter_nodes_is_pre_order(self):
        kinds = [node.kind for node in rr.iter_nodes(sample_tree())]

        assert kinds == [
            "sequence",
            "simple_start",
            "choice",
            "terminal",
            "optional",
            "non_terminal",
            "repeat",
            "comment",
            "empty",
            "labeled_box",
            "stack",
            "terminal",
            "comment",
            "simple_end",
        ]

    def test_iter_nodes_handles_deep_trees(self):
        node: rr.DiagramElement = rr.Terminal(text="a")
        for _ in range(1500):
            node = rr.Optional(inner=node)

        nodes = list(rr.iter_nodes(node))

        assert len(nodes) == 1501
        assert nodes[-1] == rr.Terminal(text="a")
