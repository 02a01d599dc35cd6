"""
Unit Tests for the Diagram Assembler
====================================
"""

import pytest

from railroad_dsl.core.dsl.assembler import assemble_diagram, assemble_root, start_to_end
from railroad_dsl.core.dsl.builder import DiagramBuildError
from railroad_dsl.core.rendering.railroad_renderer import DiagramCanvas, render_svg
from railroad_dsl.models import diagram as rr

from tests.utils.assertions import assert_framed


@pytest.mark.unit
class TestStartToEnd:
    """Test framing with start and end markers."""

    def test_frames_node(self):
        node = rr.Terminal(text="a")

        framed = start_to_end(node)

        assert framed == rr.Sequence(children=[rr.SimpleStart(), node, rr.SimpleEnd()])
        assert assert_framed(framed) == node

    def test_frames_composite(self):
        node = rr.Choice(children=[rr.Terminal(text="a"), rr.Empty()])

        assert assert_framed(start_to_end(node)) == node


@pytest.mark.unit
class TestAssembleRoot:
    """Test choosing the root for one or more diagrams."""

    def test_single_diagram_is_root(self):
        framed = start_to_end(rr.Terminal(text="a"))

        assert assemble_root([framed]) is framed

    def test_several_diagrams_form_grid_in_order(self):
        first = start_to_end(rr.Terminal(text="a"))
        second = start_to_end(rr.NonTerminal(text="b"))

        root = assemble_root([first, second])

        assert root == rr.VerticalGrid(children=[first, second])

    def test_no_diagrams_raises(self):
        with pytest.raises(DiagramBuildError):
            assemble_root([])


@pytest.mark.unit
class TestAssembleDiagram:
    """Test building and measuring the rendered container."""

    def test_returns_canvas_and_size(self):
        canvas, width, height = assemble_diagram(start_to_end(rr.Terminal(text="a")), "")

        assert isinstance(canvas, DiagramCanvas)
        assert width > 0
        assert height > 0

    def test_css_is_embedded_verbatim(self):
        css = "path { stroke: #123456; } /* <marker> */"

        canvas, _, _ = assemble_diagram(start_to_end(rr.Terminal(text="a")), css)

        assert css in render_svg(canvas)

    def test_padding_widens_canvas(self):
        root = start_to_end(rr.Terminal(text="a"))

        _, narrow, narrow_height = assemble_diagram(root, "", padding=0)
        _, wide, wide_height = assemble_diagram(root, "", padding=15)

        assert wide == narrow + 30
        assert wide_height == narrow_height + 30

    def test_grid_is_taller_than_each_row(self):
        row = start_to_end(rr.Terminal(text="a"))

        _, _, single = assemble_diagram(row, "")
        _, _, double = assemble_diagram(rr.VerticalGrid(children=[row, row]), "")

        assert double > single
