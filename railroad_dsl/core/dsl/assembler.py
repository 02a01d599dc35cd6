"""
Diagram Assembler
=================

Frames each top-level expression with start and end markers, combines several
diagrams into a vertical grid, and hands the result to the renderer for
measurement.
"""

from typing import Sequence, Tuple

from railroad_dsl.config.logging import get_logger
from railroad_dsl.core.dsl.builder import DiagramBuildError
from railroad_dsl.core.rendering.railroad_renderer import DiagramCanvas, build_canvas, measure
from railroad_dsl.models import diagram as rr

logger = get_logger(__name__)


def start_to_end(node: rr.DiagramElement) -> rr.Sequence:
    """Frame a node between a simple start and a simple end marker."""
    return rr.Sequence(children=[rr.SimpleStart(), node, rr.SimpleEnd()])


def assemble_root(trees: Sequence[rr.DiagramElement]) -> rr.DiagramElement:
    """
    Choose the root node for one or more framed diagrams.

    Args:
        trees: Framed diagrams in source order

    Returns:
        The only diagram, or a ``VerticalGrid`` holding all of them

    Raises:
        DiagramBuildError: If no diagrams are given
    """
    if not trees:
        raise DiagramBuildError("At least one diagram is required")
    if len(trees) == 1:
        return trees[0]
    return rr.VerticalGrid(children=list(trees))


def assemble_diagram(
    root: rr.DiagramElement, css: str, padding: float = 20
) -> Tuple[DiagramCanvas, float, float]:
    """
    Build the rendered container for a root node and measure it.

    Args:
        root: Abstract root node
        css: Stylesheet embedded verbatim in the output
        padding: Canvas padding in pixels

    Returns:
        Tuple of (canvas, width, height)
    """
    canvas = build_canvas(root, css, padding=padding)
    width, height = measure(canvas)
    logger.debug("Diagram assembled", root_kind=root.kind, width=width, height=height)
    return canvas, width, height
