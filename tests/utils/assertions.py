"""
Test Assertions
===============

Custom assertion helpers for testing railroad DSL compilation.
"""

from typing import Optional, Union

from railroad_dsl.models import diagram as rr
from railroad_dsl.models.schemas import CompiledDiagram, FailureKind, ParseFailure


def assert_compiled(result: Union[CompiledDiagram, ParseFailure]) -> CompiledDiagram:
    """Assert that a compile result succeeded and has a measured size."""
    assert isinstance(result, CompiledDiagram), f"Expected a compiled diagram, got {result!r}"
    assert result.width > 0
    assert result.height > 0
    return result


def assert_parse_failure(
    result: Union[CompiledDiagram, ParseFailure],
    kind: Optional[FailureKind] = None,
    line: Optional[int] = None,
    column: Optional[int] = None,
) -> ParseFailure:
    """Assert that a compile result is a parse failure with the given position."""
    assert isinstance(result, ParseFailure), f"Expected a parse failure, got {result!r}"
    assert result.message
    assert result.line >= 1
    assert result.column >= 1
    assert result.expected == sorted(result.expected)

    if kind is not None:
        assert result.kind == kind
    if line is not None:
        assert result.line == line
    if column is not None:
        assert result.column == column
    return result


def assert_framed(node: rr.DiagramElement) -> rr.DiagramElement:
    """Assert that a node is wrapped in start and end markers and return the inner node."""
    assert isinstance(node, rr.Sequence)
    assert len(node.children) == 3
    assert isinstance(node.children[0], rr.SimpleStart)
    assert isinstance(node.children[2], rr.SimpleEnd)
    return node.children[1]


def assert_valid_svg(svg: str, css: Optional[str] = None) -> None:
    """Assert that output is a standalone SVG document."""
    assert svg.startswith("<svg")
    assert svg.rstrip().endswith("</svg>")
    assert 'xmlns="http://www.w3.org/2000/svg"' in svg
    assert "<style>" in svg
    if css is not None:
        assert css in svg
