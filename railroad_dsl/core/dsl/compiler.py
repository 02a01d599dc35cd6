"""
DSL Compiler
============

Entry point that turns railroad DSL source into a measured diagram. Source
text that does not match the grammar is reported as a ``ParseFailure`` value;
exceptions are reserved for defects in the compiler itself.
"""

import time
from typing import Any, Optional, Union

from lark import Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from railroad_dsl.config.logging import get_logger
from railroad_dsl.config.settings import get_settings
from railroad_dsl.core.dsl.assembler import assemble_diagram, assemble_root, start_to_end
from railroad_dsl.core.dsl.builder import DiagramBuildError, make_node, nesting_depth
from railroad_dsl.core.dsl.grammar import parse_source
from railroad_dsl.core.dsl.literals import LiteralDecodeError
from railroad_dsl.core.rendering.railroad_renderer import DEFAULT_CSS
from railroad_dsl.models import diagram as rr
from railroad_dsl.models.schemas import CompiledDiagram, FailureKind, ParseFailure

logger = get_logger(__name__)

CompileResult = Union[CompiledDiagram, ParseFailure]


def _failure_kind(exc: UnexpectedInput) -> FailureKind:
    if isinstance(exc, UnexpectedCharacters):
        return FailureKind.UNEXPECTED_CHARACTERS
    if isinstance(exc, UnexpectedEOF):
        return FailureKind.UNEXPECTED_EOF
    return FailureKind.UNEXPECTED_TOKEN


def _position(value: Any, default: int) -> int:
    # lark reports "?" when a position is unknown
    return value if isinstance(value, int) and value > 0 else default


def parse_failure_from_lark(exc: UnexpectedInput, source: str) -> ParseFailure:
    """
    Convert a grammar engine diagnostic into a ``ParseFailure``.

    Args:
        exc: Diagnostic raised by lark
        source: Text that was being matched

    Returns:
        Failure value carrying the diagnostic's position and expectations
    """
    expected = getattr(exc, "expected", None) or getattr(exc, "allowed", None) or ()
    token: Optional[str] = None
    if isinstance(exc, UnexpectedToken):
        token = str(exc.token)
    elif isinstance(exc, UnexpectedCharacters):
        token = exc.char

    return ParseFailure(
        kind=_failure_kind(exc),
        message=str(exc),
        line=_position(exc.line, 1),
        column=_position(exc.column, 1),
        position=_position(exc.pos_in_stream, 0),
        expected=sorted(str(name) for name in expected),
        token=token,
        context=exc.get_context(source) if source else "",
    )


def parse_failure_from_literal(exc: LiteralDecodeError) -> ParseFailure:
    """Convert a literal decoding error into a ``ParseFailure``."""
    return ParseFailure(
        kind=FailureKind.MALFORMED_LITERAL,
        message=str(exc),
        line=exc.line or 1,
        column=exc.column or 1,
    )


def parse_failure_from_depth(depth: int, deepest: Tree, limit: int) -> ParseFailure:
    """Report source whose expressions nest deeper than ``limit`` allows."""
    return ParseFailure(
        kind=FailureKind.NESTING_TOO_DEEP,
        message=f"Expression nesting depth {depth} exceeds the limit of {limit}",
        line=getattr(deepest.meta, "line", 1),
        column=getattr(deepest.meta, "column", 1),
        position=getattr(deepest.meta, "start_pos", 0),
    )


def build_tree(parsed: Tree) -> rr.DiagramElement:
    """
    Build the abstract root node from a matched ``input`` tree.

    Raises:
        DiagramBuildError: If the matched tree does not have the grammar's shape
    """
    if not parsed.children or not isinstance(parsed.children[0], Tree):
        raise DiagramBuildError("Matched input has no root expression")
    root_expr = parsed.children[0]
    diagrams = [start_to_end(make_node(expr)) for expr in root_expr.children if isinstance(expr, Tree)]
    return assemble_root(diagrams)


def compile_diagram(source: str, css: Optional[str] = None) -> CompileResult:
    """
    Compile DSL source into a measured diagram.

    Args:
        source: DSL source text
        css: Stylesheet embedded verbatim; the renderer's default when omitted

    Returns:
        ``CompiledDiagram`` on success, ``ParseFailure`` when the source is invalid

    Raises:
        DiagramBuildError: If the matched tree cannot be converted
    """
    start_time = time.time()
    settings = get_settings()
    if css is None:
        css = settings.default_css if settings.default_css is not None else DEFAULT_CSS

    logger.debug("Compiling diagram", source_length=len(source), css_length=len(css))

    try:
        parsed = parse_source(source)
    except UnexpectedInput as e:
        failure = parse_failure_from_lark(e, source)
        logger.debug(
            "Diagram source rejected",
            kind=failure.kind.value,
            line=failure.line,
            column=failure.column,
        )
        return failure

    # Building and layout recurse once per level, so depth is bounded up front
    depth, deepest = nesting_depth(parsed)
    if depth > settings.max_nesting_depth:
        failure = parse_failure_from_depth(depth, deepest, settings.max_nesting_depth)
        logger.debug("Diagram source nested too deeply", depth=depth, limit=settings.max_nesting_depth)
        return failure

    try:
        root = build_tree(parsed)
    except LiteralDecodeError as e:
        failure = parse_failure_from_literal(e)
        logger.debug("Malformed literal", line=failure.line, column=failure.column)
        return failure

    canvas, width, height = assemble_diagram(root, css, padding=settings.diagram_padding)
    processing_time = time.time() - start_time

    logger.debug(
        "Diagram compiled",
        root_kind=root.kind,
        node_count=sum(1 for _ in rr.iter_nodes(root)),
        width=width,
        height=height,
        processing_time=processing_time,
    )
    return CompiledDiagram(root=root, css=css, canvas=canvas, width=width, height=height)
