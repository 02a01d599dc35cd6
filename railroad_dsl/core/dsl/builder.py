"""
Node Builder
============

Converts the concrete tree produced by the grammar into abstract diagram
nodes. Each grammar rule maps to exactly one node constructor; the three
binary forms (optional, repeat, labeled box) collapse to their primary operand
when the operator is absent.
"""

from typing import Any, Callable, Dict, List, Tuple

from lark import Token, Tree

from railroad_dsl.config.logging import get_logger
from railroad_dsl.core.dsl.literals import decode_literal
from railroad_dsl.models import diagram as rr

logger = get_logger(__name__)
_log: Any = logger.bind(component="builder")  # structlog.BoundLoggerBase


class DiagramBuildError(Exception):
    """Exception raised when a concrete tree does not have the expected shape."""

    pass


def nesting_depth(tree: Tree) -> Tuple[int, Tree]:
    """
    Measure how deeply rule nodes nest in a concrete tree.

    The walk uses an explicit stack, so it is safe on any tree the parser
    produces.

    Args:
        tree: Concrete grammar tree

    Returns:
        Tuple of (depth, deepest rule node); a lone rule node has depth 1
    """
    deepest, deepest_tree = 0, tree
    pending: List[Tuple[Tree, int]] = [(tree, 1)]
    while pending:
        node, depth = pending.pop()
        if depth > deepest:
            deepest, deepest_tree = depth, node
        pending.extend((child, depth + 1) for child in node.children if isinstance(child, Tree))
    return deepest, deepest_tree


def _literal(tree: Tree) -> str:
    if not tree.children or not isinstance(tree.children[0], Token):
        raise DiagramBuildError(f"Rule '{tree.data}' has no literal token")
    return decode_literal(tree.children[0])


def _subtrees(tree: Tree) -> List[Tree]:
    return [child for child in tree.children if isinstance(child, Tree)]


def _primary(tree: Tree) -> rr.DiagramElement:
    if not tree.children or not isinstance(tree.children[0], Tree):
        raise DiagramBuildError(f"Rule '{tree.data}' is missing its primary operand")
    return make_node(tree.children[0])


def build_optional(tree: Tree) -> rr.DiagramElement:
    """
    Build a node for ``opt_expr``.

    The second child is only a marker; it is neither converted nor kept.

    Args:
        tree: Concrete ``opt_expr`` node

    Returns:
        The primary alone, or ``Optional`` wrapping it
    """
    primary = _primary(tree)
    if len(tree.children) < 2:
        return primary
    return rr.Optional(inner=primary)


def build_repeat(tree: Tree) -> rr.DiagramElement:
    """
    Build a node for ``rpt_expr``.

    Args:
        tree: Concrete ``rpt_expr`` node

    Returns:
        The primary alone, or ``Repeat`` with the second child as separator
    """
    primary = _primary(tree)
    if len(tree.children) < 2:
        return primary
    return rr.Repeat(body=primary, separator=make_node(tree.children[1]))


def build_labeled_box(tree: Tree) -> rr.DiagramElement:
    """
    Build a node for ``lbox_expr``.

    Args:
        tree: Concrete ``lbox_expr`` node

    Returns:
        The primary alone, or ``LabeledBox`` with the second child as label
    """
    primary = _primary(tree)
    if len(tree.children) < 2:
        return primary
    return rr.LabeledBox(inner=primary, label=make_node(tree.children[1]))


_BUILDERS: Dict[str, Callable[[Tree], rr.DiagramElement]] = {
    "term": lambda tree: rr.Terminal(text=_literal(tree)),
    "nonterm": lambda tree: rr.NonTerminal(text=_literal(tree)),
    "comment": lambda tree: rr.Comment(text=_literal(tree)),
    "empty_lit": lambda tree: rr.Empty(),
    "empty": lambda tree: rr.Empty(),
    "sequence": lambda tree: rr.Sequence(children=[make_node(c) for c in _subtrees(tree)]),
    "stack": lambda tree: rr.Stack(children=[make_node(c) for c in _subtrees(tree)]),
    "choice": lambda tree: rr.Choice(children=[make_node(c) for c in _subtrees(tree)]),
    "opt_expr": build_optional,
    "rpt_expr": build_repeat,
    "lbox_expr": build_labeled_box,
}


def make_node(tree: Any) -> rr.DiagramElement:
    """
    Convert one concrete rule node into an abstract diagram node.

    Children keep their source order.

    Args:
        tree: Concrete grammar node

    Returns:
        Abstract diagram node

    Raises:
        DiagramBuildError: If the node is not a rule the grammar produces
        LiteralDecodeError: If a literal holds an unterminated escape
    """
    if not isinstance(tree, Tree):
        raise DiagramBuildError(f"Expected a rule node, got token {tree!r}")

    builder = _BUILDERS.get(str(tree.data))
    if builder is None:
        _log.error("Unknown rule kind", rule=str(tree.data))
        raise DiagramBuildError(f"Unknown rule kind: {tree.data}")
    return builder(tree)
