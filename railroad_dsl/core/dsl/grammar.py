"""
Grammar Loader
==============

Loads the railroad DSL grammar and exposes a shared LALR parser.
"""

from pathlib import Path
from typing import Dict, Optional

import lark

from railroad_dsl.config.logging import get_logger

logger = get_logger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"
START_RULE = "input"

# LALR parsers keep no per-parse state, so one instance per start rule is reused
_parsers: Dict[str, lark.Lark] = {}


def get_parser(start: str = START_RULE) -> lark.Lark:
    """
    Return the cached parser for a start rule, building it on first use.

    Args:
        start: Grammar rule to start matching from

    Returns:
        Configured lark parser
    """
    parser: Optional[lark.Lark] = _parsers.get(start)
    if parser is None:
        parser = lark.Lark(
            GRAMMAR_PATH.read_text(encoding="utf-8"),
            parser="lalr",
            start=start,
            propagate_positions=True,
            maybe_placeholders=False,
        )
        _parsers[start] = parser
        logger.debug("Grammar loaded", path=str(GRAMMAR_PATH), start=start)
    return parser


def grammar_loaded() -> bool:
    """Check whether the default parser has been built."""
    return START_RULE in _parsers


def parse_source(source: str) -> lark.Tree:
    """
    Match source text against the grammar.

    Raises:
        lark.exceptions.UnexpectedInput: If the text does not match
    """
    return get_parser().parse(source)
