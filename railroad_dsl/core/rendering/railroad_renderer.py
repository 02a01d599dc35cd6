"""
Railroad Renderer
=================

Adapter between the abstract diagram tree and the railroad-diagrams layout
engine. Converts nodes into measured railroad items, wraps them in an SVG
canvas carrying a stylesheet, and serializes the result as SVG or text.
"""

from io import StringIO
from typing import Any, Callable, Dict, Tuple, Type

import railroad

from railroad_dsl.config.logging import get_logger
from railroad_dsl.models import diagram as rr

logger = get_logger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

# Vertical space between independent diagrams in a grid
ROW_GAP = railroad.AR * 2

DEFAULT_CSS = railroad.DEFAULT_STYLE

# Box-drawing output arrived in railroad-diagrams after the 3.0 releases
TEXT_OUTPUT_SUPPORTED = hasattr(railroad, "TextDiagram")


class RenderingError(Exception):
    """Exception raised when a tree cannot be handed to the layout engine."""

    pass


class TextOutputUnavailable(RenderingError):
    """Exception raised when the installed layout engine cannot draw text diagrams."""

    pass


class VerticalGrid(railroad.DiagramMultiContainer):
    """Independent rows stacked top to bottom, each aligned to the left edge."""

    def __init__(self, *items: railroad.DiagramItem) -> None:
        railroad.DiagramMultiContainer.__init__(self, "g", items)
        self.needsSpace = False
        self.width = max(item.width + (20 if item.needsSpace else 0) for item in self.items)
        self.up = self.items[0].up
        self.down = self.items[-1].down
        self.height = 0
        for upper, lower in zip(self.items, self.items[1:]):
            self.height += upper.height + upper.down + ROW_GAP + lower.up
        self.height += self.items[-1].height

    def __repr__(self) -> str:
        items = ", ".join(repr(item) for item in self.items)
        return f"VerticalGrid({items})"

    def format(self, x: float, y: float, width: float) -> "VerticalGrid":
        last = len(self.items) - 1
        for i, item in enumerate(self.items):
            rowX = x
            if item.needsSpace:
                railroad.Path(rowX, y).h(10).addTo(self)
                rowX += 10
            item.format(rowX, y, item.width).addTo(self)
            if item.needsSpace:
                railroad.Path(rowX + item.width, y + item.height).h(10).addTo(self)
            if i < last:
                y += item.height + item.down + ROW_GAP + self.items[i + 1].up
        return self

    def textDiagram(self) -> "railroad.TextDiagram":
        diagramTD = self.items[0].textDiagram()
        for item in self.items[1:]:
            diagramTD = diagramTD.appendBelow(item.textDiagram(), [""], moveExit=True)
        return diagramTD


class DiagramCanvas(railroad.Diagram):
    """
    Root SVG container around a single item.

    Unlike ``railroad.Diagram`` it does not insert its own start and end
    markers; the compiler places them explicitly.
    """

    def __init__(self, root: railroad.DiagramItem, padding: float = 20) -> None:
        railroad.DiagramMultiContainer.__init__(
            self,
            "svg",
            [root],
            {
                "class": railroad.DIAGRAM_CLASS,
                "xmlns": SVG_NAMESPACE,
                "xmlns:xlink": XLINK_NAMESPACE,
            },
        )
        self.type = "simple"
        self.padding = padding
        self.up = root.up
        self.height = root.height
        self.down = root.down
        self.width = root.width + (20 if root.needsSpace else 0)
        self.formatted = False

    def __repr__(self) -> str:
        return f"DiagramCanvas({self.items[0]!r})"

    def format(
        self,
        paddingTop: Any = None,
        paddingRight: Any = None,
        paddingBottom: Any = None,
        paddingLeft: Any = None,
    ) -> "DiagramCanvas":
        # Formatting appends the drawn group; doing it twice would duplicate it
        if self.formatted:
            return self
        if paddingTop is None:
            paddingTop = self.padding
        railroad.Diagram.format(self, paddingTop, paddingRight, paddingBottom, paddingLeft)
        return self


def _children(node: Any) -> list[railroad.DiagramItem]:
    return [to_railroad(child) for child in node.children]


_CONVERTERS: Dict[Type[rr.DiagramElement], Callable[[Any], railroad.DiagramItem]] = {
    rr.Terminal: lambda node: railroad.Terminal(node.text),
    rr.NonTerminal: lambda node: railroad.NonTerminal(node.text),
    rr.Comment: lambda node: railroad.Comment(node.text),
    rr.Empty: lambda node: railroad.Skip(),
    rr.SimpleStart: lambda node: railroad.Start("simple"),
    rr.SimpleEnd: lambda node: railroad.End("simple"),
    rr.Sequence: lambda node: railroad.Sequence(*_children(node)),
    rr.Stack: lambda node: railroad.Stack(*_children(node)),
    rr.Choice: lambda node: railroad.Choice(0, *_children(node)),
    rr.Optional: lambda node: railroad.Optional(to_railroad(node.inner)),
    rr.Repeat: lambda node: railroad.OneOrMore(to_railroad(node.body), to_railroad(node.separator)),
    rr.LabeledBox: lambda node: railroad.Group(to_railroad(node.inner), to_railroad(node.label)),
    rr.VerticalGrid: lambda node: VerticalGrid(*_children(node)),
}


def to_railroad(node: rr.DiagramElement) -> railroad.DiagramItem:
    """
    Convert an abstract node into a measured railroad item.

    Args:
        node: Abstract diagram node

    Returns:
        railroad item with its width and heights computed

    Raises:
        RenderingError: If the node type has no railroad counterpart
    """
    converter = _CONVERTERS.get(type(node))
    if converter is None:
        raise RenderingError(f"No railroad item for node type {type(node).__name__}")
    return converter(node)


def build_canvas(root: rr.DiagramElement, css: str, padding: float = 20) -> DiagramCanvas:
    """
    Build the SVG container for a root node and attach a stylesheet.

    The stylesheet is inserted verbatim; it is trusted markup.
    """
    canvas = DiagramCanvas(to_railroad(root), padding=padding)
    railroad.Style(css).addTo(canvas)
    logger.debug("Canvas built", root_kind=root.kind, css_length=len(css), padding=padding)
    return canvas


def measure(canvas: DiagramCanvas) -> Tuple[float, float]:
    """Lay out the canvas and return its outer width and height in pixels."""
    canvas.format()
    return float(canvas.attrs["width"]), float(canvas.attrs["height"])


def render_svg(canvas: DiagramCanvas) -> str:
    """Serialize a canvas as a standalone SVG document."""
    buffer = StringIO()
    canvas.writeSvg(buffer.write)
    return buffer.getvalue()


def render_text(canvas: DiagramCanvas) -> str:
    """
    Serialize a canvas as a box-drawing text diagram.

    Raises:
        TextOutputUnavailable: If the installed railroad-diagrams release has no
            text renderer
    """
    if not TEXT_OUTPUT_SUPPORTED:
        raise TextOutputUnavailable("The installed railroad-diagrams release cannot render text diagrams")
    return "\n".join(canvas.textDiagram().lines) + "\n"
