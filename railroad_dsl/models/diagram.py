"""
Diagram Node Models
===================

Abstract railroad diagram tree produced by the DSL compiler. The variant set is
closed: every node is one of the models below, discriminated by ``kind``.
Nodes are immutable and compare by value.
"""

from typing import Annotated, Iterator, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class DiagramElement(BaseModel):
    """Base class for all diagram nodes."""

    model_config = ConfigDict(frozen=True)


# Leaves
class Terminal(DiagramElement):
    """Fixed token or keyword."""
    kind: Literal["terminal"] = "terminal"
    text: str = Field(..., description="Decoded terminal text")


class NonTerminal(DiagramElement):
    """Reference to another named rule."""
    kind: Literal["non_terminal"] = "non_terminal"
    text: str = Field(..., description="Decoded rule name")


class Comment(DiagramElement):
    """Free-form annotation drawn on the rail."""
    kind: Literal["comment"] = "comment"
    text: str = Field(..., description="Decoded comment text")


class Empty(DiagramElement):
    """Zero-width placeholder."""
    kind: Literal["empty"] = "empty"


class SimpleStart(DiagramElement):
    kind: Literal["simple_start"] = "simple_start"


class SimpleEnd(DiagramElement):
    kind: Literal["simple_end"] = "simple_end"


# Composites
class Sequence(DiagramElement):
    """Children drawn left to right."""
    kind: Literal["sequence"] = "sequence"
    children: List["DiagramNode"] = Field(..., min_length=1)


class Stack(DiagramElement):
    """Children drawn as stacked rows joined by a single rail."""
    kind: Literal["stack"] = "stack"
    children: List["DiagramNode"] = Field(..., min_length=1)


class Choice(DiagramElement):
    """Mutually exclusive branches."""
    kind: Literal["choice"] = "choice"
    children: List["DiagramNode"] = Field(..., min_length=1)


class Optional(DiagramElement):
    """Path that may be skipped."""
    kind: Literal["optional"] = "optional"
    inner: "DiagramNode"


class Repeat(DiagramElement):
    """Body taken one or more times, separator drawn on the loop-back edge."""
    kind: Literal["repeat"] = "repeat"
    body: "DiagramNode"
    separator: "DiagramNode"


class LabeledBox(DiagramElement):
    """Inner path wrapped in a bordered box annotated with a label."""
    kind: Literal["labeled_box"] = "labeled_box"
    inner: "DiagramNode"
    label: "DiagramNode"


class VerticalGrid(DiagramElement):
    """Independent diagrams stacked top to bottom."""
    kind: Literal["vertical_grid"] = "vertical_grid"
    children: List["DiagramNode"] = Field(..., min_length=1)


DiagramNode = Annotated[
    Union[
        Terminal,
        NonTerminal,
        Comment,
        Empty,
        SimpleStart,
        SimpleEnd,
        Sequence,
        Stack,
        Choice,
        Optional,
        Repeat,
        LabeledBox,
        VerticalGrid,
    ],
    Field(discriminator="kind"),
]

# Resolve the recursive references now that the union exists
for _model in (Sequence, Stack, Choice, Optional, Repeat, LabeledBox, VerticalGrid):
    _model.model_rebuild()

DiagramNodeAdapter: TypeAdapter[DiagramNode] = TypeAdapter(DiagramNode)


def child_nodes(node: DiagramElement) -> List[DiagramElement]:
    """Return the direct children of a node in drawing order."""
    if isinstance(node, (Sequence, Stack, Choice, VerticalGrid)):
        return list(node.children)
    if isinstance(node, Optional):
        return [node.inner]
    if isinstance(node, Repeat):
        return [node.body, node.separator]
    if isinstance(node, LabeledBox):
        return [node.inner, node.label]
    return []


def iter_nodes(node: DiagramElement) -> Iterator[DiagramElement]:
    """Walk a tree in pre-order without recursing."""
    pending = [node]
    while pending:
        current = pending.pop()
        yield current
        pending.extend(reversed(child_nodes(current)))
