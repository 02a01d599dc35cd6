"""
Pydantic Models and Schemas
===========================

Compile results, parse diagnostics, and API request/response models.
"""

from typing import Optional, List, Dict, Any, Literal
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from railroad_dsl.config.settings import get_settings
from railroad_dsl.core.rendering.railroad_renderer import DiagramCanvas, render_svg, render_text
from railroad_dsl.models.diagram import DiagramNode, VerticalGrid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Enums
class FailureKind(str, Enum):
    """Category of a source text that failed to compile."""
    UNEXPECTED_TOKEN = "unexpected_token"
    UNEXPECTED_CHARACTERS = "unexpected_characters"
    UNEXPECTED_EOF = "unexpected_eof"
    MALFORMED_LITERAL = "malformed_literal"
    NESTING_TOO_DEEP = "nesting_too_deep"


class OutputFormat(str, Enum):
    """Serialization of a compiled diagram."""
    SVG = "svg"
    TEXT = "text"


# Compile Results
class ParseFailure(BaseModel):
    """Diagnostic for source text that does not match the grammar."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind = Field(..., description="Failure category")
    message: str = Field(..., description="Diagnostic message from the grammar engine")
    line: int = Field(..., ge=1, description="1-based line of the failure")
    column: int = Field(..., ge=1, description="1-based column of the failure")
    position: int = Field(0, ge=0, description="Offset of the failure in the source")
    expected: List[str] = Field(default_factory=list, description="Terminals that would have been accepted")
    token: Optional[str] = Field(None, description="Offending token text")
    context: str = Field("", description="Source excerpt pointing at the failure")


class CompiledDiagram(BaseModel):
    """
    Successfully compiled diagram.

    Width and height are measured once at compile time. The canvas is the
    formatted renderer container; it is kept for serialization and left out of
    model dumps.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    root: DiagramNode = Field(..., description="Abstract root node")
    css: str = Field(..., description="Stylesheet embedded in the output")
    canvas: DiagramCanvas = Field(..., exclude=True, repr=False, description="Rendered container")
    width: float = Field(..., ge=0, description="Outer width in pixels")
    height: float = Field(..., ge=0, description="Outer height in pixels")

    @property
    def diagram_count(self) -> int:
        """Number of independent diagrams in the source."""
        if isinstance(self.root, VerticalGrid):
            return len(self.root.children)
        return 1

    def to_svg(self) -> str:
        """Serialize as a standalone SVG document."""
        return render_svg(self.canvas)

    def to_text(self) -> str:
        """Serialize as a box-drawing text diagram."""
        return render_text(self.canvas)


# Rendering Models
class RenderOptions(BaseModel):
    """Options for rendering DSL source."""
    output_format: OutputFormat = Field(OutputFormat.SVG, description="Output serialization")
    include_tree: bool = Field(False, description="Include the abstract tree in the response")


class DSLRenderRequest(BaseModel):
    """Request model for DSL rendering."""
    dsl_content: str = Field(..., min_length=1, description="DSL source to render")
    css: Optional[str] = Field(None, description="Stylesheet override")
    options: RenderOptions = Field(default_factory=RenderOptions, description="Render options")

    @field_validator("dsl_content")
    @classmethod
    def validate_dsl_content(cls, v: str) -> str:
        """Validate DSL content is not empty and within the size limit."""
        if not v.strip():
            raise ValueError("DSL content cannot be empty")
        limit = get_settings().max_source_length
        if len(v) > limit:
            raise ValueError(f"DSL content exceeds {limit} characters")
        return v


class DSLValidationRequest(BaseModel):
    """Request model for DSL validation."""
    dsl_content: str = Field(..., min_length=1, description="DSL source to validate")

    @field_validator("dsl_content")
    @classmethod
    def validate_length(cls, v: str) -> str:
        limit = get_settings().max_source_length
        if len(v) > limit:
            raise ValueError(f"DSL content exceeds {limit} characters")
        return v


class DSLValidationResponse(BaseModel):
    """Response model for DSL validation."""
    valid: bool = Field(..., description="Whether the source compiles")
    diagnostic: Optional[ParseFailure] = Field(None, description="Failure details if invalid")
    diagram_count: int = Field(0, ge=0, description="Number of diagrams in the source")


class RenderResponse(BaseModel):
    """Response model for synchronous rendering."""
    success: bool = Field(..., description="Whether rendering succeeded")
    output: Optional[str] = Field(None, description="Rendered SVG or text")
    output_format: OutputFormat = Field(OutputFormat.SVG, description="Serialization of the output")
    width: Optional[float] = Field(None, description="Diagram width in pixels")
    height: Optional[float] = Field(None, description="Diagram height in pixels")
    tree: Optional[DiagramNode] = Field(None, description="Abstract tree if requested")
    diagnostic: Optional[ParseFailure] = Field(None, description="Failure details if invalid")
    processing_time: float = Field(..., description="Total processing time in seconds")


# System Models
class HealthStatus(BaseModel):
    """Health check status."""
    status: Literal["healthy", "unhealthy", "degraded"] = Field(..., description="Overall status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")
    grammar_loaded: bool = Field(..., description="Whether the grammar parser is built")
    environment: str = Field(..., description="Deployment environment")


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
