"""
Bytes Boundary
==============

Byte-oriented adapter for callers outside Python (embedders, FFI shims).
Inputs are NUL-terminated UTF-8 buffers; the output is the SVG document as
UTF-8 bytes. The returned object is owned by the Python runtime and needs no
explicit release.
"""

from typing import Optional

from railroad_dsl.config.logging import get_logger
from railroad_dsl.core.dsl.compiler import compile_diagram
from railroad_dsl.models.schemas import ParseFailure

logger = get_logger(__name__)


class BoundaryError(Exception):
    """Exception raised when the byte-level call cannot produce an SVG."""

    def __init__(self, message: str, failure: Optional[ParseFailure] = None) -> None:
        super().__init__(message)
        self.failure = failure


def _read_string(buffer: bytes, name: str) -> str:
    # Only the bytes before the first NUL belong to the string
    raw = buffer.split(b"\x00", 1)[0]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BoundaryError(f"{name} is not valid UTF-8: {e}") from e


def dsl_to_svg(source: bytes, css: bytes) -> bytes:
    """
    Compile DSL source and return the SVG document.

    Args:
        source: NUL-terminated UTF-8 DSL source
        css: NUL-terminated UTF-8 stylesheet

    Returns:
        UTF-8 encoded SVG document

    Raises:
        BoundaryError: If an input is not UTF-8, the source does not compile,
            or the document cannot be returned as a NUL-terminated string
    """
    result = compile_diagram(_read_string(source, "source"), _read_string(css, "css"))
    if isinstance(result, ParseFailure):
        logger.info("Boundary compile failed", line=result.line, column=result.column)
        raise BoundaryError(
            f"Invalid diagram source at line {result.line}, column {result.column}",
            failure=result,
        )

    svg = result.to_svg().encode("utf-8")
    if b"\x00" in svg:
        raise BoundaryError("Rendered SVG contains a NUL byte")
    return svg
