"""
Test Helpers
============

Helpers for tests that depend on the installed layout engine.
"""

import pytest

from railroad_dsl.core.rendering.railroad_renderer import TEXT_OUTPUT_SUPPORTED


requires_text_output = pytest.mark.skipif(
    not TEXT_OUTPUT_SUPPORTED,
    reason="installed railroad-diagrams release has no text renderer",
)


def disable_text_output(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make the renderer behave as if the layout engine had no text support."""
    monkeypatch.setattr(
        "railroad_dsl.core.rendering.railroad_renderer.TEXT_OUTPUT_SUPPORTED", False
    )
