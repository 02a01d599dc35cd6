"""
Test Suite
==========

Tests for the railroad DSL compiler.

Structure:
- unit/: Component tests for literals, builder, assembler, compiler, renderer
- integration/: HTTP API contract tests
- utils/: Shared assertion helpers
- data/: Sample DSL sources
"""
