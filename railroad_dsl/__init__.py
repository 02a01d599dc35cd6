"""
Railroad DSL Compiler
=====================

Compiles a small textual language describing syntax (railroad) diagrams into
an abstract diagram tree and renders it as SVG or text.

This package provides:
- A lark grammar and compiler for the railroad DSL
- A railroad-diagrams adapter for layout and serialization
- FastAPI REST endpoints for HTTP access
- A bytes-level adapter for embedding callers
"""

__version__ = "1.0.0"
__author__ = "Railroad DSL Team"
