"""
Rendering Module
===============

Layout and serialization of compiled diagrams.

Components:
- railroad_renderer: railroad-diagrams adapter producing SVG and text output
"""
