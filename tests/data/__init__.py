"""
Test Data Package
================

Sample DSL sources for compiler and API tests.
"""

from .sample_diagrams import (
    VALID_SOURCES,
    INVALID_SOURCES,
)
