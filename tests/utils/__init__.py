"""
Test Utilities
==============

Shared helpers for DSL compiler tests.
"""

from .assertions import *
from .helpers import *
