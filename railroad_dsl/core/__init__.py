"""
Core Business Logic
==================

Core modules for compiling railroad DSL source into diagrams.

Modules:
- dsl: grammar, literal decoding, tree building, and compilation
- rendering: railroad-diagrams layout adapter and serialization
- boundary: bytes-in/bytes-out adapter for external callers
"""
