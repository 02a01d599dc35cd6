"""
DSL Processing Module
====================

Railroad DSL grammar and the compiler from source text to diagram trees.

Components:
- grammar: lark grammar loading and the shared LALR parser
- literals: quoted literal decoding
- builder: concrete tree to abstract node conversion
- assembler: start/end framing and multi-diagram composition
- compiler: compile entry point
"""
