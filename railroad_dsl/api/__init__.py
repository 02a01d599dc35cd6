"""
FastAPI REST Endpoints
======================

REST API endpoints for HTTP access to the railroad DSL compiler.

Endpoints:
- POST /render: Compile DSL source to SVG or text
- POST /validate: Check DSL source and report diagnostics
- GET /health: Health check endpoint
"""
