"""
Data Models
===========

Pydantic data models for diagram trees, compile results, and the HTTP API.

Models:
- diagram: abstract railroad diagram nodes
- schemas: compile results and API request and response schemas
"""
