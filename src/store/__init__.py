"""Record storage layer.

This module owns the canonical record collection and schema validation.
It powers the query pipeline and the grid command surface.
"""
