"""Grid view layer.

This package windows query results into pages and exposes the command
surface and event channel consumed by rendering collaborators.
"""
