"""Record query pipeline.

This package filters, ranks, and orders record sequences.
Every function returns a new list and never mutates its input.
"""
