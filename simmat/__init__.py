"""Similarity matrix visualiser for shape retrieval benchmarks."""

__version__ = "0.1.0"
