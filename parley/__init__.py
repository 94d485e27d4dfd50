"""Parley: conversation session service for text-generation backends."""

__version__ = "1.0.0"
