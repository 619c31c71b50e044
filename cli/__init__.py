"""Command line interface for the schema mapper"""

__version__ = "0.1.0"
