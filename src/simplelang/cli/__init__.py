"""
SimpleLang Command-Line Interface
=================================

- **slc**: SimpleLang compiler

The tool is a Click-based CLI application.
"""

__all__ = ["slc"]
