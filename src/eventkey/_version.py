"""
Package version.

Kept in its own module so the CLI and plugin metadata can read it without
importing the rest of the package.
"""

__version__ = "1.0.0"
