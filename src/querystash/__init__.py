"""
querystash: content-addressed query result cache for static-site builds.

Runs page and template data queries, skips writes whose result is already
on disk, and tells the build state which outputs changed.
"""

__version__ = "0.1.0"
