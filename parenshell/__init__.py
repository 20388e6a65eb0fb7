"""A small shell language with closures, blocks, maps and exceptions, and its interpreter."""

__version__ = "0.1.0"