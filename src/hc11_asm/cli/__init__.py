"""
hc11-asm Command-Line Interface
===============================

This package provides the command-line tools:

- **hc11asm**: assemble a source file, print or write the listing
- **hc11testprog**: write a source file covering every catalog encoding

Each tool is a Click-based CLI application with built-in help.
"""

__all__ = ["hc11asm", "hc11testprog"]
