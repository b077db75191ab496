"""
deltanote - spaced resurfacing of note blocks

Blocks carry an inline ``{{delta:<interval>+<multiplier> <YYYY-MM-DD>}}``
tag; due blocks are surfaced into today's daily note and their tags cleared.
"""

from .version import __version__

__all__ = ["__version__"]
