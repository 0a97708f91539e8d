"""
Search package - Engine definitions and URL resolution.

An engine turns a raw search term into a URL in two stages: a regex
rule normalizes the term, then the result replaces a literal
placeholder in the engine's URL template.
"""

from .engine import Engine
from .resolver import resolve

__all__ = ["Engine", "resolve"]
