# Termsearch Services Package
"""
Catalog services for termsearch.

Services hold the engine catalog in memory and persist it to disk.
"""

from .catalog import Catalog
from .store import load, save

__all__ = ["Catalog", "load", "save"]
