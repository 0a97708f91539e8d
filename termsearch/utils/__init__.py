# Termsearch Utilities Package
"""
Shared utility functions and helpers for termsearch.
"""

from .helpers import Settings, get_selected_text, load_settings, open_url, setup_logging

__all__ = ["Settings", "get_selected_text", "load_settings", "open_url", "setup_logging"]
