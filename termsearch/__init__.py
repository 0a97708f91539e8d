# Termsearch Package
"""
Open search terms in the browser through user-defined search engines.

Modules:
  - search: Engine records and the URL resolver
  - services: In-memory catalog and its TOML store
  - utils: Settings, logging and desktop helpers
"""

__version__ = "0.1.0"
