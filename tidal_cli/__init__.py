"""
Tidal CLI - Three-layer client for the Tidal API.

Layers:
- core: Credentials, typed models and the authenticated HTTP pipeline
- sdk: High-level Tidal client with per-resource operations
- cli: Command-line interface
"""

from tidal_cli.core.auth import TidalCredentials
from tidal_cli.sdk import Tidal

__version__ = "0.1.0"
__all__ = ["Tidal", "TidalCredentials"]
