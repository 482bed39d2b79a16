"""
                Cafe Order Manager

Order management backend for a cafe: drink catalog, order tracking
with pluggable in-memory / JSON-file storage, and revenue analytics.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
