"""KadNode - A P2P name resolution daemon."""

from __future__ import annotations

__version__ = "2.3.0"
