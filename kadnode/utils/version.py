"""Version utilities for KadNode."""

from __future__ import annotations

import importlib.metadata
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:  # pragma: no cover
    from kadnode.models import FeatureSet

PROGRAM_NAME: Final[str] = "KadNode"


def get_version() -> str:
    """Get the installed package version.

    Falls back to kadnode.__version__ when package metadata is unavailable.
    """
    try:
        return importlib.metadata.version("kadnode")
    except importlib.metadata.PackageNotFoundError:
        import kadnode

        return getattr(kadnode, "__version__", "0.0.0")


def version_string(features: FeatureSet) -> str:
    """Return e.g. "KadNode v2.3.0 ( lpd cmd dns tls )"."""
    names = "".join(f" {name}" for name in features.names())
    return f"{PROGRAM_NAME} v{get_version()} ({names} )"
