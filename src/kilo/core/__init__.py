# src/kilo/core/__init__.py
"""Public facade for kilo.core: re-export main classes from CamelCase modules.

Keeps the one-class-per-file names (Row.py, Document.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Document import Document  # noqa: F401
from .Kilo import Kilo  # noqa: F401
from .Row import Row  # noqa: F401
from .Search import IncrementalSearch  # noqa: F401
from .Viewport import Viewport  # noqa: F401


__all__ = [
    "Document",
    "IncrementalSearch",
    "Kilo",
    "Row",
    "Viewport",
]
