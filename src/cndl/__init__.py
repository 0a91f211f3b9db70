"""cndl - content-addressed storage and snapshots for time-series chunks.

cndl keeps encoded market-data chunks in a git-like object store: every
chunk is addressed by its SHA-256 digest, symbols are staged through refs,
and commits record the full symbol -> chunk mapping at a point in time.
"""

__version__ = "0.1.0"
__author__ = "cndl Contributors"

__all__ = ["__version__", "__author__"]
