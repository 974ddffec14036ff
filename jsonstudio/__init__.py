"""
jsonstudio - A desktop JSON editor

Multi-tab editing sessions with pinned tabs, a side-by-side diff mode that
forks the open buffers into two comparison tracks, and session state that
survives restarts without ever restoring file paths.
"""

__version__ = "0.1.0"
__license__ = "AGPLv3+"

# Version tuple for programmatic comparison
VERSION_TUPLE = (0, 1, 0)

# Export key components when package is imported
__all__ = [
    "__version__",
    "__license__",
    "VERSION_TUPLE",
]
