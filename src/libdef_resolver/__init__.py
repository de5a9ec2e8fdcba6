"""libdef-resolver core package.

Discovers versioned libdefs in a definitions tree, validates the tree's
naming conventions and resolves the best libdef for a dependency and a Flow
version. The CLI and installer sit on top of the same functions.
"""

from .discovery import get_libdefs
from .errors import ErrorAccumulator, LibDefError
from .extractor import extract_libdefs_from_package_dir
from .resolver import find_libdef, needs_update, resolve_dependencies

__all__ = [
    "ErrorAccumulator",
    "LibDefError",
    "extract_libdefs_from_package_dir",
    "find_libdef",
    "get_libdefs",
    "needs_update",
    "resolve_dependencies",
]
