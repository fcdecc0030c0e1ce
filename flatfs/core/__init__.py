"""FlatFS Core - Shared types and utilities.

Import specific names from submodules:
    from flatfs.core.constants import SearchTarget
    from flatfs.core.errors import InvalidPathError
    from flatfs.core.path_utils import VirtualPath, PathComparer
    from flatfs.core.validators import validate_config
"""

from flatfs.core import constants, errors, path_utils, validators

__all__ = [
    "constants",
    "errors",
    "path_utils",
    "validators",
]
