"""
Backing store factory.

Builds a FlatFileSystem from a user-supplied source string: a zip archive
path or the dotted name of a Python package.
"""

import zipfile
from pathlib import Path
from typing import Union

from flatfs.core.constants import StoreType
from flatfs.core.errors import InvalidArgumentError
from flatfs.stores.base import FlatFileSystem
from flatfs.stores.resources import PackageResourceFileSystem
from flatfs.stores.zipfs import ZipFileSystem


def detect_store_type(source: str) -> StoreType:
    """
    Guess the store type for a source.

    Existing files that are zip archives are ZIP; anything else is taken
    as a package name.
    """
    path = Path(source)
    if path.is_file() and zipfile.is_zipfile(path):
        return StoreType.ZIP
    return StoreType.PACKAGE


def open_store(
    source: str,
    store_type: Union[StoreType, str] = StoreType.AUTO,
    case_sensitive: bool = False,
) -> FlatFileSystem:
    """
    Open a backing store.

    Args:
        source: Zip archive path or package name
        store_type: StoreType or its value; AUTO detects from source
        case_sensitive: Compare paths exactly instead of ignoring case

    Returns:
        Opened store

    Raises:
        InvalidArgumentError: If source is empty or store_type is unknown
        FileNotFoundError: If a zip archive does not exist
        zipfile.BadZipFile: If a zip source is not an archive
        ModuleNotFoundError: If a package cannot be imported
    """
    if not source:
        raise InvalidArgumentError("'source' must not be empty")

    try:
        store_type = StoreType(store_type)
    except ValueError:
        valid_types = [t.value for t in StoreType]
        raise InvalidArgumentError(f"Invalid store type: {store_type}. Must be one of {valid_types}")

    if store_type == StoreType.AUTO:
        store_type = detect_store_type(source)

    if store_type == StoreType.ZIP:
        return ZipFileSystem(source, case_sensitive=case_sensitive)
    return PackageResourceFileSystem(source, case_sensitive=case_sensitive)
