"""Tests for the store factory."""

import pytest

from flatfs.core.constants import StoreType
from flatfs.core.errors import InvalidArgumentError
from flatfs.stores.factory import detect_store_type, open_store
from flatfs.stores.resources import PackageResourceFileSystem
from flatfs.stores.zipfs import ZipFileSystem


class TestDetectStoreType:
    """Tests for detect_store_type."""

    def test_zip_archive(self, zip_path):
        assert detect_store_type(str(zip_path)) == StoreType.ZIP

    def test_package_name(self):
        assert detect_store_type("flatfs") == StoreType.PACKAGE

    def test_plain_file_is_not_zip(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert detect_store_type(str(path)) == StoreType.PACKAGE


class TestOpenStore:
    """Tests for open_store."""

    def test_auto_zip(self, zip_path):
        with open_store(str(zip_path)) as store:
            assert isinstance(store, ZipFileSystem)

    def test_auto_package(self, resource_package):
        with open_store(resource_package) as store:
            assert isinstance(store, PackageResourceFileSystem)

    def test_explicit_type_string(self, zip_path):
        with open_store(str(zip_path), "zip") as store:
            assert isinstance(store, ZipFileSystem)

    def test_case_sensitive_forwarded(self, zip_path):
        with open_store(str(zip_path), StoreType.ZIP, case_sensitive=True) as store:
            assert store.comparer.case_sensitive

    def test_empty_source(self):
        with pytest.raises(InvalidArgumentError):
            open_store("")

    def test_unknown_type(self, zip_path):
        with pytest.raises(InvalidArgumentError, match="tar"):
            open_store(str(zip_path), "tar")
