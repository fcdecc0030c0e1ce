"""Shared pytest fixtures for FlatFS tests."""
import logging
import sys
import zipfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from flatfs.infrastructure.config_manager import set_global_config
from flatfs.infrastructure.logger import set_global_logger
from flatfs.stores.memory import MemoryFileSystem
from flatfs.stores.zipfs import ZipFileSystem

RESOURCE_PACKAGE = "flatfs_sample_resources"


@pytest.fixture
def sample_files() -> Dict[str, bytes]:
    """The canonical flat layout: two files under /a and one at the root."""
    return {
        "/a.txt": b"alpha",
        "/a/b.txt": b"bravo",
        "/a/c.text": b"charlie",
    }


@pytest.fixture
def memory_fs(sample_files: Dict[str, bytes]) -> MemoryFileSystem:
    """Writable in-memory store holding the sample files."""
    return MemoryFileSystem(sample_files)


@pytest.fixture
def zip_path(tmp_path: Path, sample_files: Dict[str, bytes]) -> Path:
    """Create a zip archive holding the sample files and a directory record."""
    path = tmp_path / "sample.zip"
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in sample_files.items():
            info = zipfile.ZipInfo(name.lstrip("/"), date_time=(2024, 1, 2, 3, 4, 6))
            archive.writestr(info, data)
        archive.writestr("empty/", b"")
    return path


@pytest.fixture
def zip_fs(zip_path: Path) -> Generator[ZipFileSystem, None, None]:
    """Read-only store over the sample archive."""
    store = ZipFileSystem(zip_path)
    yield store
    store.close()


@pytest.fixture
def resource_package(
    tmp_path: Path, sample_files: Dict[str, bytes], monkeypatch: pytest.MonkeyPatch
) -> Generator[str, None, None]:
    """Create an importable package whose resources are the sample files."""
    root = tmp_path / "packages"
    package_dir = root / RESOURCE_PACKAGE
    package_dir.mkdir(parents=True)
    (package_dir / "__init__.py").write_text("")
    for name, data in sample_files.items():
        target = package_dir / name.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    (package_dir / "__pycache__").mkdir()
    (package_dir / "__pycache__" / "stale.cpython-311.pyc").write_bytes(b"")

    monkeypatch.syspath_prepend(str(root))
    yield RESOURCE_PACKAGE
    sys.modules.pop(RESOURCE_PACKAGE, None)


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample FlatFS configuration."""
    return {
        "flatfs": {
            "case_sensitive": False,
            "store": {"type": "auto"},
            "logging": {"level": "DEBUG", "file": None},
            "mount": {"readonly": True, "allow_other": False},
        }
    }


@pytest.fixture
def config_file(tmp_path: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = tmp_path / "flatfs.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def mount_dir(tmp_path: Path) -> Path:
    """Create an empty mount point directory."""
    mount = tmp_path / "mount"
    mount.mkdir()
    return mount


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset global logger, config and the "flatfs" stdlib logger between tests."""
    yield
    set_global_logger(None)
    set_global_config(None)

    logger = logging.getLogger("flatfs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
