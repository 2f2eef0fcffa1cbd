"""Filesystem mutation, resolution and search.

This module provides the storage abstraction and its implementations,
platform profiles, protected path management, the mutation engine, the
path resolver, the glob search engine and the async facade.
"""

from twinpane.filesystem.background import BackgroundOperations
from twinpane.filesystem.memory import InMemoryStorage
from twinpane.filesystem.operator import TEMP_SUFFIX, FileOperationEngine
from twinpane.filesystem.platform import PlatformProfile, get_profile
from twinpane.filesystem.protected import ProtectedPathGuard
from twinpane.filesystem.resolver import MAX_SYMLINK_DEPTH, PathResolver
from twinpane.filesystem.search import SearchEngine, compile_glob
from twinpane.filesystem.storage import LocalStorage, Storage

__all__ = [
    "MAX_SYMLINK_DEPTH",
    "TEMP_SUFFIX",
    "BackgroundOperations",
    "FileOperationEngine",
    "InMemoryStorage",
    "LocalStorage",
    "PathResolver",
    "PlatformProfile",
    "ProtectedPathGuard",
    "SearchEngine",
    "Storage",
    "compile_glob",
    "get_profile",
]
