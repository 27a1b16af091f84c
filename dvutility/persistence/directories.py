# ==============================================
# Storage Directories
# ==============================================
#
# PURPOSE:
#   Map the two logical storage scopes onto filesystem paths.
#
# ENUMS:
# ------
# - StorageDirectory(Enum): DURABLE, CACHE
#
# RESOLVERS:
# ----------
# - DirectoryResolver (Protocol)
#     resolve(directory) -> Path | None
#
# - UserDirectoryResolver
#     Platform user data / cache directories joined with an app name.
#     Overrides from configuration win over the platform defaults.
#
# - StaticDirectoryResolver
#     Fixed mapping, used for sandboxes and tests.
#
#   Resolvers never create directories and never cache results;
#   the path is computed again on every call.
#
# ==============================================

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Protocol, Union


class StorageDirectory(Enum):
    """
    Logical persistence scopes.

    - DURABLE: user-generated data that cannot be recreated
    - CACHE: data that can be downloaded or regenerated, may be purged
    """
    DURABLE = "durable"
    CACHE = "cache"


class DirectoryResolver(Protocol):
    def resolve(self, directory: StorageDirectory) -> Optional[Path]:
        ...


def _home() -> Optional[Path]:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        # No HOME and no passwd entry
        return None


class UserDirectoryResolver:
    """Resolves storage directories to the current user's platform dirs."""

    def __init__(
        self,
        app_name: str = "dvutility",
        durable_override: Optional[Union[str, Path]] = None,
        cache_override: Optional[Union[str, Path]] = None,
        platform: Optional[str] = None,
    ):
        self.app_name = app_name
        self.durable_override = durable_override
        self.cache_override = cache_override
        self.platform = platform or sys.platform

    def resolve(self, directory: StorageDirectory) -> Optional[Path]:
        if directory is StorageDirectory.DURABLE:
            override = self.durable_override
        else:
            override = self.cache_override
        if override:
            return Path(override).expanduser()

        base = self._platform_base(directory)
        if base is None:
            return None
        return base / self.app_name

    def _platform_base(self, directory: StorageDirectory) -> Optional[Path]:
        if self.platform.startswith("win"):
            var = "APPDATA" if directory is StorageDirectory.DURABLE else "LOCALAPPDATA"
            value = os.getenv(var)
            if value:
                return Path(value)
            home = _home()
            if home is None:
                return None
            return home / "AppData" / ("Roaming" if var == "APPDATA" else "Local")

        home = _home()

        if self.platform == "darwin":
            if home is None:
                return None
            if directory is StorageDirectory.DURABLE:
                return home / "Library" / "Application Support"
            return home / "Library" / "Caches"

        # XDG base directories, relative values are invalid and ignored
        var = "XDG_DATA_HOME" if directory is StorageDirectory.DURABLE else "XDG_CACHE_HOME"
        value = os.getenv(var)
        if value and os.path.isabs(value):
            return Path(value)
        if home is None:
            return None
        if directory is StorageDirectory.DURABLE:
            return home / ".local" / "share"
        return home / ".cache"


class StaticDirectoryResolver:
    """Resolves storage directories from a fixed mapping; missing keys resolve to None."""

    def __init__(self, paths: Dict[StorageDirectory, Union[str, Path]]):
        self.paths = {directory: Path(path) for directory, path in paths.items()}

    def resolve(self, directory: StorageDirectory) -> Optional[Path]:
        return self.paths.get(directory)

    @classmethod
    def sandbox(cls, root: Union[str, Path]) -> "StaticDirectoryResolver":
        """Both directories as sub-directories of one root."""
        root = Path(root)
        return cls({
            StorageDirectory.DURABLE: root / StorageDirectory.DURABLE.value,
            StorageDirectory.CACHE: root / StorageDirectory.CACHE.value,
        })
