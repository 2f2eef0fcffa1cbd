"""Path canonicalization.

Turns user-supplied paths into absolute, normalized, symlink-resolved
paths: expands a leading tilde, normalizes relative segments against the
working directory and follows symbolic link chains with cycle and depth
protection.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from twinpane.errors import ArgumentInvalidError, CircularSymlinkError
from twinpane.filesystem.platform import PlatformProfile, get_profile
from twinpane.filesystem.storage import LocalStorage, Storage
from twinpane.models.operation import OperationKind

logger = logging.getLogger(__name__)

# Maximum number of link hops followed before giving up
MAX_SYMLINK_DEPTH = 64

LinkTargetLookup = Callable[[str], str | None]


class PathResolver:
    """Resolve paths to their canonical form.

    The resolver is pure apart from the link-target lookup and is not
    wired into the mutation engine; callers resolve paths first when they
    need canonical input.

    Example:
        >>> resolver = PathResolver(home="/home/alice", cwd="/srv")
        >>> resolver.resolve("~/docs/../notes")
        '/home/alice/notes'
    """

    def __init__(
        self,
        storage: Storage | None = None,
        link_target: LinkTargetLookup | None = None,
        profile: PlatformProfile | None = None,
        home: str | None = None,
        cwd: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            storage: Storage consulted for link targets. Defaults to LocalStorage.
            link_target: Lookup returning the target of a link or None.
                Consulted before the storage.
            profile: Platform profile. Defaults to the running platform.
            home: Home directory used for tilde expansion. Defaults to Path.home().
            cwd: Base for relative paths. Defaults to os.getcwd() at resolve time.
        """
        self._storage = storage or LocalStorage()
        self._link_target = link_target
        self._profile = profile or get_profile()
        self._home = home
        self._cwd = cwd

    def resolve(self, path: str) -> str:
        """Resolve a path to its canonical absolute form.

        Args:
            path: User-supplied path, possibly relative or starting with '~'.

        Returns:
            Absolute normalized path with every symbolic link followed.

        Raises:
            ArgumentInvalidError: If the path is None, blank or malformed.
            CircularSymlinkError: If a link chain revisits a path or exceeds
                MAX_SYMLINK_DEPTH hops.
        """
        if path is None or not path.strip():
            msg = "Path cannot be null, empty or whitespace"
            raise ArgumentInvalidError(OperationKind.RESOLVE, "path", msg)
        if self._profile.has_invalid_chars(path):
            msg = f"Path contains invalid characters: {path!r}"
            raise ArgumentInvalidError(OperationKind.RESOLVE, "path", msg, path)

        full_path = self._full_path(self._expand_tilde(path))
        resolved = self._follow_links(full_path)
        if resolved != full_path:
            logger.debug("Resolved %s -> %s", full_path, resolved)
        return resolved

    def _expand_tilde(self, path: str) -> str:
        """Expand '~' and '~/rest'. '~user' forms are left untouched."""
        if not path.startswith("~"):
            return path

        home = self._home if self._home is not None else str(Path.home())
        if not home:
            return path
        if len(path) == 1:
            return home
        if path[1] in self._profile.separators:
            rest = path[2:]
            return self._profile.pathmod.join(home, rest) if rest else home
        return path

    def _full_path(self, path: str) -> str:
        pathmod = self._profile.pathmod
        if not pathmod.isabs(path):
            base = self._cwd if self._cwd is not None else os.getcwd()
            path = pathmod.join(base, path)
        return pathmod.normpath(path)

    def _lookup(self, path: str) -> str | None:
        if self._link_target is not None:
            target = self._link_target(path)
            if target:
                return target
        return self._storage.read_link(path)

    def _follow_links(self, path: str) -> str:
        pathmod = self._profile.pathmod
        visited: set[str] = set()
        current = path

        for _ in range(MAX_SYMLINK_DEPTH):
            key = self._profile.path_key(current)
            if key in visited:
                raise CircularSymlinkError(OperationKind.RESOLVE, current)
            visited.add(key)

            target = self._lookup(current)
            if not target:
                return current
            if not pathmod.isabs(target):
                target = pathmod.join(pathmod.dirname(current), target)
            current = pathmod.normpath(target)

        raise CircularSymlinkError(OperationKind.RESOLVE, current)
