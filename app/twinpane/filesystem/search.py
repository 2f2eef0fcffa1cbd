"""Glob search over a directory tree.

Patterns use forward slashes and support ``*`` (any run within one path
segment), ``?`` (one character within a segment) and ``**`` (any number
of segments). Patterns match the path of each entry relative to the
search root, so ``*.log`` only matches top-level entries while
``**/*.log`` matches at any depth.
"""

import logging
import re
from collections.abc import Iterator

from twinpane.core.cancellation import CancellationToken
from twinpane.errors import ArgumentInvalidError, PathNotFoundError
from twinpane.filesystem.platform import PlatformProfile, get_profile
from twinpane.filesystem.resolver import MAX_SYMLINK_DEPTH
from twinpane.filesystem.storage import LocalStorage, Storage
from twinpane.models.entry import FileSystemEntry
from twinpane.models.operation import OperationKind

logger = logging.getLogger(__name__)


def compile_glob(pattern: str, case_sensitive: bool = True) -> re.Pattern[str]:
    """Translate a glob pattern into an anchored regular expression.

    Args:
        pattern: Glob pattern using '/' as separator.
        case_sensitive: Match case-sensitively.

    Returns:
        Compiled regular expression matching whole relative paths.

    Example:
        >>> bool(compile_glob("**/*.cs").match("src/app/Program.cs"))
        True
        >>> bool(compile_glob("*.cs").match("src/Program.cs"))
        False
    """
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        else:
            char = pattern[i]
            if char == "*":
                parts.append("[^/]*")
            elif char == "?":
                parts.append("[^/]")
            elif char == "/":
                parts.append("/")
            else:
                parts.append(re.escape(char))
            i += 1

    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile("^" + "".join(parts) + "$", flags)


class SearchEngine:
    """Stream entries of a tree whose relative path matches a glob.

    Example:
        >>> engine = SearchEngine()
        >>> for entry in engine.search("/home/alice/src", "**/*.py"):
        ...     print(entry.path)
    """

    def __init__(
        self,
        storage: Storage | None = None,
        profile: PlatformProfile | None = None,
    ) -> None:
        """Initialize the search engine.

        Args:
            storage: Storage to enumerate. Defaults to LocalStorage.
            profile: Platform profile deciding separators and case rule.
                Defaults to the running platform.
        """
        self._storage = storage or LocalStorage()
        self._profile = profile or get_profile()

    def search(
        self,
        root: str,
        pattern: str,
        token: CancellationToken | None = None,
    ) -> Iterator[FileSystemEntry]:
        """Search a tree for entries matching a glob pattern.

        Arguments are validated immediately; the returned iterator is lazy
        and single-pass. Calling search again restarts the enumeration.

        Args:
            root: Directory to search.
            pattern: Glob pattern matched against paths relative to root.
            token: Cancellation token checked before each entry.

        Returns:
            Iterator of matching entries in depth-first order.

        Raises:
            ArgumentInvalidError: If root or pattern is blank or malformed.
            OperationCancelledError: If the token is already cancelled.
            PathNotFoundError: If root is not an existing directory.
        """
        operation = OperationKind.SEARCH
        if root is None or not root.strip():
            msg = "Root path cannot be null, empty or whitespace"
            raise ArgumentInvalidError(operation, "root", msg)
        if pattern is None or not pattern.strip():
            msg = "Pattern cannot be null, empty or whitespace"
            raise ArgumentInvalidError(operation, "pattern", msg, root)
        if self._profile.has_invalid_chars(root):
            msg = f"Root path contains invalid characters: {root!r}"
            raise ArgumentInvalidError(operation, "root", msg, root)
        if token is not None:
            token.raise_if_cancelled(operation, root)
        if not self._is_directory(root):
            raise PathNotFoundError(operation, root)

        matcher = compile_glob(
            self._normalize_pattern(pattern),
            case_sensitive=self._profile.case_sensitive,
        )
        logger.debug("Searching %s for %s (%s)", root, pattern, matcher.pattern)
        return self._matches(root, matcher, token)

    def _is_directory(self, root: str) -> bool:
        """Check the root, following symbolic links to their final target."""
        pathmod = self._profile.pathmod
        path = self._profile.strip_separators(root)
        for _ in range(MAX_SYMLINK_DEPTH):
            target = self._storage.read_link(path)
            if target is None:
                return self._storage.is_dir(path)
            path = pathmod.normpath(pathmod.join(pathmod.dirname(path), target))
        return False

    def _matches(
        self,
        root: str,
        matcher: re.Pattern[str],
        token: CancellationToken | None,
    ) -> Iterator[FileSystemEntry]:
        for path in self._storage.walk(root):
            if token is not None:
                token.raise_if_cancelled(OperationKind.SEARCH, path)
            if matcher.match(self._relative_path(root, path)):
                yield self._storage.entry(path)

    def _normalize_pattern(self, pattern: str) -> str:
        normalized = self._profile.to_forward_slashes(pattern)
        return normalized.removeprefix("./")

    def _relative_path(self, root: str, path: str) -> str:
        prefix = self._profile.strip_separators(root)
        if path.startswith(prefix):
            relative = path[len(prefix) :].lstrip("".join(self._profile.separators))
        else:
            relative = self._profile.pathmod.relpath(path, root)
        return self._profile.to_forward_slashes(relative)
