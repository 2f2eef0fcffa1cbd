"""Protected filesystem paths on which mutation is refused.

The guard holds a set of normalized path keys seeded from the platform
profile's system roots and the user's home directory. Paths are
normalized lexically before comparison, so /etc/. and //etc match /etc.
Membership is exact: /etc is protected, /etc/myapp is not.
"""

import logging
import posixpath
from pathlib import Path

from twinpane.errors import ProtectedPathError
from twinpane.filesystem.platform import PlatformProfile, get_profile
from twinpane.models.operation import OperationKind

logger = logging.getLogger(__name__)


class ProtectedPathGuard:
    """Registry of protected paths with a guard check.

    Add and remove take effect immediately for subsequent checks. There
    is no internal locking; callers must not change protection while
    operations are in flight.

    Example:
        >>> guard = ProtectedPathGuard()
        >>> guard.guard("/etc", OperationKind.DELETE)
        Traceback (most recent call last):
        ...
        twinpane.errors.ProtectedPathError: Operation 'delete' not permitted ...
    """

    def __init__(
        self,
        profile: PlatformProfile | None = None,
        home: str | None = None,
    ) -> None:
        """Initialize the guard with platform roots and the home directory.

        Args:
            profile: Platform profile. Defaults to the running platform.
            home: Home directory to protect. Defaults to Path.home().
        """
        self._profile = profile or get_profile()
        self._paths: dict[str, str] = {}

        for root in self._profile.protected_roots:
            self.add_protected_path(root)
        self.add_protected_path(home if home is not None else str(Path.home()))

    @property
    def profile(self) -> PlatformProfile:
        """Platform profile used for normalization and comparison."""
        return self._profile

    @property
    def protected_paths(self) -> frozenset[str]:
        """Snapshot of the protected paths in normalized form."""
        return frozenset(self._paths.values())

    def normalize(self, path: str) -> str:
        """Collapse '.', '..' and repeated separators, then strip trailing ones.

        The rewrite is purely lexical; links are not resolved.
        """
        pathmod = self._profile.pathmod
        normalized = pathmod.normpath(path)
        if pathmod is posixpath and normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        return self._profile.strip_separators(normalized)

    def add_protected_path(self, path: str) -> None:
        """Protect a path.

        Args:
            path: Path to protect. Trailing separators are ignored.
        """
        normalized = self.normalize(path)
        self._paths[self._profile.path_key(normalized)] = normalized
        logger.debug("Protected path added: %s", path)

    def remove_protected_path(self, path: str) -> None:
        """Stop protecting a path. Unknown paths are ignored.

        Args:
            path: Path to unprotect. Trailing separators are ignored.
        """
        if self._paths.pop(self._profile.path_key(self.normalize(path)), None) is not None:
            logger.warning("Protection removed from path: %s", path)

    def is_protected(self, path: str) -> bool:
        """Check if a path is in the protected set.

        Args:
            path: Path to check.

        Returns:
            True if the normalized path is protected.
        """
        return self._profile.path_key(self.normalize(path)) in self._paths

    def guard(self, path: str, operation: OperationKind) -> None:
        """Refuse an operation on a protected path.

        Args:
            path: Path the operation is about to touch.
            operation: Operation being attempted.

        Raises:
            ProtectedPathError: If the path is protected.
        """
        if self.is_protected(path):
            raise ProtectedPathError(operation, path)
