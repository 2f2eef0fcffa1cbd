"""Platform profiles for path semantics.

A PlatformProfile bundles everything that differs between platforms:
the path module, separators, case sensitivity, characters that are
invalid in paths and the list of protected system roots. Profiles are
selected by a platform tag; supporting a new platform means registering
a new factory in PROFILE_FACTORIES.
"""

import ntpath
import os
import posixpath
import sys
from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType

# System roots on which mutation is refused (POSIX).
POSIX_PROTECTED_ROOTS: tuple[str, ...] = (
    "/",
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/lib",
    "/lib32",
    "/lib64",
    "/proc",
    "/root",
    "/sbin",
    "/sys",
    "/usr",
    "/var",
)

# Additional roots on macOS
MACOS_PROTECTED_ROOTS: tuple[str, ...] = (
    "/Applications",
    "/Library",
    "/System",
    "/Volumes",
    "/cores",
    "/private",
)

# .NET-compatible invalid path characters on Windows: quotes, angle
# brackets, pipe and the ASCII control range.
_WINDOWS_INVALID_CHARS: frozenset[str] = frozenset('"<>|') | frozenset(
    chr(code) for code in range(32)
)
_POSIX_INVALID_CHARS: frozenset[str] = frozenset("\0")


@dataclass(frozen=True, slots=True)
class PlatformProfile:
    """Path semantics of one platform.

    Attributes:
        tag: Platform tag ("linux", "darwin", "windows").
        pathmod: Path module used for joining and normalizing.
        separators: Accepted separators, canonical separator first.
        case_sensitive: Whether path comparison is case-sensitive.
        invalid_chars: Characters rejected in user-supplied paths.
        protected_roots: System roots seeded into the protected set.
    """

    tag: str
    pathmod: ModuleType
    separators: tuple[str, ...]
    case_sensitive: bool
    invalid_chars: frozenset[str]
    protected_roots: tuple[str, ...]

    @property
    def sep(self) -> str:
        """Canonical separator."""
        return self.separators[0]

    def strip_separators(self, path: str) -> str:
        """Strip trailing separators, keeping root markers such as '/'."""
        stripped = path.rstrip("".join(self.separators))
        return stripped or path

    def path_key(self, path: str) -> str:
        """Comparison key honoring the platform's case rule."""
        normalized = self.strip_separators(path)
        for separator in self.separators[1:]:
            normalized = normalized.replace(separator, self.sep)
        return normalized if self.case_sensitive else normalized.casefold()

    def to_forward_slashes(self, path: str) -> str:
        """Convert every accepted separator to '/'."""
        for separator in self.separators:
            if separator != "/":
                path = path.replace(separator, "/")
        return path

    def has_invalid_chars(self, path: str) -> bool:
        """Check whether a path contains characters invalid on this platform."""
        return any(char in self.invalid_chars for char in path)


def posix_profile() -> PlatformProfile:
    """Linux and other POSIX systems."""
    return PlatformProfile(
        tag="linux",
        pathmod=posixpath,
        separators=("/",),
        case_sensitive=True,
        invalid_chars=_POSIX_INVALID_CHARS,
        protected_roots=POSIX_PROTECTED_ROOTS,
    )


def macos_profile() -> PlatformProfile:
    """macOS: POSIX roots plus Apple system locations."""
    return PlatformProfile(
        tag="darwin",
        pathmod=posixpath,
        separators=("/",),
        case_sensitive=True,
        invalid_chars=_POSIX_INVALID_CHARS,
        protected_roots=POSIX_PROTECTED_ROOTS + MACOS_PROTECTED_ROOTS,
    )


def windows_profile() -> PlatformProfile:
    """Windows: system drive, system directories and the users root.

    Locations come from the standard environment variables with the
    usual defaults when they are unset.
    """
    drive = os.environ.get("SystemDrive", "C:")
    root = drive + "\\"
    system_root = os.environ.get("SystemRoot", ntpath.join(root, "Windows"))
    roots = (
        root,
        system_root,
        ntpath.join(system_root, "System32"),
        os.environ.get("ProgramFiles", ntpath.join(root, "Program Files")),
        os.environ.get("ProgramFiles(x86)", ntpath.join(root, "Program Files (x86)")),
        os.environ.get("ProgramData", ntpath.join(root, "ProgramData")),
        ntpath.join(root, "Users"),
    )
    return PlatformProfile(
        tag="windows",
        pathmod=ntpath,
        separators=("\\", "/"),
        case_sensitive=False,
        invalid_chars=_WINDOWS_INVALID_CHARS,
        protected_roots=roots,
    )


PROFILE_FACTORIES: dict[str, Callable[[], PlatformProfile]] = {
    "linux": posix_profile,
    "darwin": macos_profile,
    "windows": windows_profile,
}


def detect_platform() -> str:
    """Map sys.platform to a profile tag. Unknown platforms are POSIX."""
    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform == "darwin":
        return "darwin"
    return "linux"


def get_profile(tag: str | None = None) -> PlatformProfile:
    """Get the platform profile for a tag.

    Args:
        tag: Platform tag. None or "auto" detects the running platform.

    Returns:
        The matching PlatformProfile.

    Raises:
        ValueError: If the tag is unknown.
    """
    if tag is None or tag == "auto":
        tag = detect_platform()
    try:
        factory = PROFILE_FACTORIES[tag]
    except KeyError:
        msg = f"Unknown platform tag: {tag}"
        raise ValueError(msg) from None
    return factory()
