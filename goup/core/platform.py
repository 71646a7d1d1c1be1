"""
Platform detection for goup.

Go publishes its archives under GOOS/GOARCH names ('linux', 'darwin',
'windows'; 'amd64', 'arm64', '386', 'arm'), so this module reports the
host platform using exactly those names.

Usage:
    from goup.core.platform import detect_platform

    info = detect_platform()
    print(f"{info.os}/{info.arch}")
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform in Go naming.

    Attributes:
        os: GOOS value ('linux', 'darwin', 'windows', 'freebsd', ...)
        arch: GOARCH value ('amd64', 'arm64', '386', 'arm', ...)
    """

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo with GOOS/GOARCH style names
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        GOOS name. Unknown systems are returned lower-cased as reported.
    """
    system = platform.system().lower()

    if system.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        GOARCH name. Unknown machines are returned lower-cased as reported.
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "amd64"
    elif machine in ("aarch64", "arm64", "armv8l"):
        return "arm64"
    elif machine in ("i386", "i486", "i586", "i686", "x86"):
        return "386"
    elif machine.startswith("arm"):
        return "arm"
    elif machine == "loongarch64":
        return "loong64"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
