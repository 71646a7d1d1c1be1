"""
Safe archive extraction for Go release archives.

Go publishes its releases as .tar.gz (Unix) or .zip (Windows) archives
whose entries all live under a single 'go/' folder. Extraction strips that
folder so the archive contents land directly in the version directory.

Archives are not trusted:
- every entry path is validated before anything is written for it
  (empty, backslash, absolute and '../' paths are rejected)
- only regular files and directories are extracted; links and devices
  abort the extraction
- directory permissions come from a fixed default, not from the archive

A rejected entry aborts the extraction without rolling back files already
written. Callers rely on the completion marker (see
goup.toolchain.store) to treat such a directory as incomplete.
"""

import logging
import os
import stat
import tarfile
import zipfile
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional, Set, Union

from .exceptions import (
    ExtractionError,
    GoupError,
    ShortWriteError,
    UnsafeArchiveEntryError,
    UnsupportedArchiveError,
    UnsupportedEntryTypeError,
)

logger = logging.getLogger(__name__)

DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644
DEFAULT_STRIP_PREFIX = "go/"
CHUNK_SIZE = 32 * 1024

_TAR_TYPE_NAMES = {
    tarfile.SYMTYPE: "symlink",
    tarfile.LNKTYPE: "hard link",
    tarfile.CHRTYPE: "character device",
    tarfile.BLKTYPE: "block device",
    tarfile.FIFOTYPE: "fifo",
}


def is_valid_rel_path(name: str) -> bool:
    """
    Report whether an archive entry name is safe to extract.

    Args:
        name: Entry name as stored in the archive (forward slashes)

    Returns:
        False for empty names, names containing a backslash, absolute
        names, drive-letter names, and names with a '..' segment
    """
    if not name or "\\" in name or name.startswith("/") or "../" in name:
        return False
    if len(name) > 1 and name[1] == ":":
        return False
    if ".." in PurePosixPath(name).parts:
        return False
    return True


class ArchiveExtractor:
    """
    Extracts one archive into a target directory.

    Directories created during a run are remembered so each parent is
    created at most once.

    Example:
        >>> extractor = ArchiveExtractor(Path('~/.go/go1.21.5'))
        >>> extractor.extract_tar_gz(Path('go1.21.5.linux-amd64.tar.gz'))
    """

    def __init__(
        self,
        target_dir: Union[str, Path],
        strip_prefix: str = DEFAULT_STRIP_PREFIX,
    ):
        self.target_dir = Path(target_dir)
        self.strip_prefix = strip_prefix
        self._made_dirs: Set[Path] = set()

    def destination_for(self, name: str) -> Path:
        """
        Validate an entry name and map it to its path under target_dir.

        Raises:
            UnsafeArchiveEntryError: If the name fails validation
        """
        if not is_valid_rel_path(name):
            raise UnsafeArchiveEntryError(name)

        prefix = self.strip_prefix
        if prefix and name.startswith(prefix):
            name = name[len(prefix):]
        elif prefix and name == prefix.rstrip("/"):
            # tarfile drops the trailing slash of directory entries
            name = ""

        return self.target_dir.joinpath(*PurePosixPath(name).parts)

    def extract_tar_gz(self, archive_path: Path) -> None:
        """Extract a gzip-compressed tar archive entry by entry."""
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar:
                dest = self.destination_for(member.name)

                if member.isreg():
                    source = tar.extractfile(member)
                    with source:
                        self._write_file(
                            dest, source, member.size, member.mode, member.mtime
                        )
                elif member.isdir():
                    self._make_dir(dest)
                else:
                    type_name = _TAR_TYPE_NAMES.get(member.type, repr(member.type))
                    raise UnsupportedEntryTypeError(member.name, type_name)

    def extract_zip(self, archive_path: Path) -> None:
        """Extract a zip archive entry by entry."""
        with zipfile.ZipFile(archive_path, "r") as zf:
            for info in zf.infolist():
                dest = self.destination_for(info.filename)
                unix_mode = info.external_attr >> 16

                if info.is_dir():
                    self._make_dir(dest)
                elif stat.S_IFMT(unix_mode) and not stat.S_ISREG(unix_mode):
                    raise UnsupportedEntryTypeError(
                        info.filename, _zip_type_name(unix_mode)
                    )
                else:
                    with zf.open(info) as source:
                        self._write_file(
                            dest,
                            source,
                            info.file_size,
                            stat.S_IMODE(unix_mode) or DEFAULT_FILE_MODE,
                            _zip_mtime(info),
                        )

    def _make_dir(self, path: Path) -> None:
        if path in self._made_dirs:
            return
        path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        self._made_dirs.add(path)

    def _write_file(
        self,
        dest: Path,
        source: BinaryIO,
        size: int,
        mode: int,
        mtime: Optional[float],
    ) -> None:
        self._make_dir(dest.parent)

        written = 0
        with open(dest, "wb") as out:
            while chunk := source.read(CHUNK_SIZE):
                out.write(chunk)
                written += len(chunk)
        os.chmod(dest, mode & 0o777)

        if written != size:
            raise ShortWriteError(dest, written, size)

        if mtime:
            try:
                os.utime(dest, (mtime, mtime))
            except OSError as e:
                logger.warning(f"error changing modtime of {dest}: {e}")


def extract_archive(
    archive_path: Union[str, Path],
    target_dir: Union[str, Path],
    strip_prefix: str = DEFAULT_STRIP_PREFIX,
) -> None:
    """
    Extract a .zip or .tar.gz release archive into target_dir.

    Args:
        archive_path: Path to the archive file
        target_dir: Directory to extract into
        strip_prefix: Leading path segment removed from every entry

    Raises:
        UnsupportedArchiveError: If the suffix is neither .zip nor .tar.gz
        UnsafeArchiveEntryError: If an entry path is unsafe
        UnsupportedEntryTypeError: If an entry is not a file or directory
        ShortWriteError: If an entry was written incompletely
        ExtractionError: If the archive cannot be read or written

    Example:
        >>> extract_archive('go1.21.5.linux-amd64.tar.gz', '/home/me/.go/go1.21.5')
    """
    archive_path = Path(archive_path)
    extractor = ArchiveExtractor(target_dir, strip_prefix)

    if archive_path.name.endswith(".zip"):
        extract = extractor.extract_zip
    elif archive_path.name.endswith(".tar.gz"):
        extract = extractor.extract_tar_gz
    else:
        raise UnsupportedArchiveError(f"unsupported archive file: {archive_path}")

    try:
        extract(archive_path)
    except GoupError:
        raise
    except (OSError, EOFError, tarfile.TarError, zipfile.BadZipFile) as e:
        raise ExtractionError(f"extracting archive {archive_path}: {e}") from e


def _zip_type_name(unix_mode: int) -> str:
    if stat.S_ISLNK(unix_mode):
        return "symlink"
    if stat.S_ISCHR(unix_mode):
        return "character device"
    if stat.S_ISBLK(unix_mode):
        return "block device"
    if stat.S_ISFIFO(unix_mode):
        return "fifo"
    if stat.S_ISSOCK(unix_mode):
        return "socket"
    return oct(stat.S_IFMT(unix_mode))


def _zip_mtime(info: zipfile.ZipInfo) -> Optional[float]:
    try:
        return datetime(*info.date_time).timestamp()
    except (ValueError, OverflowError) as e:
        logger.warning(f"invalid modtime for {info.filename}: {e}")
        return None
