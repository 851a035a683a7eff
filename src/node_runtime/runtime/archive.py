"""Archive capability: unpack gzip-compressed tarballs."""

import logging
import posixpath
import tarfile
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

HAS_DATA_FILTER = hasattr(tarfile, "data_filter")


def _check_member(member: tarfile.TarInfo, destination: Path) -> None:
    """Raise if an entry, or the target of a link entry, leaves destination."""
    root = destination.resolve()
    paths = [member.name]
    if member.issym():
        paths.append(posixpath.join(posixpath.dirname(member.name), member.linkname))
    elif member.islnk():
        paths.append(member.linkname)

    for path in paths:
        if posixpath.isabs(path) or not (root / path).resolve().is_relative_to(root):
            raise tarfile.TarError(f"archive entry escapes destination: {member.name}")


def extract_tar_gz(source: BinaryIO, destination: Path) -> None:
    """Extract a .tar.gz file into a directory.

    Blocking; callers on the event loop should run it via asyncio.to_thread.

    Args:
        source: Seekable binary file positioned at the start of the archive
        destination: Existing directory to extract into

    Raises:
        tarfile.TarError: If the file is not a valid gzip tarball
        EOFError: If the compressed data ends early
        zlib.error: If the compressed data is corrupt
        OSError: If writing the entries fails
    """
    with tarfile.open(fileobj=source, mode="r:gz") as archive:
        if HAS_DATA_FILTER:
            # Rejects absolute paths, links out of destination, device files
            archive.extractall(destination, filter="data")
        else:
            for member in archive.getmembers():
                _check_member(member, destination)
            archive.extractall(destination)

    logger.debug("Extracted archive into %s", destination)
