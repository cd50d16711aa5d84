"""Archive unpacking for collected metrics."""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path

from perfresults.errors import FormatError, NotFoundError

logger = logging.getLogger(__name__)


def is_tarball(path: Path | str) -> bool:
    """True when *path* is a readable tar archive (compressed or not)."""
    path = Path(path)
    return path.is_file() and tarfile.is_tarfile(path)


def extract_tarball(path: Path | str, destination: Path | str | None = None) -> Path:
    """Unpack a tar archive.

    Args:
        path: Archive to unpack
        destination: Target directory (default: the archive's directory)

    Returns:
        The directory the archive was unpacked into
    """
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"File not found: {path}")

    destination = Path(destination) if destination else path.parent
    try:
        with tarfile.open(path) as tar:
            tar.extractall(destination, filter="data")
    except tarfile.TarError as e:
        raise FormatError(f"Unable to extract {path}: {e}") from e

    logger.info(f"Extracted {path} to {destination}")
    return destination
