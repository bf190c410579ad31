"""Artifact extraction.

Downloaded payloads are classified by the suffix of their source URL:
- .tar.gz / .tgz: gzip-compressed tar, one named file is picked out
- .gz: plain gzip stream, decompressed as a whole
- anything else: already the binary

Magic bytes are not inspected, so a URL without a recognised suffix is
taken to be the final executable.
"""

from __future__ import annotations

import gzip
import io
import logging
import tarfile
import zlib
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import PurePosixPath

from grab.core.result import Err, Ok, Result

__all__ = ["ArchiveError", "PayloadKind", "classify", "extract_artifact"]

logger = logging.getLogger(__name__)


class PayloadKind(Enum):
    """How a downloaded payload is packaged."""

    TAR_GZ = auto()
    GZIP = auto()
    RAW = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class ArchiveError:
    """Extraction failure.

    Attributes:
        source_url: URL the payload came from
        message: Human-readable error message
    """

    source_url: str
    message: str

    def __str__(self) -> str:
        return self.message


def classify(source_url: str) -> PayloadKind:
    """Classify a payload by the suffix of the full URL string."""
    if source_url.endswith((".tar.gz", ".tgz")):
        return PayloadKind.TAR_GZ
    if source_url.endswith(".gz"):
        return PayloadKind.GZIP
    return PayloadKind.RAW


def extract_artifact(binary_name: str, data: bytes, source_url: str) -> Result[bytes, ArchiveError]:
    """Return the executable bytes contained in a downloaded payload.

    Args:
        binary_name: File name to pick out of a tar archive
        data: Downloaded bytes
        source_url: URL the bytes came from (decides the payload kind)

    Returns:
        Ok with the executable bytes, or Err with ArchiveError
    """
    kind = classify(source_url)
    logger.debug("payload from %s classified as %s", source_url, kind)

    match kind:
        case PayloadKind.TAR_GZ:
            return _extract_from_tgz(binary_name, data, source_url)
        case PayloadKind.GZIP:
            return _gunzip(data, source_url)
        case PayloadKind.RAW:
            return Ok(data)


def _gunzip(data: bytes, source_url: str) -> Result[bytes, ArchiveError]:
    try:
        return Ok(gzip.decompress(data))
    except (OSError, EOFError, zlib.error) as e:
        return Err(ArchiveError(source_url, f"Error decompressing gzipped data: {e}"))


def _extract_from_tgz(
    binary_name: str, data: bytes, source_url: str
) -> Result[bytes, ArchiveError]:
    decompressed = _gunzip(data, source_url)
    if isinstance(decompressed, Err):
        return decompressed

    try:
        with tarfile.open(fileobj=io.BytesIO(decompressed.value), mode="r:") as tar:
            for member in tar:
                # Skip directories and non-regular entries (symlink, hardlink, device, fifo)
                if not member.isreg():
                    continue
                if PurePosixPath(member.name).name != binary_name:
                    logger.debug("skipping archive member %s", member.name)
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue
                with src:
                    return Ok(src.read())
    except (tarfile.TarError, OSError, EOFError) as e:
        return Err(ArchiveError(source_url, f"Error extracting from tar: {e}"))

    return Err(ArchiveError(source_url, f"No file named {binary_name!r} found in archive"))
