"""
Content digests for bundled scripts and their extracted copies.

Digests are used for change detection only: an extracted script whose digest
differs from the embedded resource is stale and gets rewritten. SHA-512 is the
default algorithm; its hex digest always has the same width, leading zero
bytes included.
"""

import hashlib
import logging
import secrets
from pathlib import Path
from typing import BinaryIO, Union

from xdgkit.core.exceptions import IntegrityError
from xdgkit.core.models import BUFFER_SIZE

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "sha512"

_DIGEST_LENGTHS = {"sha256": 64, "sha512": 128}

DIGEST_LENGTH = _DIGEST_LENGTHS[DEFAULT_ALGORITHM]


def _new_hasher(algorithm: str):
    algorithm = algorithm.lower()
    if algorithm == "sha256":
        return hashlib.sha256()
    elif algorithm == "sha512":
        return hashlib.sha512()
    raise ValueError(f"Unsupported hash algorithm: {algorithm}")


def compute_stream_hash(stream: BinaryIO, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Compute the hex digest of an entire binary stream.

    The stream is read to EOF in BUFFER_SIZE chunks. It is not closed.

    Args:
        stream: Readable binary stream
        algorithm: Hash algorithm ('sha256' or 'sha512')

    Returns:
        Lowercase hex digest of fixed width for the algorithm

    Raises:
        IntegrityError: If the stream cannot be read
        ValueError: If algorithm is not supported

    Example:
        >>> import io
        >>> len(compute_stream_hash(io.BytesIO(b"abc")))
        128
    """
    if stream is None:
        raise IntegrityError("Cannot compute digest of a missing stream")

    hasher = _new_hasher(algorithm)

    try:
        while chunk := stream.read(BUFFER_SIZE):
            hasher.update(chunk)
    except OSError as e:
        raise IntegrityError(f"Failed to read stream for digest: {e}") from e

    return hasher.hexdigest()


def compute_file_hash(
    file_path: Union[str, Path], algorithm: str = DEFAULT_ALGORITHM
) -> str:
    """
    Compute the hex digest of a file on disk.

    Args:
        file_path: Path to file
        algorithm: Hash algorithm ('sha256' or 'sha512')

    Returns:
        Lowercase hex digest

    Raises:
        IntegrityError: If the file is missing or unreadable
        ValueError: If algorithm is not supported
    """
    file_path = Path(file_path)

    try:
        with open(file_path, "rb") as f:
            return compute_stream_hash(f, algorithm)
    except OSError as e:
        raise IntegrityError(f"Failed to read {file_path} for digest: {e}") from e


def digests_match(actual: str, expected: str) -> bool:
    """
    Compare two hex digests in constant time, ignoring case.

    Args:
        actual: Computed digest
        expected: Reference digest

    Returns:
        True if the digests are equal
    """
    return secrets.compare_digest(
        actual.lower().encode("utf-8"), expected.lower().encode("utf-8")
    )


def verify_file_hash(
    file_path: Union[str, Path],
    expected_hash: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> bool:
    """
    Check whether a file's digest matches an expected value.

    Args:
        file_path: Path to file
        expected_hash: Expected hex digest
        algorithm: Hash algorithm

    Returns:
        True if the file matches, False otherwise

    Raises:
        IntegrityError: If the file cannot be read
    """
    actual_hash = compute_file_hash(file_path, algorithm)
    matched = digests_match(actual_hash, expected_hash)
    if not matched:
        logger.debug(
            f"Digest mismatch for {file_path}: "
            f"expected {expected_hash[:16]}..., got {actual_hash[:16]}..."
        )
    return matched


__all__ = [
    "DEFAULT_ALGORITHM",
    "DIGEST_LENGTH",
    "compute_stream_hash",
    "compute_file_hash",
    "digests_match",
    "verify_file_hash",
]
