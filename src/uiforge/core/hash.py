"""Fast hashing for non-cryptographic use cases.

xxhash digests identify generated source text; SHA256 is kept for
digests that leave the process (exported manifests, archives).
"""

from typing import Protocol
from enum import Enum
import hashlib

import xxhash


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"  # Fast, non-cryptographic (source digests)
    SHA256 = "sha256"      # Stable across tools


class Hasher(Protocol):
    """Protocol for hash implementations."""

    def digest(self, data: bytes) -> str:
        """Compute hex digest of data."""
        ...


class XXHasher:
    """Ultra-fast non-cryptographic hasher."""

    def digest(self, data: bytes) -> str:
        """Compute xxhash64 hex digest."""
        return xxhash.xxh64(data).hexdigest()


class SHA256Hasher:
    """Secure cryptographic hasher."""

    def digest(self, data: bytes) -> str:
        """Compute SHA256 hex digest."""
        return hashlib.sha256(data).hexdigest()


def create_hasher(algorithm: Algorithm = Algorithm.XXHASH64) -> Hasher:
    """
    Create hasher instance.

    Args:
        algorithm: Hash algorithm to use

    Returns:
        Hasher instance

    Raises:
        ValueError: If the algorithm is unknown
    """
    if algorithm == Algorithm.XXHASH64:
        return XXHasher()
    elif algorithm == Algorithm.SHA256:
        return SHA256Hasher()
    else:
        raise ValueError(f"Unknown algorithm: {algorithm}")


def hash_string(
    text: str,
    algorithm: Algorithm = Algorithm.XXHASH64,
    truncate: int | None = None
) -> str:
    """
    Hash string to hex digest.

    Args:
        text: String to hash
        algorithm: Hash algorithm (default: xxhash64 for speed)
        truncate: Optional length to truncate digest

    Returns:
        Hex digest string

    Examples:
        >>> len(hash_string("function Card() { return <div/> }"))
        16
    """
    hasher = create_hasher(algorithm)
    digest = hasher.digest(text.encode("utf-8"))

    if truncate:
        return digest[:truncate]
    return digest


def hash_files(files: dict[str, str], algorithm: Algorithm = Algorithm.SHA256) -> str:
    """
    Hash a path -> contents mapping (order independent).

    Args:
        files: File mapping
        algorithm: Hash algorithm

    Returns:
        Hex digest of the combined files
    """
    combined = "\x00".join(f"{path}\x00{files[path]}" for path in sorted(files))
    return hash_string(combined, algorithm)


__all__ = [
    "Algorithm",
    "Hasher",
    "create_hasher",
    "hash_string",
    "hash_files",
]
