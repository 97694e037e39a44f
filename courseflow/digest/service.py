"""Content fingerprints for duplicate detection.

The fingerprint is an equality key, not a security boundary: the persistence
collaborator is the source of truth for whether a file already exists.
"""

import base64
import hashlib
import zlib
from dataclasses import dataclass

from courseflow.digest.exceptions import DigestError
from courseflow.logging.logger import Log
from courseflow.validation.models import FileCandidate


@dataclass(frozen=True)
class DigestResult:
    value: str
    algorithm: str
    is_strong: bool


class ContentDigestService:
    """Computes content fingerprints, falling back to a metadata summary.

    The fallback is used when the configured algorithm is not available in
    the running interpreter (e.g. restricted FIPS builds). Fallback results
    have ``is_strong=False`` and must only be used as duplicate hints.
    """

    DEFAULT_CHUNK_SIZE = 1024 * 1024

    def __init__(self, algorithm: str = "sha256", chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._algorithm = algorithm
        self._chunk_size = chunk_size
        self._strong_available = self._probe(algorithm)
        if not self._strong_available:
            Log.warning(f"Hash algorithm '{algorithm}' unavailable, using fallback fingerprints")

    @property
    def strong_available(self) -> bool:
        return self._strong_available

    def digest(self, candidate: FileCandidate) -> str:
        """Return the fingerprint string for *candidate*."""
        return self.compute(candidate).value

    def compute(self, candidate: FileCandidate) -> DigestResult:
        data = candidate.data
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise DigestError(f"Content of {candidate.name} is not readable as bytes")
        if self._strong_available:
            return DigestResult(
                value=self._hash_bytes(bytes(data)),
                algorithm=self._algorithm,
                is_strong=True,
            )
        return DigestResult(
            value=self._fallback(candidate.name, candidate.size, bytes(data)),
            algorithm="fallback",
            is_strong=False,
        )

    def digest_many(self, candidates: list[FileCandidate]) -> dict[str, DigestResult]:
        """Fingerprint each candidate, keyed by local id."""
        return {candidate.local_id: self.compute(candidate) for candidate in candidates}

    def _hash_bytes(self, data: bytes) -> str:
        hasher = hashlib.new(self._algorithm)
        view = memoryview(data)
        for offset in range(0, len(view), self._chunk_size):
            hasher.update(view[offset : offset + self._chunk_size])
        return hasher.hexdigest()

    @staticmethod
    def _fallback(name: str, size: int, data: bytes) -> str:
        summary = f"{name}-{size}-{zlib.crc32(data):08x}"
        return base64.b64encode(summary.encode("utf-8")).decode("ascii")

    @staticmethod
    def _probe(algorithm: str) -> bool:
        try:
            hashlib.new(algorithm)
        except (ValueError, TypeError):
            return False
        return True
