"""Algorithm-tagged content hash."""

import hashlib
from dataclasses import dataclass

_HEX_LENGTHS = {"md5": 32, "sha256": 64}


@dataclass(frozen=True)
class ContentHash:
    """Hash of document content, tagged by algorithm (``sha256:...`` / ``md5:...``)."""

    algorithm: str
    digest: str

    def __post_init__(self) -> None:
        expected = _HEX_LENGTHS.get(self.algorithm)
        if expected is None:
            raise ValueError(f"Unsupported hash algorithm: {self.algorithm}")
        if len(self.digest) != expected:
            raise ValueError(f"{self.algorithm} digest must be {expected} hex characters")
        try:
            int(self.digest, 16)
        except ValueError as e:
            raise ValueError("Digest must be hexadecimal") from e

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.digest}"

    @classmethod
    def parse(cls, value: str) -> "ContentHash":
        """Parse ``algorithm:digest``."""
        algorithm, sep, digest = value.partition(":")
        if not sep:
            raise ValueError("Content hash must be tagged as algorithm:digest")
        return cls(algorithm=algorithm, digest=digest.lower())

    @classmethod
    def of_text(cls, content: str) -> "ContentHash":
        """SHA-256 of the UTF-8 encoded text."""
        return cls(algorithm="sha256", digest=hashlib.sha256(content.encode("utf-8")).hexdigest())

    @classmethod
    def from_native(cls, md5_checksum: str) -> "ContentHash":
        """Wrap the store's native MD5 checksum."""
        return cls(algorithm="md5", digest=md5_checksum.lower())
